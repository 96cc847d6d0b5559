"""
LLM Node Helpers

Node and routing functions for driving a chat model from a graph. Model
access goes through Mirascope: pass any async call that takes the message
history and returns a Mirascope call response, e.g.

    ```python
    from mirascope.core import openai

    @openai.call("gpt-4o-mini", tools=[WebSearch])
    async def agent_call(messages: list) -> openai.OpenAIDynamicConfig:
        return {"messages": messages}

    graph = build_react_graph(agent_call)
    result = await graph.compile().execute(ChatState.from_query("Who is older?"))
    print(result.final_answer)
    ```

Supports:
- Message history kept on a ChatState
- Retrying flaky model calls (tenacity)
- Sync and async tools
- A ReAct loop: agent -> tools -> agent ... -> END
"""

import inspect
from typing import Any, Awaitable, Callable, List, Optional

from mirascope.core import BaseMessageParam
from pydantic import BaseModel, Field
from tenacity import AsyncRetrying, stop_after_attempt, wait_exponential
from tenacity.wait import wait_base

from aigraph.core.logging import LogComponent, get_logger
from aigraph.core.graph.base import Graph
from aigraph.core.graph.config import GraphConfig
from aigraph.core.graph.constants import END, START
from aigraph.core.graph.nodes.base.node import maybe_await

logger = get_logger(LogComponent.AGENT)

LLMCall = Callable[[List[Any]], Awaitable[Any]]

AGENT_NODE = "agent"
TOOLS_NODE = "tools"
TOOLS_LABEL = "tools"
END_LABEL = "end"


class ChatState(BaseModel):
    """
    State for chat-model workflows.

    Attributes:
        messages: Conversation history (BaseMessageParam or provider message params)
        pending_tools: Tools requested by the last model response, not yet run
        last_response: Last Mirascope call response
        iteration: Number of model calls made so far
        max_iterations: Model calls allowed before the run fails
        final_answer: Content of the last response that requested no tools
    """
    messages: List[Any] = Field(default_factory=list)
    pending_tools: List[Any] = Field(default_factory=list)
    last_response: Optional[Any] = None
    iteration: int = 0
    max_iterations: int = Field(default=10, ge=1)
    final_answer: Optional[str] = None

    class Config:
        arbitrary_types_allowed = True

    @classmethod
    def from_query(
        cls,
        query: str,
        system_prompt: Optional[str] = None,
        max_iterations: int = 10
    ) -> "ChatState":
        messages = []
        if system_prompt:
            messages.append(BaseMessageParam(role="system", content=system_prompt))
        messages.append(BaseMessageParam(role="user", content=query))
        return cls(messages=messages, max_iterations=max_iterations)


def llm_node(
    call: LLMCall,
    retry_attempts: int = 3,
    retry_wait: Optional[wait_base] = None
) -> Callable[[ChatState], Awaitable[ChatState]]:
    """Build a node function that sends the history to a model.

    Args:
        call: Async Mirascope call taking the message list
        retry_attempts: Attempts per model call before the error propagates
        retry_wait: Tenacity wait strategy between attempts

    Returns:
        Node function returning a copy of the state with the model's reply
        appended to ``messages``
    """
    wait = retry_wait if retry_wait is not None else wait_exponential(multiplier=1, min=4, max=10)

    async def call_model(state: ChatState) -> ChatState:
        iteration = state.iteration + 1
        if iteration > state.max_iterations:
            raise ValueError(
                f"Maximum iterations ({state.max_iterations}) reached without finding answer"
            )

        response = None
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(retry_attempts),
            wait=wait,
            reraise=True,
        ):
            with attempt:
                response = await maybe_await(call(list(state.messages)))

        pending_tools = list(response.tools or [])
        updates = {
            "messages": [*state.messages, response.message_param],
            "last_response": response,
            "pending_tools": pending_tools,
            "iteration": iteration,
        }

        if pending_tools:
            names = ", ".join(tool._name() for tool in pending_tools)
            logger.agent(f"Iteration {iteration}: requested tools {names}")
        else:
            updates["final_answer"] = response.content
            logger.agent(f"Iteration {iteration}: {response.content}")
        return state.model_copy(update=updates)

    return call_model


async def tool_node(state: ChatState) -> ChatState:
    """Run every pending tool and return a copy with the results appended."""
    if not state.pending_tools:
        return state

    tools_and_outputs = []
    for tool in state.pending_tools:
        logger.tool(f"[Calling Tool '{tool._name()}' with args {tool.args}]")

        if inspect.iscoroutinefunction(tool.call):
            result = await tool.call()
        else:
            result = tool.call()

        logger.tool(f"Tool result: {result}")
        tools_and_outputs.append((tool, result))

    tool_messages = state.last_response.tool_message_params(tools_and_outputs)
    return state.model_copy(update={
        "messages": [*state.messages, *tool_messages],
        "pending_tools": [],
    })


def tools_condition(state: ChatState) -> str:
    """Route to the tools node while the model keeps requesting tools."""
    return TOOLS_LABEL if state.pending_tools else END_LABEL


def build_react_graph(
    call: LLMCall,
    retry_attempts: int = 3,
    retry_wait: Optional[wait_base] = None,
    config: Optional[GraphConfig] = None
) -> Graph:
    """Wire a ReAct loop: the model runs until it answers without tools.

    The loop is a cycle, bounded by ``ChatState.max_iterations`` and by
    ``config.max_steps``.
    """
    graph = Graph(config=config) if config is not None else Graph()
    return (
        graph
        .add_node(AGENT_NODE, llm_node(call, retry_attempts, retry_wait))
        .add_node(TOOLS_NODE, tool_node)
        .add_edge(START, AGENT_NODE)
        .add_conditional_edges(
            AGENT_NODE,
            tools_condition,
            {TOOLS_LABEL: TOOLS_NODE, END_LABEL: END},
        )
        .add_edge(TOOLS_NODE, AGENT_NODE)
    )
