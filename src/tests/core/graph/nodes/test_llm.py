"""Tests for the LLM node helpers.

Model calls are replaced with scripted fakes shaped like Mirascope call
responses (``message_param``, ``tools``, ``content``, ``tool_message_params``).
"""

from typing import Any, List, Optional

import pytest
from mirascope.core import BaseMessageParam
from tenacity import wait_none

from aigraph.core.graph import END, START, GraphConfig
from aigraph.core.graph.errors import NodeFailure, RecursionLimitError
from aigraph.core.graph.nodes.llm import (
    ChatState,
    build_react_graph,
    llm_node,
    tool_node,
    tools_condition,
)


class FakeTool:
    """Stand-in for a Mirascope BaseTool."""

    def __init__(self, name: str, output: str, is_async: bool = False):
        self.name = name
        self.output = output
        self.args = {"query": name}
        self.called = False
        if is_async:
            self.call = self._acall

    def _name(self) -> str:
        return self.name

    def call(self) -> str:
        self.called = True
        return self.output

    async def _acall(self) -> str:
        self.called = True
        return self.output


class FakeResponse:
    """Stand-in for a Mirascope call response."""

    def __init__(self, content: str, tools: Optional[List[FakeTool]] = None):
        self.content = content
        self.tools = tools
        self.message_param = BaseMessageParam(role="assistant", content=content)

    def tool_message_params(self, tools_and_outputs):
        return [
            BaseMessageParam(role="tool", content=f"{tool._name()}: {output}")
            for tool, output in tools_and_outputs
        ]


class ScriptedCall:
    """Async model call returning queued responses or raising queued errors."""

    def __init__(self, *outcomes: Any):
        self.outcomes = list(outcomes)
        self.received: List[List[Any]] = []

    async def __call__(self, messages: List[Any]) -> FakeResponse:
        self.received.append(messages)
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


@pytest.fixture
def chat_state() -> ChatState:
    """Fixture providing a state with one user question."""
    return ChatState.from_query("Who is older, Ronaldo or Messi?", max_iterations=5)


class TestChatState:
    """Test suite for ChatState."""

    def test_from_query(self):
        state = ChatState.from_query("hi", system_prompt="be brief")
        assert [message.role for message in state.messages] == ["system", "user"]
        assert state.messages[1].content == "hi"
        assert state.iteration == 0
        assert state.final_answer is None

    def test_from_query_without_system(self, chat_state: ChatState):
        assert len(chat_state.messages) == 1
        assert chat_state.max_iterations == 5


class TestLLMNode:
    """Test suite for llm_node."""

    async def test_final_answer(self, chat_state: ChatState):
        call = ScriptedCall(FakeResponse("Ronaldo"))
        state = await llm_node(call, retry_attempts=1)(chat_state)

        assert state.final_answer == "Ronaldo"
        assert state.iteration == 1
        assert state.pending_tools == []
        assert state.messages[-1].content == "Ronaldo"
        assert len(call.received[0]) == 1

    async def test_tool_request(self, chat_state: ChatState):
        tool = FakeTool("web_search", "born 1985")
        call = ScriptedCall(FakeResponse("", tools=[tool]))
        state = await llm_node(call, retry_attempts=1)(chat_state)

        assert state.pending_tools == [tool]
        assert state.final_answer is None

    async def test_retries_flaky_call(self, chat_state: ChatState):
        call = ScriptedCall(ConnectionError("down"), ConnectionError("down"), FakeResponse("ok"))
        state = await llm_node(call, retry_attempts=3, retry_wait=wait_none())(chat_state)

        assert state.final_answer == "ok"
        assert len(call.received) == 3
        assert state.iteration == 1

    async def test_retries_exhausted(self, chat_state: ChatState):
        call = ScriptedCall(ConnectionError("down"), ConnectionError("still down"))
        with pytest.raises(ConnectionError, match="still down"):
            await llm_node(call, retry_attempts=2, retry_wait=wait_none())(chat_state)

    async def test_max_iterations(self, chat_state: ChatState):
        chat_state.iteration = chat_state.max_iterations
        call = ScriptedCall(FakeResponse("never"))
        with pytest.raises(ValueError, match="Maximum iterations"):
            await llm_node(call, retry_attempts=1)(chat_state)
        assert call.received == []


class TestToolNode:
    """Test suite for tool_node and tools_condition."""

    async def test_runs_sync_and_async_tools(self, chat_state: ChatState):
        sync_tool = FakeTool("web_search", "born 1985")
        async_tool = FakeTool("lookup", "born 1987", is_async=True)
        chat_state.pending_tools = [sync_tool, async_tool]
        chat_state.last_response = FakeResponse("", tools=[sync_tool, async_tool])

        state = await tool_node(chat_state)

        assert sync_tool.called and async_tool.called
        assert state.pending_tools == []
        assert [message.content for message in state.messages[-2:]] == [
            "web_search: born 1985",
            "lookup: born 1987",
        ]

    async def test_no_pending_tools(self, chat_state: ChatState):
        state = await tool_node(chat_state)
        assert len(state.messages) == 1

    def test_tools_condition(self, chat_state: ChatState):
        assert tools_condition(chat_state) == "end"
        chat_state.pending_tools = [FakeTool("web_search", "x")]
        assert tools_condition(chat_state) == "tools"


class TestReactGraph:
    """Test suite for the ReAct loop."""

    async def test_loop_until_answer(self, chat_state: ChatState):
        tool = FakeTool("web_search", "Ronaldo 1985, Messi 1987")
        call = ScriptedCall(
            FakeResponse("", tools=[tool]),
            FakeResponse("Cristiano Ronaldo is older."),
        )
        compiled = build_react_graph(call, retry_attempts=1).compile()
        result = await compiled.execute(chat_state)

        assert result.final_answer == "Cristiano Ronaldo is older."
        assert result.iteration == 2
        assert tool.called
        assert [message.role for message in result.messages] == [
            "user", "assistant", "tool", "assistant"
        ]

    async def test_repeated_runs_leave_input_untouched(self, chat_state: ChatState):
        """Test two runs on one ChatState give the same result."""
        call = ScriptedCall(FakeResponse("Ronaldo"), FakeResponse("Ronaldo"))
        compiled = build_react_graph(call, retry_attempts=1).compile()

        first = await compiled.execute(chat_state)
        second = await compiled.execute(chat_state)

        assert len(chat_state.messages) == 1
        assert chat_state.iteration == 0
        assert chat_state.final_answer is None
        assert [m.content for m in first.messages] == [m.content for m in second.messages]
        assert first.iteration == second.iteration == 1
        assert len(call.received[1]) == 1

    async def test_tool_node_leaves_input_untouched(self, chat_state: ChatState):
        tool = FakeTool("web_search", "born 1985")
        chat_state.pending_tools = [tool]
        chat_state.last_response = FakeResponse("", tools=[tool])

        state = await tool_node(chat_state)

        assert chat_state.pending_tools == [tool]
        assert len(chat_state.messages) == 1
        assert len(state.messages) == 2

    async def test_failed_run_leaves_input_untouched(self, chat_state: ChatState):
        call = ScriptedCall(FakeResponse("", tools=[FakeTool("t", "x")]), ConnectionError("down"))
        compiled = build_react_graph(call, retry_attempts=1).compile()

        with pytest.raises(NodeFailure):
            await compiled.execute(chat_state)
        assert len(chat_state.messages) == 1
        assert chat_state.iteration == 0
        assert chat_state.pending_tools == []

    def test_graph_structure(self):
        graph = build_react_graph(ScriptedCall())
        assert graph.validate() == []
        mermaid = graph.draw_mermaid()
        assert f"    {START} --> agent\n" in mermaid
        assert "    tools --> agent\n" in mermaid
        assert "    agent -->|tools| tools\n" in mermaid
        assert f"    agent -->|end| {END}\n" in mermaid

    async def test_max_iterations_fails_run(self):
        state = ChatState.from_query("loop", max_iterations=2)
        call = ScriptedCall(*[FakeResponse("", tools=[FakeTool("t", "x")]) for _ in range(3)])
        compiled = build_react_graph(call, retry_attempts=1).compile()

        with pytest.raises(NodeFailure) as exc_info:
            await compiled.execute(state)
        assert exc_info.value.node == "agent"
        assert isinstance(exc_info.value.original, ValueError)

    async def test_max_steps_bounds_loop(self):
        state = ChatState.from_query("loop", max_iterations=100)
        call = ScriptedCall(*[FakeResponse("", tools=[FakeTool("t", "x")]) for _ in range(10)])
        compiled = build_react_graph(
            call, retry_attempts=1, config=GraphConfig(max_steps=3)
        ).compile()

        with pytest.raises(RecursionLimitError):
            await compiled.execute(state)
