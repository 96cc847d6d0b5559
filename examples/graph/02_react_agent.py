"""
ReAct Agent Example: a model/tool loop built on the graph.

Requires ``pip install "mirascope[openai]"`` and OPENAI_API_KEY.

This example demonstrates:
1. A Mirascope call driving an agent node
2. A tool node running the tools the model asks for
3. A cyclic graph bounded by max_iterations and max_steps
"""

import asyncio

from mirascope.core import BaseTool, openai
from pydantic import Field

from aigraph.core.graph import GraphConfig
from aigraph.core.graph.nodes.llm import ChatState, build_react_graph
from aigraph.core.logging import LogComponent, LogLevel, configure_logging

SYSTEM_PROMPT = """You are a ReAct (Reasoning and Acting) agent. When you need
information to answer a question, use the available tools to gather it.

Think step by step:
1. Analyze what information you need
2. Use tools to gather the required information
3. Continue until you have enough information to provide a complete answer
4. Provide a comprehensive final answer"""


class WebSearch(BaseTool):
    """Search the web for information about people, events, or facts."""

    query: str = Field(..., description="Search query to find information about people, events, or facts.")

    def call(self) -> str:
        # Simulated search results
        query = self.query.lower()
        if "ronaldo" in query:
            return "Cristiano Ronaldo was born on February 5, 1985, in Funchal, Madeira, Portugal."
        if "messi" in query:
            return "Lionel Messi was born on June 24, 1987, in Rosario, Argentina."
        return f"Search simulation: No specific information found for query '{self.query}'"


@openai.call("gpt-4o-mini", tools=[WebSearch], call_params={"temperature": 0.0})
async def agent_call(messages: list) -> openai.OpenAIDynamicConfig:
    return {"messages": messages}


async def main():
    configure_logging(
        default_level=LogLevel.WARNING,
        component_levels={LogComponent.AGENT: LogLevel.AGENT},
    )

    graph = build_react_graph(agent_call, config=GraphConfig(max_steps=12))
    print(graph.draw_mermaid())

    state = ChatState.from_query(
        "Who is older, Cristiano Ronaldo or Lionel Messi?",
        system_prompt=SYSTEM_PROMPT,
        max_iterations=5,
    )
    result = await graph.compile().execute(state, timeout=120)
    print(f"\nFinal answer: {result.final_answer}")


if __name__ == "__main__":
    asyncio.run(main())
