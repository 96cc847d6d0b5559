"""
Content Workflow Example: conditional routing on a quality score.

This example demonstrates:
1. Registering async nodes and a routing function
2. Conditional edges with a label mapping
3. Starting a run from the middle of the graph
4. Printing the Mermaid diagram
"""

import asyncio
from pydantic import BaseModel

from aigraph.core.graph import END, START, Graph
from aigraph.core.logging import (
    Colors,
    LogComponent,
    LogLevel,
    configure_logging,
    get_logger,
)

logger = get_logger(LogComponent.GRAPH)


class State(BaseModel):
    message: str
    count: int = 0
    quality_score: int = 0


async def generate_content(state: State) -> State:
    state = state.model_copy(update={
        "message": f"Generated content: {state.message}",
        "quality_score": 6,
    })
    print(f"Generate: {state.message}")
    return state


async def improve_content(state: State) -> State:
    if state.count >= 5:
        raise RuntimeError("Too many improvement attempts")
    state = state.model_copy(update={
        "message": f"Improved: {state.message}",
        "quality_score": state.quality_score + 3,
        "count": state.count + 1,
    })
    print(f"Improve: {state.message} (quality: {state.quality_score})")
    return state


async def polish_content(state: State) -> State:
    state = state.model_copy(update={
        "message": f"Polished: {state.message}",
        "quality_score": 10,
    })
    print(f"Polish: {state.message} (final quality: {state.quality_score})")
    return state


async def check_quality(state: State) -> str:
    await asyncio.sleep(0.01)
    return "improve" if state.quality_score < 8 else "polish"


async def main():
    configure_logging(default_level=LogLevel.WARNING)

    compiled = (
        Graph()
        .add_node("generate_content", generate_content)
        .add_node("improve_content", improve_content)
        .add_node("polish_content", polish_content)
        .add_edge(START, "generate_content")
        .add_conditional_edges(
            "generate_content",
            check_quality,
            {"improve": "improve_content", "polish": "polish_content"},
        )
        .add_edge("improve_content", "polish_content")
        .add_edge("polish_content", END)
        .compile()
    )

    print(f"\n{Colors.BOLD}Graph:{Colors.RESET}")
    print(compiled.draw_mermaid())

    initial = State(message="Hello World")

    result = await compiled.execute(initial)
    print(f"\n{Colors.SUCCESS}Sequential final result:{Colors.RESET} {result}")

    result = await compiled.execute_with_start("polish_content", initial)
    print(f"\n{Colors.SUCCESS}Polish only:{Colors.RESET} {result}")


if __name__ == "__main__":
    asyncio.run(main())
