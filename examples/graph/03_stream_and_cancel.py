"""
Streaming and Cancellation Example.

This example demonstrates:
1. Watching each step with ``stream``
2. Recording an ExecutionTrace and rendering the visited path
3. Bounding a slow run with a timeout
"""

import asyncio

from aigraph.core.graph import END, START, ExecutionTrace, Graph
from aigraph.core.graph.errors import ExecutionTimeoutError
from aigraph.core.logging import LogLevel, configure_logging


async def fetch(state: dict) -> dict:
    await asyncio.sleep(0.1)
    return {**state, "pages": state.get("pages", 0) + 1}


async def summarize(state: dict) -> dict:
    return {**state, "summary": f"{state['pages']} page(s) read"}


async def stall(state: dict) -> dict:
    await asyncio.sleep(10)
    return state


def more_pages(state: dict) -> str:
    return "more" if state["pages"] < 3 else "done"


async def main():
    configure_logging(default_level=LogLevel.WARNING)

    compiled = (
        Graph()
        .add_node("fetch", fetch)
        .add_node("summarize", summarize)
        .add_edge(START, "fetch")
        .add_conditional_edges("fetch", more_pages, {"more": "fetch", "done": "summarize"})
        .add_edge("summarize", END)
        .compile()
    )

    trace = ExecutionTrace()
    async for event in compiled.stream({}, trace=trace):
        print(f"step {event.step}: {event.node} -> {event.next_node} ({event.state})")
    print(compiled.draw_execution(trace))

    slow = Graph().add_node("stall", stall).chain(START, "stall", END).compile()
    try:
        await slow.execute({}, timeout=0.5)
    except ExecutionTimeoutError as e:
        print(f"Cancelled: {e}")


if __name__ == "__main__":
    asyncio.run(main())
