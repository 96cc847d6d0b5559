"""Node package initialization.

Exposes node and edge types. Import LLM helpers from
``aigraph.core.graph.nodes.llm`` directly.
"""

from aigraph.core.graph.nodes.base.node import (
    Node,
    Edge,
    ConditionalEdge,
    maybe_await,
)

__all__ = [
    "Node",
    "Edge",
    "ConditionalEdge",
    "maybe_await",
]
