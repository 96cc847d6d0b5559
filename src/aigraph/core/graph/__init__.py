"""Graph package initialization.

Exposes the builder, the compiled executor and execution bookkeeping.
LLM helpers live in ``aigraph.core.graph.nodes.llm``.
"""

from aigraph.core.graph.constants import START, END
from aigraph.core.graph.config import GraphConfig
from aigraph.core.graph.base import Graph
from aigraph.core.graph.compiled import CompiledGraph
from aigraph.core.graph.state import ExecutionTrace, NodeStatus, StepEvent
from aigraph.core.graph.nodes.base.node import Node, Edge, ConditionalEdge

__all__ = [
    # Sentinels
    "START",
    "END",

    # Core classes
    "Graph",
    "CompiledGraph",
    "GraphConfig",
    "Node",
    "Edge",
    "ConditionalEdge",

    # Execution records
    "ExecutionTrace",
    "NodeStatus",
    "StepEvent",
]
