"""aigraph - async graph workflows for chaining LLM processing steps."""

from aigraph.core.graph import (
    END,
    START,
    CompiledGraph,
    ExecutionTrace,
    Graph,
    GraphConfig,
    StepEvent,
)
from aigraph.core.graph.errors import (
    CompilationError,
    DeadEndError,
    DuplicateNodeError,
    ExecutionError,
    ExecutionTimeoutError,
    GraphError,
    NodeFailure,
    NodeNotFoundError,
    RecursionLimitError,
    ReservedNodeNameError,
    UnknownLabelError,
)
from aigraph.core.graph.nodes.llm import ChatState, build_react_graph
from aigraph.core.logging import configure_logging, LogLevel, LogComponent

__all__ = [
    'Graph',
    'CompiledGraph',
    'GraphConfig',
    'ExecutionTrace',
    'StepEvent',
    'START',
    'END',
    'ChatState',
    'build_react_graph',
    'GraphError',
    'CompilationError',
    'DuplicateNodeError',
    'ReservedNodeNameError',
    'ExecutionError',
    'NodeNotFoundError',
    'UnknownLabelError',
    'DeadEndError',
    'NodeFailure',
    'RecursionLimitError',
    'ExecutionTimeoutError',
    'configure_logging',
    'LogLevel',
    'LogComponent',
]
