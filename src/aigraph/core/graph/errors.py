"""Exceptions raised while building, compiling and executing graphs."""

from typing import Dict, List, Optional


class GraphError(Exception):
    """Base class for every graph error."""


class DuplicateNodeError(GraphError):
    """A node name was registered twice."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Node already exists: {name}")


class ReservedNodeNameError(GraphError):
    """START or END was used as a node name."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Node name is reserved: {name}")


class CompilationError(GraphError):
    """The graph definition failed validation.

    Attributes:
        problems: Every validation message, in discovery order
    """

    def __init__(self, problems: List[str]):
        self.problems = list(problems)
        details = "\n".join(f"  - {problem}" for problem in self.problems)
        super().__init__(f"Graph failed to compile:\n{details}")


class ExecutionError(GraphError):
    """Base class for failures during a run."""


class NodeNotFoundError(ExecutionError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Node not found: {name}")


class UnknownLabelError(ExecutionError):
    """A routing function returned a label missing from its mapping."""

    def __init__(self, node: str, label: str, mapping: Dict[str, str]):
        self.node = node
        self.label = label
        self.mapping = dict(mapping)
        super().__init__(
            f"Routing function for '{node}' returned unknown label {label!r}; "
            f"expected one of {sorted(self.mapping)}"
        )


class DeadEndError(ExecutionError):
    """A node other than END has nowhere to go."""

    def __init__(self, node: str):
        self.node = node
        super().__init__(f"Node '{node}' has no outgoing edge")


class NodeFailure(ExecutionError):
    """A node or routing function raised.

    Attributes:
        node: Name of the failing node
        original: The exception raised by user code
    """

    def __init__(self, node: str, original: BaseException, routing: bool = False):
        self.node = node
        self.original = original
        self.routing = routing
        where = "routing function of" if routing else "node"
        super().__init__(f"Error in {where} '{node}': {original}")


class RecursionLimitError(ExecutionError):
    def __init__(self, max_steps: int, node: Optional[str] = None):
        self.max_steps = max_steps
        self.node = node
        super().__init__(
            f"Maximum of {max_steps} steps exceeded"
            + (f" before running '{node}'" if node else "")
        )


class ExecutionTimeoutError(ExecutionError):
    def __init__(self, timeout: float):
        self.timeout = timeout
        super().__init__(f"Graph execution timed out after {timeout}s")
