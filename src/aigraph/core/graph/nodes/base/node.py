"""Node and edge models for the graph system.

A Node pairs a unique name with an async transformation ``state -> state``.
Edges connect nodes: an Edge is an unconditional hop, a ConditionalEdge asks a
routing function for a label and resolves it through a fixed mapping.

All three are frozen Pydantic models. A compiled graph holds references to the
same instances as the builder it came from, so copying a graph never copies
the user functions.

Typical Usage:
    - Wrap an async function with ``Node(id="summarize", func=summarize)``
      (``Graph.add_node`` does this for you)
    - Await ``node.invoke(state)`` to run it
"""

import inspect
from typing import Any, Awaitable, Callable, Dict, Optional, Union

from pydantic import BaseModel, Field, field_validator, model_validator

from aigraph.core.graph.constants import SENTINELS
from aigraph.core.logging import LogComponent, get_logger

logger = get_logger(LogComponent.NODES)

NodeFunction = Callable[[Any], Union[Awaitable[Any], Any]]
RoutingFunction = Callable[[Any], Union[Awaitable[str], str]]


async def maybe_await(value: Any) -> Any:
    """Await ``value`` if it is awaitable, otherwise return it unchanged."""
    if inspect.isawaitable(value):
        return await value
    return value


class Node(BaseModel):
    """
    A named unit of processing.

    Attributes:
        id: Unique node name within a graph
        func: Async (or plain) callable mapping a state to the next state
        metadata: Free-form data kept alongside the node
    """
    id: str = Field(..., description="Unique identifier for this node")
    func: NodeFunction = Field(..., description="Transformation applied to the state")
    metadata: Dict[str, Any] = Field(default_factory=dict)

    class Config:
        arbitrary_types_allowed = True
        frozen = True

    @model_validator(mode='after')
    def validate_node(self) -> 'Node':
        """Validate node configuration."""
        if not self.id:
            raise ValueError("Node must have an ID")
        return self

    async def invoke(self, state: Any) -> Any:
        """Run the node function on ``state`` and return the new state."""
        logger.debug(f"Invoking node {self.id}")
        return await maybe_await(self.func(state))

    def get_metadata(self, key: str, default: Any = None) -> Any:
        return self.metadata.get(key, default)


class Edge(BaseModel):
    """Unconditional transition ``source --> target``."""
    source: str
    target: str

    class Config:
        frozen = True


class ConditionalEdge(BaseModel):
    """
    Runtime branch out of ``source``.

    Attributes:
        source: Node whose result is being routed
        condition: Async (or plain) callable returning a routing label
        mapping: Label to target node (or END)
    """
    source: str
    condition: RoutingFunction
    mapping: Dict[str, str] = Field(default_factory=dict)

    class Config:
        arbitrary_types_allowed = True
        frozen = True

    @field_validator("mapping", mode="before")
    @classmethod
    def copy_mapping(cls, value: Any) -> Dict[str, str]:
        # Snapshot so later changes to the caller's dict never leak in
        return dict(value) if value is not None else {}

    async def route(self, state: Any) -> str:
        """Ask the routing function for a label."""
        return await maybe_await(self.condition(state))

    def resolve(self, label: str) -> Optional[str]:
        """Map a label to its target, or None when the label is unknown."""
        return self.mapping.get(label)

    @property
    def targets(self):
        """Distinct targets in mapping order."""
        seen = []
        for target in self.mapping.values():
            if target not in seen:
                seen.append(target)
        return seen


def is_sentinel(name: str) -> bool:
    return name in SENTINELS
