"""Execution bookkeeping for the graph system.

The state threaded through a run belongs to the caller and can be any value.
This module holds what the executor records about a run:

1. NodeStatus: lifecycle of a node within one run
2. StepEvent: one completed node, as yielded by ``CompiledGraph.stream``
3. NodeRun: status, timing and error of a single node invocation
4. ExecutionTrace: ordered record of a whole run
"""

from typing import Any, Dict, List, Optional
from datetime import datetime
from enum import Enum
from pydantic import BaseModel, Field


class NodeStatus(str, Enum):
    """Node execution status."""
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    ERROR = "error"


class StepEvent(BaseModel):
    """A node finished and the executor chose where to go next.

    Attributes:
        step: 1-based index of the node invocation within the run
        node: Name of the node that ran
        next_node: Resolved successor (a node name or END)
        label: Routing label when the successor came from a conditional edge
        state: State returned by the node
    """
    step: int
    node: str
    next_node: str
    label: Optional[Any] = None
    state: Any = None

    class Config:
        arbitrary_types_allowed = True


class NodeRun(BaseModel):
    """One invocation of a node."""
    node: str
    status: NodeStatus = Field(default=NodeStatus.PENDING)
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    error: Optional[str] = None

    @property
    def duration(self) -> Optional[float]:
        if self.started_at is None or self.completed_at is None:
            return None
        return (self.completed_at - self.started_at).total_seconds()


class ExecutionTrace(BaseModel):
    """
    Ordered record of a run.

    Pass an instance to ``execute``/``execute_with_start`` and inspect it
    afterwards, even when the run failed.

    Attributes:
        runs: Node invocations in execution order
        status: Latest status per node name
        errors: Error message per node name
        created_at: Time of trace creation
        finished_at: Time the run ended, successfully or not
    """
    runs: List[NodeRun] = Field(default_factory=list)
    status: Dict[str, NodeStatus] = Field(default_factory=dict)
    errors: Dict[str, str] = Field(default_factory=dict)
    created_at: datetime = Field(default_factory=datetime.now)
    finished_at: Optional[datetime] = None

    @property
    def path(self) -> List[str]:
        """Node names in the order they ran."""
        return [run.node for run in self.runs]

    @property
    def succeeded(self) -> bool:
        return self.finished_at is not None and not self.errors

    def start(self, node: str) -> NodeRun:
        run = NodeRun(node=node, status=NodeStatus.RUNNING, started_at=datetime.now())
        self.runs.append(run)
        self.status[node] = NodeStatus.RUNNING
        return run

    def complete(self, run: NodeRun) -> None:
        run.status = NodeStatus.COMPLETED
        run.completed_at = datetime.now()
        self.status[run.node] = NodeStatus.COMPLETED

    def fail(self, run: NodeRun, error: str) -> None:
        run.status = NodeStatus.ERROR
        run.completed_at = datetime.now()
        run.error = error
        self.status[run.node] = NodeStatus.ERROR
        self.errors[run.node] = error

    def finish(self) -> None:
        self.finished_at = datetime.now()
