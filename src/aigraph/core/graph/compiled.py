"""Compiled, executable graphs.

A CompiledGraph is produced by ``Graph.compile()``. It is frozen and holds no
per-run state, so one instance can serve any number of sequential or
concurrent executions. Each run walks a single active path:

    node runs -> state replaced -> successor chosen -> ... -> END

Errors raised by user functions stop the run at once and surface as
NodeFailure. Nothing is retried or rolled back.
"""

import asyncio
from typing import Any, AsyncIterator, Dict, List, Optional, Tuple

from pydantic import BaseModel, Field

from aigraph.core.logging import LogComponent, get_logger, log_state, log_verbose
from aigraph.core.graph.config import GraphConfig
from aigraph.core.graph.constants import END, START
from aigraph.core.graph.errors import (
    DeadEndError,
    ExecutionTimeoutError,
    NodeFailure,
    NodeNotFoundError,
    RecursionLimitError,
    UnknownLabelError,
)
from aigraph.core.graph.nodes.base.node import ConditionalEdge, Edge, Node
from aigraph.core.graph.state import ExecutionTrace, NodeRun, StepEvent
from aigraph.core.graph.viz import render_execution, render_mermaid

logger = get_logger(LogComponent.EXECUTOR)


class CompiledGraph(BaseModel):
    """A validated, read-only graph ready for execution.

    Attributes:
        nodes: Node name to Node, in registration order
        edges: Unconditional edges, in insertion order
        conditional_edges: Conditional edge sets, in insertion order
        entry: First node after START
        successors: Unconditional edge keyed by source node
        branches: Conditional edge set keyed by source node
        acyclic: No node can run twice, so config.max_steps is not enforced
        config: Execution limits and logging
    """
    nodes: Dict[str, Node]
    edges: List[Edge]
    conditional_edges: List[ConditionalEdge]
    entry: str
    successors: Dict[str, Edge] = Field(default_factory=dict)
    branches: Dict[str, ConditionalEdge] = Field(default_factory=dict)
    acyclic: bool = False
    config: GraphConfig = Field(default_factory=GraphConfig)

    class Config:
        arbitrary_types_allowed = True
        frozen = True

    @property
    def node_names(self) -> List[str]:
        return list(self.nodes)

    def next_nodes(self, name: str) -> List[str]:
        """Possible successors of ``name`` (node names or END)."""
        if name == START:
            return [self.entry]
        if name in self.branches:
            return self.branches[name].targets
        if name in self.successors:
            return [self.successors[name].target]
        return []

    async def execute(
        self,
        state: Any,
        *,
        timeout: Optional[float] = None,
        trace: Optional[ExecutionTrace] = None
    ) -> Any:
        """Run the graph from START and return the final state.

        Args:
            state: Initial state, handed to the first node
            timeout: Seconds before the run is cancelled (defaults to config.timeout)
            trace: Optional trace filled in as the run progresses

        Raises:
            NodeFailure: A node or routing function raised
            UnknownLabelError: A routing label is missing from its mapping
            DeadEndError: A node other than END has no way out
            RecursionLimitError: More than config.max_steps nodes ran
            ExecutionTimeoutError: The run exceeded its timeout
        """
        return await self._run(state, None, timeout, trace)

    async def execute_with_start(
        self,
        node_name: str,
        state: Any,
        *,
        timeout: Optional[float] = None,
        trace: Optional[ExecutionTrace] = None
    ) -> Any:
        """Run the graph from ``node_name`` instead of START.

        Raises:
            NodeNotFoundError: If node_name is not a declared node
        """
        if node_name not in self.nodes:
            raise NodeNotFoundError(node_name)
        return await self._run(state, node_name, timeout, trace)

    async def stream(
        self,
        state: Any,
        *,
        start: Optional[str] = None,
        trace: Optional[ExecutionTrace] = None
    ) -> AsyncIterator[StepEvent]:
        """Run the graph, yielding a StepEvent after every node.

        Args:
            state: Initial state
            start: Declared node to begin at instead of START
            trace: Optional trace filled in as the run progresses
        """
        current = self._resolve_start(start)
        max_steps = self.config.max_steps
        step = 0
        logger.info(f"Starting graph execution at node: {current}")

        try:
            while True:
                step += 1
                if step > max_steps and not self.acyclic:
                    logger.error(f"Maximum of {max_steps} steps exceeded, aborting execution")
                    raise RecursionLimitError(max_steps, current)

                run = trace.start(current) if trace is not None else None
                state = await self._invoke(self.nodes[current], state, trace, run)
                next_node, label = await self._next_node(current, state, trace, run)
                if trace is not None:
                    trace.complete(run)

                self._log_transition(current, next_node, label)
                if self.config.logging.show_state:
                    log_state(logger, state)

                yield StepEvent(
                    step=step,
                    node=current,
                    next_node=next_node,
                    label=label,
                    state=state,
                )

                if next_node == END:
                    logger.info(f"Reached END after {step} step(s)")
                    return
                current = next_node
        finally:
            if trace is not None:
                trace.finish()

    def draw_mermaid(self) -> str:
        """Render the graph as a Mermaid flowchart."""
        return render_mermaid(self.nodes, self.edges, self.conditional_edges)

    def draw_execution(self, trace: ExecutionTrace) -> str:
        """Render the graph with the nodes of a traced run highlighted."""
        return render_execution(self.nodes, self.edges, self.conditional_edges, trace)

    async def _run(
        self,
        state: Any,
        start: Optional[str],
        timeout: Optional[float],
        trace: Optional[ExecutionTrace]
    ) -> Any:
        timeout = timeout if timeout is not None else self.config.timeout
        try:
            if timeout is None:
                return await self._drive(state, start, trace)
            return await asyncio.wait_for(self._drive(state, start, trace), timeout)
        except asyncio.TimeoutError as e:
            logger.error(f"Graph execution timed out after {timeout}s")
            raise ExecutionTimeoutError(timeout) from e

    async def _drive(
        self,
        state: Any,
        start: Optional[str],
        trace: Optional[ExecutionTrace]
    ) -> Any:
        async for event in self.stream(state, start=start, trace=trace):
            state = event.state
        return state

    def _resolve_start(self, start: Optional[str]) -> str:
        if start is None or start == START:
            return self.entry
        if start not in self.nodes:
            raise NodeNotFoundError(start)
        return start

    async def _invoke(
        self,
        node: Node,
        state: Any,
        trace: Optional[ExecutionTrace],
        run: Optional[NodeRun]
    ) -> Any:
        try:
            return await node.invoke(state)
        except asyncio.CancelledError:
            if trace is not None:
                trace.fail(run, "cancelled")
            raise
        except Exception as e:
            if trace is not None:
                trace.fail(run, str(e))
            logger.error(f"Error in node {node.id}: {e}")
            raise NodeFailure(node.id, e) from e

    async def _next_node(
        self,
        current: str,
        state: Any,
        trace: Optional[ExecutionTrace],
        run: Optional[NodeRun]
    ) -> Tuple[str, Optional[Any]]:
        """Pick the successor of ``current`` for the state it just produced."""
        branch = self.branches.get(current)
        if branch is not None:
            try:
                label = await branch.route(state)
            except asyncio.CancelledError:
                if trace is not None:
                    trace.fail(run, "cancelled")
                raise
            except Exception as e:
                if trace is not None:
                    trace.fail(run, str(e))
                logger.error(f"Error in routing function of {current}: {e}")
                raise NodeFailure(current, e, routing=True) from e

            try:
                target = branch.resolve(label)
            except TypeError:
                target = None
            if target is None:
                error = UnknownLabelError(current, label, branch.mapping)
                if trace is not None:
                    trace.fail(run, str(error))
                logger.error(str(error))
                raise error
            return target, label

        edge = self.successors.get(current)
        if edge is None:
            error = DeadEndError(current)
            if trace is not None:
                trace.fail(run, str(error))
            logger.error(str(error))
            raise error
        return edge.target, None

    def _log_transition(self, current: str, next_node: str, label: Optional[Any]) -> None:
        arrow = f"--[{label}]-->" if label is not None else "-->"
        message = f"Transitioning {current} {arrow} {next_node}"
        if self.config.logging.show_node_transitions:
            logger.info(message)
        else:
            log_verbose(logger, message)
