"""Graph Base Classes

This module defines the mutable graph builder. The builder provides a
lightweight way to:
1. Register named async processing steps (nodes)
2. Connect them with unconditional and conditional edges
3. Validate the definition and compile it into an executable CompiledGraph
4. Render the structure as a Mermaid flowchart

Example:
    ```python
    graph = (
        Graph()
        .add_node("generate", generate)
        .add_node("improve", improve)
        .add_node("polish", polish)
        .add_edge(START, "generate")
        .add_conditional_edges(
            "generate",
            route_on_quality,
            {"improve": "improve", "polish": "polish"},
        )
        .add_edge("improve", "polish")
        .add_edge("polish", END)
    )

    compiled = graph.compile()
    final_state = await compiled.execute(initial_state)
    ```
"""

from collections import deque
from typing import Any, Dict, List, Mapping, Optional, Set
import logging
from pydantic import BaseModel, Field, PrivateAttr

from aigraph.core.logging import LogComponent, get_logger
from aigraph.core.graph.config import GraphConfig
from aigraph.core.graph.constants import END, START
from aigraph.core.graph.compiled import CompiledGraph
from aigraph.core.graph.errors import (
    CompilationError,
    DuplicateNodeError,
    ReservedNodeNameError,
)
from aigraph.core.graph.nodes.base.node import (
    ConditionalEdge,
    Edge,
    Node,
    NodeFunction,
    RoutingFunction,
    is_sentinel,
)
from aigraph.core.graph.viz import render_mermaid

compiler_logger = get_logger(LogComponent.COMPILER)


class Graph(BaseModel):
    """A mutable definition of a workflow graph.

    Builder methods return the graph itself so calls can be chained. Nothing
    is validated until ``validate()`` or ``compile()``.

    Attributes:
        nodes: Node name to Node, in registration order
        edges: Unconditional edges, in insertion order
        conditional_edges: Conditional edge sets, in insertion order
        config: Execution limits and logging used by compiled graphs
    """
    nodes: Dict[str, Node] = Field(default_factory=dict)
    edges: List[Edge] = Field(default_factory=list)
    conditional_edges: List[ConditionalEdge] = Field(default_factory=list)
    config: GraphConfig = Field(default_factory=GraphConfig)
    _logger: logging.Logger = PrivateAttr()

    class Config:
        arbitrary_types_allowed = True

    def __init__(self, **data):
        super().__init__(**data)
        self._logger = get_logger(LogComponent.GRAPH)

    def add_node(
        self,
        name: str,
        func: NodeFunction,
        metadata: Optional[Dict[str, Any]] = None
    ) -> "Graph":
        """Register a processing function under ``name``.

        Args:
            name: Unique node name
            func: Async (or plain) callable mapping a state to a new state
            metadata: Optional free-form data stored on the node

        Raises:
            ReservedNodeNameError: If name is START or END
            DuplicateNodeError: If a node with this name already exists
            ValueError: If name is empty or func is not callable
        """
        if not name or not isinstance(name, str):
            raise ValueError("Node name must be a non-empty string")
        if is_sentinel(name):
            raise ReservedNodeNameError(name)
        if name in self.nodes:
            raise DuplicateNodeError(name)
        if not callable(func):
            raise ValueError(f"Node {name} requires a callable, got {type(func).__name__}")

        self.nodes[name] = Node(id=name, func=func, metadata=metadata or {})
        self._logger.info(f"Added node: {name}")
        return self

    def add_edge(self, source: str, target: str) -> "Graph":
        """Add an unconditional edge ``source --> target``."""
        self.edges.append(Edge(source=source, target=target))
        self._logger.info(f"Added edge: {source} --> {target}")
        return self

    def add_conditional_edges(
        self,
        source: str,
        condition: RoutingFunction,
        mapping: Mapping[str, str]
    ) -> "Graph":
        """Route out of ``source`` using a label chosen at runtime.

        Args:
            source: Node whose output is routed
            condition: Async (or plain) callable returning a label for the state
            mapping: Label to target node name (or END)
        """
        if not callable(condition):
            raise ValueError(f"Conditional edge from {source} requires a callable condition")

        self.conditional_edges.append(
            ConditionalEdge(source=source, condition=condition, mapping=mapping)
        )
        for label, target in dict(mapping).items():
            self._logger.info(f"Added conditional edge: {source} --[{label}]--> {target}")
        return self

    def set_entry_point(self, name: str) -> "Graph":
        """Shorthand for ``add_edge(START, name)``."""
        return self.add_edge(START, name)

    def set_finish_point(self, name: str) -> "Graph":
        """Shorthand for ``add_edge(name, END)``."""
        return self.add_edge(name, END)

    def chain(self, *names: str) -> "Graph":
        """Connect a sequence of node names (or sentinels) in order."""
        for source, target in zip(names, names[1:]):
            self.add_edge(source, target)
        return self

    def validate(self) -> List[str]:
        """Validate the graph definition.

        Returns:
            List of validation error messages (empty if valid)
        """
        errors: List[str] = []

        if not self.nodes:
            errors.append("Graph has no nodes")

        for edge in self.edges:
            errors.extend(self._check_source(edge.source, "Edge"))
            errors.extend(self._check_target(edge.source, edge.target))

        for conditional in self.conditional_edges:
            if conditional.source == START:
                errors.append("Conditional edges cannot originate at START")
            else:
                errors.extend(self._check_source(conditional.source, "Conditional edge"))
            if not conditional.mapping:
                errors.append(f"Conditional edge from {conditional.source} has an empty mapping")
            for target in conditional.targets:
                errors.extend(self._check_target(conditional.source, target))

        start_edges = [edge for edge in self.edges if edge.source == START]
        if not start_edges:
            errors.append("START has no outgoing edge")
        elif len(start_edges) > 1:
            targets = ", ".join(edge.target for edge in start_edges)
            errors.append(f"START has multiple outgoing edges: {targets}")

        errors.extend(self._check_fan_out())

        if start_edges:
            reachable = self._reachable_from(START)
            for name in self.nodes:
                if name not in reachable:
                    errors.append(f"Node {name} is unreachable from START")
            if END not in reachable:
                errors.append("No path from START reaches END")

        return errors

    def compile(self, config: Optional[GraphConfig] = None) -> CompiledGraph:
        """Validate the definition and freeze it into a CompiledGraph.

        Args:
            config: Overrides the graph's own config for the compiled graph

        Raises:
            CompilationError: If validation reports any problem
        """
        errors = self.validate()
        if errors:
            compiler_logger.error(f"Graph failed to compile with {len(errors)} problem(s)")
            raise CompilationError(errors)

        entry = next(edge.target for edge in self.edges if edge.source == START)
        successors = {
            edge.source: edge for edge in self.edges if edge.source != START
        }
        branches = {
            conditional.source: conditional for conditional in self.conditional_edges
        }

        compiled = CompiledGraph(
            nodes=dict(self.nodes),
            edges=list(self.edges),
            conditional_edges=list(self.conditional_edges),
            entry=entry,
            successors=successors,
            branches=branches,
            acyclic=not self._has_cycle(),
            config=(config or self.config).model_copy(deep=True),
        )
        compiler_logger.info(
            f"Compiled graph with {len(self.nodes)} nodes, entry point: {entry}"
        )
        return compiled

    def draw_mermaid(self) -> str:
        """Render the current definition as a Mermaid flowchart."""
        return render_mermaid(self.nodes, self.edges, self.conditional_edges)

    def _check_source(self, source: str, kind: str) -> List[str]:
        if source == END:
            return [f"{kind} cannot originate at END"]
        if source != START and source not in self.nodes:
            return [f"{kind} references unknown source node: {source}"]
        return []

    def _check_target(self, source: str, target: str) -> List[str]:
        if target == START:
            return [f"Edge from {source} cannot target START"]
        if target != END and target not in self.nodes:
            return [f"Edge from {source} references unknown target node: {target}"]
        return []

    def _check_fan_out(self) -> List[str]:
        """A node may leave through one edge or one conditional set, never more."""
        errors: List[str] = []
        edge_counts: Dict[str, int] = {}
        for edge in self.edges:
            if edge.source != START:
                edge_counts[edge.source] = edge_counts.get(edge.source, 0) + 1
        branch_counts: Dict[str, int] = {}
        for conditional in self.conditional_edges:
            branch_counts[conditional.source] = branch_counts.get(conditional.source, 0) + 1

        for name in list(dict.fromkeys([*edge_counts, *branch_counts])):
            if edge_counts.get(name, 0) > 1:
                errors.append(f"Node {name} has multiple outgoing edges")
            if branch_counts.get(name, 0) > 1:
                errors.append(f"Node {name} has multiple conditional edge sets")
            if edge_counts.get(name) and branch_counts.get(name):
                errors.append(f"Node {name} has both an edge and conditional edges")
        return errors

    def _adjacency(self) -> Dict[str, List[str]]:
        adjacency: Dict[str, List[str]] = {}
        for edge in self.edges:
            adjacency.setdefault(edge.source, []).append(edge.target)
        for conditional in self.conditional_edges:
            adjacency.setdefault(conditional.source, []).extend(conditional.targets)
        return adjacency

    def _has_cycle(self) -> bool:
        """Whether any node can be reached again from itself."""
        adjacency = self._adjacency()
        finished: Set[str] = set()
        for root in self.nodes:
            if root in finished:
                continue
            on_path = {root}
            stack = [(root, iter(adjacency.get(root, [])))]
            while stack:
                current, targets = stack[-1]
                target = next(targets, None)
                if target is None:
                    stack.pop()
                    on_path.discard(current)
                    finished.add(current)
                elif target in on_path:
                    return True
                elif target not in finished and target in self.nodes:
                    on_path.add(target)
                    stack.append((target, iter(adjacency.get(target, []))))
        return False

    def _reachable_from(self, origin: str) -> Set[str]:
        adjacency = self._adjacency()

        seen = {origin}
        queue = deque([origin])
        while queue:
            current = queue.popleft()
            for target in adjacency.get(current, []):
                if target not in seen:
                    seen.add(target)
                    queue.append(target)
        return seen
