"""Graph visualization tools.

Renders graphs as Mermaid flowcharts. Output depends only on insertion order,
so the same graph always renders to the same text.
"""

from typing import Iterable, List, Mapping

from aigraph.core.graph.constants import END, START
from aigraph.core.graph.nodes.base.node import ConditionalEdge, Edge, Node
from aigraph.core.graph.state import ExecutionTrace

INDENT = "    "
START_END_STYLE = "classDef startEnd fill:#e1f5fe,stroke:#01579b,stroke-width:2px"
VISITED_STYLE = "classDef visited fill:#e8f5e9,stroke:#2e7d32,stroke-width:2px"
FAILED_STYLE = "classDef failed fill:#ffebee,stroke:#c62828,stroke-width:2px"


def render_mermaid(
    nodes: Mapping[str, Node],
    edges: Iterable[Edge],
    conditional_edges: Iterable[ConditionalEdge],
) -> str:
    """Render nodes and edges as a ``flowchart TD`` description."""
    lines = _structure_lines(nodes, edges, conditional_edges)
    lines.append(START_END_STYLE)
    lines.append(f"class {START},{END} startEnd")
    return _join(lines)


def render_execution(
    nodes: Mapping[str, Node],
    edges: Iterable[Edge],
    conditional_edges: Iterable[ConditionalEdge],
    trace: ExecutionTrace,
) -> str:
    """Render the flowchart with the nodes of a traced run highlighted.

    Nodes that completed get the ``visited`` class, nodes that raised get
    ``failed``.
    """
    lines = _structure_lines(nodes, edges, conditional_edges)
    lines.append(START_END_STYLE)
    lines.append(VISITED_STYLE)
    lines.append(FAILED_STYLE)
    lines.append(f"class {START},{END} startEnd")

    visited = [name for name in trace.status if name not in trace.errors]
    if visited:
        lines.append(f"class {','.join(visited)} visited")
    if trace.errors:
        lines.append(f"class {','.join(trace.errors)} failed")
    return _join(lines)


def _structure_lines(
    nodes: Mapping[str, Node],
    edges: Iterable[Edge],
    conditional_edges: Iterable[ConditionalEdge],
) -> List[str]:
    lines = [
        f"{START}([START])",
        f"{END}([END])",
    ]
    for name in nodes:
        lines.append(f"{name}[{name}]")
    for edge in edges:
        lines.append(f"{edge.source} --> {edge.target}")
    for conditional in conditional_edges:
        for label, target in conditional.mapping.items():
            lines.append(f"{conditional.source} -->|{label}| {target}")
    return lines


def _join(lines: List[str]) -> str:
    return "flowchart TD\n" + "".join(f"{INDENT}{line}\n" for line in lines)
