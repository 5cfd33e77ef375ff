"""Mermaid flowchart exporter for require graphs."""

import re
from typing import Dict, List, Set

from graph.model import RequireGraph


def to_mermaid(
    graph: RequireGraph,
    orientation: str = "LR",
    group_by_directory: bool = False,
    include_unresolved: bool = False,
    show_all: bool = False,
) -> str:
    """
    Convert a require graph to Mermaid flowchart syntax.

    Edges point from a module to the module it requires.

    Args:
        graph: The require graph to export.
        orientation: Flowchart orientation (LR, TD, TB, RL, BT).
        group_by_directory: If True, group modules by top-level directory.
        include_unresolved: If True, show usages with no known definition.
        show_all: If True, include modules with no requires.

    Returns:
        Mermaid flowchart string.
    """
    lines = [f"flowchart {orientation}"]

    nodes = graph.nodes if show_all else graph.get_connected_nodes()
    if include_unresolved:
        nodes |= set(graph.unresolved)

    node_ids: Dict[str, str] = {node: _sanitize_id(node) for node in sorted(nodes)}

    unresolved_ids: Dict[str, str] = {}
    if include_unresolved:
        for _, symbol in graph.iter_unresolved():
            unresolved_ids.setdefault(symbol, _sanitize_id(f"unresolved_{symbol}"))

    if group_by_directory:
        lines.extend(_grouped_nodes(nodes, node_ids))
    else:
        for node in sorted(nodes):
            lines.append(f'    {node_ids[node]}["{node}"]')

    if unresolved_ids:
        lines.append("")
        lines.append("    %% Unresolved usages")
        for symbol in sorted(unresolved_ids):
            unresolved_id = unresolved_ids[symbol]
            lines.append(f'    {unresolved_id}["{symbol} [UNRESOLVED]"]')
            lines.append(f"    style {unresolved_id} stroke:#ff0000,stroke-dasharray: 5 5")

    lines.append("")
    for source, target in graph.iter_edges():
        lines.append(f"    {node_ids[source]} --> {node_ids[target]}")

    if include_unresolved:
        for source, symbol in graph.iter_unresolved():
            lines.append(f"    {node_ids[source]} -.-> {unresolved_ids[symbol]}")

    return "\n".join(lines)


def _grouped_nodes(nodes: Set[str], node_ids: Dict[str, str]) -> List[str]:
    """Generate subgraphs of modules grouped by top-level directory."""
    lines: List[str] = []

    groups: Dict[str, Set[str]] = {}
    for node in nodes:
        parts = node.split("/")
        top_dir = parts[0] if len(parts) > 1 else "root"
        groups.setdefault(top_dir, set()).add(node)

    for group_name in sorted(groups):
        lines.append(f"    subgraph {_sanitize_id(group_name)}[{group_name}]")
        for node in sorted(groups[group_name]):
            lines.append(f'        {node_ids[node]}["{node}"]')
        lines.append("    end")

    return lines


def _sanitize_id(value: str) -> str:
    """
    Sanitize a module identifier to be a valid Mermaid ID.

    Mermaid IDs can only contain letters, digits, and underscores.
    """
    sanitized = re.sub(r"[/\\.\-]", "_", value)
    sanitized = re.sub(r"[^a-zA-Z0-9_]", "", sanitized)
    if sanitized and not sanitized[0].isalpha():
        sanitized = "n_" + sanitized
    return sanitized or "unknown"
