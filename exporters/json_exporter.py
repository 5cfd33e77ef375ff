"""JSON exporter for require graphs (machine-friendly format)."""

import json
from typing import Dict, List, Any

from graph.model import RequireGraph


def to_json(
    graph: RequireGraph,
    indent: int = 2,
    include_unresolved: bool = True,
) -> str:
    """
    Convert a require graph to JSON format.

    Args:
        graph: The require graph to export.
        indent: JSON indentation level.
        include_unresolved: If True, include usages with no known definition.

    Returns:
        JSON string with the definitions table, conflicting definitions,
        modules, require edges, failures and rewritten modules.
    """
    definitions: Dict[str, str] = dict(graph.symbols.items())

    edges: List[Dict[str, Any]] = []
    for source, target in graph.iter_edges():
        edges.append({"source": source, "target": target})

    data: Dict[str, Any] = {
        "definitions": definitions,
        "conflicts": graph.symbols.conflicts,
        "modules": sorted(graph.nodes),
        "edges": edges,
    }

    if include_unresolved:
        data["unresolved"] = [
            {"source": source, "symbol": symbol}
            for source, symbol in graph.iter_unresolved()
        ]

    data["failed"] = graph.failed
    data["rewritten"] = sorted(graph.rewritten)

    return json.dumps(data, indent=indent, sort_keys=False)
