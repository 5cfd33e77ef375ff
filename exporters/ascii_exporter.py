"""ASCII tree-style exporter for require graphs."""

from typing import Set, List, Tuple

from graph.model import RequireGraph


# Unicode tree characters
UNICODE_BRANCH = "├── "
UNICODE_LAST = "└── "
UNICODE_VERTICAL = "│   "
UNICODE_SPACE = "    "

# ASCII fallback characters
ASCII_BRANCH = "|-- "
ASCII_LAST = "\\-- "
ASCII_VERTICAL = "|   "
ASCII_SPACE = "    "


def to_ascii(
    graph: RequireGraph,
    style: str = "tree",
    include_unresolved: bool = False,
    show_all: bool = False,
) -> str:
    """
    Convert a require graph to an ASCII tree.

    Each tree starts at a module nothing requires; children are the
    modules it requires, in directive order.

    Args:
        graph: The require graph to export.
        style: Output style - "tree" (Unicode) or "ascii" (pure ASCII).
        include_unresolved: If True, list usages with no known definition.
        show_all: If True, include modules with no requires. Default False.

    Returns:
        ASCII tree string.
    """
    if style == "ascii":
        chars = (ASCII_BRANCH, ASCII_LAST, ASCII_VERTICAL, ASCII_SPACE)
    else:
        chars = (UNICODE_BRANCH, UNICODE_LAST, UNICODE_VERTICAL, UNICODE_SPACE)

    if show_all:
        nodes_to_show = graph.nodes
    else:
        nodes_to_show = graph.get_connected_nodes()
        if include_unresolved:
            nodes_to_show |= set(graph.unresolved)

    # Hidden modules have no requires, so graph roots are the shown roots
    root_nodes = sorted(graph.get_roots() & nodes_to_show)

    # Pure cycles have no root; start from every module with requires
    if not root_nodes:
        root_nodes = sorted(node for node in nodes_to_show if graph.get_targets(node))

    lines: List[str] = []

    for i, root_node in enumerate(root_nodes):
        _render_node(
            graph=graph,
            node=root_node,
            prefix="",
            is_last=True,
            chars=chars,
            visited=set(),
            lines=lines,
            is_root=True,
            include_unresolved=include_unresolved,
        )

        if i < len(root_nodes) - 1:
            lines.append("")

    return "\n".join(lines)


def _render_node(
    graph: RequireGraph,
    node: str,
    prefix: str,
    is_last: bool,
    chars: Tuple[str, str, str, str],
    visited: Set[str],
    lines: List[str],
    is_root: bool = False,
    include_unresolved: bool = False,
) -> None:
    """
    Recursively render a module and the modules it requires.

    Args:
        graph: The require graph.
        node: Current module to render.
        prefix: Current line prefix for indentation.
        is_last: Whether this is the last child of its parent.
        chars: Character set (branch, last, vertical, space).
        visited: Modules on the current path (to detect cycles).
        lines: Output lines list (modified in place).
        is_root: Whether this is a root-level node.
        include_unresolved: If True, show usages with no known definition.
    """
    branch, last, vertical, space = chars

    is_cycle = node in visited
    cycle_marker = " [*]" if is_cycle else ""

    if is_root:
        lines.append(f"{node}{cycle_marker}")
    else:
        connector = last if is_last else branch
        lines.append(f"{prefix}{connector}{node}{cycle_marker}")

    if is_cycle:
        return

    visited.add(node)

    children = graph.get_requires(node)
    unresolved: List[str] = []
    if include_unresolved:
        unresolved = sorted(graph.get_unresolved(node))

    total_items = len(children) + len(unresolved)
    new_prefix = "" if is_root else prefix + (space if is_last else vertical)

    for index, child in enumerate(children, start=1):
        _render_node(
            graph=graph,
            node=child,
            prefix=new_prefix,
            is_last=(index == total_items),
            chars=chars,
            visited=visited,
            lines=lines,
            is_root=False,
            include_unresolved=include_unresolved,
        )

    for index, symbol in enumerate(unresolved, start=len(children) + 1):
        connector = last if index == total_items else branch
        lines.append(f"{new_prefix}{connector}{symbol} [UNRESOLVED]")

    # Only the current path counts for cycles; shared modules may repeat
    visited.discard(node)
