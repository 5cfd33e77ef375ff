"""Data model for symbol definitions and module require relationships."""

from typing import Dict, Iterator, List, Optional, Set, Tuple


class SymbolTableFrozen(RuntimeError):
    """Raised when a definition is added after the definition pass finished."""


class SymbolTable:
    """
    Mapping of namespace symbol -> module identifier that defines it.

    Filled by the definition pass, then frozen and only read by the
    usage pass. When two modules define the same symbol the later
    definition wins and the clash is kept in ``conflicts``.
    """

    def __init__(self):
        self._symbols: Dict[str, str] = {}
        self._conflicts: Dict[str, List[str]] = {}
        self._frozen = False

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def conflicts(self) -> Dict[str, List[str]]:
        """Return symbols defined by more than one module (symbol -> modules, in scan order)."""
        return {k: list(v) for k, v in self._conflicts.items()}

    def define(self, symbol: str, module: str) -> Optional[str]:
        """
        Record that ``module`` defines ``symbol``.

        Returns:
            The module previously recorded for this symbol, if it differs.
        """
        if self._frozen:
            raise SymbolTableFrozen(f"Cannot define {symbol!r}: symbol table is read-only")

        previous = self._symbols.get(symbol)
        self._symbols[symbol] = module
        if previous is not None and previous != module:
            modules = self._conflicts.setdefault(symbol, [previous])
            modules.append(module)
            return previous
        return None

    def freeze(self) -> "SymbolTable":
        self._frozen = True
        return self

    def resolve(self, symbol: str) -> Optional[str]:
        """Get the module defining ``symbol``, or None."""
        return self._symbols.get(symbol)

    def items(self) -> Iterator[Tuple[str, str]]:
        """Iterate over (symbol, module) pairs in symbol order."""
        for symbol in sorted(self._symbols):
            yield symbol, self._symbols[symbol]

    def __len__(self) -> int:
        return len(self._symbols)

    def __contains__(self, symbol: str) -> bool:
        return symbol in self._symbols

    def __repr__(self) -> str:
        return f"SymbolTable(symbols={len(self._symbols)}, conflicts={len(self._conflicts)}, frozen={self._frozen})"


class RequireGraph:
    """
    A directed graph of module requires.

    Nodes are module identifiers, and edges represent 'module -> required module'
    relationships. Unresolved namespace usages, failed files and rewritten
    files are tracked separately for reporting.
    """

    def __init__(self, symbols: Optional[SymbolTable] = None):
        self.symbols = symbols if symbols is not None else SymbolTable()
        self._nodes: Set[str] = set()
        self._edges: Dict[str, Set[str]] = {}
        self._unresolved: Dict[str, Set[str]] = {}  # module -> namespace members with no definition
        self._failed: Dict[str, str] = {}  # module -> error message
        self._rewritten: Set[str] = set()

    @property
    def nodes(self) -> Set[str]:
        """Return all nodes in the graph."""
        return self._nodes.copy()

    @property
    def edges(self) -> Dict[str, Set[str]]:
        """Return adjacency list representation of edges."""
        return {k: v.copy() for k, v in self._edges.items()}

    @property
    def unresolved(self) -> Dict[str, Set[str]]:
        """Return unresolved usages (module -> set of symbol names)."""
        return {k: v.copy() for k, v in self._unresolved.items()}

    @property
    def failed(self) -> Dict[str, str]:
        """Return modules that could not be read or written (module -> error)."""
        return dict(self._failed)

    @property
    def rewritten(self) -> Set[str]:
        """Return modules whose content changed (or would change in a dry run)."""
        return self._rewritten.copy()

    def add_node(self, node: str) -> None:
        """Add a node to the graph."""
        self._nodes.add(node)

    def add_edge(self, source: str, target: str) -> None:
        """
        Add a directed edge from source to target.

        Automatically adds both nodes to the graph. Self edges are ignored,
        a module never requires itself.
        """
        self._nodes.add(source)
        if source == target:
            return
        self._nodes.add(target)

        if source not in self._edges:
            self._edges[source] = set()
        self._edges[source].add(target)

    def add_unresolved(self, source: str, symbol: str) -> None:
        """
        Record a usage that has no known definition.

        Args:
            source: The module containing the usage.
            symbol: The namespace member that could not be resolved.
        """
        self._nodes.add(source)
        if source not in self._unresolved:
            self._unresolved[source] = set()
        self._unresolved[source].add(symbol)

    def add_failure(self, source: str, error: str) -> None:
        self._nodes.add(source)
        self._failed[source] = error

    def mark_rewritten(self, source: str) -> None:
        self._nodes.add(source)
        self._rewritten.add(source)

    def get_targets(self, source: str) -> Set[str]:
        """Get all modules that the source module requires."""
        return self._edges.get(source, set()).copy()

    def get_requires(self, source: str) -> List[str]:
        """Get the required modules of source in directive order."""
        return sorted(self._edges.get(source, set()))

    def get_unresolved(self, source: str) -> Set[str]:
        """Get all unresolved usages from the source module."""
        return self._unresolved.get(source, set()).copy()

    def has_unresolved(self) -> bool:
        """Check if there are any unresolved usages."""
        return bool(self._unresolved)

    def has_failures(self) -> bool:
        return bool(self._failed)

    def get_roots(self) -> Set[str]:
        """
        Get modules that no other module requires.

        These are the last modules a loader would reach.
        """
        all_targets: Set[str] = set()
        for targets in self._edges.values():
            all_targets.update(targets)

        return self._nodes - all_targets

    def iter_edges(self) -> Iterator[Tuple[str, str]]:
        """Iterate over all edges as (source, target) tuples."""
        for source in sorted(self._edges):
            for target in sorted(self._edges[source]):
                yield source, target

    def iter_unresolved(self) -> Iterator[Tuple[str, str]]:
        """Iterate over all unresolved usages as (source, symbol) tuples."""
        for source in sorted(self._unresolved):
            for symbol in sorted(self._unresolved[source]):
                yield source, symbol

    def get_connected_nodes(self) -> Set[str]:
        """
        Get nodes that take part in at least one require.

        A node is connected if it requires another module or is required
        by one.
        """
        connected: Set[str] = set()

        for source in self._edges:
            if self._edges[source]:
                connected.add(source)

        for targets in self._edges.values():
            connected.update(targets)

        return connected

    def __len__(self) -> int:
        """Return the number of nodes in the graph."""
        return len(self._nodes)

    def __contains__(self, node: str) -> bool:
        """Check if a node is in the graph."""
        return node in self._nodes

    def __repr__(self) -> str:
        unresolved_count = sum(len(u) for u in self._unresolved.values())
        return f"RequireGraph(nodes={len(self._nodes)}, edges={sum(len(t) for t in self._edges.values())}, unresolved={unresolved_count}, failed={len(self._failed)})"
