"""Graph module for symbol tables and require graphs."""

from .model import RequireGraph, SymbolTable, SymbolTableFrozen

__all__ = [
    "RequireGraph",
    "SymbolTable",
    "SymbolTableFrozen",
]
