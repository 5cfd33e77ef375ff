"""First pass: find which file defines which namespace symbol."""

import logging
from pathlib import Path
from typing import Iterable, Optional

from graph.model import SymbolTable
from .discovery import DEFAULT_SUFFIX, module_identifier, read_source_lines
from .patterns import SourcePatterns


logger = logging.getLogger(__name__)


def find_definition(lines: Iterable[str], patterns: SourcePatterns) -> Optional[str]:
    """Return the symbol of the first definition line, or None."""
    for line in lines:
        symbol = patterns.match_definition(line)
        if symbol is not None:
            return symbol
    return None


def scan_definitions(
    file_path: Path,
    root: Path,
    patterns: SourcePatterns,
    symbols: SymbolTable,
    suffix: str = DEFAULT_SUFFIX,
) -> Optional[str]:
    """
    Record the symbol a file defines in the symbol table.

    Only the first definition in a file counts. The file is not modified.

    Args:
        file_path: Source file to scan.
        root: App root, used to derive the module identifier.
        patterns: Matchers for the app namespace.
        symbols: Table to record the definition in.
        suffix: Source file suffix.

    Returns:
        The symbol defined by the file, or None.

    Raises:
        OSError, UnicodeDecodeError: If the file cannot be read.
    """
    symbol = find_definition(read_source_lines(file_path), patterns)

    if symbol is None:
        return None

    module = module_identifier(file_path, root, suffix)
    previous = symbols.define(symbol, module)
    if previous is not None:
        logger.warning(
            "%s.%s is defined in both '%s' and '%s'; using '%s'",
            patterns.namespace, symbol, previous, module, module,
        )
    return symbol
