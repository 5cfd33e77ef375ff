"""Two-pass processor: collect definitions, then inject requires."""

import logging
from pathlib import Path
from typing import Optional

from graph.model import RequireGraph, SymbolTable
from .config import ProcessorConfig
from .definitions import scan_definitions
from .discovery import iter_source_files, module_identifier
from .injector import inject_requires
from .patterns import SourcePatterns


logger = logging.getLogger(__name__)


def build_symbol_table(
    root: Path,
    config: ProcessorConfig,
    patterns: Optional[SourcePatterns] = None,
) -> SymbolTable:
    """
    Scan every source file for definitions.

    Files that cannot be read are logged and skipped.

    Args:
        root: App root directory.
        config: Run settings.
        patterns: Matchers for the app namespace (built from config if None).

    Returns:
        The frozen SymbolTable.
    """
    if patterns is None:
        patterns = SourcePatterns(config.namespace)

    symbols = SymbolTable()
    root = root.resolve()

    for file_path in iter_source_files(
        root=root,
        suffix=config.suffix,
        bootstrap=config.bootstrap,
        exclude_dirs=config.exclude_dirs,
    ):
        try:
            scan_definitions(file_path, root, patterns, symbols, config.suffix)
        except (OSError, UnicodeDecodeError) as e:
            logger.error("Cannot read %s: %s", file_path, e)

    for symbol, module in symbols.items():
        logger.debug("File: %-60s\tdefines: %s", module, symbol)

    return symbols.freeze()


def inject_all(
    root: Path,
    config: ProcessorConfig,
    symbols: SymbolTable,
    patterns: Optional[SourcePatterns] = None,
    write: bool = True,
) -> RequireGraph:
    """
    Rewrite every source file with its require directives.

    A file that cannot be read or written is recorded as failed and the
    run moves on to the next file.

    Args:
        root: App root directory.
        config: Run settings.
        symbols: Definitions from build_symbol_table.
        patterns: Matchers for the app namespace (built from config if None).
        write: If False, nothing is written (dry run).

    Returns:
        RequireGraph of every processed module.
    """
    if patterns is None:
        patterns = SourcePatterns(config.namespace)
    if not symbols.frozen:
        symbols.freeze()

    graph = RequireGraph(symbols)
    root = root.resolve()

    for file_path in iter_source_files(
        root=root,
        suffix=config.suffix,
        bootstrap=config.bootstrap,
        exclude_dirs=config.exclude_dirs,
    ):
        module = module_identifier(file_path, root, config.suffix)
        logger.debug("%s", file_path)
        graph.add_node(module)

        try:
            scan, changed = inject_requires(file_path, root, config, patterns, symbols, write=write)
        except (OSError, UnicodeDecodeError) as e:
            logger.error("Cannot process %s: %s", file_path, e)
            graph.add_failure(module, str(e))
            continue

        for required in scan.requires:
            graph.add_edge(module, required)
        for symbol in scan.unresolved:
            graph.add_unresolved(module, symbol)
        if changed:
            graph.mark_rewritten(module)

    return graph


def process_app(
    root: Path,
    config: ProcessorConfig,
    write: bool = True,
) -> RequireGraph:
    """
    Run both passes over an app.

    The definition pass finishes for all files before the first file is
    rewritten.

    Args:
        root: App root directory.
        config: Run settings.
        write: If False, nothing is written (dry run).

    Returns:
        RequireGraph containing the definitions table and every require.
    """
    patterns = SourcePatterns(config.namespace)
    symbols = build_symbol_table(root, config, patterns)
    return inject_all(root, config, symbols, patterns, write=write)
