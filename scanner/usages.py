"""Second pass: find the modules a file depends on."""

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Set

from graph.model import SymbolTable
from .discovery import DEFAULT_BOOTSTRAP
from .function_body import FunctionBodyTracker
from .guard import is_real_content
from .patterns import REQUIRE_CALL, SourcePatterns


logger = logging.getLogger(__name__)

COMMENT_START = "/"


@dataclass
class UsageScan:
    """Result of scanning one file for usages."""

    module: str
    requires: Set[str] = field(default_factory=set)
    unresolved: Set[str] = field(default_factory=set)
    content: List[str] = field(default_factory=list)

    @property
    def sorted_requires(self) -> List[str]:
        return sorted(self.requires)


def is_scannable(line: str) -> bool:
    """Lines that are empty or start a comment are never scanned for usages."""
    return bool(line) and not line.startswith(COMMENT_START) and REQUIRE_CALL not in line


def scan_usages(
    lines: Iterable[str],
    module: str,
    patterns: SourcePatterns,
    symbols: SymbolTable,
    bootstrap: str = DEFAULT_BOOTSTRAP,
) -> UsageScan:
    """
    Collect the modules required by a file and its content without stale boilerplate.

    Args:
        lines: The file's lines, without line terminators.
        module: Module identifier of the file.
        patterns: Matchers for the app namespace.
        symbols: Definitions found by the first pass. Only read.
        bootstrap: Bootstrap module name, its require is kept as content.

    Returns:
        UsageScan with the required modules, the usages that did not
        resolve, and the lines to keep.
    """
    result = UsageScan(module=module)
    tracker = FunctionBodyTracker()

    for line in lines:
        in_function = tracker.feed(line)

        if not is_real_content(line, bootstrap):
            continue
        result.content.append(line)

        if in_function or not is_scannable(line):
            continue

        for symbol in patterns.iter_usages(line):
            if logger.isEnabledFor(logging.DEBUG):
                logger.debug("Usage: %s in %s", symbol, line.replace(" ", "").replace("\t", ""))
            required = symbols.resolve(symbol)
            if required is None:
                result.unresolved.add(symbol)
            elif required != module:
                if required not in result.requires:
                    logger.debug("  Requiring: %s", required)
                result.requires.add(required)

    return result
