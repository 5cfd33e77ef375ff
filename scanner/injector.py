"""Rendering and writing of files with the license header and require directives."""

from pathlib import Path
from typing import List, Tuple

from graph.model import SymbolTable
from .config import ProcessorConfig
from .discovery import module_identifier, split_source_lines
from .guard import BANNER_RULE
from .patterns import SourcePatterns, require_directive
from .usages import UsageScan, scan_usages


def license_header(config: ProcessorConfig) -> List[str]:
    """Get the license banner and globals declaration, one entry per line."""
    return [
        BANNER_RULE,
        f"// Project:   {config.project_name}".rstrip(),
        f"// Copyright: {config.copyright}".rstrip(),
        BANNER_RULE,
        f"/*globals {' '.join(config.global_names)} */",
    ]


def render(scan: UsageScan, config: ProcessorConfig) -> str:
    """
    Build the new file content.

    Layout: license header, one require directive per required module
    in sorted order, then the kept original lines.
    """
    lines = license_header(config)
    lines.extend(require_directive(module) for module in scan.sorted_requires)
    lines.extend(scan.content)
    return "".join(line + "\n" for line in lines)


def inject_requires(
    file_path: Path,
    root: Path,
    config: ProcessorConfig,
    patterns: SourcePatterns,
    symbols: SymbolTable,
    write: bool = True,
) -> Tuple[UsageScan, bool]:
    """
    Rewrite a file so that it starts with its require directives.

    The file is read fully, transformed in memory and written back in one
    go. It is left alone when the new content equals the current one.

    Args:
        file_path: Source file to rewrite.
        root: App root, used to derive module identifiers.
        config: Run settings (header text, bootstrap, suffix).
        patterns: Matchers for the app namespace.
        symbols: Frozen definitions table.
        write: If False, compute the result without touching the file.

    Returns:
        The usage scan and whether the file content changed (or would change).

    Raises:
        OSError, UnicodeDecodeError: If the file cannot be read or written.
    """
    module = module_identifier(file_path, root, config.suffix)
    original = file_path.read_text(encoding="utf-8")

    scan = scan_usages(
        split_source_lines(original),
        module=module,
        patterns=patterns,
        symbols=symbols,
        bootstrap=config.bootstrap,
    )
    new_content = render(scan, config)

    changed = new_content != original
    if changed and write:
        with file_path.open("w", encoding="utf-8", newline="\n") as handle:
            handle.write(new_content)
    return scan, changed

