"""File discovery utilities for scanning SproutCore apps."""

from pathlib import Path
from typing import Iterator, List, Set, Optional


DEFAULT_SUFFIX = ".js"
DEFAULT_BOOTSTRAP = "core"
DEFAULT_EXCLUDE_DIRS = {".git", ".hg", ".svn"}


class ConfigurationError(Exception):
    """Raised when the run cannot start (bad root, bad settings)."""


def check_root(root: Path) -> Path:
    """
    Validate the app root before anything is scanned.

    Args:
        root: Directory holding the app sources.

    Returns:
        The resolved root.

    Raises:
        ConfigurationError: If the root is missing, is not a directory,
            or does not live directly under an ``apps`` directory.
    """
    root = root.resolve()
    if not root.exists() or not root.is_dir():
        raise ConfigurationError(f"Expected an actual directory at the root: {root}")
    if root.parent.name != "apps":
        raise ConfigurationError(
            "You have not pointed the processor at the right directory. "
            f"The parent directory should be apps, got '{root.parent.name}'"
        )
    return root


def iter_source_files(
    root: Path,
    suffix: str = DEFAULT_SUFFIX,
    bootstrap: str = DEFAULT_BOOTSTRAP,
    exclude_dirs: Optional[Set[str]] = None,
) -> Iterator[Path]:
    """
    Iterate over source files in an app tree.

    Args:
        root: Root directory to scan.
        suffix: File suffix of source files (e.g., '.js').
        bootstrap: Module name of the always-loaded file; ``<bootstrap><suffix>``
                   is never yielded.
        exclude_dirs: Set of directory names to skip.
                     If None, uses DEFAULT_EXCLUDE_DIRS.

    Yields:
        Path objects for matching files.

    Raises:
        ConfigurationError: If root is not a directory.
    """
    if exclude_dirs is None:
        exclude_dirs = DEFAULT_EXCLUDE_DIRS

    root = root.resolve()
    if not root.is_dir():
        raise ConfigurationError(f"Expected an actual directory at the root: {root}")

    bootstrap_name = bootstrap + suffix

    def _walk(current: Path) -> Iterator[Path]:
        try:
            entries = sorted(current.iterdir())
        except PermissionError:
            return

        for entry in entries:
            if entry.is_dir():
                if entry.name in exclude_dirs:
                    continue
                yield from _walk(entry)
            elif entry.is_file():
                if entry.name == bootstrap_name:
                    continue
                if entry.name.endswith(suffix):
                    yield entry

    yield from _walk(root)


def module_identifier(file_path: Path, root: Path, suffix: str = DEFAULT_SUFFIX) -> str:
    """
    Get the module identifier SproutCore uses for a file.

    This is the path relative to root, with forward slashes and without
    the source suffix: ``<root>/views/main.js`` -> ``views/main``.
    A symlinked file keeps the identifier of the link, not of its target.
    """
    try:
        rel_path = file_path.relative_to(root)
    except ValueError:
        try:
            # Resolve directories only, never the file itself
            rel_path = (file_path.parent.resolve() / file_path.name).relative_to(root.resolve())
        except ValueError:
            rel_path = file_path

    identifier = rel_path.as_posix()
    if suffix and identifier.endswith(suffix):
        identifier = identifier[: -len(suffix)]
    return identifier


def read_source_lines(file_path: Path) -> List[str]:
    """
    Read a source file as a list of lines without line terminators.

    ``\\r\\n`` and ``\\r`` are read as ``\\n``. A final newline does not
    produce a trailing empty line.

    Raises:
        OSError, UnicodeDecodeError: If the file cannot be read.
    """
    return split_source_lines(file_path.read_text(encoding="utf-8"))


def split_source_lines(content: str) -> List[str]:
    """Split text into lines; a final newline does not add an empty line."""
    if not content:
        return []
    lines = content.split("\n")
    if lines[-1] == "":
        lines.pop()
    return lines
