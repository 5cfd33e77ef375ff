"""Filter that recognises boilerplate injected by a previous run."""

from typing import Tuple

from .discovery import DEFAULT_BOOTSTRAP
from .patterns import REQUIRE_CALL, SourcePatterns


BANNER_RULE = "// " + "=" * 74

# Substrings of lines written by the license header
HEADER_MARKERS: Tuple[str, ...] = (
    BANNER_RULE,
    "// Project:",
    "// Copyright:",
    "/*globals",
)


def is_real_content(line: str, bootstrap: str = DEFAULT_BOOTSTRAP) -> bool:
    """
    Decide whether a line is original content or stale injected boilerplate.

    Require directives and license banner lines are boilerplate. The
    bootstrap require and requires annotated with ``/* @ignore */`` are
    hand-written and always kept.

    Args:
        line: A single line without its newline.
        bootstrap: Bootstrap module name (``core`` -> ``sc_require('core')``).

    Returns:
        True if the line should be kept.
    """
    if REQUIRE_CALL in line or any(marker in line for marker in HEADER_MARKERS):
        return (
            f"{REQUIRE_CALL}('{bootstrap}')" in line
            or SourcePatterns.is_annotated_require(line)
        )
    return True
