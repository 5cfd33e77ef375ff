"""Regex heuristics for spotting namespace definitions and usages in JS source."""

import re
from typing import Iterator, Optional

from .discovery import ConfigurationError


REQUIRE_CALL = "sc_require"

# Right-hand sides that count as a class/mixin/object definition
DEFINITION_RHS = r"([A-Za-z.]+(design|extend|SC.mixin)|function|\{|SC\.mixin)"

ANNOTATION_PATTERN = re.compile(r"/\*.*@ignore.*\*/\s*" + REQUIRE_CALL)

NAMESPACE_PATTERN = re.compile(r"^[A-Za-z_$][\w$]*$")


def require_directive(module: str) -> str:
    """Render the require directive for a module (without newline)."""
    return f"{REQUIRE_CALL}('{module}');"


class SourcePatterns:
    """
    Textual matchers for one application namespace.

    Nothing here parses JavaScript. Definitions look like
    ``App.Foo = SC.Object.extend({`` and usages like ``App.Foo.create()``.
    """

    def __init__(self, namespace: str):
        if not namespace or not NAMESPACE_PATTERN.match(namespace):
            raise ConfigurationError(f"Invalid application namespace: {namespace!r}")

        self.namespace = namespace
        escaped = re.escape(namespace)
        self.definition = re.compile(escaped + r"\.(\w+)\s*=\s*" + DEFINITION_RHS)
        self.usage = re.compile(r"(^|[^'\"])" + escaped + r"\.([A-Za-z]+)\.?(\w*)")

    def match_definition(self, line: str) -> Optional[str]:
        """Return the symbol defined on this line, or None."""
        match = self.definition.search(line)
        if match is None:
            return None
        return match.group(1)

    def iter_usages(self, line: str) -> Iterator[str]:
        """Yield every namespace member referenced on this line."""
        for match in self.usage.finditer(line):
            yield match.group(2)

    @staticmethod
    def is_annotated_require(line: str) -> bool:
        """Check for a hand-managed ``/* @ignore */ sc_require(...)`` line."""
        return ANNOTATION_PATTERN.search(line) is not None

    def __repr__(self) -> str:
        return f"SourcePatterns(namespace={self.namespace!r})"
