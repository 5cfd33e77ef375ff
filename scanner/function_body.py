"""Brace-counting tracker for multi-line function bodies."""

import re


FUNCTION_KEYWORD = "function"

OUTSIDE = "outside"
INSIDE = "inside"

_OPEN_BRACE = re.compile(r"\{")
_CLOSE_BRACE = re.compile(r"\}")


class FunctionBodyTracker:
    """
    Two-state machine: ``outside`` or ``inside(depth)``.

    A line mentioning ``function`` moves the tracker inside. While inside,
    every ``{`` on a line adds one to the depth and every ``}`` removes one,
    including the line that entered. Reaching depth zero moves it back
    outside. Usages on lines consumed while inside are local to a function
    and are not module-level dependencies.
    """

    def __init__(self):
        self.state = OUTSIDE
        self.depth = 0

    @property
    def inside(self) -> bool:
        return self.state == INSIDE

    def feed(self, line: str) -> bool:
        """
        Consume one line.

        Returns:
            True if the line is part of a function body and must not be
            scanned for usages.
        """
        if FUNCTION_KEYWORD in line:
            self.state = INSIDE

        if self.state == INSIDE:
            self.depth += len(_OPEN_BRACE.findall(line))
            self.depth -= len(_CLOSE_BRACE.findall(line))
            if self.depth <= 0:
                # unbalanced closers never leave the tracker stuck inside
                self.state = OUTSIDE
                self.depth = 0

        return self.state == INSIDE

    def __repr__(self) -> str:
        if self.state == INSIDE:
            return f"FunctionBodyTracker(inside({self.depth}))"
        return "FunctionBodyTracker(outside)"
