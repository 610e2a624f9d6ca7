"""Mapping of test states to glyphs and color tags, plus failure numbering."""
from __future__ import annotations

from typing import Dict, Hashable, Optional

OK_SYMBOL = "✓"
PENDING_SYMBOL = "-"

# Semantic color tags resolved to ANSI codes by the theme.
STATE_COLORS = {
    "pass": "success",
    "passing": "success",
    "pending": "muted",
    "fail": "failure",
    "failing": "failure",
    "broken": "broken",
    "unresolved": "unresolved",
    "unverified": "unresolved",
    "unvalidated": "unresolved",
}


class FailureCounter:
    """Run-wide failure numbering.

    Numbers are handed out in call order across all sessions. A number drawn
    for a test key is remembered so the failure list can reuse the glyph
    number of the same test.
    """

    def __init__(self) -> None:
        self._value = 0
        self._assigned: Dict[Hashable, int] = {}

    @property
    def value(self) -> int:
        return self._value

    def next(self) -> int:
        self._value += 1
        return self._value

    def assign(self, key: Optional[Hashable]) -> int:
        number = self.next()
        if key is not None:
            self._assigned[key] = number
        return number

    def number_for(self, key: Optional[Hashable]) -> int:
        if key is not None and key in self._assigned:
            return self._assigned[key]
        return self.assign(key)

    def reset(self) -> None:
        self._value = 0
        self._assigned.clear()


def symbol_for(
    state: Optional[str],
    counter: FailureCounter,
    key: Optional[Hashable] = None,
    ok_symbol: str = OK_SYMBOL,
) -> str:
    """Glyph for a test line. Draws a failure number for non pass/pending states."""

    if state == "pass":
        return ok_symbol
    if state == "pending":
        return PENDING_SYMBOL
    return f"{counter.assign(key)})"


def color_for(state: Optional[str]) -> Optional[str]:
    return STATE_COLORS.get(state or "")
