"""Short duration labels such as ``1m, 5s``."""
from __future__ import annotations

from typing import Optional

_UNITS = (("m", 60_000), ("s", 1_000))


def humanize_duration(ms: Optional[float], delimiter: str = ", ") -> str:
    """Render milliseconds in minutes and seconds, rounding the smallest unit."""

    remaining = int(max(ms or 0, 0) / 1_000 + 0.5) * 1_000
    pieces = []
    for suffix, size in _UNITS:
        count, remaining = divmod(remaining, size)
        if count:
            pieces.append(f"{count}{suffix}")
    if not pieces:
        return f"0{_UNITS[-1][0]}"
    return delimiter.join(pieces)
