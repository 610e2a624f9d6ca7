"""ANSI styles for the semantic color tags used by the renderers."""
from __future__ import annotations

from typing import Any, Optional

from colorama import Fore, Style

THEME = {
    "success": Fore.GREEN,
    "muted": Fore.CYAN,
    "failure": Fore.RED,
    "broken": Fore.YELLOW,
    "unresolved": Fore.MAGENTA,
    "error-title": Style.BRIGHT,
    "error-message": Fore.RED,
    "error-stack": Fore.LIGHTBLACK_EX,
    "generic-exception": Fore.LIGHTYELLOW_EX,
    "log-testcase": Fore.LIGHTBLUE_EX,
}


def colorize(tag: Optional[str], text: Any, *, use_color: bool = True) -> str:
    """Wrap ``text`` in the style of ``tag``; unknown or missing tags leave it plain."""

    text = str(text)
    if not use_color or tag is None:
        return text
    style = THEME.get(tag)
    if not style:
        return text
    return f"{style}{text}{Style.RESET_ALL}"
