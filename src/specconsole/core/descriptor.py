"""Human-readable browser/device description from a capability record."""
from __future__ import annotations

from typing import Any, Mapping, Optional

SAUCE_STORAGE_PREFIX = "sauce-storage:"


def _text(caps: Mapping[str, Any], *keys: str) -> str:
    for key in keys:
        value = caps.get(key)
        if value not in (None, ""):
            return str(value)
    return ""


def _platform(caps: Mapping[str, Any]) -> str:
    os_name = _text(caps, "os")
    if os_name:
        return " ".join(part for part in (os_name, _text(caps, "os_version")) if part)
    return _text(caps, "platform", "platformName")


def browser_combo(caps: Optional[Mapping[str, Any]], verbose: bool = True) -> str:
    """Describe the browser or mobile device a session runs on.

    Missing capability fields drop their clause instead of failing.
    """

    caps = caps or {}
    device = _text(caps, "deviceName")
    browser = _text(caps, "browserName", "browser")
    version = _text(caps, "version", "platformVersion", "browser_version")
    platform = _platform(caps)

    if device:
        program = _text(caps, "app").replace(SAUCE_STORAGE_PREFIX, "") or _text(caps, "browserName")
        if not verbose:
            return " ".join(part for part in (device, platform, version) if part)
        parts = [device]
        target = " ".join(part for part in (platform, version) if part)
        if target:
            parts.append(f"on {target}")
        if program:
            parts.append(f"executing {program}")
        return " ".join(parts)

    if not verbose:
        return " ".join(part for part in (browser, version, platform) if part)
    text = browser
    if version:
        text += f" (v{version})"
    if platform:
        text += f" on {platform}"
    return text.strip()
