"""Loading recorded runner events from JSON-lines or YAML files."""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Mapping, Tuple

import yaml

YAML_SUFFIXES = {".yaml", ".yml"}


def load_events(path: str) -> List[Tuple[str, Dict[str, Any]]]:
    """Read ``{"event": name, "payload": {...}}`` records in file order."""

    events_path = Path(path).expanduser().resolve()
    text = events_path.read_text(encoding="utf-8")
    if events_path.suffix.lower() in YAML_SUFFIXES:
        raw = yaml.safe_load(text) or []
        if not isinstance(raw, list):
            raise ValueError("Event file must contain a list of events at the top level")
        records = list(enumerate(raw, start=1))
    else:
        records = []
        for lineno, line in enumerate(text.splitlines(), start=1):
            if not line.strip():
                continue
            try:
                records.append((lineno, json.loads(line)))
            except ValueError as exc:
                raise ValueError(f"{events_path.name}:{lineno}: invalid JSON ({exc})") from exc
    return [_parse_record(index, record) for index, record in records]


def _parse_record(index: int, record: Any) -> Tuple[str, Dict[str, Any]]:
    if not isinstance(record, Mapping):
        raise ValueError(f"event #{index} must be a mapping")
    name = record.get("event")
    if not isinstance(name, str) or not name.strip():
        raise ValueError(f"event #{index} is missing its 'event' name")
    payload = record.get("payload") or {}
    if not isinstance(payload, Mapping):
        raise ValueError(f"event #{index} payload must be a mapping")
    return name.strip(), dict(payload)
