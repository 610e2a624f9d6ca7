"""Reporter configuration: defaults, variants and YAML loading."""
from __future__ import annotations

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml
from jsonschema import Draft7Validator

LOG_LEVELS = ("testcases", "steps", "quiet", "default")

# Presets for the two historical reporter flavours; explicit keys win.
VARIANTS: Dict[str, Dict[str, Any]] = {
    "classic": {"report_results_instantly": False, "terminology": "unvalidated"},
    "instant": {"report_results_instantly": True, "terminology": "unverified"},
}

# camelCase option names as the runner configuration spells them.
_ALIASES = {
    "reportResultsInstantly": "report_results_instantly",
    "instantReport": "report_results_instantly",
    "instant_report": "report_results_instantly",
    "reportErrorsInstantly": "report_errors_instantly",
    "cleanStackTraces": "clean_stack_traces",
    "consoleLogLevel": "console_log_level",
    "pendingLabel": "pending_label",
    "outputFile": "output_file",
    "useColor": "use_color",
}

CONFIG_SCHEMA = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "title": "specconsole reporter config",
    "type": "object",
    "properties": {
        "variant": {"type": "string", "enum": sorted(VARIANTS)},
        "reportResultsInstantly": {"type": "boolean"},
        "instantReport": {"type": "boolean"},
        "reportErrorsInstantly": {"type": "boolean"},
        "cleanStackTraces": {"type": "boolean"},
        "consoleLogLevel": {"type": ["string", "null"], "enum": [*LOG_LEVELS, None]},
        "terminology": {"type": "string", "enum": ["unverified", "unvalidated"]},
        "pendingLabel": {"type": "string", "minLength": 1},
        "outputFile": {"type": ["string", "null"]},
        "useColor": {"type": "boolean"},
    },
}

_validator = Draft7Validator(CONFIG_SCHEMA)


@dataclass(frozen=True)
class ReporterConfig:
    """Options recognised by the spec reporter. Booleans default to disabled."""

    report_results_instantly: bool = False
    report_errors_instantly: bool = False
    clean_stack_traces: bool = False
    console_log_level: str = "quiet"
    terminology: str = "unverified"
    pending_label: str = "skipped"
    output_file: Optional[str] = None
    use_color: bool = True

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Any]]) -> "ReporterConfig":
        if not data:
            return cls()
        values: Dict[str, Any] = {}
        variant = data.get("variant")
        if variant is not None:
            if variant not in VARIANTS:
                raise ValueError(f"Unknown reporter variant '{variant}'. Supported: {', '.join(sorted(VARIANTS))}")
            values.update(VARIANTS[variant])
        known = {item.name for item in fields(cls)}
        for key, value in data.items():
            name = _ALIASES.get(key, key)
            if name in known and value is not None:
                values[name] = value
        for name in ("report_results_instantly", "report_errors_instantly", "clean_stack_traces", "use_color"):
            if name in values:
                values[name] = bool(values[name])
        level = values.get("console_log_level")
        if level is not None and level not in LOG_LEVELS:
            raise ValueError(f"consoleLogLevel must be one of {', '.join(LOG_LEVELS)}")
        return cls(**values)

    @property
    def logs_testcases(self) -> bool:
        return self.console_log_level in {"testcases", "steps"}

    @property
    def logs_steps(self) -> bool:
        return self.console_log_level == "steps"

    def label_for(self, bucket: str) -> str:
        """Display name of a tally bucket in summaries."""

        if bucket == "pending":
            return self.pending_label
        if bucket == "unresolved":
            return self.terminology
        return bucket


def load_config(path: str) -> ReporterConfig:
    """Load and validate a YAML reporter config file."""

    config_path = Path(path).expanduser().resolve()
    raw = yaml.safe_load(config_path.read_text(encoding="utf-8")) or {}
    if not isinstance(raw, Mapping):
        raise ValueError("Config file must contain a mapping at the top level")
    errors = sorted(_validator.iter_errors(raw), key=lambda e: [str(part) for part in e.path])
    if errors:
        messages = "; ".join(f"{'/'.join(map(str, err.path)) or 'root'}: {err.message}" for err in errors)
        raise ValueError(f"Config schema validation failed: {messages}")
    return ReporterConfig.from_mapping(raw)
