"""Immediate printing of runner banners, suite/test titles and steps."""
from __future__ import annotations

import json
import pprint
from typing import Any, Mapping, MutableMapping, Optional

from specconsole.config import ReporterConfig
from specconsole.core.descriptor import browser_combo
from specconsole.core.models import failure_key, suite_uid
from specconsole.core.state import StateStore
from specconsole.core.symbols import color_for, symbol_for

from .output import ConsoleOutput

SEPARATOR = "-" * 66

# Step titles that only wrap other steps.
_SILENT_STEP_TITLES = ("Callback",)
_SILENT_STEP_PREFIX = "validate: {"


def spec_files(specs: Any) -> str:
    if isinstance(specs, str):
        return specs
    return ", ".join(str(spec) for spec in specs or ())


class TitleRenderer:
    def __init__(self, store: StateStore, output: ConsoleOutput, config: ReporterConfig) -> None:
        self._store = store
        self._output = output
        self._config = config

    def runner_info(self, runner: Mapping[str, Any]) -> None:
        phase = self._store.phase_tag
        cid = runner.get("cid")
        results = self._output.stats.runner(cid)
        specs = runner.get("specs") or self._store.session(cid).specs

        text = f"\n{SEPARATOR}\n"
        if results.session_id:
            text += f"{phase}Session ID: {results.session_id}\n"
        if self._store.started_specs:
            text += f"{phase}Spec File: {spec_files(specs)}\n"
        else:
            text += f"{phase}Testcase File: {spec_files(specs)}\n"
            combo = browser_combo(results.capabilities)
            if combo:
                text += f"{phase}Running: {combo}"
        self._output.log(text)

    def suite_title(self, suite: Mapping[str, Any]) -> None:
        phase = self._store.phase_tag
        indent = self._store.indent(suite.get("cid"), suite_uid(suite))
        self._output.log(f"{phase}\n{phase}{indent}{suite.get('title', '')}")

    def test_line(self, test: MutableMapping[str, Any], state: str) -> str:
        """Print one test line and write ``state`` back onto the payload."""

        test["state"] = state
        cid = test.get("cid")
        current_uid = self._store.session(cid).current_suite_uid
        owner = self._output.stats.suite_for(test)
        key = failure_key(test, owner.uid if owner else None)
        symbol = symbol_for(state, self._store.failures, key, self._output.symbols["ok"])
        line = (
            self._store.phase_tag
            + "   "
            + self._store.indent(cid, current_uid)
            + self._output.color(color_for(state), symbol)
            + " "
            + str(test.get("title", ""))
        )
        self._output.log(line)
        return line

    def testcase_title(self, test: Optional[Mapping[str, Any]], retry: int = 0) -> None:
        if test is None:
            return
        text = f'TESTCASE: "{test.get("id", test.get("title", ""))}"...'
        if retry:
            text += f" (Retry {retry})"
        if self._config.logs_steps:
            text = "\n" + text
        self._output.log(self._output.color("log-testcase", text))

    def step(self, step: Mapping[str, Any]) -> bool:
        title = step.get("title")
        if not title or title in _SILENT_STEP_TITLES or str(title).startswith(_SILENT_STEP_PREFIX):
            return False
        indent = self._store.step_indent(step.get("cid"))
        self._output.log(f'{indent}STEP: "{step.get("description", title)}"')
        arg = _parse_arg(step.get("arg"))
        if arg:
            for line in pprint.pformat(arg).split("\n"):
                self._output.log(self._output.color("error-stack", indent + line))
        return True


def _parse_arg(raw: Any) -> Any:
    if raw is None or raw == "":
        return None
    if not isinstance(raw, str):
        return raw
    try:
        return json.loads(raw)
    except ValueError:
        return raw
