"""End-of-session result block for buffered reporting."""
from __future__ import annotations

from typing import Any, Callable, Mapping, Optional

from specconsole.config import ReporterConfig
from specconsole.core.descriptor import browser_combo
from specconsole.core.models import SuiteNode, Tally
from specconsole.core.state import StateStore
from specconsole.core.stats import RunnerStats
from specconsole.core.symbols import color_for, symbol_for

from .failures import FailureRenderer
from .output import ConsoleOutput
from .titles import SEPARATOR, spec_files

JOB_LINK_HOSTS = {
    "saucelabs.com": "https://saucelabs.com/tests/{session_id}",
}


class SuiteResultComposer:
    """Builds the header, tree, summary, failures and job link of one session."""

    def __init__(
        self,
        store: StateStore,
        output: ConsoleOutput,
        failures: FailureRenderer,
        config: ReporterConfig,
        humanize: Optional[Callable[[float], str]] = None,
    ) -> None:
        self._store = store
        self._output = output
        self._failures = failures
        self._config = config
        self._humanize = humanize or output.humanize

    def result_list(self, cid: str, suites: Mapping[str, SuiteNode], preface: str = "") -> str:
        output = ""
        for uid, suite in suites.items():
            hidden = suite.is_before_all
            indent = self._store.indent(cid, uid)
            if not hidden:
                output += f"{preface} {indent}{suite.title}\n"
            for test in suite.tests.values():
                if test.state == "":
                    # never reported a terminal state
                    self._store.tally(cid).increment("pending")
                    self._output.stats.counts.increment("pending")
                    test.state = "pending"
                if hidden:
                    continue
                symbol = symbol_for(test.state, self._store.failures, test.key, self._output.symbols["ok"])
                output += preface
                output += "   " + indent
                output += self._output.color(color_for(test.state), symbol)
                output += f" {test.title}\n"
            if not hidden:
                output += preface.strip() + "\n"
        return output

    def summary(self, tally: Tally, duration_ms: float, preface: str = "") -> str:
        """One line per non-empty bucket; the duration follows the first one only."""

        output = ""
        shown_duration = False
        for bucket, count in tally.items():
            if count == 0:
                continue
            color = color_for(bucket)
            output += f"{preface} "
            output += self._output.color(color, count)
            output += " " + self._output.color(color, self._config.label_for(bucket))
            if not shown_duration:
                output += f" ({self._humanize(duration_ms)})"
                shown_duration = True
            output += "\n"
        return output

    def job_link(self, results: RunnerStats, preface: str = "") -> str:
        host = str(results.config.get("host") or "")
        if not host:
            return ""
        for domain, template in JOB_LINK_HOSTS.items():
            if domain in host:
                url = template.format(session_id=results.session_id)
                return f"{preface.strip()}\n{preface} Check out job at {url}\n"
        return ""

    def compose(self, runner: Mapping[str, Any]) -> str:
        cid = str(runner.get("cid"))
        stats = self._output.stats
        results = stats.runner(cid)
        spec = results.specs.get(stats.get_spec_hash(runner))

        # sessions that executed nothing are not reported at all
        if spec is None or not spec.suites:
            return ""

        preface = self._store.phase_tag
        specs = self._store.session(cid).specs or spec.files
        failures = [test for test in stats.get_failures() if test.cid == cid]

        output = f"{SEPARATOR}\n"
        if results.session_id:
            output += f"{preface} Session ID: {results.session_id}\n"
        if self._store.started_specs:
            output += f"{preface} Spec File: {spec_files(specs)}\n"
        else:
            output += f"{preface} Testcase File: {spec_files(specs)}\n"
            combo = browser_combo(results.capabilities)
            if combo:
                output += f"{preface} Running: {combo}\n"
        output += f"{preface}\n"
        output += self.result_list(cid, spec.suites, preface)
        output += f"{preface}\n"
        output += self.summary(self._store.tally(cid), spec.duration_ms, preface)
        output += f"{SEPARATOR}\n"
        output += self._failures.render_list(failures, self._store.failures)
        output += self.job_link(results, preface)
        return output
