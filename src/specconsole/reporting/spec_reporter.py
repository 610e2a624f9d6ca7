"""Spec reporter: binds runner lifecycle events to the state store and renderers."""
from __future__ import annotations

import logging
from functools import partial
from typing import Any, Callable, Dict, Mapping, Optional

from specconsole.config import ReporterConfig
from specconsole.core.models import ErrorRecord, errors_from_payload, suite_uid
from specconsole.core.state import StateStore

from .base import Reporter
from .composer import SuiteResultComposer
from .failures import FailureRenderer
from .output import ConsoleOutput
from .titles import TitleRenderer

logger = logging.getLogger(__name__)

Handler = Callable[[Dict[str, Any]], None]

TEST_STATES = ("pending", "pass", "fail", "broken", "unresolved", "unverified", "unvalidated")


class SpecReporter(Reporter):
    """Renders suite trees, summaries and failures for one run.

    Every recognised event maps to one entry of ``handlers``. In instant mode
    titles and test lines are printed as events arrive; otherwise only the
    counters move and the whole block is composed at ``runner:end``.
    """

    def __init__(
        self,
        output: ConsoleOutput,
        config: Optional[ReporterConfig] = None,
        *,
        store: Optional[StateStore] = None,
    ) -> None:
        self.config = config or output.config
        self.output = output
        self.store = store or StateStore()
        self.titles = TitleRenderer(self.store, output, self.config)
        self.failures = FailureRenderer(output, self.config)
        self.composer = SuiteResultComposer(self.store, output, self.failures, self.config)
        self._testcase_sessions = 0
        self._testcase_summary_printed = False
        self.handlers: Dict[str, Handler] = {
            "startSpecs": self._on_start_specs,
            "runner:init": self._on_runner_init,
            "runner:start": self._on_runner_start,
            "suite:start": self._on_suite_start,
            "suite:end": self._on_suite_end,
            "test:setCurrentId": self._on_set_current_id,
            "step:start": self._on_step_start,
            "step:end": self._on_step_end,
            "retry:failed": self._on_retry_failed,
            "retry:broken": self._on_retry_broken,
            "retry:validateFailure": self._on_retry_validate_failure,
            "validate:failure": self._on_validate_failure,
            "runner:end": self._on_runner_end,
            "end": self._on_end,
        }
        for state in TEST_STATES:
            self.handlers[f"test:{state}"] = partial(self._on_test_state, state)

    @property
    def instant(self) -> bool:
        return self.config.report_results_instantly

    def _logs_testcases(self) -> bool:
        return self.config.logs_testcases and not self.store.started_specs

    def dispatch(self, event: str, payload: Optional[Mapping[str, Any]] = None) -> None:
        handler = self.handlers.get(event)
        if handler is None:
            logger.debug("ignoring event %s", event)
            return
        try:
            handler(payload if payload is not None else {})
        except Exception:
            logger.exception("spec reporter failed to handle %s", event)

    # runner ------------------------------------------------------------

    def _on_start_specs(self, runner: Dict[str, Any]) -> None:
        if self.store.start_specs(runner.get("cid")):
            logger.debug("spec phase started")

    def _on_runner_init(self, runner: Dict[str, Any]) -> None:
        if self.instant:
            self.titles.runner_info(runner)

    def _on_runner_start(self, runner: Dict[str, Any]) -> None:
        if self.store.started_specs and not self.instant and self._testcase_sessions and not self._testcase_summary_printed:
            # close the testcase phase before spec tallies start
            self._testcase_summary_printed = True
            self.output.epilogue()
            self.output.stats.counts.reset()
        self.store.on_run_start(runner.get("cid"), runner.get("specs"))
        if not self.store.started_specs:
            self._testcase_sessions += 1
        elif self.instant:
            self.titles.runner_info(runner)

    def _on_runner_end(self, runner: Dict[str, Any]) -> None:
        if self.instant:
            return
        text = self.composer.compose(runner)
        if text:
            self.output.log(text)

    def _on_end(self, _: Dict[str, Any]) -> None:
        if not self.store.started_specs:
            return
        if self.instant:
            failures = self.output.stats.get_failures()
            if failures:
                self.output.log(self.failures.render_list(failures, self.store.failures))
        self.output.epilogue()
        path = self.output.write_complete_output()
        if path is not None:
            logger.info("wrote reporter output to %s", path)

    # suites and tests --------------------------------------------------

    def _on_suite_start(self, suite: Dict[str, Any]) -> None:
        self.store.on_suite_start(suite.get("cid"), suite_uid(suite), suite.get("parentUid"))
        if self.instant:
            self.titles.suite_title(suite)

    def _on_suite_end(self, suite: Dict[str, Any]) -> None:
        self.store.on_suite_end(suite.get("cid"))
        if self._logs_testcases():
            self.output.log()

    def _on_set_current_id(self, test: Dict[str, Any]) -> None:
        self.store.retry_count = 0
        self.store.current_test = test
        if self._logs_testcases():
            self.titles.testcase_title(test)
            if self.config.logs_steps:
                self.store.session(test.get("cid")).step_depth = 0

    def _on_test_state(self, state: str, test: Dict[str, Any]) -> None:
        self.store.on_test_state(test.get("cid"), state)
        self.store.current_test = None
        if self.instant:
            self.titles.test_line(test, state)
        if state == "broken" and self.config.report_errors_instantly and not test.get("finishedTests"):
            errors = errors_from_payload(test)
            if errors:
                self.failures.report_error(errors[-1], "generic-exception")

    # steps, retries and validation -------------------------------------

    def _on_step_start(self, step: Dict[str, Any]) -> None:
        if not step.get("title") or not self.config.logs_steps or self.store.started_specs:
            return
        self.store.session(step.get("cid")).step_depth += 1
        self.titles.step(step)

    def _on_step_end(self, step: Dict[str, Any]) -> None:
        if self.store.started_specs or not self.config.logs_steps:
            return
        session = self.store.session(step.get("cid"))
        session.step_depth = max(session.step_depth - 1, 0)

    def _retry(self, step: Dict[str, Any]) -> None:
        self.store.retry_count += 1
        if self._logs_testcases():
            self.store.session(step.get("cid")).step_depth = 0
            self.titles.testcase_title(self.store.current_test, self.store.retry_count)

    def _on_retry_failed(self, step: Dict[str, Any]) -> None:
        self._retry(step)

    def _on_retry_broken(self, step: Dict[str, Any]) -> None:
        if self.config.report_errors_instantly:
            self.failures.report_error(ErrorRecord.from_payload(step.get("assertion")), "generic-exception")
        self._retry(step)

    def _on_retry_validate_failure(self, message: Dict[str, Any]) -> None:
        if self.config.report_errors_instantly:
            self.failures.report_error(ErrorRecord.from_payload(message.get("assertion")), "error-message")

    def _on_validate_failure(self, data: Dict[str, Any]) -> None:
        if self.config.report_errors_instantly:
            self.failures.report_error(ErrorRecord.from_payload(data.get("assertion")), "error-message")
