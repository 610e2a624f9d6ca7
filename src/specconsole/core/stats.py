"""Results registry built from the runner's event stream.

The reporter reads this registry when composing end-of-run blocks: runner
capabilities and session ids, suite/test trees per spec file, durations and
the list of failed tests.
"""
from __future__ import annotations

import hashlib
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

from .models import SuiteNode, Tally, TestRecord, bucket_for, errors_from_payload, payload_key, suite_uid

logger = logging.getLogger(__name__)

FAILED_BUCKETS = frozenset({"failing", "broken", "unresolved"})

TEST_STATE_EVENTS = {
    "test:pending": "pending",
    "test:pass": "pass",
    "test:fail": "fail",
    "test:broken": "broken",
    "test:unresolved": "unresolved",
    "test:unverified": "unverified",
    "test:unvalidated": "unvalidated",
}


@dataclass
class SpecStats:
    files: Sequence[str]
    suites: Dict[str, SuiteNode] = field(default_factory=dict)
    duration_ms: float = 0.0


@dataclass
class RunnerStats:
    cid: str
    capabilities: Mapping[str, Any] = field(default_factory=dict)
    session_id: Optional[str] = None
    config: Mapping[str, Any] = field(default_factory=dict)
    specs: Dict[str, SpecStats] = field(default_factory=dict)
    started_at: Optional[float] = None


class RunStats:
    """Registry of every runner session seen during one run."""

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self.runners: Dict[str, RunnerStats] = {}
        self.counts = Tally()
        self.duration_ms = 0.0
        self._started_at: Optional[float] = None
        self._failures: List[TestRecord] = []
        self._suite_stack: Dict[str, List[str]] = {}
        self._runner_specs: Dict[str, Sequence[str]] = {}

    # lookups -----------------------------------------------------------

    def runner(self, cid: Any) -> RunnerStats:
        key = str(cid)
        stats = self.runners.get(key)
        if stats is None:
            stats = RunnerStats(cid=key)
            self.runners[key] = stats
        return stats

    def get_spec_hash(self, runner: Mapping[str, Any]) -> str:
        specs = runner.get("specs") or self._runner_specs.get(str(runner.get("cid")), ())
        return hashlib.md5("".join(str(spec) for spec in specs).encode("utf-8")).hexdigest()

    def spec(self, runner: Mapping[str, Any]) -> SpecStats:
        stats = self.runner(runner.get("cid"))
        spec_hash = self.get_spec_hash(runner)
        spec = stats.specs.get(spec_hash)
        if spec is None:
            files = runner.get("specs") or self._runner_specs.get(stats.cid, ())
            spec = SpecStats(files=tuple(files))
            stats.specs[spec_hash] = spec
        return spec

    def get_failures(self) -> List[TestRecord]:
        return list(self._failures)

    # event intake ------------------------------------------------------

    def handle(self, event: str, payload: Optional[Mapping[str, Any]] = None) -> None:
        payload = payload or {}
        if event == "runner:init" or event == "runner:start":
            self._on_runner(event, payload)
        elif event == "suite:start":
            self._on_suite_start(payload)
        elif event == "suite:end":
            stack = self._suite_stack.get(str(payload.get("cid")), [])
            if stack:
                stack.pop()
        elif event == "test:start":
            self._test_record(payload)
        elif event in TEST_STATE_EVENTS:
            self._on_test_state(TEST_STATE_EVENTS[event], payload)
        elif event == "runner:end":
            self._on_runner_end(payload)
        elif event == "end":
            self._on_end(payload)

    def _on_runner(self, event: str, payload: Mapping[str, Any]) -> None:
        cid = str(payload.get("cid"))
        stats = self.runner(cid)
        if payload.get("capabilities") is not None:
            stats.capabilities = payload["capabilities"]
        session_id = payload.get("sessionID", payload.get("sessionId"))
        if session_id:
            stats.session_id = str(session_id)
        if payload.get("config") is not None:
            stats.config = payload["config"]
        if payload.get("specs"):
            self._runner_specs[cid] = tuple(payload["specs"])
        if event == "runner:start":
            now = self._clock()
            stats.started_at = now
            if self._started_at is None:
                self._started_at = now
            self._suite_stack[cid] = []
            files = tuple(payload.get("specs") or self._runner_specs.get(cid, ()))
            stats.specs[self.get_spec_hash({"cid": cid})] = SpecStats(files=files)
            self._failures = [record for record in self._failures if record.cid != cid]

    def _on_suite_start(self, payload: Mapping[str, Any]) -> None:
        cid = str(payload.get("cid"))
        uid = suite_uid(payload)
        spec = self.spec({"cid": cid})
        stack = self._suite_stack.setdefault(cid, [])
        if uid not in spec.suites:
            spec.suites[uid] = SuiteNode(uid=uid, title=str(payload.get("title", "")), depth=len(stack) + 1)
        stack.append(uid)

    def suite_for(self, payload: Mapping[str, Any]) -> Optional[SuiteNode]:
        """Suite owning a test payload: its known ``parentUid``, else the innermost open suite."""

        cid = str(payload.get("cid"))
        spec = self.spec({"cid": cid})
        parent = payload.get("parentUid")
        if parent is not None and str(parent) in spec.suites:
            return spec.suites[str(parent)]
        stack = self._suite_stack.get(cid)
        if stack:
            return spec.suites.get(stack[-1])
        return None

    def _test_record(self, payload: Mapping[str, Any]) -> TestRecord:
        cid, uid = payload_key(payload)
        title = str(payload.get("title", ""))
        suite = self.suite_for(payload)
        if suite is not None and uid in suite.tests:
            return suite.tests[uid]
        record = TestRecord(
            uid=uid,
            title=title,
            cid=cid,
            parent_title=suite.title if suite else "",
            owner_uid=suite.uid if suite else "",
        )
        if suite is not None:
            suite.tests[uid] = record
        else:
            logger.debug("test %r of cid %s reported outside of any suite", title, cid)
        return record

    def _on_test_state(self, state: str, payload: Mapping[str, Any]) -> None:
        record = self._test_record(payload)
        if record.state:
            record.retries += 1
        record.state = state
        record.errors = errors_from_payload(payload)
        if payload.get("retries") is not None:
            record.retries = int(payload["retries"])
        bucket = bucket_for(state)
        self.counts.increment(bucket)
        listed = record in self._failures
        if bucket in FAILED_BUCKETS and not listed:
            self._failures.append(record)
        elif bucket not in FAILED_BUCKETS and listed:
            self._failures.remove(record)

    def _on_runner_end(self, payload: Mapping[str, Any]) -> None:
        stats = self.runner(payload.get("cid"))
        spec = self.spec(payload)
        if payload.get("duration") is not None:
            spec.duration_ms = float(payload["duration"])
        elif stats.started_at is not None:
            spec.duration_ms = (self._clock() - stats.started_at) * 1000

    def _on_end(self, payload: Mapping[str, Any]) -> None:
        if payload.get("duration") is not None:
            self.duration_ms = float(payload["duration"])
        elif self._started_at is not None:
            self.duration_ms = (self._clock() - self._started_at) * 1000
