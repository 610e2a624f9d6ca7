"""Per-session counters and indentation depth maps."""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Sequence

from .models import RunnerSession, Tally, bucket_for
from .symbols import FailureCounter

logger = logging.getLogger(__name__)

SUITE_INDENT = "    "
STEP_INDENT_WIDTH = 2

SPEC_PHASE = "[SPEC] "
TESTCASE_PHASE = "[TESTCASE] "


class StateStore:
    """Owns all runner sessions plus the run-wide phase flag and failure counter."""

    def __init__(self) -> None:
        self.sessions: Dict[str, RunnerSession] = {}
        self.failures = FailureCounter()
        self.started_specs = False
        self.retry_count = 0
        self.current_test: Optional[Dict[str, Any]] = None

    def session(self, cid: Any) -> RunnerSession:
        key = str(cid)
        session = self.sessions.get(key)
        if session is None:
            session = RunnerSession(cid=key)
            self.sessions[key] = session
        return session

    def tally(self, cid: Any) -> Tally:
        return self.session(cid).tally

    @property
    def phase_tag(self) -> str:
        return SPEC_PHASE if self.started_specs else TESTCASE_PHASE

    def start_specs(self, cid: Any) -> bool:
        """Enter the spec phase. Returns False when it had already begun."""

        if self.started_specs:
            return False
        self.session(cid).tally.reset()
        self.failures.reset()
        self.started_specs = True
        return True

    def on_run_start(self, cid: Any, specs: Optional[Sequence[str]] = None) -> RunnerSession:
        session = self.session(cid)
        session.suite_depths = {}
        session.depth = 0
        session.current_suite_uid = None
        session.step_depth = 0
        session.specs = tuple(specs or ())
        session.tally.reset()
        return session

    def on_suite_start(self, cid: Any, uid: str, parent_uid: Optional[str] = None) -> int:
        session = self.session(cid)
        if parent_uid is not None and parent_uid in session.suite_depths:
            depth = session.suite_depths[parent_uid] + 1
        else:
            depth = session.depth + 1
        session.suite_depths[uid] = depth
        session.depth = depth
        session.current_suite_uid = uid
        return depth

    def on_suite_end(self, cid: Any) -> int:
        session = self.session(cid)
        if session.depth == 0:
            logger.debug("unbalanced suite:end for cid %s", session.cid)
            return 0
        session.depth -= 1
        return session.depth

    def on_test_state(self, cid: Any, state: Optional[str]) -> str:
        bucket = bucket_for(state)
        self.session(cid).tally.increment(bucket)
        return bucket

    def depth(self, cid: Any, uid: Optional[str]) -> int:
        if uid is None:
            return 0
        return self.session(cid).suite_depths.get(uid, 0)

    def indent(self, cid: Any, uid: Optional[str]) -> str:
        # depth 0 and depth 1 both render flush left
        depth = self.depth(cid, uid)
        if depth <= 1:
            return ""
        return SUITE_INDENT * (depth - 1)

    def step_indent(self, cid: Any, inline: int = 0) -> str:
        width = inline + self.session(cid).step_depth * STEP_INDENT_WIDTH
        return " " * max(width, 0)
