"""Dataclasses shared by the state store, the stats registry and the renderers."""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple


DEFAULT_ERROR_MESSAGE = "Unknown error"

# Tally bucket per reported test state; anything else lands in "unresolved".
_BUCKETS = {
    "pass": "passing",
    "passing": "passing",
    "pending": "pending",
    "fail": "failing",
    "failing": "failing",
    "broken": "broken",
}


def bucket_for(state: Optional[str]) -> str:
    """Return the tally bucket a test state is counted in."""

    return _BUCKETS.get(state or "", "unresolved")


@dataclass(frozen=True)
class ErrorRecord:
    """Error attached to a failing test."""

    message: str
    stack: Optional[str] = None
    matcher_name: Optional[str] = None
    unresolved: bool = False

    @classmethod
    def from_payload(cls, raw: Any) -> "ErrorRecord":
        if isinstance(raw, ErrorRecord):
            return raw
        if raw is None:
            return cls(message=DEFAULT_ERROR_MESSAGE)
        if isinstance(raw, str):
            return cls(message=raw)
        if isinstance(raw, Mapping):
            message = raw.get("message")
            return cls(
                message=str(message) if message is not None else DEFAULT_ERROR_MESSAGE,
                stack=raw.get("stack") or None,
                matcher_name=raw.get("matcherName", raw.get("matcher_name")),
                unresolved=bool(raw.get("unresolved", False)),
            )
        if isinstance(raw, BaseException):
            return cls(message=str(raw) or type(raw).__name__)
        return cls(message=str(raw))

    def with_stack(self, stack: Optional[str]) -> "ErrorRecord":
        return replace(self, stack=stack)


def payload_key(payload: Mapping[str, Any]) -> Tuple[str, str]:
    """Identity of a test payload: its session and its uid (or title)."""

    return (str(payload.get("cid")), str(payload.get("uid") or payload.get("title", "")))


def suite_uid(suite: Mapping[str, Any]) -> str:
    return str(suite.get("uid", suite.get("title", "")))


def failure_key(payload: Mapping[str, Any], owner_uid: Optional[str]) -> Tuple[str, str, str]:
    """Failure number memo key: session, owning suite and test."""

    cid, uid = payload_key(payload)
    return (cid, owner_uid or "", uid)


def errors_from_payload(payload: Mapping[str, Any]) -> List[ErrorRecord]:
    """Collect ``errs`` (or the single ``err``) of a test payload."""

    errs = payload.get("errs")
    if errs:
        return [ErrorRecord.from_payload(err) for err in errs]
    if "err" in payload:
        return [ErrorRecord.from_payload(payload.get("err"))]
    return []


@dataclass(eq=False)
class TestRecord:
    """A test as tracked by the stats registry."""

    __test__ = False  # keep pytest from collecting this class

    uid: str
    title: str
    cid: str
    state: str = ""
    errors: List[ErrorRecord] = field(default_factory=list)
    retries: int = 0
    parent_title: str = ""
    owner_uid: str = ""

    @property
    def key(self) -> Tuple[str, str, str]:
        return (self.cid, self.owner_uid, self.uid)

    @property
    def print_title(self) -> str:
        if self.parent_title:
            return f"{self.parent_title} {self.title}"
        return self.title

    @property
    def unresolved(self) -> bool:
        return bucket_for(self.state) == "unresolved" and self.state != ""


@dataclass
class SuiteNode:
    """A suite with its tests in arrival order."""

    uid: str
    title: str
    depth: int = 0
    tests: Dict[str, TestRecord] = field(default_factory=dict)

    @property
    def is_before_all(self) -> bool:
        return self.uid.startswith('"before all"')


@dataclass
class Tally:
    """Per-session count of tests observed in each state."""

    passing: int = 0
    pending: int = 0
    failing: int = 0
    broken: int = 0
    unresolved: int = 0

    FIELDS = ("passing", "pending", "failing", "broken", "unresolved")

    def increment(self, bucket: str, amount: int = 1) -> None:
        if bucket not in self.FIELDS:
            bucket = "unresolved"
        setattr(self, bucket, getattr(self, bucket) + amount)

    def items(self) -> List[Tuple[str, int]]:
        return [(name, getattr(self, name)) for name in self.FIELDS]

    @property
    def total(self) -> int:
        return sum(count for _, count in self.items())

    def reset(self) -> None:
        for name in self.FIELDS:
            setattr(self, name, 0)


@dataclass
class RunnerSession:
    """Mutable rendering state of one runner session (one ``cid``)."""

    cid: str
    depth: int = 0
    suite_depths: Dict[str, int] = field(default_factory=dict)
    specs: Sequence[str] = field(default_factory=tuple)
    tally: Tally = field(default_factory=Tally)
    current_suite_uid: Optional[str] = None
    step_depth: int = 0
