"""Reporter interface definitions."""
from __future__ import annotations

import logging
from typing import Any, Iterable, List, Mapping, Optional, Sequence, Tuple

from specconsole.core.stats import RunStats

logger = logging.getLogger(__name__)

Event = Tuple[str, Optional[Mapping[str, Any]]]


class Reporter:
    """Interface for output renderers."""

    def dispatch(self, event: str, payload: Optional[Mapping[str, Any]] = None) -> None:  # pragma: no cover - interface
        raise NotImplementedError


class ReportManager:
    """Delivers runner events to the stats registry, then to every reporter."""

    def __init__(self, stats: RunStats, reporters: Sequence[Reporter]) -> None:
        self.stats = stats
        self._reporters = list(reporters)

    def emit(self, event: str, payload: Optional[Mapping[str, Any]] = None) -> None:
        payload = payload if payload is not None else {}
        logger.debug("event %s %s", event, dict(payload))
        self.stats.handle(event, payload)
        for reporter in self._reporters:
            reporter.dispatch(event, payload)

    def replay(self, events: Iterable[Event]) -> int:
        count = 0
        for event, payload in events:
            self.emit(event, payload)
            count += 1
        return count

    def reporters(self) -> List[Reporter]:
        return list(self._reporters)
