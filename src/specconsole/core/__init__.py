"""Core models and helpers exposed at the package level."""
from .descriptor import browser_combo
from .duration import humanize_duration
from .models import ErrorRecord, RunnerSession, SuiteNode, Tally, TestRecord
from .state import StateStore
from .stats import RunStats
from .symbols import FailureCounter, color_for, symbol_for

__all__ = [
    "ErrorRecord",
    "RunnerSession",
    "SuiteNode",
    "Tally",
    "TestRecord",
    "StateStore",
    "RunStats",
    "FailureCounter",
    "browser_combo",
    "color_for",
    "humanize_duration",
    "symbol_for",
]
