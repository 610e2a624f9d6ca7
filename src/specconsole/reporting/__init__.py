"""Reporting exports."""
from .base import ReportManager, Reporter
from .output import ConsoleOutput
from .spec_reporter import SpecReporter

__all__ = [
    "ConsoleOutput",
    "ReportManager",
    "Reporter",
    "SpecReporter",
]
