"""Numbered failure blocks and stack trace cleanup."""
from __future__ import annotations

import re
from typing import Iterable, List, Optional

from specconsole.config import ReporterConfig
from specconsole.core.models import ErrorRecord, TestRecord
from specconsole.core.symbols import FailureCounter

from .output import ConsoleOutput

# Frames from the runner's own tooling and separator rules.
STACKTRACE_FILTER = re.compile(r"(node_modules[/\\](\w+)*|wdio-sync/build|site-packages[/\\]|- - - - -)")

FRAME_PREFIXES = ("at ", 'File "')


def _is_frame(line: str) -> bool:
    return line.lstrip().startswith(FRAME_PREFIXES)


def clean_stack(error: ErrorRecord) -> ErrorRecord:
    """Return a copy of ``error`` whose stack keeps only user call frames."""

    if not error.stack:
        return error
    lines = [line for line in error.stack.split("\n") if _is_frame(line) and not STACKTRACE_FILTER.search(line)]
    return error.with_stack("\n".join(lines) or None)


def message_color(error: ErrorRecord, test: Optional[TestRecord] = None) -> str:
    if error.unresolved or (test is not None and test.unresolved):
        return "unresolved"
    if error.matcher_name is None and error.stack:
        return "generic-exception"
    return "error-message"


class FailureRenderer:
    """Formats failing tests and single errors for the console."""

    def __init__(self, output: ConsoleOutput, config: ReporterConfig) -> None:
        self._output = output
        self._config = config

    def prepare(self, error: ErrorRecord) -> ErrorRecord:
        if self._config.clean_stack_traces:
            return clean_stack(error)
        return error

    def format_error(self, error: ErrorRecord, color: str) -> str:
        lines: List[str] = [self._output.color(color, line) for line in error.message.strip().split("\n")]
        if error.stack:
            lines.extend(self._output.color("error-stack", line) for line in error.stack.split("\n"))
        return "\n".join(lines) + "\n"

    def render_list(self, failures: Iterable[TestRecord], counter: FailureCounter) -> str:
        """Numbered blocks for ``failures`` in the order given.

        A test that already drew a glyph number keeps that number here.
        """

        output = ""
        for test in failures:
            number = counter.number_for(test.key)
            output += "\n"
            output += self._output.color("error-title", f"{number}) {test.print_title.strip()}:") + "\n\n"
            for error in test.errors or [ErrorRecord.from_payload(None)]:
                error = self.prepare(error)
                output += self.format_error(error, message_color(error, test))
                output += "\n"
        return output

    def render_error(self, error: ErrorRecord, color: str) -> str:
        return "\n" + self.format_error(self.prepare(error), color) + "\n"

    def report_error(self, error: ErrorRecord, color: str) -> None:
        self._output.log(self.render_error(error, color))
