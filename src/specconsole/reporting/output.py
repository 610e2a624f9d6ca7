"""Line output, color lookup and the run-wide epilogue."""
from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, List, Optional, TextIO

import click

from specconsole.config import ReporterConfig
from specconsole.core.duration import humanize_duration
from specconsole.core.stats import RunStats
from specconsole.core.symbols import OK_SYMBOL, color_for

from .theme import colorize


class ConsoleOutput:
    """Writes reporter text to a stream and keeps a transcript of it."""

    symbols = {"ok": OK_SYMBOL, "err": "✖"}

    def __init__(
        self,
        stats: RunStats,
        config: Optional[ReporterConfig] = None,
        *,
        stream: Optional[TextIO] = None,
        humanize: Callable[[float], str] = humanize_duration,
    ) -> None:
        self.stats = stats
        self.config = config or ReporterConfig()
        self.humanize = humanize
        self._stream = stream
        self._transcript: List[str] = []

    def color(self, tag: Optional[str], text: Any) -> str:
        return colorize(tag, text, use_color=self.config.use_color)

    def log(self, text: str = "") -> None:
        self._transcript.append(text)
        click.echo(text, file=self._stream)

    @property
    def transcript(self) -> str:
        return "\n".join(click.unstyle(line) for line in self._transcript)

    def epilogue(self) -> None:
        """Print the aggregate counts of every session once the run is over."""

        lines = ["", "Totals:"]
        shown_duration = False
        for bucket, count in self.stats.counts.items():
            if count == 0:
                continue
            color = color_for(bucket)
            line = f" {self.color(color, count)} {self.color(color, self.config.label_for(bucket))}"
            if not shown_duration:
                line += f" ({self.humanize(self.stats.duration_ms)})"
                shown_duration = True
            lines.append(line)
        if not shown_duration:
            lines.append(f" 0 tests ({self.humanize(self.stats.duration_ms)})")
        self.log("\n".join(lines) + "\n")

    def write_complete_output(self) -> Optional[Path]:
        if not self.config.output_file:
            return None
        path = Path(self.config.output_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.transcript + "\n", encoding="utf-8")
        return path
