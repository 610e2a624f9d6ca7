import pytest

from specconsole.config import ReporterConfig
from specconsole.core.stats import RunStats
from specconsole.reporting import ConsoleOutput, ReportManager, SpecReporter


@pytest.fixture
def make_reporter():
    """Build a manager/reporter pair with colors off and a frozen clock."""

    def factory(**options):
        options.setdefault("useColor", False)
        config = ReporterConfig.from_mapping(options)
        stats = RunStats(clock=lambda: 0.0)
        output = ConsoleOutput(stats, config)
        reporter = SpecReporter(output, config)
        return ReportManager(stats, [reporter]), reporter

    return factory
