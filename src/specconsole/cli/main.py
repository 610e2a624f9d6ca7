"""CLI entry point for specconsole."""
from __future__ import annotations

import dataclasses
import sys
from typing import Optional

import click
from colorama import init as colorama_init

from specconsole import __version__
from specconsole.config import ReporterConfig, load_config
from specconsole.core.stats import RunStats
from specconsole.events import load_events
from specconsole.log import setup_logging
from specconsole.reporting import ConsoleOutput, ReportManager, SpecReporter


CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}


class CliState:
    """Holds global CLI state."""

    def __init__(self, verbose: bool) -> None:
        self.verbose = verbose


def _print_version(_: click.Context, __: click.Parameter, value: bool) -> None:
    if not value or click.get_current_context().resilient_parsing:
        return
    click.echo(f"specconsole {__version__}")
    raise click.exceptions.Exit()


@click.group(context_settings=CONTEXT_SETTINGS)
@click.option("--verbose", is_flag=True, help="Enable verbose logging output.")
@click.option(
    "--version",
    is_flag=True,
    callback=_print_version,
    expose_value=False,
    is_eager=True,
    help="Show the specconsole version and exit.",
)
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """Top level CLI group for specconsole."""

    setup_logging("DEBUG" if verbose else "WARNING")
    ctx.obj = CliState(verbose=verbose)


@cli.command()
@click.argument("events_path", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    help="YAML reporter config file.",
)
@click.option("--instant", is_flag=True, help="Print results as events arrive instead of per session.")
@click.option("--output-file", type=str, help="Also write the complete output to this path.")
@click.option("--no-color", is_flag=True, help="Disable ANSI colors in terminal output.")
@click.pass_obj
def replay(
    state: CliState,
    events_path: str,
    config_path: Optional[str],
    instant: bool,
    output_file: Optional[str],
    no_color: bool,
) -> None:
    """Render a recorded runner event stream (JSON lines or YAML)."""

    try:
        config = load_config(config_path) if config_path else ReporterConfig()
        events = load_events(events_path)
    except Exception as exc:  # pragma: no cover - CLI error translation
        raise click.ClickException(str(exc)) from exc
    overrides = {}
    if instant:
        overrides["report_results_instantly"] = True
    if output_file:
        overrides["output_file"] = output_file
    if no_color:
        overrides["use_color"] = False
    config = dataclasses.replace(config, **overrides)

    colorama_init()
    stats = RunStats()
    output = ConsoleOutput(stats, config)
    manager = ReportManager(stats, [SpecReporter(output, config)])
    count = manager.replay(events)
    if state.verbose:
        click.echo(f"replayed {count} event(s)", err=True)


def main(argv: Optional[list[str]] = None) -> int:
    """Program entry point for console_scripts shim."""

    argv = argv if argv is not None else sys.argv[1:]
    try:
        cli.main(args=argv, prog_name="specconsole", standalone_mode=True)
    except click.ClickException as err:  # pragma: no cover - click handles display
        err.show()
        return err.exit_code
    except SystemExit as exc:  # click may raise exit code
        return int(exc.code or 0)
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
