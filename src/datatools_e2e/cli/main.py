"""CLI entry point for datatools-e2e."""
from __future__ import annotations

import dataclasses
import sys
from typing import Any, Dict, Optional, Tuple

import click

from datatools_e2e import __version__
from datatools_e2e.config import RunConfig, load_config
from datatools_e2e.run import RunOptions, run as run_suite


CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}


class CliState:
    """Holds global CLI state."""

    def __init__(self, verbose: bool) -> None:
        self.verbose = verbose


def _print_version(_: click.Context, __: click.Parameter, value: bool) -> None:
    if not value or click.get_current_context().resilient_parsing:
        return
    click.echo(f"datatools-e2e {__version__}")
    raise click.exceptions.Exit()


@click.group(context_settings=CONTEXT_SETTINGS)
@click.option("--verbose", is_flag=True, help="Also stream the run log to stderr.")
@click.option(
    "--version",
    is_flag=True,
    callback=_print_version,
    expose_value=False,
    is_eager=True,
    help="Show the datatools-e2e version and exit.",
)
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """End-to-end browser tests for the Data Tools UI."""

    ctx.obj = CliState(verbose=verbose)


@cli.command()
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    required=True,
    help="YAML run file with credentials and endpoints.",
)
@click.option("--fail-fast/--no-fail-fast", default=None, help="Stop running tests after the first failure.")
@click.option("--coverage/--no-coverage", "collect_coverage", default=None, help="Forward browser coverage.")
@click.option("--headless/--headed", default=None, help="Run Chromium without a window.")
@click.option("--cases", "case_filters", type=str, help="Comma-separated test name filters (supports globs).")
@click.option("--skip-non-essential", is_flag=True, help="Skip the optional delete-scenario tests.")
@click.option("--list", "list_only", is_flag=True, help="List matched tests without running.")
@click.option(
    "--report",
    "report_format",
    type=click.Choice(["terminal", "json"]),
    default="terminal",
    show_default=True,
    help="Report format (terminal by default).",
)
@click.option("--report-path", type=str, help="When --report json, write to this path.")
@click.option("--no-color", is_flag=True, help="Disable ANSI colors in terminal output.")
@click.pass_obj
def run(
    state: CliState,
    config_path: str,
    fail_fast: Optional[bool],
    collect_coverage: Optional[bool],
    headless: Optional[bool],
    case_filters: Optional[str],
    skip_non_essential: bool,
    list_only: bool,
    report_format: Optional[str],
    report_path: Optional[str],
    no_color: bool,
) -> None:
    """Run the end-to-end suite against a running Data Tools instance."""

    options = RunOptions(
        cases=_split_csv(case_filters),
        list_only=list_only,
        report_format=report_format or "terminal",
        report_path=report_path,
        use_color=not no_color,
        verbose=state.verbose,
    )
    try:
        config = load_config(config_path)
        config = _apply_overrides(
            config,
            fail_fast=fail_fast,
            collect_coverage=collect_coverage,
            headless=headless,
            non_essential=False if skip_non_essential else None,
        )
        exit_code = run_suite(config, options)
    except Exception as exc:  # pragma: no cover - CLI error translation
        raise click.ClickException(str(exc)) from exc
    raise click.exceptions.Exit(exit_code)


def _apply_overrides(config: RunConfig, **overrides: Optional[bool]) -> RunConfig:
    changes: Dict[str, Any] = {key: value for key, value in overrides.items() if value is not None}
    if not changes:
        return config
    return dataclasses.replace(config, **changes)


def main(argv: Optional[list[str]] = None) -> int:
    """Program entry point for console_scripts shim."""

    argv = argv if argv is not None else sys.argv[1:]
    try:
        cli.main(args=argv, prog_name="datatools-e2e", standalone_mode=True)
    except click.ClickException as err:  # pragma: no cover - click handles display
        err.show()
        return err.exit_code
    except SystemExit as exc:  # click may raise exit code
        return int(exc.code or 0)
    return 0


def _split_csv(value: Optional[str]) -> Tuple[str, ...]:
    if not value:
        return tuple()
    parts = [part.strip() for part in value.split(",") if part.strip()]
    return tuple(parts)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
