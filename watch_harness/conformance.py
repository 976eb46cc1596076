"""Replay an action script against the filesystem watcher and check its events.

Usage::

    watcher-test ACTIONS_FILE RESULTS_FILE BASEDIR

The script's ``WatchDir`` roots are handed to the watcher, the remaining
actions run against the live filesystem, and the watcher's output is made
relative to BASEDIR and compared, as a set, with RESULTS_FILE.  Timing between
actions and watcher shutdown relies on the script's ``Wait`` lines.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

import typer

from watch_harness.actions import execute_all
from watch_harness.compare import compare_events, load_expected, render_report, write_expected
from watch_harness.config import HarnessConfig
from watch_harness.errors import (
    ConfigError,
    ExecutionError,
    HarnessError,
    LaunchError,
    MalformedEventError,
    ParseError,
)
from watch_harness.events import normalize_events
from watch_harness.script_parser import extract_watch_roots, parse_actions_file
from watch_harness.watcher_process import WatcherProcess

EXIT_SUCCESS = 0
EXIT_MISMATCH = 1
EXIT_ERR_PARSE = 3
EXIT_ERR_CONFIG = 4
EXIT_ERR_LAUNCH = 5
EXIT_ERR_EXECUTION = 6
EXIT_ERR_OUTPUT = 7

_EXIT_CODES = (
    (ParseError, EXIT_ERR_PARSE),
    (ConfigError, EXIT_ERR_CONFIG),
    (LaunchError, EXIT_ERR_LAUNCH),
    (ExecutionError, EXIT_ERR_EXECUTION),
    (MalformedEventError, EXIT_ERR_OUTPUT),
)

logger = logging.getLogger(__name__)

app = typer.Typer(add_completion=False, help="Filesystem watcher conformance harness")


def _exit_code_for(exc: HarnessError) -> int:
    for error_type, code in _EXIT_CODES:
        if isinstance(exc, error_type):
            return code
    return EXIT_ERR_CONFIG


def run_harness(
    actions_file: Path,
    results_file: Path,
    basedir: str,
    config: HarnessConfig,
    *,
    build: bool = True,
    strict: bool = False,
    update_expected: bool = False,
) -> int:
    """Run one script end to end and return the process exit code."""

    actions = parse_actions_file(actions_file, Path(basedir))
    watch_roots, actions = extract_watch_roots(actions)
    if not watch_roots and not config.allow_empty_roots:
        raise ConfigError(f"{actions_file} declares no WatchDir roots")

    expected = None
    if not update_expected:
        try:
            expected = load_expected(results_file)
        except OSError as exc:
            raise ConfigError(f"Unable to read expected output {results_file}: {exc}") from exc

    with WatcherProcess(config) as watcher:
        if build:
            watcher.build()
        watcher.start(watch_roots)
        execute_all(actions)
        watcher.terminate()
        raw_lines = watcher.collected_output()

    logger.debug("Captured %d watcher lines", len(raw_lines))
    events = normalize_events(raw_lines, basedir)

    if update_expected:
        write_expected(results_file, events)
        typer.secho(f"Expected output written to {results_file}", fg=typer.colors.GREEN)
        return EXIT_SUCCESS

    result = compare_events(events, expected)
    render_report(result, actions_file, results_file)
    if strict and not result.passed:
        return EXIT_MISMATCH
    return EXIT_SUCCESS


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


@app.command()
def run(
    actions_file: Path = typer.Argument(..., exists=True, dir_okay=False, help="Action script to replay"),
    results_file: Path = typer.Argument(..., dir_okay=False, help="Expected output, one 'path,kind' per line"),
    basedir: str = typer.Argument(..., help="Directory every script path is relative to"),
    config_path: Optional[Path] = typer.Option(None, "--config", exists=True, dir_okay=False, help="YAML harness configuration"),
    no_build: bool = typer.Option(False, "--no-build", help="Skip the watcher build step"),
    strict: bool = typer.Option(False, "--strict", help="Exit with status 1 when the comparison fails"),
    update_expected: bool = typer.Option(False, "--update-expected", help="Write observed events to RESULTS_FILE instead of comparing"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Replay ACTIONS_FILE under the watcher and compare with RESULTS_FILE."""

    _configure_logging(verbose)
    try:
        config = HarnessConfig.load(config_path)
        code = run_harness(
            actions_file,
            results_file,
            basedir,
            config,
            build=not no_build,
            strict=strict,
            update_expected=update_expected,
        )
    except HarnessError as exc:
        typer.secho(f"watcher-test: {exc}", err=True, fg=typer.colors.RED)
        raise typer.Exit(_exit_code_for(exc)) from exc
    raise typer.Exit(code)


def main() -> None:  # pragma: no cover - exercised via Typer
    app()


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    main()
