"""Compare observed watcher events with a hand-written expected-output file."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List

import typer

from watch_harness.events import EventSet, event_set


@dataclass(frozen=True)
class ComparisonResult:
    """Outcome of comparing observed events against expectations."""

    expected: EventSet
    obtained: EventSet

    @property
    def passed(self) -> bool:
        return self.expected == self.obtained

    @property
    def missing(self) -> List[str]:
        return sorted(self.expected - self.obtained)

    @property
    def unexpected(self) -> List[str]:
        return sorted(self.obtained - self.expected)


def load_expected(path: Path) -> EventSet:
    """Read expected events verbatim, one per line, ignoring blank lines."""

    lines = path.read_text(encoding="utf-8").splitlines()
    return event_set(line for line in lines if line.strip())


def write_expected(path: Path, events: Iterable[object]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    lines = sorted(event_set(events))
    path.write_text("".join(f"{line}\n" for line in lines), encoding="utf-8")


def compare_events(actual: Iterable[object], expected: Iterable[object]) -> ComparisonResult:
    return ComparisonResult(expected=event_set(expected), obtained=event_set(actual))


def _echo_set(title: str, events: Iterable[str]) -> None:
    typer.secho(title, fg=typer.colors.RED)
    for line in sorted(events):
        typer.echo(f"  {line}")


def render_report(result: ComparisonResult, actions_file: Path, results_file: Path) -> None:
    if result.passed:
        typer.echo(
            typer.style("PASSED", fg=typer.colors.GREEN, bold=True)
            + f": Output on running {actions_file} matched output in {results_file}."
        )
        return

    typer.secho("FAILED", fg=typer.colors.RED, bold=True)
    _echo_set("EXPECTED:", result.expected)
    _echo_set("OBTAINED:", result.obtained)
    if result.missing:
        _echo_set("MISSING:", result.missing)
    if result.unexpected:
        _echo_set("UNEXPECTED:", result.unexpected)
