"""Normalize raw watcher output into base-dir-relative events."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import FrozenSet, Iterable, List

from watch_harness.errors import MalformedEventError

EventSet = FrozenSet[str]


@dataclass(frozen=True)
class NormalizedEvent:
    path: str
    kind: str

    def __str__(self) -> str:
        return f"{self.path},{self.kind}"


def _relative_path(full_path: str, basedir: str) -> str:
    parts = Path(full_path).parts
    remaining = parts[len(Path(basedir).parts):]
    # An event on basedir itself has no remainder and renders as "".
    if not remaining:
        return ""
    return Path(*remaining).as_posix()


def normalize_event(line: str, basedir: str) -> NormalizedEvent:
    """Strip ``basedir``'s leading components from a ``path,kind`` line.

    Only the number of components in ``basedir`` matters, so the watcher may
    echo either the absolute or the relative form of the roots it was given.
    """

    fields = line.split(",")
    if len(fields) != 2 or not fields[0] or not fields[1]:
        raise MalformedEventError(line)
    full_path, kind = fields
    return NormalizedEvent(_relative_path(full_path, basedir), kind)


def normalize_events(lines: Iterable[str], basedir: str) -> List[NormalizedEvent]:
    return [normalize_event(line, basedir) for line in lines if line.strip()]


def event_set(events: Iterable[object]) -> EventSet:
    """Collapse events (or pre-rendered lines) into an order-free set."""

    return frozenset(str(event) for event in events)
