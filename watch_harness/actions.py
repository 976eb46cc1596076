"""Filesystem actions replayed by the watcher conformance harness.

Each script line becomes one of the frozen dataclasses below.  The executor
dispatches over the concrete type; adding a new action means adding a branch
to :func:`execute_action` as well.
"""

from __future__ import annotations

import logging
import shutil
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

from watch_harness.errors import ExecutionError

logger = logging.getLogger(__name__)


class Action:
    """Common base of every script action."""


@dataclass(frozen=True)
class CreateAction(Action):
    path: Path
    is_directory: bool
    exist_ok: bool = False


@dataclass(frozen=True)
class DeleteAction(Action):
    path: Path


@dataclass(frozen=True)
class WriteAction(Action):
    path: Path
    content: str


@dataclass(frozen=True)
class MoveAction(Action):
    from_path: Path
    to_path: Path


@dataclass(frozen=True)
class WaitAction(Action):
    seconds: int


@dataclass(frozen=True)
class WatchDirDeclaration(Action):
    """Declares a watch root.  Never executed."""

    path: Path


def _create(action: CreateAction) -> None:
    if action.is_directory:
        action.path.mkdir(exist_ok=action.exist_ok)
    else:
        action.path.touch()


def _delete(action: DeleteAction) -> None:
    if action.path.is_dir():
        shutil.rmtree(action.path)
    else:
        action.path.unlink()


def execute_action(action: Action) -> None:
    """Perform the filesystem side effect of ``action``.

    ``OSError`` from the underlying operation is re-raised as
    :class:`ExecutionError`.
    """

    if isinstance(action, WatchDirDeclaration):
        raise TypeError("WatchDir declarations cannot be executed")

    logger.debug("Executing %s", action)
    try:
        if isinstance(action, CreateAction):
            _create(action)
        elif isinstance(action, DeleteAction):
            _delete(action)
        elif isinstance(action, WriteAction):
            action.path.write_text(action.content, encoding="utf-8")
        elif isinstance(action, MoveAction):
            action.from_path.rename(action.to_path)
        elif isinstance(action, WaitAction):
            time.sleep(action.seconds)
        else:
            raise TypeError(f"Unsupported action type {type(action).__name__}")
    except OSError as exc:
        raise ExecutionError(action, exc) from exc


def execute_all(actions: Iterable[Action]) -> int:
    """Execute ``actions`` in order, stopping at the first failure."""

    count = 0
    for action in actions:
        execute_action(action)
        count += 1
    logger.info("Executed %d actions", count)
    return count
