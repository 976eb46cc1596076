"""Parse watcher action scripts into :mod:`watch_harness.actions` objects.

Script lines are split on single spaces.  The first token selects the command
and the remaining tokens are positional arguments::

    WatchDir <path>
    Create Dir|File <path>
    Delete <path>
    Write <path> "<content>"
    Move <from> <to>
    Wait <seconds>

Every path token is joined onto the base directory supplied by the caller.
``Write`` content is a single space-free token; multi-word content cannot be
expressed by this format.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Sequence, Tuple

from watch_harness.actions import (
    Action,
    CreateAction,
    DeleteAction,
    MoveAction,
    WaitAction,
    WatchDirDeclaration,
    WriteAction,
)
from watch_harness.errors import ConfigError, ParseError

logger = logging.getLogger(__name__)

COMMENT_PREFIX = "#"


def _parse_create(args: Sequence[str], basedir: Path) -> Action:
    kind, path = args
    return CreateAction(basedir / path, kind == "Dir")


def _parse_delete(args: Sequence[str], basedir: Path) -> Action:
    (path,) = args
    return DeleteAction(basedir / path)


def _parse_write(args: Sequence[str], basedir: Path) -> Action:
    path, quoted = args
    if len(quoted) < 2 or not (quoted.startswith('"') and quoted.endswith('"')):
        raise ValueError(f"content must be a double-quoted token, got {quoted}")
    return WriteAction(basedir / path, quoted[1:-1])


def _parse_move(args: Sequence[str], basedir: Path) -> Action:
    source, target = args
    return MoveAction(basedir / source, basedir / target)


def _parse_wait(args: Sequence[str], basedir: Path) -> Action:
    (seconds,) = args
    try:
        value = int(seconds)
    except ValueError:
        raise ValueError(f"wait duration must be an integer, got {seconds}") from None
    if value < 0:
        raise ValueError(f"wait duration must be non-negative, got {seconds}")
    return WaitAction(value)


def _parse_watch_dir(args: Sequence[str], basedir: Path) -> Action:
    (path,) = args
    return WatchDirDeclaration(basedir / path)


_COMMANDS: Dict[str, Tuple[int, Callable[[Sequence[str], Path], Action]]] = {
    "Create": (2, _parse_create),
    "Delete": (1, _parse_delete),
    "Write": (2, _parse_write),
    "Move": (2, _parse_move),
    "Wait": (1, _parse_wait),
    "WatchDir": (1, _parse_watch_dir),
}


def parse_action(line: str, basedir: Path, line_number: int = 1) -> Action:
    """Parse a single script line."""

    parts = line.split(" ")
    command, args = parts[0], parts[1:]
    if command not in _COMMANDS:
        raise ParseError(line_number, line, f"{command} isn't a valid command")

    arity, handler = _COMMANDS[command]
    if len(args) != arity:
        raise ParseError(
            line_number,
            line,
            f"{command} expects {arity} argument(s), got {len(args)}",
        )
    try:
        return handler(args, basedir)
    except ValueError as exc:
        raise ParseError(line_number, line, str(exc)) from exc


def parse_script(lines: Iterable[str], basedir: Path) -> List[Action]:
    """Parse every non-blank, non-comment line of a script."""

    actions: List[Action] = []
    for line_number, raw_line in enumerate(lines, start=1):
        line = raw_line.rstrip("\r\n")
        if not line.strip() or line.startswith(COMMENT_PREFIX):
            continue
        actions.append(parse_action(line, basedir, line_number))
    return actions


def parse_actions_file(path: Path, basedir: Path) -> List[Action]:
    actions = parse_script(path.read_text(encoding="utf-8").splitlines(), basedir)
    logger.debug("Parsed %d actions from %s", len(actions), path)
    return actions


def extract_watch_roots(actions: Sequence[Action]) -> Tuple[List[Path], List[Action]]:
    """Split leading ``WatchDir`` declarations off ``actions``.

    Returns the watch roots in declaration order together with the
    executable actions.  A directory creation for each root is placed at the
    front of the executable actions so the root exists once the script runs.
    """

    roots: List[Path] = []
    index = 0
    while index < len(actions) and isinstance(actions[index], WatchDirDeclaration):
        roots.append(actions[index].path)
        index += 1

    remaining = list(actions[index:])
    for action in remaining:
        if isinstance(action, WatchDirDeclaration):
            raise ConfigError(f"WatchDir {action.path} must precede every other action")

    if not roots:
        logger.warning("Script declares no watch roots")

    created: List[Action] = [CreateAction(root, True, exist_ok=True) for root in roots]
    return roots, created + remaining
