from __future__ import annotations

from pathlib import Path

import pytest

from watch_harness import actions
from watch_harness.errors import ExecutionError


def test_create_file_and_directory(tmp_path: Path) -> None:
    actions.execute_action(actions.CreateAction(tmp_path / "d1", True))
    actions.execute_action(actions.CreateAction(tmp_path / "d1" / "f1", False))

    assert (tmp_path / "d1").is_dir()
    assert (tmp_path / "d1" / "f1").is_file()


def test_create_existing_directory_requires_exist_ok(tmp_path: Path) -> None:
    existing = tmp_path / "root"
    existing.mkdir()

    actions.execute_action(actions.CreateAction(existing, True, exist_ok=True))
    with pytest.raises(ExecutionError):
        actions.execute_action(actions.CreateAction(existing, True))


def test_write_overwrites_content(tmp_path: Path) -> None:
    target = tmp_path / "f"
    target.write_text("previous contents")

    actions.execute_action(actions.WriteAction(target, "hola"))

    assert target.read_text() == "hola"


def test_move_renames_path(tmp_path: Path) -> None:
    source = tmp_path / "from"
    source.mkdir()
    (source / "child").touch()

    actions.execute_action(actions.MoveAction(source, tmp_path / "to"))

    assert not source.exists()
    assert (tmp_path / "to" / "child").exists()


def test_move_onto_existing_directory_does_not_nest(tmp_path: Path) -> None:
    source = tmp_path / "f1"
    source.write_text("payload")
    target = tmp_path / "d"
    target.mkdir()
    (target / "keep").touch()

    with pytest.raises(ExecutionError):
        actions.execute_action(actions.MoveAction(source, target))

    assert source.read_text() == "payload"
    assert sorted(p.name for p in target.iterdir()) == ["keep"]


def test_delete_branches_on_directory(tmp_path: Path) -> None:
    tree = tmp_path / "tree"
    (tree / "nested").mkdir(parents=True)
    (tree / "nested" / "leaf").touch()
    single = tmp_path / "single"
    single.touch()

    actions.execute_action(actions.DeleteAction(tree))
    actions.execute_action(actions.DeleteAction(single))

    assert not tree.exists()
    assert not single.exists()


def test_delete_missing_path_raises_execution_error(tmp_path: Path) -> None:
    action = actions.DeleteAction(tmp_path / "ghost")
    with pytest.raises(ExecutionError) as excinfo:
        actions.execute_action(action)

    assert excinfo.value.action == action
    assert isinstance(excinfo.value.cause, FileNotFoundError)


def test_wait_sleeps(monkeypatch: pytest.MonkeyPatch) -> None:
    slept = []
    monkeypatch.setattr(actions.time, "sleep", slept.append)

    actions.execute_action(actions.WaitAction(3))

    assert slept == [3]


def test_watch_dir_declaration_cannot_execute(tmp_path: Path) -> None:
    with pytest.raises(TypeError):
        actions.execute_action(actions.WatchDirDeclaration(tmp_path))


def test_execute_all_aborts_on_first_failure(tmp_path: Path) -> None:
    script = [
        actions.CreateAction(tmp_path / "a", False),
        actions.DeleteAction(tmp_path / "missing"),
        actions.CreateAction(tmp_path / "b", False),
    ]

    with pytest.raises(ExecutionError):
        actions.execute_all(script)

    assert (tmp_path / "a").exists()
    assert not (tmp_path / "b").exists()
