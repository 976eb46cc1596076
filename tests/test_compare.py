from __future__ import annotations

from pathlib import Path

import pytest

from watch_harness import compare


def test_comparison_ignores_order_and_duplicates() -> None:
    result = compare.compare_events(
        ["a,CREATE", "a,CREATE", "b,DELETE"],
        ["b,DELETE", "a,CREATE"],
    )
    assert result.passed
    assert result.missing == []
    assert result.unexpected == []


def test_comparison_reports_differences() -> None:
    result = compare.compare_events(["a,CREATE", "c,WRITTEN"], ["a,CREATE", "b,DELETE"])

    assert not result.passed
    assert result.missing == ["b,DELETE"]
    assert result.unexpected == ["c,WRITTEN"]


def test_subset_is_not_equal() -> None:
    assert not compare.compare_events(["a,CREATE"], ["a,CREATE", "b,DELETE"]).passed


def test_load_expected_reads_lines_verbatim(tmp_path: Path) -> None:
    expected = tmp_path / "expected.txt"
    expected.write_text("f1,Create\n\nf1,Delete\nf1,Create\n")

    assert compare.load_expected(expected) == frozenset({"f1,Create", "f1,Delete"})


def test_write_expected_sorts_and_deduplicates(tmp_path: Path) -> None:
    target = tmp_path / "golden" / "expected.txt"
    compare.write_expected(target, ["b,Delete", "a,Create", "b,Delete"])
    assert target.read_text() == "a,Create\nb,Delete\n"


def test_render_report_pass(capsys: pytest.CaptureFixture[str]) -> None:
    result = compare.compare_events(["a,Create"], ["a,Create"])
    compare.render_report(result, Path("s.actions"), Path("s.expected"))

    out = capsys.readouterr().out
    assert "PASSED" in out
    assert "s.actions" in out and "s.expected" in out


def test_render_report_fail_dumps_both_sets(capsys: pytest.CaptureFixture[str]) -> None:
    result = compare.compare_events(["a,Create", "x,Written"], ["a,Create", "b,Delete"])
    compare.render_report(result, Path("s.actions"), Path("s.expected"))

    out = capsys.readouterr().out
    assert out.startswith("FAILED")
    expected_block = out.split("EXPECTED:")[1].split("OBTAINED:")[0]
    obtained_block = out.split("OBTAINED:")[1].split("MISSING:")[0]
    assert "a,Create" in expected_block and "b,Delete" in expected_block
    assert "a,Create" in obtained_block and "x,Written" in obtained_block
