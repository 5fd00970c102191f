"""Test the command line interface.

Run with: pytest tests/test_cli.py -v
"""

import json

import pytest
from click.testing import CliRunner

from keysplit.cli import cli


ACCOUNT = r"^Account: (\w+)$"


@pytest.fixture
def runner(monkeypatch):
    for name in ("KEYSPLIT_PATTERN", "KEYSPLIT_KEY_GROUP", "KEYSPLIT_DATED", "KEYSPLIT_ON_COLLISION",
                 "KEYSPLIT_NO_MATCH", "KEYSPLIT_PDF_METHOD", "KEYSPLIT_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    return CliRunner()


def test_success(runner, make_pdf, out_dir):
    path = make_pdf(["A", "A", "B"])

    result = runner.invoke(cli, ["-i", str(path), "-o", str(out_dir), "-m", ACCOUNT])

    assert result.exit_code == 0, result.output
    assert sorted(p.name for p in out_dir.iterdir()) == ["A.pdf", "B.pdf"]


def test_json_output(runner, make_pdf, out_dir):
    path = make_pdf(["A", "B", "B"])

    result = runner.invoke(cli, ["-i", str(path), "-o", str(out_dir), "-m", ACCOUNT, "--json"])

    assert result.exit_code == 0, result.output
    data = json.loads(result.output)
    assert [s["key"] for s in data["segments"]] == ["A", "B"]
    assert data["segments"][1]["page_range"] == {"start": 2, "end": 3}


def test_missing_input_exits_1(runner, tmp_path, out_dir):
    result = runner.invoke(cli, ["-i", str(tmp_path / "none.pdf"), "-o", str(out_dir), "-m", ACCOUNT])

    assert result.exit_code == 1
    assert "does not exist" in result.output


def test_wrong_format_exits_2(runner, tmp_path, out_dir):
    path = tmp_path / "letter.docx"
    path.write_bytes(b"PK")

    result = runner.invoke(cli, ["-i", str(path), "-o", str(out_dir), "-m", ACCOUNT])

    assert result.exit_code == 2


def test_corrupt_pdf_exits_2(runner, tmp_path, out_dir):
    path = tmp_path / "broken.pdf"
    path.write_bytes(b"not a pdf at all")

    result = runner.invoke(cli, ["-i", str(path), "-o", str(out_dir), "-m", ACCOUNT])

    assert result.exit_code == 2


def test_missing_output_dir_exits_3(runner, make_pdf, tmp_path):
    path = make_pdf(["A"])

    result = runner.invoke(cli, ["-i", str(path), "-o", str(tmp_path / "nowhere"), "-m", ACCOUNT])

    assert result.exit_code == 3


def test_no_split_mode_exits_4(runner, make_pdf, out_dir):
    path = make_pdf(["A"])

    result = runner.invoke(cli, ["-i", str(path), "-o", str(out_dir)])

    assert result.exit_code == 4


def test_invalid_pattern_exits_5(runner, make_pdf, out_dir):
    path = make_pdf(["A", "B"])

    result = runner.invoke(cli, ["-i", str(path), "-o", str(out_dir), "-m", r"Account: (\w+"])

    assert result.exit_code == 5
    assert list(out_dir.iterdir()) == []


def test_collision_fail_exits_7(runner, make_pdf, out_dir):
    path = make_pdf(["A", "B", "A"])

    result = runner.invoke(cli, [
        "-i", str(path), "-o", str(out_dir), "-m", ACCOUNT, "--on-collision", "fail"
    ])

    assert result.exit_code == 7


def test_dated_and_named_group(runner, make_pdf, out_dir):
    path = make_pdf(["A", "B"])

    result = runner.invoke(cli, [
        "-i", str(path), "-o", str(out_dir),
        "-m", r"Account: (?P<acct>\w+)", "-g", "acct", "-d"
    ])

    assert result.exit_code == 0, result.output
    assert all(p.name[8] == "_" for p in out_dir.iterdir())


def test_explicit_and_verbose_flags(runner, make_pdf, out_dir):
    path = make_pdf(["A", "B"])

    result = runner.invoke(cli, ["-i", str(path), "-o", str(out_dir), "-m", ACCOUNT, "-v", "-e"])

    assert result.exit_code == 0, result.output
    assert len(list(out_dir.iterdir())) == 2


def test_collision_policy_from_environment(runner, make_pdf, out_dir, monkeypatch):
    monkeypatch.setenv("KEYSPLIT_ON_COLLISION", "fail")
    path = make_pdf(["A", "B", "A"])

    result = runner.invoke(cli, ["-i", str(path), "-o", str(out_dir), "-m", ACCOUNT])

    assert result.exit_code == 7


def test_command_line_beats_environment(runner, make_pdf, out_dir, monkeypatch):
    monkeypatch.setenv("KEYSPLIT_ON_COLLISION", "fail")
    path = make_pdf(["A", "B", "A"])

    result = runner.invoke(cli, [
        "-i", str(path), "-o", str(out_dir), "-m", ACCOUNT, "--on-collision", "suffix"
    ])

    assert result.exit_code == 0, result.output
    assert sorted(p.name for p in out_dir.iterdir()) == ["A.pdf", "A_2.pdf", "B.pdf"]


def test_key_group_and_no_match_from_environment(runner, make_pdf, out_dir, monkeypatch):
    monkeypatch.setenv("KEYSPLIT_KEY_GROUP", "acct")
    monkeypatch.setenv("KEYSPLIT_NO_MATCH", "fail")
    path = make_pdf(["A", None])

    result = runner.invoke(cli, ["-i", str(path), "-o", str(out_dir), "-m", r"Account: (?P<acct>\w+)"])

    assert result.exit_code == 6
    assert "page 2" in result.output


def test_unreadable_page_exits_6(runner, make_flaky, out_dir):
    path = make_flaky(["A", "B", "B"])

    result = runner.invoke(cli, ["-i", str(path), "-o", str(out_dir), "-m", ACCOUNT])

    assert result.exit_code == 6
    assert "page 3" in result.output
    assert sorted(p.name for p in out_dir.iterdir()) == ["A.txt"]


def test_split_into_source_directory(runner, make_pdf, tmp_path):
    path = make_pdf([None, "A"], name="scan.pdf")

    result = runner.invoke(cli, ["-i", str(path), "-o", str(tmp_path), "-m", ACCOUNT])

    assert result.exit_code == 0, result.output
    assert sorted(p.name for p in tmp_path.iterdir()) == ["A.pdf", "scan.pdf", "scan_2.pdf"]
