"""End-to-end CLI tests."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from slopscan import __version__
from slopscan.cli import app
from slopscan.output import ReportError
from tests.helpers_parse import FIXTURES

runner = CliRunner()

REDUNDANT = FIXTURES / "slop" / "redundant_comments.js"
CLEAN = FIXTURES / "clean" / "well_written.js"


@pytest.fixture(autouse=True)
def _isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)


def _scan_json(*args: str) -> tuple[int, list[dict]]:
    result = runner.invoke(app, ["scan", *args, "--format", "json"])
    return result.exit_code, json.loads(result.stdout)


def test_root_help_lists_commands() -> None:
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    for command in ("scan", "rules", "config", "config-init"):
        assert command in result.stdout


def test_version_flag() -> None:
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert result.stdout.strip() == __version__


def test_scan_json_reports_redundant_comments() -> None:
    exit_code, findings = _scan_json(str(REDUNDANT))

    assert exit_code == 1
    assert [item["line"] for item in findings] == [6, 10, 14, 43, 47, 51]
    assert {item["rule_id"] for item in findings} == {"slop-001"}
    assert {item["severity"] for item in findings} == {"warn"}
    assert all(item["message"].startswith("Redundant Comment: ") for item in findings)
    assert all(item["file"] == str(REDUNDANT) for item in findings)


def test_scan_threshold_above_warn_exits_clean() -> None:
    exit_code, findings = _scan_json(str(REDUNDANT), "--severity-threshold", "error")
    assert exit_code == 0
    assert findings == []


def test_scan_clean_inputs_exit_zero() -> None:
    exit_code, findings = _scan_json(str(CLEAN))
    assert exit_code == 0
    assert findings == []

    result = runner.invoke(app, ["scan", str(CLEAN.parent)])
    assert result.exit_code == 0
    assert "No issues found in 1 file(s)." in result.stdout


def test_scan_missing_path_exits_zero() -> None:
    result = runner.invoke(app, ["scan", "does/not/exist"])
    assert result.exit_code == 0


def test_scan_directory_is_single_sorted_array() -> None:
    exit_code, findings = _scan_json(str(FIXTURES / "slop"))

    assert exit_code == 1
    assert isinstance(findings, list)
    assert {item["rule_id"] for item in findings} == {
        "slop-001",
        "slop-002",
        "slop-003",
        "slop-004",
        "slop-005",
    }
    positions = [(item["line"], item["column"]) for item in findings]
    assert positions == sorted(positions)


def test_scan_is_idempotent() -> None:
    first = runner.invoke(app, ["scan", str(FIXTURES), "--format", "json"])
    second = runner.invoke(app, ["scan", str(FIXTURES), "--format", "json"])
    assert first.exit_code == second.exit_code == 1
    assert first.stdout == second.stdout


def test_scan_terminal_output() -> None:
    result = runner.invoke(app, ["scan", str(REDUNDANT)])

    assert result.exit_code == 1
    assert "warning[slop-001]" in result.stdout
    assert f"--> {REDUNDANT}:6:1" in result.stdout
    assert "Found 6 issue(s) in 1 of 1 file(s)." in result.stdout


def test_scan_exclude_pattern_is_relative_to_scan_root() -> None:
    exit_code, findings = _scan_json(str(FIXTURES), "--exclude", "slop/*")
    assert exit_code == 0
    assert findings == []


def test_starter_config_matches_same_files_for_relative_and_absolute_paths(
    tmp_path: Path,
) -> None:
    source = tmp_path / "src" / "a.js"
    source.parent.mkdir()
    source.write_text("// Here we run it\nrun();\n", encoding="utf-8")
    assert runner.invoke(app, ["config-init"]).exit_code == 0
    (tmp_path / ".slopscan.toml").write_text(
        (tmp_path / ".slopscan.toml").read_text(encoding="utf-8").replace(
            'format = "terminal"', 'format = "json"'
        ),
        encoding="utf-8",
    )

    relative = runner.invoke(app, ["scan", "."])
    absolute = runner.invoke(app, ["scan", str(tmp_path.resolve())])

    assert relative.exit_code == absolute.exit_code == 1
    assert len(json.loads(relative.stdout)) == len(json.loads(absolute.stdout)) == 1


def test_scan_reporting_failure_exits_two(monkeypatch: pytest.MonkeyPatch) -> None:
    def _fail(findings) -> str:
        raise ReportError("cannot serialize")

    monkeypatch.setattr("slopscan.cli.render_json", _fail)

    result = runner.invoke(app, ["scan", str(REDUNDANT), "--format", "json"])

    assert result.exit_code == 2
    assert "Error reporting findings: cannot serialize" in result.output


def test_scan_rejects_unknown_format() -> None:
    result = runner.invoke(app, ["scan", str(CLEAN), "--format", "xml"])
    assert result.exit_code == 2


def test_scan_respects_disabled_rule_in_config(tmp_path: Path) -> None:
    config = tmp_path / "strict.toml"
    config.write_text('[rules]\ndisable = ["slop-001"]\n', encoding="utf-8")

    exit_code, findings = _scan_json(str(REDUNDANT), "--config", str(config))

    assert exit_code == 0
    assert findings == []


def test_scan_uses_config_defaults_from_working_directory(tmp_path: Path) -> None:
    (tmp_path / ".slopscan.toml").write_text(
        'format = "json"\nseverity_threshold = "error"\n', encoding="utf-8"
    )

    result = runner.invoke(app, ["scan", str(REDUNDANT)])

    assert result.exit_code == 0
    assert json.loads(result.stdout) == []


def test_scan_rejects_unknown_rule_in_config(tmp_path: Path) -> None:
    (tmp_path / "slopscan.toml").write_text('[rules]\nenable = ["slop-042"]\n', encoding="utf-8")
    result = runner.invoke(app, ["scan", str(CLEAN)])
    assert result.exit_code == 2


def test_rules_json_lists_all_rules() -> None:
    result = runner.invoke(app, ["rules", "--format", "json"])

    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert [item["rule_id"] for item in payload["rules"]] == [
        "slop-001",
        "slop-002",
        "slop-003",
        "slop-004",
        "slop-005",
    ]
    assert all(item["enabled"] for item in payload["rules"])
    assert all(item["severity"] == "warn" for item in payload["rules"])


def test_rules_terminal_table() -> None:
    result = runner.invoke(app, ["rules"])
    assert result.exit_code == 0
    assert "Self-Narrating Comment" in result.stdout


def test_config_command_reports_source(tmp_path: Path) -> None:
    (tmp_path / ".slopscan.toml").write_text(
        '[rules]\ndisable = ["slop-003"]\n', encoding="utf-8"
    )

    result = runner.invoke(app, ["config", "--format", "json"])

    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert payload["source"].endswith(".slopscan.toml")
    assert payload["active_rule_ids"] == ["slop-001", "slop-002", "slop-004", "slop-005"]


def test_config_init_writes_and_refuses_overwrite(tmp_path: Path) -> None:
    first = runner.invoke(app, ["config-init"])
    assert first.exit_code == 0
    assert (tmp_path / ".slopscan.toml").exists()

    second = runner.invoke(app, ["config-init"])
    assert second.exit_code == 2

    forced = runner.invoke(app, ["config-init", "--force"])
    assert forced.exit_code == 0
