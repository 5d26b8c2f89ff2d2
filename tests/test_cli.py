"""Smoke tests for the vineyard CLI.

Run with: python -m pytest tests/test_cli.py -v
"""
from __future__ import annotations

import json
import subprocess
import sys
from pathlib import Path

from vineyard.models.town import TownData

ROOT = Path(__file__).resolve().parents[1]


def _run_cli(*args: str, timeout: int = 60) -> subprocess.CompletedProcess:
    return subprocess.run(
        [sys.executable, "-m", "vineyard", *args],
        capture_output=True,
        text=True,
        timeout=timeout,
        cwd=ROOT,
    )


class TestCLIHelp:
    """Verify that all subcommands register and print help without errors."""

    def test_main_help(self):
        result = _run_cli("--help")
        assert result.returncode == 0
        for command in ("generate", "validate", "survey", "check-templates"):
            assert command in result.stdout

    def test_no_command_prints_help(self):
        result = _run_cli()
        assert result.returncode == 0
        assert "usage" in result.stdout.lower()

    def test_generate_help(self):
        result = _run_cli("generate", "--help")
        assert result.returncode == 0
        assert "--seed" in result.stdout
        assert "--no-law" in result.stdout
        assert "--unchecked" in result.stdout


class TestGenerate:
    def test_prints_town_json(self):
        result = _run_cli("generate", "--seed", "42")
        assert result.returncode == 0, result.stderr
        town = TownData.model_validate(json.loads(result.stdout))
        assert len(town.sin_chain) == 4

    def test_unchecked_matches_validated_for_good_seed(self):
        checked = _run_cli("generate", "--seed", "42")
        unchecked = _run_cli("generate", "--seed", "42", "--unchecked")
        assert json.loads(checked.stdout) == json.loads(unchecked.stdout)

    def test_writes_file_then_validates(self, tmp_path):
        out = tmp_path / "town.json"
        result = _run_cli("generate", "--seed", "shiloh", "--chain-length", "6", "--no-law", "--out", str(out))
        assert result.returncode == 0, result.stderr
        assert "OK" in result.stdout
        town = TownData.model_validate_json(out.read_text(encoding="utf-8"))
        assert len(town.sin_chain) == 6
        assert town.has_law is False

        check = _run_cli("validate", str(out))
        assert check.returncode == 0
        assert "valid" in check.stdout

    def test_bad_attempt_budget(self):
        result = _run_cli("generate", "--seed", "42", "--max-attempts", "0")
        assert result.returncode == 1
        assert "ERROR" in result.stdout


class TestValidate:
    def test_missing_file(self, tmp_path):
        result = _run_cli("validate", str(tmp_path / "missing.json"))
        assert result.returncode == 1
        assert "not found" in result.stdout

    def test_invalid_town_reports_errors(self, tmp_path, town_factory):
        town = town_factory()
        chain = [s.model_copy(update={"linked_npcs": []}) for s in town.sin_chain]
        path = tmp_path / "broken.json"
        path.write_text(town.model_copy(update={"sin_chain": chain}).model_dump_json(), encoding="utf-8")

        result = _run_cli("validate", str(path))
        assert result.returncode == 1
        assert "insufficient-npc-coverage" in result.stdout
        assert "ERR" in result.stdout

    def test_malformed_json(self, tmp_path):
        path = tmp_path / "junk.json"
        path.write_text('{"id": "x"}', encoding="utf-8")
        result = _run_cli("validate", str(path))
        assert result.returncode == 1
        assert "not a valid town" in result.stdout


class TestSurveyAndTemplates:
    def test_survey(self):
        result = _run_cli("survey", "--prefix", "smoke", "--count", "3")
        assert result.returncode == 0
        assert "smoke-0" in result.stdout
        assert "3/3 towns valid" in result.stdout

    def test_check_templates(self):
        result = _run_cli("check-templates")
        assert result.returncode == 0
        assert "sins: 21" in result.stdout

    def test_check_templates_missing_dir(self, tmp_path):
        result = _run_cli("check-templates", "--dir", str(tmp_path / "nope"))
        assert result.returncode == 1
        assert "ERROR" in result.stdout
