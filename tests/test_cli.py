"""CLI tests for collection, verification, and classification commands."""

import json
import os
from pathlib import Path
from typing import Any

from click.testing import CliRunner

from spdxtree.cli import cli

CODE = "163fc59f1d66d9237bab8ad77cd27a31c3f8e67c"


def _env_with_home(tmp_path: Path) -> dict[str, Any]:
    env = dict(os.environ)
    env["HOME"] = str(tmp_path)
    return env


def _tree(tmp_path: Path) -> Path:
    root = tmp_path / "project"
    root.mkdir()
    (root / "a.txt").write_bytes(b"hello")
    (root / "b.java").write_bytes(b"world")
    return root


def test_cli_help_displays_commands() -> None:
    result = CliRunner().invoke(cli, ["--help"])

    assert result.exit_code == 0
    assert "verification codes" in result.output
    assert "collect" in result.output


def test_collect_json_output(tmp_path: Path) -> None:
    root = _tree(tmp_path)

    result = CliRunner().invoke(cli, ["collect", str(root), "--json"], env=_env_with_home(tmp_path))

    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert payload["verification_code"] == {"value": CODE, "excluded_paths": []}
    assert [item["path"] for item in payload["files"]] == ["a.txt", "b.java"]
    assert [item["category"] for item in payload["files"]] == ["other", "source"]
    assert payload["license_references"] == ["NOASSERTION"]


def test_collect_summary_and_exclusions(tmp_path: Path) -> None:
    root = _tree(tmp_path)
    (root / "build").mkdir()
    (root / "build" / "out.class").write_bytes(b"\xca\xfe")
    (root / "sbom.spdx").write_text("SPDXVersion: SPDX-1.2", encoding="utf-8")

    result = CliRunner().invoke(
        cli,
        [
            "collect",
            str(root),
            "--exclude",
            "build",
            "--exclude-from-code",
            "sbom.spdx",
            "--summary",
        ],
        env=_env_with_home(tmp_path),
    )

    assert result.exit_code == 0
    assert "files=3" in result.output
    assert CODE in result.output


def test_collect_failure_aborts_with_error(tmp_path: Path) -> None:
    root = _tree(tmp_path)
    os.symlink(root / "missing", root / "dangling.txt")
    env = _env_with_home(tmp_path)

    failed = CliRunner().invoke(cli, ["collect", str(root), "--json"], env=env)
    skipped = CliRunner().invoke(cli, ["collect", str(root), "--json", "--best-effort"], env=env)

    assert failed.exit_code == 1
    assert json.loads(failed.stdout)["error"]["code"] == "collection_failed"
    assert skipped.exit_code == 0
    payload = json.loads(skipped.stdout)
    assert payload["verification_code"]["value"] == CODE
    assert len(payload["errors"]) == 1


def test_collect_rejects_invalid_pattern(tmp_path: Path) -> None:
    root = _tree(tmp_path)

    result = CliRunner().invoke(
        cli, ["collect", str(root), "--exclude", "("], env=_env_with_home(tmp_path)
    )

    assert result.exit_code == 1
    assert "Invalid configuration values" in result.output


def test_verify_reports_match_and_mismatch(tmp_path: Path) -> None:
    root = _tree(tmp_path)
    env = _env_with_home(tmp_path)

    matched = CliRunner().invoke(cli, ["verify", str(root), CODE], env=env)
    mismatched = CliRunner().invoke(cli, ["verify", str(root), "0" * 40, "--json"], env=env)

    assert matched.exit_code == 0
    assert "matches" in matched.output
    assert mismatched.exit_code == 1
    assert json.loads(mismatched.stdout) == {"expected": "0" * 40, "actual": CODE, "match": False}


def test_classify_uses_configured_extensions(tmp_path: Path) -> None:
    env = _env_with_home(tmp_path)
    env["SPDXTREE__CLASSIFICATION__EXTENSIONS"] = "{source: [rs]}"

    result = CliRunner().invoke(cli, ["classify", "main.rs", "App.JAVA", "notes"], env=env)

    assert result.exit_code == 0
    assert result.output.count("source") == 2
    assert "other" in result.output
