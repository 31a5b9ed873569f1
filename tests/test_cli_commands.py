from __future__ import annotations

import json
import shutil
from pathlib import Path

import pytest
from typer.testing import CliRunner

from flowgraph import cli

from tests.helpers import EXAMPLE_DIR

runner = CliRunner()


@pytest.fixture
def example_copy(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    target = tmp_path / "example"
    shutil.copytree(EXAMPLE_DIR, target)
    monkeypatch.chdir(target)
    return target


def test_verify_discovers_single_document(example_copy: Path) -> None:
    result = runner.invoke(cli.app, ["verify"])
    assert result.exit_code == 0
    assert "FlowGraph Verification: tasks" in result.output
    assert "Spec version: 2.1" in result.output
    assert "1 WARN" in result.output
    assert "0 FAIL" in result.output


def test_verify_json_output(example_copy: Path) -> None:
    result = runner.invoke(cli.app, ["verify", "tasks.flowgraph.json", "--json"])
    assert result.exit_code == 0
    payload = json.loads(result.output)
    assert payload["name"] == "tasks"
    assert payload["exit_code"] == 0
    assert payload["summary"]["failed"] == 0
    assert payload["summary"]["warned"] == 1
    assert set(payload["categories"]) == {"structural", "relational", "flow", "invariant"}


def test_verify_failure_exit_code(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    (tmp_path / "broken.flowgraph.json").write_text(
        json.dumps(
            {
                "meta": {"name": "broken"},
                "nodes": {"type:Ghost": {"kind": "type", "loc": "ghost.ts"}},
            }
        ),
        encoding="utf-8",
    )
    result = runner.invoke(cli.app, ["verify"])
    assert result.exit_code == 1
    assert "File not found: ghost.ts" in result.output


def test_impact_query(example_copy: Path) -> None:
    result = runner.invoke(cli.app, ["verify", "--impact", "table:tasks"])
    assert result.exit_code == 0
    assert "Impact Analysis: table:tasks" in result.output
    assert "you MUST also update method:TaskRepository.create" in result.output
    assert "If type:TaskStatus changes" in result.output
    assert "status-values-match" in result.output


def test_impact_query_json(example_copy: Path) -> None:
    result = runner.invoke(
        cli.app, ["verify", "--impact", "method:TaskRepository.create", "--json"]
    )
    assert result.exit_code == 0
    payload = json.loads(result.output)
    assert payload["found"] is True
    assert [flow["name"] for flow in payload["flows"]] == ["create_task"]


def test_impact_unknown_node(example_copy: Path) -> None:
    result = runner.invoke(cli.app, ["verify", "--impact", "table:nope"])
    assert result.exit_code == 1
    assert "Node not found in flowgraph!" in result.output
    assert "Available nodes:" in result.output
    assert "  table:tasks" in result.output


def test_verify_without_documents(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    result = runner.invoke(cli.app, ["verify"])
    assert result.exit_code == 1
    assert "No flowgraph file found" in result.output


def test_verify_with_ambiguous_documents(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.chdir(tmp_path)
    for name in ("one", "two"):
        (tmp_path / f"{name}.flowgraph.json").write_text("{}", encoding="utf-8")
    result = runner.invoke(cli.app, ["verify"])
    assert result.exit_code == 1
    assert "Multiple flowgraph files found" in result.output
    assert "one.flowgraph.json" in result.output
    assert "two.flowgraph.json" in result.output


def test_verify_uses_configured_document(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.chdir(tmp_path)
    (tmp_path / "contracts.json").write_text(
        json.dumps({"meta": {"name": "configured"}}), encoding="utf-8"
    )
    (tmp_path / "flowgraph.toml").write_text(
        '[verify]\ndocument = "contracts.json"\nformat = "json"\n', encoding="utf-8"
    )
    result = runner.invoke(cli.app, ["verify"])
    assert result.exit_code == 0
    assert json.loads(result.output)["name"] == "configured"


def test_render_writes_markdown(example_copy: Path) -> None:
    result = runner.invoke(cli.app, ["render"])
    assert result.exit_code == 0
    output = example_copy / "tasks.flowgraph.md"
    assert "Rendered: " in result.output
    assert result.output.strip().endswith("tasks.flowgraph.md")
    text = output.read_text(encoding="utf-8")
    assert text.startswith("# tasks FlowGraph")
    assert "## Flow: create_task" in text


def test_render_to_explicit_output(example_copy: Path, tmp_path: Path) -> None:
    target = tmp_path / "diagram.md"
    result = runner.invoke(cli.app, ["render", "-o", str(target)])
    assert result.exit_code == 0
    assert "## Invariants" in target.read_text(encoding="utf-8")


def test_init_creates_then_refuses_to_overwrite(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    project = tmp_path / "shop"
    project.mkdir()
    monkeypatch.chdir(project)
    first = runner.invoke(cli.app, ["init", "--root", "lib/"])
    assert first.exit_code == 0
    assert "Created shop.flowgraph.json" in first.output
    payload = json.loads((project / "shop.flowgraph.json").read_text(encoding="utf-8"))
    assert payload["meta"] == {"name": "shop", "root": "lib/"}

    second = runner.invoke(cli.app, ["init"])
    assert second.exit_code == 1
    assert "shop.flowgraph.json already exists." in second.output


def test_main_without_arguments_prints_help(capsys: pytest.CaptureFixture[str]) -> None:
    assert cli.main([]) == 0
    assert "verify" in capsys.readouterr().out


def test_main_unknown_command_exits_one(capsys: pytest.CaptureFixture[str]) -> None:
    assert cli.main(["bogus"]) == 1
    assert "No such command" in capsys.readouterr().err


def test_main_rejects_unknown_configured_format(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.chdir(tmp_path)
    (tmp_path / "flowgraph.toml").write_text('[verify]\nformat = "xml"\n', encoding="utf-8")
    assert cli.main(["verify"]) == 1
    assert "Unknown output format" in capsys.readouterr().err


def test_main_unknown_option_exits_one() -> None:
    assert cli.main(["verify", "--no-such-flag"]) == 1


def test_main_command_error_keeps_its_exit_code(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.chdir(tmp_path)
    assert cli.main(["verify"]) == 1
    assert "No flowgraph file found" in capsys.readouterr().err


def test_main_returns_verification_exit_code(example_copy: Path) -> None:
    assert cli.main(["verify"]) == 0
