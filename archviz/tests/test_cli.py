"""
Tests for the command line entry point.
"""

import json
import os
from unittest import mock

import pytest

from archviz.cli import main


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    """Run each command without ARCHVIZ_* variables or a stray .env file."""
    for key in ("ARCHVIZ_DIAGRAM", "ARCHVIZ_RAW", "ARCHVIZ_INDENT",
                "ARCHVIZ_DEFAULT_TECHNOLOGY", "ARCHVIZ_LAYER_RULES", "ARCHVIZ_LAYER_RULES_FILE",
                "ARCHVIZ_LOG_LEVEL"):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)


def test_analyze_full_document(model_files, capsys):
    assert main(["analyze", *model_files]) == 0

    captured = capsys.readouterr()
    assert captured.out.startswith("# Rust Architecture Diagram")
    assert "Found: 5 structs, 2 enums, 2 traits, 3 functions" in captured.err


def test_analyze_single_raw_view(model_files, capsys):
    assert main(["analyze", *model_files, "-d", "class", "--raw"]) == 0
    assert capsys.readouterr().out.startswith("classDiagram\n")


def test_analyze_fenced_view(model_files, capsys):
    assert main(["analyze", *model_files, "--diagram", "module"]) == 0
    assert capsys.readouterr().out.startswith("```mermaid\nflowchart TD\n")


def test_analyze_json(model_files, capsys):
    assert main(["analyze", *model_files, "--json", "--name", "store"]) == 0

    data = json.loads(capsys.readouterr().out)
    assert data["name"] == "store"
    assert len(data["relationships"]) == 20


def test_analyze_to_file(model_files, tmp_path, capsys):
    target = tmp_path / "diagram.md"

    assert main(["analyze", *model_files, "-d", "call-graph", "-o", str(target)]) == 0

    assert target.read_text(encoding="utf-8").startswith("```mermaid\nflowchart LR")
    captured = capsys.readouterr()
    assert captured.out == ""
    assert f"Output written to: {target}" in captured.err


def test_diagram_default_comes_from_env(model_files, monkeypatch, capsys):
    monkeypatch.setenv("ARCHVIZ_DIAGRAM", "c4-container")
    monkeypatch.setenv("ARCHVIZ_RAW", "true")

    assert main(["analyze", *model_files]) == 0
    assert capsys.readouterr().out.startswith("C4Container\n")


def test_dotenv_file_is_read(model_files, tmp_path, capsys):
    (tmp_path / ".env").write_text("ARCHVIZ_DIAGRAM=class\nARCHVIZ_RAW=1\n", encoding="utf-8")

    with mock.patch.dict(os.environ):
        assert main(["analyze", *model_files]) == 0
    assert capsys.readouterr().out.startswith("classDiagram\n")


def test_stats_report(model_files, capsys):
    assert main(["stats", *model_files]) == 0

    report = json.loads(capsys.readouterr().out)
    assert report["crate"]["structs"] == 5
    assert report["graph"]["nodes"] == 19
    assert report["dangling_targets"] == ["Display", "Clock", "Send"]
    assert report["module_cycles"] == []


def test_invalid_model_exits_with_error(tmp_path, capsys):
    path = tmp_path / "bad.json"
    path.write_text('{"structs": {}}', encoding="utf-8")

    assert main(["analyze", str(path)]) == 1
    assert "missing key 'name'" in capsys.readouterr().err


def test_missing_file_exits_with_error(tmp_path, capsys):
    assert main(["stats", str(tmp_path / "absent.json")]) == 1
    assert capsys.readouterr().err.startswith("Error:")


def test_invalid_configuration_exits_with_usage_error(model_files, monkeypatch, capsys):
    monkeypatch.setenv("ARCHVIZ_INDENT", "wide")

    assert main(["analyze", *model_files]) == 2
    assert "ARCHVIZ_INDENT" in capsys.readouterr().err


def test_unknown_diagram_is_rejected(model_files):
    with pytest.raises(SystemExit):
        main(["analyze", *model_files, "-d", "sequence"])
