"""Tests for the command-line interface."""

import json

import pytest
from click.testing import CliRunner

from novel_graph_analyzer.cli import main
from novel_graph_analyzer.config import Settings


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def novel(tmp_path):
    path = tmp_path / "novel.txt"
    path.write_text("李明是一位勇敢的侠客，他住在长安城。", encoding="utf-8")
    return path


class TestCli:
    def test_summary(self, runner, novel):
        result = runner.invoke(main, ["summary", str(novel)])
        assert result.exit_code == 0
        assert "第一章" in result.output

    def test_extract_entities(self, runner, novel):
        result = runner.invoke(main, ["extract", "entities", str(novel)])
        assert result.exit_code == 0
        assert "李明" in result.output
        assert "长安城" in result.output

    def test_analyze_writes_json(self, runner, novel, tmp_path):
        output = tmp_path / "result.json"

        result = runner.invoke(main, ["analyze", str(novel), "--output", str(output)])

        assert result.exit_code == 0
        data = json.loads(output.read_text(encoding="utf-8"))
        assert data["totalWords"] == 16
        assert {e["name"] for e in data["knowledgeGraph"]["entities"]} == {"李明", "长安城"}

    def test_empty_file_fails(self, runner, tmp_path):
        path = tmp_path / "empty.txt"
        path.write_text("  ", encoding="utf-8")

        result = runner.invoke(main, ["summary", str(path)])

        assert result.exit_code == 1
        assert "文件内容为空" in result.output

    def test_unsupported_format_fails(self, runner, tmp_path):
        path = tmp_path / "novel.pdf"
        path.write_bytes(b"%PDF")

        result = runner.invoke(main, ["analyze", str(path)])

        assert result.exit_code == 1

    def test_extract_relations(self, runner, novel):
        result = runner.invoke(main, ["extract", "relations", str(novel)])

        assert result.exit_code == 0
        assert "2 entities, 1 relations" in result.output
        assert "APPEARS_IN" in result.output

    def test_timeline_with_causal_link(self, runner, tmp_path):
        path = tmp_path / "causal.txt"
        path.write_text(
            "李明说：走吧。王强说：好。因为李明击败了王强，王强离开了长安城。王强前往洛阳城。",
            encoding="utf-8",
        )

        result = runner.invoke(main, ["timeline", str(path)])

        assert result.exit_code == 0, result.output
        assert "Causal relations" in result.output
        assert "(0.60)" in result.output
        assert "因果标记: 因为" in result.output

    def test_analyze_export(self, runner, novel, tmp_path, monkeypatch):
        settings = Settings(data_dir=tmp_path / "data")
        monkeypatch.setattr("novel_graph_analyzer.config.get_settings", lambda: settings)

        result = runner.invoke(main, ["analyze", str(novel), "--export"])

        assert result.exit_code == 0
        exported = tmp_path / "data" / "exports" / "novel.json"
        assert json.loads(exported.read_text(encoding="utf-8"))["totalWords"] == 16
