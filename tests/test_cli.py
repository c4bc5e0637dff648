"""Tests for the click command-line interface."""

import json

from click.testing import CliRunner

from import_map.cli import cli


def _p(root, rel):
    return str((root / rel).resolve())


class TestProjectCommand:
    def test_json_output(self, sample_project):
        result = CliRunner().invoke(cli, ["project", str(sample_project), "--json"])
        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert data["ok"] is True
        assert len(data["nodes"]) == 7
        assert data["stats"]["discoveredFiles"] == 5

    def test_text_summary(self, sample_project):
        result = CliRunner().invoke(cli, ["project", str(sample_project)])
        assert result.exit_code == 0, result.output
        assert "Summary:" in result.output
        assert "files discovered: 5" in result.output
        assert "E.ts" in result.output

    def test_positions_file(self, sample_project, tmp_path):
        positions = tmp_path / "positions.json"
        runner = CliRunner()
        runner.invoke(cli, ["project", str(sample_project), "--positions-file", str(positions)])
        saved = json.loads(positions.read_text(encoding="utf-8"))
        assert len(saved) == 1
        (key,) = saved
        assert key.endswith(":project")
        assert len(saved[key]) == 7

    def test_positions_file_from_environment(self, sample_project, tmp_path):
        positions = tmp_path / "env.json"
        result = CliRunner().invoke(
            cli, ["project", str(sample_project)], env={"IMPORT_MAP_POSITIONS": str(positions)},
        )
        assert result.exit_code == 0, result.output
        assert positions.is_file()

    def test_invalid_layout(self, sample_project):
        result = CliRunner().invoke(cli, ["project", str(sample_project), "--layout", "circle"])
        assert result.exit_code != 0


class TestFileCommand:
    def test_json_output(self, sample_project):
        entry = sample_project / "src" / "E.ts"
        result = CliRunner().invoke(cli, ["file", str(entry), "--root", str(sample_project), "--json"])
        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert data["entry"] == _p(sample_project, "src/E.ts")
        names = {node["label"] for node in data["nodes"]}
        assert {"E.ts", "A.ts", "B.ts", "C.ts", "react"} <= names
        assert "D.ts" not in names

    def test_root_found_from_markers(self, sample_project):
        entry = sample_project / "src" / "E.ts"
        result = CliRunner().invoke(cli, ["file", str(entry), "--json"])
        data = json.loads(result.stdout)
        assert data["key"].startswith(f"importMap_positions:{sample_project.resolve()}:")
        assert data["stats"]["discoveredFiles"] == 5

    def test_missing_entry(self, sample_project):
        entry = sample_project / "src" / "nope.ts"
        result = CliRunner().invoke(cli, ["file", str(entry), "--root", str(sample_project), "--json"])
        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert data["ok"] is False
        assert data["nodes"] == []

    def test_missing_entry_text(self, sample_project):
        entry = sample_project / "src" / "nope.ts"
        result = CliRunner().invoke(cli, ["file", str(entry), "--root", str(sample_project)])
        assert "No map:" in result.output

    def test_hierarchical_layout(self, sample_project):
        entry = sample_project / "src" / "E.ts"
        result = CliRunner().invoke(
            cli, ["file", str(entry), "--root", str(sample_project), "--layout", "hierarchical", "--json"],
        )
        data = json.loads(result.stdout)
        by_label = {node["label"]: node for node in data["nodes"]}
        assert by_label["C.ts"]["y"] < by_label["E.ts"]["y"] < by_label["A.ts"]["y"]
