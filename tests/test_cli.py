"""Tests for CLI interface."""

from unittest.mock import patch

from typer.testing import CliRunner

from depsweep.cli import app
from depsweep.models import Summary

from conftest import write_files

runner = CliRunner(env={"COLUMNS": "200"})


def output(result) -> str:
    """Stdout with Rich line wrapping collapsed."""
    return " ".join(result.stdout.split())


class TestVersion:
    def test_version_flag(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert "depsweep version" in output(result)

    def test_version_short_flag(self):
        result = runner.invoke(app, ["-v"])
        assert result.exit_code == 0
        assert "depsweep version" in output(result)


class TestHelp:
    def test_help_flag(self):
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "--exclude-hidden-directories" in output(result)
        assert "--delete-all" in output(result)


class TestRootValidation:
    def test_missing_directory(self, tmp_path):
        result = runner.invoke(app, ["--directory", str(tmp_path / "missing"), "--list"])
        assert result.exit_code == 1
        assert "does not exist" in output(result)

    def test_file_as_directory(self, tmp_path):
        file_path = tmp_path / "file.txt"
        file_path.write_text("x")
        result = runner.invoke(app, ["-d", str(file_path), "--list"])
        assert result.exit_code == 1
        assert "not a directory" in output(result)

    def test_invalid_target(self, tmp_path):
        result = runner.invoke(app, ["-d", str(tmp_path), "--target", "a/b", "--list"])
        assert result.exit_code == 2


class TestList:
    def test_lists_without_deleting(self, tmp_path):
        write_files(tmp_path / "a" / "node_modules", [100])
        write_files(tmp_path / "b" / "node_modules", [100])

        result = runner.invoke(app, ["-d", str(tmp_path), "--list"])

        assert result.exit_code == 0
        assert "2 directories" in output(result)
        assert (tmp_path / "a" / "node_modules").exists()

    def test_zero_matches_is_success(self, tmp_path):
        result = runner.invoke(app, ["-d", str(tmp_path), "--list"])
        assert result.exit_code == 0
        assert "No directories found" in output(result)

    def test_exclude_option(self, tmp_path):
        write_files(tmp_path / "a" / "node_modules", [1])
        write_files(tmp_path / "b" / "node_modules", [1])

        result = runner.invoke(app, ["-d", str(tmp_path), "--exclude", "b", "--list"])

        assert result.exit_code == 0
        assert "1 directories" in output(result)


class TestDeleteAll:
    def test_deletes_every_match(self, tmp_path):
        write_files(tmp_path / "a" / "node_modules", [100])
        write_files(tmp_path / "b" / "x" / "node_modules", [100])

        result = runner.invoke(app, ["-d", str(tmp_path), "--delete-all", "--yes"])

        assert result.exit_code == 0
        assert "Summary" in output(result)
        assert not (tmp_path / "a" / "node_modules").exists()
        assert not (tmp_path / "b" / "x" / "node_modules").exists()
        assert (tmp_path / "b" / "x").exists()

    def test_confirmation_declined(self, tmp_path):
        write_files(tmp_path / "a" / "node_modules", [100])

        result = runner.invoke(app, ["-d", str(tmp_path), "--delete-all"], input="n\n")

        assert result.exit_code == 0
        assert "Cancelled" in output(result)
        assert (tmp_path / "a" / "node_modules").exists()

    def test_custom_target(self, tmp_path):
        write_files(tmp_path / "crate" / "target", [10])
        write_files(tmp_path / "web" / "node_modules", [10])

        result = runner.invoke(app, ["-d", str(tmp_path), "-t", "target", "--delete-all", "-y"])

        assert result.exit_code == 0
        assert not (tmp_path / "crate" / "target").exists()
        assert (tmp_path / "web" / "node_modules").exists()

    def test_all_failed_exits_nonzero(self, tmp_path):
        write_files(tmp_path / "a" / "node_modules", [100])

        with patch("shutil.rmtree", side_effect=PermissionError(13, "Permission denied")):
            result = runner.invoke(app, ["-d", str(tmp_path), "--delete-all", "-y"])

        assert result.exit_code == 1
        assert "permission-denied" in output(result)


class TestInteractive:
    def test_runs_tui_and_prints_summary(self, tmp_path):
        summary = Summary(total_matches=4, aborted=True)

        with patch("depsweep.tui.run_tui", return_value=summary) as run_tui:
            result = runner.invoke(app, ["-d", str(tmp_path), "--sort", "path"])

        assert result.exit_code == 0
        config = run_tui.call_args.args[0]
        assert config.root == tmp_path.resolve()
        assert config.sort_key.value == "path"
        assert "Directories found" in output(result)
