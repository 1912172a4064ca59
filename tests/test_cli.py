"""Tests for the command line interface."""

import pytest
from click.testing import CliRunner

from yat.cli import main
from yat.data import backup_bytes
from yat.version import VERSION


GOOD = b"[ ] ( ) Buy milk\n[X] (A) Finish report\n\t[ ] ( ) Draft outline\n"


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def save_file(tmp_path):
    path = tmp_path / "save.txt"
    path.write_bytes(GOOD)
    return path


def invoke(runner, tmp_path, *args):
    return runner.invoke(main, ["--config", str(tmp_path / "config.yml"), *args])


class TestShow:
    """Test the show command."""

    def test_lists_tasks(self, runner, tmp_path, save_file):
        """Test tasks and sub-tasks are printed with their locations."""
        result = invoke(runner, tmp_path, "show", str(save_file))
        assert result.exit_code == 0
        assert "0     [ ] ( ) Buy milk" in result.output
        assert "1     [X] (A) Finish report" in result.output
        assert "1/0       [ ] ( ) Draft outline" in result.output

    def test_empty_list(self, runner, tmp_path):
        """Test a missing file shows an empty list and is not created."""
        result = invoke(runner, tmp_path, "show", str(tmp_path / "missing.txt"))
        assert result.exit_code == 0
        assert "📭 No tasks" in result.output
        assert not (tmp_path / "missing.txt").exists()


class TestCheck:
    """Test the check command."""

    def test_clean_file(self, runner, tmp_path, save_file):
        """Test a well-formed file passes."""
        result = invoke(runner, tmp_path, "check", str(save_file))
        assert result.exit_code == 0
        assert "✅ 3 tasks, no errors" in result.output

    def test_reports_backups(self, runner, tmp_path, save_file):
        """Test check mentions backups left by an earlier lossy load."""
        backup_bytes(save_file, b"[?] ( ) lost\n", "unparsed")
        result = invoke(runner, tmp_path, "check", str(save_file))
        assert result.exit_code == 0
        assert "💾 1 backup(s)" in result.output

    def test_malformed_lines(self, runner, tmp_path):
        """Test every malformed line is reported with its line number."""
        path = tmp_path / "save.txt"
        path.write_bytes(b"[ ] ( ) fine\n[?] ( ) bad\n[ ] (Z) worse\n")
        result = invoke(runner, tmp_path, "check", str(path))
        assert result.exit_code == 1
        assert f"{path}:2: unknown completion token" in result.output
        assert f"{path}:3: unknown priority letter" in result.output
        assert "2 malformed line(s)" in result.output

    def test_strict_stops_at_first(self, runner, tmp_path):
        """Test strict mode reports only the first malformed line."""
        path = tmp_path / "save.txt"
        path.write_bytes(b"[ ] ( ) fine\n[?] ( ) bad\n[ ] (Z) worse\n")
        result = invoke(runner, tmp_path, "check", "--strict", str(path))
        assert result.exit_code == 1
        assert f"{path}:2: unknown completion token" in result.output
        assert ":3:" not in result.output

    def test_missing_file(self, runner, tmp_path):
        """Test checking a file that does not exist."""
        result = invoke(runner, tmp_path, "check", str(tmp_path / "missing.txt"))
        assert result.exit_code == 1
        assert "No save file" in result.output

    def test_corrupt_file(self, runner, tmp_path):
        """Test a file that is not UTF-8 fails the check."""
        path = tmp_path / "save.txt"
        path.write_bytes(b"\xff\xfe")
        result = invoke(runner, tmp_path, "check", str(path))
        assert result.exit_code == 1
        assert "❌" in result.output


class TestAdd:
    """Test the add command."""

    def test_add_root_task(self, runner, tmp_path, save_file):
        """Test adding a top-level task."""
        result = invoke(runner, tmp_path, "add", "Call bank", "-f", str(save_file))
        assert result.exit_code == 0
        assert "✅ Added task 2" in result.output
        assert save_file.read_bytes() == GOOD + b"[ ] ( ) Call bank\n"

    def test_add_sub_task(self, runner, tmp_path, save_file):
        """Test adding a sub-task under an existing task."""
        result = invoke(runner, tmp_path, "add", "Proofread", "-p", "1", "-f", str(save_file))
        assert result.exit_code == 0
        assert "✅ Added task 1/1" in result.output
        assert save_file.read_bytes().endswith(b"\t[ ] ( ) Draft outline\n\t[ ] ( ) Proofread\n")

    def test_add_creates_file(self, runner, tmp_path):
        """Test adding to a new file creates it."""
        path = tmp_path / "new.txt"
        result = invoke(runner, tmp_path, "add", "First", "--file", str(path))
        assert result.exit_code == 0
        assert path.read_bytes() == b"[ ] ( ) First\n"

    def test_unknown_parent(self, runner, tmp_path, save_file):
        """Test adding under a missing parent leaves the file alone."""
        result = invoke(runner, tmp_path, "add", "Orphan", "-p", "5", "-f", str(save_file))
        assert result.exit_code == 1
        assert "No top-level task 5" in result.output
        assert save_file.read_bytes() == GOOD

    def test_multi_line_text_rejected(self, runner, tmp_path, save_file):
        """Test task text must be a single line."""
        result = invoke(runner, tmp_path, "add", "two\nlines", "-f", str(save_file))
        assert result.exit_code == 1
        assert "Invalid task" in result.output
        assert save_file.read_bytes() == GOOD


def test_version(runner):
    """Test the version option."""
    result = runner.invoke(main, ["--version"])
    assert result.exit_code == 0
    assert VERSION in result.output
