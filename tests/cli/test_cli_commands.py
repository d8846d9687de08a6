"""CLI commands end to end against a temporary SQLite file."""

from loguru import logger
import pytest
from typer.testing import CliRunner

from bookforge.infrastructure.cli.app import app

HEADER = "ID,Title,Author(s),Description,Owner,Current Holder,Comment"


@pytest.fixture
def runner(tmp_path, monkeypatch):
    """CLI runner working inside tmp_path with its own database file."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("DATABASE_URL", f"sqlite+aiosqlite:///{tmp_path / 'cli.db'}")
    yield CliRunner()
    # Sinks installed by the app callback point at the runner's streams
    logger.remove()


class TestCommandStructure:
    """Core command structure exists and is accessible."""

    def test_main_help_shows_command_groups(self, runner):
        result = runner.invoke(app, ["--help"])

        assert result.exit_code == 0
        assert "users" in result.output
        assert "books" in result.output
        assert "init-db" in result.output

    def test_version_command(self, runner):
        result = runner.invoke(app, ["version"])

        assert result.exit_code == 0
        assert "BookForge" in result.output

    @pytest.mark.parametrize("group", ["users", "books"])
    def test_group_help(self, runner, group):
        result = runner.invoke(app, [group, "--help"])

        assert result.exit_code == 0
        assert "list" in result.output
        assert "delete" in result.output

    def test_init_db(self, runner, tmp_path):
        result = runner.invoke(app, ["init-db"])

        assert result.exit_code == 0, result.output
        assert "Database ready" in result.output
        assert (tmp_path / "cli.db").exists()


class TestLibraryCommands:
    def test_add_and_list_users(self, runner):
        added = runner.invoke(app, ["users", "add", "Alice"])
        listed = runner.invoke(app, ["users", "list"])

        assert added.exit_code == 0, added.output
        assert "Created user Alice (id: 1)" in added.output
        assert listed.exit_code == 0
        assert "Alice" in listed.output

    def test_book_lifecycle(self, runner):
        runner.invoke(app, ["users", "add", "Alice"])
        runner.invoke(app, ["users", "add", "Bob"])

        added = runner.invoke(
            app,
            ["books", "add", "--title", "Dune", "--authors", "Herbert", "--owner", "1",
             "--holder", "2"],
        )
        assert added.exit_code == 0, added.output
        assert "Created book 1: Dune" in added.output

        listed = runner.invoke(app, ["books", "list"])
        assert listed.exit_code == 0
        assert "Dune" in listed.output
        assert "Page 1 of 1" in listed.output

        edited = runner.invoke(
            app,
            ["books", "edit", "1", "--title", "Dune Messiah", "--authors", "Herbert",
             "--owner", "1"],
        )
        assert edited.exit_code == 0, edited.output
        assert "Updated book 1" in edited.output

        deleted = runner.invoke(app, ["books", "delete", "1"])
        assert deleted.exit_code == 0
        assert "No books found" in runner.invoke(app, ["books", "list"]).output

    def test_page_far_past_the_end_lists_nothing(self, runner):
        runner.invoke(app, ["users", "add", "Alice"])
        runner.invoke(app, ["books", "add", "--title", "Emma", "--authors", "Austen",
                            "--owner", "1"])

        result = runner.invoke(app, ["books", "list", "--page", "99999999999999999"])

        assert result.exit_code == 0, result.output
        assert "No books found" in result.output
        assert "previous: --page 99999999999999998" in result.output

    def test_huge_book_id_is_reported_as_not_found(self, runner):
        result = runner.invoke(app, ["books", "show", str(2**64)])

        assert result.exit_code == 1
        assert "Not found" in result.output

    def test_missing_book_is_reported_as_not_found(self, runner):
        result = runner.invoke(app, ["books", "show", "99"])

        assert result.exit_code == 1
        assert "Not found" in result.output

    def test_invalid_form_exits_with_error(self, runner):
        runner.invoke(app, ["users", "add", "Alice"])

        result = runner.invoke(
            app, ["books", "add", "--title", "  ", "--authors", "X", "--owner", "1"]
        )

        assert result.exit_code == 1

    def test_user_delete_cascades(self, runner):
        runner.invoke(app, ["users", "add", "Alice"])
        runner.invoke(app, ["books", "add", "--title", "Emma", "--authors", "Austen",
                            "--owner", "1"])

        result = runner.invoke(app, ["users", "delete", "1", "--yes"])

        assert result.exit_code == 0, result.output
        assert "No books found" in runner.invoke(app, ["books", "list"]).output
        assert runner.invoke(app, ["users", "show", "1"]).exit_code == 1

    def test_user_delete_can_be_aborted(self, runner):
        runner.invoke(app, ["users", "add", "Alice"])

        result = runner.invoke(app, ["users", "delete", "1"], input="n\n")

        assert result.exit_code == 1
        assert runner.invoke(app, ["users", "show", "1"]).exit_code == 0

    def test_export_to_stdout_and_file(self, runner, tmp_path):
        runner.invoke(app, ["users", "add", "Alice"])
        runner.invoke(app, ["books", "add", "--title", "Emma", "--authors", "Austen",
                            "--owner", "1"])

        to_stdout = runner.invoke(app, ["books", "export"])
        to_file = runner.invoke(app, ["books", "export", "--output", "out.csv"])

        assert to_stdout.exit_code == 0
        assert HEADER in to_stdout.output
        assert to_file.exit_code == 0, to_file.output
        content = (tmp_path / "out.csv").read_text(encoding="utf-8").splitlines()
        assert content == [HEADER, "1,Emma,Austen,,Alice (id: 1),-,"]
