"""Tests for the diary commands."""

import json
import os
import sqlite3

import pytest
from loguru import logger

from codediary.cli import app
from codediary.DIARY.database import DiaryStore
from codediary.DIARY.model import Entry
from codediary.DIARY.timestamps import Timestamp


@pytest.fixture
def invoke(runner, db_path):
    def _invoke(*args, input=None):
        return runner.invoke(app, ["diary", "--db", db_path, *args], input=input)
    return _invoke


@pytest.fixture
def seeded(db_path):
    """Two entries whose sorted order is the opposite of their id order."""
    with DiaryStore(db_path) as store:
        store.insert_entry(Entry.reconstruct(1, Timestamp(2024, 7, 2, 9, 0, 0), "Later", "second day"))
        store.insert_entry(Entry.reconstruct(2, Timestamp(2024, 7, 1, 9, 0, 0), "Trip", "Packed bags"))
    return db_path


def stored_ids(db_path):
    with DiaryStore(db_path) as store:
        return sorted(e.id for e in store.get_all_entries())


class TestAdd:
    def test_add_with_options(self, invoke, db_path):
        result = invoke("add", "--title", "Trip", "--content", "Packed bags")
        assert result.exit_code == 0
        assert "Trip" in result.output
        with DiaryStore(db_path) as store:
            [entry] = store.get_all_entries()
        assert (entry.id, entry.title, entry.content) == (1, "Trip", "Packed bags")

    def test_add_content_only_is_untitled(self, invoke, db_path):
        result = invoke("add", "-c", "Later")
        assert result.exit_code == 0
        assert "Untitled" in result.output
        with DiaryStore(db_path) as store:
            [entry] = store.get_all_entries()
        assert entry.title is None

    def test_add_prompts_for_missing_fields(self, invoke, db_path):
        result = invoke("add", input="\nWrote some code\n")
        assert result.exit_code == 0
        with DiaryStore(db_path) as store:
            [entry] = store.get_all_entries()
        assert entry.title is None
        assert entry.content == "Wrote some code"

    def test_ids_increase(self, invoke, db_path):
        for n in range(3):
            assert invoke("add", "-c", f"entry {n}").exit_code == 0
        assert stored_ids(db_path) == [1, 2, 3]


class TestList:
    def test_empty(self, invoke):
        result = invoke("list")
        assert result.exit_code == 0
        assert "No diary entries yet." in result.output

    def test_table_is_sorted_by_time(self, invoke, seeded):
        result = invoke("list")
        assert result.exit_code == 0
        assert result.output.index("Trip") < result.output.index("Later")

    def test_json(self, invoke, seeded):
        result = invoke("list", "--json")
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert [item["id"] for item in data] == [2, 1]
        assert data[0]["timestamp"] == "2024-7-1 9:0:0"

    def test_since_filter(self, invoke, seeded):
        result = invoke("list", "--json", "--since", "2024-07-02")
        assert [item["title"] for item in json.loads(result.output)] == ["Later"]

    def test_bad_since_fails(self, invoke, seeded):
        result = invoke("list", "--since", "qwzxv")
        assert result.exit_code == 1
        assert "Could not parse time" in result.output


class TestView:
    def test_view_by_position(self, invoke, seeded):
        result = invoke("view", "1")
        assert result.exit_code == 0
        assert "Trip" in result.output
        assert "Packed bags" in result.output

    def test_view_prompts_for_position(self, invoke, seeded):
        result = invoke("view", input="2\n")
        assert result.exit_code == 0
        assert "second day" in result.output

    def test_view_empty_store_is_reported_as_empty(self, invoke):
        result = invoke("view", "1")
        assert result.exit_code == 1
        assert "No diary entries yet." in result.output
        assert "no entry #" not in result.output

    def test_view_out_of_range(self, invoke, seeded):
        result = invoke("view", "3")
        assert result.exit_code == 1
        assert "There is no entry #3" in result.output

    def test_view_zero_is_out_of_range(self, invoke, seeded):
        assert invoke("view", "0").exit_code == 1


class TestDelete:
    def test_delete_resolves_sorted_position_to_id(self, invoke, seeded):
        # Position 1 is "Trip", which has id 2
        result = invoke("delete", "1", "--yes")
        assert result.exit_code == 0
        assert stored_ids(seeded) == [1]

    def test_delete_asks_for_confirmation(self, invoke, seeded):
        result = invoke("delete", "1", input="y\n")
        assert result.exit_code == 0
        assert stored_ids(seeded) == [1]

    def test_declining_keeps_entry(self, invoke, seeded):
        result = invoke("delete", "1", input="n\n")
        assert result.exit_code == 0
        assert "Nothing deleted" in result.output
        assert stored_ids(seeded) == [1, 2]

    def test_delete_out_of_range(self, invoke, seeded):
        result = invoke("delete", "3", "--yes")
        assert result.exit_code == 1
        assert "There is no entry #3" in result.output
        assert stored_ids(seeded) == [1, 2]

    def test_delete_on_empty_store(self, invoke):
        result = invoke("delete", "1", "--yes")
        assert result.exit_code == 1
        assert "No diary entries yet." in result.output

    def test_next_add_after_delete_does_not_reuse_id(self, invoke, seeded):
        invoke("delete", "1", "--yes")
        invoke("add", "-c", "new")
        assert stored_ids(seeded) == [1, 2]
        invoke("add", "-c", "newer")
        assert stored_ids(seeded) == [1, 2, 3]


class TestReset:
    def test_reset_with_yes(self, invoke, seeded):
        result = invoke("reset", "--yes")
        assert result.exit_code == 0
        assert stored_ids(seeded) == []

    def test_reset_is_hidden(self, invoke):
        result = invoke("--help")
        assert result.exit_code == 0
        assert "reset" not in result.output


class TestInteractive:
    def test_no_command_prompts_for_action(self, invoke, db_path):
        result = invoke(input="add\nTitle\nBody\n")
        assert result.exit_code == 0
        with DiaryStore(db_path) as store:
            [entry] = store.get_all_entries()
        assert (entry.title, entry.content) == ("Title", "Body")

    def test_interactive_view_on_empty_store(self, invoke):
        result = invoke(input="view\n")
        assert result.exit_code == 1
        assert "No diary entries yet." in result.output


class TestStorageErrors:
    def test_unopenable_database(self, runner, tmp_path):
        bad = str(tmp_path / "missing" / "diary.db")
        result = runner.invoke(app, ["diary", "--db", bad, "list"])
        assert result.exit_code == 1
        assert "Could not open diary database" in result.output

    def test_corrupt_row(self, invoke, db_path):
        invoke("list")
        conn = sqlite3.connect(db_path)
        conn.execute("INSERT INTO entries VALUES (1, 'garbage', '', 'x')")
        conn.commit()
        conn.close()
        result = invoke("list")
        assert result.exit_code == 1
        assert "Unreadable timestamp" in result.output

    def test_db_from_environment(self, runner, db_path):
        result = runner.invoke(app, ["diary", "add", "-c", "via env"], env={"CODE_DIARY_DB": db_path})
        assert result.exit_code == 0
        assert stored_ids(db_path) == [1]


class TestHelpDoesNotTouchDatabase:
    @pytest.mark.parametrize("command", ["add", "list", "view", "delete"])
    def test_subcommand_help_with_unopenable_db(self, runner, tmp_path, command):
        bad = tmp_path / "missing" / "diary.db"
        result = runner.invoke(app, ["diary", "--db", str(bad), command, "--help"])
        assert result.exit_code == 0
        assert "Usage" in result.output

    def test_subcommand_help_creates_no_file(self, runner, db_path):
        result = runner.invoke(app, ["diary", "--db", db_path, "view", "--help"])
        assert result.exit_code == 0
        assert not os.path.exists(db_path)


class TestNegativePositions:
    def test_view_negative_is_out_of_range(self, invoke, seeded):
        result = invoke("view", "-1")
        assert result.exit_code == 1
        assert "There is no entry #-1" in result.output

    def test_delete_negative_is_out_of_range(self, invoke, seeded):
        result = invoke("delete", "-1", "--yes")
        assert result.exit_code == 1
        assert "There is no entry #-1" in result.output
        assert stored_ids(seeded) == [1, 2]


class TestLogFile:
    def test_log_file_option_records_store_activity(self, runner, db_path, tmp_path):
        log_file = tmp_path / "logs" / "diary.log"
        result = runner.invoke(
            app, ["diary", "--db", db_path, "--log-file", str(log_file), "-v", "add", "-c", "logged"]
        )
        logger.remove()
        assert result.exit_code == 0
        assert "Inserted entry 1" in log_file.read_text()

    def test_log_file_from_environment(self, runner, db_path, tmp_path):
        log_file = tmp_path / "env.log"
        result = runner.invoke(
            app, ["diary", "--db", db_path, "list"],
            env={"CODE_DIARY_LOG_FILE": str(log_file), "CODE_DIARY_LOG_LEVEL": "debug"},
        )
        logger.remove()
        assert result.exit_code == 0
        assert "Loaded 0 entries" in log_file.read_text()
