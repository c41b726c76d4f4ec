"""Shared test fixtures for code-diary."""

import pytest
from typer.testing import CliRunner

from codediary.DIARY.database import DiaryStore


@pytest.fixture
def db_path(tmp_path):
    """Path to a diary database inside a per-test temporary directory."""
    return str(tmp_path / "code_diary.db")


@pytest.fixture
def store(db_path):
    with DiaryStore(db_path) as s:
        yield s


@pytest.fixture
def runner():
    return CliRunner()
