"""
Tests for the BaseRepository class.
"""

import sqlite3

import pytest

from src.services.repositories.base_repository import BaseRepository


@pytest.fixture
def in_memory_db():
    """Creates an in-memory SQLite database."""
    conn = sqlite3.connect(":memory:")
    conn.execute("CREATE TABLE test (id INTEGER PRIMARY KEY, value TEXT)")
    yield conn
    conn.close()


def test_initialization_without_connection():
    """Test BaseRepository can be initialized without a connection."""
    repo = BaseRepository()

    assert repo._connection is None


def test_set_connection(in_memory_db):
    repo = BaseRepository()

    repo.set_connection(in_memory_db)

    assert repo._connection is in_memory_db


def test_transaction_commits(in_memory_db):
    repo = BaseRepository(connection=in_memory_db)

    with repo.transaction() as conn:
        conn.execute("INSERT INTO test (value) VALUES ('a')")

    assert in_memory_db.execute("SELECT COUNT(*) FROM test").fetchone()[0] == 1


def test_transaction_rolls_back_and_reraises(in_memory_db):
    repo = BaseRepository(connection=in_memory_db)

    with pytest.raises(ValueError):
        with repo.transaction() as conn:
            conn.execute("INSERT INTO test (value) VALUES ('a')")
            raise ValueError("boom")

    assert in_memory_db.execute("SELECT COUNT(*) FROM test").fetchone()[0] == 0


def test_transaction_without_connection():
    repo = BaseRepository()

    with pytest.raises(RuntimeError, match="not initialized"):
        with repo.transaction():
            pass
