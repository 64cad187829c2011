"""
Unit tests for database helpers that do not need a server.
"""

import asyncio

import pytest

from core import db


@pytest.mark.parametrize(
    ("status", "expected"),
    [
        ("UPDATE 1", 1),
        ("DELETE 0", 0),
        ("INSERT 0 3", 3),
        ("", 0),
        (None, 0),
        ("SELECT", 0),
    ],
)
def test_affected_rows(status, expected) -> None:
    assert db.affected_rows(status) == expected


def test_database_url_strips_sslmode(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DATABASE_URL", "postgresql://u:p@db:5432/cats?sslmode=disable&application_name=cats")
    assert db.database_url() == "postgresql://u:p@db:5432/cats?application_name=cats"


def test_database_url_required(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DATABASE_URL", "  ")
    with pytest.raises(RuntimeError, match="DATABASE_URL is not set"):
        db.database_url()


def test_pool_sizes_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DB_POOL_MIN_SIZE", "3")
    monkeypatch.setenv("DB_POOL_MAX_SIZE", "2")
    assert db.pool_min_size() == 3
    assert db.pool_max_size() == 3

    monkeypatch.setenv("DB_POOL_MAX_SIZE", "not-a-number")
    assert db.pool_max_size() == 5


def test_pool_accessor_requires_init() -> None:
    with pytest.raises(RuntimeError, match="not initialized"):
        db.pool()


def test_close_pool_without_init_is_noop() -> None:
    assert asyncio.run(db.close_pool()) is None
