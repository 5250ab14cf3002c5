"""
Unit tests for the database helpers in utils.database.

Run: pytest tests/unit/test_database.py -v
"""

import sqlite3
from datetime import datetime, timedelta

import pytest
from sqlalchemy.exc import OperationalError
from sqlmodel import select

from models.candidate import Candidate
from utils.database import atomic, is_lock_conflict


class PgError(Exception):
    def __init__(self, sqlstate):
        super().__init__(f"sqlstate {sqlstate}")
        self.sqlstate = sqlstate


def wrap(orig):
    return OperationalError("UPDATE documents SET is_primary=?", {}, orig)


class TestLockConflict:

    def test_sqlite_busy_is_a_conflict(self):
        assert is_lock_conflict(wrap(sqlite3.OperationalError("database is locked"))) is True

    def test_postgres_serialization_failures_are_conflicts(self):
        assert is_lock_conflict(wrap(PgError("40001"))) is True
        assert is_lock_conflict(wrap(PgError("40P01"))) is True

    def test_other_operational_errors_are_not(self):
        assert is_lock_conflict(wrap(sqlite3.OperationalError("no such table: documents"))) is False
        assert is_lock_conflict(wrap(PgError("08006"))) is False


class TestAtomic:

    def test_rolls_back_on_error(self, db, org_a):
        with pytest.raises(RuntimeError):
            with atomic(db):
                db.add(Candidate(organization_id=org_a, first_name="Tmp", last_name="Row"))
                db.flush()
                raise RuntimeError("boom")

        assert db.exec(select(Candidate).where(Candidate.first_name == "Tmp")).all() == []


class TestTimestamps:

    def test_naive_utc_timestamps_are_stored(self, db, org_a):
        with atomic(db):
            candidate = Candidate(organization_id=org_a, first_name="Grace", last_name="Hopper")
            db.add(candidate)

        db.refresh(candidate)
        assert candidate.created_at.tzinfo is None
        assert abs(datetime.utcnow() - candidate.created_at) < timedelta(minutes=1)
