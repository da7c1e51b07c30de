"""
Shared test fixtures.

Unit tests run against a scripted stand-in for the connection manager: each
`cursor.execute()` consumes the next entry of a script, in order.

    list       -> result rows (fetchone/fetchall read them)
    int        -> rowcount of a statement that returns no rows
    Exception  -> raised from execute()

Statements past the end of the script return no rows.
"""

import os
import sys

import pytest

ROOT_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

from security.passwords import PasswordHasher


class FakeCursor:
    def __init__(self, script: list):
        self.script = script
        self.executed: list[tuple] = []
        self.rows: list = []
        self.rowcount = -1

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def execute(self, sql, params=None):
        self.executed.append((sql, params))
        entry = self.script.pop(0) if self.script else []
        if isinstance(entry, BaseException):
            raise entry
        if isinstance(entry, int):
            self.rows, self.rowcount = [], entry
        else:
            self.rows, self.rowcount = list(entry), len(entry)

    def fetchone(self):
        return self.rows[0] if self.rows else None

    def fetchall(self):
        return list(self.rows)


class FakeConnection:
    def __init__(self):
        self.script: list = []
        self.cur = FakeCursor(self.script)
        self.commits = 0
        self.rollbacks = 0
        self.closed = 0
        self.autocommit = False

    def cursor(self):
        return self.cur

    def commit(self):
        self.commits += 1

    def rollback(self):
        self.rollbacks += 1

    def close(self):
        self.closed = 1

    @property
    def executed(self) -> list[tuple]:
        return self.cur.executed

    @property
    def statements(self) -> list[str]:
        return [str(sql) for sql, _ in self.cur.executed]


class FakeConnectionManager:
    """Hands out one scripted connection and counts borrow/return calls."""

    def __init__(self):
        self.dbname = "pizza_test"
        self.conn = FakeConnection()
        self.server = FakeConnection()
        self.acquired = 0
        self.released = 0
        self.opened = False

    def script(self, *entries) -> None:
        self.conn.script.extend(entries)

    def open(self) -> None:
        self.opened = True

    def close(self) -> None:
        self.opened = False

    def get_connection(self):
        self.acquired += 1
        return self.conn

    def release_connection(self, conn) -> None:
        self.released += 1

    def connect_server(self):
        return self.server


@pytest.fixture
def fake_db():
    return FakeConnectionManager()


@pytest.fixture
def hasher():
    """Minimum bcrypt cost so tests stay fast."""
    return PasswordHasher(rounds=4)
