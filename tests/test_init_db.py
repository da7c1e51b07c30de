"""Schema bootstrap: create database if missing, seed the admin only on first creation."""

from psycopg2 import errors

import config
from db.init_db import SCHEMA_SQL, initialize_database


def test_fresh_server_creates_database_and_seeds_admin(fake_db, hasher):
    fake_db.server.script.append([])
    fake_db.script([], [(1,)], 1)

    created = initialize_database(fake_db, hasher)

    assert created is True
    assert "CREATE DATABASE" in fake_db.server.statements[1]
    assert fake_db.server.closed
    assert fake_db.opened
    sql, params = fake_db.conn.executed[1]
    assert sql.startswith("INSERT INTO users")
    assert params[0] == config.FIRST_ADMIN_NAME
    assert params[1] == config.FIRST_ADMIN_EMAIL
    assert hasher.verify(config.FIRST_ADMIN_PASSWORD, params[2])
    assert fake_db.conn.executed[2][1] == (1, "admin", None)


def test_existing_database_is_not_reseeded(fake_db, hasher):
    fake_db.server.script.append([(1,)])

    created = initialize_database(fake_db, hasher)

    assert created is False
    assert len(fake_db.server.executed) == 1
    assert fake_db.conn.statements == [SCHEMA_SQL]
    assert not any("INSERT" in s for s in fake_db.conn.statements)


def test_tables_are_created_every_start(fake_db, hasher):
    for _ in range(2):
        fake_db.server.script.append([(1,)])
        initialize_database(fake_db, hasher)
    assert fake_db.conn.statements == [SCHEMA_SQL, SCHEMA_SQL]
    assert fake_db.conn.commits == 2


def test_concurrently_created_database_counts_as_existing(fake_db, hasher):
    fake_db.server.script.extend([[], errors.DuplicateDatabase("already exists")])

    assert initialize_database(fake_db, hasher) is False
    assert not any("INSERT" in s for s in fake_db.conn.statements)


def test_schema_uses_if_not_exists():
    for line in SCHEMA_SQL.splitlines():
        if line.startswith("CREATE"):
            assert "IF NOT EXISTS" in line
