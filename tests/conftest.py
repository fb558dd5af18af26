from __future__ import annotations

import pytest
import sqlalchemy as sa
from sqlalchemy import text
from sqlalchemy.pool import StaticPool


def _setup_sqlite(engine: sa.Engine) -> None:
    with engine.begin() as conn:
        conn.execute(
            text(
                "CREATE TABLE families(id TEXT PRIMARY KEY, wedding_id TEXT, name TEXT, "
                "invited_by_admin_id TEXT)"
            )
        )
        conn.execute(
            text(
                "CREATE TABLE family_members(id TEXT PRIMARY KEY, family_id TEXT, name TEXT, "
                "attending BOOLEAN, age INTEGER)"
            )
        )
        conn.execute(
            text(
                "CREATE TABLE gifts(id TEXT PRIMARY KEY, family_id TEXT, wedding_id TEXT, "
                "amount NUMERIC)"
            )
        )
        conn.execute(
            text(
                "INSERT INTO families(id, wedding_id, name, invited_by_admin_id) VALUES "
                "('f1', 'wed-1', 'Garcia', 'admin-1'),"
                "('f2', 'wed-1', 'Lopez', 'admin-2'),"
                "('f3', 'wed-1', 'Martin', 'admin-1'),"
                "('f4', 'wed-2', 'Other', 'admin-9')"
            )
        )
        conn.execute(
            text(
                "INSERT INTO family_members(id, family_id, name, attending, age) VALUES "
                "('m1', 'f1', 'Ana', 1, 34),"
                "('m2', 'f1', 'Luis', 0, 36),"
                "('m3', 'f2', 'Eva', NULL, 8),"
                "('m4', 'f4', 'Zoe', 1, 50)"
            )
        )
        conn.execute(
            text(
                "INSERT INTO gifts(id, family_id, wedding_id, amount) VALUES "
                "('g1', 'f1', 'wed-1', 150),"
                "('g2', 'f2', 'wed-1', 100),"
                "('g3', 'f4', 'wed-2', 999)"
            )
        )


@pytest.fixture
def engine() -> sa.Engine:
    eng = sa.create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    _setup_sqlite(eng)
    return eng
