"""
SigStore tests against a stubbed psycopg2 connection.

Usage:  pytest tests/test_store.py
"""

from __future__ import annotations

import psycopg2
import pytest

from sigguard.models import ContributorRecord, MembershipLevel, Sig
from sigguard.store import SigStore


class FakeCursor:
    def __init__(self, rows, error=None):
        self.rows = rows
        self.error = error
        self.executed = []
        self.closed = False

    def execute(self, sql, params=None):
        self.executed.append((sql, params))
        if self.error is not None:
            raise self.error

    def fetchone(self):
        return self.rows[0] if self.rows else None

    def fetchall(self):
        return list(self.rows)

    def close(self):
        self.closed = True


class FakeConnection:
    def __init__(self, rows, error=None):
        self.cursor_obj = FakeCursor(rows, error)
        self.closed = False

    def cursor(self):
        return self.cursor_obj

    def close(self):
        self.closed = True


@pytest.fixture
def connect(monkeypatch):
    connections = []

    def install(rows, error=None):
        def fake_connect(**kwargs):
            conn = FakeConnection(rows, error)
            connections.append((kwargs, conn))
            return conn
        monkeypatch.setattr(psycopg2, "connect", fake_connect)
        return connections

    return install


def test_find_sig_by_name(connect):
    connections = connect([(7, "planner")])
    store = SigStore(db_config={"dbname": "community"})

    assert store.find_sig_by_name("planner") == Sig(id=7, name="planner")
    kwargs, conn = connections[0]
    assert kwargs == {"dbname": "community"}
    assert conn.cursor_obj.executed[0][1] == ("planner",)
    assert conn.closed


def test_find_unknown_sig(connect):
    connect([])
    assert SigStore(db_config={}).find_sig_by_name("ghost") is None


def test_list_sig_members(connect):
    connections = connect([
        ("bob", "techLeaders", "bob@x.io", "X"),
        ("dave", "activeContributors", None, None),
    ])
    members = SigStore(db_config={}).list_sig_members(7)

    assert members == [
        ContributorRecord("bob", MembershipLevel.TECH_LEADER, "bob@x.io", "X"),
        ContributorRecord("dave", MembershipLevel.ACTIVE_CONTRIBUTOR, None, None),
    ]
    _, conn = connections[0]
    assert conn.cursor_obj.executed[0][1] == (7,)
    assert conn.closed


def test_connection_closed_on_error(connect):
    connections = connect([], error=psycopg2.OperationalError("server closed the connection"))
    with pytest.raises(psycopg2.OperationalError):
        SigStore(db_config={}).list_sig_members(7)
    assert connections[0][1].closed
