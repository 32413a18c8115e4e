"""
SIG Membership Store
Read-only access to persisted SIGs and their members.

Tables:
    sig(id, name)
    sig_member(id, sig_id, contributor_id, level)
    contributor_info(id, github, email, company)
"""

from __future__ import annotations

import logging
import os
from typing import Optional, Protocol

import psycopg2

from sigguard.models import ContributorRecord, MembershipLevel, Sig

logger = logging.getLogger(__name__)

DB_CONFIG = {
    "host": os.environ.get("SIG_DB_HOST", "localhost"),
    "port": int(os.environ.get("SIG_DB_PORT", "5432")),
    "dbname": os.environ.get("SIG_DB_NAME", "community"),
    "user": os.environ.get("SIG_DB_USER", "admin"),
    "password": os.environ.get("SIG_DB_PASSWORD", "password123"),
    "connect_timeout": int(os.environ.get("SIG_DB_CONNECT_TIMEOUT_SECONDS", "5")),
}


class SigRepository(Protocol):
    def find_sig_by_name(self, name: str) -> Optional[Sig]: ...

    def list_sig_members(self, sig_id: int) -> list[ContributorRecord]: ...


class SigStore:
    """
    PostgreSQL-backed SigRepository. SELECT-only.

    A connection is opened per call and always closed; database errors
    propagate to the caller.
    """

    def __init__(self, db_config: dict | None = None):
        self._db_config = db_config or DB_CONFIG

    def _connect(self):
        return psycopg2.connect(**self._db_config)

    def find_sig_by_name(self, name: str) -> Optional[Sig]:
        """Return the SIG with this exact name, or None if unknown."""
        conn = self._connect()
        try:
            cur = conn.cursor()
            cur.execute(
                "SELECT id, name FROM sig WHERE name = %s LIMIT 1",
                (name,),
            )
            row = cur.fetchone()
            cur.close()
            if row is None:
                return None
            return Sig(id=row[0], name=row[1])
        finally:
            conn.close()

    def list_sig_members(self, sig_id: int) -> list[ContributorRecord]:
        """Return the persisted roster of a SIG with contact fields."""
        conn = self._connect()
        try:
            cur = conn.cursor()
            cur.execute(
                """
                SELECT ci.github, sm.level, ci.email, ci.company
                FROM sig_member sm
                LEFT JOIN contributor_info ci ON sm.contributor_id = ci.id
                WHERE sm.sig_id = %s
                ORDER BY sm.id ASC
                """,
                (sig_id,),
            )
            rows = cur.fetchall()
            cur.close()
        finally:
            conn.close()

        members = [
            ContributorRecord(
                account_id=row[0],
                level=MembershipLevel(row[1]),
                email=row[2],
                company=row[3],
            )
            for row in rows
        ]
        logger.debug("Loaded %d members for sig %s", len(members), sig_id)
        return members
