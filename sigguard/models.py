"""
Domain types for SIG permission resolution.

All entities are read-only inputs or transient results: nothing here is
mutated or written back by the resolver.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class MembershipLevel(str, Enum):
    """SIG membership levels, valued by their key in sig-info.json.

    No rank is attached here; privilege ordering lives in the policy table
    of sigguard.permission.
    """
    TECH_LEADER = "techLeaders"
    CO_LEADER = "coLeaders"
    COMMITTER = "committers"
    REVIEWER = "reviewers"
    ACTIVE_CONTRIBUTOR = "activeContributors"


class FileStatus(str, Enum):
    """Pull request file status as reported by GitHub."""
    ADDED = "added"
    MODIFIED = "modified"
    DELETED = "removed"
    RENAMED = "renamed"
    COPIED = "copied"
    CHANGED = "changed"
    UNCHANGED = "unchanged"


# ---------------------------------------------------------------------------
# Membership
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ContributorRecord:
    """One membership entry, persisted or freshly declared.

    Equality covers all four fields: a contact-field change alone makes two
    records different.
    """
    account_id: str
    level: MembershipLevel
    email: Optional[str] = None
    company: Optional[str] = None


@dataclass(frozen=True)
class Sig:
    id: int
    name: str


# ---------------------------------------------------------------------------
# Query / decision
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ChangedFile:
    filename: str
    status: FileStatus
    raw_url: str


@dataclass
class PermissionQuery:
    files: list[ChangedFile]
    sig_info_file_name: str
    collaborators: list[str] = field(default_factory=list)   # current default reviewers
    maintainers: list[str] = field(default_factory=list)     # top-level authority


@dataclass
class PermissionDecision:
    collaborators: list[str]
    lgtm_number: int


@dataclass
class Response:
    data: Optional[PermissionDecision]
    status_code: int
    message: str
