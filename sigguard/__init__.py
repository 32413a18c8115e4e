"""
SIG Guard
Computes who may approve a pull request touching a SIG governance file,
and how many approvals it needs.
"""

from sigguard.errors import ConflictError, FetchFailure, SigGuardError
from sigguard.models import (
    ChangedFile,
    ContributorRecord,
    FileStatus,
    MembershipLevel,
    PermissionDecision,
    PermissionQuery,
    Response,
    Sig,
)
from sigguard.permission import PermissionService

__all__ = [
    "ChangedFile",
    "ConflictError",
    "ContributorRecord",
    "FetchFailure",
    "FileStatus",
    "MembershipLevel",
    "PermissionDecision",
    "PermissionQuery",
    "PermissionService",
    "Response",
    "Sig",
    "SigGuardError",
]
