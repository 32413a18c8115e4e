"""
Pull Request Permission Resolution

Decides who may approve a pull request and how many LGTMs it needs, based
on how the pull request changes a SIG's sig-info.json:

    1. pick the governance file out of the changed files
    2. fetch and flatten the declared membership
    3. diff it against the persisted membership
    4. map the first changed record's level to a policy
"""

from __future__ import annotations

import logging
import os
from typing import Callable, Optional, Protocol

from sigguard.errors import ConflictError
from sigguard.models import (
    ChangedFile,
    ContributorRecord,
    FileStatus,
    MembershipLevel,
    PermissionDecision,
    PermissionQuery,
    Response,
)
from sigguard.sig_info import SigInfo, collect_contributors_by_level
from sigguard.store import SigRepository

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

SIG_INFO_FILE_NAME = os.environ.get("SIG_INFO_FILE_NAME", "sig-info.json")

DEFAULT_LGTM_NUMBER = 2

STATUS_OK = 200
STATUS_CONFLICT = 409

SUCCESS_MESSAGE = "List permission success."
CONFLICT_MESSAGE = "Cannot multiple community files permissions."


class SigInfoLoader(Protocol):
    def fetch(self, url: str) -> SigInfo: ...


# ---------------------------------------------------------------------------
# File selection
# ---------------------------------------------------------------------------

def select_sig_info_files(
    files: list[ChangedFile], sig_info_file_name: str
) -> list[ChangedFile]:
    """Changed files whose name contains the pattern, deletions excluded."""
    pattern = sig_info_file_name.lower()
    return [
        f for f in files
        if pattern in f.filename.lower() and f.status != FileStatus.DELETED
    ]


def ensure_single_sig_info_file(
    files: list[ChangedFile], sig_info_file_name: str
) -> Optional[ChangedFile]:
    """Return the one governance file, None if untouched.

    Raises ConflictError when more than one governance file is touched.
    """
    selected = select_sig_info_files(files, sig_info_file_name)
    if len(selected) > 1:
        raise ConflictError([f.filename for f in selected])
    if not selected:
        return None
    return selected[0]


# ---------------------------------------------------------------------------
# Diff
# ---------------------------------------------------------------------------

def diff_members(
    declared: list[ContributorRecord], persisted: list[ContributorRecord]
) -> list[ContributorRecord]:
    """Declared records with no field-identical persisted counterpart."""
    return [d for d in declared if d not in persisted]


# ---------------------------------------------------------------------------
# Policy
# ---------------------------------------------------------------------------

PolicyFn = Callable[[list[ContributorRecord], list[str]], PermissionDecision]


def _maintainers_only(
    old_members: list[ContributorRecord], maintainers: list[str]
) -> PermissionDecision:
    return PermissionDecision(collaborators=list(maintainers), lgtm_number=2)


def _old_members_except(excluded: set[MembershipLevel], lgtm_number: int) -> PolicyFn:
    """Old members outside `excluded`, then maintainers."""
    def policy(
        old_members: list[ContributorRecord], maintainers: list[str]
    ) -> PermissionDecision:
        collaborators = [m.account_id for m in old_members if m.level not in excluded]
        return PermissionDecision(
            collaborators=collaborators + list(maintainers),
            lgtm_number=lgtm_number,
        )
    return policy


POLICY_TABLE: dict[MembershipLevel, PolicyFn] = {
    MembershipLevel.TECH_LEADER: _maintainers_only,
    MembershipLevel.CO_LEADER: _maintainers_only,
    MembershipLevel.COMMITTER: _maintainers_only,
    MembershipLevel.REVIEWER: _old_members_except(
        {MembershipLevel.REVIEWER, MembershipLevel.ACTIVE_CONTRIBUTOR}, 2
    ),
    MembershipLevel.ACTIVE_CONTRIBUTOR: _old_members_except(
        {MembershipLevel.ACTIVE_CONTRIBUTOR}, 1
    ),
}


def get_permissions_by_diff(
    diff: list[ContributorRecord],
    old_members: list[ContributorRecord],
    maintainers: list[str],
) -> Optional[PermissionDecision]:
    """Classify a membership diff by the level of its first record.

    Only the first record with a known level decides; the rest of the diff
    is ignored even if it holds a more privileged change. Returns None for
    an empty diff.
    """
    # FIXME: rank the whole diff by privilege instead of taking the first.
    for contributor in diff:
        policy = POLICY_TABLE.get(contributor.level)
        if policy is None:
            continue
        return policy(old_members, maintainers)
    return None


# ---------------------------------------------------------------------------
# PermissionService
# ---------------------------------------------------------------------------

class PermissionService:
    """
    Resolves the approvers and LGTM threshold of one pull request.

    Reads the SIG store and fetches one file; writes nothing. FetchFailure
    and database errors propagate to the caller.
    """

    def __init__(self, store: SigRepository, fetcher: SigInfoLoader):
        self.store = store
        self.fetcher = fetcher

    def list_permissions(self, query: PermissionQuery) -> Response:
        try:
            sig_file = ensure_single_sig_info_file(
                query.files, query.sig_info_file_name
            )
        except ConflictError as exc:
            logger.warning("Rejecting permission query: %s", exc)
            return Response(
                data=None,
                status_code=STATUS_CONFLICT,
                message=CONFLICT_MESSAGE,
            )

        if sig_file is None:
            logger.debug("No governance file touched, using collaborators")
            return self._ok(query.collaborators, DEFAULT_LGTM_NUMBER)

        sig_info = self.fetcher.fetch(sig_file.raw_url)
        sig = self.store.find_sig_by_name(sig_info.name)
        if sig is None:
            logger.info("SIG %r is new, requiring maintainers", sig_info.name)
            return self._ok(query.maintainers, DEFAULT_LGTM_NUMBER)

        old_members = self.store.list_sig_members(sig.id)
        new_members = collect_contributors_by_level(sig_info)
        difference = diff_members(new_members, old_members)

        decision = get_permissions_by_diff(
            difference, old_members, list(query.maintainers)
        )
        if decision is None:
            logger.debug("No membership change in SIG %r", sig.name)
            return self._ok(query.collaborators, DEFAULT_LGTM_NUMBER)

        logger.info(
            "SIG %r membership change (%d records, first %s): %d collaborators, lgtm=%d",
            sig.name,
            len(difference),
            difference[0].level.value,
            len(decision.collaborators),
            decision.lgtm_number,
        )
        return Response(
            data=decision,
            status_code=STATUS_OK,
            message=SUCCESS_MESSAGE,
        )

    @staticmethod
    def _ok(collaborators: list[str], lgtm_number: int) -> Response:
        return Response(
            data=PermissionDecision(
                collaborators=list(collaborators),
                lgtm_number=lgtm_number,
            ),
            status_code=STATUS_OK,
            message=SUCCESS_MESSAGE,
        )
