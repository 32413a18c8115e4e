"""
SIG Governance Declaration
Loads a sig-info.json file from a pull request and flattens its member
lists into ContributorRecords.

File shape:

    {
      "name": "planner",
      "techLeaders": [{"githubName": "alice", "email": "...", "company": "..."}],
      "coLeaders": [...],
      "committers": [...],
      "reviewers": [...],
      "activeContributors": [...]
    }
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Any, Optional

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from sigguard.errors import FetchFailure
from sigguard.models import ContributorRecord, MembershipLevel

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

SIG_INFO_FETCH_TIMEOUT_SECONDS = float(
    os.environ.get("SIG_INFO_FETCH_TIMEOUT_SECONDS", "10")
)

_LEVEL_KEYS = {level.value: level for level in MembershipLevel}


# ---------------------------------------------------------------------------
# Declaration types
# ---------------------------------------------------------------------------

class ContributorDeclaration(BaseModel):
    """A single member entry as written in sig-info.json."""
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    github_name: str = Field(alias="githubName", min_length=1)
    email: Optional[str] = None
    company: Optional[str] = None


@dataclass
class SigInfo:
    name: str
    # Insertion order is the document order of the level keys.
    members: dict[MembershipLevel, list[ContributorDeclaration]] = field(
        default_factory=dict
    )


def parse_sig_info(payload: Any) -> SigInfo:
    """Build a SigInfo from decoded JSON. Raises ValueError if malformed."""
    if not isinstance(payload, dict):
        raise ValueError(f"expected a JSON object, got {type(payload).__name__}")

    name = payload.get("name")
    if not isinstance(name, str) or not name:
        raise ValueError("missing SIG 'name'")

    members: dict[MembershipLevel, list[ContributorDeclaration]] = {}
    for key, entries in payload.items():
        level = _LEVEL_KEYS.get(key)
        if level is None:
            continue
        if entries is None:
            entries = []
        if not isinstance(entries, list):
            raise ValueError(f"'{key}' must be a list")
        try:
            members[level] = [
                ContributorDeclaration.model_validate(entry) for entry in entries
            ]
        except ValidationError as exc:
            raise ValueError(f"invalid entry in '{key}': {exc}") from exc

    return SigInfo(name=name, members=members)


# ---------------------------------------------------------------------------
# Flattening
# ---------------------------------------------------------------------------

def collect_contributors_by_level(sig_info: SigInfo) -> list[ContributorRecord]:
    """Flatten every level's members, keeping document order throughout."""
    contributors: list[ContributorRecord] = []
    for level, entries in sig_info.members.items():
        for entry in entries:
            contributors.append(ContributorRecord(
                account_id=entry.github_name,
                level=level,
                email=entry.email,
                company=entry.company,
            ))
    return contributors


# ---------------------------------------------------------------------------
# Fetcher
# ---------------------------------------------------------------------------

class SigInfoFetcher:
    """
    Fetches a governance file from its raw URL.

    Every failure (transport, timeout, HTTP status, JSON, shape) is raised
    as FetchFailure.
    """

    def __init__(
        self,
        timeout: float = SIG_INFO_FETCH_TIMEOUT_SECONDS,
        client: httpx.Client | None = None,
    ):
        self._client = client or httpx.Client(timeout=timeout, follow_redirects=True)

    def fetch(self, url: str) -> SigInfo:
        try:
            resp = self._client.get(url)
            resp.raise_for_status()
            payload = resp.json()
        except httpx.TimeoutException as exc:
            logger.warning("Timed out fetching %s", url)
            raise FetchFailure(url, "timed out") from exc
        except httpx.HTTPStatusError as exc:
            logger.warning("Fetching %s returned %s", url, exc.response.status_code)
            raise FetchFailure(url, f"HTTP {exc.response.status_code}") from exc
        except httpx.HTTPError as exc:
            logger.warning("Fetching %s failed: %s", url, exc)
            raise FetchFailure(url, str(exc)) from exc
        except ValueError as exc:
            raise FetchFailure(url, f"invalid JSON: {exc}") from exc

        try:
            return parse_sig_info(payload)
        except ValueError as exc:
            raise FetchFailure(url, str(exc)) from exc

    def close(self) -> None:
        self._client.close()
