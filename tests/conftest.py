"""
Shared fixtures: in-memory stand-ins for the SIG store and the
governance-file fetcher.
"""

from __future__ import annotations

from typing import Optional

import pytest

from sigguard.errors import FetchFailure
from sigguard.models import ContributorRecord, MembershipLevel, Sig
from sigguard.permission import PermissionService
from sigguard.sig_info import SigInfo, parse_sig_info


class InMemorySigStore:
    def __init__(self):
        self.sigs: dict[str, Sig] = {}
        self.members: dict[int, list[ContributorRecord]] = {}
        self.calls: list[str] = []

    def add_sig(self, name: str, members: list[ContributorRecord]) -> Sig:
        sig = Sig(id=len(self.sigs) + 1, name=name)
        self.sigs[name] = sig
        self.members[sig.id] = list(members)
        return sig

    def find_sig_by_name(self, name: str) -> Optional[Sig]:
        self.calls.append(f"find_sig_by_name:{name}")
        return self.sigs.get(name)

    def list_sig_members(self, sig_id: int) -> list[ContributorRecord]:
        self.calls.append(f"list_sig_members:{sig_id}")
        return list(self.members.get(sig_id, []))


class StaticSigInfoFetcher:
    def __init__(self):
        self.documents: dict[str, dict] = {}
        self.fetched: list[str] = []

    def fetch(self, url: str) -> SigInfo:
        self.fetched.append(url)
        if url not in self.documents:
            raise FetchFailure(url, "HTTP 404")
        return parse_sig_info(self.documents[url])


def member(account_id: str, level: MembershipLevel,
           email: str | None = None, company: str | None = None) -> ContributorRecord:
    return ContributorRecord(account_id=account_id, level=level,
                             email=email, company=company)


@pytest.fixture
def store():
    return InMemorySigStore()


@pytest.fixture
def fetcher():
    return StaticSigInfoFetcher()


@pytest.fixture
def service(store, fetcher):
    return PermissionService(store=store, fetcher=fetcher)
