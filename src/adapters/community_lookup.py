"""
In-memory community lookup.

Resolves a request host to a community: custom domains first, then
<ident>.<app_domain> and www.<ident>.<app_domain>. The bare app domain (the
platform's own site) is not a community host and is skipped.
"""

from __future__ import annotations

from collections.abc import Iterable

from src.components.marketplace_router import (
    Community,
    CommunityLookupResult,
    CommunitySearchStatus,
)
from src.rules.models import RouterRules


class InMemoryCommunityLookup:
    """Community lookup backed by a dict."""

    def __init__(self, app_domain: str, communities: Iterable[Community] = ()) -> None:
        self._app_domain = app_domain.lower()
        self._by_ident: dict[str, Community] = {}
        self._by_domain: dict[str, Community] = {}
        for community in communities:
            self.save(community)

    @classmethod
    def from_rules(cls, rules: RouterRules) -> InMemoryCommunityLookup:
        return cls(
            rules.app_domain,
            [Community(**c.model_dump()) for c in rules.communities],
        )

    def save(self, community: Community) -> Community:
        self._by_ident[community.ident.lower()] = community
        if community.domain:
            self._by_domain[community.domain.lower()] = community
        return community

    def count(self) -> int:
        return len(self._by_ident)

    def find_by_host(self, host: str) -> CommunityLookupResult:
        host = host.lower()

        if host in (self._app_domain, f"www.{self._app_domain}"):
            return CommunityLookupResult(None, CommunitySearchStatus.SKIPPED)

        community = self._by_domain.get(host)
        if community is None:
            ident = self._ident_from_host(host)
            community = self._by_ident.get(ident) if ident else None

        if community is None:
            return CommunityLookupResult(None, CommunitySearchStatus.NOT_FOUND)
        return CommunityLookupResult(community, CommunitySearchStatus.FOUND)

    def _ident_from_host(self, host: str) -> str | None:
        suffix = f".{self._app_domain}"
        if not host.endswith(suffix):
            return None
        label = host[: -len(suffix)]
        if label.startswith("www."):
            label = label[len("www.") :]
        return label if label and "." not in label else None
