"""
Tests for the in-memory community lookup.
"""

from __future__ import annotations

import pytest

from src.adapters.community_lookup import InMemoryCommunityLookup
from src.components.marketplace_router import Community, CommunitySearchStatus


@pytest.fixture
def empty_lookup() -> InMemoryCommunityLookup:
    return InMemoryCommunityLookup("sharetribe.com")


class TestFindByHost:
    """Test host resolution."""

    def test_subdomain(self, lookup: InMemoryCommunityLookup) -> None:
        result = lookup.find_by_host("acme.sharetribe.com")

        assert result.search_status is CommunitySearchStatus.FOUND
        assert result.community is not None
        assert result.community.ident == "acme"

    def test_www_subdomain(self, lookup: InMemoryCommunityLookup) -> None:
        result = lookup.find_by_host("www.acme.sharetribe.com")

        assert result.community is not None
        assert result.community.ident == "acme"

    def test_case_insensitive(self, lookup: InMemoryCommunityLookup) -> None:
        result = lookup.find_by_host("ACME.Sharetribe.com")

        assert result.search_status is CommunitySearchStatus.FOUND

    def test_custom_domain(self, lookup: InMemoryCommunityLookup) -> None:
        result = lookup.find_by_host("www.rentbikes.com")

        assert result.community is not None
        assert result.community.ident == "bikes"

    def test_unknown_subdomain(self, lookup: InMemoryCommunityLookup) -> None:
        result = lookup.find_by_host("nope.sharetribe.com")

        assert result.community is None
        assert result.search_status is CommunitySearchStatus.NOT_FOUND

    def test_nested_subdomain_not_an_ident(self, lookup: InMemoryCommunityLookup) -> None:
        result = lookup.find_by_host("a.acme.sharetribe.com")

        assert result.search_status is CommunitySearchStatus.NOT_FOUND

    def test_unknown_domain(self, lookup: InMemoryCommunityLookup) -> None:
        result = lookup.find_by_host("elsewhere.net")

        assert result.search_status is CommunitySearchStatus.NOT_FOUND

    @pytest.mark.parametrize("host", ["sharetribe.com", "www.sharetribe.com"])
    def test_platform_site_skipped(self, lookup: InMemoryCommunityLookup, host: str) -> None:
        result = lookup.find_by_host(host)

        assert result.community is None
        assert result.search_status is CommunitySearchStatus.SKIPPED


class TestCount:
    """Test the community count."""

    def test_empty(self, empty_lookup: InMemoryCommunityLookup) -> None:
        assert empty_lookup.count() == 0

    def test_save(self, empty_lookup: InMemoryCommunityLookup) -> None:
        empty_lookup.save(Community(ident="acme", use_domain=False, deleted=False, closed=False))

        assert empty_lookup.count() == 1
        assert empty_lookup.find_by_host("acme.sharetribe.com").community is not None

    def test_from_rules(self, lookup: InMemoryCommunityLookup) -> None:
        assert lookup.count() == 5
