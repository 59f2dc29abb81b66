"""
Marketplace router component unit tests.

Tests for the run entry points: validation results, lookups and the
redirect continuation.
"""

from __future__ import annotations

from typing import Any

import pytest

from src.components.marketplace_router import (
    Community,
    CommunityLookupResult,
    CommunitySearchStatus,
    NeedsRedirectInput,
    RedirectReason,
    RedirectStatus,
    Target,
    run,
    run_for_host,
    run_lookup,
    run_needs_redirect,
)

# --- Mock Lookup ---


class MockCommunityLookup:
    """Lookup returning a fixed result."""

    def __init__(
        self,
        community: Community | None = None,
        status: CommunitySearchStatus = CommunitySearchStatus.FOUND,
        total: int = 1,
    ) -> None:
        self._result = CommunityLookupResult(community, status)
        self._total = total
        self.hosts: list[str] = []

    def find_by_host(self, host: str) -> CommunityLookupResult:
        self.hosts.append(host)
        return self._result

    def count(self) -> int:
        return self._total


PATHS = {
    "community_not_found": {"url": "https://x.com/missing"},
    "new_community": {"route_name": "new_community"},
}
CONFIGS = {"always_use_ssl": True, "app_domain": "sharetribe.com"}
ACME = Community(ident="acme", use_domain=False, deleted=False, closed=False)


def request_data(**overrides: Any) -> dict[str, Any]:
    data = {
        "host": "acme.sharetribe.com",
        "protocol": "https://",
        "fullpath": "/",
        "headers": {},
    }
    data.update(overrides)
    return data


def decision_input(**overrides: Any) -> NeedsRedirectInput:
    values: dict[str, Any] = {
        "request": request_data(),
        "community": {"ident": "acme", "use_domain": False, "deleted": False, "closed": False},
        "paths": PATHS,
        "configs": CONFIGS,
        "other": {"no_communities": False, "community_search_status": "found"},
    }
    values.update(overrides)
    return NeedsRedirectInput(**values)


# --- run_needs_redirect ---


class TestRunNeedsRedirect:
    """Test the validating entry point."""

    def test_no_redirect(self) -> None:
        result = run_needs_redirect(decision_input())

        assert result.success is True
        assert result.target is None
        assert result.redirect is False
        assert result.errors == []

    def test_redirect_calls_continuation(self) -> None:
        calls: list[Target] = []

        result = run_needs_redirect(
            decision_input(request=request_data(protocol="http://")),
            on_redirect=calls.append,
        )

        assert result.success is True
        assert result.redirect is True
        assert calls == [result.target]
        assert result.target is not None
        assert result.target.reason is RedirectReason.HTTPS

    def test_validation_errors_reported(self) -> None:
        calls: list[Target] = []

        result = run_needs_redirect(
            decision_input(
                request=request_data(protocol="ftp://"),
                configs={"always_use_ssl": "yes", "app_domain": "sharetribe.com"},
                community={"ident": "acme"},
            ),
            on_redirect=calls.append,
        )

        assert result.success is False
        assert result.target is None
        assert calls == []
        assert {e.field for e in result.errors} == {
            "request.protocol",
            "configs.always_use_ssl",
            "community.use_domain",
            "community.deleted",
            "community.closed",
        }

    def test_no_community(self) -> None:
        result = run_needs_redirect(
            decision_input(
                community=None,
                other={"no_communities": True, "community_search_status": "not_found"},
            )
        )

        assert result.target is not None
        assert result.target.reason is RedirectReason.NEW_MARKETPLACE
        assert result.target.status is RedirectStatus.FOUND

    def test_run_dispatches(self) -> None:
        result = run(decision_input(request=request_data(host="www.acme.sharetribe.com")))

        assert result.target is not None
        assert result.target.reason is RedirectReason.WWW_IDENT

    def test_run_unknown_input(self) -> None:
        with pytest.raises(ValueError, match="Unknown input type"):
            run({"request": {}})  # type: ignore[arg-type]


# --- Lookup ---


class TestRunForHost:
    """Test lookup-driven decisions."""

    def test_lookup_state(self) -> None:
        lookup = MockCommunityLookup(None, CommunitySearchStatus.NOT_FOUND, total=0)

        community, other = run_lookup("nope.sharetribe.com", lookup=lookup)

        assert community is None
        assert other == {"no_communities": True, "community_search_status": "not_found"}

    def test_found_community(self) -> None:
        lookup = MockCommunityLookup(ACME)

        result = run_for_host(
            request_data(fullpath="/robots.txt"),
            lookup=lookup,
            paths=PATHS,
            configs=CONFIGS,
        )

        assert lookup.hosts == ["acme.sharetribe.com"]
        assert result.success is True
        assert result.target is None

    def test_not_found(self) -> None:
        lookup = MockCommunityLookup(None, CommunitySearchStatus.NOT_FOUND, total=3)

        result = run_for_host(request_data(), lookup=lookup, paths=PATHS, configs=CONFIGS)

        assert result.target is not None
        assert result.target.reason is RedirectReason.NOT_FOUND
        assert "utm_source=acme.sharetribe.com" in (result.target.url or "")

    def test_missing_host(self) -> None:
        lookup = MockCommunityLookup(ACME)
        data = request_data()
        del data["host"]

        result = run_for_host(data, lookup=lookup, paths=PATHS, configs=CONFIGS)

        assert result.success is False
        assert result.errors[0].field == "request.host"
        assert lookup.hosts == []
