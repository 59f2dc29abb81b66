"""
Marketplace router component port definitions.
"""

from __future__ import annotations

from typing import Protocol

from .models import CommunityLookupResult


class CommunityLookupPort(Protocol):
    """Tenant lookup interface."""

    def find_by_host(self, host: str) -> CommunityLookupResult:
        """Resolve a request host to a community."""
        ...

    def count(self) -> int:
        """Number of communities on the platform."""
        ...


class RouteResolverPort(Protocol):
    """Resolves named routes to paths."""

    def path_for(self, route_name: str) -> str:
        """Return the path for a named route."""
        ...
