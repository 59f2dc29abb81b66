"""
Marketplace router component input/output models.

Records describing one inbound request, the tenant it resolved to, the static
fallback paths and platform configuration, and the redirect target produced
by the decision engine.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

# --- Enumerations ---


class RedirectReason(str, Enum):
    """Closed set of causes that can trigger a marketplace redirect."""

    DOMAIN = "domain"  # Custom domain in use, request came through another host
    NO_DOMAIN = "no_domain"  # Custom domain configured but not in use
    DELETED = "deleted"
    CLOSED = "closed"
    NOT_FOUND = "not_found"  # No match, but other marketplaces exist
    NEW_MARKETPLACE = "new_marketplace"  # Platform has no marketplaces at all
    HTTPS = "https"
    WWW_IDENT = "www_ident"  # e.g. www.mymarketplace.sharetribe.com


class RedirectStatus(str, Enum):
    """Symbolic HTTP redirect status."""

    FOUND = "found"
    MOVED_PERMANENTLY = "moved_permanently"

    @property
    def http_status(self) -> int:
        return 301 if self is RedirectStatus.MOVED_PERMANENTLY else 302


class CommunitySearchStatus(str, Enum):
    """Outcome of the tenant lookup for the request host."""

    FOUND = "found"
    NOT_FOUND = "not_found"
    SKIPPED = "skipped"


PROTOCOLS = ("http://", "https://")


# --- Validation Error ---


@dataclass(frozen=True)
class RouterValidationError:
    """Input validation error. `field` is a dotted path, e.g. paths.new_community.url."""

    code: str
    message: str
    field: str | None = None


class InputValidationError(ValueError):
    """Raised when a router input record is malformed."""

    def __init__(self, errors: list[RouterValidationError]) -> None:
        self.errors = errors
        details = "; ".join(f"{e.field}: {e.message}" for e in errors)
        super().__init__(f"Invalid router input: {details}")


class UnknownReasonError(ValueError):
    """Raised when a target is requested for a reason outside RedirectReason."""

    def __init__(self, reason: object) -> None:
        self.reason = reason
        super().__init__(f"Unknown redirect reason: '{reason}'")


# --- Input Records ---


@dataclass(frozen=True)
class Request:
    """One inbound HTTP request."""

    host: str
    protocol: str
    fullpath: str
    headers: Mapping[str, Any]
    port_string: str = ""


@dataclass(frozen=True)
class Community:
    """Tenant resolved for the request host."""

    ident: str
    use_domain: bool
    deleted: bool
    closed: bool
    domain: str | None = None


@dataclass(frozen=True)
class Path:
    """Fallback destination, either a literal URL or a named route."""

    url: str | None = None
    route_name: str | None = None


@dataclass(frozen=True)
class Paths:
    """Static fallback destinations."""

    community_not_found: Path
    new_community: Path


@dataclass(frozen=True)
class Configs:
    """Platform configuration relevant to routing."""

    always_use_ssl: bool
    app_domain: str


@dataclass(frozen=True)
class Other:
    """Lookup state that is not part of the community record."""

    no_communities: bool
    community_search_status: CommunitySearchStatus


# --- Output Record ---


@dataclass(frozen=True)
class Target:
    """
    Redirect target.

    Either `url` or `route_name` is set. Named routes carry the protocol to
    use when the route is turned into an absolute URL.
    """

    reason: RedirectReason
    status: RedirectStatus
    url: str | None = None
    protocol: str | None = None
    route_name: str | None = None

    def to_dict(self) -> dict[str, str]:
        """Serialize, omitting absent optional fields."""
        data = {
            "reason": self.reason.value,
            "url": self.url,
            "protocol": self.protocol,
            "route_name": self.route_name,
            "status": self.status.value,
        }
        return {k: v for k, v in data.items() if v is not None}


# --- Component Input/Output ---


@dataclass(frozen=True)
class NeedsRedirectInput:
    """
    Raw input for a redirect decision.

    Values may be plain mappings (validated by the component) or records
    that were already constructed.
    """

    request: Mapping[str, Any] | Request
    paths: Mapping[str, Any] | Paths
    configs: Mapping[str, Any] | Configs
    other: Mapping[str, Any] | Other
    community: Mapping[str, Any] | Community | None = None


@dataclass(frozen=True)
class RedirectDecisionOutput:
    """Result of a redirect decision. `target` is None when no redirect is needed."""

    target: Target | None = None
    errors: list[RouterValidationError] = field(default_factory=list)
    success: bool = True

    @property
    def redirect(self) -> bool:
        return self.target is not None


@dataclass(frozen=True)
class CommunityLookupResult:
    """Tenant lookup outcome for a host."""

    community: Community | None
    search_status: CommunitySearchStatus
