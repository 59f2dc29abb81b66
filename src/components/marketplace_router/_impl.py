"""
Marketplace redirect decision engine.

Decides whether a request to a hosted marketplace must be redirected, and
builds the redirect target.

Functional Core - pure business logic, no I/O.

Key behaviors:
- Protocol upgrade to HTTPS when always_use_ssl is on (except robots.txt and
  traffic already routed through the internal proxy)
- Custom domain preference (domain / no_domain) and www stripping
- Not found, deleted and closed marketplaces go to the not-found page with
  UTM tracking parameters
- A protocol upgrade always yields a permanent redirect
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any
from urllib.parse import urlencode, urlsplit, urlunsplit

from ._schemas import (
    create_community,
    create_configs,
    create_other,
    create_paths,
    create_request,
    create_target,
)
from .models import (
    Community,
    CommunitySearchStatus,
    Configs,
    Other,
    Path,
    Paths,
    RedirectReason,
    RedirectStatus,
    Request,
    Target,
    UnknownReasonError,
)

logger = logging.getLogger(__name__)

PROXY_MARKER = "sharetribe_proxy"
VIA_HEADER = "HTTP_VIA"
ROBOTS_PATH = "/robots.txt"

UTM_CAMPAIGNS: dict[RedirectReason, str] = {
    RedirectReason.NOT_FOUND: "na-auto-redirect",
    RedirectReason.DELETED: "dl-auto-redirect",
    RedirectReason.CLOSED: "qc-auto-redirect",
}

OnRedirect = Callable[[Target], Any]


# --- URL Helpers ---


def build_url(base: str, params: Mapping[str, str]) -> str:
    """Append query parameters to a URL, keeping any existing query and fragment."""
    if not params:
        return base
    parts = urlsplit(base)
    encoded = urlencode(list(params.items()))
    query = f"{parts.query}&{encoded}" if parts.query else encoded
    return urlunsplit((parts.scheme, parts.netloc, parts.path, query, parts.fragment))


# --- Protocol Resolver ---


def _from_proxy(request: Request) -> bool:
    try:
        via = request.headers[VIA_HEADER]
    except KeyError:
        return False
    return bool(via) and PROXY_MARKER in via


def should_use_https(request: Request, configs: Configs) -> bool:
    """HTTPS is enforced unless the request came via the proxy or asks for robots.txt."""
    return configs.always_use_ssl and not _from_proxy(request) and request.fullpath != ROBOTS_PATH


def resolve_protocol(request: Request, community: Community | None, configs: Configs) -> str:
    """Return "https" or "http" for the response."""
    if should_use_https(request, configs):
        return "https"
    return "http" if request.protocol == "http://" else "https"


# --- Reason Selector ---


def select_reason(
    request: Request,
    community: Community | None,
    configs: Configs,
    other: Other,
    protocol_needs_redirect: bool,
) -> RedirectReason | None:
    """
    Pick the redirect reason. The first matching rule wins.

    Returns None when the request can be served as is.
    """
    not_found = other.community_search_status == CommunitySearchStatus.NOT_FOUND

    if not_found and other.no_communities:
        return RedirectReason.NEW_MARKETPLACE
    if not_found:
        return RedirectReason.NOT_FOUND

    if community is not None:
        if community.deleted:
            return RedirectReason.DELETED
        if community.closed:
            return RedirectReason.CLOSED
        if community.domain and community.use_domain and request.host != community.domain:
            return RedirectReason.DOMAIN
        if community.domain and not community.use_domain and request.host == community.domain:
            return RedirectReason.NO_DOMAIN
        if request.host == f"www.{community.ident}.{configs.app_domain}":
            return RedirectReason.WWW_IDENT

    if protocol_needs_redirect:
        return RedirectReason.HTTPS

    return None


# --- Target Builder ---


def _path_target(path: Path, status: RedirectStatus, protocol: str) -> dict[str, Any]:
    return {
        "url": path.url,
        "route_name": path.route_name,
        "status": status,
        "protocol": protocol,
    }


def _not_found_target(
    reason: RedirectReason,
    status: RedirectStatus,
    request: Request,
    paths: Paths,
    protocol: str,
) -> dict[str, Any]:
    path = paths.community_not_found
    if path.url is None:
        return _path_target(path, status, protocol)

    url = build_url(
        path.url,
        {
            "utm_source": request.host,
            "utm_medium": "redirect",
            "utm_campaign": UTM_CAMPAIGNS[reason],
        },
    )
    return {"url": url, "status": status, "protocol": protocol}


def _url_target(protocol: str, host: str, request: Request) -> dict[str, Any]:
    return {
        "url": f"{protocol}://{host}{request.port_string}{request.fullpath}",
        "status": RedirectStatus.MOVED_PERMANENTLY,
    }


def build_target(
    reason: RedirectReason | str,
    request: Request,
    community: Community | None,
    paths: Paths,
    configs: Configs,
    protocol: str,
    protocol_needs_redirect: bool,
) -> Target:
    """
    Build the redirect target for a reason.

    Raises UnknownReasonError if the reason is not a RedirectReason.
    """
    try:
        reason = RedirectReason(reason)
    except ValueError as e:
        raise UnknownReasonError(reason) from e

    if reason is RedirectReason.NEW_MARKETPLACE:
        fields = _path_target(paths.new_community, RedirectStatus.FOUND, protocol)
    elif reason is RedirectReason.NOT_FOUND:
        fields = _not_found_target(reason, RedirectStatus.FOUND, request, paths, protocol)
    elif reason in (RedirectReason.DELETED, RedirectReason.CLOSED):
        fields = _not_found_target(
            reason, RedirectStatus.MOVED_PERMANENTLY, request, paths, protocol
        )
    elif reason is RedirectReason.DOMAIN:
        fields = _url_target(protocol, community.domain, request)  # type: ignore[union-attr,arg-type]
    elif reason in (RedirectReason.NO_DOMAIN, RedirectReason.WWW_IDENT):
        subdomain = f"{community.ident}.{configs.app_domain}"  # type: ignore[union-attr]
        fields = _url_target(protocol, subdomain, request)
    elif reason is RedirectReason.HTTPS:
        fields = _url_target(protocol, request.host, request)
    else:
        raise UnknownReasonError(reason)

    # A protocol upgrade is always permanent
    if protocol_needs_redirect:
        fields["status"] = RedirectStatus.MOVED_PERMANENTLY
    fields["reason"] = reason

    return create_target(fields)


# --- Orchestrator ---


def needs_redirect(
    request: Request | Mapping[str, Any],
    community: Community | Mapping[str, Any] | None,
    paths: Paths | Mapping[str, Any],
    configs: Configs | Mapping[str, Any],
    other: Other | Mapping[str, Any],
    on_redirect: OnRedirect | None = None,
) -> Target | None:
    """
    Decide whether the request needs a redirect.

    When it does, `on_redirect` is called once with the target, and the
    target is returned. Raw mappings are validated first and raise
    InputValidationError when malformed.
    """
    request = create_request(request)
    community = create_community(community) if community is not None else None
    paths = create_paths(paths)
    configs = create_configs(configs)
    other = create_other(other)

    protocol = resolve_protocol(request, community, configs)
    protocol_needs_redirect = request.protocol != f"{protocol}://"

    reason = select_reason(request, community, configs, other, protocol_needs_redirect)
    if reason is None:
        return None

    target = build_target(
        reason,
        request,
        community,
        paths,
        configs,
        protocol,
        protocol_needs_redirect,
    )
    logger.debug(
        "Redirecting %s%s%s (%s, %s)",
        request.host,
        request.port_string,
        request.fullpath,
        target.reason.value,
        target.status.value,
    )

    if on_redirect is not None:
        on_redirect(target)
    return target
