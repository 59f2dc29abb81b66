"""
Router diagnostics routes.

Explains what the marketplace router would do for a URL, without
redirecting.

Key behaviors:
- Accepts an absolute http(s) URL and an optional Via header value
- Returns the lookup outcome and the redirect target (if any)
- Invalid URLs are rejected with 422
"""

from __future__ import annotations

from urllib.parse import urlsplit

from fastapi import APIRouter, Depends, HTTPException, Request

from src.adapters.routes import StarletteRouteResolver
from src.api.deps import get_lookup, get_rules
from src.api.middleware import DEFAULT_PORTS, redirect_location
from src.api.schemas import DecisionResponse, TargetResponse
from src.components.marketplace_router import (
    CommunityLookupPort,
    NeedsRedirectInput,
    run_lookup,
    run_needs_redirect,
)
from src.rules.models import RouterRules

router = APIRouter()


def request_fields_from_url(url: str, via: str | None = None) -> dict[str, object]:
    """Build router request fields from an absolute URL."""
    parts = urlsplit(url)
    if parts.scheme not in DEFAULT_PORTS or not parts.hostname:
        raise ValueError(f"Not an absolute http(s) URL: {url!r}")

    port = parts.port
    port_string = f":{port}" if port and port != DEFAULT_PORTS[parts.scheme] else ""
    fullpath = parts.path or "/"
    if parts.query:
        fullpath = f"{fullpath}?{parts.query}"

    return {
        "host": parts.hostname,
        "protocol": f"{parts.scheme}://",
        "fullpath": fullpath,
        "port_string": port_string,
        "headers": {"HTTP_VIA": via} if via else {},
    }


@router.get("/decide", response_model=DecisionResponse)
def decide(
    url: str,
    request: Request,
    via: str | None = None,
    rules: RouterRules = Depends(get_rules),
    lookup: CommunityLookupPort = Depends(get_lookup),
) -> DecisionResponse:
    """Explain the redirect decision for a URL."""
    try:
        fields = request_fields_from_url(url, via)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e

    community, other = run_lookup(fields["host"], lookup=lookup)  # type: ignore[arg-type]
    result = run_needs_redirect(
        NeedsRedirectInput(
            request=fields,
            community=community,
            paths=rules.paths_dict(),
            configs=rules.configs(),
            other=other,
        )
    )
    if not result.success:
        raise HTTPException(
            status_code=422,
            detail=[{"code": e.code, "message": e.message, "field": e.field} for e in result.errors],
        )

    target = None
    if result.target is not None:
        resolver = StarletteRouteResolver(request.app)
        target = TargetResponse(
            **result.target.to_dict(),
            http_status=result.target.status.http_status,
            location=redirect_location(result.target, fields, resolver),
        )

    return DecisionResponse(
        redirect=target is not None,
        community=community["ident"] if community is not None else None,
        search_status=other["community_search_status"],
        target=target,
    )
