"""
Marketplace redirect middleware.

Runs the marketplace router for every inbound request and answers with a
redirect when one is needed.

Key behaviors:
- Host and port are split the way the router expects (port_string is empty
  for default ports)
- Headers are exposed CGI style (Via -> HTTP_VIA)
- Named route targets are resolved against the application's routes
- Invalid router input is a server error (500), never a redirect
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, RedirectResponse, Response
from starlette.types import ASGIApp

from src.adapters.routes import StarletteRouteResolver
from src.components.marketplace_router import (
    CommunityLookupPort,
    RouteResolverPort,
    Target,
    run_for_host,
)
from src.rules.models import RouterRules

logger = logging.getLogger(__name__)

DEFAULT_PORTS = {"http": 80, "https": 443}


def cgi_headers(request: Request) -> dict[str, str]:
    """Header map keyed the CGI way, e.g. Via -> HTTP_VIA."""
    return {f"HTTP_{k.upper().replace('-', '_')}": v for k, v in request.headers.items()}


def router_request(request: Request) -> dict[str, Any]:
    """Translate a Starlette request into router request fields."""
    scheme = request.url.scheme
    port = request.url.port
    port_string = f":{port}" if port and port != DEFAULT_PORTS.get(scheme) else ""
    fullpath = request.url.path
    if request.url.query:
        fullpath = f"{fullpath}?{request.url.query}"

    return {
        "host": request.url.hostname or "",
        "protocol": f"{scheme}://",
        "fullpath": fullpath,
        "port_string": port_string,
        "headers": cgi_headers(request),
    }


def redirect_location(
    target: Target,
    request_fields: dict[str, Any],
    resolver: RouteResolverPort,
) -> str:
    """Absolute location for a target. Named routes stay on the current host."""
    if target.url is not None:
        return target.url

    path = resolver.path_for(target.route_name)  # type: ignore[arg-type]
    protocol = target.protocol or request_fields["protocol"].removesuffix("://")
    return f"{protocol}://{request_fields['host']}{request_fields['port_string']}{path}"


class MarketplaceRedirectMiddleware(BaseHTTPMiddleware):
    """Redirects requests according to the marketplace router."""

    def __init__(
        self,
        app: ASGIApp,
        rules: RouterRules,
        lookup: CommunityLookupPort,
        exempt_paths: Iterable[str] = ("/health",),
        exempt_routes: Iterable[str] = (),
    ) -> None:
        super().__init__(app)
        self.rules = rules
        self.lookup = lookup
        self.exempt_paths = set(exempt_paths)
        self.exempt_routes = tuple(exempt_routes)

    def _is_exempt(self, request: Request, resolver: RouteResolverPort) -> bool:
        if request.url.path in self.exempt_paths:
            return True
        return any(request.url.path == resolver.path_for(name) for name in self.exempt_routes)

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        resolver = StarletteRouteResolver(request.app)
        if self._is_exempt(request, resolver):
            return await call_next(request)

        fields = router_request(request)
        result = run_for_host(
            fields,
            lookup=self.lookup,
            paths=self.rules.paths_dict(),
            configs=self.rules.configs(),
        )

        if not result.success:
            logger.error(
                "Marketplace router rejected request input: %s",
                "; ".join(f"{e.field}: {e.message}" for e in result.errors),
            )
            return JSONResponse({"detail": "Internal server error"}, status_code=500)

        if result.target is None:
            return await call_next(request)

        location = redirect_location(result.target, fields, resolver)
        logger.info(
            "Redirect %s -> %s (%s)",
            request.url,
            location,
            result.target.reason.value,
        )
        return RedirectResponse(url=location, status_code=result.target.status.http_status)
