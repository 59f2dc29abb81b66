import logging
from typing import Any

from fastapi import FastAPI

from src.adapters.routes import StarletteRouteResolver
from src.api.deps import default_lookup, load_default_rules
from src.api.middleware import MarketplaceRedirectMiddleware
from src.api.routes import public, router_decide
from src.components.marketplace_router import CommunityLookupPort
from src.rules.models import RouterRules

logger = logging.getLogger(__name__)

# Never redirected, whatever the host
EXEMPT_PATHS = ("/health", "/api/router/decide")


def fallback_route_names(rules: RouterRules) -> tuple[str, ...]:
    """Route names used as fallback destinations in the rules."""
    return tuple(
        path.route_name
        for path in (rules.paths.community_not_found, rules.paths.new_community)
        if path.route_name is not None
    )


def create_app(
    rules: RouterRules | None = None,
    lookup: CommunityLookupPort | None = None,
) -> FastAPI:
    """
    Build the application.

    Rules default to the rules file (fail-fast if missing or invalid); the
    community lookup defaults to the in-memory lookup seeded from the rules.
    """
    if rules is None:
        rules = load_default_rules()
    if lookup is None:
        lookup = default_lookup(rules)

    app = FastAPI(
        title="Marketplace Router",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.rules = rules
    app.state.lookup = lookup

    # --- Routers ---
    app.include_router(router_decide.router, prefix="/api/router", tags=["Router"])
    app.include_router(public.router, prefix="", tags=["Public"])

    # Fallback pages are served on the host they were requested from, so they
    # are never routed. Unknown route names fail at startup.
    exempt_routes = fallback_route_names(rules)
    resolver = StarletteRouteResolver(app)
    for name in exempt_routes:
        try:
            resolver.path_for(name)
        except LookupError as e:
            raise ValueError(f"Rules reference an unknown route: {e}") from e

    app.add_middleware(
        MarketplaceRedirectMiddleware,
        rules=rules,
        lookup=lookup,
        exempt_paths=EXEMPT_PATHS,
        exempt_routes=exempt_routes,
    )

    @app.get("/health")
    def health_check() -> dict[str, Any]:
        """Health check endpoint."""
        return {"status": "ok", "service": "marketplace-router"}

    logger.info(
        "Marketplace router ready (app_domain=%s, always_use_ssl=%s)",
        rules.app_domain,
        rules.always_use_ssl,
    )
    return app
