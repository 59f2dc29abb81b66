"""
Named route resolution backed by a Starlette/FastAPI application.
"""

from __future__ import annotations

from starlette.routing import NoMatchFound
from starlette.types import ASGIApp


class StarletteRouteResolver:
    """Resolves route names with the application's router."""

    def __init__(self, app: ASGIApp) -> None:
        self._app = app

    def path_for(self, route_name: str) -> str:
        try:
            return str(self._app.url_path_for(route_name))  # type: ignore[attr-defined]
        except NoMatchFound as e:
            raise LookupError(f"No route named '{route_name}'") from e
