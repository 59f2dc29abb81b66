from typing import Any

from fastapi import APIRouter, Request
from fastapi.responses import PlainTextResponse

router = APIRouter()


@router.get("/")
def get_marketplace_home(request: Request) -> dict[str, Any]:
    """Marketplace front page (reached only when no redirect applies)."""
    return {"marketplace": request.url.hostname}


@router.get("/robots.txt", response_class=PlainTextResponse)
def get_robots() -> str:
    return "User-agent: *\nDisallow:\n"


@router.get("/marketplaces/new", name="new_community")
def get_new_marketplace() -> dict[str, Any]:
    """Landing page shown when the platform has no marketplaces yet."""
    return {"message": "Create your marketplace"}


@router.get("/marketplaces/not-found", name="community_not_found")
def get_marketplace_not_found(request: Request) -> dict[str, Any]:
    """Fallback page for hosts without a marketplace, when configured as a route."""
    return {"message": f"No marketplace at {request.url.hostname}"}
