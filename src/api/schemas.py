from typing import Literal

from pydantic import BaseModel

# --- Shared Enums/Types ---
Reason = Literal[
    "domain",
    "no_domain",
    "deleted",
    "closed",
    "not_found",
    "new_marketplace",
    "https",
    "www_ident",
]
Status = Literal["found", "moved_permanently"]
SearchStatus = Literal["found", "not_found", "skipped"]


# --- Router Decisions ---
class TargetResponse(BaseModel):
    reason: Reason
    status: Status
    http_status: int
    url: str | None = None
    protocol: str | None = None
    route_name: str | None = None
    location: str


class ValidationErrorResponse(BaseModel):
    code: str
    message: str
    field: str | None = None


class DecisionResponse(BaseModel):
    redirect: bool
    community: str | None = None
    search_status: SearchStatus
    target: TargetResponse | None = None
