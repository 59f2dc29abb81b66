from typing import Any

from pydantic import BaseModel, ConfigDict, model_validator


class PathRule(BaseModel):
    url: str | None = None
    route_name: str | None = None

    model_config = ConfigDict(extra="forbid")

    @model_validator(mode="after")
    def exactly_one_destination(self) -> "PathRule":
        if (self.url is None) == (self.route_name is None):
            raise ValueError("exactly one of url or route_name must be set")
        return self


class PathsRules(BaseModel):
    community_not_found: PathRule
    new_community: PathRule


class CommunityRule(BaseModel):
    ident: str
    domain: str | None = None
    use_domain: bool = False
    deleted: bool = False
    closed: bool = False


class RouterRules(BaseModel):
    app_domain: str
    always_use_ssl: bool = False
    paths: PathsRules
    # Seed data for the in-memory community lookup (dev / demo only)
    communities: list[CommunityRule] = []

    def configs(self) -> dict[str, Any]:
        return {"always_use_ssl": self.always_use_ssl, "app_domain": self.app_domain}

    def paths_dict(self) -> dict[str, Any]:
        return self.paths.model_dump()
