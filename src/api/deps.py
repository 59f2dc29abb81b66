import os
from functools import lru_cache
from pathlib import Path

from fastapi import Request

from src.adapters.community_lookup import InMemoryCommunityLookup
from src.components.marketplace_router import CommunityLookupPort
from src.rules.loader import load_rules
from src.rules.models import RouterRules


# --- Settings ---
class Settings:
    def __init__(self) -> None:
        self.base_dir = Path(os.getcwd())
        self.rules_path = Path(os.environ.get("ROUTER_RULES_PATH", self.base_dir / "rules.yaml"))


@lru_cache
def get_settings() -> Settings:
    return Settings()


# --- Rules ---
@lru_cache
def load_default_rules() -> RouterRules:
    return load_rules(get_settings().rules_path)


def get_rules(request: Request) -> RouterRules:
    """Rules the running application was built with."""
    return request.app.state.rules  # type: ignore[no-any-return]


# --- Community Lookup ---
def get_lookup(request: Request) -> CommunityLookupPort:
    return request.app.state.lookup  # type: ignore[no-any-return]


def default_lookup(rules: RouterRules) -> InMemoryCommunityLookup:
    return InMemoryCommunityLookup.from_rules(rules)
