from pathlib import Path
from typing import Any

import pytest

from src.adapters.community_lookup import InMemoryCommunityLookup
from src.rules.loader import load_rules
from src.rules.models import RouterRules
from tests.factories import NOT_FOUND_URL

PROJECT_ROOT = Path(__file__).parent.parent


@pytest.fixture
def rules() -> RouterRules:
    """Rules loaded from the project's rules.yaml."""
    return load_rules(PROJECT_ROOT / "rules.yaml")


@pytest.fixture
def lookup(rules: RouterRules) -> InMemoryCommunityLookup:
    return InMemoryCommunityLookup.from_rules(rules)


@pytest.fixture
def paths() -> dict[str, Any]:
    return {
        "community_not_found": {"url": NOT_FOUND_URL},
        "new_community": {"route_name": "new_community"},
    }


@pytest.fixture
def configs() -> dict[str, Any]:
    return {"always_use_ssl": True, "app_domain": "sharetribe.com"}
