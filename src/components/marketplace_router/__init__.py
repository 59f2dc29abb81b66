"""
Marketplace router component - redirect decisions for hosted marketplaces.
"""

from ._impl import (
    build_target,
    build_url,
    needs_redirect,
    resolve_protocol,
    select_reason,
    should_use_https,
)
from ._schemas import (
    create_community,
    create_configs,
    create_other,
    create_paths,
    create_request,
    create_target,
    validate_community,
    validate_configs,
    validate_other,
    validate_path,
    validate_paths,
    validate_request,
    validate_target,
)
from .component import run, run_for_host, run_lookup, run_needs_redirect
from .models import (
    Community,
    CommunityLookupResult,
    CommunitySearchStatus,
    Configs,
    InputValidationError,
    NeedsRedirectInput,
    Other,
    Path,
    Paths,
    RedirectDecisionOutput,
    RedirectReason,
    RedirectStatus,
    Request,
    RouterValidationError,
    Target,
    UnknownReasonError,
)
from .ports import CommunityLookupPort, RouteResolverPort

__all__ = [
    # Entry points
    "run",
    "run_for_host",
    "run_lookup",
    "run_needs_redirect",
    "needs_redirect",
    # Decision engine
    "build_target",
    "build_url",
    "resolve_protocol",
    "select_reason",
    "should_use_https",
    # Schemas
    "create_community",
    "create_configs",
    "create_other",
    "create_paths",
    "create_request",
    "create_target",
    "validate_community",
    "validate_configs",
    "validate_other",
    "validate_path",
    "validate_paths",
    "validate_request",
    "validate_target",
    # Models
    "Community",
    "CommunityLookupResult",
    "CommunitySearchStatus",
    "Configs",
    "NeedsRedirectInput",
    "Other",
    "Path",
    "Paths",
    "RedirectDecisionOutput",
    "RedirectReason",
    "RedirectStatus",
    "Request",
    "Target",
    # Errors
    "InputValidationError",
    "RouterValidationError",
    "UnknownReasonError",
    # Ports
    "CommunityLookupPort",
    "RouteResolverPort",
]
