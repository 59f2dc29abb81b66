"""
Marketplace router component - redirect decisions for hosted marketplaces.

Validates the raw request, community, paths, configs and lookup state once,
then runs the decision engine.

Invariants:
- The first matching redirect reason wins
- A protocol upgrade always yields moved_permanently
- The continuation is called at most once, and never when no redirect is needed
- Invalid input never reaches the decision engine
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ._impl import OnRedirect, needs_redirect
from ._schemas import (
    validate_community,
    validate_configs,
    validate_other,
    validate_paths,
    validate_request,
)
from .models import (
    Configs,
    NeedsRedirectInput,
    Paths,
    RedirectDecisionOutput,
    Request,
    RouterValidationError,
)
from .ports import CommunityLookupPort


def _validate_input(
    inp: NeedsRedirectInput,
) -> tuple[dict[str, Any], list[RouterValidationError]]:
    errors: list[RouterValidationError] = []
    records: dict[str, Any] = {}

    for name, validator in (
        ("request", validate_request),
        ("paths", validate_paths),
        ("configs", validate_configs),
        ("other", validate_other),
    ):
        record, record_errors = validator(getattr(inp, name))
        errors.extend(record_errors)
        records[name] = record

    if inp.community is None:
        records["community"] = None
    else:
        community, community_errors = validate_community(inp.community)
        errors.extend(community_errors)
        records["community"] = community

    return records, errors


# --- Component Entry Points ---


def run_needs_redirect(
    inp: NeedsRedirectInput,
    *,
    on_redirect: OnRedirect | None = None,
) -> RedirectDecisionOutput:
    """
    Decide whether a request must be redirected.

    Args:
        inp: Raw request, community, paths, configs and lookup state.
        on_redirect: Optional continuation called with the target.

    Returns:
        RedirectDecisionOutput with the target (None if no redirect) or
        the validation errors.
    """
    records, errors = _validate_input(inp)
    if errors:
        return RedirectDecisionOutput(target=None, errors=errors, success=False)

    target = needs_redirect(
        request=records["request"],
        community=records["community"],
        paths=records["paths"],
        configs=records["configs"],
        other=records["other"],
        on_redirect=on_redirect,
    )

    return RedirectDecisionOutput(target=target, errors=[], success=True)


def run_lookup(
    host: str,
    *,
    lookup: CommunityLookupPort,
) -> tuple[Mapping[str, Any] | None, dict[str, Any]]:
    """
    Resolve the community and lookup state for a host.

    Returns (community, other) ready for NeedsRedirectInput.
    """
    result = lookup.find_by_host(host)
    community = vars(result.community) if result.community is not None else None
    other = {
        "no_communities": lookup.count() == 0,
        "community_search_status": result.search_status.value,
    }
    return community, other


def run_for_host(
    request: Mapping[str, Any] | Request,
    *,
    lookup: CommunityLookupPort,
    paths: Mapping[str, Any] | Paths,
    configs: Mapping[str, Any] | Configs,
    on_redirect: OnRedirect | None = None,
) -> RedirectDecisionOutput:
    """Look up the community for the request host, then decide."""
    host = request.host if isinstance(request, Request) else request.get("host")
    if not isinstance(host, str):
        return RedirectDecisionOutput(
            target=None,
            errors=[
                RouterValidationError(
                    code="required",
                    message="host is required",
                    field="request.host",
                )
            ],
            success=False,
        )

    community, other = run_lookup(host, lookup=lookup)
    return run_needs_redirect(
        NeedsRedirectInput(
            request=request,
            community=community,
            paths=paths,
            configs=configs,
            other=other,
        ),
        on_redirect=on_redirect,
    )


def run(
    inp: NeedsRedirectInput,
    *,
    on_redirect: OnRedirect | None = None,
) -> RedirectDecisionOutput:
    """
    Main entry point for the marketplace router component.

    Dispatches to appropriate handler based on input type.
    """
    if isinstance(inp, NeedsRedirectInput):
        return run_needs_redirect(inp, on_redirect=on_redirect)
    else:
        raise ValueError(f"Unknown input type: {type(inp)}")
