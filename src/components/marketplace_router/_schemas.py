"""
Input schemas for the marketplace router.

Each `validate_*` function takes a raw mapping (or an already built record)
and returns `(record, errors)`. The record is None whenever errors is
non-empty. The `create_*` functions wrap them and raise InputValidationError.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from .models import (
    PROTOCOLS,
    Community,
    CommunitySearchStatus,
    Configs,
    InputValidationError,
    Other,
    Path,
    Paths,
    RedirectReason,
    RedirectStatus,
    Request,
    RouterValidationError,
    Target,
)

_MISSING = object()


# --- Field Checks ---


def _path(prefix: str, name: str) -> str:
    return f"{prefix}.{name}" if prefix else name


def _get(data: Mapping[str, Any], name: str) -> Any:
    value = data.get(name, _MISSING)
    return _MISSING if value is None else value


def _check_str(
    data: Mapping[str, Any],
    name: str,
    prefix: str,
    errors: list[RouterValidationError],
    *,
    required: bool = True,
    default: str | None = None,
) -> str | None:
    value = _get(data, name)
    if value is _MISSING:
        if required:
            errors.append(
                RouterValidationError(
                    code="required",
                    message=f"{name} is required",
                    field=_path(prefix, name),
                )
            )
        return default
    if not isinstance(value, str):
        errors.append(
            RouterValidationError(
                code="must_be_string",
                message=f"{name} must be a string, got {type(value).__name__}",
                field=_path(prefix, name),
            )
        )
        return None
    return value


def _check_bool(
    data: Mapping[str, Any],
    name: str,
    prefix: str,
    errors: list[RouterValidationError],
) -> bool:
    value = _get(data, name)
    if value is _MISSING:
        errors.append(
            RouterValidationError(
                code="required",
                message=f"{name} is required",
                field=_path(prefix, name),
            )
        )
        return False
    if not isinstance(value, bool):
        errors.append(
            RouterValidationError(
                code="must_be_bool",
                message=f"{name} must be a boolean, got {type(value).__name__}",
                field=_path(prefix, name),
            )
        )
        return False
    return value


def _check_one_of(
    value: Any,
    name: str,
    prefix: str,
    allowed: tuple[str, ...],
    errors: list[RouterValidationError],
) -> None:
    if value is _MISSING:
        errors.append(
            RouterValidationError(
                code="required",
                message=f"{name} is required",
                field=_path(prefix, name),
            )
        )
    elif value not in allowed:
        errors.append(
            RouterValidationError(
                code="not_allowed",
                message=f"{name} must be one of {', '.join(allowed)}, got {value!r}",
                field=_path(prefix, name),
            )
        )


def _supports_key_lookup(value: Any) -> bool:
    return hasattr(value, "__getitem__") and not isinstance(value, (str, bytes))


def _ensure_mapping(
    data: Any,
    prefix: str,
    errors: list[RouterValidationError],
) -> Mapping[str, Any] | None:
    if isinstance(data, Mapping):
        return data
    errors.append(
        RouterValidationError(
            code="must_be_mapping",
            message=f"{prefix or 'input'} must be a mapping",
            field=prefix or None,
        )
    )
    return None


# --- Record Validators ---


def validate_request(
    data: Mapping[str, Any] | Request,
    prefix: str = "request",
) -> tuple[Request | None, list[RouterValidationError]]:
    """Validate an inbound request record."""
    if isinstance(data, Request):
        data = vars(data)
    errors: list[RouterValidationError] = []
    mapping = _ensure_mapping(data, prefix, errors)
    if mapping is None:
        return None, errors

    host = _check_str(mapping, "host", prefix, errors)
    fullpath = _check_str(mapping, "fullpath", prefix, errors)
    port_string = _check_str(mapping, "port_string", prefix, errors, required=False, default="")

    protocol = _get(mapping, "protocol")
    _check_one_of(protocol, "protocol", prefix, PROTOCOLS, errors)

    headers = _get(mapping, "headers")
    if headers is _MISSING:
        errors.append(
            RouterValidationError(
                code="required",
                message="headers is required",
                field=_path(prefix, "headers"),
            )
        )
    elif not _supports_key_lookup(headers):
        errors.append(
            RouterValidationError(
                code="must_be_hash_like",
                message="headers must support key lookup",
                field=_path(prefix, "headers"),
            )
        )

    if errors:
        return None, errors

    return (
        Request(
            host=host,  # type: ignore[arg-type]
            protocol=protocol,
            fullpath=fullpath,  # type: ignore[arg-type]
            headers=headers,
            port_string=port_string or "",
        ),
        errors,
    )


def validate_community(
    data: Mapping[str, Any] | Community,
    prefix: str = "community",
) -> tuple[Community | None, list[RouterValidationError]]:
    """Validate a tenant record."""
    if isinstance(data, Community):
        data = vars(data)
    errors: list[RouterValidationError] = []
    mapping = _ensure_mapping(data, prefix, errors)
    if mapping is None:
        return None, errors

    use_domain = _check_bool(mapping, "use_domain", prefix, errors)
    deleted = _check_bool(mapping, "deleted", prefix, errors)
    closed = _check_bool(mapping, "closed", prefix, errors)
    domain = _check_str(mapping, "domain", prefix, errors, required=False)
    ident = _check_str(mapping, "ident", prefix, errors)

    if errors:
        return None, errors

    return (
        Community(
            ident=ident,  # type: ignore[arg-type]
            use_domain=use_domain,
            deleted=deleted,
            closed=closed,
            domain=domain,
        ),
        errors,
    )


def validate_path(
    data: Mapping[str, Any] | Path,
    prefix: str = "path",
) -> tuple[Path | None, list[RouterValidationError]]:
    """Validate a fallback path (url or named route)."""
    if isinstance(data, Path):
        data = vars(data)
    errors: list[RouterValidationError] = []
    mapping = _ensure_mapping(data, prefix, errors)
    if mapping is None:
        return None, errors

    url = _check_str(mapping, "url", prefix, errors, required=False)
    route_name = _check_str(mapping, "route_name", prefix, errors, required=False)

    if errors:
        return None, errors

    return Path(url=url, route_name=route_name), errors


def validate_paths(
    data: Mapping[str, Any] | Paths,
    prefix: str = "paths",
) -> tuple[Paths | None, list[RouterValidationError]]:
    """Validate the static fallback destinations."""
    if isinstance(data, Paths):
        data = vars(data)
    errors: list[RouterValidationError] = []
    mapping = _ensure_mapping(data, prefix, errors)
    if mapping is None:
        return None, errors

    built: dict[str, Path | None] = {}
    for name in ("community_not_found", "new_community"):
        value = _get(mapping, name)
        if value is _MISSING:
            errors.append(
                RouterValidationError(
                    code="required",
                    message=f"{name} is required",
                    field=_path(prefix, name),
                )
            )
            continue
        path, path_errors = validate_path(value, _path(prefix, name))
        errors.extend(path_errors)
        built[name] = path

    if errors:
        return None, errors

    return (
        Paths(
            community_not_found=built["community_not_found"],  # type: ignore[arg-type]
            new_community=built["new_community"],  # type: ignore[arg-type]
        ),
        errors,
    )


def validate_configs(
    data: Mapping[str, Any] | Configs,
    prefix: str = "configs",
) -> tuple[Configs | None, list[RouterValidationError]]:
    """Validate platform configuration."""
    if isinstance(data, Configs):
        data = vars(data)
    errors: list[RouterValidationError] = []
    mapping = _ensure_mapping(data, prefix, errors)
    if mapping is None:
        return None, errors

    always_use_ssl = _check_bool(mapping, "always_use_ssl", prefix, errors)
    app_domain = _check_str(mapping, "app_domain", prefix, errors)

    if errors:
        return None, errors

    return Configs(always_use_ssl=always_use_ssl, app_domain=app_domain), errors  # type: ignore[arg-type]


def validate_other(
    data: Mapping[str, Any] | Other,
    prefix: str = "other",
) -> tuple[Other | None, list[RouterValidationError]]:
    """Validate tenant lookup state."""
    if isinstance(data, Other):
        data = vars(data)
    errors: list[RouterValidationError] = []
    mapping = _ensure_mapping(data, prefix, errors)
    if mapping is None:
        return None, errors

    no_communities = _check_bool(mapping, "no_communities", prefix, errors)

    status = _get(mapping, "community_search_status")
    if isinstance(status, CommunitySearchStatus):
        status = status.value
    _check_one_of(
        status,
        "community_search_status",
        prefix,
        tuple(s.value for s in CommunitySearchStatus),
        errors,
    )

    if errors:
        return None, errors

    return (
        Other(
            no_communities=no_communities,
            community_search_status=CommunitySearchStatus(status),
        ),
        errors,
    )


def validate_target(
    data: Mapping[str, Any],
    prefix: str = "target",
) -> tuple[Target | None, list[RouterValidationError]]:
    """Validate a redirect target."""
    errors: list[RouterValidationError] = []

    reason = _get(data, "reason")
    if isinstance(reason, RedirectReason):
        reason = reason.value
    _check_one_of(reason, "reason", prefix, tuple(r.value for r in RedirectReason), errors)

    status = _get(data, "status")
    if isinstance(status, RedirectStatus):
        status = status.value
    _check_one_of(status, "status", prefix, tuple(s.value for s in RedirectStatus), errors)

    url = _check_str(data, "url", prefix, errors, required=False)
    protocol = _check_str(data, "protocol", prefix, errors, required=False)
    route_name = _check_str(data, "route_name", prefix, errors, required=False)

    if errors:
        return None, errors

    return (
        Target(
            reason=RedirectReason(reason),
            status=RedirectStatus(status),
            url=url,
            protocol=protocol,
            route_name=route_name,
        ),
        errors,
    )


# --- Raising Constructors ---


def _raise_on_errors(result: tuple[Any, list[RouterValidationError]]) -> Any:
    record, errors = result
    if errors:
        raise InputValidationError(errors)
    return record


def create_request(data: Mapping[str, Any] | Request) -> Request:
    return _raise_on_errors(validate_request(data))  # type: ignore[no-any-return]


def create_community(data: Mapping[str, Any] | Community) -> Community:
    return _raise_on_errors(validate_community(data))  # type: ignore[no-any-return]


def create_paths(data: Mapping[str, Any] | Paths) -> Paths:
    return _raise_on_errors(validate_paths(data))  # type: ignore[no-any-return]


def create_configs(data: Mapping[str, Any] | Configs) -> Configs:
    return _raise_on_errors(validate_configs(data))  # type: ignore[no-any-return]


def create_other(data: Mapping[str, Any] | Other) -> Other:
    return _raise_on_errors(validate_other(data))  # type: ignore[no-any-return]


def create_target(data: Mapping[str, Any]) -> Target:
    return _raise_on_errors(validate_target(data))  # type: ignore[no-any-return]
