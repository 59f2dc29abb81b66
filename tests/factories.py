from typing import Any

NOT_FOUND_URL = "https://www.sharetribe.com/community-not-found"


def make_request(
    host: str = "acme.sharetribe.com",
    protocol: str = "https://",
    fullpath: str = "/",
    port_string: str = "",
    headers: Any = None,
) -> dict[str, Any]:
    return {
        "host": host,
        "protocol": protocol,
        "fullpath": fullpath,
        "port_string": port_string,
        "headers": headers or {},
    }


def make_community(**overrides: Any) -> dict[str, Any]:
    community = {
        "ident": "acme",
        "use_domain": False,
        "deleted": False,
        "closed": False,
        "domain": None,
    }
    community.update(overrides)
    return community


def make_other(status: str = "found", no_communities: bool = False) -> dict[str, Any]:
    return {"no_communities": no_communities, "community_search_status": status}


class KeyLookupHeaders:
    """Header object that only supports `headers[key]`, like a CGI env wrapper."""

    def __init__(self, values: dict[str, str] | None = None) -> None:
        self._values = dict(values or {})

    def __getitem__(self, key: str) -> str:
        return self._values[key]
