"""Request planning: URL and payload assembly.

GET requests move all parameters into the URL query string. POST and PUT
requests move parameters, and any query already present on the path, into
the request payload.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import httpx

from .exceptions import EncodingError

READ_METHODS = frozenset({"GET"})
WRITE_METHODS = frozenset({"POST", "PUT"})


@dataclass
class PlannedRequest:
    """Target URL and payload of a single request.

    Attributes:
        method: HTTP method.
        url: Absolute request URL.
        payload: Body parameters for write requests. None means no body.
    """

    method: str
    url: httpx.URL
    payload: dict[str, Any] | None = None


def query_value(key: str, value: Any) -> str:
    """Render a scalar parameter for the query string."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (str, int, float)):
        return str(value)
    raise EncodingError(
        f"Cannot encode {type(value).__name__} value of {key!r} in a query string",
        key=key,
    )


def plan_request(
    base_url: str | httpx.URL,
    api_path: str,
    method: str,
    params: Mapping[str, Any] | None = None,
) -> PlannedRequest:
    """Resolve a request against the base URL and place its parameters.

    Args:
        base_url: Validated API base URL.
        api_path: Path relative to the base URL, optionally with a query.
        method: GET, POST or PUT.
        params: Logical request parameters.

    Returns:
        The planned request.

    Raises:
        ValueError: If the method is not supported.
        EncodingError: If a read parameter cannot go into a query string.
    """
    method = method.upper()
    url = httpx.URL(base_url).join(api_path)

    if method in READ_METHODS:
        query = url.params
        for key, value in (params or {}).items():
            if value is None:
                continue
            if isinstance(value, (list, tuple)):
                # tag: ["first", "second"] -> tag[0]=first&tag[1]=second
                for index, item in enumerate(value):
                    query = query.add(f"{key}[{index}]", query_value(key, item))
            else:
                query = query.set(key, query_value(key, value))
        return PlannedRequest(method=method, url=url.copy_with(params=query))

    if method not in WRITE_METHODS:
        raise ValueError(f"Unsupported HTTP method: {method}")

    payload: dict[str, Any] = dict(params or {})
    for key, value in url.params.multi_items():
        if key not in payload:
            payload[key] = value

    return PlannedRequest(
        method=method,
        url=url.copy_with(params={}),
        payload=payload or None,
    )
