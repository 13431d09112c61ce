"""Request body encoding.

Payloads carrying ``data``, ``data64`` or ``json`` are sent as
multipart/form-data; everything else is sent as a single JSON object.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Literal

from .exceptions import EncodingError
from .npf import is_binary_source

logger = logging.getLogger(__name__)

MULTIPART_KEYS = ("data", "data64", "json")

# Multipart part as accepted by httpx's ``files`` argument
Part = tuple[str, Any]


@dataclass
class EncodedBody:
    """Encoded request body.

    Attributes:
        mode: "json" or "multipart".
        content: Serialized JSON body (json mode).
        parts: Ordered multipart parts (multipart mode).
        headers: Headers describing the body (json mode). Multipart headers,
            including the boundary, are generated by httpx.
    """

    mode: Literal["json", "multipart"]
    content: bytes | None = None
    parts: list[Part] = field(default_factory=list)
    headers: dict[str, str] = field(default_factory=dict)

    def request_kwargs(self) -> dict[str, Any]:
        """Get keyword arguments for ``httpx.AsyncClient.build_request``."""
        if self.mode == "multipart":
            return {"files": self.parts}
        return {"content": self.content}


def uses_multipart(payload: Mapping[str, Any]) -> bool:
    """Check if a payload must be sent as multipart/form-data."""
    return any(payload.get(key) is not None for key in MULTIPART_KEYS)


def _append_part(parts: list[Part], key: str, value: Any) -> None:
    if value is None:
        return
    if isinstance(value, bool):
        # form fields are text only
        parts.append((key, (None, "true" if value else "false")))
    elif is_binary_source(value):
        parts.append((key, bytes(value) if isinstance(value, bytearray) else value))
    elif isinstance(value, (str, int, float)):
        parts.append((key, (None, str(value))))
    else:
        raise EncodingError(
            f"Cannot encode {type(value).__name__} value of {key!r} as a form field",
            key=key,
        )


def encode_multipart(payload: Mapping[str, Any]) -> EncodedBody:
    """Encode a payload as multipart/form-data parts.

    Arrays become indexed fields (``key[0]``, ``key[1]``, ...) and booleans
    become the text ``"true"``/``"false"``. A ``json`` text field is sent with
    an ``application/json`` content type.
    """
    parts: list[Part] = []
    for key, value in payload.items():
        if key == "json" and isinstance(value, str):
            parts.append((key, (None, value, "application/json")))
        elif isinstance(value, (list, tuple)):
            for index, item in enumerate(value):
                _append_part(parts, f"{key}[{index}]", item)
        else:
            _append_part(parts, key, value)
    return EncodedBody(mode="multipart", parts=parts)


def encode_json(payload: Mapping[str, Any]) -> EncodedBody:
    """Encode a payload as a single JSON object."""
    try:
        content = json.dumps(dict(payload), ensure_ascii=False).encode("utf-8")
    except (TypeError, ValueError) as e:
        raise EncodingError(f"Request payload is not JSON serializable: {e}") from e

    return EncodedBody(
        mode="json",
        content=content,
        headers={
            "Content-Type": "application/json",
            "Content-Length": str(len(content)),
        },
    )


def encode_payload(payload: Mapping[str, Any]) -> EncodedBody:
    """Encode a planned payload for a write request.

    Args:
        payload: Planned payload, possibly shaped by ``transform_npf_params``.

    Returns:
        The encoded body.

    Raises:
        EncodingError: If a value cannot be serialized.
    """
    if uses_multipart(payload):
        body = encode_multipart(payload)
    else:
        body = encode_json(payload)
    logger.debug("Encoded request body as %s", body.mode)
    return body
