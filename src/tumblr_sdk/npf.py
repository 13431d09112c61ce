"""Transformation of Neue Post Format (NPF) parameters.

Media blocks may carry binary sources (bytes or binary file objects). Those
are pulled out of the content into multipart parts named after the block's
position, and the block's ``media`` is replaced with
``{"identifier": "<position>"}``. When any media is extracted, the rest of
the post collapses into a single ``json`` field next to the binary parts.
"""

from __future__ import annotations

import io
import json
from collections.abc import Mapping
from typing import Any

from .exceptions import EncodingError


def is_binary_source(value: Any) -> bool:
    """Check if a value is binary data that must travel as a multipart part."""
    return isinstance(value, (bytes, bytearray, io.RawIOBase, io.BufferedIOBase))


def transform_npf_params(params: Mapping[str, Any]) -> dict[str, Any]:
    """Prepare NPF post parameters for a create or edit request.

    Args:
        params: Post parameters with a ``content`` list of blocks and
            optional ``tags``.

    Returns:
        Either the structural payload, to be sent as a JSON body, or a
        ``{"json": ..., "<index>": <binary>, ...}`` mapping for multipart.

    Raises:
        EncodingError: If content is missing or the payload is not JSON
            serializable.
    """
    if params.get("content") is None:
        raise EncodingError("NPF posts require a content list", key="content")

    tags = params.get("tags")
    content = params["content"]

    media: dict[str, Any] = {}
    blocks = []
    for index, block in enumerate(content):
        source = block.get("media") if isinstance(block, Mapping) else None
        if source is not None and is_binary_source(source):
            identifier = str(index)
            media[identifier] = source
            block = {**block, "media": {"identifier": identifier}}
        blocks.append(block)

    transformed: dict[str, Any] = {
        key: value for key, value in params.items() if key not in ("tags", "content")
    }
    if isinstance(tags, (list, tuple)):
        transformed["tags"] = ",".join(str(tag) for tag in tags)
    transformed["content"] = blocks

    if not media:
        return transformed

    try:
        json_text = json.dumps(transformed)
    except (TypeError, ValueError) as e:
        raise EncodingError(f"NPF post is not JSON serializable: {e}", key="json") from e

    return {"json": json_text, **media}
