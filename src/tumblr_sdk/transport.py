"""Request transport and response classification."""

from __future__ import annotations

import enum
import json
import logging
from dataclasses import dataclass
from typing import Any, Union

import httpx

from .exceptions import APIError, MalformedResponseError, TransportError, TumblrError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Success:
    """Successful outcome carrying the envelope's inner response."""

    value: Any

    def unwrap(self) -> Any:
        return self.value


@dataclass(frozen=True)
class Failure:
    """Failed outcome carrying a classified error."""

    error: TumblrError

    def unwrap(self) -> Any:
        raise self.error


Outcome = Union[Success, Failure]


class CompletionState(str, enum.Enum):
    """States of a request's completion."""

    PENDING = "pending"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class Completion:
    """One-shot completion of a single request.

    The first call to ``succeed`` or ``fail`` settles the outcome. Both
    terminal states are absorbing: later events are ignored.
    """

    def __init__(self) -> None:
        self._state = CompletionState.PENDING
        self._outcome: Outcome | None = None

    @property
    def state(self) -> CompletionState:
        return self._state

    @property
    def done(self) -> bool:
        return self._state is not CompletionState.PENDING

    @property
    def outcome(self) -> Outcome:
        """Get the settled outcome.

        Raises:
            RuntimeError: If the completion is still pending.
        """
        if self._outcome is None:
            raise RuntimeError("Request has not completed")
        return self._outcome

    def settle(self, outcome: Outcome) -> bool:
        """Settle with an outcome.

        Returns:
            True if this call settled the completion, False if it was
            already settled.
        """
        if self.done:
            logger.debug(
                "Ignoring late %s, request already %s",
                type(outcome).__name__,
                self._state.value,
            )
            return False
        self._outcome = outcome
        if isinstance(outcome, Success):
            self._state = CompletionState.SUCCEEDED
        else:
            self._state = CompletionState.FAILED
        return True

    def succeed(self, value: Any) -> bool:
        return self.settle(Success(value))

    def fail(self, error: TumblrError) -> bool:
        return self.settle(Failure(error))


def _error_message(data: Any) -> str:
    if isinstance(data, dict):
        meta = data.get("meta")
        if isinstance(meta, dict) and meta.get("msg") is not None:
            return str(meta["msg"])
        if data.get("error") is not None:
            return str(data["error"])
    return "unknown"


def classify_response(status_code: int, body: str) -> Outcome:
    """Classify a complete HTTP response.

    Args:
        status_code: HTTP status code.
        body: Response body text.

    Returns:
        Success with the envelope's ``response`` value, or Failure with a
        MalformedResponseError or APIError.
    """
    try:
        data = json.loads(body)
    except ValueError:
        return Failure(MalformedResponseError(body, status_code))

    if status_code < 200 or status_code > 399:
        return Failure(APIError(status_code, _error_message(data), data))

    if isinstance(data, dict) and data.get("response") is not None:
        return Success(data["response"])

    return Failure(MalformedResponseError(body, status_code))


async def send_request(client: httpx.AsyncClient, request: httpx.Request) -> Outcome:
    """Send a request and classify its response.

    The body is streamed to completion before it is parsed. Transport
    failures become a TransportError outcome; they are never retried.

    Args:
        client: HTTP client to send with.
        request: Fully built request, credentials included.

    Returns:
        The request's outcome.
    """
    completion = Completion()
    response: httpx.Response | None = None

    try:
        response = await client.send(request, stream=True)
        chunks = [chunk async for chunk in response.aiter_text()]
        completion.settle(classify_response(response.status_code, "".join(chunks)))
    except httpx.RequestError as e:
        completion.fail(TransportError(f"Cannot reach Tumblr API: {e}", e))
    finally:
        if response is not None:
            try:
                await response.aclose()
            except httpx.RequestError as e:
                completion.fail(TransportError(f"Error closing response: {e}", e))

    outcome = completion.outcome
    logger.debug(
        "%s %s completed: %s",
        request.method,
        request.url.copy_remove_param("api_key"),
        completion.state.value,
    )
    return outcome
