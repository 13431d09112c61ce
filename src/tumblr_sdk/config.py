"""Client configuration and base URL validation."""

from __future__ import annotations

import json
import os
from collections.abc import Mapping
from pathlib import Path

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .exceptions import ConfigurationError

# Default configuration
DEFAULT_BASE_URL = "https://api.tumblr.com/"
DEFAULT_TIMEOUT = 30.0

# Environment variable names read by ClientOptions.from_env
TUMBLR_BASE_URL_ENV = "TUMBLR_BASE_URL"
TUMBLR_CONSUMER_KEY_ENV = "TUMBLR_CONSUMER_KEY"
TUMBLR_CONSUMER_SECRET_ENV = "TUMBLR_CONSUMER_SECRET"
TUMBLR_TOKEN_ENV = "TUMBLR_TOKEN"
TUMBLR_TOKEN_SECRET_ENV = "TUMBLR_TOKEN_SECRET"
TUMBLR_TIMEOUT_ENV = "TUMBLR_TIMEOUT"

_BASE_URL_MESSAGES = {
    "pathname": "base_url option must not include a pathname.",
    "search": "base_url option must not include search params (query).",
    "username": "base_url option must not include username.",
    "password": "base_url option must not include password.",
    "hash": "base_url option must not include hash.",
}


def validate_base_url(base_url: str) -> str:
    """Validate and normalize the API base URL.

    The base URL must be an absolute http(s) URL pointing at the root path,
    without query, userinfo or fragment.

    Args:
        base_url: Base URL to validate.

    Returns:
        The normalized base URL, always ending in "/".

    Raises:
        ConfigurationError: Naming the first violated constraint.
    """
    try:
        url = httpx.URL(base_url)
    except (httpx.InvalidURL, TypeError) as e:
        raise ConfigurationError("Invalid base_url option provided.") from e

    if url.scheme not in ("http", "https") or not url.host:
        raise ConfigurationError("Invalid base_url option provided.")

    violated = None
    if url.path != "/":
        violated = "pathname"
    elif url.query:
        violated = "search"
    elif url.username:
        violated = "username"
    elif url.password:
        violated = "password"
    elif url.fragment:
        violated = "hash"

    if violated is not None:
        raise ConfigurationError(_BASE_URL_MESSAGES[violated], constraint=violated)

    return str(url.copy_with(path="/"))


class ClientOptions(BaseModel):
    """Options used to construct a Tumblr client."""

    model_config = ConfigDict(frozen=True)

    base_url: str = Field(default=DEFAULT_BASE_URL, description="API base URL")
    consumer_key: str | None = Field(None, description="OAuth consumer key or API key")
    consumer_secret: str | None = Field(None, description="OAuth consumer secret")
    token: str | None = Field(None, description="OAuth token")
    token_secret: str | None = Field(None, description="OAuth token secret")
    timeout: float | None = Field(
        default=DEFAULT_TIMEOUT,
        description="Transport timeout in seconds, None to disable",
    )

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> ClientOptions:
        """Load options from TUMBLR_* environment variables.

        Unset or empty variables fall back to the defaults.

        Args:
            environ: Environment mapping. Defaults to os.environ.

        Returns:
            The loaded options.

        Raises:
            ConfigurationError: If TUMBLR_TIMEOUT is not a number.
        """
        env = os.environ if environ is None else environ

        def read(name: str) -> str | None:
            return env.get(name) or None

        values: dict[str, object] = {
            "consumer_key": read(TUMBLR_CONSUMER_KEY_ENV),
            "consumer_secret": read(TUMBLR_CONSUMER_SECRET_ENV),
            "token": read(TUMBLR_TOKEN_ENV),
            "token_secret": read(TUMBLR_TOKEN_SECRET_ENV),
        }

        base_url = read(TUMBLR_BASE_URL_ENV)
        if base_url:
            values["base_url"] = base_url

        timeout = read(TUMBLR_TIMEOUT_ENV)
        if timeout:
            try:
                values["timeout"] = float(timeout)
            except ValueError as e:
                raise ConfigurationError(
                    f"{TUMBLR_TIMEOUT_ENV} must be a number, got {timeout!r}",
                    constraint="timeout",
                ) from e

        return cls(**values)

    @classmethod
    def from_file(cls, path: Path | str) -> ClientOptions:
        """Load options from a JSON file.

        The file holds a JSON object using the option field names, e.g.
        ``{"consumer_key": "...", "consumer_secret": "...", "token": "...",
        "token_secret": "..."}``.

        Args:
            path: Path to the JSON file.

        Returns:
            The loaded options.

        Raises:
            ConfigurationError: If the file cannot be read or parsed.
        """
        path = Path(path)
        try:
            data = json.loads(path.read_text())
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigurationError(f"Cannot load client options from {path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigurationError(f"Client options file {path} must contain a JSON object")

        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid client options in {path}: {e}") from e
