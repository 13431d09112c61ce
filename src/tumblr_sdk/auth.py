"""Authentication handling for the Tumblr SDK.

Three credential modes are supported:

- ``none``: unauthenticated requests
- ``apiKey``: the consumer key is sent as the ``api_key`` query parameter
- ``oauth1``: every request carries an OAuth 1.0a HMAC-SHA1 ``Authorization``
  header signed with the consumer and token secrets
"""

from __future__ import annotations

from typing import Annotated, Any, Literal, Union

import httpx
from oauthlib.oauth1 import SIGNATURE_HMAC_SHA1, SIGNATURE_TYPE_AUTH_HEADER
from oauthlib.oauth1 import Client as OAuthClient
from pydantic import BaseModel, ConfigDict, Field

from .exceptions import ConfigurationError


class NoAuth(BaseModel):
    """No credentials; requests are sent unauthenticated."""

    model_config = ConfigDict(frozen=True)

    auth: Literal["none"] = "none"


class ApiKeyAuth(BaseModel):
    """API key credentials."""

    model_config = ConfigDict(frozen=True)

    auth: Literal["apiKey"] = "apiKey"
    api_key: str = Field(..., min_length=1, repr=False, description="Consumer key used as api_key")


class OAuth1Auth(BaseModel):
    """Complete OAuth 1.0a credential set."""

    model_config = ConfigDict(frozen=True)

    auth: Literal["oauth1"] = "oauth1"
    consumer_key: str = Field(..., min_length=1, description="OAuth consumer key")
    consumer_secret: str = Field(
        ..., min_length=1, repr=False, description="OAuth consumer secret"
    )
    token: str = Field(..., min_length=1, description="OAuth token")
    token_secret: str = Field(..., min_length=1, repr=False, description="OAuth token secret")


Credentials = Annotated[Union[NoAuth, ApiKeyAuth, OAuth1Auth], Field(discriminator="auth")]

_OAUTH1_FIELDS = ("consumer_key", "consumer_secret", "token", "token_secret")


def resolve_credentials(
    consumer_key: Any = None,
    consumer_secret: Any = None,
    token: Any = None,
    token_secret: Any = None,
) -> NoAuth | ApiKeyAuth | OAuth1Auth:
    """Resolve client options to a credential variant.

    If any of consumer_secret, token or token_secret is given, all four
    OAuth fields must be non-empty strings. A consumer_key given alone is
    used for API key authentication.

    Raises:
        ConfigurationError: If the credential set is incomplete or invalid.
    """
    values = {
        "consumer_key": consumer_key,
        "consumer_secret": consumer_secret,
        "token": token,
        "token_secret": token_secret,
    }

    if any(values[name] is not None for name in _OAUTH1_FIELDS[1:]):
        for name in _OAUTH1_FIELDS:
            value = values[name]
            if not value or not isinstance(value, str):
                raise ConfigurationError(
                    f"Provide consumer_key or all oauth credentials. Invalid {name} provided.",
                    constraint=name,
                )
        return OAuth1Auth(**values)

    if consumer_key is not None:
        if not consumer_key or not isinstance(consumer_key, str):
            raise ConfigurationError(
                "You must provide a consumer_key.", constraint="consumer_key"
            )
        return ApiKeyAuth(api_key=consumer_key)

    return NoAuth()


class OAuth1Signer:
    """Produces OAuth 1.0a HMAC-SHA1 Authorization headers.

    A fresh nonce and timestamp are generated for every signature. Only the
    method, URL and query parameters are signed; JSON and multipart bodies
    are not part of the signature base string.
    """

    def __init__(self, credentials: OAuth1Auth) -> None:
        self._client = OAuthClient(
            credentials.consumer_key,
            client_secret=credentials.consumer_secret,
            resource_owner_key=credentials.token,
            resource_owner_secret=credentials.token_secret,
            signature_method=SIGNATURE_HMAC_SHA1,
            signature_type=SIGNATURE_TYPE_AUTH_HEADER,
        )

    def sign(self, url: httpx.URL | str, method: str) -> str:
        """Compute the Authorization header value for a request.

        Args:
            url: Fully-qualified request URL, including its query string.
            method: HTTP method.

        Returns:
            The ``OAuth ...`` header value.
        """
        _, headers, _ = self._client.sign(str(url), http_method=method.upper())
        return headers["Authorization"]


class CredentialContext:
    """Resolved credentials of a client.

    This is the only place that branches on the credential mode. It is
    read-only after construction and safe to share between concurrent
    requests.
    """

    def __init__(self, credentials: NoAuth | ApiKeyAuth | OAuth1Auth) -> None:
        self._credentials = credentials
        self._signer = OAuth1Signer(credentials) if isinstance(credentials, OAuth1Auth) else None

    @property
    def credentials(self) -> NoAuth | ApiKeyAuth | OAuth1Auth:
        """Get the resolved credential variant."""
        return self._credentials

    @property
    def auth_mode(self) -> str:
        """Get the credential mode: "none", "apiKey" or "oauth1"."""
        return self._credentials.auth

    def authorize(self, url: httpx.URL, method: str) -> tuple[httpx.URL, dict[str, str]]:
        """Apply credentials to an outgoing request.

        Args:
            url: Final request URL.
            method: HTTP method.

        Returns:
            Tuple of (URL to request, extra headers).
        """
        credentials = self._credentials
        if isinstance(credentials, NoAuth):
            return url, {}
        if isinstance(credentials, ApiKeyAuth):
            # The key travels in the query string for writes too
            return url.copy_set_param("api_key", credentials.api_key), {}
        if isinstance(credentials, OAuth1Auth):
            if self._signer is None:
                raise TypeError("OAuth1 credentials have no signer")
            return url, {"Authorization": self._signer.sign(url, method)}
        raise TypeError(f"Unsupported credentials: {credentials!r}")
