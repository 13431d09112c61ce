"""Tests for authentication handling."""

from __future__ import annotations

import httpx
import pytest
from oauthlib.oauth1 import Client as OAuthClient
from oauthlib.oauth1.rfc5849 import signature

from tumblr_sdk.auth import (
    ApiKeyAuth,
    CredentialContext,
    NoAuth,
    OAuth1Auth,
    OAuth1Signer,
    resolve_credentials,
)
from tumblr_sdk.exceptions import ConfigurationError


def header_params(header: str) -> dict[str, str]:
    """Decode the oauth_* parameters of an Authorization header."""
    return dict(
        signature.collect_parameters(
            headers={"Authorization": header},
            exclude_oauth_signature=False,
        )
    )


class TestResolveCredentials:
    """Tests for resolve_credentials."""

    def test_no_credentials(self):
        """Test that no options resolve to unauthenticated access."""
        assert resolve_credentials() == NoAuth()

    def test_consumer_key_alone_is_api_key(self, mock_api_key):
        """Test that a lone consumer key resolves to API key auth."""
        credentials = resolve_credentials(consumer_key=mock_api_key)

        assert isinstance(credentials, ApiKeyAuth)
        assert credentials.api_key == mock_api_key

    def test_full_oauth_set(self, oauth_credentials):
        """Test that all four fields resolve to OAuth1 auth."""
        credentials = resolve_credentials(**oauth_credentials)

        assert isinstance(credentials, OAuth1Auth)
        assert credentials.consumer_key == oauth_credentials["consumer_key"]
        assert credentials.token_secret == oauth_credentials["token_secret"]

    @pytest.mark.parametrize(
        "missing", ["consumer_key", "consumer_secret", "token", "token_secret"]
    )
    def test_partial_oauth_set_fails(self, oauth_credentials, missing):
        """Test that any missing OAuth field fails instead of downgrading."""
        del oauth_credentials[missing]

        with pytest.raises(ConfigurationError) as exc_info:
            resolve_credentials(**oauth_credentials)

        assert exc_info.value.constraint == missing
        assert f"Invalid {missing} provided" in str(exc_info.value)

    def test_empty_oauth_field_fails(self, oauth_credentials):
        """Test that an empty OAuth field is rejected."""
        oauth_credentials["token"] = ""

        with pytest.raises(ConfigurationError):
            resolve_credentials(**oauth_credentials)

    def test_non_string_oauth_field_fails(self, oauth_credentials):
        """Test that a non-string OAuth field is rejected."""
        oauth_credentials["consumer_secret"] = 12345

        with pytest.raises(ConfigurationError):
            resolve_credentials(**oauth_credentials)

    def test_secret_without_consumer_key_fails(self):
        """Test that a secret alone does not fall back to no auth."""
        with pytest.raises(ConfigurationError) as exc_info:
            resolve_credentials(token_secret="ts")

        assert exc_info.value.constraint == "consumer_key"

    @pytest.mark.parametrize("consumer_key", ["", 42])
    def test_invalid_api_key(self, consumer_key):
        """Test that an empty or non-string consumer key fails."""
        with pytest.raises(ConfigurationError) as exc_info:
            resolve_credentials(consumer_key=consumer_key)

        assert "consumer_key" in str(exc_info.value)

    def test_credentials_are_frozen(self, mock_api_key):
        """Test that resolved credentials cannot be mutated."""
        credentials = resolve_credentials(consumer_key=mock_api_key)

        with pytest.raises(Exception):
            credentials.api_key = "other"

    def test_secrets_hidden_from_repr(self, oauth_credentials):
        """Test that secrets do not appear in the repr."""
        credentials = resolve_credentials(**oauth_credentials)

        text = repr(credentials)
        assert oauth_credentials["consumer_secret"] not in text
        assert oauth_credentials["token_secret"] not in text


class TestOAuth1Signer:
    """Tests for OAuth 1.0a request signing."""

    def test_header_parameters(self, oauth_credentials):
        """Test that the header carries the expected oauth_* parameters."""
        signer = OAuth1Signer(OAuth1Auth(**oauth_credentials))

        header = signer.sign("https://api.tumblr.com/v2/user/info", "GET")
        params = header_params(header)

        assert header.startswith("OAuth ")
        assert params["oauth_consumer_key"] == oauth_credentials["consumer_key"]
        assert params["oauth_token"] == oauth_credentials["token"]
        assert params["oauth_signature_method"] == "HMAC-SHA1"
        assert params["oauth_version"] == "1.0"
        assert params["oauth_nonce"]
        assert params["oauth_timestamp"].isdigit()

    def test_signature_is_valid(self, oauth_credentials):
        """Test that the signature verifies against the signature base string."""
        signer = OAuth1Signer(OAuth1Auth(**oauth_credentials))
        url = "https://api.tumblr.com/v2/blog/example.tumblr.com/posts?tag%5B0%5D=art&limit=2"

        header = signer.sign(httpx.URL(url), "get")

        collected = signature.collect_parameters(
            uri_query=httpx.URL(url).query.decode(),
            headers={"Authorization": header},
        )
        base_string = signature.signature_base_string(
            "GET",
            signature.base_string_uri(url),
            signature.normalize_parameters(collected),
        )
        secrets = OAuthClient(
            oauth_credentials["consumer_key"],
            client_secret=oauth_credentials["consumer_secret"],
            resource_owner_secret=oauth_credentials["token_secret"],
        )
        expected = signature.sign_hmac_sha1_with_client(base_string, secrets)
        assert header_params(header)["oauth_signature"] == expected

    def test_fresh_nonce_per_signature(self, oauth_credentials):
        """Test that every signature uses a new nonce."""
        signer = OAuth1Signer(OAuth1Auth(**oauth_credentials))
        url = "https://api.tumblr.com/v2/user/like"

        first = header_params(signer.sign(url, "POST"))
        second = header_params(signer.sign(url, "POST"))

        assert first["oauth_nonce"] != second["oauth_nonce"]
        assert first["oauth_signature"] != second["oauth_signature"]


class TestCredentialContext:
    """Tests for applying credentials to requests."""

    def test_no_auth_leaves_request_untouched(self):
        """Test that unauthenticated requests get no URL or header changes."""
        context = CredentialContext(NoAuth())
        url = httpx.URL("https://api.tumblr.com/v2/blog/example/info")

        new_url, headers = context.authorize(url, "GET")

        assert new_url == url
        assert headers == {}
        assert context.auth_mode == "none"

    def test_api_key_goes_into_query(self, mock_api_key):
        """Test that the API key is appended to the URL query."""
        context = CredentialContext(ApiKeyAuth(api_key=mock_api_key))
        url = httpx.URL("https://api.tumblr.com/v2/blog/example/posts?limit=2")

        new_url, headers = context.authorize(url, "GET")

        assert new_url.params["api_key"] == mock_api_key
        assert new_url.params["limit"] == "2"
        assert headers == {}
        assert context.auth_mode == "apiKey"

    def test_api_key_on_write_request(self, mock_api_key):
        """Test that the API key travels in the URL for writes too."""
        context = CredentialContext(ApiKeyAuth(api_key=mock_api_key))

        new_url, _ = context.authorize(httpx.URL("https://api.tumblr.com/v2/user/like"), "POST")

        assert new_url.params["api_key"] == mock_api_key

    def test_api_key_replaces_existing(self, mock_api_key):
        """Test that an api_key already on the URL is replaced, not duplicated."""
        context = CredentialContext(ApiKeyAuth(api_key=mock_api_key))
        url = httpx.URL("https://api.tumblr.com/v2/tagged?api_key=stale")

        new_url, _ = context.authorize(url, "GET")

        assert new_url.params.get_list("api_key") == [mock_api_key]

    def test_oauth1_sets_authorization_header(self, oauth_credentials):
        """Test that OAuth1 credentials add a signed Authorization header."""
        context = CredentialContext(OAuth1Auth(**oauth_credentials))
        url = httpx.URL("https://api.tumblr.com/v2/user/info")

        new_url, headers = context.authorize(url, "GET")

        assert new_url == url
        assert headers["Authorization"].startswith("OAuth ")
        assert context.auth_mode == "oauth1"

    def test_oauth1_without_signer_raises(self, oauth_credentials):
        """Test that OAuth1 authorization fails loudly when no signer is bound."""
        context = CredentialContext(OAuth1Auth(**oauth_credentials))
        context._signer = None

        with pytest.raises(TypeError):
            context.authorize(httpx.URL("https://api.tumblr.com/v2/user/info"), "GET")
