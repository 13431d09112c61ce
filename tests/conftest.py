"""Shared fixtures and configuration for tests."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import Any

import httpx
import pytest
import respx

API_HOST = "api.tumblr.com"
API_BASE_URL = f"https://{API_HOST}"

# ==================== MOCK DATA ====================


def make_envelope(response: Any, status: int = 200, msg: str = "OK") -> dict[str, Any]:
    """Create a Tumblr API response envelope."""
    return {"meta": {"status": status, "msg": msg}, "response": response}


def make_error_body(status: int, msg: str) -> dict[str, Any]:
    """Create a Tumblr API error body."""
    return {"meta": {"status": status, "msg": msg}, "response": {}}


def make_blog_dict(name: str = "example", title: str = "Example Blog") -> dict[str, Any]:
    """Create a mock blog dictionary."""
    return {
        "blog": {
            "name": name,
            "title": title,
            "url": f"https://{name}.tumblr.com/",
            "posts": 42,
        }
    }


@dataclass
class MultipartPart:
    """One part of a parsed multipart/form-data body."""

    name: str
    headers: dict[str, str]
    data: bytes

    @property
    def text(self) -> str:
        return self.data.decode("utf-8")


def parse_multipart(request: httpx.Request) -> list[MultipartPart]:
    """Split a multipart/form-data request body into its parts."""
    content_type = request.headers["content-type"]
    assert content_type.startswith("multipart/form-data")
    boundary = content_type.split("boundary=", 1)[1].encode()
    body = request.read()

    parts = []
    for segment in body.split(b"--" + boundary)[1:]:
        if segment.startswith(b"--"):
            break
        # Each segment is framed by CRLF on both sides
        segment = segment[2:-2]
        raw_headers, _, data = segment.partition(b"\r\n\r\n")
        headers = {}
        for line in raw_headers.decode().split("\r\n"):
            key, _, value = line.partition(": ")
            headers[key.lower()] = value
        match = re.search(r'\bname="([^"]*)"', headers["content-disposition"])
        assert match is not None
        parts.append(MultipartPart(name=match.group(1), headers=headers, data=data))
    return parts


def request_json(request: httpx.Request) -> Any:
    """Decode a JSON request body."""
    return json.loads(request.read())


# ==================== FIXTURES ====================


@pytest.fixture
def api_base_url() -> str:
    """Base URL for API mocks."""
    return API_BASE_URL


@pytest.fixture
def respx_mock():
    """Fixture for respx mocking."""
    with respx.mock(assert_all_called=False) as mock:
        yield mock


@pytest.fixture
def mock_api_key() -> str:
    """Mock API key for testing."""
    return "ck_test_1234567890"


@pytest.fixture
def oauth_credentials() -> dict[str, str]:
    """Complete OAuth 1.0a credential set."""
    return {
        "consumer_key": "ck_test_1234567890",
        "consumer_secret": "cs_test_secret",
        "token": "tk_test_token",
        "token_secret": "ts_test_secret",
    }


@pytest.fixture
def temp_options_file(tmp_path, oauth_credentials):
    """Create a temporary client options file."""
    options_dir = tmp_path / ".tumblr"
    options_dir.mkdir()
    options_file = options_dir / "options.json"
    options_file.write_text(json.dumps(oauth_credentials))
    return options_file
