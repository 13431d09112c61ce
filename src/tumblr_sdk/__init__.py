"""Tumblr Python SDK.

This SDK provides a client for the Tumblr v2 API: blogs, posts (including
Neue Post Format posts with media uploads), likes, follows and the
authenticating user's dashboard.

Basic Usage:
    ```python
    from tumblr_sdk import TumblrClient

    # Async usage
    async with TumblrClient(consumer_key="...") as client:
        info = await client.blog_info("staff.tumblr.com")
        print(info["blog"]["title"])

    # Sync usage
    from tumblr_sdk import TumblrClientSync

    with TumblrClientSync(consumer_key="...") as client:
        posts = client.blog_posts("staff.tumblr.com", params={"tag": ["news", "art"]})
    ```

Configuration from the environment:
    ```python
    from tumblr_sdk import ClientOptions, TumblrClient

    client = TumblrClient.from_options(ClientOptions.from_env())
    ```
"""

from ._sync import TumblrClientSync
from .auth import (
    ApiKeyAuth,
    CredentialContext,
    Credentials,
    NoAuth,
    OAuth1Auth,
    OAuth1Signer,
    resolve_credentials,
)
from .client import TumblrClient, create_client
from .config import DEFAULT_BASE_URL, ClientOptions, validate_base_url
from .encoding import EncodedBody, encode_payload
from .exceptions import (
    APIError,
    ConfigurationError,
    EncodingError,
    MalformedResponseError,
    TransportError,
    TumblrError,
)
from .npf import transform_npf_params
from .planner import PlannedRequest, plan_request
from .transport import Completion, Failure, Outcome, Success, classify_response

__version__ = "0.1.0"

__all__ = [
    # Version
    "__version__",
    # Main clients
    "TumblrClient",
    "TumblrClientSync",
    "create_client",
    # Configuration
    "ClientOptions",
    "DEFAULT_BASE_URL",
    "validate_base_url",
    # Auth
    "Credentials",
    "NoAuth",
    "ApiKeyAuth",
    "OAuth1Auth",
    "OAuth1Signer",
    "CredentialContext",
    "resolve_credentials",
    # Request pipeline
    "PlannedRequest",
    "plan_request",
    "transform_npf_params",
    "EncodedBody",
    "encode_payload",
    "Completion",
    "Outcome",
    "Success",
    "Failure",
    "classify_response",
    # Exceptions
    "TumblrError",
    "ConfigurationError",
    "EncodingError",
    "TransportError",
    "MalformedResponseError",
    "APIError",
]
