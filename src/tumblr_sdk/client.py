"""Async HTTP client for the Tumblr API."""

from __future__ import annotations

import logging
import warnings
from collections.abc import Mapping
from typing import Any

import httpx

from .auth import CredentialContext, resolve_credentials
from .config import DEFAULT_BASE_URL, DEFAULT_TIMEOUT, ClientOptions, validate_base_url
from .encoding import encode_payload
from .npf import transform_npf_params
from .planner import plan_request
from .transport import send_request

logger = logging.getLogger(__name__)

USER_AGENT = "tumblr-sdk-python/0.1.0"


class TumblrClient:
    """Async client for the Tumblr API.

    Example:
        ```python
        import asyncio
        from tumblr_sdk import TumblrClient

        async def main():
            async with TumblrClient(
                consumer_key="...",
                consumer_secret="...",
                token="...",
                token_secret="...",
            ) as client:
                info = await client.user_info()
                print(info["user"]["name"])

                with open("cat.jpg", "rb") as image:
                    await client.create_post(
                        "example.tumblr.com",
                        {"content": [{"type": "image", "media": image}]},
                    )

        asyncio.run(main())
        ```
    """

    def __init__(
        self,
        consumer_key: str | None = None,
        consumer_secret: str | None = None,
        token: str | None = None,
        token_secret: str | None = None,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float | None = DEFAULT_TIMEOUT,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the Tumblr client.

        Pass nothing for unauthenticated access, only consumer_key for API key
        access, or all four OAuth fields for OAuth 1.0a access.

        Args:
            consumer_key: OAuth consumer key, or API key when given alone.
            consumer_secret: OAuth consumer secret.
            token: OAuth token.
            token_secret: OAuth token secret.
            base_url: Base URL for the Tumblr API, without a path.
            timeout: Transport timeout in seconds, None to disable.
            http_client: HTTP client to send requests with. The caller keeps
                ownership and must close it.

        Raises:
            ConfigurationError: If the base URL or credentials are invalid.
        """
        self._base_url = validate_base_url(base_url)
        self._credentials = CredentialContext(
            resolve_credentials(
                consumer_key=consumer_key,
                consumer_secret=consumer_secret,
                token=token,
                token_secret=token_secret,
            )
        )
        self._timeout = timeout
        self._client = http_client
        self._owns_client = http_client is None

    @classmethod
    def from_options(
        cls,
        options: ClientOptions,
        http_client: httpx.AsyncClient | None = None,
    ) -> TumblrClient:
        """Create a client from loaded options."""
        return cls(
            consumer_key=options.consumer_key,
            consumer_secret=options.consumer_secret,
            token=options.token,
            token_secret=options.token_secret,
            base_url=options.base_url,
            timeout=options.timeout,
            http_client=http_client,
        )

    @property
    def base_url(self) -> str:
        """Get the validated base URL."""
        return self._base_url

    @property
    def auth_mode(self) -> str:
        """Get the credential mode: "none", "apiKey" or "oauth1"."""
        return self._credentials.auth_mode

    async def __aenter__(self) -> TumblrClient:
        """Enter async context manager."""
        await self._ensure_client()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Exit async context manager."""
        await self.close()

    async def _ensure_client(self) -> httpx.AsyncClient:
        """Ensure the HTTP client is initialized."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self._timeout),
                headers={"User-Agent": USER_AGENT, "Accept": "application/json"},
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client if this client created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def _request(
        self,
        method: str,
        api_path: str,
        params: Mapping[str, Any] | None = None,
    ) -> Any:
        """Make a request to the API.

        Args:
            method: GET, POST or PUT.
            api_path: URL path relative to the base URL.
            params: Query parameters for GET, body parameters otherwise.

        Returns:
            The ``response`` value of the API envelope.

        Raises:
            EncodingError: If the payload cannot be encoded.
            APIError: On API error statuses.
            MalformedResponseError: If the response is not an API envelope.
            TransportError: On connection failures.
        """
        planned = plan_request(self._base_url, api_path, method, params)
        body = encode_payload(planned.payload) if planned.payload is not None else None

        url, headers = self._credentials.authorize(planned.url, planned.method)
        headers = {"User-Agent": USER_AGENT, "Accept": "application/json", **headers}

        request_kwargs: dict[str, Any] = {}
        if body is not None:
            headers.update(body.headers)
            request_kwargs = body.request_kwargs()

        client = await self._ensure_client()
        request = client.build_request(planned.method, url, headers=headers, **request_kwargs)
        logger.debug("Sending %s %s", planned.method, planned.url)

        outcome = await send_request(client, request)
        return outcome.unwrap()

    # ==================== PRIMITIVES ====================

    async def get_request(self, api_path: str, params: Mapping[str, Any] | None = None) -> Any:
        """Perform a GET request.

        Args:
            api_path: URL path for the request.
            params: Query parameters. Lists become ``key[0]``, ``key[1]``, ...

        Returns:
            The API response.
        """
        return await self._request("GET", api_path, params)

    async def post_request(self, api_path: str, params: Mapping[str, Any] | None = None) -> Any:
        """Perform a POST request.

        Args:
            api_path: URL path for the request.
            params: Body parameters.

        Returns:
            The API response.
        """
        return await self._request("POST", api_path, params)

    async def put_request(self, api_path: str, params: Mapping[str, Any] | None = None) -> Any:
        """Perform a PUT request.

        Args:
            api_path: URL path for the request.
            params: Body parameters.

        Returns:
            The API response.
        """
        return await self._request("PUT", api_path, params)

    # ==================== POSTS ====================

    async def create_post(self, blog_identifier: str, params: Mapping[str, Any]) -> Any:
        """Create or reblog an NPF post.

        Media blocks may carry bytes or a binary file object as ``media``;
        those are uploaded as multipart parts.

        Args:
            blog_identifier: Blog name or URL.
            params: NPF post parameters, with ``content`` and optional ``tags``.

        Returns:
            The API response.
        """
        data = transform_npf_params(params)
        return await self.post_request(f"/v2/blog/{blog_identifier}/posts", data)

    async def edit_post(
        self,
        blog_identifier: str,
        post_id: str,
        params: Mapping[str, Any],
    ) -> Any:
        """Edit an NPF post.

        Args:
            blog_identifier: Blog name or URL.
            post_id: Post ID.
            params: NPF post parameters.

        Returns:
            The API response.
        """
        data = transform_npf_params(params)
        return await self.put_request(f"/v2/blog/{blog_identifier}/posts/{post_id}", data)

    async def create_legacy_post(self, blog_identifier: str, params: Mapping[str, Any]) -> Any:
        """Create a legacy post. Deprecated, use create_post."""
        warnings.warn(
            "Legacy post methods are deprecated, use create_post",
            DeprecationWarning,
            stacklevel=2,
        )
        return await self.post_request(f"/v2/blog/{blog_identifier}/post", params)

    async def edit_legacy_post(self, blog_identifier: str, params: Mapping[str, Any]) -> Any:
        """Edit a legacy post. Deprecated, use edit_post."""
        warnings.warn(
            "Legacy post methods are deprecated, use edit_post",
            DeprecationWarning,
            stacklevel=2,
        )
        return await self.post_request(f"/v2/blog/{blog_identifier}/post/edit", params)

    async def reblog_post(self, blog_identifier: str, params: Mapping[str, Any]) -> Any:
        """Reblog a post with the legacy endpoint. Deprecated, use create_post."""
        warnings.warn(
            "Legacy post methods are deprecated, use create_post",
            DeprecationWarning,
            stacklevel=2,
        )
        return await self.post_request(f"/v2/blog/{blog_identifier}/post/reblog", params)

    async def delete_post(self, blog_identifier: str, post_id: str) -> Any:
        """Delete a post.

        Args:
            blog_identifier: Blog name or URL.
            post_id: ID of the post to delete.
        """
        return await self.post_request(
            f"/v2/blog/{blog_identifier}/post/delete", {"id": post_id}
        )

    async def like_post(self, post_id: str, reblog_key: str) -> Any:
        """Like a post as the authenticating user."""
        return await self.post_request("/v2/user/like", {"id": post_id, "reblog_key": reblog_key})

    async def unlike_post(self, post_id: str, reblog_key: str) -> Any:
        """Unlike a post as the authenticating user."""
        return await self.post_request(
            "/v2/user/unlike", {"id": post_id, "reblog_key": reblog_key}
        )

    # ==================== FOLLOWS ====================

    async def follow_blog(self, params: Mapping[str, Any]) -> Any:
        """Follow a blog as the authenticating user.

        Args:
            params: ``{"url": ...}`` or ``{"email": ...}``.
        """
        return await self.post_request("/v2/user/follow", params)

    async def unfollow_blog(self, params: Mapping[str, Any]) -> Any:
        """Unfollow a blog as the authenticating user.

        Args:
            params: ``{"url": ...}``.
        """
        return await self.post_request("/v2/user/unfollow", params)

    # ==================== BLOGS ====================

    async def blog_info(
        self, blog_identifier: str, params: Mapping[str, Any] | None = None
    ) -> Any:
        """Get information about a blog."""
        return await self.get_request(f"/v2/blog/{blog_identifier}/info", params)

    async def blog_likes(
        self, blog_identifier: str, params: Mapping[str, Any] | None = None
    ) -> Any:
        """Get the likes of a blog (limit, offset, before, after)."""
        return await self.get_request(f"/v2/blog/{blog_identifier}/likes", params)

    async def blog_followers(
        self, blog_identifier: str, params: Mapping[str, Any] | None = None
    ) -> Any:
        """Get the followers of a blog (limit, offset)."""
        return await self.get_request(f"/v2/blog/{blog_identifier}/followers", params)

    async def blog_posts(
        self,
        blog_identifier: str,
        type: str | None = None,
        params: Mapping[str, Any] | None = None,
    ) -> Any:
        """Get the posts of a blog.

        Args:
            blog_identifier: Blog name or URL.
            type: Optional post type filter, e.g. "photo".
            params: Query parameters such as tag, limit, offset or npf.
        """
        path = f"/v2/blog/{blog_identifier}/posts"
        if type:
            path = f"{path}/{type}"
        return await self.get_request(path, params)

    async def blog_queue(
        self, blog_identifier: str, params: Mapping[str, Any] | None = None
    ) -> Any:
        """Get the queued posts of a blog (limit, offset, filter)."""
        return await self.get_request(f"/v2/blog/{blog_identifier}/posts/queue", params)

    async def blog_drafts(
        self, blog_identifier: str, params: Mapping[str, Any] | None = None
    ) -> Any:
        """Get the draft posts of a blog (before_id, filter)."""
        return await self.get_request(f"/v2/blog/{blog_identifier}/posts/draft", params)

    async def blog_submissions(
        self, blog_identifier: str, params: Mapping[str, Any] | None = None
    ) -> Any:
        """Get the submissions of a blog (offset, filter)."""
        return await self.get_request(f"/v2/blog/{blog_identifier}/posts/submission", params)

    async def blog_avatar(self, blog_identifier: str, size: int | None = None) -> Any:
        """Get the avatar URL of a blog.

        Args:
            blog_identifier: Blog name or URL.
            size: One of 16, 24, 30, 40, 48, 64, 96, 128 or 512.
        """
        suffix = f"/{size}" if size else ""
        return await self.get_request(f"/v2/blog/{blog_identifier}/avatar{suffix}")

    # ==================== USER ====================

    async def user_info(self) -> Any:
        """Get the authenticating user and their blogs."""
        return await self.get_request("/v2/user/info")

    async def user_dashboard(self, params: Mapping[str, Any] | None = None) -> Any:
        """Get the dashboard posts of the authenticating user."""
        return await self.get_request("/v2/user/dashboard", params)

    async def user_following(self, params: Mapping[str, Any] | None = None) -> Any:
        """Get the blogs the authenticating user follows."""
        return await self.get_request("/v2/user/following", params)

    async def user_likes(self, params: Mapping[str, Any] | None = None) -> Any:
        """Get the likes of the authenticating user."""
        return await self.get_request("/v2/user/likes", params)

    # ==================== TAGS ====================

    async def tagged_posts(self, tag: str, params: Mapping[str, Any] | None = None) -> Any:
        """Get posts tagged with the given tag.

        Args:
            tag: Tag to search for.
            params: Additional query parameters (before, limit, filter).
        """
        return await self.get_request("/v2/tagged", {**(params or {}), "tag": tag})


def create_client(**kwargs: Any) -> TumblrClient:
    """Create a Tumblr client.

    Accepts the same keyword arguments as TumblrClient.
    """
    return TumblrClient(**kwargs)
