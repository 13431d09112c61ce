"""Synchronous wrapper for the Tumblr client."""

from __future__ import annotations

import asyncio
import threading
from collections.abc import Coroutine, Mapping
from typing import Any, TypeVar

from .client import TumblrClient
from .config import DEFAULT_BASE_URL, DEFAULT_TIMEOUT, ClientOptions

T = TypeVar("T")


class TumblrClientSync:
    """Synchronous client for the Tumblr API.

    This is a blocking wrapper around the async TumblrClient. Every call runs
    to completion on an event loop owned by the wrapper, so the underlying
    HTTP connections stay bound to a single loop.

    Example:
        ```python
        from tumblr_sdk import TumblrClientSync

        with TumblrClientSync(consumer_key="...") as client:
            info = client.blog_info("staff.tumblr.com")
            print(info["blog"]["title"])
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
    ) -> None:
        """Initialize the synchronous Tumblr client.

        Args:
            consumer_key: OAuth consumer key, or API key when given alone.
            consumer_secret: OAuth consumer secret.
            token: OAuth token.
            token_secret: OAuth token secret.
            base_url: Base URL for the Tumblr API, without a path.
            timeout: Transport timeout in seconds, None to disable.
        """
        self._async_client = TumblrClient(
            consumer_key=consumer_key,
            consumer_secret=consumer_secret,
            token=token,
            token_secret=token_secret,
            base_url=base_url,
            timeout=timeout,
        )
        self._loop = asyncio.new_event_loop()

    @classmethod
    def from_options(cls, options: ClientOptions) -> TumblrClientSync:
        """Create a synchronous client from loaded options."""
        return cls(
            consumer_key=options.consumer_key,
            consumer_secret=options.consumer_secret,
            token=options.token,
            token_secret=options.token_secret,
            base_url=options.base_url,
            timeout=options.timeout,
        )

    def _run(self, coro: Coroutine[Any, Any, T]) -> T:
        """Run a coroutine on the wrapper's event loop.

        When called from inside a running event loop, the coroutine runs on a
        helper thread instead of blocking that loop's thread re-entrantly.
        """
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            return self._loop.run_until_complete(coro)

        result: Any = None
        exception: BaseException | None = None

        def run_in_thread() -> None:
            nonlocal result, exception
            try:
                result = self._loop.run_until_complete(coro)
            except BaseException as e:
                exception = e

        thread = threading.Thread(target=run_in_thread)
        thread.start()
        thread.join()

        if exception is not None:
            raise exception
        return result

    @property
    def base_url(self) -> str:
        """Get the validated base URL."""
        return self._async_client.base_url

    @property
    def auth_mode(self) -> str:
        """Get the credential mode: "none", "apiKey" or "oauth1"."""
        return self._async_client.auth_mode

    def __enter__(self) -> TumblrClientSync:
        """Enter context manager."""
        self._run(self._async_client.__aenter__())
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Exit context manager."""
        self.close()

    def close(self) -> None:
        """Close the HTTP client and the event loop."""
        if self._loop.is_closed():
            return
        self._run(self._async_client.close())
        self._loop.close()

    # ==================== PRIMITIVES ====================

    def get_request(self, api_path: str, params: Mapping[str, Any] | None = None) -> Any:
        """Perform a GET request."""
        return self._run(self._async_client.get_request(api_path, params))

    def post_request(self, api_path: str, params: Mapping[str, Any] | None = None) -> Any:
        """Perform a POST request."""
        return self._run(self._async_client.post_request(api_path, params))

    def put_request(self, api_path: str, params: Mapping[str, Any] | None = None) -> Any:
        """Perform a PUT request."""
        return self._run(self._async_client.put_request(api_path, params))

    # ==================== POSTS ====================

    def create_post(self, blog_identifier: str, params: Mapping[str, Any]) -> Any:
        """Create or reblog an NPF post."""
        return self._run(self._async_client.create_post(blog_identifier, params))

    def edit_post(self, blog_identifier: str, post_id: str, params: Mapping[str, Any]) -> Any:
        """Edit an NPF post."""
        return self._run(self._async_client.edit_post(blog_identifier, post_id, params))

    def create_legacy_post(self, blog_identifier: str, params: Mapping[str, Any]) -> Any:
        """Create a legacy post. Deprecated, use create_post."""
        return self._run(self._async_client.create_legacy_post(blog_identifier, params))

    def edit_legacy_post(self, blog_identifier: str, params: Mapping[str, Any]) -> Any:
        """Edit a legacy post. Deprecated, use edit_post."""
        return self._run(self._async_client.edit_legacy_post(blog_identifier, params))

    def reblog_post(self, blog_identifier: str, params: Mapping[str, Any]) -> Any:
        """Reblog a post with the legacy endpoint. Deprecated, use create_post."""
        return self._run(self._async_client.reblog_post(blog_identifier, params))

    def delete_post(self, blog_identifier: str, post_id: str) -> Any:
        """Delete a post."""
        return self._run(self._async_client.delete_post(blog_identifier, post_id))

    def like_post(self, post_id: str, reblog_key: str) -> Any:
        """Like a post as the authenticating user."""
        return self._run(self._async_client.like_post(post_id, reblog_key))

    def unlike_post(self, post_id: str, reblog_key: str) -> Any:
        """Unlike a post as the authenticating user."""
        return self._run(self._async_client.unlike_post(post_id, reblog_key))

    # ==================== FOLLOWS ====================

    def follow_blog(self, params: Mapping[str, Any]) -> Any:
        """Follow a blog as the authenticating user."""
        return self._run(self._async_client.follow_blog(params))

    def unfollow_blog(self, params: Mapping[str, Any]) -> Any:
        """Unfollow a blog as the authenticating user."""
        return self._run(self._async_client.unfollow_blog(params))

    # ==================== BLOGS ====================

    def blog_info(self, blog_identifier: str, params: Mapping[str, Any] | None = None) -> Any:
        """Get information about a blog."""
        return self._run(self._async_client.blog_info(blog_identifier, params))

    def blog_likes(self, blog_identifier: str, params: Mapping[str, Any] | None = None) -> Any:
        """Get the likes of a blog."""
        return self._run(self._async_client.blog_likes(blog_identifier, params))

    def blog_followers(
        self, blog_identifier: str, params: Mapping[str, Any] | None = None
    ) -> Any:
        """Get the followers of a blog."""
        return self._run(self._async_client.blog_followers(blog_identifier, params))

    def blog_posts(
        self,
        blog_identifier: str,
        type: str | None = None,
        params: Mapping[str, Any] | None = None,
    ) -> Any:
        """Get the posts of a blog."""
        return self._run(self._async_client.blog_posts(blog_identifier, type, params))

    def blog_queue(self, blog_identifier: str, params: Mapping[str, Any] | None = None) -> Any:
        """Get the queued posts of a blog."""
        return self._run(self._async_client.blog_queue(blog_identifier, params))

    def blog_drafts(self, blog_identifier: str, params: Mapping[str, Any] | None = None) -> Any:
        """Get the draft posts of a blog."""
        return self._run(self._async_client.blog_drafts(blog_identifier, params))

    def blog_submissions(
        self, blog_identifier: str, params: Mapping[str, Any] | None = None
    ) -> Any:
        """Get the submissions of a blog."""
        return self._run(self._async_client.blog_submissions(blog_identifier, params))

    def blog_avatar(self, blog_identifier: str, size: int | None = None) -> Any:
        """Get the avatar URL of a blog."""
        return self._run(self._async_client.blog_avatar(blog_identifier, size))

    # ==================== USER ====================

    def user_info(self) -> Any:
        """Get the authenticating user and their blogs."""
        return self._run(self._async_client.user_info())

    def user_dashboard(self, params: Mapping[str, Any] | None = None) -> Any:
        """Get the dashboard posts of the authenticating user."""
        return self._run(self._async_client.user_dashboard(params))

    def user_following(self, params: Mapping[str, Any] | None = None) -> Any:
        """Get the blogs the authenticating user follows."""
        return self._run(self._async_client.user_following(params))

    def user_likes(self, params: Mapping[str, Any] | None = None) -> Any:
        """Get the likes of the authenticating user."""
        return self._run(self._async_client.user_likes(params))

    # ==================== TAGS ====================

    def tagged_posts(self, tag: str, params: Mapping[str, Any] | None = None) -> Any:
        """Get posts tagged with the given tag."""
        return self._run(self._async_client.tagged_posts(tag, params))
