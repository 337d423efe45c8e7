from __future__ import annotations

import logging
from typing import Any

import requests

from .adapter import backend_origin, parse_post, parse_posts, parse_upload_url, resolve_media_url, serialize_draft
from .exceptions import DecodeError, ServerError, TransportError
from .structures import MEDIA_KINDS, DraftPost, Post, PostFilter

logger = logging.getLogger(__name__)


class ApiClient:
    """Stateless wrapper around the marketplace REST API.

    Every call is a single attempt: transport failures, non-success statuses
    and undecodable bodies are raised as ``TransportError``, ``ServerError``
    and ``DecodeError`` whose message is meant to be shown as is.
    """

    BASE_URL = "http://localhost:8080/api"
    HEADERS = {
        "User-Agent": "bruinbuy/0.1",
        "Accept": "application/json",
    }

    def __init__(
        self,
        base_url: str | None = None,
        *,
        session: requests.Session | None = None,
        request_timeout: float = 20,
    ):
        self.base_url = (base_url or self.BASE_URL).rstrip("/")
        self.origin = backend_origin(self.base_url)
        self.req_timeout = request_timeout
        if session is None:
            self.session = requests.Session()
            self.session.headers.update(self.HEADERS)
        else:
            self.session = session
            for k, v in self.HEADERS.items():
                self.session.headers.setdefault(k, v)

    def request(self, method: str, path: str, *, action: str, **kwargs) -> Any:
        """Send one request and return the decoded JSON body."""
        target = f"{self.base_url}/{path.lstrip('/')}"
        timeout = kwargs.pop("timeout", self.req_timeout)
        logger.debug("%s %s", method, target)

        try:
            resp = self.session.request(method, target, timeout=timeout, **kwargs)
        except requests.RequestException as e:
            logger.warning("%s %s failed: %s", method, target, e)
            raise TransportError(f"Request failed: {e}") from e

        try:
            if not resp.ok:
                logger.warning("%s %s -> %s", method, target, resp.status_code)
                raise ServerError(f"Failed to {action}: {resp.status_code}", status_code=resp.status_code)
            try:
                return resp.json()
            except ValueError as e:
                raise DecodeError(f"Failed to parse response to {action}: {e}") from e
        finally:
            resp.close()

    def list_posts(self, post_filter: PostFilter | None = None) -> list[Post]:
        params = post_filter.to_params() if post_filter else None
        payload = self.request("GET", "/posts", action="fetch posts", params=params or None)
        return self._decode(parse_posts, payload, "posts")

    def get_post(self, post_id: int) -> Post | None:
        payload = self.request("GET", f"/posts/{int(post_id)}", action="fetch post")
        if payload is None:
            return None
        return self._decode(parse_post, payload, "post")

    def create_post(self, draft: DraftPost) -> Post:
        payload = self.request("POST", "/posts", action="create post", json=serialize_draft(draft))
        return self._decode(parse_post, payload, "created post")

    def upload_media(self, kind: str, data: bytes, filename: str, mime_type: str) -> str:
        if kind not in MEDIA_KINDS:
            raise ValueError(f"unsupported media kind: {kind}")
        payload = self.request(
            "POST",
            f"/upload/{kind}",
            action=f"upload {kind}",
            files={kind: (filename, data, mime_type)},
        )
        return self._decode(parse_upload_url, payload, f"{kind} upload")

    def media_url(self, url: str) -> str:
        return resolve_media_url(url, self.origin)

    def close(self) -> None:
        self.session.close()

    @staticmethod
    def _decode(parser, payload: Any, what: str):
        try:
            return parser(payload)
        except DecodeError as e:
            raise DecodeError(f"Failed to parse {what}: {e}") from e
