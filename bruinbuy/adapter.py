from __future__ import annotations

import math
import re
from typing import Any, Mapping
from urllib.parse import urljoin, urlparse

from .exceptions import DecodeError, ValidationError
from .structures import DraftPost, Post

_POST_ID_RE = re.compile(r"[+-]?[0-9]+")
_PRICE_RE = re.compile(r"[+-]?([0-9]+\.?[0-9]*|\.[0-9]+)([eE][+-]?[0-9]+)?")
_ID_MIN, _ID_MAX = -(2**31), 2**31 - 1
_SCHEME_RE = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]*:")


def parse_post_id(raw: str) -> int:
    token = raw or ""
    if not _POST_ID_RE.fullmatch(token):
        raise ValidationError("invalid id")
    value = int(token)
    if not _ID_MIN <= value <= _ID_MAX:
        raise ValidationError("invalid id")
    return value


def parse_price(raw: str) -> float:
    if not isinstance(raw, str) or not _PRICE_RE.fullmatch(raw):
        raise ValidationError("Invalid price format")
    value = float(raw)
    if not math.isfinite(value):
        raise ValidationError("Invalid price format")
    return value


def format_price(price: float) -> str:
    return f"${price:.2f}"


def _url_list(raw: Any, name: str) -> list[str]:
    if raw is None:
        return []
    if not isinstance(raw, list) or not all(isinstance(u, str) for u in raw):
        raise DecodeError(f"post field {name} is not a list of urls")
    return list(raw)


def parse_post(raw: Any) -> Post:
    if not isinstance(raw, Mapping):
        raise DecodeError("post is not an object")

    post_id = raw.get("id")
    if not isinstance(post_id, int) or isinstance(post_id, bool):
        raise DecodeError("post missing id")

    price = raw.get("price")
    if not isinstance(price, (int, float)) or isinstance(price, bool):
        raise DecodeError(f"post {post_id} missing price")

    return Post(
        id=post_id,
        title=str(raw.get("title") or ""),
        description=str(raw.get("description") or ""),
        price=float(price),
        category=str(raw.get("category") or ""),
        type=str(raw.get("type") or ""),
        condition=str(raw.get("condition") or ""),
        author=str(raw.get("author") or ""),
        images=_url_list(raw.get("images"), "images"),
        videos=_url_list(raw.get("videos"), "videos"),
        created_at=str(raw.get("created_at") or ""),
        updated_at=str(raw.get("updated_at") or ""),
        raw=dict(raw),
    )


def parse_posts(raw: Any) -> list[Post]:
    # The backend answers null instead of [] for an empty table.
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise DecodeError("posts payload is not a list")
    return [parse_post(item) for item in raw]


def parse_upload_url(raw: Any) -> str:
    url = raw.get("url") if isinstance(raw, Mapping) else None
    if not isinstance(url, str) or not url:
        raise DecodeError("upload response missing url")
    return url


def validate_draft(draft: DraftPost) -> None:
    required = (
        draft.title, draft.description, draft.price, draft.category,
        draft.type, draft.condition, draft.author,
    )
    if any(not value for value in required):
        raise ValidationError("All fields are required")
    parse_price(draft.price)


def serialize_draft(draft: DraftPost) -> dict[str, Any]:
    return {
        "title": draft.title,
        "description": draft.description,
        "price": parse_price(draft.price),
        "category": draft.category,
        "type": draft.type,
        "condition": draft.condition,
        "author": draft.author,
        "images": list(draft.images),
        "videos": list(draft.videos),
    }


def backend_origin(base_url: str) -> str:
    parsed = urlparse(base_url)
    return f"{parsed.scheme}://{parsed.netloc}"


def resolve_media_url(url: str, origin: str) -> str:
    if _SCHEME_RE.match(url):
        return url
    return urljoin(f"{origin.rstrip('/')}/", url.lstrip("/"))
