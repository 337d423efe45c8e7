from __future__ import annotations

import re
from urllib.parse import urlparse

from .exceptions import InitError
from .structures import CreateRoute, HomeRoute, PostRoute, Route

_POST_RE = re.compile(r"/post/([^/]+)")


def parse_route(raw: str) -> Route:
    path = urlparse((raw or "").strip()).path or "/"
    if len(path) > 1:
        path = path.rstrip("/")

    if path == "/":
        return HomeRoute()
    if path == "/create":
        return CreateRoute()
    if m := _POST_RE.fullmatch(path):
        return PostRoute(id=m.group(1))
    raise InitError(f"unknown route: {raw}")
