from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Protocol

from .adapter import parse_post_id
from .client import ApiClient
from .exceptions import BruinBuyException, ValidationError
from .structures import Failed, Loaded, Loading, PostFilter, RequestState, Route

logger = logging.getLogger(__name__)


class Navigator(Protocol):
    def __call__(self, route: Route) -> Any: ...


class View:
    """Base for the per-route state containers.

    A view owns its state exclusively. Every mutation goes through
    ``_set``, which fires ``on_change`` once and is a no-op after
    ``unmount``: requests are never cancelled, late results are dropped.
    """

    def __init__(self, client: ApiClient, *, on_change: Callable[[View], None] | None = None):
        self.client = client
        self._on_change = on_change
        self.torn_down = False

    async def mount(self) -> None:
        pass

    def unmount(self) -> None:
        self.torn_down = True

    def _set(self, **changes: Any) -> bool:
        if self.torn_down:
            logger.debug("%s: dropping late update %s", type(self).__name__, sorted(changes))
            return False
        for name, value in changes.items():
            setattr(self, name, value)
        if self._on_change is not None:
            self._on_change(self)
        return True

    async def _call(self, fn: Callable[..., Any], *args: Any) -> RequestState:
        try:
            value = await asyncio.to_thread(fn, *args)
        except BruinBuyException as e:
            return Failed(str(e))
        return Loaded(value)


class ListView(View):
    def __init__(self, client: ApiClient, *, post_filter: PostFilter | None = None, **kwargs):
        super().__init__(client, **kwargs)
        self.post_filter = post_filter
        self.state: RequestState = Loading()

    async def mount(self) -> None:
        await self.load()

    async def load(self) -> None:
        self._set(state=Loading())
        if self.post_filter is None:
            result = await self._call(self.client.list_posts)
        else:
            result = await self._call(self.client.list_posts, self.post_filter)
        self._set(state=result)


class DetailView(View):
    def __init__(self, client: ApiClient, post_id: str, **kwargs):
        super().__init__(client, **kwargs)
        self.post_id = post_id
        self.state: RequestState = Loading()

    async def mount(self) -> None:
        await self.load()

    async def set_post_id(self, post_id: str) -> None:
        if post_id == self.post_id:
            return
        self.post_id = post_id
        await self.load()

    async def load(self) -> None:
        requested = self.post_id
        self._set(state=Loading())
        try:
            numeric_id = parse_post_id(requested)
        except ValidationError as e:
            self._set(state=Failed(str(e)))
            return

        result = await self._call(self.client.get_post, numeric_id)
        if requested != self.post_id:
            logger.debug("DetailView: ignoring result for stale id %s", requested)
            return
        self._set(state=result)
