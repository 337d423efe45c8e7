from __future__ import annotations

import asyncio
import logging
from typing import Callable

from .client import ApiClient
from .form import CreateView
from .structures import CreateRoute, PostFilter, PostRoute, Route
from .views import DetailView, ListView, View

logger = logging.getLogger(__name__)


class App:
    """Maps routes to views and owns navigation between them.

    Navigating away unmounts the current view without cancelling its
    outstanding requests; their results are dropped by the view itself.
    """

    def __init__(
        self,
        client: ApiClient,
        *,
        on_change: Callable[[View], None] | None = None,
        post_filter: PostFilter | None = None,
    ):
        self.client = client
        self.view: View | None = None
        self.route: Route | None = None
        self.history: list[Route] = []
        self._on_change = on_change
        self._post_filter = post_filter
        self._pending: set[asyncio.Task] = set()

    def navigate(self, route: Route) -> View:
        self.route = route
        self.history.append(route)

        # Same detail page with a new id: keep the view, let it re-fetch.
        if isinstance(route, PostRoute) and isinstance(self.view, DetailView):
            logger.debug("navigate %s (reusing DetailView)", route.path)
            self._spawn(self.view.set_post_id(route.id))
            return self.view

        if self.view is not None:
            self.view.unmount()
        self.view = self._build(route)
        logger.debug("navigate %s -> %s", route.path, type(self.view).__name__)
        self._notify(self.view)
        self._spawn(self.view.mount())
        return self.view

    def _spawn(self, coro) -> None:
        task = asyncio.get_running_loop().create_task(coro)
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def settle(self) -> None:
        """Wait until every mount started by ``navigate`` has finished."""
        while pending := [t for t in self._pending if not t.done()]:
            await asyncio.gather(*pending)

    def _build(self, route: Route) -> View:
        if isinstance(route, PostRoute):
            return DetailView(self.client, route.id, on_change=self._notify)
        if isinstance(route, CreateRoute):
            return CreateView(self.client, navigate=self.navigate, on_change=self._notify)
        return ListView(self.client, post_filter=self._post_filter, on_change=self._notify)

    def _notify(self, view: View) -> None:
        if view is not self.view or self._on_change is None:
            return
        self._on_change(view)
