"""Integration tests for App navigation against a mocked backend."""
from __future__ import annotations

import asyncio
import threading

import responses

from bruinbuy.app import App
from bruinbuy.client import ApiClient
from bruinbuy.form import CreateView
from bruinbuy.structures import CreateRoute, Failed, HomeRoute, Loaded, PostRoute
from bruinbuy.views import DetailView, ListView

API = "http://localhost:8080/api"


def raw_post(post_id: int, **overrides) -> dict:
    raw = {
        "id": post_id, "title": f"Item {post_id}", "description": "A thing", "price": 2.0,
        "category": "clothing", "type": "buy", "condition": "Used - Fair", "author": "Fay",
        "images": [], "videos": [], "created_at": "2024-05-01T10:00:00Z",
        "updated_at": "2024-05-01T10:00:00Z",
    }
    raw.update(overrides)
    return raw


class Renders:
    def __init__(self):
        self.views: list = []

    def __call__(self, view):
        self.views.append(view)


class TestNavigation:
    @responses.activate
    def test_home_route(self):
        responses.get(f"{API}/posts", json=[raw_post(1), raw_post(2)])
        app = App(ApiClient())

        async def scenario():
            view = app.navigate(HomeRoute())
            await app.settle()
            return view

        view = asyncio.run(scenario())
        assert isinstance(view, ListView)
        assert [p.id for p in view.state.value] == [1, 2]
        assert len(responses.calls) == 1

    @responses.activate
    def test_detail_reused_on_id_change(self):
        responses.get(f"{API}/posts/1", json=raw_post(1))
        responses.get(f"{API}/posts/2", json=raw_post(2))
        app = App(ApiClient())

        async def scenario():
            first = app.navigate(PostRoute(id="1"))
            await app.settle()
            second = app.navigate(PostRoute(id="2"))
            await app.settle()
            return first, second

        first, second = asyncio.run(scenario())
        assert first is second
        assert isinstance(first, DetailView)
        assert first.state.value.id == 2
        assert [c.request.url for c in responses.calls] == [f"{API}/posts/1", f"{API}/posts/2"]

    @responses.activate
    def test_create_navigates_home(self):
        responses.post(f"{API}/posts", json=raw_post(9), status=201)
        responses.get(f"{API}/posts", json=[raw_post(9)])
        app = App(ApiClient())

        async def scenario():
            form = app.navigate(CreateRoute())
            for name, value in (
                ("title", "Jacket"), ("description", "Warm"), ("price", "20"),
                ("category", "clothing"), ("author", "Fay"),
            ):
                form.set_field(name, value)
            await form.submit()
            await app.settle()
            return form

        form = asyncio.run(scenario())
        assert isinstance(form, CreateView)
        assert form.succeeded is True
        assert form.torn_down is True
        assert app.history == [CreateRoute(), HomeRoute()]
        assert isinstance(app.view, ListView)
        assert isinstance(app.view.state, Loaded)

    @responses.activate
    def test_failed_create_stays_on_form(self):
        responses.post(f"{API}/posts", status=500)
        app = App(ApiClient())

        async def scenario():
            form = app.navigate(CreateRoute())
            for name in ("title", "description", "category", "author"):
                form.set_field(name, "x")
            form.set_field("price", "1")
            await form.submit()
            await app.settle()
            return form

        form = asyncio.run(scenario())
        assert app.view is form
        assert app.history == [CreateRoute()]
        assert "500" in form.last_error

    def test_leaving_view_drops_late_result(self):
        gate = threading.Event()

        class SlowClient:
            def list_posts(self):
                gate.wait(timeout=5)
                return []

            def get_post(self, post_id):
                return None

        renders = Renders()
        app = App(SlowClient(), on_change=renders)

        async def scenario():
            home = app.navigate(HomeRoute())
            await asyncio.sleep(0)
            app.navigate(PostRoute(id="abc"))
            gate.set()
            await app.settle()
            return home

        home = asyncio.run(scenario())
        assert home.torn_down is True
        assert home.state != Loaded([])
        assert isinstance(app.view, DetailView)
        assert app.view.state == Failed("invalid id")
        assert all(v is app.view for v in renders.views[renders.views.index(app.view):])

    @responses.activate
    def test_only_current_view_renders(self):
        responses.get(f"{API}/posts", json=[])
        renders = Renders()
        app = App(ApiClient(), on_change=renders)

        async def scenario():
            app.navigate(HomeRoute())
            await app.settle()

        asyncio.run(scenario())
        assert renders.views
        assert all(isinstance(v, ListView) for v in renders.views)
