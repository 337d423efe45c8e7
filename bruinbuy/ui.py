from __future__ import annotations

import logging
from typing import Callable, Protocol, runtime_checkable

from rich.console import Console, Group, RenderableType
from rich.live import Live
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .adapter import format_price
from .form import CreateView
from .structures import Failed, Loading, Post, RequestState
from .views import DetailView, ListView, View

logger = logging.getLogger(__name__)

MediaResolver = Callable[[str], str]

_KIND_BADGES = {
    "sell": ("Selling", "bold green"),
    "buy": ("Buying", "bold blue"),
}


def _identity(url: str) -> str:
    return url


def kind_badge(kind: str) -> Text:
    label, style = _KIND_BADGES.get(kind, (kind or "?", "bold"))
    return Text(label, style=style)


def _status(state: RequestState, loading: str) -> RenderableType | None:
    if isinstance(state, Loading):
        return Text(loading, style="dim")
    if isinstance(state, Failed):
        return Text(f"Error: {state.message}", style="red")
    return None


def render_list(state: RequestState, media_url: MediaResolver = _identity) -> RenderableType:
    if (status := _status(state, "Loading posts...")) is not None:
        return status

    posts: list[Post] = state.value
    if not posts:
        return Text("No posts yet. Be the first to create one!", style="italic")

    table = Table(title="UCLA Student Marketplace", expand=True)
    for column in ("Title", "Price", "Category", "Condition", "Type", "Image", "Link"):
        table.add_column(column)
    for post in posts:
        image = media_url(post.images[0]) if post.images else "(no image)"
        table.add_row(
            Text(post.title, style="bold"),
            format_price(post.price),
            Text(post.category),
            Text(post.condition),
            kind_badge(post.type),
            Text(image),
            f"/post/{post.id}",
        )
    return table


def _gallery(title: str, urls: list[str], media_url: MediaResolver) -> Text:
    text = Text(f"{title}\n", style="bold")
    text.append("\n".join(f"  {media_url(u)}" for u in urls))
    return text


def render_detail(state: RequestState, media_url: MediaResolver = _identity) -> RenderableType:
    if (status := _status(state, "Loading post...")) is not None:
        return status

    post: Post | None = state.value
    if post is None:
        return Text("Post not found", style="yellow")

    meta = Text()
    meta.append(format_price(post.price), style="bold")
    meta.append(f"  {post.category}  {post.condition}  ")
    meta.append_text(kind_badge(post.type))

    parts: list[RenderableType] = [
        meta,
        Text(post.description),
        Text(f"Posted by: {post.author}"),
        Text(f"Created: {post.created_at}", style="dim"),
    ]
    if post.images:
        parts.append(_gallery("Images", post.images, media_url))
    if post.videos:
        parts.append(_gallery("Videos", post.videos, media_url))
    return Panel(Group(*parts), title=Text(post.title, style="bold"))


def render_create(view: CreateView, media_url: MediaResolver = _identity) -> RenderableType:
    fields = Table.grid(padding=(0, 2))
    fields.add_column(style="bold")
    fields.add_column()
    for label, value in (
        ("Title", view.title),
        ("Description", view.description),
        ("Price", view.price),
        ("Category", view.category),
        ("Type", view.type),
        ("Condition", view.condition),
        ("Your Name", view.author),
    ):
        fields.add_row(label, Text(value))

    parts: list[RenderableType] = [fields]
    if view.images:
        parts.append(_gallery("Images", view.images, media_url))
    if view.videos:
        parts.append(_gallery("Videos", view.videos, media_url))
    if view.uploading:
        parts.append(Text("Uploading...", style="dim"))
    if view.last_error:
        parts.append(Text(view.last_error, style="red"))
    if view.succeeded:
        parts.append(Text("Post created successfully!", style="green"))
    parts.append(Text("Creating..." if view.submitting else "Create Post", style="reverse"))
    return Panel(Group(*parts), title="Create New Post")


def render_view(view: View, media_url: MediaResolver = _identity) -> RenderableType:
    if isinstance(view, ListView):
        return render_list(view.state, media_url)
    if isinstance(view, DetailView):
        return render_detail(view.state, media_url)
    if isinstance(view, CreateView):
        return render_create(view, media_url)
    raise TypeError(f"no renderer for {type(view).__name__}")


@runtime_checkable
class RenderSink(Protocol):
    def update(self, view: View) -> None: ...
    def close(self) -> None: ...


class NullSink:
    def update(self, view: View) -> None:
        pass

    def close(self) -> None:
        pass


class LiveSink:
    """Redraws the current view in place on every state change."""

    def __init__(self, console: Console, media_url: MediaResolver = _identity) -> None:
        self._media_url = media_url
        self._live = Live(Text(""), console=console, auto_refresh=False)
        self._live.start()

    def update(self, view: View) -> None:
        try:
            self._live.update(render_view(view, self._media_url), refresh=True)
        except Exception:
            logger.debug("LiveSink.update failed", exc_info=True)

    def close(self) -> None:
        try:
            self._live.stop()
        except Exception:
            logger.debug("LiveSink.close failed", exc_info=True)
