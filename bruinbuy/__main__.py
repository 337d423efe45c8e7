from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from rich.console import Console

from .app import App
from .client import ApiClient
from .exceptions import map_exception_to_exit_code
from .form import DRAFT_FIELDS, CreateView
from .routes import parse_route
from .structures import CATEGORIES, CONDITIONS, LISTING_KINDS, HomeRoute, Loaded, PostFilter
from .ui import LiveSink, NullSink, RenderSink, render_view
from .views import DetailView, ListView, View


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="bruinbuy")
    parser.add_argument("route", nargs="?", default="/", help="Route: /, /create or /post/<id>")
    parser.add_argument("--base-url", default=ApiClient.BASE_URL)
    parser.add_argument("--timeout", type=float, default=20.0)
    parser.add_argument("-v", "--verbose", action="store_true")

    parser.add_argument("--search")
    parser.add_argument("--category", help=f"One of: {', '.join(CATEGORIES)}")
    parser.add_argument("--type", choices=LISTING_KINDS)
    parser.add_argument("--min-price")
    parser.add_argument("--max-price")

    parser.add_argument("--title")
    parser.add_argument("--description")
    parser.add_argument("--price")
    parser.add_argument("--condition", choices=CONDITIONS)
    parser.add_argument("--author")
    parser.add_argument("--image", action="append", default=[], metavar="PATH")
    parser.add_argument("--video", action="append", default=[], metavar="PATH")

    args = parser.parse_args(argv)

    if args.timeout <= 0:
        parser.error("--timeout must be > 0")
    if args.category is not None and args.category not in CATEGORIES:
        parser.error(f"--category must be one of: {', '.join(CATEGORIES)}")

    return args


def _post_filter(args: argparse.Namespace) -> PostFilter | None:
    post_filter = PostFilter(
        category=args.category,
        type=args.type,
        min_price=args.min_price,
        max_price=args.max_price,
        search=args.search,
    )
    return post_filter if post_filter.to_params() else None


def _succeeded(view: View | None) -> bool:
    if isinstance(view, ListView):
        return isinstance(view.state, Loaded)
    if isinstance(view, DetailView):
        return isinstance(view.state, Loaded) and view.state.value is not None
    if isinstance(view, CreateView):
        return view.succeeded
    return False


async def _fill_and_submit(view: CreateView, args: argparse.Namespace) -> None:
    for name in DRAFT_FIELDS:
        value = getattr(args, name)
        if value is not None:
            view.set_field(name, value)

    for kind, paths in (("image", args.image), ("video", args.video)):
        for path in paths:
            if await view.upload(kind, path) is None:
                return
    await view.submit()


async def run(args: argparse.Namespace, client: ApiClient, sink: RenderSink) -> tuple[int, View | None]:
    route = parse_route(args.route)
    post_filter = _post_filter(args) if isinstance(route, HomeRoute) else None
    app = App(client, on_change=sink.update, post_filter=post_filter)
    view = app.navigate(route)
    if isinstance(view, CreateView):
        await _fill_and_submit(view, args)
    await app.settle()
    return (0 if _succeeded(app.view) else 1), app.view


def main(argv: list[str] | None = None) -> int:
    client: ApiClient | None = None
    sink: RenderSink | None = None

    try:
        args = parse_args(argv)
        level = logging.DEBUG if args.verbose else logging.WARNING

        if sys.stderr.isatty():
            from rich.logging import RichHandler

            logging.basicConfig(
                handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
                level=level,
                format="%(message)s",
            )
        else:
            logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

        console = Console()
        client = ApiClient(args.base_url, request_timeout=args.timeout)
        sink = LiveSink(console, client.media_url) if console.is_terminal else NullSink()

        code, view = asyncio.run(run(args, client, sink))
        if not console.is_terminal and view is not None:
            console.print(render_view(view, client.media_url))
        return code

    except KeyboardInterrupt:
        return 5
    except SystemExit as exc:
        code = exc.code if isinstance(exc.code, int) else 2
        return 0 if code == 0 else 2
    except BaseException as exc:
        logging.getLogger(__name__).debug("bruinbuy failed", exc_info=True)
        print(f"error: {exc}", file=sys.stderr)
        return map_exception_to_exit_code(exc)
    finally:
        if sink is not None:
            sink.close()
        if client is not None:
            client.close()


if __name__ == "__main__":
    sys.exit(main())
