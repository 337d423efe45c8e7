from __future__ import annotations

from bruinbuy.app import App
from bruinbuy.client import ApiClient
from bruinbuy.exceptions import (
    BruinBuyException,
    DecodeError,
    InitError,
    ServerError,
    TransportError,
    ValidationError,
)
from bruinbuy.form import CreateView
from bruinbuy.structures import (
    CreateRoute,
    DraftPost,
    Failed,
    HomeRoute,
    Loaded,
    Loading,
    Post,
    PostFilter,
    PostRoute,
    RequestState,
    Route,
)
from bruinbuy.views import DetailView, ListView, View

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # exceptions
    "BruinBuyException",
    "ValidationError",
    "TransportError",
    "ServerError",
    "DecodeError",
    "InitError",
    # structures
    "Post",
    "DraftPost",
    "PostFilter",
    "Loading",
    "Loaded",
    "Failed",
    "RequestState",
    # routes
    "HomeRoute",
    "CreateRoute",
    "PostRoute",
    "Route",
    # client and views
    "ApiClient",
    "View",
    "ListView",
    "DetailView",
    "CreateView",
    "App",
]
