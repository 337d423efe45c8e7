from __future__ import annotations

from dataclasses import dataclass, field
from typing import Generic, Literal, TypeVar, Union

T = TypeVar("T")

ListingKind = Literal["buy", "sell"]
MediaKind = Literal["image", "video"]

LISTING_KINDS: tuple[str, ...] = ("buy", "sell")
MEDIA_KINDS: tuple[str, ...] = ("image", "video")
CONDITIONS: tuple[str, ...] = ("New", "Used - Like New", "Used - Good", "Used - Fair")
CATEGORIES: tuple[str, ...] = ("textbooks", "electronics", "furniture", "clothing", "other")

MAX_UPLOAD_BYTES = 10 * 1024 * 1024


# --- Core data models ---


@dataclass
class Post:
    id: int
    title: str
    description: str
    price: float
    category: str
    type: str
    condition: str
    author: str
    images: list[str] = field(default_factory=list)
    videos: list[str] = field(default_factory=list)
    created_at: str = ""
    updated_at: str = ""
    raw: dict = field(default_factory=dict, repr=False, compare=False)


@dataclass
class DraftPost:
    title: str = ""
    description: str = ""
    price: str = ""
    category: str = ""
    type: str = "sell"
    condition: str = "New"
    author: str = ""
    images: list[str] = field(default_factory=list)
    videos: list[str] = field(default_factory=list)


@dataclass
class PostFilter:
    category: str | None = None
    type: str | None = None
    min_price: str | None = None
    max_price: str | None = None
    search: str | None = None

    def to_params(self) -> dict[str, str]:
        return {k: v for k, v in vars(self).items() if v}


# --- Request state union ---


@dataclass(frozen=True)
class Loading:
    pass


@dataclass(frozen=True)
class Loaded(Generic[T]):
    value: T


@dataclass(frozen=True)
class Failed:
    message: str


RequestState = Union[Loading, Loaded, Failed]


# --- Route union ---


@dataclass(frozen=True)
class HomeRoute:
    path = "/"


@dataclass(frozen=True)
class CreateRoute:
    path = "/create"


@dataclass(frozen=True)
class PostRoute:
    id: str

    @property
    def path(self) -> str:
        return f"/post/{self.id}"


Route = Union[HomeRoute, CreateRoute, PostRoute]
