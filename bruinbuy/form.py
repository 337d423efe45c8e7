from __future__ import annotations

import asyncio
import logging
import mimetypes
from pathlib import Path

from .adapter import validate_draft
from .client import ApiClient
from .exceptions import BruinBuyException, ValidationError
from .structures import MAX_UPLOAD_BYTES, MEDIA_KINDS, DraftPost, HomeRoute
from .views import Navigator, View

logger = logging.getLogger(__name__)

DRAFT_FIELDS = ("title", "description", "price", "category", "type", "condition", "author")


class CreateView(View):
    """Create-post form.

    Holds the draft field by field, validates locally before submitting and
    uploads media files independently of submit. Overlapping uploads share
    the single ``uploading`` flag, so the first one to settle clears it.
    """

    def __init__(self, client: ApiClient, *, navigate: Navigator | None = None, **kwargs):
        super().__init__(client, **kwargs)
        self._navigate = navigate
        self.title = ""
        self.description = ""
        self.price = ""
        self.category = ""
        self.type = "sell"
        self.condition = "New"
        self.author = ""
        self.images: list[str] = []
        self.videos: list[str] = []
        self.submitting = False
        self.uploading = False
        self.succeeded = False
        self.last_error: str | None = None

    def set_field(self, name: str, value: str) -> None:
        if name not in DRAFT_FIELDS:
            raise ValueError(f"unknown draft field: {name}")
        self._set(**{name: value})

    @property
    def draft(self) -> DraftPost:
        return DraftPost(
            title=self.title,
            description=self.description,
            price=self.price,
            category=self.category,
            type=self.type,
            condition=self.condition,
            author=self.author,
            images=list(self.images),
            videos=list(self.videos),
        )

    async def submit(self) -> bool:
        draft = self.draft
        try:
            validate_draft(draft)
        except ValidationError as e:
            self._set(last_error=str(e))
            return False

        self._set(submitting=True, last_error=None)
        try:
            await asyncio.to_thread(self.client.create_post, draft)
        except BruinBuyException as e:
            logger.warning("create post failed: %s", e)
            self._set(submitting=False, last_error=str(e))
            return False

        if not self._set(submitting=False, succeeded=True):
            return False
        if self._navigate is not None:
            self._navigate(HomeRoute())
        return True

    async def upload(self, kind: str, path: str | Path) -> str | None:
        if kind not in MEDIA_KINDS:
            raise ValueError(f"unsupported media kind: {kind}")
        path = Path(path)
        self._set(uploading=True)
        try:
            url = await self._upload(kind, path)
        except BruinBuyException as e:
            logger.warning("%s upload failed: %s", kind, e)
            self._set(uploading=False, last_error=str(e))
            return None

        target = self.images if kind == "image" else self.videos
        self._set(uploading=False, **{f"{kind}s": [*target, url]})
        return url

    async def _upload(self, kind: str, path: Path) -> str:
        try:
            data = await asyncio.to_thread(path.read_bytes)
        except OSError as e:
            raise ValidationError(f"Failed to read {path.name}: {e.strerror or e}") from e

        if len(data) > MAX_UPLOAD_BYTES:
            raise ValidationError(f"File {path.name} is too large. Maximum size is 10MB.")

        mime_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
        return await asyncio.to_thread(self.client.upload_media, kind, data, path.name, mime_type)
