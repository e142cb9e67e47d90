"""Uncached image delivery straight from the repository contents API."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging

from editor_gateway.auth import ResolvedToken
from editor_gateway.providers.scm.errors import (
    ContentStoreError,
    NotFoundError,
    UnauthenticatedError,
)
from editor_gateway.workflows.base import Workflow

logger = logging.getLogger(__name__)

IMAGE_MEDIA_TYPE = "image/png"

NO_CACHE_HEADERS = {
    "Cache-Control": "no-cache, no-store, must-revalidate",
    "Pragma": "no-cache",
    "Expires": "0",
}


@dataclass(frozen=True)
class ImageResponse:
    content: bytes
    headers: dict[str, str] = field(default_factory=dict)
    media_type: str = IMAGE_MEDIA_TYPE


class ImageProxy(Workflow):
    """Serve uploaded images without going through the raw-content CDN.

    The CDN lags behind fresh uploads, so every call re-reads the file from
    the API and tells every cache along the way not to keep it.
    """

    def fetch_image(self, token: ResolvedToken | None, name: str | None) -> ImageResponse:
        if token is None:
            raise UnauthenticatedError("Missing GITHUB_TOKEN env var")
        name = name or self._settings.default_image_name
        path = f"{self._settings.asset_dir}/{name}"
        store = self._open_store(token)
        try:
            remote = store.read_file(path)
        except NotFoundError:
            raise
        except ContentStoreError as exc:
            logger.warning("Image read for %s failed: %s", path, exc.message)
            raise NotFoundError(exc.message, status=exc.status) from exc
        headers = {"Content-Type": IMAGE_MEDIA_TYPE, **NO_CACHE_HEADERS}
        return ImageResponse(content=remote.content, headers=headers)
