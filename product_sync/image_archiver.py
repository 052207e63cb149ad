# image_archiver.py
from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Optional, Union
import logging
import re

import requests
from supabase import Client

from .schema import Product

logger = logging.getLogger(__name__)

IMAGE_EXTENSION = ".jpg"
IMAGE_CONTENT_TYPE = "image/jpeg"

_HTTP_URL_RE = re.compile(r"^https?://\S+$", re.IGNORECASE)


def looks_like_http_url(url: Any) -> bool:
    return isinstance(url, str) and bool(_HTTP_URL_RE.match(url))


class ImageArchiver(ABC):
    """
    Downloads a product image and hands the bytes to `store()`.

    Subclasses only decide where the bytes go. `archive()` never raises:
    every failure is logged and reported as False.
    """

    def __init__(self, timeout_seconds: float = 15) -> None:
        self.timeout_seconds = timeout_seconds

    def image_key(self, product: Product) -> str:
        return f"{product.id}{IMAGE_EXTENSION}"

    @abstractmethod
    def store(self, key: str, data: bytes) -> None:
        """Persist `data` under `key`."""

    def _download(self, image_url: str) -> Optional[bytes]:
        response = requests.get(image_url, timeout=self.timeout_seconds)
        if not response.ok:
            logger.warning(
                "Image fetch failed with HTTP %s for %s", response.status_code, image_url
            )
            return None
        return response.content

    def archive(self, image_url: Optional[str], product: Product) -> bool:
        if not looks_like_http_url(image_url):
            logger.warning("Invalid image url for %s: %r", product.name, image_url)
            return False

        try:
            data = self._download(image_url)
            if data is None:
                return False
            key = self.image_key(product)
            self.store(key, data)
        except Exception as exc:
            logger.warning("Failed to archive image for %s (%s): %s", product.id, image_url, exc)
            return False

        logger.info("Archived image %s for %s", key, product.name)
        return True


class SupabaseImageArchiver(ImageArchiver):
    """Uploads images to a Supabase Storage bucket, replacing existing objects."""

    def __init__(
        self,
        client: Client,
        bucket: str = "product-images",
        cache_seconds: int = 31536000,
        timeout_seconds: float = 15,
    ) -> None:
        super().__init__(timeout_seconds=timeout_seconds)
        self.client = client
        self.bucket = bucket
        self.cache_seconds = cache_seconds

    def store(self, key: str, data: bytes) -> None:
        self.client.storage.from_(self.bucket).upload(
            path=key,
            file=data,
            file_options={
                "cache-control": str(self.cache_seconds),
                "content-type": IMAGE_CONTENT_TYPE,
                "upsert": "true",
            },
        )


class LocalImageArchiver(ImageArchiver):
    """Writes images into a local directory, created on first use."""

    def __init__(self, directory: Union[str, Path], timeout_seconds: float = 15) -> None:
        super().__init__(timeout_seconds=timeout_seconds)
        self.directory = Path(directory)

    def store(self, key: str, data: bytes) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        (self.directory / key).write_bytes(data)
