"""
Image Rehosting

Rewrites partner image URLs to the store's own image bucket, uploading the
image first when the bucket doesn't have it yet.

    https://static.partner.com/a/b.jpg
        -> https://storage.googleapis.com/<bucket>/static.partner.com/a/b.jpg
"""

import asyncio
import logging
import re
from typing import List, Optional

import requests
from google.api_core import exceptions as gcs_exceptions
from google.cloud import storage

from ..common.async_utils import bounded_gather

logger = logging.getLogger(__name__)


def canonical_image_path(url: str) -> str:
    """Object path for an image: the URL without its scheme."""
    return re.sub(r'^https?://', '', url)


class GCSImageStore:
    """
    Cloud Storage bucket holding rehosted images.

    The storage SDK is blocking, so calls run in worker threads.
    """

    def __init__(self, bucket_name: str, client: Optional[storage.Client] = None,
                 session: Optional[requests.Session] = None, timeout: int = 30):
        self.client = client or storage.Client()
        self.bucket = self.client.bucket(bucket_name)
        self.session = session or requests.Session()
        self.timeout = timeout

    async def exists(self, path: str) -> bool:
        try:
            return await asyncio.to_thread(self.bucket.blob(path).exists)
        except gcs_exceptions.GoogleAPIError as e:
            logger.error("Existence check failed for %s: %s", path, e)
            return False

    async def upload(self, source_url: str, path: str) -> bool:
        return await asyncio.to_thread(self._upload, source_url, path)

    def _upload(self, source_url: str, path: str) -> bool:
        try:
            response = self.session.get(source_url, timeout=self.timeout)
            response.raise_for_status()
            self.bucket.blob(path).upload_from_string(
                response.content,
                content_type=response.headers.get('Content-Type') or 'application/octet-stream',
            )
        except requests.exceptions.RequestException as e:
            logger.error("Could not download image %s: %s", source_url, e)
            return False
        except gcs_exceptions.GoogleAPIError as e:
            logger.error("Could not upload image %s: %s", path, e)
            return False

        logger.debug("Uploaded %s", path)
        return True


class ImageRehoster:
    """
    Maps source image URLs to hosted URLs with bounded concurrency.

    Usage:
        rehoster = ImageRehoster(GCSImageStore("amby"), "https://storage.googleapis.com/amby")
        urls = await rehoster.rehost_all(product.images)
    """

    def __init__(self, store, host_base: str, concurrency: int = 4):
        """
        Args:
            store: Object with async exists(path) and upload(url, path)
            host_base: Public URL prefix of the bucket
            concurrency: Max images in flight
        """
        self.store = store
        self.host_base = host_base.rstrip('/')
        self.concurrency = concurrency

    def canonical_url(self, url: str) -> str:
        return f"{self.host_base}/{canonical_image_path(url)}"

    async def rehost(self, url: str) -> str:
        """
        Hosted URL for one image.

        If the upload fails the source URL is kept so the row never points
        at a missing object.
        """
        if url.startswith(self.host_base + '/'):
            return url

        path = canonical_image_path(url)
        exists = await self.store.exists(path)
        logger.debug("Exists %s: %s", path, exists)

        if not exists and not await self.store.upload(url, path):
            logger.warning("Keeping source URL for %s", url)
            return url

        return self.canonical_url(url)

    async def rehost_all(self, urls: List[str]) -> List[str]:
        """Rehost every image, results in source order."""
        return await bounded_gather(self.rehost, urls, self.concurrency)
