"""
Stores API Client

Async client for the storefront's stores REST API (products and collections).
Handles authentication headers and error handling. Requests are never
retried: a failed call is logged and reported to the caller as None.
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional

import aiohttp

logger = logging.getLogger(__name__)


class StoreAPIClient:
    """
    Async client for the stores API.

    Usage:
        async with StoreAPIClient(auth_token="...") as client:
            page = await client.query_products(offset=0)
            collections = await client.query_collections()
    """

    PRODUCTS_QUERY = "stores/v1/products/query"
    COLLECTIONS_QUERY = "stores/v1/collections/query"
    DEFAULT_TIMEOUT = 60

    def __init__(
        self,
        auth_token: str,
        base_url: str = "https://www.wixapis.com",
        page_size: int = 100,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        """
        Initialize the API client.

        Args:
            auth_token: Store API authorization token
            base_url: API root URL
            page_size: Items per products page (fixed by the API at 100)
            session: Existing aiohttp session to share (created lazily otherwise)
        """
        self.auth_token = auth_token
        self.base_url = base_url.rstrip("/")
        self.page_size = page_size
        self.headers = {
            "Authorization": auth_token,
            "Content-Type": "application/json",
        }
        self.session = session
        self._owns_session = session is None
        self.requests_made = 0

    async def __aenter__(self):
        return self

    async def __aexit__(self, *args):
        await self.close()

    async def close(self):
        if self.session is not None and self._owns_session:
            await self.session.close()
            self.session = None

    def _get_session(self) -> aiohttp.ClientSession:
        if self.session is None:
            self.session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.DEFAULT_TIMEOUT)
            )
        return self.session

    async def post(self, endpoint: str, body: Optional[Dict] = None) -> Optional[Dict]:
        """
        POST a JSON body to an API endpoint.

        Args:
            endpoint: Path under the API root (e.g., "stores/v1/products/query")
            body: JSON request body

        Returns:
            Response JSON or None on any error
        """
        url = f"{self.base_url}/{endpoint}"
        self.requests_made += 1

        try:
            async with self._get_session().post(url, json=body or {}, headers=self.headers) as response:
                if response.status != 200:
                    text = await response.text()
                    logger.error("API Error %d on %s: %s", response.status, endpoint, text[:200])
                    return None
                return await response.json(content_type=None)

        except asyncio.TimeoutError:
            logger.error("Request timeout: %s", endpoint)
            return None
        except (aiohttp.ClientError, ValueError) as e:
            logger.error("Request failed: %s: %s", endpoint, e)
            return None

    async def query_products(self, offset: int) -> Optional[List[Dict[str, Any]]]:
        """
        Fetch one page of products, hidden products included.

        Args:
            offset: Paging offset (multiple of the page size)

        Returns:
            List of raw products (empty at end of feed) or None on error
        """
        body = {
            "query": {
                "paging": {"limit": self.page_size, "offset": offset}
            },
            "includeVariants": False,
            "includeHiddenProducts": True,
        }
        logger.debug("Requesting products with offset %d", offset)
        result = await self.post(self.PRODUCTS_QUERY, body)
        if result is None:
            return None
        return result.get("products") or []

    async def query_collections(self) -> Optional[List[Dict[str, Any]]]:
        """
        Fetch all collections (id and name pairs) in one request.

        Returns:
            List of raw collections or None on error
        """
        result = await self.post(self.COLLECTIONS_QUERY)
        if result is None:
            return None
        return result.get("collections") or []


async def get_json(url: str, session: Optional[aiohttp.ClientSession] = None,
                   timeout: int = StoreAPIClient.DEFAULT_TIMEOUT) -> Optional[Any]:
    """
    GET a JSON document from a plain (unpaged) feed URL.

    Returns:
        Decoded JSON or None on error
    """
    owns_session = session is None
    if owns_session:
        session = aiohttp.ClientSession(timeout=aiohttp.ClientTimeout(total=timeout))

    try:
        async with session.get(url) as response:
            if response.status != 200:
                logger.error("HTTP %d fetching %s", response.status, url)
                return None
            return await response.json(content_type=None)
    except asyncio.TimeoutError:
        logger.error("Request timeout: %s", url)
        return None
    except (aiohttp.ClientError, ValueError) as e:
        logger.error("Request failed: %s: %s", url, e)
        return None
    finally:
        if owns_session:
            await session.close()
