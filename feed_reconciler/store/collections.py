"""
Collection Lookup

Loads every store collection once per run and answers id -> name queries
from memory for the rest of the run.
"""

import logging
from typing import Dict, Iterable, List, Optional

from .api_client import StoreAPIClient

logger = logging.getLogger(__name__)


class CollectionLookup:
    """
    In-memory map of collection id to collection name.

    Usage:
        collections = await CollectionLookup.load(client)
        collections.get_name("abc-123")
    """

    def __init__(self, names: Optional[Dict[str, str]] = None):
        self._names: Dict[str, str] = dict(names or {})

    def __len__(self) -> int:
        return len(self._names)

    @classmethod
    async def load(cls, client: StoreAPIClient) -> "CollectionLookup":
        """
        Query all collections from the store.

        A failed request yields an empty lookup; products then resolve to no
        category names.
        """
        collections = await client.query_collections()
        if collections is None:
            logger.error("Could not load collections, continuing without collection names")
            return cls()

        names = {}
        for collection in collections:
            coll_id = collection.get("id")
            if coll_id:
                names[coll_id] = collection.get("name", "")

        logger.info("Loaded %d collections", len(names))
        return cls(names)

    def get_name(self, collection_id: str) -> Optional[str]:
        return self._names.get(collection_id)

    def resolve_names(self, collection_ids: Iterable[str]) -> List[str]:
        """Names for the given ids in order, unknown ids skipped."""
        names = []
        for coll_id in collection_ids:
            name = self.get_name(coll_id)
            if name:
                names.append(name)
            else:
                logger.debug("Unknown collection id: %s", coll_id)
        return names
