"""
Override Resolution

Decides, field by field, whether an exported product keeps the partner's
value or takes the value the storefront already has for the same product.
The storefront is the source of truth wherever it has data.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional

from ..models import AuthoritativeItem, CanonicalProduct
from ..store.collections import CollectionLookup

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolvedFields:
    """Final values of the overridable export columns."""
    description: str
    sizes: str
    collection: str
    visible: bool


class AuthoritativeIndex:
    """
    Read-only lookup of storefront items by exact slug or name.

    When two items share a key the first one in feed order wins.
    """

    def __init__(self, items: Iterable[AuthoritativeItem] = ()):
        self.items: List[AuthoritativeItem] = list(items)
        self._by_slug: Dict[str, AuthoritativeItem] = {}
        self._by_name: Dict[str, AuthoritativeItem] = {}
        for item in self.items:
            if item.slug:
                self._by_slug.setdefault(item.slug, item)
            if item.name:
                self._by_name.setdefault(item.name, item)

    def __len__(self) -> int:
        return len(self.items)

    @classmethod
    def from_raw(cls, raw_items: Iterable[Dict[str, Any]], size_option_name: str) -> "AuthoritativeIndex":
        return cls(AuthoritativeItem.from_raw(raw, size_option_name) for raw in raw_items)

    def by_slug(self, slug: str) -> Optional[AuthoritativeItem]:
        return self._by_slug.get(slug)

    def by_name(self, name: str) -> Optional[AuthoritativeItem]:
        return self._by_name.get(name)

    def find(self, product: CanonicalProduct, match_by: str = "slug") -> Optional[AuthoritativeItem]:
        """Match a product by its slug or its name (case-sensitive)."""
        if match_by == "name":
            return self.by_name(product.name)
        return self.by_slug(product.slug)


class OverrideResolver:
    """
    Resolves description, sizes, collection and visibility.

    Usage:
        resolver = OverrideResolver(collections, separator=";")
        fields = resolver.resolve(product, index.find(product))
    """

    def __init__(self, collections: CollectionLookup, separator: str = ";"):
        self.collections = collections
        self.separator = separator

    def resolve(self, candidate: CanonicalProduct,
                authoritative: Optional[AuthoritativeItem]) -> ResolvedFields:
        """
        Resolve every overridable field of one product.

        Args:
            candidate: Normalized partner product
            authoritative: Matching storefront item, or None

        Returns:
            ResolvedFields
        """
        description = self.resolve_description(candidate, authoritative)
        sizes = self.resolve_sizes(candidate, authoritative)
        collection = self.resolve_collection(authoritative)
        visible = self.resolve_visible(candidate, authoritative)
        return ResolvedFields(description, sizes, collection, visible)

    def resolve_description(self, candidate: CanonicalProduct,
                            authoritative: Optional[AuthoritativeItem]) -> str:
        if authoritative is not None and authoritative.description:
            return authoritative.description
        return candidate.description

    def resolve_sizes(self, candidate: CanonicalProduct,
                      authoritative: Optional[AuthoritativeItem]) -> str:
        if authoritative is not None and authoritative.size_choices is not None:
            return self.separator.join(authoritative.size_choices)
        return self.separator.join(candidate.size_values())

    def resolve_collection(self, authoritative: Optional[AuthoritativeItem]) -> str:
        if authoritative is None or not authoritative.collection_ids:
            return ""
        return self.separator.join(self.collections.resolve_names(authoritative.collection_ids))

    def resolve_visible(self, candidate: CanonicalProduct,
                        authoritative: Optional[AuthoritativeItem]) -> bool:
        if authoritative is not None:
            return authoritative.stock_state
        return candidate.stock_state
