"""
Source normalizers.

Modules:
    storefront - The store's own feed, with size filter tags
    partner_store - Partner storefront on the same stores API
    supplier_feed - Supplier CRM JSON feed
    size_tags - Category -> size template -> filter tag rules
"""

import logging
from typing import Any, Callable, Dict, Iterable, List, Optional

from ..models import CanonicalProduct
from .context import NormalizeContext, SourceKind
from .partner_store import extract_size_options, normalize_partner_store
from .size_tags import generate_tags, translate_categories
from .storefront import generate_description, normalize_storefront
from .supplier_feed import load_supplier_feed, normalize_supplier_feed

logger = logging.getLogger(__name__)

Normalizer = Callable[[Dict[str, Any], NormalizeContext], Optional[CanonicalProduct]]

# Registry of normalizers by source kind
NORMALIZERS: Dict[SourceKind, Normalizer] = {
    SourceKind.STOREFRONT: normalize_storefront,
    SourceKind.PARTNER_STORE: normalize_partner_store,
    SourceKind.SUPPLIER_FEED: normalize_supplier_feed,
}


def get_normalizer(kind: SourceKind | str) -> Normalizer:
    """
    Get the normalizer for a source kind.

    Raises:
        ValueError: If the kind is not supported
    """
    try:
        return NORMALIZERS[SourceKind(kind)]
    except ValueError:
        supported = ', '.join(k.value for k in NORMALIZERS)
        raise ValueError(f"Unsupported source kind: {kind}. Supported: {supported}") from None


def normalize_all(kind: SourceKind | str, items: Iterable[Dict[str, Any]],
                  ctx: NormalizeContext) -> List[CanonicalProduct]:
    """
    Normalize a raw feed, dropping items the normalizer filters out.

    Returns:
        Products in feed order
    """
    normalize = get_normalizer(kind)
    products = []
    excluded = 0
    for raw in items:
        product = normalize(raw, ctx)
        if product is None:
            excluded += 1
        else:
            products.append(product)

    logger.info("Normalized %d %s items (%d excluded)", len(products), SourceKind(kind).value, excluded)
    return products


__all__ = [
    'SourceKind',
    'NormalizeContext',
    'NORMALIZERS',
    'get_normalizer',
    'normalize_all',
    # Normalizers
    'normalize_storefront',
    'normalize_partner_store',
    'normalize_supplier_feed',
    # Helpers
    'generate_description',
    'generate_tags',
    'translate_categories',
    'extract_size_options',
    'load_supplier_feed',
]
