"""
Source kinds and the context handed to every normalizer.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from ..common.config_loader import PartnerConfig, ReconcilerConfig
from ..store.collections import CollectionLookup


class SourceKind(str, Enum):
    """Closed set of upstream feed shapes."""
    STOREFRONT = "storefront"
    PARTNER_STORE = "partner_store"
    SUPPLIER_FEED = "supplier_feed"


@dataclass
class NormalizeContext:
    """Read-only inputs a normalizer may consult."""
    config: ReconcilerConfig
    collections: CollectionLookup = field(default_factory=CollectionLookup)
    partner: Optional[PartnerConfig] = None
