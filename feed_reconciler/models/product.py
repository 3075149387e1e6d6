"""
Product data models.

Pure data classes for representing catalog items at each reconciliation stage.
No business logic beyond small derived properties.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, NamedTuple, Optional, Tuple

from ..common.text_utils import strip_html


@dataclass(frozen=True)
class SizeOption:
    """One size choice offered for a product."""
    value: str
    description: str = ""


@dataclass
class CanonicalProduct:
    """
    Unified representation of a catalog item before export formatting.

    Field Groups:
    - Identity: handle_id, slug, sku, name
    - Content: description (plain text), images (ordered URLs)
    - Pricing: price, old_price, discount_mode, discount_value
    - Placement: collection, categories, tags
    - Availability: visible, in_stock (stock_state combines both)
    - Options: size_options (deduplicated by value, insertion ordered)
    """

    # Identity (required)
    handle_id: str
    name: str
    slug: str = ""
    sku: str = ""
    source: str = ""

    # Content
    description: str = ""
    images: List[str] = field(default_factory=list)
    url: str = ""

    # Pricing (source currency)
    price: float = 0
    old_price: float = 0
    discount_mode: str = ""
    discount_value: str = ""

    # Placement
    collection: str = ""
    categories: List[str] = field(default_factory=list)
    tags: List[str] = field(default_factory=list)

    # Availability
    visible: bool = True
    in_stock: bool = True

    size_options: List[SizeOption] = field(default_factory=list)
    updated_at: str = ""

    def __post_init__(self):
        if not self.handle_id:
            raise ValueError("Product handle_id is required")
        if not self.name:
            raise ValueError("Product name is required")
        self.size_options = dedupe_size_options(self.size_options)

    @property
    def stock_state(self) -> bool:
        """Exported visibility: hidden items first, then out-of-stock items."""
        return stock_state(self.visible, self.in_stock)

    @property
    def identity_key(self) -> str:
        """SKU when the source has one, otherwise the handle."""
        return self.sku or self.handle_id

    def size_values(self) -> List[str]:
        return [option.value for option in self.size_options]


@dataclass(frozen=True)
class AuthoritativeItem:
    """
    Storefront item as seen by override resolution.

    size_choices is None when the item declares no size option group,
    which is different from a group with zero choices. The description is
    kept as plain text, the same form normalizers give partner descriptions.
    """
    slug: str
    name: str
    description: str = ""
    visible: bool = False
    in_stock: bool = False
    size_choices: Optional[Tuple[str, ...]] = None
    collection_ids: Tuple[str, ...] = ()

    @property
    def stock_state(self) -> bool:
        return stock_state(self.visible, self.in_stock)

    @classmethod
    def from_raw(cls, raw: Dict[str, Any], size_option_name: str) -> "AuthoritativeItem":
        """Build from a raw stores API product record."""
        size_choices = None
        for option in raw.get("productOptions") or []:
            if option.get("name") == size_option_name:
                size_choices = tuple(
                    choice.get("description", "") for choice in option.get("choices") or []
                )
                break

        return cls(
            slug=raw.get("slug", ""),
            name=raw.get("name", ""),
            description=strip_html(raw.get("description") or ""),
            visible=bool(raw.get("visible")),
            in_stock=bool((raw.get("stock") or {}).get("inStock")),
            size_choices=size_choices,
            collection_ids=tuple(raw.get("collectionIds") or ()),
        )


class ExportRow(NamedTuple):
    """One line of the storefront product import file."""
    handle_id: str
    field_type: str
    name: str
    description: str
    image_url: str
    collection: str
    sku: str
    ribbon: str
    price: str
    surcharge: str
    visible: str
    discount_mode: str
    discount_value: str
    option_name: str
    option_type: str
    option_description: str


# Column header of the import file, one entry per ExportRow field
EXPORT_FIELDNAMES = [
    'handleId', 'fieldType', 'name', 'description', 'productImageUrl', 'collection',
    'sku', 'ribbon', 'price', 'surcharge', 'visible', 'discountMode', 'discountValue',
    'productOptionName2', 'productOptionType2', 'productOptionDescription2',
]


@dataclass(frozen=True)
class CohortUser:
    """Subscriber record from the user store."""
    user_id: str
    name: str = ""
    locale: str = ""
    platform: str = ""


def stock_state(visible: bool, in_stock: bool) -> bool:
    if not visible:
        return False
    return bool(in_stock)


def dedupe_size_options(options: List[SizeOption]) -> List[SizeOption]:
    """Drop repeated values, keeping the first occurrence and the original case."""
    seen = set()
    result = []
    for option in options:
        if option.value in seen:
            continue
        seen.add(option.value)
        result.append(option)
    return result
