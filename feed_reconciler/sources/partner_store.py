"""
Partner Store Normalizer

Normalizes products from a partner storefront on the same stores API.
Partners don't fill in size options; sizes are read from the
"Размер: ..." line of the HTML description instead.
"""

import re
from typing import Any, Dict, List, Optional

from ..common.text_utils import strip_html
from ..models import CanonicalProduct, SizeOption
from .context import NormalizeContext, SourceKind
from .storefront import extract_images

# Longest tokens first so "XL" is not read as "L"
SIZE_TOKEN_PATTERN = re.compile(r'XXL|XL|XS|S|M|L')
TAG_PATTERN = re.compile(r'<[^>]*>')
LEADING_TAGS_PATTERN = re.compile(r'^(\s*<[^>]*>)+')

NO_DISCOUNT = 'NONE'


def extract_size_options(description: Optional[str], label: str = "Размер") -> List[SizeOption]:
    """
    Find letter sizes listed after the size label in an HTML description.

    Only XS, S, M, L, XL and XXL are recognized; repeats are dropped.

    Example:
        "<p>Размер: S, M, M</p>" -> [S, M]
    """
    if not description:
        return []

    text = re.sub(r'&nbsp;', '', description, flags=re.IGNORECASE)
    parts = re.split(rf'{re.escape(label)}:', text, maxsplit=1)
    if len(parts) < 2:
        return []

    segment = LEADING_TAGS_PATTERN.sub('', parts[1])
    segment = TAG_PATTERN.split(segment)[0]

    options = []
    seen = set()
    for token in SIZE_TOKEN_PATTERN.findall(segment):
        if token not in seen:
            seen.add(token)
            options.append(SizeOption(token, token))
    return options


def parse_discount(discount: Optional[Dict[str, Any]]):
    """Return (mode, value); a NONE discount exports as empty columns."""
    discount = discount or {}
    mode = discount.get('type') or ''
    if not mode or mode == NO_DISCOUNT:
        return '', ''
    value = discount.get('value')
    return mode, '' if value is None else str(value)


def normalize_partner_store(raw: Dict[str, Any], ctx: NormalizeContext) -> Optional[CanonicalProduct]:
    """Normalize one partner storefront product (None if it has no name or slug)."""
    name = raw.get('name') or ''
    slug = raw.get('slug') or ''
    if not name or not slug:
        return None

    price = raw.get('price') or {}
    discount_mode, discount_value = parse_discount(raw.get('discount'))

    return CanonicalProduct(
        handle_id=f"{ctx.config.handle_prefix}{slug}",
        name=name,
        slug=slug,
        sku=raw.get('sku') or '',
        source=SourceKind.PARTNER_STORE.value,
        description=strip_html(raw.get('description') or ''),
        images=extract_images(raw),
        # List price; the store applies the discount columns itself
        price=price.get('price') or 0,
        discount_mode=discount_mode,
        discount_value=discount_value,
        visible=bool(raw.get('visible')),
        in_stock=bool((raw.get('stock') or {}).get('inStock')),
        size_options=extract_size_options(raw.get('description'), ctx.config.size_option_name),
        updated_at=raw.get('lastUpdated') or '',
    )
