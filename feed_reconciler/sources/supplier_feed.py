"""
Supplier Feed Normalizer

Normalizes products from a supplier CRM JSON feed. The supplier sends
wholesale prices and numeric (Russian) sizes; prices get a fixed markup
and sizes are translated to letter sizes.
"""

import logging
from typing import Any, Dict, List, Optional

import aiohttp

from ..common.text_utils import slugify, strip_html
from ..models import CanonicalProduct, SizeOption
from ..store.api_client import get_json
from .context import NormalizeContext, SourceKind

logger = logging.getLogger(__name__)


async def load_supplier_feed(url: str, session: Optional[aiohttp.ClientSession] = None) -> List[Dict[str, Any]]:
    """
    Fetch the whole supplier feed (a single unpaged request).

    Returns:
        Raw products, or [] if the request failed
    """
    result = await get_json(url, session=session)
    if not isinstance(result, dict):
        logger.error("Supplier feed unavailable: %s", url)
        return []
    products = result.get("products") or []
    logger.info("Supplier feed: %d products", len(products))
    return products


def parse_price(value: Any, markup: int) -> int:
    """
    Whole currency units of the supplier price plus the markup.

    Example:
        parse_price("1990.50", 500) -> 2490
    """
    try:
        base = int(str(value).split('.')[0])
    except (TypeError, ValueError):
        logger.warning("Unparseable supplier price %r, using 0", value)
        base = 0
    return base + markup


def translate_sizes(size: Any, translation: Dict[str, str]) -> List[SizeOption]:
    """
    Translate supplier sizes, keeping unmapped values as they are.

    Accepts a single value, a comma separated string or a list.
    """
    if size is None or size == '':
        return []
    if isinstance(size, list):
        values = [str(s).strip() for s in size]
    else:
        values = [s.strip() for s in str(size).split(',')]

    options = []
    for value in values:
        if not value:
            continue
        translated = translation.get(value, value)
        options.append(SizeOption(translated, translated))
    return options


def normalize_supplier_feed(raw: Dict[str, Any], ctx: NormalizeContext) -> Optional[CanonicalProduct]:
    """Normalize one supplier product (None if it has no name)."""
    name = raw.get('name') or ''
    if not name.strip():
        return None

    partner = ctx.partner
    markup = partner.markup if partner else 0
    translation = partner.size_translation if partner else {}

    images = raw.get('img') or []
    if isinstance(images, str):
        images = [images]

    slug = slugify(name)
    return CanonicalProduct(
        handle_id=f"{ctx.config.handle_prefix}{slug}",
        name=name,
        slug=slug,
        source=SourceKind.SUPPLIER_FEED.value,
        description=strip_html(raw.get('description') or ''),
        images=[url for url in images if url],
        price=parse_price(raw.get('price'), markup),
        visible=True,
        in_stock=True,
        size_options=translate_sizes(raw.get('size'), translation),
    )
