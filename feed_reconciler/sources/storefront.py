"""
Storefront Normalizer

Normalizes the store's own products into canonical products carrying size
filter tags. Products whose categories map to no size template, or whose
sizes produce no tag, are left out of the feed.
"""

import logging
from typing import Any, Dict, List, Optional

from ..common.text_utils import collapse_newlines, strip_html
from ..models import CanonicalProduct, SizeOption
from .context import NormalizeContext, SourceKind
from .size_tags import generate_tags, translate_categories

logger = logging.getLogger(__name__)

# Heading that starts the features list inside descriptions
FEATURES_HEADING = "Основные характеристики:"
# Shipping boilerplate; everything from here on is dropped
SHIPPING_SECTION = "Доставка"


def generate_description(description: str, additional_info: Optional[List[Dict[str, Any]]]) -> str:
    """
    Build a plain-text description from the main HTML description and the
    additional info sections (title and body for each).
    """
    full_description = f"{description or ''}\n"
    for info in additional_info or []:
        full_description += f"{info.get('title', '')}\n{info.get('description', '')}\n"

    text = strip_html(full_description)
    text = text.replace(FEATURES_HEADING, "\n", 1)
    text = text.split(SHIPPING_SECTION)[0]
    text = collapse_newlines(text)

    if text.startswith("\n"):
        text = text[1:]
    return text


def generate_url(product_page_url: Optional[Dict[str, str]]) -> str:
    """Join the page base (without its trailing slash) and path."""
    if not product_page_url:
        return ""
    base = product_page_url.get("base", "")
    if base.endswith("/"):
        base = base[:-1]
    return f"{base}{product_page_url.get('path', '')}"


def extract_size_choices(product_options: Optional[List[Dict[str, Any]]], option_name: str) -> List[str]:
    """
    Sizes offered in the named option group.

    Combined choices like "S/M" count as both sizes. Order kept, repeats dropped.
    """
    for option in product_options or []:
        if option.get("name") != option_name:
            continue
        sizes: List[str] = []
        for choice in option.get("choices") or []:
            for size in (choice.get("description") or "").split("/"):
                size = size.strip()
                if size and size not in sizes:
                    sizes.append(size)
        return sizes
    return []


def extract_images(raw: Dict[str, Any]) -> List[str]:
    media = raw.get("media") or {}
    images = []
    for item in media.get("items") or []:
        url = ((item or {}).get("image") or {}).get("url")
        if url:
            images.append(url)

    main_url = ((media.get("mainMedia") or {}).get("image") or {}).get("url")
    if main_url and main_url not in images:
        images.insert(0, main_url)
    return images


def normalize_storefront(raw: Dict[str, Any], ctx: NormalizeContext) -> Optional[CanonicalProduct]:
    """
    Normalize one storefront product.

    Returns:
        CanonicalProduct with tags, or None for unclassifiable items
    """
    config = ctx.config
    name = raw.get("name") or ""
    slug = raw.get("slug") or ""
    if not name or not slug:
        logger.debug("Skipping product without name or slug: %s", raw.get("id"))
        return None

    categories = ctx.collections.resolve_names(raw.get("collectionIds") or [])
    templates = translate_categories(categories, config.category_templates)
    logger.debug("Size templates for %s: %s", slug, templates)
    if not templates:
        return None

    sizes = extract_size_choices(raw.get("productOptions"), config.size_option_name)
    tags = generate_tags(templates, sizes, config.number_placeholder, config.string_placeholder)
    if not tags:
        logger.debug("No size tags for %s (sizes=%s)", slug, sizes)
        return None

    price = raw.get("price") or {}
    return CanonicalProduct(
        handle_id=f"{config.handle_prefix}{slug}",
        name=name,
        slug=slug,
        sku=raw.get("sku") or "",
        source=SourceKind.STOREFRONT.value,
        description=generate_description(raw.get("description"), raw.get("additionalInfoSections")),
        images=extract_images(raw),
        url=generate_url(raw.get("productPageUrl")),
        price=price.get("discountedPrice") or 0,
        old_price=price.get("price") or 0,
        categories=categories,
        tags=tags,
        visible=bool(raw.get("visible")),
        in_stock=bool((raw.get("stock") or {}).get("inStock")),
        size_options=[SizeOption(size, size) for size in sizes],
        updated_at=raw.get("lastUpdated") or "",
    )
