"""
Export Pipeline

Runs one reconciliation batch:

    fetch partner feed -> normalize -> fetch storefront feed (authoritative)
    -> resolve overrides + rehost images -> deduplicate -> CSV -> notify

Each stage finishes for the whole batch before the next one starts.
Per-product work inside a stage runs with bounded concurrency.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from ..common.async_utils import bounded_gather
from ..common.config_loader import PARTNER_STORE, SUPPLIER_FEED, PartnerConfig, ReconcilerConfig
from ..models import CanonicalProduct, ExportRow
from ..sources import NormalizeContext, SourceKind, load_supplier_feed, normalize_all
from ..store import CollectionLookup, FeedCSVExporter, PaginatedFeedFetcher, StoreAPIClient, export_json_feed
from .dedup import carry_over_outdated, dedupe_rows
from .images import ImageRehoster
from .overrides import AuthoritativeIndex, OverrideResolver

logger = logging.getLogger(__name__)


@dataclass
class ExportContext:
    """Everything a stage needs for one batch, built once at the start."""
    config: ReconcilerConfig
    partner: PartnerConfig
    collections: CollectionLookup
    authoritative: AuthoritativeIndex
    resolver: OverrideResolver
    exporter: FeedCSVExporter
    images: Optional[ImageRehoster] = None


@dataclass
class ExportResult:
    """Outcome of one export run."""
    output_path: str
    products: int = 0
    rows_written: int = 0
    duplicates_dropped: int = 0
    carried_over: int = 0
    feed_truncated: bool = False
    success: bool = False
    notified: bool = False


async def fetch_store_feed(client: StoreAPIClient, name: str = "storefront") -> tuple[List[Dict[str, Any]], bool]:
    """
    Pull every product of a store.

    Returns:
        (raw products, whether the pull stopped on an error)
    """
    fetcher = PaginatedFeedFetcher(client.query_products, page_size=client.page_size, name=name)
    items = await fetcher.fetch_all()
    return items, fetcher.truncated


async def fetch_partner_items(partner: PartnerConfig, config: ReconcilerConfig,
                              partner_client: Optional[StoreAPIClient] = None) -> tuple[List[Dict[str, Any]], bool]:
    """Raw items of a partner feed, by partner kind."""
    if partner.kind == SUPPLIER_FEED:
        if not partner.feed_url:
            raise ValueError(f"Partner {partner.name} has no feed_url configured")
        return await load_supplier_feed(partner.feed_url), False

    if partner_client is not None:
        return await fetch_store_feed(partner_client, name=partner.name)

    async with StoreAPIClient(partner.auth_token, config.store_api_url, config.page_size) as client:
        return await fetch_store_feed(client, name=partner.name)


async def build_row(product: CanonicalProduct, ctx: ExportContext) -> ExportRow:
    """Resolve one product against the storefront and format its row."""
    authoritative = ctx.authoritative.find(product, ctx.partner.match_by)
    fields = ctx.resolver.resolve(product, authoritative)

    images = product.images
    if ctx.images is not None and images:
        images = await ctx.images.rehost_all(images)

    return ctx.exporter.product_to_row(
        product,
        description=fields.description,
        image_url=ctx.config.list_separator.join(images),
        collection=fields.collection,
        visible=fields.visible,
        sizes=fields.sizes,
    )


async def build_rows(products: List[CanonicalProduct], ctx: ExportContext) -> List[ExportRow]:
    """Rows for all products, in product order."""
    return await bounded_gather(lambda p: build_row(p, ctx), products, ctx.config.concurrency)


def finalize_rows(rows: List[ExportRow], ctx: ExportContext, output_path: str,
                  products: List[CanonicalProduct], result: ExportResult) -> List[ExportRow]:
    """Append hidden carry-over rows (if configured) and drop duplicates."""
    if ctx.partner.carry_over_outdated:
        previous = ctx.exporter.load_rows(output_path)
        outdated = carry_over_outdated(previous, (p.name for p in products))
        result.carried_over = len(outdated)
        rows = rows + outdated

    kept, dropped = dedupe_rows(rows)
    result.duplicates_dropped = len(dropped)
    return kept


async def run_partner_export(
    config: ReconcilerConfig,
    partner_name: str,
    output_path: str,
    store_client: Optional[StoreAPIClient] = None,
    partner_client: Optional[StoreAPIClient] = None,
    image_store=None,
    notifier=None,
) -> ExportResult:
    """
    Reconcile one partner feed against the storefront and export it.

    Args:
        config: Run configuration
        partner_name: Key in config.partners
        output_path: CSV destination
        store_client: Client for the storefront (created from config if None)
        partner_client: Client for a partner store (created from config if None)
        image_store: Image bucket used when the partner rehosts images
        notifier: Object with send_file(path, label); skipped if None

    Returns:
        ExportResult
    """
    partner = config.get_partner(partner_name)
    result = ExportResult(output_path=output_path)

    owns_client = store_client is None
    if owns_client:
        store_client = StoreAPIClient(config.store_auth_token, config.store_api_url, config.page_size)

    try:
        raw_items, partner_truncated = await fetch_partner_items(partner, config, partner_client)

        collections = await CollectionLookup.load(store_client)
        kind = SourceKind.SUPPLIER_FEED if partner.kind == SUPPLIER_FEED else SourceKind.PARTNER_STORE
        products = normalize_all(kind, raw_items, NormalizeContext(config, collections, partner))
        result.products = len(products)

        store_items, store_truncated = await fetch_store_feed(store_client)
        result.feed_truncated = partner_truncated or store_truncated
    finally:
        if owns_client:
            await store_client.close()

    images = None
    if partner.rehost_images and partner.kind == PARTNER_STORE:
        if image_store is None:
            logger.warning("%s: no image store configured, exporting source image URLs", partner.name)
        else:
            images = ImageRehoster(image_store, config.image_host_base, config.concurrency)

    ctx = ExportContext(
        config=config,
        partner=partner,
        collections=collections,
        authoritative=AuthoritativeIndex.from_raw(store_items, config.size_option_name),
        resolver=OverrideResolver(collections, config.list_separator),
        exporter=FeedCSVExporter(config.size_option_name, config.size_option_type),
        images=images,
    )

    rows = await build_rows(products, ctx)
    rows = finalize_rows(rows, ctx, output_path, products, result)

    result.success = ctx.exporter.export(rows, output_path)
    if result.success:
        result.rows_written = len(rows)
        if notifier is not None:
            result.notified = await asyncio.to_thread(notifier.send_file, output_path, partner.display_name)

    logger.info("%s: %d products, %d rows, %d duplicates dropped, %d carried over",
                partner.name, result.products, result.rows_written,
                result.duplicates_dropped, result.carried_over)
    return result


async def run_storefront_feed(config: ReconcilerConfig, output_path: str,
                              store_client: Optional[StoreAPIClient] = None) -> tuple[Optional[int], bool]:
    """
    Collect the storefront feed with size filter tags and write it as JSON.

    Returns:
        (number of products written or None if the file could not be written,
         whether the feed pull stopped on an error)
    """
    owns_client = store_client is None
    if owns_client:
        store_client = StoreAPIClient(config.store_auth_token, config.store_api_url, config.page_size)

    try:
        collections = await CollectionLookup.load(store_client)
        items, truncated = await fetch_store_feed(store_client)
    finally:
        if owns_client:
            await store_client.close()

    products = normalize_all(SourceKind.STOREFRONT, items, NormalizeContext(config, collections))
    return export_json_feed(products, output_path), truncated
