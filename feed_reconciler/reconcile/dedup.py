"""
Catalog deduplication and carry-over of products that left a feed.
"""

import logging
from typing import Callable, Iterable, List, Tuple

from ..models import ExportRow

logger = logging.getLogger(__name__)


def row_identity(row: ExportRow) -> str:
    """SKU, or the handle for sources that send no SKU."""
    return row.sku or row.handle_id


def dedupe_rows(
    rows: Iterable[ExportRow],
    key: Callable[[ExportRow], str] = row_identity,
) -> Tuple[List[ExportRow], List[ExportRow]]:
    """
    Keep the first row per identity key.

    Returns:
        (kept rows in order, dropped rows)
    """
    seen = set()
    kept: List[ExportRow] = []
    dropped: List[ExportRow] = []

    for row in rows:
        identity = key(row)
        if identity in seen:
            logger.debug("Item with such sku already exists: %s", identity)
            dropped.append(row)
            continue
        seen.add(identity)
        kept.append(row)

    if dropped:
        logger.info("Dropped %d duplicate rows", len(dropped))
    return kept, dropped


def carry_over_outdated(previous_rows: Iterable[ExportRow], current_names: Iterable[str]) -> List[ExportRow]:
    """
    Rows of the previous export whose product is no longer in the feed.

    They are re-exported hidden so the store stops selling them instead of
    keeping a stale visible listing.
    """
    names = set(current_names)
    outdated = [row._replace(visible='FALSE') for row in previous_rows if row.name not in names]
    if outdated:
        logger.info("Carrying over %d products missing from the feed as hidden", len(outdated))
    return outdated
