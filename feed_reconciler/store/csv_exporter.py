"""
Store Feed Exporter

Serializes reconciled products to the storefront's product import CSV
(16 fixed columns) and writes the canonical JSON feed.
"""

import json
import logging
import os
from dataclasses import asdict
from typing import Iterable, List, Optional

from ..common.csv_utils import configure_csv, read_rows, write_rows
from ..models import EXPORT_FIELDNAMES, CanonicalProduct, ExportRow

logger = logging.getLogger(__name__)

# Configure CSV for large fields
configure_csv()

FIELD_TYPE_PRODUCT = 'Product'


def format_price(value) -> str:
    """Render whole prices without a decimal part."""
    if value in (None, ''):
        return ''
    try:
        number = float(value)
    except (TypeError, ValueError):
        return str(value)
    return str(int(number)) if number.is_integer() else str(number)


def format_bool(value: bool) -> str:
    return 'TRUE' if value else 'FALSE'


class FeedCSVExporter:
    """
    Exports reconciled rows to the store import CSV format.

    Usage:
        exporter = FeedCSVExporter(option_name="Размер")
        row = exporter.product_to_row(product, description, images, ...)
        exporter.export(rows, "output/export.csv")
    """

    def __init__(self, option_name: str = "Размер", option_type: str = "DROP_DOWN"):
        """
        Args:
            option_name: Name of the size option column group
            option_type: Option widget type expected by the store import
        """
        self.fieldnames = EXPORT_FIELDNAMES
        self.option_name = option_name
        self.option_type = option_type

    def product_to_row(
        self,
        product: CanonicalProduct,
        description: str,
        image_url: str,
        collection: str,
        visible: bool,
        sizes: str,
    ) -> ExportRow:
        """
        Build the export row for a product with its resolved fields.

        Args:
            product: Normalized product (identity, price, discount)
            description: Resolved description
            image_url: Image URLs joined with the list separator ('' if none)
            collection: Resolved collection names
            visible: Resolved visibility
            sizes: Resolved size option descriptions

        Returns:
            ExportRow with every column set
        """
        return ExportRow(
            handle_id=product.handle_id,
            field_type=FIELD_TYPE_PRODUCT,
            name=product.name,
            description=description,
            image_url=image_url,
            collection=collection,
            sku=product.sku,
            ribbon='',
            price=format_price(product.price),
            surcharge='',
            visible=format_bool(visible),
            discount_mode=product.discount_mode,
            discount_value=product.discount_value,
            option_name=self.option_name,
            option_type=self.option_type,
            option_description=sizes,
        )

    def export(self, rows: Iterable[ExportRow], output_path: str) -> bool:
        """
        Write the header and rows to a CSV file.

        Args:
            rows: Rows in final order
            output_path: Output CSV file path

        Returns:
            True on success; a write failure is logged and returns False
        """
        try:
            count = write_rows(output_path, self.fieldnames, rows)
        except OSError as e:
            logger.error("Could not write export %s: %s", output_path, e)
            return False

        logger.info("Wrote %d rows to %s", count, output_path)
        return True

    def load_rows(self, csv_path: str) -> List[ExportRow]:
        """
        Load rows from a previous export (header skipped).

        A missing file is an empty previous run. Rows that do not have the
        full column count are skipped.
        """
        if not os.path.exists(csv_path):
            return []

        try:
            raw_rows = read_rows(csv_path)
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Could not read previous export %s: %s", csv_path, e)
            return []

        rows = []
        for raw in raw_rows:
            if raw == self.fieldnames:
                continue
            if len(raw) != len(self.fieldnames):
                logger.debug("Skipping malformed row in %s: %s", csv_path, raw[:3])
                continue
            rows.append(ExportRow(*raw))
        return rows


def export_json_feed(products: List[CanonicalProduct], output_path: str) -> Optional[int]:
    """
    Write canonical products as a JSON array.

    Returns:
        Number of products written, or None if the file could not be written
    """
    try:
        os.makedirs(os.path.dirname(output_path) or '.', exist_ok=True)
        with open(output_path, 'w', encoding='utf-8') as f:
            json.dump([asdict(p) for p in products], f, ensure_ascii=False, indent=2)
    except OSError as e:
        logger.error("Could not write feed %s: %s", output_path, e)
        return None

    logger.info("Wrote %d products to %s", len(products), output_path)
    return len(products)
