"""Tests for feed_reconciler/store/csv_exporter.py"""

import csv
import json

import pytest

from feed_reconciler.models import EXPORT_FIELDNAMES, CanonicalProduct
from feed_reconciler.store.csv_exporter import (
    FeedCSVExporter,
    export_json_feed,
    format_bool,
    format_price,
)


@pytest.fixture
def exporter():
    return FeedCSVExporter(option_name="Размер", option_type="DROP_DOWN")


@pytest.fixture
def product():
    return CanonicalProduct(
        handle_id="Product_silk-dress",
        name="Silk Dress",
        slug="silk-dress",
        sku="WD-100",
        price=12000,
        discount_mode="PERCENT",
        discount_value="25",
    )


def read_csv(path):
    with open(path, encoding="utf-8", newline="") as f:
        return list(csv.reader(f))


class TestFormatting:
    @pytest.mark.parametrize("value,expected", [
        (12000, "12000"),
        (12000.0, "12000"),
        (99.5, "99.5"),
        ("", ""),
        (None, ""),
    ])
    def test_format_price(self, value, expected):
        assert format_price(value) == expected

    def test_format_bool(self):
        assert format_bool(True) == "TRUE"
        assert format_bool(False) == "FALSE"


class TestProductToRow:
    def test_all_columns(self, exporter, product):
        row = exporter.product_to_row(
            product, description="Desc", image_url="a.jpg;b.jpg",
            collection="Для женщин;Распродажа", visible=False, sizes="S;M",
        )
        assert row.handle_id == "Product_silk-dress"
        assert row.field_type == "Product"
        assert row.image_url == "a.jpg;b.jpg"
        assert row.sku == "WD-100"
        assert row.ribbon == ""
        assert row.price == "12000"
        assert row.surcharge == ""
        assert row.visible == "FALSE"
        assert row.discount_mode == "PERCENT"
        assert row.discount_value == "25"
        assert row.option_name == "Размер"
        assert row.option_type == "DROP_DOWN"
        assert row.option_description == "S;M"


class TestExport:
    def test_header_and_rows(self, exporter, product, tmp_path):
        rows = [
            exporter.product_to_row(product, "One", "", "", True, "S"),
            exporter.product_to_row(product, "Two", "", "", True, "M"),
        ]
        path = tmp_path / "out" / "export.csv"

        assert exporter.export(rows, str(path)) is True

        content = read_csv(path)
        assert content[0] == EXPORT_FIELDNAMES
        assert len(content) == 3

    def test_quotes_separators_and_newlines(self, exporter, product, tmp_path):
        row = exporter.product_to_row(product, 'Line one,\n"quoted"', "", "", True, "")
        path = tmp_path / "export.csv"
        exporter.export([row], str(path))

        assert read_csv(path)[1][3] == 'Line one,\n"quoted"'

    def test_empty_export_has_header(self, exporter, tmp_path):
        path = tmp_path / "export.csv"
        assert exporter.export([], str(path)) is True
        assert read_csv(path) == [EXPORT_FIELDNAMES]

    def test_write_failure_returns_false(self, exporter, tmp_path):
        # A directory where the file should be
        path = tmp_path / "export.csv"
        path.mkdir()
        assert exporter.export([], str(path)) is False


class TestLoadRows:
    def test_reads_previous_export(self, exporter, product, tmp_path):
        path = tmp_path / "export.csv"
        row = exporter.product_to_row(product, "Desc", "", "", True, "S")
        exporter.export([row], str(path))

        assert exporter.load_rows(str(path)) == [row]

    def test_missing_file(self, exporter, tmp_path):
        assert exporter.load_rows(str(tmp_path / "none.csv")) == []

    def test_skips_malformed_rows(self, exporter, tmp_path):
        path = tmp_path / "export.csv"
        path.write_text(",".join(EXPORT_FIELDNAMES) + "\nonly,three,cols\n", encoding="utf-8")
        assert exporter.load_rows(str(path)) == []


class TestExportJsonFeed:
    def test_writes_products(self, product, tmp_path):
        path = tmp_path / "data" / "feed.json"
        assert export_json_feed([product], str(path)) == 1

        data = json.loads(path.read_text(encoding="utf-8"))
        assert data[0]["slug"] == "silk-dress"
        assert data[0]["size_options"] == []

    def test_write_failure(self, product, tmp_path):
        path = tmp_path / "feed.json"
        path.mkdir()
        assert export_json_feed([product], str(path)) is None
