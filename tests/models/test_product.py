"""Tests for feed_reconciler/models/product.py"""

import pytest

from feed_reconciler.models import (
    EXPORT_FIELDNAMES,
    AuthoritativeItem,
    CanonicalProduct,
    ExportRow,
    SizeOption,
    dedupe_size_options,
    stock_state,
)


class TestCanonicalProduct:
    def test_minimal_product(self):
        p = CanonicalProduct(handle_id="Product_x", name="X")
        assert p.images == []
        assert p.size_options == []
        assert p.visible is True

    def test_requires_handle(self):
        with pytest.raises(ValueError, match="handle_id"):
            CanonicalProduct(handle_id="", name="X")

    def test_requires_name(self):
        with pytest.raises(ValueError, match="name"):
            CanonicalProduct(handle_id="Product_x", name="")

    def test_size_options_deduplicated(self):
        p = CanonicalProduct(
            handle_id="Product_x", name="X",
            size_options=[SizeOption("S"), SizeOption("M"), SizeOption("S")],
        )
        assert p.size_values() == ["S", "M"]

    def test_mutable_defaults_not_shared(self):
        a = CanonicalProduct(handle_id="a", name="A")
        b = CanonicalProduct(handle_id="b", name="B")
        a.images.append("https://x/1.jpg")
        assert b.images == []

    def test_identity_key_prefers_sku(self):
        assert CanonicalProduct(handle_id="h", name="N", sku="SKU1").identity_key == "SKU1"
        assert CanonicalProduct(handle_id="h", name="N").identity_key == "h"


class TestStockState:
    @pytest.mark.parametrize("visible,in_stock,expected", [
        (True, True, True),
        (True, False, False),
        (False, True, False),
        (False, False, False),
    ])
    def test_combinations(self, visible, in_stock, expected):
        assert stock_state(visible, in_stock) is expected
        p = CanonicalProduct(handle_id="h", name="N", visible=visible, in_stock=in_stock)
        assert p.stock_state is expected


class TestDedupeSizeOptions:
    def test_keeps_first_and_case(self):
        options = [SizeOption("m", "first"), SizeOption("M"), SizeOption("m", "second")]
        result = dedupe_size_options(options)
        assert [o.value for o in result] == ["m", "M"]
        assert result[0].description == "first"


class TestAuthoritativeItem:
    def test_from_raw(self, storefront_raw):
        item = AuthoritativeItem.from_raw(storefront_raw, "Размер")
        assert item.slug == "platye-leto"
        assert item.name == "Платье Лето"
        assert item.size_choices == ("42", "44/46")
        assert item.collection_ids == ("c-women", "c-sale")
        assert item.stock_state is True

    def test_description_plain_text(self):
        raw = {"slug": "s", "name": "n", "description": "<p>Store <b>text</b></p><p>Second&nbsp;line</p>"}
        assert AuthoritativeItem.from_raw(raw, "Размер").description == "Store text\nSecond line"

    def test_without_size_group(self):
        item = AuthoritativeItem.from_raw({"slug": "s", "name": "n", "productOptions": []}, "Размер")
        assert item.size_choices is None

    def test_empty_size_group(self):
        raw = {"slug": "s", "name": "n", "productOptions": [{"name": "Размер", "choices": []}]}
        assert AuthoritativeItem.from_raw(raw, "Размер").size_choices == ()

    def test_missing_stock_is_out_of_stock(self):
        item = AuthoritativeItem.from_raw({"slug": "s", "name": "n", "visible": True}, "Размер")
        assert item.stock_state is False


class TestExportRow:
    def test_one_header_per_field(self):
        assert len(EXPORT_FIELDNAMES) == len(ExportRow._fields) == 16
