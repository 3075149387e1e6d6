"""Tests for feed_reconciler/sources/storefront.py"""

from feed_reconciler.sources import NormalizeContext
from feed_reconciler.sources.storefront import (
    extract_images,
    extract_size_choices,
    generate_description,
    generate_url,
    normalize_storefront,
)


class TestGenerateDescription:
    def test_cuts_shipping_and_heading(self):
        html = "<p>Лёгкое платье</p><p>Основные характеристики:Хлопок 100%</p><p>Доставка 3 дня</p>"
        assert generate_description(html, []) == "Лёгкое платье\nХлопок 100%\n"

    def test_appends_info_sections(self):
        result = generate_description("<p>Main</p>", [{"title": "Care", "description": "<p>Hand wash</p>"}])
        assert result.rstrip("\n") == "Main\nCare\nHand wash"

    def test_empty(self):
        assert generate_description(None, None) == ""


class TestGenerateUrl:
    def test_joins_base_and_path(self):
        url = generate_url({"base": "https://www.amby.app/", "path": "/product-page/x"})
        assert url == "https://www.amby.app/product-page/x"

    def test_missing(self):
        assert generate_url(None) == ""


class TestExtractSizeChoices:
    def test_splits_combined_choices(self):
        options = [
            {"name": "Цвет", "choices": [{"description": "Red"}]},
            {"name": "Размер", "choices": [{"description": "S/M"}, {"description": "M/L"}]},
        ]
        assert extract_size_choices(options, "Размер") == ["S", "M", "L"]

    def test_no_size_group(self):
        assert extract_size_choices([], "Размер") == []


class TestExtractImages:
    def test_main_media_first(self):
        raw = {"media": {
            "mainMedia": {"image": {"url": "main.jpg"}},
            "items": [{"image": {"url": "a.jpg"}}, {"video": {}}],
        }}
        assert extract_images(raw) == ["main.jpg", "a.jpg"]

    def test_no_media(self):
        assert extract_images({}) == []


class TestNormalizeStorefront:
    def test_full_product(self, config, collections, storefront_raw):
        p = normalize_storefront(storefront_raw, NormalizeContext(config, collections))

        assert p.handle_id == "Product_platye-leto"
        assert p.source == "storefront"
        assert p.categories == ["Для женщин", "Распродажа"]
        assert p.tags == ["42F", "44F", "46F"]
        assert p.size_values() == ["42", "44", "46"]
        assert p.price == 4500
        assert p.old_price == 5000
        assert p.images == ["https://static.example.com/1.jpg", "https://static.example.com/2.jpg"]
        assert p.url == "https://www.amby.app/product-page/platye-leto"
        assert p.description == "Лёгкое платье\nХлопок 100%\n"
        assert p.updated_at == "2024-05-01T10:00:00Z"

    def test_excluded_without_size_template(self, config, collections, storefront_raw):
        storefront_raw["collectionIds"] = ["c-sale"]
        assert normalize_storefront(storefront_raw, NormalizeContext(config, collections)) is None

    def test_excluded_without_tags(self, config, collections, storefront_raw):
        storefront_raw["productOptions"] = []
        assert normalize_storefront(storefront_raw, NormalizeContext(config, collections)) is None

    def test_accessories_get_single_tag(self, config, collections, storefront_raw):
        storefront_raw["collectionIds"] = ["c-acc"]
        p = normalize_storefront(storefront_raw, NormalizeContext(config, collections))
        assert p.tags == ["*F"]

    def test_excluded_without_slug(self, config, collections, storefront_raw):
        storefront_raw["slug"] = ""
        assert normalize_storefront(storefront_raw, NormalizeContext(config, collections)) is None
