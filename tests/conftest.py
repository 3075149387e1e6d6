"""Shared test fixtures."""

import pytest

from feed_reconciler.common.config_loader import (
    PartnerConfig,
    ReconcilerConfig,
    SheetSettings,
    build_category_templates,
)
from feed_reconciler.store.collections import CollectionLookup

CATEGORIES = {
    "Для женщин": "{number}F",
    "Ж_аксессуары": "*F",
    "Ж_обувь": "BOT{string}F",
    "Ж_плечевая": "TOP{string}F",
    "Ж_поясная": "BOT{string}F",
    "Для мужчин": "{number}M",
    "М_аксессуары": "*M",
    "М_обувь": "BOT{string}M",
    "М_плечевая": "TOP{string}M",
    "М_поясная": "BOT{string}M",
}


class FakeStoreClient:
    """In-memory stand-in for StoreAPIClient serving fixed pages."""

    def __init__(self, pages=None, collections=None, page_size=2, fail_at_page=None):
        self.pages = pages or []
        self.collections = collections if collections is not None else []
        self.page_size = page_size
        self.fail_at_page = fail_at_page
        self.offsets = []

    async def query_products(self, offset):
        self.offsets.append(offset)
        index = offset // self.page_size
        if self.fail_at_page is not None and index == self.fail_at_page:
            return None
        if index < len(self.pages):
            return list(self.pages[index])
        return []

    async def query_collections(self):
        return self.collections

    async def close(self):
        pass


class FakeImageStore:
    """Image bucket holding a fixed set of paths; records uploads."""

    def __init__(self, existing=(), fail_uploads=False):
        self.existing = set(existing)
        self.fail_uploads = fail_uploads
        self.uploaded = []

    async def exists(self, path):
        return path in self.existing

    async def upload(self, url, path):
        if self.fail_uploads:
            return False
        self.uploaded.append(path)
        self.existing.add(path)
        return True


@pytest.fixture
def fake_store_client():
    return FakeStoreClient


@pytest.fixture
def fake_image_store():
    return FakeImageStore


@pytest.fixture
def partner_store_config():
    return PartnerConfig(
        name="wantherdress",
        kind="partner_store",
        label="Wantherdress",
        auth_token="partner-token",
        match_by="slug",
        rehost_images=True,
    )


@pytest.fixture
def supplier_config():
    return PartnerConfig(
        name="bewearcy",
        kind="supplier_feed",
        label="Bewearcy",
        feed_url="http://supplier.example.com/api/products",
        match_by="name",
        carry_over_outdated=True,
        markup=1000,
        size_translation={"42": "XS", "44": "S", "46": "M", "48": "L", "50": "XL"},
    )


@pytest.fixture
def config(partner_store_config, supplier_config):
    """Run configuration matching config/reconciler.yaml, without secrets."""
    return ReconcilerConfig(
        store_api_url="https://api.example.com",
        store_auth_token="store-token",
        page_size=2,
        concurrency=4,
        number_placeholder="100",
        string_placeholder="XXX",
        category_templates=build_category_templates(CATEGORIES, "100", "XXX"),
        image_host_base="https://storage.googleapis.com/amby",
        image_bucket="amby",
        partners={
            partner_store_config.name: partner_store_config,
            supplier_config.name: supplier_config,
        },
        sheet=SheetSettings(sheet_id="sheet-1", tab_name="Users", start_range="A2", end_range="G"),
        default_cohort="новый",
        unsubscribed_marker="отписан",
    )


@pytest.fixture
def collections():
    return CollectionLookup({
        "c-women": "Для женщин",
        "c-tops": "Ж_плечевая",
        "c-acc": "Ж_аксессуары",
        "c-men": "Для мужчин",
        "c-sale": "Распродажа",
    })


@pytest.fixture
def storefront_raw():
    """Storefront product as returned by the products query."""
    return {
        "id": "p1",
        "slug": "platye-leto",
        "name": "Платье Лето",
        "sku": "AMB-001",
        "visible": True,
        "stock": {"inStock": True},
        "description": "<p>Лёгкое платье</p><p>Основные характеристики:Хлопок 100%</p><p>Доставка 3 дня</p>",
        "additionalInfoSections": [],
        "price": {"price": 5000, "discountedPrice": 4500},
        "productPageUrl": {"base": "https://www.amby.app/", "path": "/product-page/platye-leto"},
        "media": {
            "mainMedia": {"image": {"url": "https://static.example.com/1.jpg"}},
            "items": [
                {"image": {"url": "https://static.example.com/1.jpg"}},
                {"image": {"url": "https://static.example.com/2.jpg"}},
            ],
        },
        "collectionIds": ["c-women", "c-sale"],
        "productOptions": [
            {"name": "Размер", "choices": [{"description": "42"}, {"description": "44/46"}]},
        ],
        "lastUpdated": "2024-05-01T10:00:00Z",
    }


@pytest.fixture
def partner_raw():
    """Partner storefront product (sizes only in the description)."""
    return {
        "id": "w1",
        "slug": "silk-dress",
        "name": "Silk Dress",
        "sku": "WD-100",
        "visible": True,
        "stock": {"inStock": True},
        "description": "<p>Silk evening dress</p><p>Размер: S, M, M, L</p>",
        "price": {"price": 12000, "discountedPrice": 9000},
        "discount": {"type": "PERCENT", "value": 25},
        "media": {
            "items": [
                {"image": {"url": "https://static.partner.com/a.jpg"}},
                {"image": {"url": "https://static.partner.com/b.jpg"}},
            ],
        },
    }


@pytest.fixture
def supplier_raw():
    """Supplier CRM product."""
    return {
        "name": "Костюм Спорт",
        "description": "<p>Трикотажный костюм</p>",
        "price": "2990.50",
        "size": "46",
        "img": ["https://crm.example.com/img/1.jpg"],
    }
