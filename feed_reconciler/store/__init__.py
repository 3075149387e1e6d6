"""
Storefront integration modules.

Modules:
    api_client - Async client for the stores API (products, collections)
    pagination - Offset pagination over a full remote feed
    collections - In-memory collection id -> name lookup
    csv_exporter - Product import CSV and JSON feed export
"""

from .api_client import StoreAPIClient, get_json
from .collections import CollectionLookup
from .csv_exporter import FeedCSVExporter, export_json_feed, format_bool, format_price
from .pagination import PaginatedFeedFetcher

__all__ = [
    # API Client
    'StoreAPIClient',
    'get_json',
    # Pagination
    'PaginatedFeedFetcher',
    # Collections
    'CollectionLookup',
    # Export
    'FeedCSVExporter',
    'export_json_feed',
    'format_bool',
    'format_price',
]
