"""
Data models for feed reconciliation.

This module contains pure data classes with no business logic.
"""

from .product import (
    EXPORT_FIELDNAMES,
    AuthoritativeItem,
    CanonicalProduct,
    CohortUser,
    ExportRow,
    SizeOption,
    dedupe_size_options,
    stock_state,
)

__all__ = [
    'SizeOption',
    'CanonicalProduct',
    'AuthoritativeItem',
    'ExportRow',
    'EXPORT_FIELDNAMES',
    'CohortUser',
    'dedupe_size_options',
    'stock_state',
]
