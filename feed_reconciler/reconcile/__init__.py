"""
Reconciliation modules.

Modules:
    overrides - Storefront-first field resolution
    dedup - Catalog deduplication and carry-over of removed products
    images - Image rehosting to the store bucket
    pipeline - Batch export runs
"""

from .dedup import carry_over_outdated, dedupe_rows, row_identity
from .images import GCSImageStore, ImageRehoster, canonical_image_path
from .overrides import AuthoritativeIndex, OverrideResolver, ResolvedFields
from .pipeline import ExportContext, ExportResult, run_partner_export, run_storefront_feed

__all__ = [
    'AuthoritativeIndex',
    'OverrideResolver',
    'ResolvedFields',
    'dedupe_rows',
    'row_identity',
    'carry_over_outdated',
    'GCSImageStore',
    'ImageRehoster',
    'canonical_image_path',
    'ExportContext',
    'ExportResult',
    'run_partner_export',
    'run_storefront_feed',
]
