"""
Catalog Feed Reconciler

Modules:
    models      - Data models (CanonicalProduct, AuthoritativeItem, ExportRow)
    common      - Shared utilities (config loader, logging, CSV, text, async helpers)
    store       - Stores API client, pagination, collection lookup, exporters
    sources     - Per-source normalizers (storefront, partner store, supplier feed)
    reconcile   - Override resolution, deduplication, image rehosting, export pipeline
    cohorts     - Subscriber cohort spreadsheet reconciliation
    notify      - Export file delivery to chat
"""
