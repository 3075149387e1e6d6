"""
Subscriber cohort spreadsheet sync.

Modules:
    sheets_client - Sheets v4 values read/replace
    reconciler - Unsubscribe, append new users, sort, write back
"""

from .reconciler import (
    consume_unsubscribed,
    extract_user_id,
    load_users,
    reconcile_cohorts,
    run_cohort_sync,
    sort_rows,
)
from .sheets_client import GoogleSheetsClient

__all__ = [
    'GoogleSheetsClient',
    'consume_unsubscribed',
    'extract_user_id',
    'load_users',
    'reconcile_cohorts',
    'run_cohort_sync',
    'sort_rows',
]
