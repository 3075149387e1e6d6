"""
Cohort Sheet Reconciliation

Keeps the subscriber cohort spreadsheet in sync with the user store.

Sheet row layout (columns A..G):
    0  "Name [user_id] locale"
    1  cohort label
    2  (manual)
    3  platform
    4  numeric sort key
    5  (manual)
    6  "'user_id';'cohort'" identifier field, or UNDEFINED

Existing rows are never removed. Unsubscribed users get the unsubscribed
marker as their cohort; users missing from the sheet are appended with the
default cohort.
"""

import json
import logging
import math
import os
import re
from typing import Iterable, List, Optional, Sequence, Set

from ..common.config_loader import ReconcilerConfig, SheetSettings
from ..models import CohortUser
from .sheets_client import GoogleSheetsClient

logger = logging.getLogger(__name__)

ROW_WIDTH = 7
NAME_COL = 0
COHORT_COL = 1
SORT_KEY_COL = 4
ID_FIELD_COL = 6

UNDEFINED = "UNDEFINED"
# Spreadsheet error values (#N/A, #REF!, ...) left in the identifier field
SENTINEL_MARK = "#"

USER_ID_PATTERN = re.compile(r'\[([^\]]*)\]')


def extract_user_id(display_name: str) -> Optional[str]:
    """Bracketed id from 'Name [id] locale', or None."""
    match = USER_ID_PATTERN.search(display_name or "")
    return match.group(1) if match else None


def format_id_field(user_id: str, cohort: str) -> str:
    return f"'{user_id}';'{cohort}'"


def consume_unsubscribed(path: str) -> List[str]:
    """
    Read unsubscribed user ids (one per line) and truncate the file.

    A missing file means nobody unsubscribed since the last run.
    """
    if not os.path.exists(path):
        logger.error("Unsubscribed users file not found: %s (cwd %s)", path, os.getcwd())
        return []

    with open(path, "r+", encoding="utf-8") as f:
        ids = [line.strip() for line in f if line.strip()]
        f.seek(0)
        f.truncate()

    logger.info("Read %d unsubscribed users", len(ids))
    return ids


def load_users(path: str) -> List[CohortUser]:
    """Load the user store export (JSON list of user objects)."""
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    users = []
    for raw in data:
        user_id = raw.get("user_id")
        if user_id in (None, ""):
            continue
        users.append(CohortUser(
            user_id=str(user_id),
            name=raw.get("name") or "",
            locale=raw.get("locale") or "",
            platform=raw.get("platform") or "",
        ))
    return users


def normalize_rows(rows: Iterable[Sequence[str]]) -> List[List[str]]:
    """Pad rows to the full width; an empty identifier field becomes UNDEFINED."""
    normalized = []
    for row in rows:
        row = list(row) + [""] * (ROW_WIDTH - len(row))
        if not row[ID_FIELD_COL]:
            row[ID_FIELD_COL] = UNDEFINED
        normalized.append(row)
    return normalized


def unsubscribe_users(rows: List[List[str]], unsubscribed: Iterable[str], marker: str) -> List[List[str]]:
    """
    Apply unsubscriptions to existing sheet rows.

    Every row is kept. The identifier field is rewritten from the current
    cohort, except rows holding a spreadsheet error there, which go back to
    UNDEFINED.
    """
    unsubscribed = set(unsubscribed)
    updated = []

    for row in rows:
        user_id = extract_user_id(row[NAME_COL])
        if user_id is not None and user_id in unsubscribed:
            row[COHORT_COL] = marker

        if SENTINEL_MARK in row[ID_FIELD_COL]:
            row[ID_FIELD_COL] = UNDEFINED
        elif user_id is not None:
            row[ID_FIELD_COL] = format_id_field(user_id, row[COHORT_COL])

        updated.append(row)
    return updated


def users_to_add(users: Iterable[CohortUser], sheet_ids: Set[str], default_cohort: str) -> List[List[str]]:
    """Rows for users not yet in the sheet (each user at most once)."""
    added = []
    seen = set(sheet_ids)

    for user in users:
        if user.user_id in seen:
            continue
        seen.add(user.user_id)
        added.append([
            f"{user.name} [{user.user_id}] {user.locale}",
            default_cohort,
            "",
            user.platform,
            "",
            "",
            format_id_field(user.user_id, default_cohort),
        ])

    if added:
        logger.info("Adding %d new users", len(added))
    return added


def numeric_key(value) -> float:
    """Sort key for column 4: finite numbers as numbers, anything else as 0."""
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    return number if math.isfinite(number) else 0.0


def sort_rows(rows: List[List[str]]) -> List[List[str]]:
    """Stable ascending sort by the numeric key column."""
    return sorted(rows, key=lambda row: numeric_key(row[SORT_KEY_COL] if len(row) > SORT_KEY_COL else None))


def reconcile_cohorts(sheet_rows: Iterable[Sequence[str]], users: Iterable[CohortUser],
                      unsubscribed: Iterable[str], config: ReconcilerConfig) -> List[List[str]]:
    """
    Compute the full new sheet contents.

    Returns:
        Updated existing rows followed by new user rows, sorted by key column
    """
    rows = normalize_rows(sheet_rows)
    sheet_ids = {uid for uid in (extract_user_id(row[NAME_COL]) for row in rows) if uid is not None}

    updated = unsubscribe_users(rows, unsubscribed, config.unsubscribed_marker)
    added = users_to_add(users, sheet_ids, config.default_cohort)
    return sort_rows(updated + added)


def export_rows(client: GoogleSheetsClient, settings: SheetSettings, rows: List[List[str]]) -> bool:
    """Replace exactly as many sheet rows as are being written."""
    range_ = settings.write_range(len(rows))
    logger.info("Writing %d rows to %s", len(rows), range_)
    return client.update_values(settings.sheet_id, range_, rows)


def run_cohort_sync(config: ReconcilerConfig, users: List[CohortUser],
                    client: Optional[GoogleSheetsClient] = None) -> bool:
    """
    Reconcile the cohort sheet with the user store and write it back.

    The sheet is read before the unsubscribed file is consumed, so a failed
    read leaves pending unsubscriptions for the next run.

    Returns:
        True if the sheet was updated
    """
    if client is None:
        client = GoogleSheetsClient(config.google_credentials_file)

    settings = config.sheet
    sheet_rows = client.get_values(settings.sheet_id, settings.read_range)
    if sheet_rows is None:
        logger.error("Could not read cohort sheet, nothing updated")
        return False

    unsubscribed = consume_unsubscribed(config.unsubscribed_users_file)
    rows = reconcile_cohorts(sheet_rows, users, unsubscribed, config)
    return export_rows(client, settings, rows)
