"""
Google Sheets Client

Thin wrapper over the Sheets v4 values API: read a range, replace a range.
Errors are logged and reported as None/False.
"""

import logging
from typing import List, Optional

import google.auth
from google.oauth2.service_account import Credentials
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

logger = logging.getLogger(__name__)

SCOPES = [
    "https://www.googleapis.com/auth/spreadsheets",
]


class GoogleSheetsClient:
    """
    Usage:
        client = GoogleSheetsClient("service-account.json")
        rows = client.get_values(sheet_id, "Users!A2:G")
        client.update_values(sheet_id, "Users!A2:G10", rows)
    """

    def __init__(self, credentials_file: str = "", service=None):
        """
        Args:
            credentials_file: Service account JSON (application default credentials if empty)
            service: Prebuilt Sheets service resource
        """
        if service is None:
            if credentials_file:
                creds = Credentials.from_service_account_file(credentials_file, scopes=SCOPES)
            else:
                creds, _ = google.auth.default(scopes=SCOPES)
            service = build("sheets", "v4", credentials=creds, cache_discovery=False)
        self.service = service

    def get_values(self, spreadsheet_id: str, range_: str) -> Optional[List[List[str]]]:
        """
        Read a range.

        Returns:
            Rows (trailing empty cells omitted by the API), or None on error
        """
        try:
            response = self.service.spreadsheets().values().get(
                spreadsheetId=spreadsheet_id, range=range_
            ).execute()
        except HttpError as e:
            logger.error("Error reading %s: %s", range_, e)
            return None
        return response.get("values", [])

    def update_values(self, spreadsheet_id: str, range_: str, values: List[List[str]]) -> bool:
        """
        Replace the values of a range (not an append).

        Returns:
            True on success
        """
        try:
            response = self.service.spreadsheets().values().update(
                spreadsheetId=spreadsheet_id,
                range=range_,
                valueInputOption="RAW",
                body={"values": values},
            ).execute()
        except HttpError as e:
            logger.error("Error updating %s: %s", range_, e)
            return False

        logger.debug("Updated %s cells in %s", response.get("updatedCells"), range_)
        return True
