"""
Slack Notifier

Posts a generated export file to a Slack channel so the catalog team can
import it. Delivery problems are logged and never raised.
"""

import logging
import os
from typing import Dict, Optional

import requests

logger = logging.getLogger(__name__)


class SlackNotifier:
    """
    Uploads files to a channel through Slack's external upload flow.

    Usage:
        notifier = SlackNotifier(token="xoxb-...", channel="C0123")
        notifier.send_file("output/export.csv", "Wantherdress")
    """

    API_URL = "https://slack.com/api"
    MESSAGE = ":rotating_light: Please update the *{label}* feed"

    def __init__(self, token: str, channel: str, session: Optional[requests.Session] = None,
                 timeout: int = 30):
        """
        Args:
            token: Bot token with files:write
            channel: Destination channel id
            session: Existing requests session to reuse
            timeout: Request timeout in seconds
        """
        self.token = token
        self.channel = channel
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({"Authorization": f"Bearer {token}"})

    def _call(self, method: str, data: Optional[Dict] = None, json: Optional[Dict] = None) -> Optional[Dict]:
        """Call a Web API method; None on HTTP or API error."""
        try:
            response = self.session.post(f"{self.API_URL}/{method}", data=data, json=json,
                                         timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            logger.error("Slack %s failed: %s", method, e)
            return None

        if response.status_code >= 400:
            logger.error("Slack %s HTTP %d", method, response.status_code)
            return None

        result = response.json()
        if not result.get("ok"):
            logger.error("Slack %s error: %s", method, result.get("error"))
            return None
        return result

    def send_file(self, path: str, label: str, filename: str = "export.csv") -> bool:
        """
        Upload a file to the channel with a short message naming the partner.

        Args:
            path: Local file to send
            label: Human-readable partner name
            filename: Name shown in Slack

        Returns:
            True if Slack accepted the file
        """
        try:
            with open(path, "rb") as f:
                content = f.read()
        except OSError as e:
            logger.error("Cannot read %s for notification: %s", path, e)
            return False

        ticket = self._call("files.getUploadURLExternal",
                            data={"filename": filename, "length": len(content)})
        if ticket is None:
            return False

        try:
            upload = self.session.post(ticket["upload_url"], files={"file": (filename, content)},
                                       timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            logger.error("Slack upload failed: %s", e)
            return False
        if upload.status_code >= 400:
            logger.error("Slack upload HTTP %d", upload.status_code)
            return False

        done = self._call("files.completeUploadExternal", json={
            "files": [{"id": ticket["file_id"], "title": os.path.basename(path)}],
            "channel_id": self.channel,
            "initial_comment": self.MESSAGE.format(label=label),
        })
        if done is None:
            return False

        logger.info("Sent %s to Slack channel %s", path, self.channel)
        return True
