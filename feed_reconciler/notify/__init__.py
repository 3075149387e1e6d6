"""
Notification side channel.

Modules:
    slack - Post export files to a Slack channel
"""

from .slack import SlackNotifier

__all__ = ['SlackNotifier']
