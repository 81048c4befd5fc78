"""
Notification service for news relay.

This module delivers extracted news items to a Telegram chat, one message
per article, with a per-item delivery status.
"""

__version__ = "0.1.0"
