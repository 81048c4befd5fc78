"""
Telegram notification service for news relay.

This module posts one chat message per extracted article through the
Telegram Bot API.
"""

import logging
import asyncio
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Dict, List, Optional
from zoneinfo import ZoneInfo
import argparse
import sys

import aiohttp
from pydantic_settings import BaseSettings, SettingsConfigDict

from extractor.records import FinalNews, FinalOutput
from extractor.storage import StorageError, load_json

logger = logging.getLogger(__name__)

DESCRIPTION_LIMIT = 500
# Only cut back to a sentence end if that keeps most of the description
SENTENCE_CUT_MIN = 300


class NotifierSettings(BaseSettings):
    """Configuration options for the notifier service."""

    telegram_bot_token: Optional[str] = None
    telegram_chat_id: Optional[str] = None
    telegram_api_url: str = "https://api.telegram.org"
    request_timeout: float = 15.0
    message_delay_seconds: float = 1.0
    display_timezone: str = "America/Sao_Paulo"
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    def missing_credentials(self) -> List[str]:
        missing = []
        if not self.telegram_bot_token:
            missing.append("TELEGRAM_BOT_TOKEN")
        if not self.telegram_chat_id:
            missing.append("TELEGRAM_CHAT_ID")
        return missing


def _parse_pub_date(pub_date: str) -> Optional[datetime]:
    try:
        return parsedate_to_datetime(pub_date)
    except (TypeError, ValueError, IndexError):
        pass
    try:
        return datetime.fromisoformat(pub_date.replace('Z', '+00:00'))
    except ValueError:
        return None


class TelegramNotifier:
    """Handles message delivery to a Telegram chat."""

    def __init__(self, settings: NotifierSettings):
        self.settings = settings
        self.tz = ZoneInfo(settings.display_timezone)

    @property
    def send_url(self) -> str:
        return f"{self.settings.telegram_api_url}/bot{self.settings.telegram_bot_token}/sendMessage"

    def format_pub_date(self, pub_date: str) -> str:
        """Render an RSS or ISO date as ``HH:MM, DD/MM/YYYY`` in the display timezone.

        Unparseable dates are returned unchanged.
        """
        parsed = _parse_pub_date(pub_date.strip()) if pub_date else None
        if parsed is None:
            return pub_date
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return parsed.astimezone(self.tz).strftime("%H:%M, %d/%m/%Y")

    def build_description(self, news: FinalNews) -> str:
        if news.summary:
            return news.summary

        description = news.full_article
        if len(description) > DESCRIPTION_LIMIT:
            description = description[:DESCRIPTION_LIMIT]
            last_period = description.rfind(".")
            if last_period > SENTENCE_CUT_MIN:
                description = description[:last_period + 1]
        return description

    def format_message(self, news: FinalNews) -> str:
        return (
            f"*{news.title}*\n\n"
            f"{self.build_description(news)}\n\n"
            f"📅 Date: {self.format_pub_date(news.pub_date)}\n"
            f"📂 Category: {news.category}\n"
            f"🔗 {news.link}"
        )

    def _payload(self, news: FinalNews) -> Dict:
        return {
            "chat_id": self.settings.telegram_chat_id,
            "text": self.format_message(news),
            "parse_mode": "Markdown",
            "disable_web_page_preview": False,
        }

    async def send(self, session: aiohttp.ClientSession, news: FinalNews) -> bool:
        """
        Post one article to the configured chat.

        Returns:
            True on a 2xx response, False otherwise (no retry)
        """
        try:
            async with session.post(self.send_url, json=self._payload(news)) as response:
                if 200 <= response.status < 300:
                    return True
                text = await response.text()
                logger.error(f"Telegram rejected message: {response.status} - {text}")
                return False
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error(f"Error sending Telegram message: {str(e)}")
            return False

    async def send_all(self, articles: List[FinalNews]) -> Dict[str, int]:
        """Send every article, pausing between messages; returns sent/failed counts."""
        results = {"sent": 0, "failed": 0}
        timeout = aiohttp.ClientTimeout(total=self.settings.request_timeout)

        async with aiohttp.ClientSession(timeout=timeout) as session:
            for i, news in enumerate(articles):
                if i:
                    await asyncio.sleep(self.settings.message_delay_seconds)

                logger.info(f"[{i + 1}/{len(articles)}] {news.title[:60]}")
                if await self.send(session, news):
                    results["sent"] += 1
                    logger.info("  ✓ sent")
                else:
                    results["failed"] += 1

        return results


async def async_main(input_file: str, settings: Optional[NotifierSettings] = None) -> int:
    """Main async function for CLI execution"""
    settings = settings or NotifierSettings()

    missing = settings.missing_credentials()
    if missing:
        logger.error(f"Telegram configuration incomplete: set {', '.join(missing)} "
                     f"in .env or the environment")
        return 1

    try:
        data = load_json(input_file)
    except StorageError as e:
        logger.error(str(e))
        return 1
    if not isinstance(data, dict):
        logger.error(f"{input_file} is not an extraction result file")
        return 1

    output = FinalOutput.from_dict(data)

    logger.info(f"News to send: {len(output.articles)}")
    notifier = TelegramNotifier(settings)
    results = await notifier.send_all(output.articles)
    logger.info(f"Done: {results['sent']} sent, {results['failed']} failed")
    return 0


def main():
    """CLI entry point"""
    from extractor.observability import LOGGING_HELP, setup_logging

    parser = argparse.ArgumentParser(
        description='News Relay Notification Service - send extracted news to Telegram',
        prog='python -m notifier',
        epilog=LOGGING_HELP,
    )
    parser.add_argument('input', help='JSON file produced by the extraction stage')
    parser.add_argument('--verbose', '-v', action='store_true', help='Enable verbose logging')

    args = parser.parse_args()

    settings = NotifierSettings()
    setup_logging(args.verbose)
    if not args.verbose:
        logging.getLogger().setLevel(settings.log_level.upper())

    exit_code = asyncio.run(async_main(args.input, settings))
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
