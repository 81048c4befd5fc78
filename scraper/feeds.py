"""Feed metadata collection for the news relay pipeline."""

from __future__ import annotations

import logging
import sys
import time
from typing import Callable, List, Optional

import feedparser
import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from extractor.records import MetadataItem, MetadataOutput
from extractor.storage import now_rfc3339, save_json

from .config import Settings

logger = logging.getLogger(__name__)


def build_session(user_agent: str) -> requests.Session:
    session = requests.Session()
    retry = Retry(
        total=2,
        backoff_factor=1,
        status_forcelist=(429, 500, 502, 503, 504),
        allowed_methods=("GET",),
        raise_on_status=False,
    )
    adapter = HTTPAdapter(max_retries=retry)
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    session.headers.update(
        {
            "User-Agent": user_agent,
            "Accept": "application/rss+xml, application/atom+xml, application/xml;q=0.9, */*;q=0.8",
        }
    )
    return session


def parse_feed(content: bytes) -> List[MetadataItem]:
    """Parse a feed document into metadata items.

    Raises ValueError when the document cannot be read as a feed at all.
    """
    parsed = feedparser.parse(content)
    if parsed.bozo and not parsed.entries:
        raise ValueError(str(parsed.get("bozo_exception") or "not a feed"))

    source = parsed.feed.get("title", "")
    items: List[MetadataItem] = []
    for entry in parsed.entries:
        categories = [t.get("term") for t in entry.get("tags") or [] if t.get("term")]
        items.append(
            MetadataItem(
                title=entry.get("title", ""),
                link=entry.get("link", ""),
                description=entry.get("description", ""),
                pub_date=entry.get("published", ""),
                source=source,
                category=categories,
            )
        )
    return items


class FeedFetcher:
    """Polls syndication feeds and flattens their entries."""

    def __init__(self, settings: Optional[Settings] = None,
                 session: Optional[requests.Session] = None,
                 sleep: Callable[[float], None] = time.sleep):
        self.settings = settings or Settings()
        self.session = session or build_session(self.settings.user_agent)
        self._sleep = sleep

    def fetch(self, feed_url: str) -> List[MetadataItem]:
        """Return the entries of one feed, or an empty list on any failure."""
        try:
            resp = self.session.get(feed_url, timeout=self.settings.feed_timeout)
        except requests.RequestException as exc:
            logger.error("Feed fetch failed for %s: %s", feed_url, exc)
            return []

        if not 200 <= resp.status_code < 300:
            logger.error("Feed %s returned status %d", feed_url, resp.status_code)
            return []

        try:
            items = parse_feed(resp.content)
        except ValueError as exc:
            logger.error("Feed parse error for %s: %s", feed_url, exc)
            return []

        source = items[0].source if items else ""
        logger.info("  %s (%d items)", source or feed_url, len(items))
        return items

    def collect(self, feed_urls: Optional[List[str]] = None) -> MetadataOutput:
        urls = feed_urls if feed_urls is not None else self.settings.list_feed_urls()
        logger.info("Feeds to process: %d", len(urls))

        items: List[MetadataItem] = []
        for i, url in enumerate(urls):
            if i:
                self._sleep(self.settings.feed_delay_seconds)
            logger.info("[%d/%d] %s", i + 1, len(urls), url)
            items.extend(self.fetch(url))

        return MetadataOutput(fetched_at=now_rfc3339(), items=items)


def main():
    import argparse

    from extractor.observability import LOGGING_HELP, setup_logging

    parser = argparse.ArgumentParser(description="Collect metadata from configured RSS feeds",
                                     epilog=LOGGING_HELP)
    parser.add_argument("--feed", action="append", dest="feeds", help="Feed URL (overrides FEED_URLS)")
    parser.add_argument("--output", "-o", help="Output JSON file (default: rss_feeds_metadata.json)")
    parser.add_argument("--verbose", "-v", action="store_true")
    args = parser.parse_args()

    setup_logging(args.verbose)

    settings = Settings()
    fetcher = FeedFetcher(settings)
    output = fetcher.collect(args.feeds)

    target = args.output or settings.metadata_file
    try:
        save_json(output, target)
    except OSError as exc:
        logger.error("Cannot write %s: %s", target, exc)
        sys.exit(1)
    logger.info("Saved %d items to %s", output.total_items, target)


if __name__ == "__main__":
    main()
