"""
Full-article extraction stage for news relay.

This module coordinates the extraction stage by:
- Loading the selected news list written after feed collection
- Fetching and extracting each article in turn
- Recording per-item success or failure without stopping the batch
- Writing the combined result for the notifier
"""

import logging
import sys
import time
from pathlib import Path
from typing import Callable, List, Optional, Union

from .config import Settings
from .html_extractor import HTMLExtractor
from .records import FinalNews, FinalOutput, SelectedNews
from .storage import StorageError, load_json, now_rfc3339, save_json

logger = logging.getLogger(__name__)


def _shorten(text: str, max_len: int = 60) -> str:
    if len(text) <= max_len:
        return text
    return text[:max_len] + "..."


class ExtractionProcessor:
    """Runs article extraction over a list of selected news items."""

    def __init__(self, settings: Optional[Settings] = None,
                 extractor: Optional[HTMLExtractor] = None,
                 sleep: Callable[[float], None] = time.sleep):
        self.settings = settings or Settings()
        self.extractor = extractor or HTMLExtractor(self.settings)
        self._sleep = sleep

    def process_item(self, news: SelectedNews) -> FinalNews:
        result = self.extractor.extract_from_url(news.link)
        return FinalNews(
            title=news.title,
            link=news.link,
            source=news.source,
            pub_date=news.pub_date,
            summary=news.summary,
            category=news.category,
            full_article=result.text,
            article_extracted=result.success,
            extraction_error=result.failure_reason,
        )

    def process(self, selected: List[SelectedNews]) -> FinalOutput:
        """
        Extract every selected article.

        Args:
            selected: Items to fetch, in output order

        Returns:
            FinalOutput holding one FinalNews per input item
        """
        logger.info(f"Selected news items: {len(selected)}")
        articles: List[FinalNews] = []

        for i, news in enumerate(selected):
            if i:
                self._sleep(self.settings.article_delay_seconds)

            logger.info(f"[{i + 1}/{len(selected)}] {_shorten(news.title)}")
            final = self.process_item(news)
            articles.append(final)

            if final.article_extracted:
                logger.info(f"  extracted ({len(final.full_article)} chars)")
            else:
                logger.warning(f"  failed: {final.extraction_error}")

        output = FinalOutput(generated_at=now_rfc3339(), articles=articles)
        logger.info(f"Total: {output.total_articles} | Extracted: {output.articles_extracted}")
        return output

    def run(self, input_file: Union[str, Path], output_file: Union[str, Path, None] = None) -> FinalOutput:
        data = load_json(input_file)
        if not isinstance(data, list):
            raise StorageError(f"{input_file} must contain a JSON list of news items")

        selected = [SelectedNews.from_dict(item) for item in data if isinstance(item, dict)]
        output = self.process(selected)

        target = output_file or self.settings.output_file
        save_json(output, target)
        logger.info(f"Wrote {target}")
        return output


def main():
    """CLI interface for the extraction stage."""
    import argparse

    from .observability import LOGGING_HELP, setup_logging

    parser = argparse.ArgumentParser(description="Fetch and extract full text for selected news",
                                     epilog=LOGGING_HELP)
    parser.add_argument("input", help="JSON file with the selected news list")
    parser.add_argument("--output", "-o", help="Output JSON file (default: news_today_full.json)")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")

    args = parser.parse_args()
    setup_logging(args.verbose)

    processor = ExtractionProcessor()
    try:
        processor.run(args.input, args.output)
    except (StorageError, OSError) as e:
        logger.error(str(e))
        sys.exit(1)


if __name__ == "__main__":
    main()
