"""
HTML text extraction module for news relay.

This module turns fetched article pages into plain text with:
- Removal of scripts, styles and comments
- Heuristic main-content region selection
- Tag stripping, entity decoding and short-line filtering
- Bounded-timeout fetching of article URLs
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.exceptions import ReadTimeoutError
from urllib3.util.retry import Retry

from .config import Settings
from .noise import strip
from .normalize import normalize
from .region import select_region

logger = logging.getLogger(__name__)

EMPTY_RESULT_REASON = "no readable text found"


def _is_read_timeout(error: requests.RequestException) -> bool:
    """True for a ConnectionError wrapping urllib3's MaxRetryError(ReadTimeoutError)."""
    wrapped = error.args[0] if error.args else None
    return isinstance(getattr(wrapped, "reason", None), ReadTimeoutError)


@dataclass(frozen=True)
class ExtractionResult:
    """Outcome of extracting one document."""
    text: str
    success: bool
    failure_reason: Optional[str] = None

    @classmethod
    def failure(cls, reason: str) -> "ExtractionResult":
        return cls(text="", success=False, failure_reason=reason)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"text": self.text, "success": self.success}
        if not self.success:
            data["failure_reason"] = self.failure_reason
        return data


def extract_text(html_content: str) -> ExtractionResult:
    """
    Extract readable article text from raw HTML.

    Never raises on malformed markup; bad input only lowers output quality.

    Args:
        html_content: Decoded HTTP response body

    Returns:
        ExtractionResult; ``success`` is False when no line survived
        normalization
    """
    cleaned = strip(html_content)
    region = select_region(cleaned)
    text = normalize(region)
    logger.debug(f"Extracted {len(text)} chars from {len(region)}-char region "
                 f"({len(html_content)}-char document)")
    if not text:
        return ExtractionResult.failure(EMPTY_RESULT_REASON)
    return ExtractionResult(text=text, success=True)


class HTMLExtractor:
    """Fetch article pages and extract their text."""

    def __init__(self, settings: Optional[Settings] = None):
        """
        Initialize HTML extractor.

        Args:
            settings: Fetch configuration (loaded from the environment if omitted)
        """
        self.settings = settings or Settings()
        self.timeout = self.settings.fetch_timeout

        # Setup requests session with retries
        self.session = requests.Session()
        retry_strategy = Retry(
            total=self.settings.fetch_retries,
            # A read timeout ends the fetch; retrying would multiply fetch_timeout
            read=False,
            backoff_factor=0.5,
            status_forcelist=[429, 500, 502, 503, 504],
            allowed_methods=("GET",),
            raise_on_status=False,
        )
        adapter = HTTPAdapter(max_retries=retry_strategy)
        self.session.mount("http://", adapter)
        self.session.mount("https://", adapter)
        self.session.headers.update({"User-Agent": self.settings.user_agent})

    def extract_from_url(self, url: str) -> ExtractionResult:
        """
        Fetch a web page and extract its article text.

        The extraction core only sees complete 2xx response bodies; failed,
        timed out or non-2xx requests produce a failure result instead.
        """
        if not url:
            return ExtractionResult.failure("empty URL")

        logger.debug(f"Fetching article: {url}")
        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.Timeout:
            logger.warning(f"Timed out fetching {url}")
            return ExtractionResult.failure(f"timed out after {self.timeout}s")
        except requests.RequestException as e:
            if _is_read_timeout(e):
                logger.warning(f"Timed out fetching {url}")
                return ExtractionResult.failure(f"timed out after {self.timeout}s")
            logger.warning(f"Failed to fetch {url}: {str(e)}")
            return ExtractionResult.failure(f"request failed: {e}")

        if not 200 <= response.status_code < 300:
            logger.warning(f"Fetching {url} returned status {response.status_code}")
            return ExtractionResult.failure(f"HTTP status {response.status_code}")

        return extract_text(response.text)

    def extract_from_file(self, html_path: Path) -> ExtractionResult:
        """Extract article text from a local HTML file."""
        logger.info(f"Extracting from HTML file: {html_path}")

        if not html_path.exists():
            raise FileNotFoundError(f"HTML file not found: {html_path}")

        with open(html_path, 'r', encoding='utf-8', errors='replace') as f:
            html_content = f.read()

        return extract_text(html_content)


def main():
    """CLI interface for HTML extraction."""
    import argparse
    import sys

    from .observability import LOGGING_HELP, setup_logging
    from .storage import StorageError, now_rfc3339, save_json

    parser = argparse.ArgumentParser(description="Extract article text from an HTML file or URL",
                                     epilog=LOGGING_HELP)
    parser.add_argument("source", help="HTML file path or URL")
    parser.add_argument("--output", "-o", help="Output JSON file (default: stdout)")
    parser.add_argument("--verbose", "-v", action="store_true",
                       help="Enable verbose logging")

    args = parser.parse_args()
    setup_logging(args.verbose)

    extractor = HTMLExtractor()

    if args.source.startswith(('http://', 'https://')):
        result = extractor.extract_from_url(args.source)
    else:
        try:
            result = extractor.extract_from_file(Path(args.source))
        except OSError as e:
            logger.error(f"Cannot read {args.source}: {e}")
            sys.exit(1)

    output_data = {
        'source': args.source,
        'extraction_time': now_rfc3339(),
        **result.to_dict(),
    }

    if args.output:
        try:
            save_json(output_data, args.output)
        except (StorageError, OSError) as e:
            logger.error(f"Cannot write {args.output}: {e}")
            sys.exit(1)
        print(f"Extracted {len(result.text)} chars to {args.output}")
    else:
        import json
        print(json.dumps(output_data, indent=2, ensure_ascii=False))


if __name__ == "__main__":
    main()
