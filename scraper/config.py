from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Comma-separated list of RSS/Atom feed URLs
    feed_urls: str = "https://g1.globo.com/rss/g1/"

    # Feed polling
    feed_timeout: int = 15
    feed_delay_seconds: float = 0.3
    user_agent: str = "news-relay/0.1 (+feed collector)"

    # Output of the collect stage
    metadata_file: str = "rss_feeds_metadata.json"

    model_config = SettingsConfigDict(
        env_prefix="",  # read variables directly
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    def list_feed_urls(self) -> List[str]:
        return [u.strip() for u in self.feed_urls.split(",") if u.strip()]
