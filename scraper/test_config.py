from scraper.config import Settings


def test_feed_urls_list_parsing(monkeypatch):
    monkeypatch.setenv("FEED_URLS", "https://a/rss, https://b/rss , ,https://c/rss ")
    s = Settings()
    assert s.list_feed_urls() == ["https://a/rss", "https://b/rss", "https://c/rss"]


def test_defaults(monkeypatch):
    monkeypatch.delenv("FEED_URLS", raising=False)
    s = Settings(_env_file=None)
    assert s.list_feed_urls() == ["https://g1.globo.com/rss/g1/"]
    assert s.feed_delay_seconds == 0.3
    assert s.metadata_file == "rss_feeds_metadata.json"
