import socket
import sys
import time

import pytest
import requests
from urllib3.exceptions import MaxRetryError, ReadTimeoutError

from extractor.config import Settings
from extractor.html_extractor import (
    EMPTY_RESULT_REASON,
    ExtractionResult,
    HTMLExtractor,
    extract_text,
    main,
)

ARTICLE_PAGE = """<!DOCTYPE html>
<html>
<head>
  <title>City council approves budget</title>
  <style>.share-article { display: inline; }</style>
  <script>window.dataLayer = [{"page": "article"}];</script>
</head>
<body>
  <nav><a href="/">Home</a> | <a href="/news">News</a></nav>
  <div class="share-article"><a href="#">Share</a></div>
  <article class="story">
    <h1>City council approves budget</h1>
    <!-- byline widget -->
    <p>The city council approved the annual budget on Tuesday after a long debate.</p>
    <p>Spending on roads rises by 12% &mdash; the largest increase in a decade.</p>
    <p>Ads</p>
    <p>Council members said the vote &ldquo;reflects what residents asked for&rdquo;.</p>
  </article>
  <footer>&copy; 2025 Example News</footer>
</body>
</html>
"""


class FakeResponse:
    def __init__(self, status_code=200, text=""):
        self.status_code = status_code
        self.text = text


def make_extractor(monkeypatch, response=None, error=None):
    extractor = HTMLExtractor(Settings(fetch_timeout=10, fetch_retries=0))
    calls = []

    def fake_get(url, timeout=None):
        calls.append((url, timeout))
        if error is not None:
            raise error
        return response

    monkeypatch.setattr(extractor.session, "get", fake_get)
    return extractor, calls


def test_noise_is_stripped_end_to_end():
    html = ("<script>alert(1)</script><article>Hello World, this is the article "
            "body text that is long enough.</article>")
    result = extract_text(html)
    assert result == ExtractionResult(
        text="Hello World, this is the article body text that is long enough.",
        success=True,
    )
    assert result.failure_reason is None


def test_article_page():
    result = extract_text(ARTICLE_PAGE)
    assert result.success
    assert result.text == (
        "City council approves budget\n\n"
        "The city council approved the annual budget on Tuesday after a long debate.\n\n"
        "Spending on roads rises by 12% — the largest increase in a decade.\n\n"
        'Council members said the vote "reflects what residents asked for".'
    )


def test_empty_result_is_a_failure():
    result = extract_text("<html><body><script>var x = 1;</script><p>Hi</p></body></html>")
    assert result.success is False
    assert result.text == ""
    assert result.failure_reason == EMPTY_RESULT_REASON


@pytest.mark.parametrize("html", [
    "",
    "<",
    ">",
    "<<<>>>",
    "<article>",
    "<div class=\"content",
    "&#99999999999; &#x; &",
    "<script>",
    "</body><body>",
    "<!-- <article> -->",
])
def test_malformed_markup_never_raises(html):
    result = extract_text(html)
    assert isinstance(result, ExtractionResult)
    assert result.success == bool(result.text)


def test_result_to_dict():
    assert ExtractionResult(text="abc", success=True).to_dict() == {"text": "abc", "success": True}
    assert ExtractionResult.failure("HTTP status 404").to_dict() == {
        "text": "",
        "success": False,
        "failure_reason": "HTTP status 404",
    }


def test_extract_from_url_success(monkeypatch):
    extractor, calls = make_extractor(monkeypatch, response=FakeResponse(200, ARTICLE_PAGE))
    result = extractor.extract_from_url("https://news.example.com/budget")
    assert result.success
    assert result.text.startswith("City council approves budget")
    assert calls == [("https://news.example.com/budget", 10)]


def test_extract_from_url_non_2xx(monkeypatch):
    extractor, _ = make_extractor(monkeypatch, response=FakeResponse(404, "<p>not found page body</p>"))
    result = extractor.extract_from_url("https://news.example.com/missing")
    assert result == ExtractionResult.failure("HTTP status 404")


def test_extract_from_url_timeout(monkeypatch):
    extractor, _ = make_extractor(monkeypatch, error=requests.Timeout("read timed out"))
    result = extractor.extract_from_url("https://slow.example.com/")
    assert result == ExtractionResult.failure("timed out after 10s")


def test_extract_from_url_connection_error(monkeypatch):
    extractor, _ = make_extractor(monkeypatch, error=requests.ConnectionError("refused"))
    result = extractor.extract_from_url("https://down.example.com/")
    assert not result.success
    assert result.failure_reason.startswith("request failed: ")


def test_extract_from_url_empty(monkeypatch):
    extractor, calls = make_extractor(monkeypatch, response=FakeResponse(200, ARTICLE_PAGE))
    assert extractor.extract_from_url("") == ExtractionResult.failure("empty URL")
    assert calls == []


def test_extract_from_file(tmp_path):
    page = tmp_path / "page.html"
    page.write_text(ARTICLE_PAGE, encoding="utf-8")
    result = HTMLExtractor(Settings()).extract_from_file(page)
    assert result.success
    with pytest.raises(FileNotFoundError):
        HTMLExtractor(Settings()).extract_from_file(tmp_path / "missing.html")


def test_extract_from_url_wrapped_read_timeout(monkeypatch):
    url = "https://slow.example.com/"
    error = requests.ConnectionError(MaxRetryError(None, url, ReadTimeoutError(None, url, "read timed out")))
    extractor, _ = make_extractor(monkeypatch, error=error)
    assert extractor.extract_from_url(url) == ExtractionResult.failure("timed out after 10s")


def test_silent_server_is_reported_as_timeout():
    server = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    server.bind(("127.0.0.1", 0))
    server.listen(1)
    port = server.getsockname()[1]
    extractor = HTMLExtractor(Settings(fetch_timeout=1, fetch_retries=2))
    extractor.session.trust_env = False
    try:
        started = time.perf_counter()
        result = extractor.extract_from_url(f"http://127.0.0.1:{port}/article")
        elapsed = time.perf_counter() - started
    finally:
        extractor.session.close()
        server.close()

    assert result == ExtractionResult.failure("timed out after 1s")
    # Read timeouts are not retried, so the wait stays near one fetch_timeout
    assert elapsed < 2.5


def test_cli_missing_file_exits_with_error(tmp_path, monkeypatch, capsys):
    monkeypatch.setattr(sys, "argv", ["news-relay-page", str(tmp_path / "missing.html")])
    with pytest.raises(SystemExit) as excinfo:
        main()
    assert excinfo.value.code == 1
    assert capsys.readouterr().out == ""


def test_cli_writes_output_file(tmp_path, monkeypatch):
    page = tmp_path / "page.html"
    page.write_text(ARTICLE_PAGE, encoding="utf-8")
    output = tmp_path / "out.json"
    monkeypatch.setattr(sys, "argv", ["news-relay-page", str(page), "-o", str(output)])
    main()
    assert '"success": true' in output.read_text(encoding="utf-8")


def test_cli_unwritable_output_exits_with_error(tmp_path, monkeypatch):
    page = tmp_path / "page.html"
    page.write_text(ARTICLE_PAGE, encoding="utf-8")
    output = tmp_path / "no-such-dir" / "out.json"
    monkeypatch.setattr(sys, "argv", ["news-relay-page", str(page), "-o", str(output)])
    with pytest.raises(SystemExit) as excinfo:
        main()
    assert excinfo.value.code == 1
