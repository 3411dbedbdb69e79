"""ContentParser, WebFetcher and HtmlPageParser tests."""

import re

import pytest

from wordcrawler.crawler.engine import CrawlerEngine
from wordcrawler.crawler.fetcher import FetchError, WebFetcher
from wordcrawler.crawler.parser import ContentParser, HtmlPageParser

from fakes import FakeClock

HTML = """
<html>
  <head><title>Hello World</title><style>body { color: red; }</style></head>
  <body>
    <script>var hidden = "secret";</script>
    <!-- comment words -->
    <p>The quick brown fox. The LAZY dog, the end!</p>
    <a href="/about">About</a>
    <a href="https://Example.COM/path#section">Path</a>
    <a href="/about">About again</a>
    <a href="#top">Top</a>
    <a href="mailto:someone@example.com">Mail</a>
    <a href="javascript:void(0)">Nothing</a>
  </body>
</html>
"""


def test_counts_lowercased_visible_words():
    content = ContentParser().parse("https://site.test/index.html", HTML)

    assert content.word_counts["the"] == 3
    assert content.word_counts["lazy"] == 1
    assert content.word_counts["hello"] == 1
    assert "secret" not in content.word_counts
    assert "color" not in content.word_counts
    assert "comment" not in content.word_counts


def test_ignored_words_use_full_match():
    parser = ContentParser(ignored_words=[re.compile(r"the"), re.compile(r"^.{1,3}$")])
    content = parser.parse("https://site.test/", HTML)

    assert "the" not in content.word_counts
    assert "fox" not in content.word_counts
    assert content.word_counts["quick"] == 1


def test_links_are_resolved_normalized_and_deduplicated():
    content = ContentParser().parse("https://site.test/dir/index.html", HTML)

    assert content.links == [
        "https://site.test/about",
        "https://example.com/path",
    ]


@pytest.mark.asyncio
async def test_fetcher_reads_file_urls(tmp_path):
    target = tmp_path / "page.html"
    target.write_text("<p>local page</p>", encoding="utf-8")

    fetcher = WebFetcher(user_agent="test")
    result = await fetcher.fetch(target.as_uri())

    assert result.ok
    assert "local page" in result.content
    assert fetcher.session is None


@pytest.mark.asyncio
async def test_fetcher_reports_missing_file(tmp_path):
    result = await WebFetcher(user_agent="test").fetch((tmp_path / "missing.html").as_uri())

    assert not result.ok
    assert result.error.startswith("File error")


@pytest.mark.asyncio
async def test_fetcher_rejects_oversized_file(tmp_path):
    target = tmp_path / "big.html"
    target.write_text("x" * 100, encoding="utf-8")

    result = await WebFetcher(user_agent="test", max_content_bytes=10).fetch(target.as_uri())

    assert result.error == "Content too large"


@pytest.mark.asyncio
async def test_fetcher_rejects_unknown_scheme():
    result = await WebFetcher(user_agent="test").fetch("ftp://example.com/file")

    assert not result.ok
    assert "Unsupported scheme" in result.error


@pytest.mark.asyncio
async def test_html_page_parser_raises_on_fetch_failure(tmp_path):
    parser = HtmlPageParser(WebFetcher(user_agent="test"), ContentParser())

    with pytest.raises(FetchError):
        await parser.parse((tmp_path / "nope.html").as_uri())


@pytest.mark.asyncio
async def test_engine_crawls_local_site(tmp_path):
    (tmp_path / "index.html").write_text(
        '<p>home words words</p><a href="one.html">1</a><a href="two.html">2</a>',
        encoding="utf-8",
    )
    (tmp_path / "one.html").write_text(
        '<p>words in one</p><a href="two.html">2</a><a href="missing.html">x</a>',
        encoding="utf-8",
    )
    (tmp_path / "two.html").write_text(
        '<p>words in two</p><a href="index.html">home</a>',
        encoding="utf-8",
    )

    async with WebFetcher(user_agent="test") as fetcher:
        engine = CrawlerEngine(
            HtmlPageParser(fetcher, ContentParser()),
            timeout=60,
            popular_word_count=3,
            target_parallelism=2,
            max_depth=5,
            clock=FakeClock(),
            max_parallelism=2,
        )
        result = await engine.crawl_async([(tmp_path / "index.html").as_uri()])

    # missing.html is claimed and fails
    assert result.urls_visited == 4
    assert list(result.word_counts.items()) == [("words", 4), ("home", 2), ("in", 2)]
    assert engine.last_stats.parse_errors == 1
