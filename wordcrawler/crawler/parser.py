"""
Page parser that turns fetched HTML into word counts and outgoing links.
"""

import asyncio
import re
import logging
from collections import Counter
from typing import Awaitable, Dict, List, Optional, Pattern, Protocol, Sequence, Union
from urllib.parse import urljoin, urlparse, urlunparse
from dataclasses import dataclass, field
from bs4 import BeautifulSoup, Comment

from .fetcher import FetchError, WebFetcher


CRAWLABLE_SCHEMES = ('http', 'https', 'file')


@dataclass
class PageContent:
    """Words and links extracted from a single page."""
    word_counts: Dict[str, int] = field(default_factory=dict)
    links: List[str] = field(default_factory=list)


class PageParser(Protocol):
    """
    Fetch-and-parse collaborator used by the crawler engine.

    parse may be a plain method or a coroutine method.
    """

    def parse(self, url: str) -> Union[PageContent, Awaitable[PageContent]]:
        ...


class ContentParser:
    """
    Parses HTML content into lower-cased word counts and absolute links.
    """

    def __init__(self, ignored_words: Optional[Sequence[Pattern]] = None):
        self.ignored_words = list(ignored_words or [])
        self.logger = logging.getLogger(__name__)

        self.word_pattern = re.compile(r'[^\W_]+')

    def parse(self, url: str, html_content: str) -> PageContent:
        """
        Parse HTML content.

        Args:
            url: The URL of the page, used to resolve relative links
            html_content: Raw HTML content

        Returns:
            PageContent with this page's word counts and links in document order
        """
        soup = BeautifulSoup(html_content, 'lxml')

        for script in soup(["script", "style", "noscript"]):
            script.decompose()

        for comment in soup.find_all(string=lambda text: isinstance(text, Comment)):
            comment.extract()

        links = self._extract_links(soup, url)
        word_counts = self._count_words(soup.get_text(separator=' '))

        self.logger.debug(f"Parsed {url}: {len(word_counts)} distinct words, {len(links)} links")
        return PageContent(word_counts=word_counts, links=links)

    def _count_words(self, text: str) -> Dict[str, int]:
        counts: Counter = Counter()
        for word in self.word_pattern.findall(text.lower()):
            if self._is_ignored(word):
                continue
            counts[word] += 1
        return dict(counts)

    def _is_ignored(self, word: str) -> bool:
        return any(pattern.fullmatch(word) for pattern in self.ignored_words)

    def _extract_links(self, soup: BeautifulSoup, base_url: str) -> List[str]:
        """Extract and normalize links, keeping first-seen order."""
        links: Dict[str, None] = {}

        for link in soup.find_all('a', href=True):
            href = link['href'].strip()
            if not href or href.startswith('#'):
                continue

            absolute_url = self._normalize_url(urljoin(base_url, href))
            if self._is_valid_url(absolute_url):
                links.setdefault(absolute_url, None)

        return list(links)

    def _normalize_url(self, url: str) -> str:
        """Normalize URL by removing the fragment and lower-casing the host."""
        parsed = urlparse(url)
        return urlunparse((
            parsed.scheme,
            parsed.netloc.lower(),
            parsed.path,
            parsed.params,
            parsed.query,
            ''
        ))

    def _is_valid_url(self, url: str) -> bool:
        parsed = urlparse(url)
        if parsed.scheme not in CRAWLABLE_SCHEMES:
            return False
        # file: URLs have no host
        return parsed.scheme == 'file' or bool(parsed.netloc)


class HtmlPageParser:
    """
    PageParser that fetches a URL and parses the returned HTML.

    Raises FetchError when the page cannot be retrieved.
    """

    def __init__(self, fetcher: WebFetcher, content_parser: ContentParser):
        self.fetcher = fetcher
        self.content_parser = content_parser

    async def parse(self, url: str) -> PageContent:
        result = await self.fetcher.fetch(url)
        if not result.ok:
            raise FetchError(f"Failed to fetch {url}: {result.error}")

        # BeautifulSoup is CPU bound; keep it off the event loop
        return await asyncio.to_thread(self.content_parser.parse, url, result.content)
