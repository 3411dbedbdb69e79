"""
Word crawler core components.
"""

from .engine import CrawlerEngine, CrawlTask, host_parallelism
from .fetcher import WebFetcher, FetchResult, FetchError
from .parser import ContentParser, HtmlPageParser, PageContent, PageParser
from .ranker import rank
from .result import CrawlResult
from .state import Clock, SharedCrawlState, SystemClock

__all__ = [
    'CrawlerEngine', 'CrawlTask', 'host_parallelism',
    'WebFetcher', 'FetchResult', 'FetchError',
    'ContentParser', 'HtmlPageParser', 'PageContent', 'PageParser',
    'rank', 'CrawlResult',
    'Clock', 'SharedCrawlState', 'SystemClock'
]
