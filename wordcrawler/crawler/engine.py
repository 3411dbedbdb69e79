"""
Parallel crawler engine.

A crawl is a tree of CrawlTask coroutines. Each task processes one URL,
merges its words into the shared state and then waits for one child task
per outgoing link. The number of pages being fetched and parsed at once is
bounded by the engine's parallelism.
"""

import asyncio
import inspect
import logging
import time
import uuid
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import timedelta
from typing import Iterable, List, Optional, Pattern, Sequence, Union

import psutil

from .parser import PageContent, PageParser
from .ranker import rank
from .result import CrawlResult
from .state import Clock, SharedCrawlState, SystemClock
from ..utils.config import ConfigError, CrawlerConfig, compile_patterns
from ..utils.logger import CrawlerLogAdapter, get_crawler_logger
from ..utils.monitoring import CrawlMetrics, CrawlStats


def host_parallelism() -> int:
    """Number of logical CPUs this process may run on."""
    try:
        return len(psutil.Process().cpu_affinity()) or 1
    except (AttributeError, psutil.Error):
        # cpu_affinity is not available on macOS
        return psutil.cpu_count(logical=True) or 1


class _CrawlRun:
    """Everything the tasks of one crawl() invocation share."""

    def __init__(self, engine: 'CrawlerEngine', state: SharedCrawlState,
                 executor: ThreadPoolExecutor, logger: CrawlerLogAdapter):
        self.engine = engine
        self.state = state
        self.executor = executor
        self.logger = logger
        self.stats = CrawlStats()
        self.slots = asyncio.Semaphore(engine.parallelism)

    def skip(self, url: str, reason: str) -> bool:
        self.stats.skipped[reason] += 1
        self.engine.metrics.record_skipped(reason)
        self.logger.log_url_event(logging.DEBUG, url, f"Skipping {url} ({reason})")
        return False

    def is_ignored(self, url: str) -> bool:
        return any(pattern.fullmatch(url) for pattern in self.engine.ignored_urls)

    async def _parse(self, url: str) -> PageContent:
        parser = self.engine.page_parser
        if self.engine.parse_is_async:
            return await parser.parse(url)
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self.executor, parser.parse, url)

    async def process(self, url: str) -> Optional[PageContent]:
        """
        Fetch, parse and merge one claimed URL.

        Returns None if the page failed; the failure is logged and counted
        and does not affect any other URL.
        """
        start_time = time.monotonic()
        async with self.slots:
            try:
                content = await self._parse(url)
                self.state.merge(content.word_counts)
            except Exception as e:
                self.stats.parse_errors += 1
                self.engine.metrics.record_error()
                self.logger.log_url_event(logging.ERROR, url, f"Failed to process {url}: {e}")
                return None

        self.stats.pages_parsed += 1
        self.engine.metrics.record_parsed(time.monotonic() - start_time)
        self.logger.log_url_event(
            logging.DEBUG, url,
            f"Processed {url}: {len(content.word_counts)} words, {len(content.links)} links"
        )
        return content


@dataclass(frozen=True)
class CrawlTask:
    """
    Recursive unit of work for one URL at a given remaining depth.

    Returns True from run() when the URL was claimed by this task.
    """
    url: str
    remaining_depth: int
    crawl: _CrawlRun

    async def run(self) -> bool:
        crawl = self.crawl

        if self.remaining_depth == 0:
            return crawl.skip(self.url, 'depth')
        if crawl.state.is_expired(crawl.engine.clock.now()):
            return crawl.skip(self.url, 'deadline')
        if crawl.is_ignored(self.url):
            return crawl.skip(self.url, 'ignored')

        # Dedup gate; no await between the check and the insert
        if not crawl.state.try_visit(self.url):
            return crawl.skip(self.url, 'duplicate')

        content = await crawl.process(self.url)
        if content is None:
            return True

        children = [
            CrawlTask(link, self.remaining_depth - 1, crawl)
            for link in content.links
        ]
        if children:
            await asyncio.gather(*(child.run() for child in children))
        return True


class CrawlerEngine:
    """
    Crawls from seed URLs in parallel and ranks the words found.

    Args:
        page_parser: Object whose parse(url) returns PageContent, either
            directly or as a coroutine
        timeout: Crawl deadline measured from the start of crawl()
        popular_word_count: Number of ranked words to return
        target_parallelism: Requested worker pool size
        ignored_urls: Regex patterns; URLs fully matching any are skipped
        max_depth: Maximum number of link hops, seeds included
        clock: Time source for the deadline
        max_parallelism: Upper bound for the pool size, defaults to the
            host CPU count
        metrics: Prometheus metrics sink
    """

    def __init__(self,
                 page_parser: PageParser,
                 timeout: Union[float, timedelta],
                 popular_word_count: int,
                 target_parallelism: int,
                 ignored_urls: Sequence[Union[str, Pattern]] = (),
                 max_depth: int = 1,
                 clock: Optional[Clock] = None,
                 max_parallelism: Optional[int] = None,
                 metrics: Optional[CrawlMetrics] = None):
        if isinstance(timeout, timedelta):
            timeout = timeout.total_seconds()

        if timeout < 0:
            raise ConfigError("timeout must be non-negative")
        if popular_word_count < 0:
            raise ConfigError("popular_word_count must be non-negative")
        if target_parallelism < 1:
            raise ConfigError("target_parallelism must be at least 1")
        if max_depth < 0:
            raise ConfigError("max_depth must be non-negative")
        if max_parallelism is not None and max_parallelism < 1:
            raise ConfigError("max_parallelism must be at least 1")

        self.page_parser = page_parser
        self.timeout = float(timeout)
        self.popular_word_count = popular_word_count
        self.ignored_urls: List[Pattern] = compile_patterns(ignored_urls, 'ignored_urls')
        self.max_depth = max_depth
        self.clock = clock or SystemClock()
        self.metrics = metrics or CrawlMetrics()

        self.max_parallelism = max_parallelism or host_parallelism()
        self.parallelism = min(target_parallelism, self.max_parallelism)

        self.parse_is_async = inspect.iscoroutinefunction(page_parser.parse)
        self.last_stats: Optional[CrawlStats] = None
        self.logger = logging.getLogger(__name__)
        self.logger.debug(
            f"Worker pool sized to {self.parallelism} "
            f"(requested {target_parallelism}, host limit {self.max_parallelism})"
        )

    @classmethod
    def from_config(cls, config: CrawlerConfig, page_parser: PageParser, **kwargs) -> 'CrawlerEngine':
        """Build an engine from the crawler section of the configuration."""
        return cls(
            page_parser=page_parser,
            timeout=config.timeout_seconds,
            popular_word_count=config.popular_word_count,
            target_parallelism=config.target_parallelism,
            ignored_urls=config.compiled_ignored_urls(),
            max_depth=config.max_depth,
            **kwargs
        )

    def crawl(self, seed_urls: Iterable[str]) -> CrawlResult:
        """Run a crawl to completion on a fresh event loop."""
        return asyncio.run(self.crawl_async(seed_urls))

    async def crawl_async(self, seed_urls: Iterable[str]) -> CrawlResult:
        """
        Crawl from the seed URLs until every task completes.

        Returns:
            CrawlResult with the ranked word counts and distinct URLs visited
        """
        seeds = list(seed_urls)
        state = SharedCrawlState(deadline=self.clock.now() + self.timeout)
        logger = get_crawler_logger(__name__, crawl_id=uuid.uuid4().hex[:8])

        logger.info(
            f"Starting crawl of {len(seeds)} seed URLs "
            f"(depth={self.max_depth}, parallelism={self.parallelism}, timeout={self.timeout}s)"
        )

        with ThreadPoolExecutor(max_workers=self.parallelism,
                                thread_name_prefix='crawler') as executor:
            crawl = _CrawlRun(self, state, executor, logger)
            roots = [CrawlTask(url, self.max_depth, crawl) for url in seeds]
            await asyncio.gather(*(root.run() for root in roots))

        self.last_stats = crawl.stats
        logger.info(
            f"Crawl finished: {state.urls_visited} URLs visited, "
            f"{crawl.stats.pages_parsed} parsed, {crawl.stats.parse_errors} errors "
            f"in {crawl.stats.elapsed_time:.2f}s"
        )

        counts = state.word_counts()
        if not counts:
            return CrawlResult(word_counts={}, urls_visited=state.urls_visited)

        return CrawlResult(
            word_counts=rank(counts, self.popular_word_count),
            urls_visited=state.urls_visited
        )
