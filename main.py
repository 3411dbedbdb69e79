#!/usr/bin/env python3
"""
Main entry point for the word crawler.
"""

import asyncio
import argparse
import logging
import sys
from dataclasses import asdict
from typing import List, Optional

from wordcrawler import __version__
from wordcrawler.crawler.engine import CrawlerEngine
from wordcrawler.crawler.fetcher import WebFetcher
from wordcrawler.crawler.parser import ContentParser, HtmlPageParser
from wordcrawler.crawler.result import CrawlResult
from wordcrawler.storage.result_writer import ResultWriter, ResultWriteError
from wordcrawler.utils.config import Config, ConfigError, load_config
from wordcrawler.utils.logger import setup_logging
from wordcrawler.utils.monitoring import CrawlMetrics, start_metrics_server


class CrawlerApp:
    """Main application class for the word crawler."""

    def __init__(self):
        self.logger = logging.getLogger(__name__)

    async def crawl(self, config: Config, seed_urls: List[str]) -> CrawlResult:
        """Run one crawl with the HTML fetcher and parser."""
        crawler_config = config.crawler
        metrics = CrawlMetrics()
        if config.monitoring.metrics_enabled:
            start_metrics_server(metrics, config.monitoring.prometheus_port)

        content_parser = ContentParser(ignored_words=crawler_config.compiled_ignored_words())

        async with WebFetcher(
            user_agent=crawler_config.user_agent,
            request_timeout=crawler_config.request_timeout,
            max_connections=crawler_config.target_parallelism,
            max_content_bytes=crawler_config.max_content_bytes
        ) as fetcher:
            engine = CrawlerEngine.from_config(
                crawler_config,
                HtmlPageParser(fetcher, content_parser),
                metrics=metrics
            )
            result = await engine.crawl_async(seed_urls)
            self.logger.info(f"Fetcher stats: {fetcher.get_stats()}")

        if engine.last_stats is not None:
            self.logger.info(f"Crawl stats: {engine.last_stats.to_dict()}")
        return result

    def run(self, config_path: str, seeds: Optional[List[str]] = None,
            output: Optional[str] = None) -> int:
        """Load configuration, crawl and write the result. Returns an exit code."""
        try:
            config = load_config(config_path)
        except (FileNotFoundError, ConfigError) as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1

        setup_logging(asdict(config.logging), enable_json=config.logging.json)

        seed_urls = seeds or config.crawler.seed_urls
        if not seed_urls:
            self.logger.error("No seed URLs given in configuration or on the command line")
            return 1

        self.logger.info("=== WORD CRAWLER STARTING ===")
        self.logger.info(f"Configuration loaded from: {config_path}")
        self.logger.info(f"Seed URLs: {seed_urls}")

        try:
            result = asyncio.run(self.crawl(config, seed_urls))
        except OSError as e:
            self.logger.error(f"Crawl failed: {e}")
            return 1

        writer = ResultWriter(result)
        result_path = output or config.output.result_path
        try:
            if result_path:
                writer.write(result_path)
            else:
                writer.write_stream(sys.stdout)
        except ResultWriteError as e:
            self.logger.error(str(e))
            return 1

        self.logger.info("=== WORD CRAWLER FINISHED ===")
        return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Parallel word-frequency crawler",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py                                  # Run with default config.yaml
  python main.py --config my_config.yaml          # Run with custom config
  python main.py --seed https://example.com/      # Override the seed URLs
  python main.py --output results/words.json      # Write the result to a file
        """
    )

    parser.add_argument(
        '--config',
        default='config.yaml',
        help='Path to configuration file (default: config.yaml)'
    )

    parser.add_argument(
        '--seed',
        action='append',
        dest='seeds',
        help='Seed URL; may be repeated and replaces the configured seeds'
    )

    parser.add_argument(
        '--output',
        help='Path of the JSON result file (default: configured path or stdout)'
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'wordcrawler {__version__}'
    )

    args = parser.parse_args(argv)

    app = CrawlerApp()
    try:
        return app.run(config_path=args.config, seeds=args.seeds, output=args.output)
    except KeyboardInterrupt:
        print("\nInterrupted by user", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())
