"""
Writes crawl results as JSON.
"""

import json
import logging
from pathlib import Path
from typing import TextIO, Union

from ..crawler.result import CrawlResult


class ResultWriteError(Exception):
    """Raised when a result cannot be written."""
    pass


class ResultWriter:
    """Serializes a CrawlResult, keeping the word counts in rank order."""

    def __init__(self, result: CrawlResult):
        self.result = result
        self.logger = logging.getLogger(__name__)

    def write(self, path: Union[str, Path]):
        """Write the result to a file, creating parent directories."""
        file_path = Path(path)
        try:
            file_path.parent.mkdir(parents=True, exist_ok=True)
            with open(file_path, 'w', encoding='utf-8') as f:
                self.write_stream(f)
        except OSError as e:
            raise ResultWriteError(f"Failed to write result to {file_path}: {e}") from e

        self.logger.info(f"Result written to {file_path}")

    def write_stream(self, stream: TextIO):
        json.dump(self.result.to_dict(), stream, ensure_ascii=False, indent=2)
        stream.write('\n')
