"""Pytest configuration and shared fixtures."""
# ruff: noqa: E402

import sys
from pathlib import Path

# Project root for `wordcrawler`, tests dir for the shared `fakes` module
ROOT = Path(__file__).resolve().parents[1]
for path in (ROOT, ROOT / "tests"):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))


import logging
from typing import Dict

import pytest

from wordcrawler.crawler.parser import PageContent

from fakes import FakeClock, page


# ==================== Fixtures ====================


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def diamond_graph() -> Dict[str, PageContent]:
    """a links to b and c, both of which link to d; d links back to a."""
    return {
        "http://a": page({"alpha": 1, "shared": 1}, "http://b", "http://c"),
        "http://b": page({"beta": 2, "shared": 1}, "http://d"),
        "http://c": page({"gamma": 3, "shared": 1}, "http://d"),
        "http://d": page({"delta": 4, "shared": 1}, "http://a"),
    }


@pytest.fixture
def restore_root_logger():
    """Close and detach handlers installed by setup_logging."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield root
    for handler in list(root.handlers):
        if handler not in handlers:
            handler.close()
            root.removeHandler(handler)
    root.setLevel(level)
