"""
Crawl result container.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping


@dataclass(frozen=True)
class CrawlResult:
    """Ranked word counts and the number of distinct URLs visited."""
    word_counts: Mapping[str, int] = field(default_factory=dict)
    urls_visited: int = 0

    def __post_init__(self):
        # Freeze a copy; iteration order is the rank order
        object.__setattr__(self, 'word_counts', MappingProxyType(dict(self.word_counts)))

    def to_dict(self) -> Dict[str, Any]:
        return {
            'wordCounts': dict(self.word_counts),
            'urlsVisited': self.urls_visited,
        }
