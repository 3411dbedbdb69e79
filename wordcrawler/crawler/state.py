"""
Shared state for a single crawl: the visited set and the word counter.

All tasks of one crawl run on the same event loop. The mutating methods
below never suspend, so each call completes before any other task can
observe or modify the state.
"""

import time
from collections import Counter
from typing import Dict, FrozenSet, Mapping, Protocol, Set


class Clock(Protocol):
    """Time source used for deadline checks."""

    def now(self) -> float:
        """Return the current time in seconds."""
        ...


class SystemClock:
    """Clock backed by the monotonic system timer."""

    def now(self) -> float:
        return time.monotonic()


class SharedCrawlState:
    """
    State owned jointly by every task of one crawl.

    The visited set only grows and the counter only receives additive
    updates, so the final contents do not depend on task ordering.
    """

    def __init__(self, deadline: float):
        self._deadline = deadline
        self._visited: Set[str] = set()
        self._counts: Counter = Counter()

    @property
    def deadline(self) -> float:
        return self._deadline

    def is_expired(self, now: float) -> bool:
        """Check whether no new page processing may begin."""
        return now >= self._deadline

    def try_visit(self, url: str) -> bool:
        """
        Claim a URL for processing.

        Returns:
            True if the URL was newly added, False if another task already
            claimed it
        """
        if url in self._visited:
            return False
        self._visited.add(url)
        return True

    def merge(self, word_counts: Mapping[str, int]):
        """
        Add one page's word counts into the shared counter.

        Raises ValueError before anything is added if any count is negative.
        """
        for word, count in word_counts.items():
            if count < 0:
                raise ValueError(f"Negative count {count} for word {word!r}")
        for word, count in word_counts.items():
            self._counts[word] += count

    @property
    def visited(self) -> FrozenSet[str]:
        return frozenset(self._visited)

    @property
    def urls_visited(self) -> int:
        return len(self._visited)

    def word_counts(self) -> Dict[str, int]:
        """Snapshot of the accumulated counts."""
        return dict(self._counts)
