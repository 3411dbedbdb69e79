"""
Ranking of accumulated word counts.
"""

from typing import Dict, Mapping, Tuple


def _sort_key(item: Tuple[str, int]) -> Tuple[int, int, str]:
    word, count = item
    # Count descending, then longer words first, then alphabetical
    return (-count, -len(word), word)


def rank(word_counts: Mapping[str, int], popular_word_count: int) -> Dict[str, int]:
    """
    Sort word counts and keep the most popular entries.

    Args:
        word_counts: Mapping of word to frequency
        popular_word_count: Maximum number of entries to return

    Returns:
        Insertion-ordered dict holding at most popular_word_count entries
    """
    if popular_word_count <= 0:
        return {}

    ranked = sorted(word_counts.items(), key=_sort_key)
    return dict(ranked[:popular_word_count])
