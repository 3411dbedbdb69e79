"""Ranking tests."""

import pytest

from wordcrawler.crawler.ranker import rank


def test_orders_by_count_then_length_then_alphabet():
    counts = {"a": 2, "bb": 2, "ccc": 1}

    assert list(rank(counts, 3).items()) == [("bb", 2), ("a", 2), ("ccc", 1)]


def test_alphabetical_tie_break():
    counts = {"pear": 5, "kiwi": 5, "plum": 5, "fig": 9}

    assert list(rank(counts, 10)) == ["fig", "kiwi", "pear", "plum"]


def test_caps_at_popular_word_count():
    counts = {"one": 1, "two": 2, "three": 3, "four": 4}

    assert list(rank(counts, 2).items()) == [("four", 4), ("three", 3)]


@pytest.mark.parametrize("top_n", [0, -1])
def test_non_positive_top_n_is_empty(top_n):
    assert rank({"word": 1}, top_n) == {}


def test_top_n_larger_than_vocabulary_returns_everything():
    counts = {"x": 1, "yy": 1}

    assert rank(counts, 50) == {"yy": 1, "x": 1}


def test_empty_counts():
    assert rank({}, 5) == {}


def test_rank_is_idempotent_when_nothing_is_dropped():
    counts = {"alpha": 3, "be": 3, "c": 7, "delta": 1, "eps": 3}
    once = rank(counts, len(counts))

    assert list(rank(once, len(counts)).items()) == list(once.items())


def test_does_not_modify_input():
    counts = {"b": 1, "a": 2}
    rank(counts, 1)

    assert counts == {"b": 1, "a": 2}
