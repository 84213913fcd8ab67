"""
Tests for the edit-distance matcher.
"""
from collections import namedtuple

import pytest

from companion.preprocess import distance as distance_module
from companion.preprocess.distance import closest_candidate, edit_distance, is_transposition

Cand = namedtuple("Cand", ["match", "name"])


class TestEditDistance:

    def test_classic_example(self):
        assert edit_distance("kitten", "sitting") == 3

    @pytest.mark.parametrize("word", ["", "a", "overwhelmed", "thier"])
    def test_identity_is_zero(self, word):
        assert edit_distance(word, word) == 0

    @pytest.mark.parametrize("a,b", [
        ("thier", "their"),
        ("flaw", "lawn"),
        ("", "abc"),
        ("recieve", "receive"),
    ])
    def test_symmetric_and_bounded(self, a, b):
        d = edit_distance(a, b)
        assert d == edit_distance(b, a)
        assert d <= max(len(a), len(b))

    def test_empty_string_costs_full_length(self):
        assert edit_distance("", "hello") == 5
        assert edit_distance("hello", "") == 5
        assert edit_distance("", "") == 0

    def test_single_operations(self):
        assert edit_distance("help", "helps") == 1   # insertion
        assert edit_distance("helps", "help") == 1   # deletion
        assert edit_distance("help", "held") == 1    # substitution
        assert edit_distance("thier", "their") == 2  # transposition is two edits


class TestClosestCandidate:

    def test_nearest_within_budget(self):
        found = closest_candidate("overwhelmd", [Cand("tired", "t"), Cand("overwhelmed", "o")], 2)
        assert found is not None
        candidate, distance = found
        assert candidate.name == "o"
        assert distance == 1

    def test_nothing_within_budget(self):
        assert closest_candidate("xylophone", [Cand("the", "t"), Cand("help", "h")], 2) is None

    def test_first_candidate_wins_ties(self):
        candidates = [Cand("abcdx", "first"), Cand("abcdy", "second")]
        candidate, distance = closest_candidate("abcdz", candidates, 1)
        assert candidate.name == "first"
        assert distance == 1

    def test_closer_later_candidate_beats_earlier(self):
        candidates = [Cand("abxxx", "far"), Cand("abcdy", "near")]
        candidate, _ = closest_candidate("abcdz", candidates, 3)
        assert candidate.name == "near"

    def test_length_gap_skips_candidate(self, monkeypatch):
        compared = []

        def recording_distance(a, b, limit=None):
            compared.append(b)
            return edit_distance(a, b, limit)

        monkeypatch.setattr(distance_module, "edit_distance", recording_distance)
        candidates = [Cand("x" * 50, "long"), Cand("abcdx", "near")]
        candidate, _ = closest_candidate("abcde", candidates, 2)
        assert candidate.name == "near"
        assert compared == ["abcdx"]


class TestEditDistanceLimit:

    def test_limit_stops_early(self):
        assert edit_distance("zqxjvzqxjv", "overwhelmed", limit=2) == 3

    def test_length_gap_over_limit(self):
        assert edit_distance("q" * 4000, "the", limit=2) == 3

    def test_within_limit_is_exact(self):
        assert edit_distance("overwhelmd", "overwhelmed", limit=2) == 1
        assert edit_distance("kitten", "sitting", limit=3) == 3

    def test_result_is_capped_at_limit(self):
        # "kitten" -> "sitting" is 3 edits
        assert edit_distance("kitten", "sitting", limit=1) == 2


class TestIsTransposition:

    @pytest.mark.parametrize("a,b", [("tierd", "tired"), ("thier", "their"), ("teh", "the")])
    def test_adjacent_swap(self, a, b):
        assert is_transposition(a, b) is True

    @pytest.mark.parametrize("a,b", [
        ("water", "after"),
        ("tired", "tired"),
        ("tried", "tired2"),
        ("abcde", "cbade"),
    ])
    def test_not_a_swap(self, a, b):
        assert is_transposition(a, b) is False
