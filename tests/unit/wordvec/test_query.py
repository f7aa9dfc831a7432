"""
Unit tests for WordVectors queries.

Tests for:
- Cosine nearest neighbors and self-exclusion
- Analogy queries, unresolved words and degenerate input
- Concurrent cosine batches
"""

import io

import pytest

from wordvec.query import WordVectors
from wordvec.vocabulary import VocabularyStore


@pytest.fixture
def animals(animal_blob) -> WordVectors:
    return WordVectors.load(io.BytesIO(animal_blob))


@pytest.fixture
def royalty(build_blob, royalty_entries) -> WordVectors:
    return WordVectors.load(io.BytesIO(build_blob(royalty_entries)))


def _words(hits):
    return [hit.word for hit in hits]


class TestCosine:
    """Tests for WordVectors.cosine."""

    def test_single_nearest_neighbor(self, animals):
        """Test that k=1 returns the most similar other word."""
        hits = animals.cosine("cat", 1)

        assert len(hits) == 1
        assert hits[0].word == "kitten"
        assert hits[0].rank == 1
        assert hits[0].score > 0.99

    def test_ranking_order(self, animals):
        """Test that neighbors are ranked by similarity."""
        hits = animals.cosine("car", 3)

        assert _words(hits) == ["dog", "kitten", "cat"]
        scores = [hit.score for hit in hits]
        assert scores == sorted(scores, reverse=True)

    def test_query_word_never_returned(self, animals):
        """Test self-exclusion for every word in the vocabulary."""
        for word in animals.words():
            hits = animals.cosine(word, 10)
            assert word not in _words(hits)

    def test_k_larger_than_vocabulary(self, animals):
        """Test that a small vocabulary returns fewer than k hits."""
        hits = animals.cosine("cat", 10)

        assert len(hits) == 3

    def test_exactly_k_hits(self, animals):
        """Test that k hits are returned when enough words exist."""
        assert len(animals.cosine("dog", 2)) == 2

    def test_unknown_word(self, animals):
        """Test that an unknown word returns None without raising."""
        assert animals.cosine("somenotexistingword", 10) is None

    def test_zero_k(self, animals):
        """Test that k=0 returns an empty list, not None."""
        assert animals.cosine("cat", 0) == []

    def test_scores_are_cosine_similarity(self, animals):
        """Test a score against the hand-computed cosine."""
        hits = animals.cosine("cat", 3)
        dog = next(hit for hit in hits if hit.word == "dog")

        # cat = (0.6, 0.8, 0), dog = (0, 5, 1) / sqrt(26)
        assert abs(dog.score - 0.8 * 5 / 26 ** 0.5) < 1e-5

    def test_tuple_view(self, animals):
        """Test the (word, score) view of a hit."""
        word, score = animals.cosine("cat", 1)[0].as_tuple()

        assert word == "kitten"
        assert isinstance(score, float)


class TestAnalogy:
    """Tests for WordVectors.analogy."""

    def test_king_woman_man(self, royalty):
        """Test the classic king - man + woman analogy."""
        hits = royalty.analogy(["king", "woman"], ["man"], 5)

        assert hits[0].word == "queen"
        assert _words(hits) == ["queen", "apple", "prince"]

    def test_input_words_excluded(self, royalty):
        """Test that no query word appears in the answer."""
        hits = royalty.analogy(["king", "woman"], ["man"], 10)

        for word in ("king", "woman", "man"):
            assert word not in _words(hits)

    def test_unresolved_word_dropped(self, build_blob, royalty_entries):
        """Test that an unknown word is dropped from the mean but still excluded."""
        entries = [entry for entry in royalty_entries if entry[0] != "woman"]
        model = WordVectors.load(io.BytesIO(build_blob(entries)))

        hits = model.analogy(["king", "woman"], ["man"], 5)
        baseline = model.analogy(["king"], ["man"], 5)

        assert "woman" not in _words(hits)
        assert _words(hits) == _words(baseline)
        for hit, expected in zip(hits, baseline):
            assert abs(hit.score - expected.score) < 1e-6

    def test_unresolved_word_still_excluded(self):
        """Test exclusion of a query word that is absent from the vector set."""
        model = WordVectors(VocabularyStore.from_pairs([
            ("north", [0.0, 1.0]),
            ("south", [0.0, -1.0]),
            ("east", [1.0, 0.0]),
        ]))

        hits = model.analogy(["north", "ghost"], [], 3)

        assert _words(hits) == ["east", "south"]

    def test_negative_only(self, royalty):
        """Test an analogy with only negative words."""
        hits = royalty.analogy([], ["man"], 1)

        assert _words(hits) == ["woman"]
        assert abs(hits[0].score - 1.0) < 1e-5

    def test_empty_lists(self, royalty):
        """Test that empty positive and negative lists return None."""
        assert royalty.analogy([], [], 5) is None

    def test_no_resolvable_words(self, royalty):
        """Test that all-unknown input returns None instead of NaN scores."""
        assert royalty.analogy(["dragon"], ["wizard"], 5) is None

    def test_k_limit(self, royalty):
        """Test that k limits analogy results."""
        assert len(royalty.analogy(["king"], [], 2)) == 2


class TestCosineMany:
    """Tests for concurrent cosine batches."""

    def test_matches_individual_queries(self, animals):
        """Test that batched results equal one-at-a-time results."""
        words = ["cat", "dog", "car", "kitten", "unknown"]

        results = animals.cosine_many(words, 2, max_workers=3)

        assert list(results) == words
        for word in words:
            assert results[word] == animals.cosine(word, 2)

    def test_empty_batch(self, animals):
        """Test an empty batch."""
        assert animals.cosine_many([], 5) == {}


class TestDelegation:
    """Tests for store accessors exposed on WordVectors."""

    def test_accessors(self, animals):
        """Test counts, lookups and stats."""
        assert animals.word_count() == 4
        assert animals.vector_size() == 3
        assert "cat" in animals
        assert animals.get_vector("nope") is None
        assert animals.stats.is_complete is True
        assert animals.store.word_count() == 4

    def test_load_file(self, vector_file):
        """Test the file constructor."""
        model = WordVectors.load_file(vector_file)

        assert _words(model.cosine("cat", 1)) == ["kitten"]
