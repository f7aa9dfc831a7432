"""
Word Vector Queries - Nearest neighbors and analogies over a vocabulary.

Implements:
- Cosine nearest neighbors for a single word
- Analogy queries (mean of positive and negated negative vectors)
- Concurrent batches of independent cosine queries

Every query scans the whole vocabulary. The underlying store is read-only,
so queries can run from several threads at once without locking.
"""

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import BinaryIO, Dict, Iterator, List, Optional, Sequence, Set, Union

import numpy as np

from .core.types import LoadStats, SimilarityHit
from .reader import DEFAULT_CHUNK_SIZE
from .similarity import mean, score_all, top_k
from .vocabulary import VocabularyStore


logger = logging.getLogger(__name__)

DEFAULT_MAX_WORKERS = 4


class WordVectors:
    """
    Query interface over a loaded VocabularyStore.

    Example:
        >>> model = WordVectors.load_file("vectors.bin")
        >>> model.cosine("snow", 10)
        [SimilarityHit(word='ice', score=0.71, rank=1), ...]
        >>> model.analogy(["king", "woman"], ["man"], 10)
        [SimilarityHit(word='queen', score=0.58, rank=1), ...]
    """

    def __init__(self, store: VocabularyStore):
        self._store = store

    @classmethod
    def load(cls, stream: BinaryIO, chunk_size: int = DEFAULT_CHUNK_SIZE) -> "WordVectors":
        """Load from a binary vector stream. See VocabularyStore.load."""
        return cls(VocabularyStore.load(stream, chunk_size=chunk_size))

    @classmethod
    def load_file(
        cls,
        path: Union[str, Path],
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ) -> "WordVectors":
        """Load from a binary vector file. See VocabularyStore.load_file."""
        return cls(VocabularyStore.load_file(path, chunk_size=chunk_size))

    @property
    def store(self) -> VocabularyStore:
        return self._store

    @property
    def stats(self) -> LoadStats:
        return self._store.stats

    def get_vector(self, word: str) -> Optional[np.ndarray]:
        return self._store.get_vector(word)

    def word_count(self) -> int:
        return self._store.word_count()

    def vector_size(self) -> int:
        return self._store.vector_size()

    def words(self) -> Iterator[str]:
        return self._store.words()

    def __contains__(self, word: object) -> bool:
        return word in self._store

    def cosine(self, word: str, k: int) -> Optional[List[SimilarityHit]]:
        """
        Find the ``k`` words closest to ``word`` by cosine similarity.

        The query word always scores 1.0 against itself and is removed from
        the ranking explicitly.

        Args:
            word: Query word (exact, case-sensitive)
            k: Number of neighbors to return

        Returns:
            Up to k hits in descending score order, or None if the word is
            not in the vocabulary
        """
        query_vector = self._store.get_vector(word)
        if query_vector is None:
            logger.debug(f"Cosine query word not in vocabulary: {word!r}")
            return None

        return self._rank(query_vector, k, exclude={word}, query=word)

    def analogy(
        self,
        positive: Sequence[str],
        negative: Sequence[str],
        k: int,
    ) -> Optional[List[SimilarityHit]]:
        """
        Solve ``positive - negative`` analogies, e.g. king - man + woman.

        Resolved positive vectors are used as-is and resolved negative
        vectors are negated; the query vector is their mean. Every input
        word, resolved or not, is excluded from the answer.

        Args:
            positive: Words pulling the query vector toward them
            negative: Words pushing the query vector away
            k: Number of results to return

        Returns:
            Up to k hits in descending score order, or None if both lists
            are empty or none of the input words is in the vocabulary
        """
        if not positive and not negative:
            return None

        exclude: Set[str] = set()
        vectors: List[np.ndarray] = []

        for word in positive:
            exclude.add(word)
            vector = self._store.get_vector(word)
            if vector is not None:
                vectors.append(vector)

        for word in negative:
            exclude.add(word)
            vector = self._store.get_vector(word)
            if vector is not None:
                vectors.append(-vector)

        query = f"+{list(positive)} -{list(negative)}"
        if not vectors:
            logger.debug(f"No analogy input word is in the vocabulary: {query}")
            return None

        unresolved = len(positive) + len(negative) - len(vectors)
        if unresolved:
            logger.debug(f"Analogy ignoring {unresolved} unknown words: {query}")

        return self._rank(mean(vectors), k, exclude=exclude, query=query)

    def cosine_many(
        self,
        words: Sequence[str],
        k: int,
        max_workers: Optional[int] = None,
    ) -> Dict[str, Optional[List[SimilarityHit]]]:
        """
        Run independent cosine queries concurrently.

        Args:
            words: Query words
            k: Number of neighbors per word
            max_workers: Thread pool size (default: DEFAULT_MAX_WORKERS)

        Returns:
            Mapping of each query word to its cosine result
        """
        if not words:
            return {}

        workers = max_workers or DEFAULT_MAX_WORKERS
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="wordvec-query") as executor:
            futures = {word: executor.submit(self.cosine, word, k) for word in words}
            return {word: future.result() for word, future in futures.items()}

    def _rank(
        self,
        query_vector: np.ndarray,
        k: int,
        exclude: Set[str],
        query: str,
    ) -> List[SimilarityHit]:
        start_time = time.time()
        scores = score_all(self._store.matrix, query_vector)
        hits = top_k(self._store.vocabulary, scores, k, exclude=exclude)
        logger.debug(
            f"Ranked {len(scores)} words in {int((time.time() - start_time) * 1000)}ms",
            extra={"query": query},
        )
        return hits
