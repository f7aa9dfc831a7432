"""
Vocabulary Store - In-memory table of normalized word vectors.

The store is built once by ``load`` / ``load_file`` and never changes
afterwards. Vectors live in one contiguous float32 matrix whose rows follow
the file order of each word's first occurrence; a dict maps words to rows.
When a word appears more than once, the last vector read wins.
"""

import gzip
import logging
import time
from pathlib import Path
from typing import BinaryIO, Dict, Iterable, Iterator, List, Optional, Tuple, Union

import numpy as np

from .core.exceptions import VocabularyIncompleteError
from .core.types import LoadStats
from .reader import DEFAULT_CHUNK_SIZE, WordVectorReader
from .similarity import is_zero_vector, normalize_in_place


logger = logging.getLogger(__name__)

# Rows allocated up front; the matrix doubles from here up to the declared size
INITIAL_ROWS = 65536


def _grow(matrix: np.ndarray, limit: int) -> np.ndarray:
    """Return a larger copy of ``matrix`` with at most ``limit`` rows."""
    rows = matrix.shape[0]
    grown = np.empty((min(max(rows * 2, 1), limit), matrix.shape[1]), dtype=np.float32)
    grown[:rows] = matrix
    return grown


class VocabularyStore:
    """
    Immutable mapping from words to unit-length float32 vectors.

    Example:
        >>> store = VocabularyStore.load_file("vectors.bin")
        >>> store.word_count()
        71291
        >>> store.get_vector("winter")
        array([...], dtype=float32)
    """

    def __init__(
        self,
        words: Iterable[str],
        matrix: np.ndarray,
        stats: Optional[LoadStats] = None,
    ):
        """
        Wrap already normalized data.

        Args:
            words: Unique words, one per matrix row
            matrix: (len(words), vector_size) float32 array of unit vectors
            stats: Load summary; synthesized when omitted

        Raises:
            ValueError: If words repeat or do not line up with matrix rows
        """
        self._words: Tuple[str, ...] = tuple(words)
        if matrix.ndim != 2 or matrix.shape[0] != len(self._words):
            raise ValueError(
                f"Matrix shape {matrix.shape} does not match {len(self._words)} words"
            )

        self._index: Dict[str, int] = {word: row for row, word in enumerate(self._words)}
        if len(self._index) != len(self._words):
            raise ValueError("Words must be unique")

        self._matrix = np.ascontiguousarray(matrix, dtype=np.float32)
        self._matrix.setflags(write=False)
        self._stats = stats or LoadStats(
            declared_count=len(self._words),
            loaded_count=len(self._words),
            unique_count=len(self._words),
            vector_size=self._matrix.shape[1],
        )

    @classmethod
    def load(
        cls,
        stream: BinaryIO,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        source: Optional[str] = None,
    ) -> "VocabularyStore":
        """
        Load a vocabulary from a binary vector stream.

        Reads every entry, normalizes it to unit length and keeps the last
        vector seen for each word. A stream that ends before the declared
        entry count is accepted; check ``stats.is_complete`` or call
        ``require_complete`` if the full vocabulary is needed.

        Args:
            stream: Binary file-like object positioned at the header
            chunk_size: Bytes requested from the stream per read
            source: Description of the stream for logging

        Returns:
            Loaded VocabularyStore

        Raises:
            VectorFormatError: If the header is malformed
            OSError: If reading the stream fails
        """
        start_time = time.time()
        reader = WordVectorReader(stream, chunk_size=chunk_size)
        declared = reader.vocabulary_size

        index: Dict[str, int] = {}
        words: List[str] = []
        # No rows until the first full record has been read
        matrix = np.empty((0, reader.vector_size), dtype=np.float32)
        zero_norm_count = 0

        for word, vector in reader:
            if reader.vector_size and is_zero_vector(vector):
                zero_norm_count += 1
            normalize_in_place(vector)

            row = index.get(word)
            if row is None:
                row = len(words)
                if row == 0:
                    matrix = np.empty((min(declared, INITIAL_ROWS), reader.vector_size), dtype=np.float32)
                elif row == matrix.shape[0]:
                    matrix = _grow(matrix, declared)
                index[word] = row
                words.append(word)
            matrix[row] = vector

        if len(words) < matrix.shape[0]:
            matrix = matrix[:len(words)].copy()

        stats = LoadStats(
            declared_count=declared,
            loaded_count=reader.vectors_read,
            unique_count=len(words),
            vector_size=reader.vector_size,
            ended_early=reader.ended_early,
            zero_norm_count=zero_norm_count,
            duration_ms=int((time.time() - start_time) * 1000),
            source=source,
        )
        log_extra = {
            "source": source,
            "word_count": stats.unique_count,
            "vector_size": stats.vector_size,
            "duration_ms": stats.duration_ms,
        }

        if reader.ended_early:
            logger.warning(
                f"Vector stream ended after {reader.vectors_read} of {declared} "
                f"declared entries: {reader.end_reason}",
                extra=log_extra,
            )
        if stats.loaded_count > stats.unique_count:
            logger.debug(
                f"{stats.loaded_count - stats.unique_count} duplicate words replaced "
                f"by later entries"
            )
        if zero_norm_count:
            logger.warning(
                f"{zero_norm_count} zero vectors could not be normalized and hold NaN",
                extra=log_extra,
            )

        logger.info(
            f"Loaded {stats.unique_count} word vectors ({stats.vector_size} dimensions) "
            f"in {stats.duration_ms}ms",
            extra=log_extra,
        )

        return cls(words, matrix, stats=stats)

    @classmethod
    def load_file(
        cls,
        path: Union[str, Path],
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ) -> "VocabularyStore":
        """
        Load a vocabulary from a binary vector file.

        Paths ending in ``.gz`` are decompressed while reading.

        Raises:
            FileNotFoundError: If the file does not exist
            VectorFormatError: If the header is malformed
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Vector file not found: {path}")

        logger.info(f"Loading word vectors from: {path}")
        opener = gzip.open if path.suffix == ".gz" else open
        with opener(path, "rb") as f:
            return cls.load(f, chunk_size=chunk_size, source=str(path))

    @classmethod
    def from_pairs(cls, pairs: Iterable[Tuple[str, Iterable[float]]]) -> "VocabularyStore":
        """
        Build a store from in-memory (word, vector) pairs.

        Vectors are copied and normalized; duplicates follow the same
        last-write-wins rule as ``load``.

        Raises:
            ValueError: If vector lengths differ
        """
        vectors: Dict[str, np.ndarray] = {}
        for word, values in pairs:
            vectors[word] = normalize_in_place(np.array(values, dtype=np.float32))

        lengths = {len(v) for v in vectors.values()}
        if len(lengths) > 1:
            raise ValueError(f"Vector dimensions must match: {sorted(lengths)}")

        vector_size = lengths.pop() if lengths else 0
        matrix = np.empty((len(vectors), vector_size), dtype=np.float32)
        for row, vector in enumerate(vectors.values()):
            matrix[row] = vector

        return cls(vectors.keys(), matrix)

    @property
    def matrix(self) -> np.ndarray:
        """Read-only (word_count, vector_size) matrix, rows aligned with words()."""
        return self._matrix

    @property
    def vocabulary(self) -> Tuple[str, ...]:
        """All words as a tuple, in matrix row order."""
        return self._words

    @property
    def stats(self) -> LoadStats:
        return self._stats

    def get_vector(self, word: str) -> Optional[np.ndarray]:
        """Get the normalized vector for ``word`` (exact, case-sensitive), or None."""
        row = self._index.get(word)
        if row is None:
            return None
        return self._matrix[row]

    def word_count(self) -> int:
        return len(self._words)

    def vector_size(self) -> int:
        return self._matrix.shape[1]

    def words(self) -> Iterator[str]:
        """Iterate over all words in file order. Each call starts a new pass."""
        return iter(self._words)

    def require_complete(self) -> None:
        """
        Raise if the load stopped before the declared entry count.

        Raises:
            VocabularyIncompleteError: If fewer entries were read than declared
        """
        if not self._stats.is_complete:
            raise VocabularyIncompleteError(
                f"Vocabulary incomplete: read {self._stats.loaded_count} of "
                f"{self._stats.declared_count} declared entries",
                declared=self._stats.declared_count,
                loaded=self._stats.loaded_count,
            )

    def __len__(self) -> int:
        return len(self._words)

    def __contains__(self, word: object) -> bool:
        return word in self._index

    def __iter__(self) -> Iterator[str]:
        return self.words()
