"""
Core data types for the wordvec package.

Uses dataclasses following the to_dict/from_dict pattern of the contracts
modules.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple


@dataclass(frozen=True)
class VectorHeader:
    """
    Header line of a binary vector file.

    Attributes:
        vocabulary_size: Number of entries the file declares
        vector_size: Dimensionality of every vector
    """
    vocabulary_size: int
    vector_size: int

    @property
    def record_bytes(self) -> int:
        """Bytes occupied by one vector (excluding the word)."""
        return self.vector_size * 4

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "vocabulary_size": self.vocabulary_size,
            "vector_size": self.vector_size,
        }


@dataclass(frozen=True)
class SimilarityHit:
    """
    A single ranked similarity result.

    Attributes:
        word: Vocabulary word
        score: Dot product against the query vector (cosine for unit vectors)
        rank: Position in result ranking (1-indexed)
    """
    word: str
    score: float
    rank: int

    def as_tuple(self) -> Tuple[str, float]:
        """Return the (word, score) pair."""
        return (self.word, self.score)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "word": self.word,
            "score": self.score,
            "rank": self.rank,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SimilarityHit":
        """Create from dictionary."""
        return cls(
            word=data["word"],
            score=float(data["score"]),
            rank=int(data["rank"]),
        )


@dataclass(frozen=True)
class LoadStats:
    """
    Summary of a single vocabulary load.

    Attributes:
        declared_count: Entry count from the header
        loaded_count: Entries actually read from the stream
        unique_count: Distinct words kept after duplicate resolution
        vector_size: Dimensionality from the header
        ended_early: Whether the stream ran out before declared_count entries
        zero_norm_count: Vectors whose norm was zero (normalized to NaN)
        duration_ms: Wall-clock time spent loading
        source: Path or description of the stream, if known
    """
    declared_count: int
    loaded_count: int
    unique_count: int
    vector_size: int
    ended_early: bool = False
    zero_norm_count: int = 0
    duration_ms: int = 0
    source: Optional[str] = None

    @property
    def is_complete(self) -> bool:
        """True when every declared entry was read."""
        return not self.ended_early and self.loaded_count == self.declared_count

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "declared_count": self.declared_count,
            "loaded_count": self.loaded_count,
            "unique_count": self.unique_count,
            "vector_size": self.vector_size,
            "ended_early": self.ended_early,
            "zero_norm_count": self.zero_norm_count,
            "duration_ms": self.duration_ms,
            "source": self.source,
            "is_complete": self.is_complete,
        }
