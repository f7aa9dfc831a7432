"""
Core subpackage for the wordvec package.

Contains types, exceptions, and logging utilities.
"""

from .types import (
    VectorHeader,
    SimilarityHit,
    LoadStats,
)
from .exceptions import (
    WordVecError,
    VectorFormatError,
    VocabularyIncompleteError,
    WordVecConfigError,
)

__all__ = [
    # Types
    "VectorHeader",
    "SimilarityHit",
    "LoadStats",
    # Exceptions
    "WordVecError",
    "VectorFormatError",
    "VocabularyIncompleteError",
    "WordVecConfigError",
]
