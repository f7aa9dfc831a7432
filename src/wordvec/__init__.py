"""
wordvec - Word2vec binary vector loading and similarity queries.

Key components:
- reader.py: WordVectorReader, a lazy parser for the binary vector format
- vocabulary.py: VocabularyStore, the immutable normalized embedding table
- similarity.py: Dot product, normalization, mean and top-K ranking
- query.py: WordVectors, cosine neighbor and analogy queries
- config.py: YAML and environment configuration
- cli.py: Command-line interface

Key concepts:
- Vectors are normalized to unit length at load time, so a dot product
  between stored vectors is their cosine similarity.
- The vocabulary is loaded once and never mutated; queries are read-only.
"""

from .core import (
    LoadStats,
    SimilarityHit,
    VectorFormatError,
    VectorHeader,
    VocabularyIncompleteError,
    WordVecConfigError,
    WordVecError,
)
from .query import WordVectors
from .reader import WordVectorReader
from .vocabulary import VocabularyStore

__version__ = "0.1.0"

__all__ = [
    "WordVectors",
    "WordVectorReader",
    "VocabularyStore",
    "VectorHeader",
    "SimilarityHit",
    "LoadStats",
    "WordVecError",
    "VectorFormatError",
    "VocabularyIncompleteError",
    "WordVecConfigError",
]
