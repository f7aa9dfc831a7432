"""
Similarity Engine - Numeric primitives for vector queries.

Implements:
- Dot product and in-place unit normalization
- Elementwise mean of a vector set
- Whole-vocabulary scoring against a query vector
- Top-K ranking with exclusions and deterministic tie-breaks

All vectors are float32 numpy arrays. Stored vocabulary vectors are unit
length, so a dot product against them is a cosine similarity.
"""

import logging
from typing import Iterable, List, Optional, Sequence

import numpy as np

from .core.types import SimilarityHit


logger = logging.getLogger(__name__)


def dot_product(vec_a: np.ndarray, vec_b: np.ndarray) -> float:
    """
    Compute the dot product of two vectors.

    Args:
        vec_a: First vector
        vec_b: Second vector

    Returns:
        Sum of elementwise products

    Raises:
        ValueError: If vectors have different dimensions
    """
    vec_a = np.asarray(vec_a, dtype=np.float32)
    vec_b = np.asarray(vec_b, dtype=np.float32)

    if vec_a.shape != vec_b.shape:
        raise ValueError(f"Vector dimensions must match: {len(vec_a)} != {len(vec_b)}")

    return float(np.dot(vec_a, vec_b))


def normalize_in_place(vector: np.ndarray) -> np.ndarray:
    """
    Scale a vector to unit L2 norm, modifying it in place.

    A zero vector has no direction; it comes out as all-NaN, following
    IEEE-754 division semantics, without raising or warning.

    Args:
        vector: Writable float array

    Returns:
        The same array, for chaining
    """
    with np.errstate(divide="ignore", invalid="ignore"):
        scale = np.float32(1.0) / np.sqrt(np.dot(vector, vector))
        vector *= scale
    return vector


def is_zero_vector(vector: np.ndarray) -> bool:
    """True if every component is exactly zero."""
    return not np.any(vector)


def mean(vectors: Sequence[np.ndarray]) -> np.ndarray:
    """
    Compute the elementwise mean of a set of vectors.

    Args:
        vectors: Non-empty sequence of equal-length vectors

    Returns:
        New float32 vector

    Raises:
        ValueError: If the sequence is empty or lengths differ
    """
    if len(vectors) == 0:
        raise ValueError("Cannot compute the mean of zero vectors")

    lengths = {len(v) for v in vectors}
    if len(lengths) != 1:
        raise ValueError(f"Vector dimensions must match: {sorted(lengths)}")

    stacked = np.stack([np.asarray(v, dtype=np.float32) for v in vectors])
    return stacked.mean(axis=0, dtype=np.float32)


def score_all(matrix: np.ndarray, query: np.ndarray) -> np.ndarray:
    """
    Dot every row of ``matrix`` with ``query``.

    Args:
        matrix: (n, d) array of vectors
        query: Vector of length d

    Returns:
        Array of n scores

    Raises:
        ValueError: If the query dimension does not match the matrix
    """
    query = np.asarray(query, dtype=np.float32)
    if matrix.ndim != 2 or matrix.shape[1] != query.shape[0]:
        raise ValueError(
            f"Vector dimensions must match: matrix {matrix.shape} vs query {query.shape}"
        )
    return matrix @ query


def top_k(
    labels: Sequence[str],
    scores: Sequence[float],
    k: int,
    exclude: Optional[Iterable[str]] = None,
) -> List[SimilarityHit]:
    """
    Rank labels by score and keep the best ``k``.

    Sorting is stable and descending, so equal scores keep the order the
    labels were given in. NaN scores never raise; they rank after every
    real score. Excluded labels are removed before truncation.

    Args:
        labels: Candidate labels
        scores: Score for each label, same length as labels
        k: Number of hits to return
        exclude: Labels that must not appear in the result

    Returns:
        Up to k SimilarityHit records with 1-indexed ranks

    Raises:
        ValueError: If labels and scores differ in length
    """
    scores = np.asarray(scores)
    if len(labels) != len(scores):
        raise ValueError(f"Got {len(labels)} labels but {len(scores)} scores")

    if k <= 0:
        return []

    excluded = set(exclude or ())
    order = np.argsort(-scores, kind="stable")

    hits: List[SimilarityHit] = []
    for index in order:
        label = labels[index]
        if label in excluded:
            continue
        hits.append(SimilarityHit(word=label, score=float(scores[index]), rank=len(hits) + 1))
        if len(hits) == k:
            break

    return hits
