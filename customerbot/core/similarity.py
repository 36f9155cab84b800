"""
Similarity ranking for embedded knowledge-base sentences.

Cosine similarity is computed in plain Python; vectors are small lists and
the corpus is a handful of sentences, so no array library is needed.
"""

import math
from dataclasses import dataclass
from typing import List, Sequence, Tuple

from customerbot.errors import DimensionMismatchError


@dataclass(frozen=True)
class ScoredCandidate:
    """
    A knowledge-base sentence paired with its similarity to the query.

    Attributes:
        text: Sentence text
        score: Cosine similarity in [-1, 1]
        position: Index of the sentence in corpus order
    """
    text: str
    score: float
    position: int = 0


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """
    Cosine similarity of two vectors.

    Returns 0.0 when either vector has zero magnitude or a non-finite
    component.

    Raises:
        DimensionMismatchError: If the vectors differ in length
    """
    if len(a) != len(b):
        raise DimensionMismatchError(len(a), len(b))

    dot = math.fsum(x * y for x, y in zip(a, b))
    norm_a = math.sqrt(math.fsum(x * x for x in a))
    norm_b = math.sqrt(math.fsum(y * y for y in b))
    if norm_a == 0 or norm_b == 0:
        return 0.0

    score = dot / (norm_a * norm_b)
    # NaN or infinite components make the score meaningless
    if not math.isfinite(score):
        return 0.0
    # Clamp rounding noise so identical vectors score exactly within [-1, 1]
    return max(-1.0, min(1.0, score))


def rank_candidates(
    query_vector: Sequence[float],
    embedded: Sequence[Tuple[str, Sequence[float]]],
    top_k: int,
    min_similarity: float
) -> List[ScoredCandidate]:
    """
    Score, filter and order embedded sentences against a query vector.

    Args:
        query_vector: Embedding of the query
        embedded: (text, vector) pairs in corpus order
        top_k: Maximum number of candidates to keep
        min_similarity: Candidates scoring below this are dropped

    Returns:
        At most top_k candidates, highest score first. Equal scores keep
        corpus order.
    """
    if top_k <= 0:
        return []

    scored = [
        ScoredCandidate(text=text, score=cosine_similarity(query_vector, vector), position=i)
        for i, (text, vector) in enumerate(embedded)
    ]
    kept = [c for c in scored if c.score >= min_similarity]
    # sorted() is stable, so ties stay in corpus order
    kept = sorted(kept, key=lambda c: c.score, reverse=True)
    return kept[:top_k]
