from __future__ import annotations

from typing import Iterable, List

from .models import Chunk, RankedChunk

DEFAULT_TOP_K = 3


def query_words(query: str) -> List[str]:
    return query.lower().split()


def score_chunk(words: List[str], chunk: Chunk) -> int:
    # substring containment, so "work" also matches "homework"
    content = chunk.content.lower()
    return sum(1 for word in words if word in content)


def search(query: str, chunks: Iterable[Chunk], top_k: int = DEFAULT_TOP_K) -> List[RankedChunk]:
    """Rank chunks by keyword overlap with the query.

    Chunks scoring 0 are dropped; ties keep their input order.
    """
    words = query_words(query)
    if not words:
        return []

    scored: List[RankedChunk] = []
    for chunk in chunks:
        score = score_chunk(words, chunk)
        if score > 0:
            scored.append(RankedChunk(**chunk.model_dump(), relevance_score=score))

    # sorted() is stable, also with reverse=True
    scored = sorted(scored, key=lambda c: c.relevance_score, reverse=True)
    return scored[:top_k]


__all__ = ["DEFAULT_TOP_K", "query_words", "score_chunk", "search"]
