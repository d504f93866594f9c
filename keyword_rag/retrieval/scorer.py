"""Keyword relevance scoring.

The score is a loose TF-IDF: term frequency within the chunk, an IDF whose
document frequency is a case-insensitive substring count over all chunks
(plus one), and a flat bonus for every query word present as a whole word.
Rankings depend on this exact formula, so it is not normalized.
"""

import math
import re
from collections import Counter
from collections.abc import Mapping, Sequence

from keyword_rag.documents.models import Chunk

MIN_TERM_LENGTH = 3
EXACT_MATCH_BONUS = 0.5

_SPLIT_PATTERN = re.compile(r"\s+")


def tokenize(text: str) -> list[str]:
    """Lower-case and split on whitespace runs.

    Leading or trailing whitespace produces an empty token, which is
    harmless because short tokens never score.
    """
    return _SPLIT_PATTERN.split(text.lower())


def query_terms(query: str) -> list[str]:
    """Query tokens long enough to score, repeats kept."""
    return [term for term in tokenize(query) if len(term) >= MIN_TERM_LENGTH]


def document_frequency(term: str, all_chunks: Sequence[Chunk]) -> int:
    """Count chunks whose lower-cased content contains ``term``."""
    return sum(1 for chunk in all_chunks if term in chunk.content.lower())


def inverse_document_frequencies(
    terms: Sequence[str],
    lowered_contents: Sequence[str],
) -> dict[str, float]:
    """IDF of each distinct term over a pool of lower-cased chunk texts.

    Returns an empty mapping for an empty pool, which disables the
    ``tf * idf`` part of the score.
    """
    total_chunks = len(lowered_contents)
    if not total_chunks:
        return {}

    idf: dict[str, float] = {}
    for term in terms:
        if term not in idf:
            df = sum(1 for content in lowered_contents if term in content)
            idf[term] = math.log(total_chunks / (df + 1))
    return idf


def score_terms(terms: Sequence[str], chunk_text: str, idf: Mapping[str, float]) -> float:
    """Score a chunk against prepared query terms and their IDF values.

    Terms missing from ``idf`` only earn the exact match bonus.
    """
    chunk_tokens = tokenize(chunk_text)
    counts = Counter(chunk_tokens)

    total = 0.0
    for term in terms:
        if term in idf:
            tf = counts[term] / len(chunk_tokens)
            total += tf * idf[term]

        if term in counts:
            total += EXACT_MATCH_BONUS

    return total


def score(query: str, chunk_text: str, all_chunks: Sequence[Chunk]) -> float:
    """Score how relevant a chunk is to a query.

    Args:
        query: Free-text query.
        chunk_text: Content of the chunk being scored.
        all_chunks: Every candidate chunk, used for document frequency.

    Returns:
        Sum over query terms of at least three characters of
        ``tf * idf`` plus 0.5 per exact word hit. Zero when no such term
        matches; may be negative when a term occurs in every chunk.
    """
    terms = query_terms(query)
    idf = inverse_document_frequencies(terms, [chunk.content.lower() for chunk in all_chunks])
    return score_terms(terms, chunk_text, idf)
