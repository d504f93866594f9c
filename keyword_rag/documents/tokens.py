"""Rough token accounting for document size limits."""

import math

CHARS_PER_TOKEN = 4


def estimate_token_count(text: str) -> int:
    """Estimate tokens as one per four characters, rounded up."""
    return math.ceil(len(text) / CHARS_PER_TOKEN)


def validate_document_size(text: str, max_tokens: int = 100_000) -> bool:
    """Return True if the estimated token count fits within ``max_tokens``."""
    return estimate_token_count(text) <= max_tokens
