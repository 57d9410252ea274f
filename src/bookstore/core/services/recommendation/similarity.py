"""Bag-of-words content vectors and cosine similarity over book metadata."""

import math
import re
import unicodedata
from collections import Counter
from collections.abc import Iterable, Mapping

TITLE_WEIGHT = 3
CATEGORY_WEIGHT = 2
AUTHOR_WEIGHT = 2
DESCRIPTION_CHARS = 200

_NON_WORD = re.compile(r"[^a-z0-9\s]")


def tokenize(text: str | None) -> list[str]:
    """Lower-case, accent-free tokens longer than two characters."""
    if not text:
        return []
    text = text.lower().replace("đ", "d")
    text = unicodedata.normalize("NFD", text)
    text = "".join(ch for ch in text if unicodedata.category(ch) != "Mn")
    return [token for token in _NON_WORD.sub(" ", text).split() if len(token) > 2]


def content_tokens(
    title: str, description: str | None, category: str | None, author: str | None
) -> list[str]:
    tokens = tokenize(title) * TITLE_WEIGHT
    tokens += tokenize((description or "")[:DESCRIPTION_CHARS])
    tokens += tokenize(category) * CATEGORY_WEIGHT
    tokens += tokenize(author) * AUTHOR_WEIGHT
    return tokens


def term_frequencies(tokens: list[str]) -> dict[str, float]:
    if not tokens:
        return {}
    total = len(tokens)
    return {token: count / total for token, count in Counter(tokens).items()}


def mean_vector(vectors: Iterable[Mapping[str, float]]) -> dict[str, float]:
    """Average of several term-frequency vectors, i.e. a reader profile."""
    vectors = list(vectors)
    if not vectors:
        return {}
    profile: dict[str, float] = {}
    for vector in vectors:
        for token, weight in vector.items():
            profile[token] = profile.get(token, 0.0) + weight
    return {token: weight / len(vectors) for token, weight in profile.items()}


def cosine_similarity(a: Mapping[str, float], b: Mapping[str, float]) -> float:
    dot = sum(weight * b[token] for token, weight in a.items() if token in b)
    norm_a = math.sqrt(sum(weight * weight for weight in a.values()))
    norm_b = math.sqrt(sum(weight * weight for weight in b.values()))
    if norm_a == 0 or norm_b == 0:
        return 0.0
    return dot / (norm_a * norm_b)
