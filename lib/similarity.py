# =============================================================================
# lib/similarity.py - String Similarity and Slug Helpers
# =============================================================================
# Pure functions used to:
# - Match AI-suggested tags against existing tags (tag_similarity)
# - Detect duplicate articles (text_similarity)
# - Build URL slugs (clean_slug, fallback_slug, unique_slug)
#
# Usage:
#   from lib.similarity import tag_similarity, find_most_similar
#   tag, score = find_most_similar("東京観光", existing_tags)
# =============================================================================

from __future__ import annotations

import re
from typing import Any, Callable, Sequence

# Tags scoring above this are treated as the same tag
TAG_MATCH_THRESHOLD = 0.7

# Articles scoring above this (title or content) are reported as duplicates
DUPLICATE_THRESHOLD = 0.7

_WHITESPACE_RE = re.compile(r"\s+")
_SLUG_INVALID_RE = re.compile(r"[^a-z0-9-]")
_DASHES_RE = re.compile(r"-+")
# ASCII alphanumerics, hiragana, katakana (incl. prolonged sound mark) and CJK ideographs
_FALLBACK_INVALID_RE = re.compile(r"[^a-z0-9\u3040-\u309f\u30a0-\u30ff\u4e00-\u9fff]")


# =============================================================================
# Distance / Similarity
# =============================================================================

def levenshtein(a: str, b: str) -> int:
    """
    Edit distance between two strings (insertions, deletions, substitutions).

    Example:
        levenshtein("kitten", "sitting")  # 3
    """
    if a == b:
        return 0
    if not a:
        return len(b)
    if not b:
        return len(a)

    # Keep the shorter string in the inner loop
    if len(a) < len(b):
        a, b = b, a

    previous = list(range(len(b) + 1))
    for i, ca in enumerate(a, start=1):
        current = [i]
        for j, cb in enumerate(b, start=1):
            cost = 0 if ca == cb else 1
            current.append(min(
                previous[j] + 1,         # deletion
                current[j - 1] + 1,      # insertion
                previous[j - 1] + cost,  # substitution
            ))
        previous = current
    return previous[-1]


def levenshtein_similarity(a: str, b: str) -> float:
    """1 - distance / longest length, 1.0 for two empty strings."""
    max_len = max(len(a), len(b))
    if max_len == 0:
        return 1.0
    return 1.0 - levenshtein(a, b) / max_len


def tag_similarity(a: str, b: str) -> float:
    """
    Similarity between two tag names in [0, 1].

    - Case and surrounding whitespace are ignored
    - Identical names score 1.0
    - If one name contains the other, the score is len(shorter) / len(longer)
    - Otherwise the Levenshtein similarity is used

    Example:
        tag_similarity("東京", "東京観光")  # 0.5
        tag_similarity("Travel", "travel ")  # 1.0
    """
    s1 = (a or "").strip().lower()
    s2 = (b or "").strip().lower()

    if s1 == s2:
        return 1.0
    if not s1 or not s2:
        return 0.0

    if s1 in s2 or s2 in s1:
        shorter, longer = sorted((len(s1), len(s2)))
        return shorter / longer

    return levenshtein_similarity(s1, s2)


def _normalize_text(text: str) -> str:
    return _WHITESPACE_RE.sub(" ", (text or "").lower()).strip()


def text_similarity(a: str, b: str) -> float:
    """
    Similarity between two texts in [0, 1].

    Average of the word-level Jaccard index and the character-level
    Levenshtein similarity, both computed on lowercased text with
    whitespace collapsed.
    """
    s1 = _normalize_text(a)
    s2 = _normalize_text(b)

    words1 = set(s1.split())
    words2 = set(s2.split())
    union = words1 | words2
    jaccard = len(words1 & words2) / len(union) if union else 0.0

    return (jaccard + levenshtein_similarity(s1, s2)) / 2


def find_most_similar(
    name: str,
    candidates: Sequence[dict[str, Any]],
    key: str = "name",
) -> tuple[dict[str, Any] | None, float]:
    """
    Find the candidate whose `key` value is most similar to name.

    Returns:
        (best candidate, score) or (None, 0.0) when there are no candidates
    """
    best: dict[str, Any] | None = None
    best_score = 0.0

    for candidate in candidates:
        score = tag_similarity(name, str(candidate.get(key) or ""))
        if score > best_score:
            best, best_score = candidate, score
            if score == 1.0:
                break

    return best, best_score


# =============================================================================
# Slugs
# =============================================================================

def clean_slug(text: str) -> str:
    """
    Normalize text to a lowercase ASCII slug.

    Example:
        clean_slug("Tokyo Travel Guide!")  # "tokyo-travel-guide"
    """
    slug = _SLUG_INVALID_RE.sub("-", (text or "").strip().lower())
    slug = _DASHES_RE.sub("-", slug)
    return slug.strip("-")


def fallback_slug(text: str, limit: int = 30) -> str:
    """
    Slug used when the LLM cannot produce an English one.

    Keeps kana and kanji so Japanese names still produce readable slugs.
    """
    slug = _FALLBACK_INVALID_RE.sub("-", (text or "").strip().lower())
    slug = _DASHES_RE.sub("-", slug).strip("-")
    return slug[:limit].strip("-")


def unique_slug(base: str, exists: Callable[[str], bool], start: int = 2) -> str:
    """
    Return base, or base-{n} for the first n >= start that is free.

    Args:
        base: Preferred slug
        exists: Callback telling whether a slug is already taken
        start: First numeric suffix to try
    """
    if not exists(base):
        return base

    counter = start
    while exists(f"{base}-{counter}"):
        counter += 1
    return f"{base}-{counter}"
