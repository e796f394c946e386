from typing import Set

from checker.config import (
    SIMILARITY_THRESHOLD,
    LENGTH_RATIO_FLOOR,
    BIGRAM_WEIGHT,
    LENGTH_WEIGHT,
)


def get_bigrams(text: str) -> Set[str]:
    """Distinct pairs of consecutive characters."""
    return {text[i:i + 2] for i in range(len(text) - 1)}


def length_ratio(a: str, b: str) -> float:
    longest = max(len(a), len(b))
    if longest == 0:
        return 1.0
    return min(len(a), len(b)) / longest


def bigram_jaccard(a: str, b: str) -> float:
    """
    Jaccard index over the bigram sets.
    Two strings without any bigrams are treated as identical.
    """
    bigrams_a = get_bigrams(a)
    bigrams_b = get_bigrams(b)
    union = bigrams_a | bigrams_b
    if not union:
        return 1.0
    return len(bigrams_a & bigrams_b) / len(union)


def similarity(
    a: str,
    b: str,
    *,
    ratio_floor: float = LENGTH_RATIO_FLOOR,
    bigram_weight: float = BIGRAM_WEIGHT,
    length_weight: float = LENGTH_WEIGHT,
) -> float:
    """
    Score in [0, 1] blending bigram overlap with the length ratio.

    Texts whose lengths differ by more than the ratio floor are rejected
    early: the length ratio itself is returned and no bigrams are built.
    Callers are expected to skip texts below MIN_CONTENT_LENGTH.
    """
    ratio = length_ratio(a, b)
    if ratio < ratio_floor:
        return ratio

    return bigram_weight * bigram_jaccard(a, b) + length_weight * ratio


def is_changed(score: float, threshold: float = SIMILARITY_THRESHOLD) -> bool:
    return score < threshold
