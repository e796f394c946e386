from typing import Any, Callable, Dict, List, Optional

from checker.config import (
    SIMILARITY_THRESHOLD,
    MIN_CONTENT_LENGTH,
    LENGTH_RATIO_FLOOR,
    BIGRAM_WEIGHT,
    LENGTH_WEIGHT,
    MAX_LOOKAHEAD,
    CONTEXT_CAP,
    MIN_BLOCK_SIZE,
)
from checker.logger import setup_logger
from detection.models import ComparisonResult, DiffBlock
from detection.similarity import similarity, is_changed
from detection.differ import word_diff, split_words
from detection.grouping import group_chunks
import detection.extraction.v1 as extraction_v1

logger = setup_logger("checker.detection")

REASON_NO_ARCHIVE = "No archive found"
REASON_NO_CONTENT = "Could not extract content"
REASON_TOO_SHORT = "Content too short to analyze"
REASON_SAME = "Content is essentially the same"

EXTRACTORS: Dict[str, Callable[[str], str]] = {
    "v1": extraction_v1.extract_content_v1,
}


class SnapshotComparator:
    """
    Compares a live page against an archived copy of it.
    Pure and stateless between calls: every call owns its own data.
    """

    def __init__(self, extraction_version: str = "v1", policy: Optional[Dict[str, Any]] = None):
        if extraction_version not in EXTRACTORS:
            raise ValueError(f"Unknown extraction version: {extraction_version}")
        self._version = extraction_version
        self._extract = EXTRACTORS[extraction_version]

        policy = policy or {}
        thresholds = policy.get("thresholds", {})
        diff_cfg = policy.get("diff", {})

        self.threshold = thresholds.get("similarity", SIMILARITY_THRESHOLD)
        self.min_length = thresholds.get("min_length", MIN_CONTENT_LENGTH)
        self.ratio_floor = thresholds.get("length_ratio_floor", LENGTH_RATIO_FLOOR)
        self.bigram_weight = thresholds.get("bigram_weight", BIGRAM_WEIGHT)
        self.length_weight = thresholds.get("length_weight", LENGTH_WEIGHT)
        self.max_lookahead = diff_cfg.get("max_lookahead", MAX_LOOKAHEAD)
        self.context_cap = diff_cfg.get("context_cap", CONTEXT_CAP)
        self.min_block_size = diff_cfg.get("min_block_size", MIN_BLOCK_SIZE)

    def extract(self, html: str) -> str:
        return self._extract(html)

    def compare(self, current_html: str, archived_html: Optional[str]) -> ComparisonResult:
        """
        Every failure resolves to changed=True; this never raises.
        The word diff runs archived -> current, the reverse of the browser
        extension this replaces: removed words are archive-only, added words
        are current-only, and on equal lookahead a removal is emitted first.
        """
        if not archived_html:
            logger.info("[COMPARE] No archived markup supplied")
            return ComparisonResult(changed=True, reason=REASON_NO_ARCHIVE)

        try:
            current = self._extract(current_html)
            archived = self._extract(archived_html)

            logger.debug(f"[COMPARE] Current content length: {len(current)}")
            logger.debug(f"[COMPARE] Archived content length: {len(archived)}")
            logger.debug(f"[COMPARE] Current sample: {current[:200]}")
            logger.debug(f"[COMPARE] Archived sample: {archived[:200]}")

            if not current or not archived:
                logger.warning("[COMPARE] Content extraction returned empty text")
                return ComparisonResult(changed=True, reason=REASON_NO_CONTENT)

            if len(current) < self.min_length or len(archived) < self.min_length:
                return ComparisonResult(changed=True, reason=REASON_TOO_SHORT)

            score = similarity(
                current,
                archived,
                ratio_floor=self.ratio_floor,
                bigram_weight=self.bigram_weight,
                length_weight=self.length_weight,
            )
            changed = is_changed(score, self.threshold)

            diff = word_diff(archived, current, self.max_lookahead) if changed else []

            if changed:
                reason = f"Content differs by {(1 - score) * 100:.1f}%"
            else:
                reason = REASON_SAME
            logger.info(f"[COMPARE] score={score:.4f} threshold={self.threshold} changed={changed}")

            return ComparisonResult(
                changed=changed,
                reason=reason,
                similarity=f"{score * 100:.1f}%",
                diff_count=abs(len(current) - len(archived)),
                word_diff=tuple(diff),
                current_text=current,
                archived_text=archived,
                score=score,
            )

        except Exception as e:
            logger.error(f"[COMPARE] Error comparing snapshots: {e}", exc_info=True)
            return ComparisonResult(changed=True, reason=f"Error during comparison: {e}")

    def blocks(self, result: ComparisonResult) -> List[DiffBlock]:
        """Word-granular presentation blocks for a result's diff."""
        return group_chunks(
            split_words(list(result.word_diff)),
            context_cap=self.context_cap,
            min_block_size=self.min_block_size,
        )


def compare(
    current_html: str,
    archived_html: Optional[str],
    policy: Optional[Dict[str, Any]] = None,
) -> ComparisonResult:
    """Convenience wrapper around a one-off SnapshotComparator."""
    return SnapshotComparator(policy=policy).compare(current_html, archived_html)
