"""
End-to-end comparisons through SnapshotComparator / compare().
"""

import unittest
from unittest.mock import MagicMock, patch

from detection.engine import SnapshotComparator, compare, EXTRACTORS
from detection.models import ChunkType, ComparisonResult
from detection.differ import side_tokens, split_words
from wiki_pages import ARTICLE, wiki_page, bare_page

# Always classify as changed so the diff is produced
ALWAYS_DIFF = {"thresholds": {"similarity": 1.01}}


class TestShortCircuits(unittest.TestCase):
    def test_no_archive(self):
        """Scenario: archived markup missing -> changed, regardless of current markup."""
        for current in (wiki_page(ARTICLE), "", "<html></html>", None):
            for archived in (None, ""):
                result = compare(current, archived)
                self.assertTrue(result.changed)
                self.assertEqual(result.reason, "No archive found")
                self.assertIsNone(result.similarity)

    def test_no_archive_skips_extraction(self):
        extractor = MagicMock(return_value="x" * 500)
        with patch.dict(EXTRACTORS, {"v1": extractor}):
            SnapshotComparator().compare(wiki_page(ARTICLE), None)
        extractor.assert_not_called()

    def test_could_not_extract(self):
        """Scenario: no content container in one of the documents."""
        no_container = bare_page("<main><p>Red panda article text</p></main>")
        for current, archived in [
            (wiki_page(ARTICLE), no_container),
            (no_container, wiki_page(ARTICLE)),
        ]:
            result = compare(current, archived)
            self.assertTrue(result.changed)
            self.assertEqual(result.reason, "Could not extract content")

    def test_too_short(self):
        """Scenario: identical 80-character texts are still not analyzed."""
        page = wiki_page(["a" * 80])
        result = compare(page, page)
        self.assertTrue(result.changed)
        self.assertEqual(result.reason, "Content too short to analyze")

    def test_min_length_from_policy(self):
        page = wiki_page(["a" * 80])
        result = compare(page, page, policy={"thresholds": {"min_length": 50}})
        self.assertFalse(result.changed)

    def test_internal_failure_is_reported(self):
        boom = MagicMock(side_effect=RuntimeError("boom"))
        with patch.dict(EXTRACTORS, {"v1": boom}):
            result = SnapshotComparator().compare(wiki_page(ARTICLE), wiki_page(ARTICLE))
        self.assertTrue(result.changed)
        self.assertEqual(result.reason, "Error during comparison: boom")

    def test_unknown_extraction_version(self):
        with self.assertRaises(ValueError):
            SnapshotComparator(extraction_version="v9")


class TestScoredComparisons(unittest.TestCase):
    def test_identical_pages(self):
        """Scenario: identical extracted text -> unchanged at 100.0%."""
        result = compare(wiki_page(ARTICLE), wiki_page(ARTICLE, wayback=True))
        self.assertGreaterEqual(len(result.current_text), 500)
        self.assertFalse(result.changed)
        self.assertEqual(result.similarity, "100.0%")
        self.assertEqual(result.reason, "Content is essentially the same")
        self.assertEqual(result.diff_count, 0)
        self.assertEqual(result.word_diff, ())
        self.assertEqual(result.current_text, result.archived_text)

    def test_appended_sentence_is_not_a_change(self):
        """Scenario: one short sentence appended (< 10% longer) stays under the threshold."""
        current = wiki_page(ARTICLE + ["The species is endangered."])
        result = compare(current, wiki_page(ARTICLE, wayback=True))
        self.assertLess(result.diff_count / len(result.archived_text), 0.10)
        self.assertFalse(result.changed)
        self.assertGreaterEqual(result.score, 0.80)

    def test_disjoint_texts_of_different_length(self):
        """Scenario: no shared bigrams and less than half the length -> score is the length ratio."""
        result = compare(wiki_page(["x" * 300]), wiki_page(["y" * 120]))
        self.assertTrue(result.changed)
        self.assertAlmostEqual(result.score, 0.4)
        self.assertEqual(result.similarity, "40.0%")
        self.assertEqual(result.reason, "Content differs by 60.0%")
        self.assertEqual(result.diff_count, 180)
        self.assertEqual(
            [(c.type, c.text) for c in result.word_diff],
            [(ChunkType.REMOVED, "y" * 120), (ChunkType.ADDED, "x" * 300)],
        )

    def test_diff_direction(self):
        """Scenario: archived text is the old side, so dropped words are removed and new ones added."""
        archived = wiki_page(ARTICLE)
        current = wiki_page([p.replace("bamboo", "fruit") for p in ARTICLE])
        result = compare(current, archived, policy=ALWAYS_DIFF)
        self.assertTrue(result.changed)
        removed = [c.text for c in result.word_diff if c.type is ChunkType.REMOVED]
        added = [c.text for c in result.word_diff if c.type is ChunkType.ADDED]
        self.assertEqual(removed, ["bamboo"])
        self.assertEqual(added, ["fruit"])
        self.assertEqual(side_tokens(list(result.word_diff), ChunkType.REMOVED), result.archived_text.split())
        self.assertEqual(side_tokens(list(result.word_diff), ChunkType.ADDED), result.current_text.split())

    def test_blocks_cover_diff(self):
        comparator = SnapshotComparator(policy=ALWAYS_DIFF)
        current = wiki_page(ARTICLE[:3] + ["A new paragraph about habitat loss."] + ARTICLE[3:])
        result = comparator.compare(current, wiki_page(ARTICLE))
        blocks = comparator.blocks(result)
        self.assertTrue(any(b.has_changes for b in blocks))
        flat = [c for b in blocks for c in b.chunks]
        self.assertEqual(flat, split_words(list(result.word_diff)))

    def test_blocks_empty_when_unchanged(self):
        comparator = SnapshotComparator()
        result = comparator.compare(wiki_page(ARTICLE), wiki_page(ARTICLE))
        self.assertEqual(comparator.blocks(result), [])

    def test_calls_are_independent(self):
        comparator = SnapshotComparator()
        first = comparator.compare(wiki_page(["x" * 300]), wiki_page(["y" * 120]))
        second = comparator.compare(wiki_page(ARTICLE), wiki_page(ARTICLE))
        again = comparator.compare(wiki_page(["x" * 300]), wiki_page(["y" * 120]))
        self.assertFalse(second.changed)
        self.assertEqual(first, again)


class TestResultSerialization(unittest.TestCase):
    def test_short_circuit_dict(self):
        self.assertEqual(
            ComparisonResult(changed=True, reason="No archive found").to_dict(),
            {"changed": True, "reason": "No archive found"},
        )

    def test_full_dict(self):
        result = compare(wiki_page(["x" * 300]), wiki_page(["y" * 120]))
        data = result.to_dict()
        self.assertEqual(
            set(data),
            {"changed", "reason", "similarity", "diffCount", "wordDiff", "currentText", "archivedText"},
        )
        self.assertEqual(data["wordDiff"][0], {"type": "removed", "text": "y" * 120})


if __name__ == "__main__":
    unittest.main()
