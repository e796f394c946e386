import tempfile
import unittest
from pathlib import Path

from detection.models import ChunkType, ComparisonResult, DiffBlock, DiffChunk
from report_generator import format_summary, format_blocks, generate_html_report

U, A, R = ChunkType.UNCHANGED, ChunkType.ADDED, ChunkType.REMOVED


def words(kind, text):
    return [DiffChunk(kind, w) for w in text.split()]


CHANGED = ComparisonResult(
    changed=True,
    reason="Content differs by 35.0%",
    similarity="65.0%",
    diff_count=42,
    word_diff=(DiffChunk(U, "the red"), DiffChunk(R, "panda"), DiffChunk(A, "<fox>")),
    current_text="the red <fox>",
    archived_text="the red panda",
    score=0.65,
)


class TestConsoleReport(unittest.TestCase):
    def test_changed_summary(self):
        text = format_summary(CHANGED)
        self.assertIn("Changes Detected", text)
        self.assertIn("Content differs by 35.0%", text)
        self.assertIn("Differences: 42", text)
        self.assertIn("Similarity: 65.0%", text)

    def test_short_circuit_summary(self):
        text = format_summary(ComparisonResult(changed=True, reason="No archive found"))
        self.assertIn("No archive found", text)
        self.assertIn("Differences: multiple", text)
        self.assertNotIn("Similarity", text)

    def test_unchanged_summary(self):
        result = ComparisonResult(changed=False, reason="Content is essentially the same", similarity="97.1%")
        self.assertIn("No Significant Changes", format_summary(result))

    def test_block_markers(self):
        block = DiffBlock(
            chunks=tuple(words(U, "the red") + words(R, "small panda") + words(A, "fox") + words(U, "is here")),
            has_changes=True,
        )
        self.assertEqual(format_blocks([block]), "the red [-small panda-] {+fox+} is here")

    def test_long_stable_block_abbreviated(self):
        stable = DiffBlock(chunks=tuple(words(U, " ".join(f"w{i}" for i in range(20)))), has_changes=False)
        text = format_blocks([stable], preview_words=6)
        self.assertEqual(text, "w0 w1 w2 ... (14 unchanged words) ... w17 w18 w19")

    def test_blocks_separated(self):
        a = DiffBlock(chunks=tuple(words(A, "x")), has_changes=True)
        b = DiffBlock(chunks=tuple(words(U, "y z")), has_changes=False)
        self.assertEqual(format_blocks([a, b]).count("\n"), 2)


class TestHtmlReport(unittest.TestCase):
    def test_writes_escaped_report(self):
        block = DiffBlock(chunks=tuple(words(U, "the red") + words(R, "panda") + words(A, "<fox>")), has_changes=True)
        with tempfile.TemporaryDirectory() as tmp:
            path = generate_html_report(
                url="https://en.wikipedia.org/wiki/Red_panda",
                result=CHANGED,
                blocks=[block],
                out_dir=Path(tmp) / "reports",
                file_prefix="compare_test",
                archive_url="https://web.archive.org/web/2024/x",
                checked_at="01-01-2024 00:00:00",
            )
            html = Path(path).read_text(encoding="utf-8")

        self.assertTrue(path.endswith("compare_test.html"))
        self.assertIn("<span class='del'>panda</span>", html)
        self.assertIn("<span class='add'>&lt;fox&gt;</span>", html)
        self.assertNotIn("<fox>", html)
        self.assertIn("65.0%", html)
        self.assertIn("Changes Detected", html)

    def test_report_without_blocks(self):
        result = ComparisonResult(changed=False, reason="Content is essentially the same", similarity="100.0%")
        with tempfile.TemporaryDirectory() as tmp:
            path = generate_html_report(
                url="https://en.wikipedia.org/wiki/X", result=result, blocks=[],
                out_dir=Path(tmp), file_prefix="same",
            )
            html = Path(path).read_text(encoding="utf-8")
        self.assertIn("No significant changes detected", html)


if __name__ == "__main__":
    unittest.main()
