from detection.models import ChunkType, DiffChunk, DiffBlock, ComparisonResult
from detection.extraction.v1 import extract_content_v1, normalize_text
from detection.similarity import similarity, is_changed
from detection.differ import word_diff, align_tokens, merge_runs, split_words
from detection.grouping import group_chunks
from detection.engine import SnapshotComparator, compare
