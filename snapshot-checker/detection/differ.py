"""
Word-level diff between two normalized texts.

Uses a bounded greedy lookahead instead of an LCS/edit-distance table so the
cost stays near-linear on long articles. The alignment always covers both
token sequences in order, but it is not guaranteed to be minimal.
"""

from typing import List, Optional, Tuple

from checker.config import MAX_LOOKAHEAD
from detection.models import ChunkType, DiffChunk


def tokenize(text: str) -> List[str]:
    return text.split()


def _find_realignment(
    old: List[str], new: List[str], i: int, j: int, max_lookahead: int
) -> Tuple[Optional[ChunkType], int]:
    """
    Smallest skip that brings the cursors back onto a matching token.
    At equal distance, skipping old tokens (removal) wins over skipping
    new tokens (addition). Returns (None, 0) when nothing matches in range.
    """
    bound = min(max_lookahead, max(len(old) - i, len(new) - j))
    for lookahead in range(1, bound + 1):
        if i + lookahead < len(old) and j < len(new) and old[i + lookahead] == new[j]:
            return ChunkType.REMOVED, lookahead
        if i < len(old) and j + lookahead < len(new) and old[i] == new[j + lookahead]:
            return ChunkType.ADDED, lookahead
    return None, 0


def align_tokens(
    old: List[str], new: List[str], max_lookahead: int = MAX_LOOKAHEAD
) -> List[DiffChunk]:
    """
    One single-word chunk per token.
    Removed words come from old, added words from new.
    """
    out: List[DiffChunk] = []
    i = j = 0

    while i < len(old) or j < len(new):
        if i < len(old) and j < len(new) and old[i] == new[j]:
            out.append(DiffChunk(ChunkType.UNCHANGED, old[i]))
            i += 1
            j += 1
            continue

        kind, skip = _find_realignment(old, new, i, j, max_lookahead)
        if kind is ChunkType.REMOVED:
            out.extend(DiffChunk(ChunkType.REMOVED, word) for word in old[i:i + skip])
            i += skip
        elif kind is ChunkType.ADDED:
            out.extend(DiffChunk(ChunkType.ADDED, word) for word in new[j:j + skip])
            j += skip
        elif i < len(old) and j < len(new):
            # substitution
            out.append(DiffChunk(ChunkType.REMOVED, old[i]))
            out.append(DiffChunk(ChunkType.ADDED, new[j]))
            i += 1
            j += 1
        elif i < len(old):
            out.append(DiffChunk(ChunkType.REMOVED, old[i]))
            i += 1
        else:
            out.append(DiffChunk(ChunkType.ADDED, new[j]))
            j += 1

    return out


def merge_runs(chunks: List[DiffChunk]) -> List[DiffChunk]:
    """Collapse consecutive same-type chunks into one space-joined chunk."""
    merged: List[DiffChunk] = []
    run_type = None
    run_texts: List[str] = []

    for chunk in chunks:
        if chunk.type is run_type:
            run_texts.append(chunk.text)
            continue
        if run_texts:
            merged.append(DiffChunk(run_type, " ".join(run_texts)))
        run_type = chunk.type
        run_texts = [chunk.text]

    if run_texts:
        merged.append(DiffChunk(run_type, " ".join(run_texts)))

    return merged


def split_words(chunks: List[DiffChunk]) -> List[DiffChunk]:
    """Inverse of merge_runs: one chunk per word, order kept."""
    return [
        DiffChunk(chunk.type, word)
        for chunk in chunks
        for word in chunk.words
    ]


def word_diff(old_text: str, new_text: str, max_lookahead: int = MAX_LOOKAHEAD) -> List[DiffChunk]:
    """
    Diff two normalized texts word by word.
    `removed` chunks hold words only in old_text, `added` chunks words only in new_text.
    """
    return merge_runs(align_tokens(tokenize(old_text), tokenize(new_text), max_lookahead))


def side_tokens(chunks: List[DiffChunk], side: ChunkType) -> List[str]:
    """
    Rebuild one side's token sequence from a diff.
    side=REMOVED gives the old text's tokens, side=ADDED the new text's.
    """
    words: List[str] = []
    for chunk in chunks:
        if chunk.type is ChunkType.UNCHANGED or chunk.type is side:
            words.extend(chunk.words)
    return words
