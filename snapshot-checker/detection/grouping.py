from typing import List, Optional

from checker.config import CONTEXT_CAP, MIN_BLOCK_SIZE
from detection.models import DiffBlock, DiffChunk


class _OpenBlock:
    """Mutable block under construction; frozen into a DiffBlock at the end."""

    def __init__(self, chunks: Optional[List[DiffChunk]] = None, has_changes: bool = False):
        self.chunks: List[DiffChunk] = chunks or []
        self.has_changes = has_changes

    def freeze(self) -> DiffBlock:
        return DiffBlock(chunks=tuple(self.chunks), has_changes=self.has_changes)


def _split_pass(chunks: List[DiffChunk], context_cap: int, min_block_size: int) -> List[_OpenBlock]:
    blocks: List[_OpenBlock] = []
    current = _OpenBlock()
    trailing_context = 0

    for chunk in chunks:
        if not chunk.is_change:
            current.chunks.append(chunk)
            if not current.has_changes:
                continue
            trailing_context += 1
            if trailing_context > context_cap:
                # Keep context_cap chunks as trailing context, the rest opens a stable block
                excess = trailing_context - context_cap
                blocks.append(_OpenBlock(current.chunks[:-excess], True))
                current = _OpenBlock(current.chunks[-excess:], False)
                trailing_context = 0
            continue

        if not current.has_changes and len(current.chunks) > min_block_size:
            blocks.append(current)
            current = _OpenBlock()
        # A short stable run becomes leading context of the change
        current.chunks.append(chunk)
        current.has_changes = True
        trailing_context = 0

    if current.chunks:
        blocks.append(current)
    return blocks


def _merge_small_stable(blocks: List[_OpenBlock], min_block_size: int) -> List[_OpenBlock]:
    merged: List[_OpenBlock] = []
    carry: List[DiffChunk] = []

    for idx, block in enumerate(blocks):
        if carry:
            block.chunks = carry + block.chunks
            carry = []

        if block.has_changes or len(block.chunks) >= min_block_size:
            merged.append(block)
            continue

        if merged and merged[-1].has_changes:
            merged[-1].chunks.extend(block.chunks)
        elif idx + 1 < len(blocks) and blocks[idx + 1].has_changes:
            carry = block.chunks
        else:
            merged.append(block)

    return merged


def group_chunks(
    chunks: List[DiffChunk],
    context_cap: int = CONTEXT_CAP,
    min_block_size: int = MIN_BLOCK_SIZE,
) -> List[DiffBlock]:
    """
    Group a flat chunk sequence into change regions and stable stretches.

    A change region keeps at most `context_cap` unchanged chunks after its
    last change; a stable run longer than `min_block_size` before a change
    becomes its own block. Stable blocks still below `min_block_size` after
    that are folded into the neighbouring change region, preferring the one
    before. Chunks are never reordered, dropped or rewritten.
    """
    blocks = _split_pass(list(chunks), context_cap, min_block_size)
    return [b.freeze() for b in _merge_small_stable(blocks, min_block_size)]
