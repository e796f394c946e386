from enum import Enum
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple


class ChunkType(Enum):
    UNCHANGED = "unchanged"
    ADDED = "added"
    REMOVED = "removed"


@dataclass(frozen=True)
class DiffChunk:
    """
    A run of tokens sharing one diff label.
    Produced by the word aligner, merged into blocks by the grouper.
    """
    type: ChunkType
    text: str

    @property
    def is_change(self) -> bool:
        return self.type is not ChunkType.UNCHANGED

    @property
    def words(self) -> List[str]:
        return self.text.split(" ") if self.text else []

    def to_dict(self) -> Dict[str, str]:
        return {"type": self.type.value, "text": self.text}


@dataclass(frozen=True)
class DiffBlock:
    """
    Presentation grouping of chunks.
    Built per render and discarded; never persisted.
    """
    chunks: Tuple[DiffChunk, ...]
    has_changes: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "chunks": [c.to_dict() for c in self.chunks],
            "hasChanges": self.has_changes,
        }


@dataclass(frozen=True)
class ComparisonResult:
    """
    Immutable outcome of one current-vs-archived comparison.

    Short-circuit outcomes (no archive, extraction failure, too short, error)
    carry only `changed` and `reason`; the remaining fields stay None.
    """
    changed: bool
    reason: str
    similarity: Optional[str] = None
    diff_count: Optional[int] = None
    word_diff: Tuple[DiffChunk, ...] = field(default_factory=tuple)
    current_text: Optional[str] = None
    archived_text: Optional[str] = None
    score: Optional[float] = None

    @property
    def analyzed(self) -> bool:
        """True when both texts were extracted and scored."""
        return self.similarity is not None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"changed": self.changed, "reason": self.reason}
        if not self.analyzed:
            return data
        data.update({
            "similarity": self.similarity,
            "diffCount": self.diff_count,
            "wordDiff": [c.to_dict() for c in self.word_diff],
            "currentText": self.current_text,
            "archivedText": self.archived_text,
        })
        return data
