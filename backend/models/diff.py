"""Diff and merge data models"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class Granularity(str, Enum):
    """Tokenization unit used for diffing"""

    CHARACTER = "character"
    WORD = "word"
    LINE = "line"
    SECTION = "section"


class HunkKind(str, Enum):
    """Classification of a single hunk"""

    UNCHANGED = "unchanged"
    ADDED = "added"
    REMOVED = "removed"
    CONFLICT = "conflict"


class Resolution(str, Enum):
    """User decision for a changed hunk"""

    UNRESOLVED = "unresolved"
    USE_SOURCE = "useSource"
    USE_TARGET = "useTarget"
    MERGED = "merged"
    CUSTOM = "custom"


class DiffOptions(BaseModel):
    """Comparison options applied to tokens before alignment"""

    ignore_case: bool = False
    ignore_whitespace: bool = False


class DiffHunk(BaseModel):
    """A contiguous span of a diff result"""

    id: str  # positional: "hunk-<index>"
    kind: HunkKind
    source_text: str = ""
    target_text: str = ""
    resolution: Resolution = Resolution.UNRESOLVED
    custom_text: str | None = None

    @property
    def requires_resolution(self) -> bool:
        return self.kind != HunkKind.UNCHANGED


class DiffStats(BaseModel):
    """Token counts for a diff result"""

    added: int = 0
    removed: int = 0
    unchanged: int = 0
    similarity: float = 1.0  # unchanged tokens / longer token sequence


class DiffResult(BaseModel):
    """Ordered hunks covering the full span of both inputs"""

    granularity: Granularity
    hunks: list[DiffHunk] = []
    stats: DiffStats = Field(default_factory=DiffStats)

    def changed_hunks(self) -> list[DiffHunk]:
        return [hunk for hunk in self.hunks if hunk.requires_resolution]

    def hunk(self, hunk_id: str) -> DiffHunk | None:
        for hunk in self.hunks:
            if hunk.id == hunk_id:
                return hunk
        return None

    def source_text(self) -> str:
        """Reconstruct the old text from the hunks"""
        return "".join(h.source_text for h in self.hunks if h.kind != HunkKind.ADDED)

    def target_text(self) -> str:
        """Reconstruct the new text from the hunks"""
        return "".join(h.target_text for h in self.hunks if h.kind != HunkKind.REMOVED)


class SemanticLineKind(str, Enum):
    """Outcome of matching one line semantically"""

    SEMANTIC_MATCH = "semantic-match"
    SEMANTIC_PARTIAL = "semantic-partial"
    REMOVED = "removed"
    ADDED = "added"


class SemanticLine(BaseModel):
    """A single semantic line pairing"""

    kind: SemanticLineKind
    old_line: str | None = None
    new_line: str | None = None
    similarity: float = 0.0


class SemanticDiffResult(BaseModel):
    """Line pairing by similarity score"""

    lines: list[SemanticLine] = []
    similarity: float = 1.0  # mean best-match score over old lines


# ========== API request/response models ==========


class DiffRequest(BaseModel):
    """Request to diff two texts"""

    old: str
    new: str
    granularity: Granularity | None = None  # configured default when omitted
    options: DiffOptions = Field(default_factory=DiffOptions)
    classify: bool = True


class UnifiedDiffRequest(BaseModel):
    """Request for a unified diff"""

    old: str
    new: str
    from_label: str = "a"
    to_label: str = "b"
    context_lines: int = 3


class UnifiedDiffResponse(BaseModel):
    unified_diff: str


class SimilarityRequest(BaseModel):
    """Request to score two texts"""

    old: str
    new: str


class SimilarityResponse(BaseModel):
    score: float


class HunkResolution(BaseModel):
    """A resolution choice submitted for one hunk"""

    choice: Resolution
    custom_text: str | None = None


class MergeRequest(BaseModel):
    """One-shot merge of two texts with resolutions per hunk id"""

    old: str
    new: str
    granularity: Granularity | None = None  # configured default when omitted
    options: DiffOptions = Field(default_factory=DiffOptions)
    resolutions: dict[str, HunkResolution] = {}
    default_choice: Resolution | None = None  # applied to hunks missing from resolutions


class MergeResponse(BaseModel):
    """Merged text"""

    content: str
    diff: DiffResult
