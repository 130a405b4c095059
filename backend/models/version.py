"""Version history data models"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from .diff import DiffOptions, DiffResult, Granularity, Resolution


class Version(BaseModel):
    """An immutable snapshot of a document's content"""

    model_config = ConfigDict(frozen=True)

    id: str
    document_id: str
    sequence_number: int  # 1-based, per document
    content: str
    created_at: datetime
    created_by: str
    change_descriptor: str = ""
    tags: tuple[str, ...] = ()


class VersionCreateRequest(BaseModel):
    """Request to create a new version"""

    content: str
    created_by: str = "unknown"
    change_descriptor: str | None = None
    tags: list[str] = []


class OpenSessionRequest(BaseModel):
    """Request to start merging two versions"""

    source_version_id: str
    target_version_id: str
    granularity: Granularity | None = None  # configured default when omitted
    options: DiffOptions = Field(default_factory=DiffOptions)


class ResolveHunkRequest(BaseModel):
    """Request to record a resolution for a hunk"""

    choice: Resolution
    custom_text: str | None = None


class FinalizeRequest(BaseModel):
    """Request to finalize a merge session"""

    created_by: str = "unknown"
    change_descriptor: str | None = None


class MergeSessionResponse(BaseModel):
    """State of a merge session"""

    session_id: str
    source_version_id: str
    target_version_id: str
    diff: DiffResult
    unresolved: list[str]
    fully_resolved: bool


class PreviewResponse(BaseModel):
    content: str
    fully_resolved: bool
