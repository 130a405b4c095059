"""Models module - Pydantic data models"""

from .diff import (
    DiffHunk,
    DiffOptions,
    DiffRequest,
    DiffResult,
    DiffStats,
    Granularity,
    HunkKind,
    HunkResolution,
    MergeRequest,
    MergeResponse,
    Resolution,
    SemanticDiffResult,
    SemanticLine,
    SemanticLineKind,
)
from .version import (
    FinalizeRequest,
    MergeSessionResponse,
    OpenSessionRequest,
    PreviewResponse,
    ResolveHunkRequest,
    Version,
    VersionCreateRequest,
)
from .document import Document, FileType, Folder, FolderCreateRequest
from .avatar import AvatarRecord, AvatarUploadResponse, AvatarView, OptimizationInfo, StorageType

__all__ = [
    # Diff models
    "DiffHunk",
    "DiffOptions",
    "DiffRequest",
    "DiffResult",
    "DiffStats",
    "Granularity",
    "HunkKind",
    "HunkResolution",
    "MergeRequest",
    "MergeResponse",
    "Resolution",
    "SemanticDiffResult",
    "SemanticLine",
    "SemanticLineKind",
    # Version models
    "FinalizeRequest",
    "MergeSessionResponse",
    "OpenSessionRequest",
    "PreviewResponse",
    "ResolveHunkRequest",
    "Version",
    "VersionCreateRequest",
    # Document models
    "Document",
    "FileType",
    "Folder",
    "FolderCreateRequest",
    # Avatar models
    "AvatarRecord",
    "AvatarUploadResponse",
    "AvatarView",
    "OptimizationInfo",
    "StorageType",
]
