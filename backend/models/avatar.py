"""Avatar data models"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel


class StorageType(str, Enum):
    """Where an optimized avatar lives"""

    INLINE = "inline"  # base64 in the record
    EXTERNAL = "external"  # file under the avatar directory


class OptimizationInfo(BaseModel):
    original_size: int
    optimized_size: int
    reduction: float  # percent
    format: str


class AvatarRecord(BaseModel):
    """Stored avatar for a user"""

    user_id: str
    storage_type: StorageType
    mime_type: str
    size: int
    data: bytes | None = None  # set for inline storage
    url: str | None = None  # set for external storage
    optimization: OptimizationInfo


class AvatarView(BaseModel):
    """Avatar as returned for display"""

    src: str
    type: str  # "base64", "url", "fallback"
    size: int | None = None


class AvatarUploadResponse(BaseModel):
    user_id: str
    storage_type: StorageType
    mime_type: str
    size: int
    url: str | None = None
    optimization: OptimizationInfo
