"""Knowledge document data models"""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel


class FileType(str, Enum):
    """Coarse document type derived from mime type or file name"""

    MARKDOWN = "markdown"
    PDF = "pdf"
    TEXT = "text"
    OTHER = "other"


class Folder(BaseModel):
    """A folder inside a project's knowledge base"""

    id: str
    project_id: str
    parent_folder_id: str | None = None
    name: str
    description: str = ""
    path: str  # "/a/b"
    created_at: datetime


class Document(BaseModel):
    """Metadata for an uploaded document"""

    id: str
    project_id: str
    folder_id: str | None = None
    title: str
    description: str = ""
    file_name: str
    file_path: str
    file_size: int
    mime_type: str
    file_type: FileType
    content_hash: str  # sha256 hex
    created_by: str
    created_at: datetime


class FolderCreateRequest(BaseModel):
    """Request to create a folder"""

    project_id: str
    name: str
    parent_folder_id: str | None = None
    description: str = ""
