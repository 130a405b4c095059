"""
Document Service - Folder-scoped knowledge document uploads
"""

from __future__ import annotations

import hashlib
import re
import time
import uuid
from datetime import datetime, timezone
from pathlib import Path

from models.document import Document, FileType, Folder

from .errors import DocumentNotFound, DuplicateDocument, FolderExists, FolderNotFound
from .version_store import VersionStore


def get_file_type(mime_type: str | None, file_name: str | None) -> FileType:
    """Classify by mime type first, then by extension"""
    name = (file_name or "").lower()
    mime = (mime_type or "").lower()
    if mime == "text/markdown" or name.endswith(".md"):
        return FileType.MARKDOWN
    if mime == "application/pdf" or name.endswith(".pdf"):
        return FileType.PDF
    if mime.startswith("text/") or name.endswith(".txt"):
        return FileType.TEXT
    return FileType.OTHER


class DocumentService:
    """Knowledge base folders and documents, stored on the filesystem"""

    def __init__(self, upload_dir: Path, version_store: VersionStore):
        self.upload_dir = Path(upload_dir)
        self.version_store = version_store
        self._folders: dict[str, Folder] = {}
        self._documents: dict[str, Document] = {}

    # ========== Folders ==========

    def create_folder(
        self,
        project_id: str,
        name: str,
        parent_folder_id: str | None = None,
        description: str = "",
    ) -> Folder:
        parent_path = "/"
        if parent_folder_id:
            parent_path = self._get_folder(project_id, parent_folder_id).path

        path = f"/{name}" if parent_path == "/" else f"{parent_path}/{name}"
        if any(f.project_id == project_id and f.path == path for f in self._folders.values()):
            raise FolderExists(f"Folder already exists: {path}")

        folder = Folder(
            id=str(uuid.uuid4()),
            project_id=project_id,
            parent_folder_id=parent_folder_id or None,
            name=name,
            description=description,
            path=path,
            created_at=datetime.now(timezone.utc),
        )
        self._folders[folder.id] = folder
        return folder

    def list_folders(self, project_id: str, parent_folder_id: str | None = None) -> list[Folder]:
        folders = [
            f for f in self._folders.values()
            if f.project_id == project_id and (parent_folder_id is None or f.parent_folder_id == parent_folder_id)
        ]
        return sorted(folders, key=lambda f: f.name)

    def _get_folder(self, project_id: str, folder_id: str) -> Folder:
        folder = self._folders.get(folder_id)
        if folder is None or folder.project_id != project_id:
            raise FolderNotFound(f"Folder not found: {folder_id}")
        return folder

    # ========== Documents ==========

    def _project_dir(self, project_id: str) -> Path:
        safe_project = re.sub(r"[^A-Za-z0-9_-]", "_", project_id)
        project_dir = self.upload_dir / safe_project
        project_dir.mkdir(parents=True, exist_ok=True)
        return project_dir

    def upload_document(
        self,
        project_id: str,
        file_name: str,
        data: bytes,
        mime_type: str | None = None,
        folder_id: str | None = None,
        title: str | None = None,
        description: str = "",
        created_by: str = "unknown",
    ) -> Document:
        """Store one uploaded file and record its initial version"""
        print(f"[DocumentService] Upload {file_name} ({len(data)} bytes) to project {project_id}")

        # Empty string means the root folder
        if folder_id:
            self._get_folder(project_id, folder_id)
        else:
            folder_id = None

        content_hash = hashlib.sha256(data).hexdigest()
        for existing in self._documents.values():
            if existing.project_id == project_id and existing.content_hash == content_hash:
                raise DuplicateDocument(f'Document with identical content already exists: "{existing.title}"')

        file_type = get_file_type(mime_type, file_name)
        stored_name = f"{int(time.time() * 1000)}-{Path(file_name).name}"
        file_path = self._project_dir(project_id) / stored_name
        file_path.write_bytes(data)

        document = Document(
            id=str(uuid.uuid4()),
            project_id=project_id,
            folder_id=folder_id,
            title=title or file_name,
            description=description,
            file_name=file_name,
            file_path=str(file_path),
            file_size=len(data),
            mime_type=mime_type or "application/octet-stream",
            file_type=file_type,
            content_hash=content_hash,
            created_by=created_by,
            created_at=datetime.now(timezone.utc),
        )
        self._documents[document.id] = document

        if file_type in (FileType.MARKDOWN, FileType.TEXT):
            self.version_store.create(
                document.id,
                data.decode("utf-8", errors="replace"),
                created_by,
                "Initial version",
            )

        return document

    def get_document(self, document_id: str) -> Document:
        document = self._documents.get(document_id)
        if document is None:
            raise DocumentNotFound(f"Document not found: {document_id}")
        return document

    def list_documents(
        self,
        project_id: str,
        folder_id: str | None = None,
        search: str | None = None,
        file_type: FileType | None = None,
    ) -> list[Document]:
        documents = [d for d in self._documents.values() if d.project_id == project_id]
        if folder_id is not None:
            documents = [d for d in documents if d.folder_id == (folder_id or None)]
        if file_type is not None:
            documents = [d for d in documents if d.file_type == file_type]
        if search:
            needle = search.lower()
            documents = [
                d for d in documents
                if needle in d.title.lower() or needle in d.description.lower() or needle in d.file_name.lower()
            ]
        return sorted(documents, key=lambda d: d.created_at, reverse=True)

    def read_content(self, document_id: str) -> bytes:
        document = self.get_document(document_id)
        return Path(document.file_path).read_bytes()

    def delete_document(self, document_id: str):
        document = self._documents.pop(document_id, None)
        if document is None:
            raise DocumentNotFound(f"Document not found: {document_id}")
        path = Path(document.file_path)
        if path.exists():
            path.unlink()
        print(f"[DocumentService] Deleted document {document_id}")
