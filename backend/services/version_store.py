"""
Version Store - Immutable version history per document
"""

from __future__ import annotations

import json
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Protocol

from pydantic import ValidationError

from models.version import Version

from .errors import VersionNotFound


class VersionStore(Protocol):
    """Create / list / get capability injected into the merge and document services"""

    def create(
        self,
        document_id: str,
        content: str,
        created_by: str,
        change_descriptor: str = "",
        tags: list[str] | None = None,
    ) -> Version:
        ...

    def list(self, document_id: str) -> list[Version]:
        ...

    def get(self, version_id: str) -> Version:
        ...


class InMemoryVersionStore:
    """Process-local version history"""

    def __init__(self):
        self._versions: dict[str, Version] = {}
        self._by_document: dict[str, list[str]] = {}

    def create(
        self,
        document_id: str,
        content: str,
        created_by: str,
        change_descriptor: str = "",
        tags: list[str] | None = None,
    ) -> Version:
        history = self._by_document.setdefault(document_id, [])
        # Next after the latest; skipped records may leave gaps
        sequence_number = self._versions[history[-1]].sequence_number + 1 if history else 1
        version = Version(
            id=str(uuid.uuid4()),
            document_id=document_id,
            sequence_number=sequence_number,
            content=content,
            created_at=datetime.now(timezone.utc),
            created_by=created_by,
            change_descriptor=change_descriptor or f"Version {sequence_number}",
            tags=tuple(tags or ()),
        )
        self._versions[version.id] = version
        history.append(version.id)
        return version

    def list(self, document_id: str) -> list[Version]:
        return [self._versions[version_id] for version_id in self._by_document.get(document_id, [])]

    def get(self, version_id: str) -> Version:
        version = self._versions.get(version_id)
        if version is None:
            raise VersionNotFound(f"Version not found: {version_id}")
        return version

    def latest(self, document_id: str) -> Version | None:
        history = self._by_document.get(document_id)
        if not history:
            return None
        return self._versions[history[-1]]

    def _restore(self, version: Version):
        self._versions[version.id] = version
        self._by_document.setdefault(version.document_id, []).append(version.id)


class JsonFileVersionStore(InMemoryVersionStore):
    """Version history persisted to a JSON file after every create"""

    def __init__(self, path: Path):
        super().__init__()
        self._path = Path(path)
        self._load()

    def _load(self):
        if not self._path.exists():
            return

        try:
            with open(self._path) as f:
                records = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            print(f"[VersionStore] Error loading {self._path}: {e}")
            return

        if not isinstance(records, list):
            print(f"[VersionStore] Error loading {self._path}: expected a list of versions")
            return

        versions = []
        for record in records:
            try:
                versions.append(Version.model_validate(record))
            except ValidationError as e:
                print(f"[VersionStore] Skipping invalid version record in {self._path}: {e}")

        for version in sorted(versions, key=lambda v: (v.document_id, v.sequence_number)):
            self._restore(version)
        print(f"[VersionStore] Loaded {len(versions)} versions from {self._path}")

    def create(
        self,
        document_id: str,
        content: str,
        created_by: str,
        change_descriptor: str = "",
        tags: list[str] | None = None,
    ) -> Version:
        version = super().create(document_id, content, created_by, change_descriptor, tags)
        self._save()
        return version

    def _save(self):
        self._path.parent.mkdir(parents=True, exist_ok=True)
        records = [version.model_dump(mode="json") for version in self._versions.values()]
        try:
            with open(self._path, "w") as f:
                json.dump(records, f, indent=2)
        except OSError as e:
            raise RuntimeError(f"Failed to save versions: {e}")
