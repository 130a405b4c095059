"""
Merge Session - Interactive merge of two versions of a document
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass

from models.diff import DiffOptions, DiffResult, Granularity, Resolution
from models.version import Version

from .conflict_classifier import ConflictClassifier
from .diff_engine import DiffEngine
from .errors import HunkNotFound, SessionNotFound
from .merge_compositor import MergeCompositor
from .resolution_store import ResolutionStore
from .version_store import VersionStore


@dataclass
class MergeSession:
    """Diff and resolution state between a source and a target version"""

    id: str
    source: Version
    target: Version
    diff: DiffResult
    resolutions: ResolutionStore


class MergeSessionManager:
    """Open, resolve, finalize and cancel merge sessions"""

    def __init__(
        self,
        version_store: VersionStore,
        engine: DiffEngine | None = None,
        classifier: ConflictClassifier | None = None,
        compositor: MergeCompositor | None = None,
    ):
        self.version_store = version_store
        self.engine = engine or DiffEngine()
        self.classifier = classifier or ConflictClassifier()
        self.compositor = compositor or MergeCompositor()
        self._sessions: dict[str, MergeSession] = {}

    def open(
        self,
        source_version_id: str,
        target_version_id: str,
        granularity: Granularity = Granularity.LINE,
        options: DiffOptions | None = None,
    ) -> MergeSession:
        source = self.version_store.get(source_version_id)
        target = self.version_store.get(target_version_id)

        raw = self.engine.diff(source.content, target.content, granularity, options)
        diff = self.classifier.classify(raw)

        session = MergeSession(
            id=str(uuid.uuid4()),
            source=source,
            target=target,
            diff=diff,
            resolutions=ResolutionStore(diff),
        )
        self._sessions[session.id] = session
        print(
            f"[MergeSession] Opened {session.id}: v{source.sequence_number} -> v{target.sequence_number} "
            f"({granularity.value}, {len(diff.changed_hunks())} changed hunks)"
        )
        return session

    def get(self, session_id: str) -> MergeSession:
        session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFound(f"Merge session not found: {session_id}")
        return session

    def resolve(
        self,
        session_id: str,
        hunk_id: str,
        choice: Resolution,
        custom_text: str | None = None,
    ) -> MergeSession:
        session = self.get(session_id)
        if session.diff.hunk(hunk_id) is None:
            raise HunkNotFound(f"Hunk not found in session {session_id}: {hunk_id}")
        session.resolutions.set_resolution(hunk_id, choice, custom_text)
        return session

    def preview(self, session_id: str) -> str:
        session = self.get(session_id)
        return self.compositor.preview(session.diff, session.resolutions)

    def finalize(
        self,
        session_id: str,
        created_by: str,
        change_descriptor: str | None = None,
    ) -> Version:
        """Compose the merge into a new version on the target's document"""
        session = self.get(session_id)
        content = self.compositor.compose(session.diff, session.resolutions)

        version = self.version_store.create(
            session.target.document_id,
            content,
            created_by,
            change_descriptor
            or f"Merged v{session.source.sequence_number} into v{session.target.sequence_number}",
            ["merge"],
        )
        session.resolutions.clear()
        del self._sessions[session_id]
        print(f"[MergeSession] Finalized {session_id} as version {version.sequence_number}")
        return version

    def cancel(self, session_id: str):
        session = self.get(session_id)
        session.resolutions.clear()
        del self._sessions[session_id]
        print(f"[MergeSession] Cancelled {session_id}")
