"""
Merge Compositor - Linearize resolved hunks into the merged text
"""

from __future__ import annotations

from models.diff import DiffHunk, DiffResult, Granularity, HunkKind, Resolution

from .errors import PreconditionNotMet
from .resolution_store import ResolutionStore
from .tokenizer import separator_for


class MergeCompositor:
    """Compose final text from a diff and its resolutions"""

    def compose(self, result: DiffResult, store: ResolutionStore) -> str:
        """Merged text; every changed hunk must be resolved first"""
        unresolved = store.unresolved()
        if unresolved:
            raise PreconditionNotMet(unresolved)
        return self._render(result, store)

    def preview(self, result: DiffResult, store: ResolutionStore) -> str:
        """Merged text for display; unresolved hunks keep their source text"""
        return self._render(result, store)

    def _render(self, result: DiffResult, store: ResolutionStore) -> str:
        separator = separator_for(result.granularity)
        parts: list[str] = []
        # Last non-empty chunk of the current run of changed hunks
        previous = ""
        for hunk in result.hunks:
            chunk = self._emit(hunk, store, result.granularity)
            if hunk.kind == HunkKind.UNCHANGED:
                previous = ""
            elif chunk:
                # Kept text from both sides of one change must not run together
                if previous and not previous[-1].isspace():
                    parts.append(separator)
                previous = chunk
            parts.append(chunk)
        return "".join(parts)

    def _emit(self, hunk: DiffHunk, store: ResolutionStore, granularity: Granularity) -> str:
        if hunk.kind == HunkKind.UNCHANGED:
            return hunk.target_text

        choice = store.get(hunk.id)
        if choice == Resolution.USE_TARGET:
            return hunk.target_text
        if choice == Resolution.MERGED:
            return self._join(hunk.source_text, hunk.target_text, granularity)
        if choice == Resolution.CUSTOM:
            return store.custom_text(hunk.id) or ""
        # useSource, and unresolved in preview
        return hunk.source_text

    @staticmethod
    def _join(source: str, target: str, granularity: Granularity) -> str:
        if not source or not target or source[-1].isspace():
            return source + target
        return source + separator_for(granularity) + target
