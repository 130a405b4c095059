"""
Conflict Classifier - Decide which hunks need a user decision
"""

from __future__ import annotations

from models.diff import DiffHunk, DiffResult, Granularity, HunkKind

from .tokenizer import tokenize


class ConflictClassifier:
    """Post-process a raw diff into resolvable hunks"""

    def classify(self, result: DiffResult) -> DiffResult:
        """Return a new DiffResult with section replacements paired into conflicts.

        Outside section mode the hunks pass through; every non-unchanged
        hunk requires resolution.
        """
        if result.granularity != Granularity.SECTION:
            return result.model_copy(deep=True)

        hunks: list[DiffHunk] = []
        pending = list(result.hunks)
        i = 0
        while i < len(pending):
            hunk = pending[i]
            following = pending[i + 1] if i + 1 < len(pending) else None
            if hunk.kind == HunkKind.REMOVED and following is not None and following.kind == HunkKind.ADDED:
                hunks.extend(self._pair_sections(hunk, following))
                i += 2
                continue
            hunks.append(hunk.model_copy())
            i += 1

        for index, hunk in enumerate(hunks):
            hunk.id = f"hunk-{index}"

        return DiffResult(granularity=result.granularity, hunks=hunks, stats=result.stats.model_copy())

    def _pair_sections(self, removed: DiffHunk, added: DiffHunk) -> list[DiffHunk]:
        """Pair replaced paragraphs one-for-one by index"""
        old_sections = tokenize(removed.source_text, Granularity.SECTION)
        new_sections = tokenize(added.target_text, Granularity.SECTION)
        paired = min(len(old_sections), len(new_sections))

        hunks = [
            DiffHunk(
                id="",
                kind=HunkKind.CONFLICT,
                source_text=old_sections[n],
                target_text=new_sections[n],
            )
            for n in range(paired)
        ]
        # Leftovers stay plain removals / additions
        if len(old_sections) > paired:
            hunks.append(DiffHunk(id="", kind=HunkKind.REMOVED, source_text="".join(old_sections[paired:])))
        if len(new_sections) > paired:
            hunks.append(DiffHunk(id="", kind=HunkKind.ADDED, target_text="".join(new_sections[paired:])))
        return hunks
