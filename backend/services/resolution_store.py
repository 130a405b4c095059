"""
Resolution Store - Per-hunk merge decisions for one diff
"""

from __future__ import annotations

from models.diff import DiffResult, Resolution


class ResolutionStore:
    """Mapping from hunk id to the user's resolution choice"""

    def __init__(self, result: DiffResult):
        self._changed_ids = [hunk.id for hunk in result.changed_hunks()]
        self._choices: dict[str, Resolution] = {}
        self._custom_texts: dict[str, str] = {}
        self.clear()

    def set_resolution(self, hunk_id: str, choice: Resolution, custom_text: str | None = None):
        """Record a choice, overwriting any earlier one for the same hunk"""
        self._choices[hunk_id] = choice
        if choice == Resolution.CUSTOM:
            self._custom_texts[hunk_id] = custom_text or ""
        else:
            self._custom_texts.pop(hunk_id, None)

    def resolve_all(self, choice: Resolution):
        """Apply one choice to every changed hunk"""
        for hunk_id in self._changed_ids:
            self.set_resolution(hunk_id, choice)

    def get(self, hunk_id: str) -> Resolution:
        return self._choices.get(hunk_id, Resolution.UNRESOLVED)

    def custom_text(self, hunk_id: str) -> str | None:
        return self._custom_texts.get(hunk_id)

    def unresolved(self) -> list[str]:
        """Ids of changed hunks without a decision, in diff order"""
        return [hunk_id for hunk_id in self._changed_ids if self.get(hunk_id) == Resolution.UNRESOLVED]

    def is_fully_resolved(self) -> bool:
        return not self.unresolved()

    def clear(self):
        """Reset every changed hunk to unresolved"""
        self._choices = {hunk_id: Resolution.UNRESOLVED for hunk_id in self._changed_ids}
        self._custom_texts = {}

    def annotate(self, result: DiffResult) -> DiffResult:
        """Copy of the result with each changed hunk's resolution filled in"""
        annotated = result.model_copy(deep=True)
        for hunk in annotated.hunks:
            if hunk.requires_resolution:
                hunk.resolution = self.get(hunk.id)
                hunk.custom_text = self.custom_text(hunk.id)
        return annotated

    def __len__(self) -> int:
        return len(self._choices)

    def __contains__(self, hunk_id: str) -> bool:
        return hunk_id in self._choices
