"""
Similarity - Pluggable text similarity scoring and semantic line matching
"""

from __future__ import annotations

from typing import Protocol

from models.diff import SemanticDiffResult, SemanticLine, SemanticLineKind


class SimilarityScorer(Protocol):
    """Scores two texts between 0.0 (unrelated) and 1.0 (same meaning)"""

    def score(self, a: str, b: str) -> float:
        ...


class WordOverlapScorer:
    """Word-overlap ratio, a stand-in until an embedding scorer is wired in"""

    def __init__(self, min_word_length: int = 3):
        self.min_word_length = min_word_length

    def _words(self, text: str) -> list[str]:
        return [word for word in text.lower().split() if len(word) >= self.min_word_length]

    def score(self, a: str, b: str) -> float:
        words_a = self._words(a)
        words_b = self._words(b)

        if not words_a and not words_b:
            return 1.0
        if not words_a or not words_b:
            return 0.0

        vocabulary_b = set(words_b)
        common = sum(1 for word in words_a if word in vocabulary_b)
        return common / max(len(words_a), len(words_b))


class SemanticDiffer:
    """Pair lines of two texts by best similarity score"""

    def __init__(
        self,
        scorer: SimilarityScorer | None = None,
        match_threshold: float = 0.7,
        partial_threshold: float = 0.3,
    ):
        self.scorer = scorer or WordOverlapScorer()
        self.match_threshold = match_threshold
        self.partial_threshold = partial_threshold

    def diff(self, old_text: str, new_text: str) -> SemanticDiffResult:
        old_lines = [line for line in old_text.split("\n") if line.strip()]
        new_lines = [line for line in new_text.split("\n") if line.strip()]

        lines: list[SemanticLine] = []
        used_new: set[int] = set()
        scores: list[float] = []

        for old_line in old_lines:
            best_index, best_score = self._best_match(old_line, new_lines)
            scores.append(best_score)

            if best_index is not None and best_score > self.match_threshold:
                kind = SemanticLineKind.SEMANTIC_MATCH
            elif best_index is not None and best_score > self.partial_threshold:
                kind = SemanticLineKind.SEMANTIC_PARTIAL
            else:
                lines.append(SemanticLine(kind=SemanticLineKind.REMOVED, old_line=old_line, similarity=best_score))
                continue

            used_new.add(best_index)
            lines.append(
                SemanticLine(kind=kind, old_line=old_line, new_line=new_lines[best_index], similarity=best_score)
            )

        for index, new_line in enumerate(new_lines):
            if index not in used_new:
                lines.append(SemanticLine(kind=SemanticLineKind.ADDED, new_line=new_line))

        similarity = sum(scores) / len(scores) if scores else (1.0 if not new_lines else 0.0)
        return SemanticDiffResult(lines=lines, similarity=similarity)

    def _best_match(self, line: str, candidates: list[str]) -> tuple[int | None, float]:
        """Highest scoring candidate; the earliest wins ties"""
        best_index: int | None = None
        best_score = 0.0
        for index, candidate in enumerate(candidates):
            score = self.scorer.score(line, candidate)
            if best_index is None or score > best_score:
                best_index, best_score = index, score
        return best_index, best_score
