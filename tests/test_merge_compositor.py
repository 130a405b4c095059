"""Tests for merge composition"""

import pytest

from models.diff import Granularity, Resolution
from services.conflict_classifier import ConflictClassifier
from services.diff_engine import DiffEngine
from services.errors import PreconditionNotMet
from services.merge_compositor import MergeCompositor
from services.resolution_store import ResolutionStore

OLD = "line1\nline2\nline3"
NEW = "line1\nline2-modified\nline3"


def prepare(old, new, granularity):
    result = ConflictClassifier().classify(DiffEngine().diff(old, new, granularity))
    return result, ResolutionStore(result)


@pytest.fixture
def compositor():
    return MergeCompositor()


class TestCompose:
    def test_use_target_yields_new_text(self, compositor):
        result, store = prepare(OLD, NEW, Granularity.LINE)
        store.resolve_all(Resolution.USE_TARGET)

        assert compositor.compose(result, store) == NEW

    def test_use_source_yields_old_text(self, compositor):
        result, store = prepare(OLD, NEW, Granularity.LINE)
        store.resolve_all(Resolution.USE_SOURCE)

        assert compositor.compose(result, store) == OLD

    def test_word_insertion_use_target(self, compositor):
        result, store = prepare("the quick fox", "the quick brown fox", Granularity.WORD)
        store.resolve_all(Resolution.USE_TARGET)

        assert compositor.compose(result, store) == "the quick brown fox"

    def test_unresolved_raises(self, compositor):
        result, store = prepare(OLD, NEW, Granularity.LINE)
        store.set_resolution("hunk-1", Resolution.USE_TARGET)

        with pytest.raises(PreconditionNotMet) as exc_info:
            compositor.compose(result, store)
        assert exc_info.value.unresolved == ["hunk-2"]

    def test_compose_is_deterministic(self, compositor):
        result, store = prepare(OLD, NEW, Granularity.LINE)
        store.set_resolution("hunk-1", Resolution.USE_SOURCE)
        store.set_resolution("hunk-2", Resolution.USE_TARGET)

        assert compositor.compose(result, store) == compositor.compose(result, store)

    def test_merged_keeps_both_lines(self, compositor):
        result, store = prepare("a\nb\nc", "a\nx\nc", Granularity.LINE)
        store.resolve_all(Resolution.MERGED)

        assert compositor.compose(result, store) == "a\nb\nx\nc"

    def test_merged_conflict_joins_paragraphs(self, compositor):
        result, store = prepare("Intro\n\nOld", "Intro\n\nNew", Granularity.SECTION)
        store.resolve_all(Resolution.MERGED)

        assert compositor.compose(result, store) == "Intro\n\nOld\n\nNew"

    def test_merged_conflict_keeps_existing_separator(self, compositor):
        result, store = prepare("Intro\n\nOld body\n\nOutro", "Intro\n\nNew body\n\nOutro", Granularity.SECTION)
        store.resolve_all(Resolution.MERGED)

        assert compositor.compose(result, store) == "Intro\n\nOld body\n\nNew body\n\nOutro"

    def test_custom_text_replaces_conflict(self, compositor):
        result, store = prepare("Intro\n\nOld body\n\nOutro", "Intro\n\nNew body\n\nOutro", Granularity.SECTION)
        store.set_resolution("hunk-1", Resolution.CUSTOM, "Custom body\n\n")

        assert compositor.compose(result, store) == "Intro\n\nCustom body\n\nOutro"

    def test_unchanged_section_uses_target_text(self, compositor):
        result, store = prepare("p1\n\np2", "p1\n\np2\n\np3", Granularity.SECTION)
        store.resolve_all(Resolution.USE_TARGET)

        assert compositor.compose(result, store) == "p1\n\np2\n\np3"

    def test_merged_final_line_without_newline(self, compositor):
        result, store = prepare("a\nb", "a\nx", Granularity.LINE)
        store.resolve_all(Resolution.MERGED)

        assert compositor.compose(result, store) == "a\nb\nx"

    def test_merged_words_are_separated(self, compositor):
        result, store = prepare("a b", "a c", Granularity.WORD)
        store.resolve_all(Resolution.MERGED)

        assert compositor.compose(result, store) == "a b c"

    def test_keeping_both_sides_of_final_line(self, compositor):
        result, store = prepare("a\nb", "a\nx", Granularity.LINE)
        store.set_resolution("hunk-1", Resolution.USE_SOURCE)
        store.set_resolution("hunk-2", Resolution.USE_TARGET)

        assert compositor.compose(result, store) == "a\nb\nx"

    def test_merged_characters_join_directly(self, compositor):
        result, store = prepare("ab", "ac", Granularity.CHARACTER)
        store.resolve_all(Resolution.MERGED)

        assert compositor.compose(result, store) == "abc"


class TestPreview:
    def test_unresolved_hunks_show_source(self, compositor):
        result, store = prepare(OLD, NEW, Granularity.LINE)
        assert compositor.preview(result, store) == OLD

    def test_preview_reflects_partial_resolution(self, compositor):
        result, store = prepare(OLD, NEW, Granularity.LINE)
        store.set_resolution("hunk-2", Resolution.USE_TARGET)

        assert compositor.preview(result, store) == "line1\nline2\nline2-modified\nline3"
