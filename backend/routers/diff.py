"""Diff and one-shot merge API endpoints"""

from __future__ import annotations

from fastapi import APIRouter, HTTPException

from models.diff import (
    DiffRequest,
    DiffResult,
    Granularity,
    MergeRequest,
    MergeResponse,
    SemanticDiffResult,
    SimilarityRequest,
    SimilarityResponse,
    UnifiedDiffRequest,
    UnifiedDiffResponse,
)
from services.config_manager import ConfigManager
from services.conflict_classifier import ConflictClassifier
from services.diff_engine import DiffEngine
from services.errors import PreconditionNotMet
from services.merge_compositor import MergeCompositor
from services.registry import get_registry
from services.resolution_store import ResolutionStore

router = APIRouter()
diff_engine = DiffEngine()
classifier = ConflictClassifier()
compositor = MergeCompositor()


def resolve_granularity(granularity: Granularity | None) -> Granularity:
    """Requested granularity, or the configured default"""
    if granularity is not None:
        return granularity
    default = ConfigManager.get_instance().get_config().get("diff", {}).get("default_granularity", "line")
    try:
        return Granularity(default)
    except ValueError:
        print(f"[Backend] Unknown default granularity in config: {default!r}, using line")
        return Granularity.LINE


@router.post("/diff", response_model=DiffResult)
async def diff(request: DiffRequest) -> DiffResult:
    """Diff two texts at the requested granularity"""
    result = diff_engine.diff(request.old, request.new, resolve_granularity(request.granularity), request.options)
    if request.classify:
        result = classifier.classify(result)
    return result


@router.post("/diff/unified", response_model=UnifiedDiffResponse)
async def unified(request: UnifiedDiffRequest) -> UnifiedDiffResponse:
    """Standard unified diff text"""
    return UnifiedDiffResponse(
        unified_diff=diff_engine.unified_diff(
            request.old,
            request.new,
            from_label=request.from_label,
            to_label=request.to_label,
            context_lines=request.context_lines,
        )
    )


@router.post("/diff/semantic", response_model=SemanticDiffResult)
async def semantic(request: SimilarityRequest) -> SemanticDiffResult:
    """Pair lines of both texts by similarity"""
    return get_registry().semantic_differ.diff(request.old, request.new)


@router.post("/diff/similarity", response_model=SimilarityResponse)
async def similarity(request: SimilarityRequest) -> SimilarityResponse:
    return SimilarityResponse(score=get_registry().scorer.score(request.old, request.new))


@router.post("/merge", response_model=MergeResponse)
async def merge(request: MergeRequest) -> MergeResponse:
    """Diff and compose in one call; every changed hunk must be resolved"""
    result = classifier.classify(
        diff_engine.diff(request.old, request.new, resolve_granularity(request.granularity), request.options)
    )
    store = ResolutionStore(result)
    if request.default_choice is not None:
        store.resolve_all(request.default_choice)
    for hunk_id, resolution in request.resolutions.items():
        store.set_resolution(hunk_id, resolution.choice, resolution.custom_text)

    try:
        content = compositor.compose(result, store)
    except PreconditionNotMet as e:
        raise HTTPException(status_code=409, detail={"message": str(e), "unresolved": e.unresolved})

    return MergeResponse(content=content, diff=store.annotate(result))
