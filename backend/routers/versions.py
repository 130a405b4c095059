"""Version history and merge session API endpoints"""

from __future__ import annotations

from fastapi import APIRouter, HTTPException

from models.diff import DiffResult, Granularity
from models.version import (
    FinalizeRequest,
    MergeSessionResponse,
    OpenSessionRequest,
    PreviewResponse,
    ResolveHunkRequest,
    Version,
    VersionCreateRequest,
)
from routers.diff import resolve_granularity
from services.diff_engine import DiffEngine
from services.errors import NotFoundError, PreconditionNotMet
from services.merge_session import MergeSession
from services.registry import get_registry

router = APIRouter()
diff_engine = DiffEngine()


def session_response(session: MergeSession) -> MergeSessionResponse:
    unresolved = session.resolutions.unresolved()
    return MergeSessionResponse(
        session_id=session.id,
        source_version_id=session.source.id,
        target_version_id=session.target.id,
        diff=session.resolutions.annotate(session.diff),
        unresolved=unresolved,
        fully_resolved=not unresolved,
    )


# ========== Versions ==========


@router.get("/documents/{document_id}/versions", response_model=list[Version])
async def list_versions(document_id: str) -> list[Version]:
    return get_registry().version_store.list(document_id)


@router.post("/documents/{document_id}/versions", response_model=Version, status_code=201)
async def create_version(document_id: str, request: VersionCreateRequest) -> Version:
    """Store new content as the next version of a document"""
    return get_registry().version_store.create(
        document_id,
        request.content,
        request.created_by,
        request.change_descriptor or "",
        request.tags,
    )


@router.get("/versions/{version_id}", response_model=Version)
async def get_version(version_id: str) -> Version:
    try:
        return get_registry().version_store.get(version_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get("/documents/{document_id}/diff", response_model=DiffResult)
async def diff_versions(
    document_id: str,
    old_version: str,
    new_version: str,
    granularity: Granularity | None = None,
) -> DiffResult:
    """Diff two versions of the same document"""
    store = get_registry().version_store
    try:
        old = store.get(old_version)
        new = store.get(new_version)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    if old.document_id != document_id or new.document_id != document_id:
        raise HTTPException(status_code=400, detail="Both versions must belong to the document")

    return diff_engine.diff(old.content, new.content, resolve_granularity(granularity))


# ========== Merge sessions ==========


@router.post("/merge/sessions", response_model=MergeSessionResponse, status_code=201)
async def open_session(request: OpenSessionRequest) -> MergeSessionResponse:
    try:
        session = get_registry().merge_sessions.open(
            request.source_version_id,
            request.target_version_id,
            resolve_granularity(request.granularity),
            request.options,
        )
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return session_response(session)


@router.get("/merge/sessions/{session_id}", response_model=MergeSessionResponse)
async def get_session(session_id: str) -> MergeSessionResponse:
    try:
        return session_response(get_registry().merge_sessions.get(session_id))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.put("/merge/sessions/{session_id}/hunks/{hunk_id}", response_model=MergeSessionResponse)
async def resolve_hunk(session_id: str, hunk_id: str, request: ResolveHunkRequest) -> MergeSessionResponse:
    try:
        session = get_registry().merge_sessions.resolve(session_id, hunk_id, request.choice, request.custom_text)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return session_response(session)


@router.get("/merge/sessions/{session_id}/preview", response_model=PreviewResponse)
async def preview_session(session_id: str) -> PreviewResponse:
    manager = get_registry().merge_sessions
    try:
        session = manager.get(session_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return PreviewResponse(
        content=manager.preview(session_id),
        fully_resolved=session.resolutions.is_fully_resolved(),
    )


@router.post("/merge/sessions/{session_id}/finalize", response_model=Version)
async def finalize_session(session_id: str, request: FinalizeRequest) -> Version:
    """Compose the merge and store it as a new version"""
    try:
        return get_registry().merge_sessions.finalize(session_id, request.created_by, request.change_descriptor)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except PreconditionNotMet as e:
        raise HTTPException(status_code=409, detail={"message": str(e), "unresolved": e.unresolved})


@router.delete("/merge/sessions/{session_id}")
async def cancel_session(session_id: str) -> dict[str, str]:
    try:
        get_registry().merge_sessions.cancel(session_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"status": "cancelled", "session_id": session_id}
