"""Knowledge base folder and document API endpoints"""

from __future__ import annotations

from fastapi import APIRouter, File, Form, HTTPException, UploadFile
from fastapi.responses import Response

from models.document import Document, FileType, Folder, FolderCreateRequest
from services.errors import ConflictError, NotFoundError
from services.registry import get_registry

router = APIRouter()


@router.get("/folders", response_model=list[Folder])
async def list_folders(project_id: str, parent_folder_id: str | None = None) -> list[Folder]:
    return get_registry().documents.list_folders(project_id, parent_folder_id)


@router.post("/folders", response_model=Folder, status_code=201)
async def create_folder(request: FolderCreateRequest) -> Folder:
    if not request.name.strip():
        raise HTTPException(status_code=400, detail="Folder name is required")
    try:
        return get_registry().documents.create_folder(
            request.project_id,
            request.name.strip(),
            request.parent_folder_id,
            request.description,
        )
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.get("/documents", response_model=list[Document])
async def list_documents(
    project_id: str,
    folder_id: str | None = None,
    search: str | None = None,
    file_type: FileType | None = None,
) -> list[Document]:
    return get_registry().documents.list_documents(project_id, folder_id, search, file_type)


@router.post("/documents", response_model=Document, status_code=201)
async def upload_document(
    project_id: str = Form(...),
    file: UploadFile = File(...),
    folder_id: str | None = Form(None),
    title: str | None = Form(None),
    description: str = Form(""),
    created_by: str = Form("unknown"),
) -> Document:
    """Upload a single file into a project folder"""
    data = await file.read()
    try:
        return get_registry().documents.upload_document(
            project_id,
            file.filename or "upload",
            data,
            mime_type=file.content_type,
            folder_id=folder_id,
            title=title,
            description=description,
            created_by=created_by,
        )
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.get("/documents/{document_id}", response_model=Document)
async def get_document(document_id: str) -> Document:
    try:
        return get_registry().documents.get_document(document_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get("/documents/{document_id}/content")
async def get_document_content(document_id: str) -> Response:
    documents = get_registry().documents
    try:
        document = documents.get_document(document_id)
        data = documents.read_content(document_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except OSError:
        raise HTTPException(status_code=410, detail="Document file is missing")
    return Response(content=data, media_type=document.mime_type)


@router.delete("/documents/{document_id}")
async def delete_document(document_id: str) -> dict[str, str]:
    try:
        get_registry().documents.delete_document(document_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"status": "deleted", "document_id": document_id}
