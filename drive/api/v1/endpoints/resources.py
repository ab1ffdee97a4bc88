"""Resource API: thin routes delegating to ResourceUploadService, ResourceQueryService, and ResourceDeletionService."""

from collections.abc import AsyncIterator
from typing import Annotated

from fastapi import APIRouter, Depends, File, Form, Header, Query, Request, Response, UploadFile
from fastapi.responses import StreamingResponse

from drive.api.v1.dependencies import (
    get_client_id,
    get_resource_deletion_service,
    get_resource_query_service,
    get_resource_upload_service,
    get_webhook_extra_headers,
)
from drive.application.dtos.resource import ResourceContent, ResourceUploadResult
from drive.application.use_cases.resources import (
    ResourceDeletionService,
    ResourceQueryService,
    ResourceUploadService,
)
from drive.core.constants import HEADER_FILE_EXTENSION, HEADER_RESOURCE_HASH
from drive.core.limiter import limit_upload, limit_writes
from drive.schemas.resource import ResourceResponse

router = APIRouter()

UPLOAD_CHUNK_SIZE = 64 * 1024


async def _iter_upload(file: UploadFile) -> AsyncIterator[bytes]:
    while chunk := await file.read(UPLOAD_CHUNK_SIZE):
        yield chunk


def _upload_response(result: ResourceUploadResult, response: Response) -> ResourceResponse:
    """201 for a new resource, 200 when the content was already stored."""
    response.status_code = 201 if result.created else 200
    return ResourceResponse.from_result(result.resource, result.url, result.public_url)


def stream_content(content: ResourceContent) -> StreamingResponse:
    resource = content.resource
    return StreamingResponse(
        content.chunks,
        media_type=resource.content_type,
        headers={
            HEADER_RESOURCE_HASH: resource.hash,
            "Content-Length": str(resource.size),
        },
    )


@router.put(
    "/{bucket_id}",
    response_model=ResourceResponse,
    status_code=201,
    responses={200: {"description": "Identical content already stored; existing resource returned"}},
)
@limit_upload
async def upload_raw(
    request: Request,
    response: Response,
    bucket_id: str,
    client_id: Annotated[str, Depends(get_client_id)],
    extra_headers: Annotated[dict[str, str], Depends(get_webhook_extra_headers)],
    upload_svc: Annotated[ResourceUploadService, Depends(get_resource_upload_service)],
    extension: Annotated[str | None, Query()] = None,
    file_extension: Annotated[str | None, Header(alias=HEADER_FILE_EXTENSION)] = None,
):
    """Upload the raw request body. Extension: X-File-Extension header or ?extension=, else from Content-Type."""
    result = await upload_svc.upload_stream(
        bucket_id=bucket_id,
        client_id=client_id,
        chunks=request.stream(),
        content_type=request.headers.get("content-type"),
        extension=file_extension or extension,
        extra_headers=extra_headers,
    )
    return _upload_response(result, response)


@router.post(
    "/{bucket_id}",
    response_model=ResourceResponse,
    status_code=201,
    responses={200: {"description": "Identical content already stored; existing resource returned"}},
)
@limit_upload
async def upload_multipart(
    request: Request,
    response: Response,
    bucket_id: str,
    client_id: Annotated[str, Depends(get_client_id)],
    extra_headers: Annotated[dict[str, str], Depends(get_webhook_extra_headers)],
    upload_svc: Annotated[ResourceUploadService, Depends(get_resource_upload_service)],
    file: UploadFile = File(...),
    extension: str | None = Form(None),
):
    """Upload a multipart "file" part. Extension: form field, else from the file name (may be empty)."""
    result = await upload_svc.upload_file(
        bucket_id=bucket_id,
        client_id=client_id,
        chunks=_iter_upload(file),
        filename=file.filename,
        content_type=file.content_type,
        extension=extension,
        extra_headers=extra_headers,
    )
    return _upload_response(result, response)


@router.get("/{bucket_id}", response_model=list[ResourceResponse])
async def list_resources(
    bucket_id: str,
    client_id: Annotated[str, Depends(get_client_id)],
    query_svc: Annotated[ResourceQueryService, Depends(get_resource_query_service)],
    skip: Annotated[int, Query(ge=0)] = 0,
    limit: Annotated[int, Query(ge=1, le=1000)] = 100,
):
    """List resources in the bucket, newest first."""
    views = await query_svc.list_resources(bucket_id, client_id, skip=skip, limit=limit)
    return [ResourceResponse.from_result(v.resource, v.url, v.public_url) for v in views]


@router.head("/{bucket_id}/{name}")
async def head_resource(
    bucket_id: str,
    name: str,
    client_id: Annotated[str, Depends(get_client_id)],
    query_svc: Annotated[ResourceQueryService, Depends(get_resource_query_service)],
) -> Response:
    """Resource metadata as headers (X-Resource-Hash, Content-Type, Content-Length)."""
    view = await query_svc.get_resource(bucket_id, client_id, name)
    return Response(
        status_code=200,
        headers={
            HEADER_RESOURCE_HASH: view.resource.hash,
            "Content-Type": view.resource.content_type,
            "Content-Length": str(view.resource.size),
        },
    )


@router.get("/{bucket_id}/{name}", response_class=StreamingResponse)
async def download_resource(
    bucket_id: str,
    name: str,
    client_id: Annotated[str, Depends(get_client_id)],
    query_svc: Annotated[ResourceQueryService, Depends(get_resource_query_service)],
):
    """Stream the resource content. name is the digest, with or without extension."""
    return stream_content(await query_svc.open_resource(bucket_id, client_id, name))


@router.delete("/{bucket_id}/{name}", status_code=204)
@limit_writes
async def delete_resource(
    request: Request,
    bucket_id: str,
    name: str,
    client_id: Annotated[str, Depends(get_client_id)],
    extra_headers: Annotated[dict[str, str], Depends(get_webhook_extra_headers)],
    deletion_svc: Annotated[ResourceDeletionService, Depends(get_resource_deletion_service)],
) -> Response:
    """Delete the resource and its blob; subscribers get resource.deleted."""
    await deletion_svc.delete_resource(bucket_id, client_id, name, extra_headers=extra_headers)
    return Response(status_code=204)
