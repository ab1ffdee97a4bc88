"""Anonymous downloads for public buckets (mounted at /public, outside the authenticated API)."""

from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse

from drive.api.v1.dependencies import get_resource_query_service
from drive.api.v1.endpoints.resources import stream_content
from drive.application.use_cases.resources import ResourceQueryService

router = APIRouter()


@router.get("/{bucket_id}/{name}", response_class=StreamingResponse)
async def download_public_resource(
    bucket_id: str,
    name: str,
    query_svc: Annotated[ResourceQueryService, Depends(get_resource_query_service)],
):
    """Stream a resource of a public bucket; private or unknown buckets are 404."""
    return stream_content(await query_svc.open_public_resource(bucket_id, name))
