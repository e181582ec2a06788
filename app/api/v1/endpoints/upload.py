"""URL ingestion API: thin route delegating to UrlIngestionService."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from app.api.v1.dependencies import get_caller_context, get_url_ingestion_service
from app.application.dtos.upload import CallerContext
from app.application.use_cases.ingestion import UrlIngestionService
from app.core.limiter import limit_upload
from app.schemas.upload import UploadedFileItem, UploadFromUrlRequest

router = APIRouter()


@router.post("/upload-from-url", response_model=list[UploadedFileItem])
@limit_upload
async def upload_from_url(
    request: Request,
    payload: UploadFromUrlRequest,
    caller: Annotated[CallerContext, Depends(get_caller_context)],
    ingestion: Annotated[UrlIngestionService, Depends(get_url_ingestion_service)],
) -> list[UploadedFileItem]:
    """Fetch a remote file on the caller's behalf and store it; returns [{"src": "/file/<locator>"}]."""
    locator = await ingestion.ingest(
        url=payload.url,
        storage_mode=payload.storage_mode,
        caller=caller,
    )
    return [UploadedFileItem(src=locator.src)]
