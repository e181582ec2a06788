"""File-info API: metadata lookup across current and legacy index keys.

Every response (errors included) carries permissive CORS headers; the
route answers its own OPTIONS preflight.
"""

from typing import Annotated, Any

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse, Response

from app.api.v1.dependencies import get_file_info_service
from app.application.use_cases.files import FileInfoQueryService
from app.core.constants import FILE_INFO_MAX_AGE
from app.core.exception_handlers import status_for
from app.domain.exceptions import ImgBedException
from app.schemas.file_info import FileInfoResponse, FileNotFoundResponse
from app.shared.telemetry.logging import get_logger

logger = get_logger(__name__)

router = APIRouter()

CORS_HEADERS = {"Access-Control-Allow-Origin": "*"}
PREFLIGHT_HEADERS = {
    **CORS_HEADERS,
    "Access-Control-Allow-Methods": "GET, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
    "Access-Control-Max-Age": "86400",
}


def _json(status_code: int, content: Any, extra: dict[str, str] | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=content,
        headers={**CORS_HEADERS, **(extra or {})},
    )


@router.options("/file-info/{file_id}", status_code=204)
async def file_info_preflight(file_id: str) -> Response:
    return Response(status_code=204, headers=PREFLIGHT_HEADERS)


@router.get(
    "/file-info/{file_id}",
    response_model=FileInfoResponse,
    responses={404: {"model": FileNotFoundResponse}},
)
async def get_file_info(
    file_id: str,
    files: Annotated[FileInfoQueryService, Depends(get_file_info_service)],
) -> JSONResponse:
    """Return stored metadata for a file id (img:, vid:, aud:, doc:, r2:, then the bare key)."""
    try:
        result = await files.get_file_info(file_id)
    except ImgBedException as e:
        if status_for(e) >= 500:
            logger.error("File info lookup failed for %s: %s", file_id, e.message)
        return _json(status_for(e), e.to_dict())
    except Exception:
        logger.exception("Unexpected error during file info lookup for %s", file_id)
        return _json(500, {"error": "Internal server error"})

    if result is None:
        body = FileNotFoundResponse(file_id=file_id, file_name=file_id)
        return _json(404, body.model_dump(by_alias=True))

    return _json(
        200,
        FileInfoResponse.from_result(result).model_dump(by_alias=True),
        {"Cache-Control": f"public, max-age={FILE_INFO_MAX_AGE}"},
    )


@router.get("/file-info", include_in_schema=False)
@router.get("/file-info/", include_in_schema=False)
async def get_file_info_without_id() -> JSONResponse:
    return _json(400, {"error": "Missing file ID"})
