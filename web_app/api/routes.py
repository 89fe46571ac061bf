"""API routes implementation."""

from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, List, Optional

from fastapi import APIRouter, Body, Query, Request, Response, status
from fastapi.responses import JSONResponse

from .schemas import Envelope, HealthResponse
from shortlinks.commands import (
    parse_create_body,
    parse_delete_command,
    parse_edit_command,
    parse_list_query,
    parse_short_code_query,
)
from shortlinks.common.logging_config import get_logger
from shortlinks.database.models import UrlRecord
from shortlinks.errors import InternalError, ResponseCode, UrlRecordError

router = APIRouter()
logger = get_logger("api")

ERROR_RESPONSES = {
    400: {"model": Envelope, "description": "Invalid input"},
    500: {"model": Envelope, "description": "Database or internal error"},
}
NOT_FOUND_RESPONSE = {404: {"model": Envelope, "description": "URL not found"}}

LONG_URL_BODY_EXAMPLES = [{"longUrl": "https://example.com/very/long/path/to/resource"}]


def envelope(
    status_code: int,
    code: ResponseCode,
    message: Any,
    data: Any = None,
) -> JSONResponse:
    """Build a JSON response in the standard envelope."""
    content = {"code": code.value, "message": message}
    if data is not None:
        content["data"] = data
    return JSONResponse(status_code=status_code, content=content)


def _records(records: List[UrlRecord]) -> List[dict]:
    return [record.to_dict() for record in records]


@asynccontextmanager
async def service_errors(operation: str):
    """Let taxonomy errors through and convert anything else to InternalError."""
    try:
        yield
    except UrlRecordError:
        raise
    except Exception as e:
        logger.exception(f"Unexpected error during {operation}")
        raise InternalError() from e


@router.get(
    "/url/",
    response_model=Envelope,
    responses=ERROR_RESPONSES,
    summary="Get URLs by id",
    description="Fetch every record whose id is in the comma-separated urlIds list.",
)
async def get_all_urls(
    request: Request,
    url_ids: Optional[str] = Query(None, alias="urlIds", description="Comma-separated record ids"),
):
    """Get URL records by id."""
    service = request.app.state.service

    async with service_errors("get_all_urls"):
        command = parse_list_query({"urlIds": url_ids})
        records = await service.get_by_ids(command.url_ids)

    return envelope(
        status.HTTP_200_OK,
        ResponseCode.SUCCESSFUL_GET_ALL_URLS,
        "URLs fetched successfully",
        _records(records),
    )


@router.get(
    "/url/getUrl/",
    response_model=Envelope,
    responses={**ERROR_RESPONSES, **NOT_FOUND_RESPONSE},
    summary="Get URL by short code",
)
@router.get("/url/getUrl", include_in_schema=False)
async def get_url_by_short_code(
    request: Request,
    short_code: Optional[str] = Query(None, alias="shortCode", description="Short code"),
):
    """Get the URL record for a short code."""
    service = request.app.state.service

    async with service_errors("get_url_by_short_code"):
        command = parse_short_code_query({"shortCode": short_code})
        record = await service.get_by_short_code(command.short_code)

    return envelope(
        status.HTTP_200_OK,
        ResponseCode.SUCCESSFUL_GET_URL,
        "URL fetched successfully",
        record.to_dict(),
    )


@router.post(
    "/url/",
    status_code=status.HTTP_201_CREATED,
    response_model=Envelope,
    responses=ERROR_RESPONSES,
    summary="Create short URL",
    description="Shorten a URL. The short code is generated by the service.",
)
async def create_url(
    request: Request,
    body: Any = Body(None, examples=LONG_URL_BODY_EXAMPLES),
):
    """Create a shortened URL."""
    service = request.app.state.service

    async with service_errors("create_url"):
        command = parse_create_body(body)
        record = await service.create(command.long_url)

    return envelope(
        status.HTTP_201_CREATED,
        ResponseCode.SUCCESSFUL_CREATED_URL,
        "URL was shortened successfully",
        record.to_dict(),
    )


@router.put(
    "/url/{url_id}",
    response_model=Envelope,
    responses={**ERROR_RESPONSES, **NOT_FOUND_RESPONSE},
    summary="Edit URL",
    description="Replace the long URL of a record. The id and short code never change.",
)
async def edit_url(
    request: Request,
    url_id: str,
    body: Any = Body(None, examples=LONG_URL_BODY_EXAMPLES),
):
    """Edit the long URL of a record."""
    service = request.app.state.service

    async with service_errors("edit_url"):
        command = parse_edit_command(url_id, body)
        record = await service.edit(command.url_id, command.long_url)

    return envelope(
        status.HTTP_200_OK,
        ResponseCode.SUCCESSFUL_EDITED_URL,
        "URL was edited successfully",
        record.to_dict(),
    )


@router.delete(
    "/url/{url_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={**ERROR_RESPONSES, **NOT_FOUND_RESPONSE},
    summary="Delete URL",
)
async def delete_url(request: Request, url_id: str):
    """Delete a record."""
    service = request.app.state.service

    async with service_errors("delete_url"):
        command = parse_delete_command(url_id)
        await service.delete(command.url_id)

    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Check if the service is healthy.",
)
async def health_check(request: Request):
    """Health check endpoint for load balancers and monitoring."""
    service = request.app.state.service

    health = await service.health_check()

    return HealthResponse(
        status="healthy" if health["overall"] else "unhealthy",
        database="healthy" if health["database"] else "unhealthy",
        cache="healthy" if health["cache"] else "unhealthy",
        timestamp=datetime.now(timezone.utc),
    )
