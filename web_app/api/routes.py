"""API routes implementation."""

from fastapi import APIRouter, Request, Response, status
from datetime import datetime, timezone
from typing import List, Optional

from .schemas import (
    CreateLinkRequest,
    LinkResponse,
    ResolveResponse,
    HealthResponse,
    ErrorResponse,
    StatisticsResponse,
)
from shortlinks.database.models import LinkRecord
from shortlinks.common.url_builder import build_short_url
from shortlinks.common.headers import build_base_url
from shortlinks.identity import resolve_owner_label
from ..responses import error_response, get_caller

router = APIRouter()


def _short_url(request: Request, code: str) -> str:
    config = request.app.state.config
    base_url = build_base_url(
        headers=dict(request.headers),
        fallback_base_url=config.base_url,
        request_scheme=request.url.scheme,
        request_host=request.headers.get("host"),
    )
    return build_short_url(code=code, base_url=base_url, path_prefix=config.path_prefix)


def _link_response(request: Request, record: LinkRecord, created_by: Optional[str] = None) -> LinkResponse:
    return LinkResponse(
        id=record.id,
        code=record.code,
        short_url=_short_url(request, record.code),
        original_url=record.original_url,
        created_at=record.created_at,
        owner_id=record.owner_id,
        created_by=created_by,
    )


@router.post(
    "/links",
    response_model=LinkResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid URL"},
        401: {"model": ErrorResponse, "description": "Authentication required"},
        409: {"model": ErrorResponse, "description": "URL already shortened"},
        503: {"model": ErrorResponse, "description": "No free code found, retry"},
    },
    summary="Create short link",
)
async def create_link(request: Request, body: CreateLinkRequest):
    """Shorten a URL on behalf of the authenticated caller."""
    service = request.app.state.service
    caller = get_caller(request)

    result = await service.create_link(body.url, caller)
    if not result.ok:
        return error_response(result.error)

    created_by = await resolve_owner_label(service.user_directory, result.value.owner_id)
    return _link_response(request, result.value, created_by)


@router.get(
    "/links",
    response_model=List[LinkResponse],
    summary="List short links",
)
async def list_links(request: Request):
    """List every short link with its creator's display name."""
    service = request.app.state.service

    result = await service.list_links(get_caller(request))
    return [_link_response(request, d.record, d.owner_name) for d in result.value]


@router.get(
    "/links/{record_id}",
    response_model=LinkResponse,
    responses={
        401: {"model": ErrorResponse, "description": "Authentication required"},
        404: {"model": ErrorResponse, "description": "Link not found"},
    },
    summary="Get short link details",
)
async def get_link(request: Request, record_id: int):
    """Get a short link by id."""
    service = request.app.state.service

    result = await service.get_detail(record_id, get_caller(request))
    if not result.ok:
        return error_response(result.error)

    detail = result.value
    return _link_response(request, detail.record, detail.owner_name)


@router.delete(
    "/links/{record_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={
        403: {"model": ErrorResponse, "description": "Not the owner or an administrator"},
        404: {"model": ErrorResponse, "description": "Link not found"},
    },
    summary="Delete short link",
)
async def delete_link(request: Request, record_id: int):
    """Delete a short link (owner or administrator only)."""
    service = request.app.state.service

    result = await service.delete_link(record_id, get_caller(request))
    if not result.ok:
        return error_response(result.error)

    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(
    "/resolve/{code}",
    response_model=ResolveResponse,
    responses={404: {"model": ErrorResponse, "description": "Code not found"}},
    summary="Resolve short code",
)
async def resolve_code(request: Request, code: str):
    """Look up the original URL of a short code without redirecting."""
    service = request.app.state.service

    result = await service.resolve(code)
    if not result.ok:
        return error_response(result.error)

    return ResolveResponse(code=code, original_url=result.value)


@router.get(
    "/stats",
    response_model=StatisticsResponse,
    summary="Get statistics",
)
async def get_statistics(request: Request):
    """Get service statistics."""
    service = request.app.state.service

    stats = await service.get_statistics()

    return StatisticsResponse(**stats)


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
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
