"""Redirect routes served at the site root."""

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse, RedirectResponse

from ..responses import error_response

router = APIRouter()


@router.get("/health", include_in_schema=False)
async def health_check_web(request: Request):
    """Health check endpoint (simple version for load balancers)."""
    service = request.app.state.service

    health = await service.health_check()

    if health["overall"]:
        return {"status": "healthy"}
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"status": "unhealthy"},
    )


@router.get("/{code}", include_in_schema=False)
async def redirect_to_url(request: Request, code: str):
    """Redirect to the original URL. Anonymous and unconditional."""
    service = request.app.state.service

    result = await service.resolve(code)
    if not result.ok:
        return error_response(result.error)

    return RedirectResponse(url=result.value, status_code=status.HTTP_302_FOUND)
