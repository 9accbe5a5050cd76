import logging

from fastapi import APIRouter
from fastapi import Depends
from fastapi import Request
from fastapi.responses import JSONResponse
from fastapi.responses import Response

from contributions_api.api.schemas.contributions import ErrorResponse
from contributions_api.github_api import UpstreamError
from contributions_api.services.contributions_service import get_contributions_data
from contributions_api.services.contributions_service import to_csv
from contributions_api.services.query_options import OptionsValidationError
from contributions_api.services.query_options import parse_query_options
from contributions_api.settings import Settings
from contributions_api.settings import get_settings


logger = logging.getLogger(__name__)

router = APIRouter()


def _error_response(status_code: int, error: str, message: str) -> JSONResponse:
    body = ErrorResponse(error=error, message=message)
    return JSONResponse(status_code=status_code, content=body.model_dump())


@router.get("/")
async def root(settings: Settings = Depends(get_settings)) -> dict[str, str]:
    """Return a welcome message with service version and docs link."""

    return {
        "message": "Welcome to the GitHub Contributions API.",
        "version": settings.app_version,
        "docs": settings.docs_url,
    }


@router.get("/health/live")
def health_live() -> dict[str, str]:
    """Return liveness probe response for health checks."""

    return {"status": "ok"}


@router.get("/{username}", response_model=None)
def get_contributions(
    username: str,
    request: Request,
    settings: Settings = Depends(get_settings),
) -> Response:
    """Return contribution activities for `username` as JSON or CSV."""

    try:
        options = parse_query_options(
            request.query_params, default_years=settings.default_years
        )
    except OptionsValidationError as exc:
        logger.info("Rejected options for %s: %s", username, exc)
        return _error_response(400, "Invalid options", str(exc))

    try:
        result = get_contributions_data(username, options, settings)
    except UpstreamError as exc:
        logger.exception("GitHub request failed for %s", username)
        return _error_response(500, "Server error", str(exc))
    except Exception as exc:
        logger.exception("Unexpected error while building contributions")
        return _error_response(500, "Server error", str(exc) or type(exc).__name__)

    headers = {"Cache-Control": settings.cache_control}
    if options.format == "csv":
        return Response(
            content=to_csv(result.activities),
            media_type="text/csv",
            headers=headers,
        )

    return JSONResponse(
        content=result.model_dump(mode="json", by_alias=True),
        headers=headers,
    )
