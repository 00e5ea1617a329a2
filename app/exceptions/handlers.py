import logging

from fastapi import Request
from fastapi.responses import JSONResponse

from .custom import PayloadTooLargeError, RateLimitError, ZendeskError

logger = logging.getLogger(__name__)


async def zendesk_error_handler(_request: Request, exc: ZendeskError) -> JSONResponse:
    logger.error("Zendesk error: %s (status=%s)", exc.message, exc.status_code)
    return JSONResponse(
        status_code=502,
        content={
            "success": False,
            "status": exc.status_code,
            "detail": f"Zendesk error: {exc.message}",
        },
    )


async def rate_limit_error_handler(_request: Request, exc: RateLimitError) -> JSONResponse:
    logger.warning("Rate limit hit for %s", exc.service)
    return JSONResponse(
        status_code=429,
        content={"success": False, "detail": f"Rate limit exceeded for {exc.service}"},
    )


async def payload_too_large_handler(
    _request: Request, exc: PayloadTooLargeError
) -> JSONResponse:
    logger.error("Request payload too large: %s", exc)
    return JSONResponse(
        status_code=413,
        content={"success": False, "error": "Payload too large"},
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled server error on %s", request.url.path)
    return JSONResponse(
        status_code=500,
        content={"success": False, "error": str(exc) or "Server error"},
    )
