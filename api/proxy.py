"""
Relay helpers shared by the proxy routes.

A proxied call either returns the upstream status and body unchanged, or the
route answers 500 with its fixed error message.
"""

import json
from collections.abc import Awaitable, Callable
from typing import Any

import structlog
from fastapi import Request, status
from fastapi.responses import JSONResponse

from core.logging import BusinessEvents
from core.settings import Settings
from payments.paypal_client import ApiResult
from payments.paypal_service import PaymentOperationError

log = structlog.get_logger(__name__)


async def read_json(request: Request) -> dict[str, Any]:
    """Parse the request body as a JSON object; an empty body reads as {}."""
    raw = await request.body()
    if not raw.strip():
        return {}
    data = json.loads(raw)
    if not isinstance(data, dict):
        raise ValueError("Request body must be a JSON object")
    return data


def failure_response(message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": message},
    )


async def relay(
    call: Callable[[], Awaitable[ApiResult]],
    failure_message: str,
    settings: Settings,
) -> JSONResponse:
    try:
        result = await call()
    except PaymentOperationError as e:
        log.error(
            BusinessEvents.PROXY_FAILURE,
            operation=e.operation,
            error=failure_message,
            upstream_status=e.upstream.status_code if e.upstream else None,
        )
        if settings.FORWARD_PROCESSOR_ERRORS and e.upstream is not None:
            return JSONResponse(
                status_code=e.upstream.status_code, content=e.upstream.body
            )
        return failure_response(failure_message)
    except Exception as e:
        # Malformed bodies and anything unexpected collapse to the same answer
        log.error(
            BusinessEvents.PROXY_FAILURE,
            error=failure_message,
            cause=repr(e),
            exc_info=True,
        )
        return failure_response(failure_message)

    return JSONResponse(status_code=result.status_code, content=result.body)
