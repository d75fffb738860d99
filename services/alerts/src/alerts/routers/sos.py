"""
SOS alert router for SecureYou.

Endpoints the mobile/web client calls when the user triggers (or
cancels) an SOS.  Bodies are parsed by hand rather than through a FastAPI
body model so that an empty required field answers 400 with a fixed
message and anything unparseable answers 500, matching the envelope the
clients already handle:

* 200 ``{"success": true, "results": {...}}``
* 400 ``{"success": false, "error": "Missing required fields"}``
* 500 ``{"success": false, "error": "<message>"}``
"""

from __future__ import annotations

from typing import Any, Awaitable, Callable

import structlog
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from sy_common.models.alert import AlertKind, AlertRequest, BroadcastRequest

from alerts.dependencies import get_dispatcher
from alerts.dispatcher import AlertDispatcher, AlertValidationError

logger = structlog.get_logger()

router = APIRouter(tags=["sos"])


def _error(message: str, status_code: int) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": message},
    )


async def _handle(
    request: Request,
    handler: Callable[[Any], Awaitable[dict[str, Any]]],
) -> JSONResponse:
    """Run *handler* on the decoded JSON body and wrap the outcome.

    ``request.state.sos_success`` mirrors the envelope's ``success`` flag
    for the request log.
    """
    request.state.sos_success = False
    try:
        payload = await request.json()
        content = await handler(payload)
    except AlertValidationError as exc:
        return _error(str(exc), 400)
    except Exception as exc:  # noqa: BLE001
        # The exception text can quote request fields (phone, email); log its type only.
        logger.error(
            "sos_request_failed",
            path=request.url.path,
            error_type=type(exc).__name__,
        )
        return _error(str(exc), 500)
    request.state.sos_success = True
    return JSONResponse(content={"success": True, **content})


@router.post("/send-sos-alert")
async def send_sos_alert(
    request: Request,
    dispatcher: AlertDispatcher = Depends(get_dispatcher),
) -> JSONResponse:
    """Send the SOS alert to one contact by SMS and email."""

    async def _dispatch(payload: Any) -> dict[str, Any]:
        result = await dispatcher.dispatch(AlertRequest.model_validate(payload))
        return {"results": result.model_dump()["results"]}

    return await _handle(request, _dispatch)


@router.post("/send-sos-alert/broadcast")
async def broadcast_sos_alert(
    request: Request,
    dispatcher: AlertDispatcher = Depends(get_dispatcher),
) -> JSONResponse:
    """Send the SOS alert to every listed contact concurrently."""

    async def _broadcast(payload: Any) -> dict[str, Any]:
        outcomes = await dispatcher.broadcast(BroadcastRequest.model_validate(payload))
        return {"contacts": [o.model_dump(by_alias=True) for o in outcomes]}

    return await _handle(request, _broadcast)


@router.post("/send-sos-cancellation")
async def send_sos_cancellation(
    request: Request,
    dispatcher: AlertDispatcher = Depends(get_dispatcher),
) -> JSONResponse:
    """Tell one contact that the user has cancelled their SOS."""

    async def _cancel(payload: Any) -> dict[str, Any]:
        result = await dispatcher.dispatch(
            AlertRequest.model_validate(payload), AlertKind.SOS_CANCELLED,
        )
        return {"results": result.model_dump()["results"]}

    return await _handle(request, _cancel)
