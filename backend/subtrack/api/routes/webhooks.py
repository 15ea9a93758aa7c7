"""Stripe payment callback route."""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from subtrack.api.deps import get_callback_endpoint
from subtrack.services.webhook_service import CallbackEndpoint

router = APIRouter()

# Every method reaches the handler so the 405 decision belongs to CallbackEndpoint
_ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


@router.api_route("/webhook", methods=_ALL_METHODS)
async def payment_webhook(
    request: Request,
    endpoint: CallbackEndpoint = Depends(get_callback_endpoint),
):
    """Verify a Stripe callback and grant lifetime access on checkout completion."""
    body = await request.body()
    result = await endpoint.handle(request.method, request.headers, body)
    return JSONResponse(status_code=result.status_code, content=result.body, headers=result.headers or None)
