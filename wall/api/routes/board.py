"""Board Routes — submission, paid confirmation, and the public HTML page.

Invariants:
    - POST /wall never publishes anything: it stores a pending message and
      redirects to the paid confirmation URL
    - GET /wall-paid checks the token BEFORE the payment gate, so a used or
      unknown token redirects to /wall without charging anyone
    - Finalization runs only after the payment gate returned a verified payer
    - Redirects use 303 so browsers follow with GET

Design Decisions:
    - Accepts both form posts (the HTML page) and JSON bodies (scripted clients)
    - A token lost to a concurrent confirmation is treated like a used token:
      redirect, and the losing payment is never settled
"""

import logging
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import HTMLResponse, RedirectResponse

from wall.api.dependencies import (
    get_coordinator, get_payment_gate, get_pending_store, get_repository,
)
from wall.api.payment_gate import PaymentGate, settlement_header
from wall.api.rendering import render_wall_page
from wall.config import Settings, get_settings
from wall.core.domain_types import PendingToken
from wall.core.errors import MessageValidationError, PendingNotFoundError
from wall.services.finalization import FinalizationCoordinator
from wall.services.message_repository import MessageRepository
from wall.services.submission import PendingMessageStore

logger = logging.getLogger(__name__)
router = APIRouter(tags=["wall"])


async def _read_submission(request: Request) -> dict:
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("application/json"):
        try:
            data = await request.json()
        except ValueError:
            raise MessageValidationError("Request body must be valid JSON", "message")
        if not isinstance(data, dict):
            raise MessageValidationError("Request body must be a JSON object", "message")
        return data
    form = await request.form()
    return dict(form)


def _to_wall() -> RedirectResponse:
    return RedirectResponse("/wall", status_code=303)


@router.get("/wall", response_class=HTMLResponse)
async def wall_page(
    repository: MessageRepository = Depends(get_repository),
    settings: Settings = Depends(get_settings),
):
    """Public read view: form plus committed messages, newest first."""
    messages = await repository.list()
    return HTMLResponse(render_wall_page(messages, settings.message_price))


@router.post("/wall")
async def submit_message(
    request: Request,
    store: PendingMessageStore = Depends(get_pending_store),
):
    """Store a pending message and send the client to the paid confirmation URL."""
    data = await _read_submission(request)
    token = await store.submit(data.get("message"), data.get("author"))
    return RedirectResponse(
        f"/wall-paid?{urlencode({'pendingId': token})}", status_code=303,
    )


@router.get("/wall-paid")
async def confirm_payment(
    request: Request,
    pending_id: str | None = Query(None, alias="pendingId"),
    coordinator: FinalizationCoordinator = Depends(get_coordinator),
    gate: PaymentGate = Depends(get_payment_gate),
):
    """Paid route: verify payment, promote the pending message, settle."""
    if not pending_id:
        raise MessageValidationError("Missing pendingId", "pendingId")
    token = PendingToken(pending_id)

    if await coordinator.lookup(token) is None:
        logger.warning("Pending message not found; redirecting to wall")
        return _to_wall()

    payment = await gate.require(request)
    try:
        message = await coordinator.finalize(token, payment.payer)
    except PendingNotFoundError:
        return _to_wall()

    response = _to_wall()
    settlement = await gate.settle(payment)
    if settlement is not None:
        response.headers["X-PAYMENT-RESPONSE"] = settlement_header(settlement)
    logger.info("Message finalized", extra={"message_id": message.id})
    return response
