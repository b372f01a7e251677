"""Payment Gate — x402 challenge/verify/settle around the confirmation route.

Invariants:
    - Nothing is finalized unless the facilitator said isValid for THIS request's
      requirements and the envelope decodes to a payer (fail closed)
    - Missing or rejected payments answer 402 with the accepted requirements
    - Settlement runs only after the message is committed; a failed settlement is
      logged and never un-commits the message

Design Decisions:
    - Same steps as x402's own FastAPI middleware (price → requirements → decode
      → match → verify → settle), but called from the route: the middleware would
      charge before the pending token is checked and skip settlement on redirects
    - Asset address and EIP-712 domain come from x402 for the configured network
"""

import logging
from dataclasses import dataclass

from fastapi import Request
from x402.common import find_matching_payment_requirements, process_price_to_atomic_amount
from x402.encoding import safe_base64_encode
from x402.types import PaymentPayload, PaymentRequirements, SettleResponse

from wall.config import Settings
from wall.core.errors import (
    PaymentConfirmationError, PaymentRequiredError, PaymentVerifierError,
)
from wall.core.payment_payload import decode_payment_header, payer_of
from wall.core.repository_protocols import PaymentVerifier

logger = logging.getLogger(__name__)


def price_to_atomic(price: str, network: str) -> tuple[str, str, dict]:
    """'$0.001' on a USDC network → ('1000', asset address, EIP-712 domain)."""
    try:
        amount, asset, domain = process_price_to_atomic_amount(price.strip(), network)
    except (ValueError, ArithmeticError) as e:
        raise ValueError(f"Invalid price {price!r} for {network}: {e}")
    if int(amount) <= 0:
        raise ValueError(f"Price must be positive: {price!r}")
    return amount, asset, domain


def build_requirements(settings: Settings, resource: str) -> PaymentRequirements:
    amount, asset, domain = price_to_atomic(settings.message_price, settings.network)
    return PaymentRequirements(
        scheme="exact",
        network=settings.network,
        max_amount_required=amount,
        resource=resource,
        description="Post a message to the wall",
        mime_type="text/html",
        pay_to=settings.seller_address,
        max_timeout_seconds=settings.payment_timeout_seconds,
        asset=asset,
        output_schema=None,
        extra=domain,
    )


@dataclass(frozen=True)
class VerifiedPayment:
    payment: PaymentPayload
    payer: str
    requirements: PaymentRequirements


class PaymentGate:
    """Wraps a PaymentVerifier with the server's configured requirements."""

    def __init__(self, verifier: PaymentVerifier, settings: Settings):
        self.verifier = verifier
        self.settings = settings

    async def require(self, request: Request) -> VerifiedPayment:
        accepts = [build_requirements(
            self.settings, str(request.url.replace(query="")),
        )]
        header = request.headers.get("X-PAYMENT")
        if not header:
            raise PaymentRequiredError("X-PAYMENT header is required", accepts)

        try:
            payment = decode_payment_header(header)
            payer = payer_of(payment)
        except PaymentConfirmationError as e:
            logger.warning(f"Rejected payment envelope: {e.message}")
            raise PaymentRequiredError(e.message, accepts)

        requirements = find_matching_payment_requirements(accepts, payment)
        if requirements is None:
            logger.warning(f"No requirements match {payment.scheme} on {payment.network}")
            raise PaymentRequiredError("No matching payment requirements found", accepts)

        result = await self.verifier.verify(payment, requirements)
        if not result.is_valid:
            logger.warning(f"Payment rejected by facilitator: {result.invalid_reason}")
            raise PaymentRequiredError(
                result.invalid_reason or "Payment verification failed", accepts,
            )
        if result.payer and result.payer.lower() != payer.lower():
            logger.warning("Facilitator payer does not match envelope payer")
            raise PaymentRequiredError("Payer mismatch", accepts)
        return VerifiedPayment(payment=payment, payer=payer, requirements=requirements)

    async def settle(self, payment: VerifiedPayment) -> SettleResponse | None:
        """Settle after commit. Returns None when settlement could not be confirmed."""
        try:
            result = await self.verifier.settle(payment.payment, payment.requirements)
        except PaymentVerifierError as e:
            logger.error(
                f"Settlement failed after commit: {e.message}",
                extra={"error_code": e.code, "payer": payment.payer},
            )
            return None
        if not result.success:
            logger.error(
                f"Settlement rejected after commit: {result.error_reason}",
                extra={"payer": payment.payer},
            )
            return None
        return result


def settlement_header(result: SettleResponse) -> str:
    """X-PAYMENT-RESPONSE value returned to the paying client."""
    return safe_base64_encode(result.model_dump_json(by_alias=True))
