"""Payment Confirmation Decoding — turns the X-PAYMENT header into a payer identity.

Invariants:
    - Fails CLOSED: any decode/parse/schema problem raises PaymentConfirmationError,
      never returns None or a placeholder payer
    - Only the structure is checked here; the facilitator authenticates the signature
      before finalization runs

Design Decisions:
    - The envelope model is x402.types.PaymentPayload, the same model the x402
      facilitator client serializes, so what we decode is exactly what gets verified
"""

import json

from pydantic import ValidationError
from x402.encoding import safe_base64_decode, safe_base64_encode
from x402.types import PaymentPayload

from wall.core.errors import PaymentConfirmationError


def decode_payment_header(header: str | None) -> PaymentPayload:
    """Base64 → JSON → x402 PaymentPayload."""
    if not header or not header.strip():
        raise PaymentConfirmationError("missing X-PAYMENT header")
    try:
        data = json.loads(safe_base64_decode(header.strip()))
    except ValueError as e:
        raise PaymentConfirmationError(f"header is not base64 JSON ({e.__class__.__name__})")
    if not isinstance(data, dict):
        raise PaymentConfirmationError("envelope must be a JSON object")
    try:
        return PaymentPayload.model_validate(data)
    except ValidationError as e:
        fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in e.errors())
        raise PaymentConfirmationError(f"envelope schema mismatch at {fields}")


def payer_of(payment: PaymentPayload) -> str:
    """authorization.from of a decoded envelope, stripped and non-blank."""
    authorization = payment.model_dump(by_alias=True)["payload"]["authorization"]
    payer = authorization.get("from")
    if not isinstance(payer, str) or not payer.strip():
        raise PaymentConfirmationError("authorization.from cannot be empty")
    return payer.strip()


def extract_payer(header: str | None) -> str:
    """Return authorization.from of a structurally valid payment envelope."""
    return payer_of(decode_payment_header(header))


def encode_payment_header(payload: dict) -> str:
    """Inverse of decode_payment_header (clients and tests build headers with it)."""
    return safe_base64_encode(json.dumps(payload))
