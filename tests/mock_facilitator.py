"""Mock Facilitator — in-process PaymentVerifier plus X-PAYMENT header builders.

Invariants:
    - MockFacilitator records every verify/settle call (payment, requirements)
    - Verdicts are configurable per instance: valid, invalid_reason, payer override
    - build_payment_header produces the same base64 JSON shape real x402 clients send

Design Decisions:
    - Flat mock class (no inheritance): satisfies the PaymentVerifier Protocol structurally
    - Replies are real x402 VerifyResponse / SettleResponse models, built from
      wire-format (camelCase) dicts
"""

from x402.types import SettleResponse, VerifyResponse

from wall.core.errors import PaymentVerifierError
from wall.core.payment_payload import encode_payment_header

PAYER = "0x857b06519E91e3A54538791bDbb0E22373e36b66"
SELLER = "0x209693Bc6afc0C5328bA36FaF03C514EF312287C"


def build_payment_envelope(payer: str = PAYER, network: str = "base-sepolia") -> dict:
    return {
        "x402Version": 1,
        "scheme": "exact",
        "network": network,
        "payload": {
            "signature": "0x" + "ab" * 65,
            "authorization": {
                "from": payer,
                "to": SELLER,
                "value": "1000",
                "validAfter": "1740672089",
                "validBefore": "1740672154",
                "nonce": "0x" + "11" * 32,
            },
        },
    }


def build_payment_header(payer: str = PAYER, network: str = "base-sepolia") -> str:
    return encode_payment_header(build_payment_envelope(payer, network))


def verify_reply(valid: bool = True, reason: str | None = None, payer: str | None = None) -> VerifyResponse:
    return VerifyResponse.model_validate({
        "isValid": valid, "invalidReason": reason, "payer": payer,
    })


def settle_reply(success: bool = True, payer: str | None = None) -> SettleResponse:
    return SettleResponse.model_validate({
        "success": success,
        "errorReason": None if success else "insufficient_funds",
        "transaction": "0x" + "cd" * 32 if success else "",
        "network": "base-sepolia",
        "payer": payer,
    })


class MockFacilitator:
    """Configurable stand-in for FacilitatorVerifier."""

    def __init__(
        self,
        valid: bool = True,
        invalid_reason: str | None = None,
        payer: str | None = None,
        settle_success: bool = True,
        settle_raises: bool = False,
    ):
        self.valid = valid
        self.invalid_reason = invalid_reason
        self.payer = payer
        self.settle_success = settle_success
        self.settle_raises = settle_raises
        self.verify_calls: list[tuple[object, object]] = []
        self.settle_calls: list[tuple[object, object]] = []

    async def verify(self, payment, requirements) -> VerifyResponse:
        self.verify_calls.append((payment, requirements))
        return verify_reply(self.valid, self.invalid_reason, self.payer)

    async def settle(self, payment, requirements) -> SettleResponse:
        self.settle_calls.append((payment, requirements))
        if self.settle_raises:
            raise PaymentVerifierError("facilitator unreachable", "settle")
        return settle_reply(self.settle_success, self.payer)
