"""Facilitator Verifier — x402 payment verification and settlement.

Invariants:
    - Implements the PaymentVerifier protocol (core/repository_protocols.py)
    - Transport failures, timeouts, and replies that are not a verify/settle
      response map to PaymentVerifierError (502), never to "payment invalid"
    - A facilitator "isValid: false" is NOT an error here; the payment gate decides

Design Decisions:
    - Wire format and HTTP calls belong to x402.facilitator.FacilitatorClient;
      this adapter only bounds the call in time and translates failures
    - The x402 client is injectable so tests pass a stub instead of the network
"""

import asyncio
import logging

import httpx
from pydantic import ValidationError
from x402.facilitator import FacilitatorClient
from x402.types import (
    PaymentPayload, PaymentRequirements, SettleResponse, VerifyResponse,
)

from wall.core.errors import PaymentVerifierError

logger = logging.getLogger(__name__)


class FacilitatorVerifier:
    """Talks to an x402 facilitator's /verify and /settle endpoints."""

    def __init__(
        self,
        facilitator_url: str,
        timeout_seconds: float = 15.0,
        client: FacilitatorClient | None = None,
    ):
        self.timeout_seconds = timeout_seconds
        self._client = client or FacilitatorClient({"url": facilitator_url})

    async def verify(
        self, payment: PaymentPayload, requirements: PaymentRequirements,
    ) -> VerifyResponse:
        return await self._call("verify", self._client.verify(payment, requirements))

    async def settle(
        self, payment: PaymentPayload, requirements: PaymentRequirements,
    ) -> SettleResponse:
        return await self._call("settle", self._client.settle(payment, requirements))

    async def _call(self, operation: str, request):
        try:
            return await asyncio.wait_for(request, self.timeout_seconds)
        except asyncio.TimeoutError:
            logger.error(f"Facilitator {operation} timed out after {self.timeout_seconds}s")
            raise PaymentVerifierError("facilitator timed out", operation)
        except httpx.HTTPError as e:
            logger.error(f"Facilitator {operation} unreachable: {e}")
            raise PaymentVerifierError("facilitator unreachable", operation)
        except ValidationError as e:
            raise PaymentVerifierError(
                f"unexpected reply shape: {e.error_count()} error(s)", operation,
            )
        except (ValueError, TypeError):
            # Non-JSON body, or JSON that is not an object
            raise PaymentVerifierError("reply is not a JSON object", operation)
