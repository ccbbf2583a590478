"""Server-side verification of gateway payment callbacks."""

import hashlib
import hmac
import logging
from dataclasses import dataclass

from boxoffice.exceptions import InvalidSignature, PaymentVerificationFailed
from boxoffice.schemas.checkout import PaymentDetails
from boxoffice.services.payment_gateway import RazorpayGateway, from_minor_units

logger = logging.getLogger(__name__)


def compute_signature(order_id: str, payment_id: str, secret: str) -> str:
    """Hex HMAC-SHA256 of ``order_id|payment_id`` keyed with ``secret``."""
    message = f"{order_id}|{payment_id}".encode("utf-8")
    return hmac.new(secret.encode("utf-8"), message, hashlib.sha256).hexdigest()


@dataclass(frozen=True)
class VerifiedPayment:
    """A payment whose callback signature matched."""

    order_id: str
    payment_id: str
    signature: str
    details: PaymentDetails


class PaymentVerifier:
    """
    Authenticates gateway callbacks.

    This is the only gate in front of booking creation: a booking is written
    only for a payment returned by ``verify``.
    """

    def __init__(self, gateway: RazorpayGateway, secret: str):
        self.gateway = gateway
        self._secret = secret

    def compute_signature(self, order_id: str, payment_id: str) -> str:
        return compute_signature(order_id, payment_id, self._secret)

    def signature_matches(self, order_id: str, payment_id: str, signature: str) -> bool:
        expected = self.compute_signature(order_id, payment_id)
        return hmac.compare_digest(expected, signature)

    async def verify(
        self,
        order_id: str,
        payment_id: str,
        signature: str,
    ) -> VerifiedPayment:
        """
        Verify a callback and fetch authoritative payment details.

        Raises:
            InvalidSignature: If the signature does not match
            PaymentVerificationFailed: If payment details cannot be fetched
        """
        logger.info(f"Verifying payment {payment_id} for order {order_id}")

        if not self.signature_matches(order_id, payment_id, signature):
            logger.warning(f"Invalid payment signature for order {order_id}")
            raise InvalidSignature()

        try:
            payment = await self.gateway.fetch_payment(payment_id)
        except Exception as e:
            logger.error(f"Failed to fetch payment {payment_id}: {e}", exc_info=True)
            raise PaymentVerificationFailed() from e

        amount = payment.get("amount")
        details = PaymentDetails(
            status=payment.get("status"),
            amount=from_minor_units(amount) if amount is not None else None,
            method=payment.get("method"),
            bank=payment.get("bank"),
            card_id=payment.get("card_id"),
            wallet=payment.get("wallet"),
        )
        logger.info(
            f"Payment verified: {payment_id} status={details.status} "
            f"amount={details.amount} method={details.method}"
        )
        return VerifiedPayment(
            order_id=order_id,
            payment_id=payment_id,
            signature=signature,
            details=details,
        )
