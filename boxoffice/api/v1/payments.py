"""Payment verification API endpoints."""

from fastapi import APIRouter

from boxoffice.api.v1.dependencies import CurrentUser, Verifier
from boxoffice.exceptions import InvalidSignature, PaymentVerificationFailed
from boxoffice.schemas.checkout import PaymentVerifyRequest, PaymentVerifyResponse

router = APIRouter()


@router.post(
    "/verify",
    response_model=PaymentVerifyResponse,
    summary="Verify payment callback",
)
async def verify_payment(
    request: PaymentVerifyRequest,
    current_user: CurrentUser,
    verifier: Verifier,
) -> PaymentVerifyResponse:
    """
    Verify the signature of a gateway callback.

    A mismatch is reported as ``verified=false`` rather than an error status.
    """
    try:
        verified = await verifier.verify(
            request.order_id,
            request.payment_id,
            request.signature,
        )
    except (InvalidSignature, PaymentVerificationFailed) as e:
        return PaymentVerifyResponse(
            verified=False,
            order_id=request.order_id,
            payment_id=request.payment_id,
            error=e.message,
        )

    return PaymentVerifyResponse(
        verified=True,
        order_id=verified.order_id,
        payment_id=verified.payment_id,
        payment_details=verified.details,
    )
