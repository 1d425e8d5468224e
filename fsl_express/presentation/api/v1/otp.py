from fastapi import APIRouter, Depends

from ....application.dtos import SendOtpRequest, SendOtpResponse
from ....application.services import OtpService
from ..dependencies import get_otp_service

router = APIRouter(tags=["otp"])


@router.post(
    "/send-otp",
    response_model=SendOtpResponse,
    summary="Send a one-time passcode",
    description="Email an OTP through the first mail channel that accepts it.",
)
async def send_otp(
    payload: SendOtpRequest | None = None,
    service: OtpService = Depends(get_otp_service),
) -> SendOtpResponse:
    payload = payload or SendOtpRequest()
    outcome = await service.send_otp(payload.to, payload.otp, payload.subject)
    return SendOtpResponse.from_outcome(outcome)
