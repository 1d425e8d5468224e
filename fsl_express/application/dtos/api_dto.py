"""Request and response DTOs for the HTTP surface."""

from pydantic import BaseModel, Field

from ...domain.value_objects import AssetMatch, ClassificationResult, DeliverySuccess


class SendOtpRequest(BaseModel):
    """Body of POST /send-otp.

    Fields are optional here so that a missing ``to``/``otp`` is reported
    by the service as a 400, not by FastAPI as a 422.
    """

    to: str | None = None
    otp: str | int | None = None
    subject: str | None = Field(default=None, max_length=200)


class SendOtpResponse(BaseModel):
    success: bool = True
    message_id: str = Field(serialization_alias="messageId")
    message: str = "OTP sent successfully"
    channel: str

    @classmethod
    def from_outcome(cls, outcome: DeliverySuccess) -> "SendOtpResponse":
        return cls(message_id=outcome.provider_message_id, channel=outcome.channel_name)


class AssetFileDTO(BaseModel):
    public_id: str
    url: str | None = None


class SearchResponse(BaseModel):
    public_id: str | None
    message: str
    all_files: list[AssetFileDTO]

    @classmethod
    def from_match(cls, match: AssetMatch) -> "SearchResponse":
        return cls(
            public_id=match.public_id,
            message="Match found" if match.found else "No match found",
            all_files=[AssetFileDTO(public_id=f.public_id, url=f.url) for f in match.files],
        )


class PredictionResponse(BaseModel):
    label: str
    confidence: str  # "NN.N%"

    @classmethod
    def from_result(cls, result: ClassificationResult) -> "PredictionResponse":
        return cls(label=result.label, confidence=result.confidence_percent)
