import pytest

from fsl_express.application.services import DeliveryOrchestrator, OtpService, remediation_hint
from fsl_express.application.services.otp_service import AUTH_HINT, NO_CHANNEL_HINT, SENDER_HINT
from fsl_express.domain.errors import AllChannelsFailed, NoChannelConfigured, ValidationError
from fsl_express.domain.ports import ChannelError, ErrorKind


def make_service(*channels) -> OtpService:
    return OtpService(DeliveryOrchestrator(channels), sender_email="noreply@fsl.example")


class TestRemediationHint:
    def test_smtp_auth_failure(self):
        assert remediation_hint("EAUTH: SMTP authentication failed (535 ...)") == AUTH_HINT

    def test_unverified_sender(self):
        assert remediation_hint("Sender address is not verified") == SENDER_HINT
        assert remediation_hint("from address not allowed") == SENDER_HINT

    def test_no_match(self):
        assert remediation_hint("connection refused") is None


class TestOtpService:
    def test_build_message(self):
        service = make_service()

        message = service.build_message("a@b.com", "123456")

        assert message.subject == "Your OTP Code"
        assert message.html_body == "<p>Your OTP code is: <b>123456</b></p>"
        assert message.sender_name == "FSL Express"
        assert message.sender_email == "noreply@fsl.example"

    def test_build_message_escapes_code(self):
        message = make_service().build_message("a@b.com", "<script>")

        assert "<script>" not in message.html_body
        assert "&lt;script&gt;" in message.html_body

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("to", "otp"),
        [(None, "123456"), ("a@b.com", None), ("  ", "123456"), ("a@b.com", "   ")],
    )
    async def test_missing_fields(self, fake_channel, to, otp):
        channel = fake_channel("brevo_smtp")

        with pytest.raises(ValidationError) as exc_info:
            await make_service(channel).send_otp(to, otp)

        assert exc_info.value.status_code == 400
        assert channel.ready_calls == 0

    @pytest.mark.asyncio
    async def test_numeric_otp_and_custom_subject(self, fake_channel):
        channel = fake_channel("brevo_smtp")

        outcome = await make_service(channel).send_otp(" a@b.com ", 654321, subject="Login code")

        assert outcome.channel_name == "brevo_smtp"
        sent = channel.sent[0]
        assert sent.recipient == "a@b.com"
        assert sent.subject == "Login code"
        assert "<b>654321</b>" in sent.html_body

    @pytest.mark.asyncio
    async def test_no_channel_configured(self, fake_channel):
        with pytest.raises(NoChannelConfigured) as exc_info:
            await make_service(fake_channel("a", active=False)).send_otp("a@b.com", "1")

        assert exc_info.value.hint == NO_CHANNEL_HINT
        assert exc_info.value.message == "Failed to send OTP"

    @pytest.mark.asyncio
    async def test_all_channels_failed_carries_attempts_and_hint(self, fake_channel):
        channels = [
            fake_channel("brevo_smtp", ready_error=ChannelError(ErrorKind.AUTH, "EAUTH: 535")),
            fake_channel("brevo_api", send_error=ChannelError(ErrorKind.UNAVAILABLE, "503")),
        ]

        with pytest.raises(AllChannelsFailed) as exc_info:
            await make_service(*channels).send_otp("a@b.com", "123456")

        error = exc_info.value
        assert error.hint == AUTH_HINT
        assert [a["channel"] for a in error.details["attempts"]] == ["brevo_smtp", "brevo_api"]
        assert "brevo_api: 503" in error.error

    @pytest.mark.asyncio
    async def test_auth_hint_for_non_smtp_channel(self, fake_channel):
        channel = fake_channel(
            "brevo_api", ready_error=ChannelError(ErrorKind.AUTH, "Brevo API error: 401 Key not found")
        )

        with pytest.raises(AllChannelsFailed) as exc_info:
            await make_service(channel).send_otp("a@b.com", "123456")

        assert "brevo_api" in exc_info.value.hint
