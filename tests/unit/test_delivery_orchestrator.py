"""Tests for ordered multi-channel mail delivery."""

import pytest

from fsl_express.application.services import DeliveryOrchestrator, run_bounded
from fsl_express.channels import SmtpChannel
from fsl_express.domain.ports import ChannelError, ErrorKind
from fsl_express.domain.value_objects import DeliveryFailure, DeliverySuccess, FailureKind


def placeholder_smtp() -> SmtpChannel:
    return SmtpChannel(
        "brevo_smtp",
        host="smtp-relay.brevo.com",
        port=587,
        username="your_smtp_user",
        password="changeme",
    )


class TestDeliveryOrchestrator:
    @pytest.mark.asyncio
    async def test_first_successful_channel_wins(self, fake_channel, sample_message):
        first = fake_channel("first")
        second = fake_channel("second")

        outcome = await DeliveryOrchestrator([first, second]).deliver(sample_message)

        assert isinstance(outcome, DeliverySuccess)
        assert outcome.channel_name == "first"
        assert outcome.provider_message_id == "<first-001@test>"
        assert second.ready_calls == 0
        assert second.send_calls == 0

    @pytest.mark.asyncio
    async def test_falls_back_after_send_failure(self, fake_channel, sample_message):
        first = fake_channel("first", send_error=ChannelError(ErrorKind.REJECTED, "sender not allowed"))
        second = fake_channel("second")
        third = fake_channel("third")

        outcome = await DeliveryOrchestrator([first, second, third]).deliver(sample_message)

        assert outcome.success is True
        assert outcome.channel_name == "second"
        assert [a.channel_name for a in outcome.attempts] == ["first"]
        assert third.ready_calls == 0

    @pytest.mark.asyncio
    async def test_readiness_failure_skips_send(self, fake_channel, sample_message):
        first = fake_channel("first", ready_error=ChannelError(ErrorKind.AUTH, "EAUTH: bad login"))
        second = fake_channel("second")

        outcome = await DeliveryOrchestrator([first, second]).deliver(sample_message)

        assert outcome.channel_name == "second"
        assert first.ready_calls == 1
        assert first.send_calls == 0

    @pytest.mark.asyncio
    async def test_all_channels_failed_records_every_attempt_in_order(
        self, fake_channel, sample_message
    ):
        channels = [
            fake_channel("a", ready_error=ChannelError(ErrorKind.AUTH, "EAUTH: 535")),
            fake_channel("b", send_error=ChannelError(ErrorKind.UNAVAILABLE, "connection refused")),
            fake_channel("c", send_error=ChannelError(ErrorKind.REJECTED, "recipient refused")),
        ]

        outcome = await DeliveryOrchestrator(channels).deliver(sample_message)

        assert isinstance(outcome, DeliveryFailure)
        assert outcome.kind is FailureKind.ALL_CHANNELS_FAILED
        assert [(a.channel_name, a.kind) for a in outcome.attempts] == [
            ("a", "auth"),
            ("b", "unavailable"),
            ("c", "rejected"),
        ]
        assert "connection refused" in outcome.summary()

    @pytest.mark.asyncio
    async def test_no_active_channel_is_distinct_from_all_failed(self, fake_channel, sample_message):
        channels = [fake_channel("a", active=False), placeholder_smtp()]

        outcome = await DeliveryOrchestrator(channels).deliver(sample_message)

        assert isinstance(outcome, DeliveryFailure)
        assert outcome.kind is FailureKind.NO_CHANNEL_CONFIGURED
        assert outcome.attempts == ()
        assert channels[0].ready_calls == 0

    @pytest.mark.asyncio
    async def test_empty_channel_list(self, sample_message):
        outcome = await DeliveryOrchestrator([]).deliver(sample_message)

        assert outcome.kind is FailureKind.NO_CHANNEL_CONFIGURED

    @pytest.mark.asyncio
    async def test_placeholder_credential_channel_is_never_attempted(
        self, fake_channel, sample_message
    ):
        backup = fake_channel("brevo_api")

        outcome = await DeliveryOrchestrator([placeholder_smtp(), backup]).deliver(sample_message)

        assert outcome.channel_name == "brevo_api"
        assert outcome.attempts == ()

    @pytest.mark.asyncio
    async def test_placeholder_channel_absent_from_failure_attempts(
        self, fake_channel, sample_message
    ):
        failing = fake_channel("brevo_api", send_error=ChannelError(ErrorKind.UNAVAILABLE, "503"))

        outcome = await DeliveryOrchestrator([placeholder_smtp(), failing]).deliver(sample_message)

        assert outcome.kind is FailureKind.ALL_CHANNELS_FAILED
        assert [a.channel_name for a in outcome.attempts] == ["brevo_api"]

    @pytest.mark.asyncio
    async def test_readiness_timeout_moves_to_next_channel(self, fake_channel, sample_message):
        slow = fake_channel("slow", ready_delay=1.0, ready_timeout=0.05)
        fast = fake_channel("fast")

        outcome = await DeliveryOrchestrator([slow, fast]).deliver(sample_message)

        assert outcome.channel_name == "fast"
        assert outcome.attempts[0].channel_name == "slow"
        assert outcome.attempts[0].kind == ErrorKind.TIMEOUT.value
        assert slow.send_calls == 0

    @pytest.mark.asyncio
    async def test_send_timeout_moves_to_next_channel(self, fake_channel, sample_message):
        slow = fake_channel("slow", send_delay=1.0, send_timeout=0.05)
        fast = fake_channel("fast")

        outcome = await DeliveryOrchestrator([slow, fast]).deliver(sample_message)

        assert outcome.channel_name == "fast"
        assert outcome.attempts[0].kind == "timeout"
        assert "timed out" in outcome.attempts[0].detail

    @pytest.mark.asyncio
    async def test_unexpected_exception_is_recorded(self, fake_channel, sample_message):
        broken = fake_channel("broken", send_error=RuntimeError("boom"))
        backup = fake_channel("backup")

        outcome = await DeliveryOrchestrator([broken, backup]).deliver(sample_message)

        assert outcome.channel_name == "backup"
        assert outcome.attempts[0].kind == "unavailable"
        assert "boom" in outcome.attempts[0].detail

    @pytest.mark.asyncio
    async def test_empty_message_id_is_a_failure(self, fake_channel, sample_message):
        silent = fake_channel("silent", message_id="")
        backup = fake_channel("backup")

        outcome = await DeliveryOrchestrator([silent, backup]).deliver(sample_message)

        assert outcome.channel_name == "backup"
        assert outcome.attempts[0].channel_name == "silent"

    @pytest.mark.asyncio
    async def test_each_channel_tried_at_most_once(self, fake_channel, sample_message):
        channels = [
            fake_channel("a", send_error=ChannelError(ErrorKind.UNAVAILABLE, "down")),
            fake_channel("b", send_error=ChannelError(ErrorKind.UNAVAILABLE, "down")),
        ]

        await DeliveryOrchestrator(channels).deliver(sample_message)

        assert [(c.ready_calls, c.send_calls) for c in channels] == [(1, 1), (1, 1)]

    @pytest.mark.asyncio
    async def test_channels_receive_original_message(self, fake_channel, sample_message):
        channel = fake_channel("only")

        await DeliveryOrchestrator([channel]).deliver(sample_message)

        assert channel.sent == [sample_message]

    def test_active_channel_names(self, fake_channel):
        orchestrator = DeliveryOrchestrator(
            [placeholder_smtp(), fake_channel("brevo_api"), fake_channel("ses", active=False)]
        )

        assert orchestrator.active_channel_names() == ["brevo_api"]


class TestRunBounded:
    @pytest.mark.asyncio
    async def test_returns_result(self):
        async def op():
            return "ok"

        assert await run_bounded(op(), 1.0, "Op") == "ok"

    @pytest.mark.asyncio
    async def test_passes_channel_error_through(self):
        async def op():
            raise ChannelError(ErrorKind.AUTH, "EAUTH")

        with pytest.raises(ChannelError) as exc_info:
            await run_bounded(op(), 1.0, "Op")

        assert exc_info.value.kind is ErrorKind.AUTH
