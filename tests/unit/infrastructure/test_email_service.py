"""Tests for SmtpNotifier and JinjaMessageRenderer."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from credo.core.config.settings import settings
from credo.infrastructure.services.email import JinjaMessageRenderer, SmtpNotifier


@pytest.fixture
def smtp_settings():
    return settings.model_copy(update={"EMAIL_TEST_MODE": False, "EMAIL_SEND_TIMEOUT_SECONDS": 0.05})


class TestSmtpNotifier:
    @pytest.mark.asyncio
    async def test_test_mode_reports_delivery_without_sending(self):
        notifier = SmtpNotifier(settings.model_copy(update={"EMAIL_TEST_MODE": True}))

        assert notifier.fastmail is None
        assert await notifier.send("ana@example.com", "Hello", "<p>hi</p>") is True

    @pytest.mark.asyncio
    async def test_sends_html_message(self, smtp_settings):
        fastmail = MagicMock()
        fastmail.send_message = AsyncMock()
        notifier = SmtpNotifier(smtp_settings, fastmail=fastmail)

        delivered = await notifier.send("ana@example.com", "Hello", "<p>hi</p>")

        assert delivered is True
        message = fastmail.send_message.await_args.args[0]
        assert message.subject == "Hello"
        assert "ana@example.com" in str(message.recipients[0])

    @pytest.mark.asyncio
    async def test_transport_error_is_reported_as_not_delivered(self, smtp_settings):
        fastmail = MagicMock()
        fastmail.send_message = AsyncMock(side_effect=ConnectionRefusedError("smtp down"))
        notifier = SmtpNotifier(smtp_settings, fastmail=fastmail)

        assert await notifier.send("ana@example.com", "Hello", "<p>hi</p>") is False

    @pytest.mark.asyncio
    async def test_timeout_is_reported_as_not_delivered(self, smtp_settings):
        async def _hang(message):
            await asyncio.sleep(1)

        fastmail = MagicMock()
        fastmail.send_message = _hang
        notifier = SmtpNotifier(smtp_settings, fastmail=fastmail)

        assert await notifier.send("ana@example.com", "Hello", "<p>hi</p>") is False


class TestJinjaMessageRenderer:
    def test_activation_message_contains_link_and_escapes_name(self, renderer):
        message = renderer.render_activation("<b>Ana</b>", "http://localhost/activate/abc")

        assert message.subject == "Activate your Credo account"
        assert "http://localhost/activate/abc" in message.body
        assert "<b>Ana</b>" not in message.body
        assert "&lt;b&gt;Ana&lt;/b&gt;" in message.body

    @pytest.mark.parametrize(
        "purpose, subject",
        [
            ("password-reset", "Your password reset code"),
            ("signup", "Your account activation code"),
            ("login", "Your login code"),
        ],
    )
    def test_code_message_subject_follows_purpose(self, renderer, purpose, subject):
        message = renderer.render_otp("482913", purpose, 10)

        assert message.subject == subject
        assert "482913" in message.body
        assert "10 minutes" in message.body

    def test_missing_templates_directory(self, tmp_path):
        with pytest.raises(ValueError):
            JinjaMessageRenderer(str(tmp_path / "missing"))
