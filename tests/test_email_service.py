import asyncio

import pytest

from catermatch.email_service import (
    NotificationSender,
    send_bid_accepted_email,
    send_new_bid_notification,
)
from catermatch.email_templates import bid_accepted_template, format_amount, new_bid_notification_template

from .conftest import FakeSender


@pytest.fixture
def resend_send(mocker):
    return mocker.patch("catermatch.email_service.resend.Emails.send", return_value={"id": "re_123"})


class TestNotificationSender:
    def test_sends_through_resend(self, resend_send):
        sender = NotificationSender(api_key="re_test", from_address="Catermatch <noreply@catermatch.nl>")

        result = asyncio.run(sender.send("owner@example.com", "Onderwerp", "<p>hi</p>"))

        assert result == {"ok": True, "id": "re_123"}
        resend_send.assert_called_once_with(
            {
                "from": "Catermatch <noreply@catermatch.nl>",
                "to": ["owner@example.com"],
                "subject": "Onderwerp",
                "html": "<p>hi</p>",
            }
        )

    @pytest.mark.parametrize(
        "to, subject, html",
        [(None, "s", "<p/>"), ("a@b.nl", "", "<p/>"), ("a@b.nl", "s", None)],
    )
    def test_missing_fields(self, resend_send, to, subject, html):
        sender = NotificationSender(api_key="re_test")
        result = asyncio.run(sender.send(to, subject, html))

        assert result == {"ok": False, "error": "Missing to/subject/html"}
        resend_send.assert_not_called()

    def test_missing_api_key(self, resend_send):
        sender = NotificationSender(api_key=None)
        result = asyncio.run(sender.send("a@b.nl", "s", "<p/>"))

        assert result == {"ok": False, "error": "Missing RESEND_API_KEY"}
        resend_send.assert_not_called()

    def test_provider_errors_are_returned_not_raised(self, resend_send):
        resend_send.side_effect = RuntimeError("rate limited")
        sender = NotificationSender(api_key="re_test")

        result = asyncio.run(sender.send("a@b.nl", "s", "<p/>"))

        assert result == {"ok": False, "error": "rate limited"}


class TestBidEmails:
    def test_new_bid_notification(self):
        sender = FakeSender()
        result = asyncio.run(
            send_new_bid_notification(
                sender, to="owner@example.com", event_id=12, event_title="Tuinfeest", amount=500, message="Tot dan!"
            )
        )

        assert result["ok"] is True
        sent = sender.sent[0]
        assert sent["subject"] == "Nieuw bod op: Tuinfeest"
        assert "€ 500.00" in sent["html"]
        assert "Tot dan!" in sent["html"]
        assert "http://localhost:5173/events/12/bids" in sent["html"]

    def test_bid_accepted_email(self):
        sender = FakeSender()
        asyncio.run(send_bid_accepted_email(sender, to="chef@example.com", chat_id=4, event_title="Tuinfeest", amount=1250.5))

        sent = sender.sent[0]
        assert sent["to"] == "chef@example.com"
        assert sent["subject"] == "Je bod is geaccepteerd: Tuinfeest"
        assert "€ 1250.50" in sent["html"]
        assert "http://localhost:5173/chats/4" in sent["html"]

    def test_render_failure_is_reported_not_raised(self, mjml):
        mjml.side_effect = RuntimeError("bad template")
        sender = FakeSender()

        result = asyncio.run(send_bid_accepted_email(sender, to="chef@example.com", chat_id=4, event_title="x", amount=1))

        assert result["ok"] is False
        assert sender.sent == []


class TestTemplates:
    def test_user_text_is_escaped(self):
        mjml = new_bid_notification_template("<b>Feest</b>", 10, "<script>alert(1)</script>", "https://x/bids")

        assert "<script>" not in mjml
        assert "&lt;script&gt;" in mjml
        assert "&lt;b&gt;Feest&lt;/b&gt;" in mjml

    def test_message_section_is_optional(self):
        assert "font-style" not in new_bid_notification_template("Feest", 10, None, "https://x/bids")

    def test_accepted_template_links_chat(self):
        assert "https://x/chats/9" in bid_accepted_template("Feest", 10, "https://x/chats/9")

    def test_format_amount(self):
        assert format_amount(500) == "€ 500.00"
        assert format_amount(99.999) == "€ 100.00"
