"""
Notification email service using Resend
Templates are MJML, compiled to HTML before sending.

Delivery is best-effort and at-most-once: ``NotificationSender.send`` never
raises, and callers dispatch it as a background task after their write has
committed.
"""

import logging
from typing import Optional

import resend
from mjml import mjml_to_html

from .config import EMAIL_FROM_ADDRESS, FRONTEND_URL, RESEND_API_KEY
from .email_templates import bid_accepted_template, new_bid_notification_template

logger = logging.getLogger(__name__)


def compile_mjml_to_html(mjml_content: str) -> str:
    """Compile MJML template to production-ready HTML"""
    try:
        result = mjml_to_html(mjml_content)
        # mjml_to_html returns a dict with 'html' and 'errors' keys
        if isinstance(result, dict):
            if result.get("errors"):
                logger.warning(f"MJML compilation warnings: {result['errors']}")
            return result.get("html", "")
        return str(result)
    except Exception as e:
        logger.error(f"MJML compilation error: {e}")
        raise Exception(f"Failed to compile MJML template: {str(e)}") from e


class NotificationSender:
    """Sends transactional email through Resend"""

    def __init__(self, api_key: Optional[str] = RESEND_API_KEY, from_address: str = EMAIL_FROM_ADDRESS):
        self.api_key = api_key
        self.from_address = from_address

    async def send(self, to: Optional[str], subject: Optional[str], html: Optional[str]) -> dict:
        """
        Send one email.

        Returns:
            {"ok": True, "id": <resend id>} or {"ok": False, "error": <reason>}
        """
        if not to or not subject or not html:
            return {"ok": False, "error": "Missing to/subject/html"}

        if not self.api_key:
            logger.error("❌ No email service configured - RESEND_API_KEY missing")
            return {"ok": False, "error": "Missing RESEND_API_KEY"}

        try:
            logger.info(f"📧 Sending email via Resend to: {to}")
            resend.api_key = self.api_key
            response = resend.Emails.send(
                {
                    "from": self.from_address,
                    "to": [to],
                    "subject": subject,
                    "html": html,
                }
            )
            email_id = response.get("id") if isinstance(response, dict) else getattr(response, "id", None)
            logger.info(f"✅ Email sent successfully via Resend: {email_id}")
            return {"ok": True, "id": email_id}
        except Exception as e:
            logger.error(f"❌ Email send error to {to}: {e}")
            return {"ok": False, "error": str(e)}


def get_notification_sender() -> NotificationSender:
    """Dependency injection for NotificationSender"""
    return NotificationSender()


# ============================================
# Bid workflow notifications
# ============================================


async def send_new_bid_notification(
    sender: NotificationSender,
    to: str,
    event_id: int,
    event_title: str,
    amount: float,
    message: Optional[str] = None,
) -> dict:
    """Tell the event owner a caterer placed a bid"""
    bids_url = f"{FRONTEND_URL}/events/{event_id}/bids"
    try:
        html = compile_mjml_to_html(
            new_bid_notification_template(event_title, amount, message, bids_url)
        )
    except Exception as e:
        logger.error(f"❌ New bid notification for event {event_id} not rendered: {e}")
        return {"ok": False, "error": str(e)}

    result = await sender.send(to, f"Nieuw bod op: {event_title}", html)
    if not result.get("ok"):
        logger.error(f"[notify] new bid email for event {event_id} failed: {result.get('error')}")
    return result


async def send_bid_accepted_email(
    sender: NotificationSender,
    to: str,
    chat_id: int,
    event_title: str,
    amount: float,
) -> dict:
    """Tell the caterer their bid was accepted, with a link to the chat"""
    chat_url = f"{FRONTEND_URL}/chats/{chat_id}"
    try:
        html = compile_mjml_to_html(bid_accepted_template(event_title, amount, chat_url))
    except Exception as e:
        logger.error(f"❌ Bid accepted email for chat {chat_id} not rendered: {e}")
        return {"ok": False, "error": str(e)}

    result = await sender.send(to, f"Je bod is geaccepteerd: {event_title}", html)
    if not result.get("ok"):
        logger.error(f"[notify] bid accepted email for chat {chat_id} failed: {result.get('error')}")
    return result
