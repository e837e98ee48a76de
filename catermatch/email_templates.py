"""
MJML Email Templates
Bid notifications for owners and caterers
"""

from typing import Optional

from .utils.sanitization import sanitize_string

THEME = {
    "primary": "#f5a524",
    "primary_dark": "#d48806",
    "background": "#f8fafc",
    "text_primary": "#0f172a",
    "text_secondary": "#334155",
    "text_muted": "#64748b",
    "border": "#e2e8f0",
}


def format_amount(amount: float) -> str:
    """€ 500.00"""
    return f"€ {float(amount):.2f}"


def get_base_template(
    title: str,
    preview_text: str,
    content_sections: str,
    cta_url: Optional[str] = None,
    cta_label: Optional[str] = None,
) -> str:
    """Base MJML template wrapper for all emails"""

    cta_section = ""
    if cta_url and cta_label:
        cta_section = f"""
        <mj-section padding="20px 0">
          <mj-column>
            <mj-button
              href="{cta_url}"
              background-color="{THEME['primary']}"
              color="#ffffff"
              font-weight="600"
              border-radius="8px"
              padding="18px 40px"
              font-size="16px">
              {cta_label}
            </mj-button>
          </mj-column>
        </mj-section>
        """

    return f"""
    <mjml>
      <mj-head>
        <mj-title>{title}</mj-title>
        <mj-preview>{preview_text}</mj-preview>
        <mj-attributes>
          <mj-all font-family="system-ui, -apple-system, 'Segoe UI', Arial, sans-serif" />
          <mj-text font-size="16px" line-height="1.5" color="{THEME['text_secondary']}" />
        </mj-attributes>
      </mj-head>
      <mj-body background-color="{THEME['background']}">
        <mj-section background-color="#ffffff" padding="40px 40px 32px 40px">
          <mj-column>
            <mj-text font-size="24px" font-weight="600" color="{THEME['text_primary']}" line-height="1.3" padding="0 0 16px 0">
              {title}
            </mj-text>

            {content_sections}
          </mj-column>
        </mj-section>

        {cta_section}

        <mj-section padding="24px 20px">
          <mj-column>
            <mj-divider border-color="{THEME['border']}" border-width="1px" padding="0 0 12px 0" />
            <mj-text align="center" font-size="13px" color="#94a3b8" padding="0">
              Catermatch
            </mj-text>
          </mj-column>
        </mj-section>
      </mj-body>
    </mjml>
    """


def new_bid_notification_template(
    event_title: str,
    amount: float,
    message: Optional[str],
    bids_url: str,
) -> str:
    """Owner notification for an incoming bid"""
    title = sanitize_string(event_title or "")

    message_section = ""
    if message:
        message_section = f"""
        <mj-text color="{THEME['text_muted']}" font-style="italic">
          "{sanitize_string(message)}"
        </mj-text>
        """

    content = f"""
    <mj-text>
      Event: <strong>{title}</strong><br/>
      Bedrag: <strong>{format_amount(amount)}</strong>
    </mj-text>

    {message_section}

    <mj-text>
      Bekijk alle biedingen: <a href="{bids_url}">{bids_url}</a>
    </mj-text>
    """

    return get_base_template(
        title="Nieuw bod ontvangen",
        preview_text=f"Nieuw bod op {title}",
        content_sections=content,
        cta_url=bids_url,
        cta_label="Biedingen bekijken",
    )


def bid_accepted_template(event_title: str, amount: float, chat_url: str) -> str:
    """Caterer notification when their bid is accepted"""
    title = sanitize_string(event_title or "")

    content = f"""
    <mj-text>
      Event: <strong>{title}</strong><br/>
      Bedrag: <strong>{format_amount(amount)}</strong>
    </mj-text>

    <mj-text>
      Je kunt nu chatten met de owner: <a href="{chat_url}">{chat_url}</a>
    </mj-text>
    """

    return get_base_template(
        title="Gefeliciteerd! Je bod is geaccepteerd",
        preview_text=f"Je bod op {title} is geaccepteerd",
        content_sections=content,
        cta_url=chat_url,
        cta_label="Open chat",
    )
