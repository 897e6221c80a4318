"""
Email bodies for new-lead notifications.

Every value that came from a form submission or from branding config goes through
escape() before it lands in HTML. Each render function returns (subject, text, html).
"""
import html
from dataclasses import dataclass
from typing import Optional

from leaddesk.config import Settings
from leaddesk.models.lead import Lead


@dataclass(frozen=True)
class Branding:
    brand_name: str
    logo_url: str = ""
    shop_address: str = ""
    shop_phone: str = ""
    shop_email: str = ""
    shop_website: str = ""
    wa_number: str = ""

    @classmethod
    def from_settings(cls, settings: Settings) -> "Branding":
        return cls(
            brand_name=settings.brand_name,
            logo_url=settings.logo_url,
            shop_address=settings.shop_address,
            shop_phone=settings.shop_phone,
            shop_email=settings.shop_email,
            shop_website=settings.shop_website,
            wa_number=settings.wa_number,
        )

    @property
    def whatsapp_link(self) -> str:
        digits = "".join(ch for ch in self.wa_number if ch.isdigit())
        return f"https://wa.me/{digits}" if digits else ""


def escape(value: Optional[str]) -> str:
    """Escape & < > " ' for safe inclusion in HTML text and attributes."""
    return html.escape(str(value or ""), quote=True)


def escape_multiline(value: Optional[str]) -> str:
    return escape(value).replace("\r\n", "\n").replace("\n", "<br/>")


_WRAPPER_OPEN = (
    '<div style="font-family: Arial, sans-serif; line-height: 1.55; color: #111; '
    'background: #f6f7fb; padding: 18px;">'
    '<div style="max-width: 720px; margin: 0 auto; background: #fff; '
    'border: 1px solid #e9e9ef; border-radius: 14px; overflow: hidden;">'
)
_WRAPPER_CLOSE = "</div></div>"


def _header(branding: Branding, title: str, subtitle: str) -> str:
    logo = ""
    if branding.logo_url:
        logo = (
            f'<img src="{escape(branding.logo_url)}" alt="{escape(branding.brand_name)}" '
            'style="height: 34px; max-width: 180px; background: #fff; border-radius: 8px; '
            'padding: 6px; margin-right: 12px; vertical-align: middle;">'
        )
    return (
        '<div style="padding: 16px 18px; background: #0b0f1a; color: #fff;">'
        f"{logo}"
        '<span style="display: inline-block; vertical-align: middle;">'
        f'<div style="font-size: 12px; opacity: .85;">{subtitle}</div>'
        f'<div style="font-size: 20px; font-weight: 800;">{title}</div>'
        "</span></div>"
    )


def _row(label: str, value_html: str) -> str:
    return (
        f'<tr><td style="padding: 6px 0; width: 160px;"><b>{label}</b></td>'
        f'<td style="padding: 6px 0;">{value_html}</td></tr>'
    )


def render_owner_notification(
    lead: Lead,
    branding: Branding,
    page_url: Optional[str] = None,
) -> tuple[str, str, str]:
    """Message to the business owner about a new lead."""
    subject = f"New request #{lead.id} - {lead.service}"

    text = (
        f"New quote request (#{lead.id})\n\n"
        f"Name: {lead.name}\n"
        f"Email: {lead.email}\n"
        f"Phone: {lead.phone or '-'}\n\n"
        f"Service: {lead.service}\n\n"
        f"Message:\n{lead.message}\n\n"
        f"Page: {page_url or '-'}\n"
        f"Received: {lead.created_at}\n"
    )

    rows = "".join([
        _row("Name", escape(lead.name)),
        _row(
            "Email",
            f'<a href="mailto:{escape(lead.email)}" style="color: #111;">{escape(lead.email)}</a>',
        ),
        _row("Phone", escape(lead.phone or "-")),
        _row("Service", escape(lead.service)),
        _row("Page", escape(page_url or "-")),
    ])

    body = (
        _WRAPPER_OPEN
        + _header(branding, f"Request #{lead.id} - {escape(lead.service)}", "New request")
        + '<div style="padding: 16px 18px;">'
        + f'<table style="border-collapse: collapse; width: 100%; font-size: 14px;">{rows}</table>'
        + '<div style="margin-top: 14px; padding: 12px; border: 1px solid #eee; '
        'border-radius: 12px; background: #fafafa;">'
        + '<div style="font-weight: 800; margin-bottom: 6px;">Message</div>'
        + f"<div>{escape_multiline(lead.message)}</div></div>"
        + f'<div style="margin-top: 14px; font-size: 12px; color: #555;">'
        f"Reference: <b>#{lead.id}</b> &bull; {escape(lead.created_at)}</div>"
        + "</div>"
        + _WRAPPER_CLOSE
    )
    return subject, text, body


def render_customer_confirmation(lead: Lead, branding: Branding) -> tuple[str, str, str]:
    """Receipt sent to the customer who submitted the lead."""
    subject = f"Request #{lead.id} received - {branding.brand_name}"

    text_lines = [
        f"Hi {lead.name},",
        "",
        "Thanks for your request. We will get back to you as soon as possible "
        "with a tailored proposal.",
        "",
        f"Request number: #{lead.id}",
        f"Service: {lead.service}",
    ]
    if lead.phone:
        text_lines.append(f"Phone: {lead.phone}")
    text_lines += [f"Email: {lead.email}", "", "Your message:", lead.message, ""]
    contact = [c for c in (branding.shop_address, branding.shop_phone, branding.shop_email) if c]
    if contact:
        text_lines += ["Contact: " + " | ".join(contact), ""]
    text_lines.append(f"-- {branding.brand_name}")
    text = "\n".join(text_lines)

    rows = [
        _row("Request number", f"#{lead.id}"),
        _row("Service", escape(lead.service)),
    ]
    if lead.phone:
        rows.append(_row("Phone", escape(lead.phone)))
    rows.append(_row("Email", escape(lead.email)))

    buttons = ""
    if branding.whatsapp_link:
        buttons += (
            f'<a href="{escape(branding.whatsapp_link)}" style="display: inline-block; '
            "background: #25D366; color: #0b0f1a; text-decoration: none; font-weight: 800; "
            'padding: 10px 14px; border-radius: 10px; margin-right: 10px;">WhatsApp</a>'
        )
    if branding.shop_website:
        buttons += (
            f'<a href="{escape(branding.shop_website)}" style="display: inline-block; '
            "background: #111827; color: #fff; text-decoration: none; font-weight: 800; "
            'padding: 10px 14px; border-radius: 10px;">Website</a>'
        )

    contact_html = ""
    if contact:
        contact_html = (
            '<div style="font-size: 12px; color: #555; margin-top: 10px;"><b>Contact</b><br/>'
            + "<br/>".join(escape(c) for c in contact)
            + "</div>"
        )

    body = (
        _WRAPPER_OPEN
        + _header(branding, escape(branding.brand_name), "We received your request")
        + '<div style="padding: 16px 18px;">'
        + f'<p style="margin: 0 0 10px;">Hi {escape(lead.name)},</p>'
        + '<p style="margin: 0 0 12px;">Thanks for your request. We will get back to you '
        "as soon as possible with a tailored proposal.</p>"
        + '<div style="border: 1px solid #eee; border-radius: 12px; padding: 14px; '
        'background: #fafafa; margin: 12px 0;">'
        + '<div style="font-weight: 800; margin-bottom: 8px;">Summary</div>'
        + '<table style="border-collapse: collapse; width: 100%; font-size: 14px;">'
        + "".join(rows)
        + "</table>"
        + '<div style="margin-top: 10px;"><div style="font-weight: 800; margin-bottom: 6px;">'
        "Your message</div>"
        + f"<div>{escape_multiline(lead.message)}</div></div></div>"
        + (f'<div style="margin: 14px 0 6px;">{buttons}</div>' if buttons else "")
        + contact_html
        + '<div style="margin-top: 14px; border-top: 1px solid #eee; padding-top: 12px; '
        f'font-size: 11px; color: #6b7280;">Keep your request number <b>#{lead.id}</b> '
        "handy when you contact us.</div>"
        + "</div>"
        + _WRAPPER_CLOSE
    )
    return subject, text, body
