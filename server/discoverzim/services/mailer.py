"""
Transactional email: templates, SMTP delivery and fire-and-forget dispatch.

Templates render a subject, an HTML body and a plain text body from a
booking snapshot. Delivery goes through an implicit-TLS SMTP relay; when
no relay is configured the message is only logged.
"""

import asyncio
import logging
import smtplib
from dataclasses import dataclass
from datetime import date, datetime
from email.message import EmailMessage
from enum import Enum
from html import escape
from typing import Any, Optional

from ..core.config import settings
from ..core.observability import metrics_collector

logger = logging.getLogger(__name__)


class EmailTemplate(str, Enum):
    """Available mail templates."""
    BOOKING_CONFIRMATION = "bookingConfirmation"
    PAYMENT_CONFIRMATION = "paymentConfirmation"
    BOOKING_CANCELLATION = "bookingCancellation"
    CUSTOM = "custom"


@dataclass
class RenderedEmail:
    subject: str
    html: str
    text: str


def booking_reference(booking_id: Any) -> str:
    """First 8 characters of the booking id, uppercased."""
    return str(booking_id)[:8].upper()


def _format_date(value: Any) -> str:
    if isinstance(value, (date, datetime)):
        return value.strftime("%d %B %Y")
    return str(value) if value else "Not specified"


def _wrap_html(heading: str, body: str, closing: str) -> str:
    brand = escape(settings.brand_name)
    return (
        '<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto; padding: 20px; '
        'border: 1px solid #eaeaea; border-radius: 5px;">'
        f'<div style="text-align: center; margin-bottom: 20px;"><h1 style="color: #333;">{heading}</h1></div>'
        f"{body}"
        f'<div style="margin-bottom: 20px;"><p>{closing}</p><p>Best regards,</p><p>The {brand} Team</p></div>'
        '<div style="font-size: 12px; color: #999; text-align: center; margin-top: 30px; padding-top: 15px; '
        'border-top: 1px solid #eaeaea;"><p>This is an automated email, please do not reply.</p></div>'
        "</div>"
    )


def _wrap_text(heading: str, lines: list[str], closing: str) -> str:
    parts = [heading, ""] + lines + ["", closing, "", "Best regards,", f"The {settings.brand_name} Team", "",
                                     "This is an automated email, please do not reply."]
    return "\n".join(parts)


def render_booking_confirmation(booking: dict) -> RenderedEmail:
    brand = settings.brand_name
    reference = booking_reference(booking["id"])
    details = booking.get("booking_details") or {}
    total = float(booking.get("total_price") or 0)

    item_lines = []
    if booking.get("destination_id"):
        item_lines.append(("Destination", details.get("destination_name") or "Not specified"))
    if booking.get("event_id"):
        item_lines.append(("Event", details.get("event_name") or "Not specified"))
    if booking.get("accommodation_id"):
        item_lines.append(("Accommodation", details.get("accommodation_name") or "Not specified"))

    rows = [
        ("Date", _format_date(booking.get("preferred_date"))),
        ("Number of People", str(booking.get("number_of_people"))),
        ("Total Amount", f"${total:.2f}"),
    ] + item_lines

    html_rows = "".join(f"<p><strong>{label}:</strong> {escape(value)}</p>" for label, value in rows)
    html = _wrap_html(
        "Booking Confirmation",
        f'<div style="margin-bottom: 20px;"><p>Dear {escape(booking.get("contact_name") or "")},</p>'
        f"<p>We're pleased to confirm your booking with {escape(brand)}!</p>"
        f"<p>Your booking reference is: <strong>{reference}</strong></p></div>"
        '<div style="background-color: #f9f9f9; padding: 15px; border-radius: 5px; margin-bottom: 20px;">'
        f'<h2 style="font-size: 18px; margin-top: 0;">Booking Details:</h2>{html_rows}</div>',
        f"Thank you for choosing {escape(brand)}. If you have any questions, please don't hesitate to contact us.",
    )
    text = _wrap_text(
        "Booking Confirmation",
        [
            f"Dear {booking.get('contact_name') or ''},",
            "",
            f"We're pleased to confirm your booking with {brand}!",
            "",
            f"Your booking reference is: {reference}",
            "",
            "Booking Details:",
        ] + [f"{label}: {value}" for label, value in rows],
        f"Thank you for choosing {brand}. If you have any questions, please don't hesitate to contact us.",
    )
    return RenderedEmail(subject=f"Your Booking Has Been Confirmed - {brand}", html=html, text=text)


def render_payment_confirmation(booking: dict, paid_on: Optional[date] = None) -> RenderedEmail:
    brand = settings.brand_name
    reference = booking_reference(booking["id"])
    total = float(booking.get("total_price") or 0)
    rows = [
        ("Amount Paid", f"${total:.2f}"),
        ("Payment Date", _format_date(paid_on or date.today())),
        ("Payment Status", "Completed"),
    ]

    html_rows = "".join(f"<p><strong>{label}:</strong> {escape(value)}</p>" for label, value in rows)
    html = _wrap_html(
        "Payment Confirmation",
        f'<div style="margin-bottom: 20px;"><p>Dear {escape(booking.get("contact_name") or "")},</p>'
        f"<p>We've received your payment for booking reference: <strong>{reference}</strong></p>"
        "<p>Thank you for completing your payment. Your booking is now confirmed.</p></div>"
        '<div style="background-color: #f9f9f9; padding: 15px; border-radius: 5px; margin-bottom: 20px;">'
        f'<h2 style="font-size: 18px; margin-top: 0;">Payment Details:</h2>{html_rows}</div>',
        "We look forward to providing you with a memorable experience.",
    )
    text = _wrap_text(
        "Payment Confirmation",
        [
            f"Dear {booking.get('contact_name') or ''},",
            "",
            f"We've received your payment for booking reference: {reference}",
            "",
            "Thank you for completing your payment. Your booking is now confirmed.",
            "",
            "Payment Details:",
        ] + [f"{label}: {value}" for label, value in rows],
        "We look forward to providing you with a memorable experience.",
    )
    return RenderedEmail(subject=f"Payment Confirmation - {brand}", html=html, text=text)


def render_booking_cancellation(booking: dict, cancelled_on: Optional[date] = None) -> RenderedEmail:
    brand = settings.brand_name
    reference = booking_reference(booking["id"])
    reason = booking.get("cancellation_reason")
    rows = [
        ("Cancellation Date", _format_date(cancelled_on or date.today())),
        ("Original Booking Date", _format_date(booking.get("preferred_date"))),
    ]

    reason_html = f"<p><strong>Reason:</strong> {escape(reason)}</p>" if reason else ""
    html_rows = "".join(f"<p><strong>{label}:</strong> {escape(value)}</p>" for label, value in rows)
    html = _wrap_html(
        "Booking Cancellation",
        f'<div style="margin-bottom: 20px;"><p>Dear {escape(booking.get("contact_name") or "")},</p>'
        f"<p>Your booking with reference <strong>{reference}</strong> has been cancelled.</p>{reason_html}</div>"
        '<div style="background-color: #f9f9f9; padding: 15px; border-radius: 5px; margin-bottom: 20px;">'
        f'<h2 style="font-size: 18px; margin-top: 0;">Booking Details:</h2>{html_rows}</div>',
        "If you have any questions about this cancellation or would like to make a new booking, "
        "please don't hesitate to contact us.",
    )
    lines = [
        f"Dear {booking.get('contact_name') or ''},",
        "",
        f"Your booking with reference {reference} has been cancelled.",
    ]
    if reason:
        lines.append(f"Reason: {reason}")
    lines += ["", "Booking Details:"] + [f"{label}: {value}" for label, value in rows]
    text = _wrap_text(
        "Booking Cancellation",
        lines,
        "If you have any questions about this cancellation or would like to make a new booking, "
        "please don't hesitate to contact us.",
    )
    return RenderedEmail(subject=f"Booking Cancellation - {brand}", html=html, text=text)


def render(template: EmailTemplate, booking: Optional[dict] = None, custom: Optional[dict] = None) -> RenderedEmail:
    """
    Render a template.

    Raises:
        ValueError: If the template needs data that was not supplied
    """
    if template == EmailTemplate.CUSTOM:
        if not custom or not custom.get("subject") or not custom.get("html"):
            raise ValueError("custom email requires subject and html")
        return RenderedEmail(subject=custom["subject"], html=custom["html"], text=custom.get("text") or "")

    if not booking:
        raise ValueError(f"template {template.value} requires booking data")
    if template == EmailTemplate.BOOKING_CONFIRMATION:
        return render_booking_confirmation(booking)
    if template == EmailTemplate.PAYMENT_CONFIRMATION:
        return render_payment_confirmation(booking)
    return render_booking_cancellation(booking)


def build_message(recipient: str, email: RenderedEmail) -> EmailMessage:
    message = EmailMessage()
    message["From"] = settings.mail_sender
    message["To"] = recipient
    message["Subject"] = email.subject
    message.set_content(email.text or "")
    message.add_alternative(email.html, subtype="html")
    return message


def _deliver(message: EmailMessage) -> None:
    with smtplib.SMTP_SSL(settings.smtp_host, settings.smtp_port, timeout=30) as client:
        if settings.smtp_username:
            client.login(settings.smtp_username, settings.smtp_password)
        client.send_message(message)


async def send_email(recipient: str, email: RenderedEmail) -> bool:
    """
    Deliver one email.

    Returns False when mail is disabled and the message was only logged.
    """
    if not settings.mail_enabled:
        logger.info(
            "Mail disabled, email not sent",
            extra={"recipient": recipient, "subject": email.subject}
        )
        return False

    await asyncio.to_thread(_deliver, build_message(recipient, email))
    logger.info("Email sent", extra={"recipient": recipient, "subject": email.subject})
    return True


class MailDispatcher:
    """
    Schedules emails without blocking the caller.

    Failures are logged and counted, never raised. Pending tasks are
    referenced until they finish so they are not garbage collected.
    """

    def __init__(self):
        self._tasks: set[asyncio.Task] = set()

    @property
    def pending(self) -> int:
        return len(self._tasks)

    def dispatch(
        self,
        template: EmailTemplate,
        recipient: Optional[str],
        booking: Optional[dict] = None,
        custom: Optional[dict] = None,
    ) -> Optional[asyncio.Task]:
        if not recipient:
            logger.warning("Email skipped, no recipient", extra={"template": template.value})
            metrics_collector.record_email(template.value, "skipped")
            return None

        task = asyncio.create_task(self._send(template, recipient, booking, custom))
        self._tasks.add(task)
        metrics_collector.set_pending_emails(len(self._tasks))
        task.add_done_callback(self._forget)
        return task

    def _forget(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        metrics_collector.set_pending_emails(len(self._tasks))

    async def _send(self, template: EmailTemplate, recipient: str, booking: Optional[dict], custom: Optional[dict]):
        try:
            email = render(template, booking, custom)
            sent = await send_email(recipient, email)
            metrics_collector.record_email(template.value, "sent" if sent else "logged")
        except Exception as e:
            logger.error(
                f"Failed to send {template.value} email: {str(e)}",
                extra={"template": template.value, "recipient": recipient},
                exc_info=True
            )
            metrics_collector.record_email(template.value, "failed")

    async def drain(self) -> None:
        """Wait for all pending emails; used at shutdown and in tests."""
        if self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)


# Global dispatcher instance
mail_dispatcher = MailDispatcher()
