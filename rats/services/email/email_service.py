"""
Email service for event reminder and greeting emails.

Supports SMTP and console logging modes.
"""

import html as html_lib
import logging
import re
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart
from typing import Optional

import aiosmtplib

from config.email_config import EMAIL_DEFAULTS, REMINDER_SUBJECT, DAY_OF_SUBJECT

logger = logging.getLogger(__name__)


def _to_html(text: str) -> str:
    """Escape text and keep its line breaks."""
    return html_lib.escape(text).replace("\n", "<br>")


def _strip_tags(markup: str) -> str:
    return re.sub(r"<[^>]+>", "", markup.replace("<br>", "\n")).strip()


class EmailService:
    """
    Email service with multi-mode support.

    Modes:
        - console: Log emails to console (development)
        - smtp: Send via SMTP
    """

    def __init__(
        self,
        mode: Optional[str] = None,
        from_email: Optional[str] = None,
        from_name: Optional[str] = None,
        client_url: str = "http://localhost:3000",
        smtp_host: Optional[str] = None,
        smtp_port: Optional[int] = None,
        smtp_user: Optional[str] = None,
        smtp_password: Optional[str] = None,
    ):
        """
        Initialize email service.

        Args:
            mode: "console" or "smtp"
            from_email: Sender email address
            from_name: Sender display name
            client_url: Frontend base URL for links in emails
            smtp_host: SMTP server host
            smtp_port: SMTP server port
            smtp_user: SMTP username
            smtp_password: SMTP password
        """
        self._mode = mode or EMAIL_DEFAULTS["mode"]
        self._from_email = from_email or EMAIL_DEFAULTS["from_email"]
        self._from_name = from_name or EMAIL_DEFAULTS["from_name"]
        self._client_url = client_url.rstrip("/")

        self._smtp_host = smtp_host
        self._smtp_port = smtp_port or EMAIL_DEFAULTS["smtp_port"]
        self._smtp_user = smtp_user
        self._smtp_password = smtp_password

        if self._mode == "smtp" and not self._smtp_host:
            logger.warning("SMTP host not configured, falling back to console mode")
            self._mode = "console"

        logger.info(f"Email service initialized in {self._mode} mode")

    @property
    def mode(self) -> str:
        return self._mode

    async def send_event_reminder(
        self,
        to_email: str,
        event: dict,
        days_until_event: int,
    ) -> dict:
        """
        Remind an event owner that the event is coming up.

        Args:
            to_email: Owner's email address
            event: Event document
            days_until_event: Whole days left

        Returns:
            dict with success status and message
        """
        plural = "s" if days_until_event > 1 else ""
        subject = REMINDER_SUBJECT.format(title=event["title"], days=days_until_event, plural=plural)

        html_parts = [
            "<h2>Event Reminder</h2>",
            f"<p>This is a reminder that {html_lib.escape(event['title'])} for "
            f"{html_lib.escape(event['recipientName'])} is coming up in "
            f"{days_until_event} day{plural}.</p>",
        ]

        if event.get("aiGeneratedMessage"):
            html_parts.append("<h3>Your Personalized Message:</h3>")
            html_parts.append(
                '<div style="padding: 10px; background-color: #f5f5f5; border-radius: 5px;">'
                f"{_to_html(event['aiGeneratedMessage'])}</div>"
            )

        if event.get("aiGeneratedPlan"):
            html_parts.append("<h3>Suggested Plans:</h3>")
            html_parts.append(
                '<div style="padding: 10px; background-color: #f5f5f5; border-radius: 5px;">'
                f"{_to_html(event['aiGeneratedPlan'])}</div>"
            )

        event_url = f"{self._client_url}/events/{event['_id']}"
        html_parts.append(f'<p><a href="{event_url}">View or edit this event</a></p>')

        html_content = "\n".join(html_parts)
        text_content = f"{_strip_tags(html_content)}\n\n{event_url}"

        return await self._send(to_email, subject, html_content, text_content)

    async def send_event_greeting(self, to_email: str, event: dict) -> dict:
        """
        Send the generated greeting to the event's recipient.

        Args:
            to_email: Recipient's email address
            event: Event document with aiGeneratedMessage
        """
        subject = DAY_OF_SUBJECT.format(event_type=event["eventType"].capitalize())
        message = event.get("aiGeneratedMessage") or ""
        return await self._send(to_email, subject, _to_html(message), message)

    async def _send(
        self,
        to: str,
        subject: str,
        html: str,
        text: str,
    ) -> dict:
        """
        Send email via configured provider.

        Returns:
            dict with success status and details
        """
        if self._mode == "console":
            return self._send_console(to, subject, text)
        elif self._mode == "smtp":
            return await self._send_smtp(to, subject, html, text)
        else:
            logger.error(f"Unknown email mode: {self._mode}")
            return {"success": False, "error": f"Unknown email mode: {self._mode}"}

    def _send_console(
        self,
        to: str,
        subject: str,
        text: str,
    ) -> dict:
        """Log email to console (development mode)."""
        logger.info("=" * 60)
        logger.info("EMAIL (console mode)")
        logger.info(f"To: {to}")
        logger.info(f"Subject: {subject}")
        logger.info("-" * 60)
        logger.info(text)
        logger.info("=" * 60)

        return {
            "success": True,
            "mode": "console",
            "message": "Email logged to console",
        }

    async def _send_smtp(
        self,
        to: str,
        subject: str,
        html: str,
        text: str,
    ) -> dict:
        """Send email via SMTP."""
        try:
            message = MIMEMultipart("alternative")
            message["Subject"] = subject
            message["From"] = f"{self._from_name} <{self._from_email}>"
            message["To"] = to

            message.attach(MIMEText(text, "plain"))
            message.attach(MIMEText(html, "html"))

            # Port 465 is implicit TLS, anything else upgrades with STARTTLS
            use_tls = self._smtp_port == 465

            await aiosmtplib.send(
                message,
                hostname=self._smtp_host,
                port=self._smtp_port,
                username=self._smtp_user,
                password=self._smtp_password,
                use_tls=use_tls,
                start_tls=not use_tls,
            )

            logger.info(f"Email sent via SMTP to {to}")
            return {
                "success": True,
                "mode": "smtp",
                "message": "Email sent via SMTP",
            }

        except Exception as e:
            logger.error(f"Failed to send email via SMTP: {e}")
            return {
                "success": False,
                "error": str(e),
            }
