"""Outbound email notifications for contact messages and account events."""

from __future__ import annotations

import abc
import logging
import os
from dataclasses import dataclass
from datetime import datetime, timezone
from html import escape
from typing import Optional

import httpx

from ..config import read_bool_env

LOGGER = logging.getLogger(__name__)

EMAIL_TRANSPORT_ENV = "EMAIL_TRANSPORT"
ADMIN_EMAIL_ENV = "ADMIN_EMAIL"
FRONTEND_URL_ENV = "FRONTEND_URL"


class ConfigurationError(RuntimeError):
    """Raised when a notification client cannot be configured."""


class NotificationError(RuntimeError):
    """Raised when the external provider rejects a notification."""


@dataclass
class NotificationResult:
    """Outcome returned by a notification provider."""

    success: bool
    status_code: Optional[int] = None
    provider_message_id: Optional[str] = None
    error: Optional[str] = None


class NotificationClient(abc.ABC):
    """Interface implemented by outbound notification providers."""

    channel: str

    @abc.abstractmethod
    def send_message(
        self,
        *,
        destination: str,
        subject: str,
        plain_text: str,
        html_text: str | None = None,
    ) -> NotificationResult:
        """Send a message to the destination and return the delivery result."""


class ConsoleNotificationClient(NotificationClient):
    """Fallback client that logs messages instead of delivering them."""

    channel = "console"

    def __init__(self) -> None:
        self.records: list[dict[str, str]] = []

    def send_message(
        self,
        *,
        destination: str,
        subject: str,
        plain_text: str,
        html_text: str | None = None,
    ) -> NotificationResult:
        payload = {
            "destination": destination,
            "subject": subject,
            "plain_text": plain_text,
            "html_text": html_text or "",
        }
        self.records.append(payload)
        LOGGER.info("[console] Email to %s: %s", destination, subject)
        return NotificationResult(success=True, status_code=200, provider_message_id="console")


class SendGridEmailClient(NotificationClient):
    """Deliver emails through the SendGrid REST API."""

    channel = "email"
    endpoint = "https://api.sendgrid.com/v3/mail/send"

    def __init__(
        self,
        *,
        api_key: str | None,
        sender_email: str | None,
        sender_name: str | None = None,
        sandbox_mode: bool = False,
        timeout: float = 10.0,
    ) -> None:
        if not api_key:
            raise ConfigurationError("SENDGRID_API_KEY is required to send emails")
        if not sender_email:
            raise ConfigurationError("SENDGRID_SENDER_EMAIL is required to send emails")
        self.api_key = api_key
        self.sender_email = sender_email
        self.sender_name = sender_name or "Portfolio"
        self.sandbox_mode = sandbox_mode
        self.timeout = timeout

    def send_message(
        self,
        *,
        destination: str,
        subject: str,
        plain_text: str,
        html_text: str | None = None,
    ) -> NotificationResult:
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        content = [{"type": "text/plain", "value": plain_text}]
        if html_text:
            content.append({"type": "text/html", "value": html_text})

        payload: dict[str, object] = {
            "personalizations": [{"to": [{"email": destination}]}],
            "from": {"email": self.sender_email, "name": self.sender_name},
            "subject": subject,
            "content": content,
        }
        if self.sandbox_mode:
            payload["mail_settings"] = {"sandbox_mode": {"enable": True}}

        try:
            response = httpx.post(
                self.endpoint,
                headers=headers,
                json=payload,
                timeout=self.timeout,
            )
        except httpx.HTTPError as exc:
            raise NotificationError(f"Network error contacting SendGrid: {exc}") from exc

        if response.status_code >= 400:
            return NotificationResult(
                success=False,
                status_code=response.status_code,
                error=response.text,
            )

        return NotificationResult(
            success=True,
            status_code=response.status_code,
            provider_message_id=response.headers.get("x-message-id"),
        )


def build_notification_client_from_env(*, fallback_to_console: bool = True) -> NotificationClient:
    """Instantiate a notification client from environment variables."""

    transport = os.getenv(EMAIL_TRANSPORT_ENV, "auto").strip().lower()
    if transport == "console":
        return ConsoleNotificationClient()

    try:
        return SendGridEmailClient(
            api_key=os.getenv("SENDGRID_API_KEY"),
            sender_email=os.getenv("SENDGRID_SENDER_EMAIL"),
            sender_name=os.getenv("SENDGRID_SENDER_NAME"),
            sandbox_mode=read_bool_env("SENDGRID_SANDBOX_MODE"),
        )
    except ConfigurationError as exc:
        if transport == "sendgrid" and not fallback_to_console:
            raise
        LOGGER.warning("%s; falling back to console delivery", exc)
        return ConsoleNotificationClient()


def deliver(client: NotificationClient, *, destination: str, subject: str, plain_text: str,
            html_text: str | None = None) -> NotificationResult:
    """Send a message and raise :class:`NotificationError` when it is rejected."""

    result = client.send_message(
        destination=destination,
        subject=subject,
        plain_text=plain_text,
        html_text=html_text,
    )
    if not result.success:
        raise NotificationError(
            f"Provider rejected email to {destination} ({result.status_code}): {result.error}"
        )
    return result


def dispatch_quietly(client: NotificationClient, **message: str) -> bool:
    """Fire-and-forget delivery; failures are logged and reported as ``False``."""

    try:
        deliver(client, **message)
    except NotificationError as exc:
        LOGGER.warning("Email notification failed: %s", exc)
        return False
    except Exception:
        LOGGER.exception("Unexpected error while sending email notification")
        return False
    return True


def render_html_email(
    *,
    subject: str,
    heading: str,
    content: str,
    button_text: str | None = None,
    button_url: str | None = None,
) -> str:
    button = ""
    if button_text and button_url:
        button = f'<a href="{escape(button_url, quote=True)}" class="button">{escape(button_text)}</a>'
    year = datetime.now(timezone.utc).year
    return (
        "<!DOCTYPE html><html><head><meta charset=\"utf-8\">"
        f"<title>{escape(subject)}</title></head><body>"
        "<div class=\"container\"><div class=\"header\"><h1>Portfolio</h1></div>"
        f"<div class=\"content\"><h2>{escape(heading)}</h2><p>{escape(content)}</p>{button}</div>"
        f"<div class=\"footer\"><p>&copy; {year} Portfolio. All rights reserved.</p>"
        "<p>This is an automated email. Please do not reply.</p></div></div>"
        "</body></html>"
    )


def admin_email() -> Optional[str]:
    return os.getenv(ADMIN_EMAIL_ENV) or os.getenv("SENDGRID_SENDER_EMAIL")


def frontend_url() -> str:
    return os.getenv(FRONTEND_URL_ENV, "http://localhost:5173").rstrip("/")


class MessageNotifier:
    """Compose the emails triggered by contact messages."""

    def __init__(self, client: NotificationClient) -> None:
        self.client = client

    def notify_message_received(
        self,
        *,
        name: str,
        email: str,
        phone: str | None,
        subject: str,
        message: str,
        category: str,
    ) -> None:
        """Confirm receipt to the sender and alert the administrator."""

        dispatch_quietly(
            self.client,
            destination=email,
            subject="Message Received - We'll Get Back to You Soon!",
            plain_text=(
                f"Hi {name},\n\nThank you for reaching out! We have received your message "
                "and will get back to you as soon as possible.\n\n"
                f"Your message:\n{message}\n\nBest regards,\nPortfolio Team"
            ),
        )
        recipient = admin_email()
        if not recipient:
            LOGGER.warning("No admin email configured; skipping new message notification")
            return
        dispatch_quietly(
            self.client,
            destination=recipient,
            subject=f"New Contact Message: {subject}",
            plain_text=(
                f"New message received from {name} ({email}):\n\n{message}\n\n"
                f"Category: {category}\nPhone: {phone or 'N/A'}"
            ),
        )

    def send_reply(self, *, name: str, email: str, subject: str, reply: str) -> None:
        deliver(
            self.client,
            destination=email,
            subject=f"Re: {subject}",
            plain_text=f"Hi {name},\n\n{reply}\n\nBest regards,\nPortfolio Team",
        )

    def send_welcome(self, *, name: str, email: str) -> None:
        subject = "Welcome to Portfolio!"
        dispatch_quietly(
            self.client,
            destination=email,
            subject=subject,
            plain_text=f"Welcome, {name}! Thank you for registering with us.",
            html_text=render_html_email(
                subject=subject,
                heading=f"Welcome, {name}!",
                content="Thank you for registering with us. We're excited to have you on board!",
                button_text="Visit Dashboard",
                button_url=f"{frontend_url()}/dashboard",
            ),
        )

    def send_password_reset(self, *, email: str, token: str) -> None:
        subject = "Password Reset Request"
        reset_url = f"{frontend_url()}/reset-password/{token}"
        dispatch_quietly(
            self.client,
            destination=email,
            subject=subject,
            plain_text=f"Reset your password using this link (valid for 1 hour): {reset_url}",
            html_text=render_html_email(
                subject=subject,
                heading="Reset Your Password",
                content=(
                    "You requested a password reset. Click the button below to reset your "
                    "password. This link will expire in 1 hour. If you didn't request this, "
                    "please ignore this email."
                ),
                button_text="Reset Password",
                button_url=reset_url,
            ),
        )
