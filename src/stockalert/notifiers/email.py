"""Email notifiers — Resend HTTP API and plain SMTP."""

from __future__ import annotations

import logging
import smtplib
import ssl
from email.message import EmailMessage

import requests

from stockalert.errors import StockAlertError, StockAlertErrorCode
from stockalert.models.alert import AlertEvent
from stockalert.notifiers.base import BaseNotifier
from stockalert.notifiers.formatting import (
    alert_time,
    build_html_body,
    build_subject,
    build_text_body,
)

logger = logging.getLogger(__name__)

RESEND_URL = "https://api.resend.com/emails"


class ResendEmailNotifier(BaseNotifier):
    """Send one combined alert email per batch through Resend."""

    name = "resend"

    def __init__(
        self,
        api_key: str,
        email_from: str,
        email_to: str,
        timeout: float = 10.0,
    ) -> None:
        self.api_key = api_key
        self.email_from = email_from
        self.email_to = email_to
        self.timeout = timeout

    def send(self, events: list[AlertEvent]) -> None:
        when = alert_time(events)
        payload = {
            "from": self.email_from,
            "to": [self.email_to],
            "subject": build_subject(events),
            "text": build_text_body(events, when),
            "html": build_html_body(events, when),
        }
        try:
            resp = requests.post(
                RESEND_URL,
                json=payload,
                headers={"Authorization": f"Bearer {self.api_key}"},
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise StockAlertError(
                f"Resend request failed: {exc}",
                code=StockAlertErrorCode.NOTIFY_FAILED,
                retryable=True,
            ) from exc

        if resp.status_code >= 300:
            raise StockAlertError(
                f"Resend API HTTP {resp.status_code}: {resp.text[:500]}",
                code=StockAlertErrorCode.NOTIFY_FAILED,
            )
        logger.info("Alert email sent to %s (%d event(s))", self.email_to, len(events))


class SmtpEmailNotifier(BaseNotifier):
    """Send one combined alert email per batch over SMTP.

    ``security`` is ``"starttls"`` (default), ``"ssl"`` or ``"none"``.
    """

    name = "smtp"

    def __init__(
        self,
        host: str,
        email_from: str,
        email_to: str,
        port: int = 587,
        user: str | None = None,
        password: str | None = None,
        security: str = "starttls",
        timeout: float = 10.0,
    ) -> None:
        self.host = host
        self.port = port
        self.email_from = email_from
        self.email_to = email_to
        self.user = user
        self.password = password
        self.security = security
        self.timeout = timeout

    def _message(self, events: list[AlertEvent]) -> EmailMessage:
        when = alert_time(events)
        msg = EmailMessage()
        msg["Subject"] = build_subject(events)
        msg["From"] = self.email_from
        msg["To"] = self.email_to
        msg.set_content(build_text_body(events, when))
        msg.add_alternative(build_html_body(events, when), subtype="html")
        return msg

    def send(self, events: list[AlertEvent]) -> None:
        msg = self._message(events)
        try:
            if self.security == "ssl":
                with smtplib.SMTP_SSL(
                    self.host, self.port, timeout=self.timeout,
                    context=ssl.create_default_context(),
                ) as server:
                    if self.user:
                        server.login(self.user, self.password or "")
                    server.send_message(msg)
            else:
                with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as server:
                    server.ehlo()
                    if self.security == "starttls":
                        server.starttls(context=ssl.create_default_context())
                        server.ehlo()
                    if self.user:
                        server.login(self.user, self.password or "")
                    server.send_message(msg)
        except (smtplib.SMTPException, OSError) as exc:
            raise StockAlertError(
                f"SMTP delivery failed: {exc}",
                code=StockAlertErrorCode.NOTIFY_FAILED,
                retryable=True,
            ) from exc
        logger.info("Alert email sent to %s (%d event(s))", self.email_to, len(events))
