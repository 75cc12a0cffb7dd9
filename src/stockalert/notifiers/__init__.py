"""Alert notifiers and the factory that builds them from config."""

from __future__ import annotations

from stockalert.config import NotifierType, StockAlertConfig
from stockalert.notifiers.base import BaseNotifier
from stockalert.notifiers.email import ResendEmailNotifier, SmtpEmailNotifier
from stockalert.notifiers.formatting import build_subject
from stockalert.notifiers.log import LogNotifier


def create_notifiers(config: StockAlertConfig) -> list[BaseNotifier]:
    """Instantiate every configured channel. Call ``config.validate()`` first."""
    notifiers: list[BaseNotifier] = []
    for kind in config.notifiers:
        if kind is NotifierType.LOG:
            notifiers.append(LogNotifier())
        elif kind is NotifierType.RESEND:
            notifiers.append(ResendEmailNotifier(
                api_key=config.resend_api_key or "",
                email_from=config.email_from or "",
                email_to=config.email_to or "",
                timeout=config.request_timeout,
            ))
        elif kind is NotifierType.SMTP:
            notifiers.append(SmtpEmailNotifier(
                host=config.smtp_host or "",
                port=config.smtp_port,
                email_from=config.email_from or "",
                email_to=config.email_to or "",
                user=config.smtp_user,
                password=config.smtp_password,
                security=config.smtp_security,
                timeout=config.request_timeout,
            ))
    return notifiers


__all__ = [
    "BaseNotifier",
    "LogNotifier",
    "ResendEmailNotifier",
    "SmtpEmailNotifier",
    "build_subject",
    "create_notifiers",
]
