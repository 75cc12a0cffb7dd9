"""Log-only notifier, used when no delivery channel is configured."""

from __future__ import annotations

import logging

from stockalert.models.alert import AlertEvent
from stockalert.notifiers.base import BaseNotifier
from stockalert.notifiers.formatting import build_subject

logger = logging.getLogger(__name__)


class LogNotifier(BaseNotifier):
    name = "log"

    def send(self, events: list[AlertEvent]) -> None:
        logger.warning("(dry-run) %s", build_subject(events))
        for event in events:
            logger.warning("(dry-run)   %s", event.describe())
