"""Abstract base class for alert notifiers."""

from __future__ import annotations

from abc import ABC, abstractmethod

from stockalert.models.alert import AlertEvent


class BaseNotifier(ABC):
    """Delivers a batch of alert events to one channel."""

    name: str = "notifier"

    @abstractmethod
    def send(self, events: list[AlertEvent]) -> None:
        """Deliver a non-empty, ordered list of events.

        Raises:
            StockAlertError: With code ``NOTIFY_FAILED`` when delivery fails.
        """
        ...
