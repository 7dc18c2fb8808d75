"""Notification Service Interface

Defines the contract for sending ledger notifications (invoice issued,
payment recorded, ...).
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


class NotificationService(ABC):
    """
    Abstract notification service

    Implementations can send notifications via:
    - Webhook (HTTP POST)
    - Logging
    """

    @abstractmethod
    async def send_notification(self, event: str, payload: Dict[str, Any]) -> bool:
        """
        Send a notification

        Args:
            event: Event name (e.g., 'payment.recorded')
            payload: JSON-serialisable event data

        Returns:
            True if notification sent successfully, False otherwise
        """
        pass


async def notify_after_commit(
    service: Optional[NotificationService], event: str, payload: Dict[str, Any]
) -> bool:
    """Send a notification for already committed work; failures are only logged"""
    if service is None:
        return False
    try:
        return await service.send_notification(event, payload)
    except Exception as e:
        logger.error(f"Notification {event} failed: {e}")
        return False
