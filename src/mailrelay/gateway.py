"""Delivery gateway between the composer and a transport."""

import logging

from .models import ComposedMessage, DeliveryResult
from .providers.base import BaseTransport

logger = logging.getLogger(__name__)


class DeliveryGateway:
    """Hands composed messages to a transport and normalizes the outcome."""

    def __init__(self, transport: BaseTransport):
        self.transport = transport

    def deliver(self, message: ComposedMessage) -> DeliveryResult:
        """Send a message, never raising.

        A transport exception becomes a failed result carrying the exception's
        message unchanged. Partially rejected recipients still count as success.
        """
        try:
            receipt = self.transport.send(message)
        except Exception as e:
            logger.error(f"Email sending failed for {message.to}: {e}")
            return DeliveryResult.failed(str(e))

        logger.info(f"Email sent successfully: {receipt.message_id}")
        return DeliveryResult(
            success=True,
            message_id=receipt.message_id,
            accepted=receipt.accepted,
            rejected=receipt.rejected,
        )
