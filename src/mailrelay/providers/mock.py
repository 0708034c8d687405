"""In-memory transport for local development and tests."""

from typing import List, Optional

from ..models import ComposedMessage, TransportReceipt
from .base import BaseTransport


class MockTransport(BaseTransport):
    """Transport that records messages instead of sending them."""

    def __init__(self, rejected: Optional[List[str]] = None, error: Optional[Exception] = None):
        """Initialize the mock transport.

        Args:
            rejected: Addresses to report as refused by the relay
            error: Exception to raise from every send
        """
        self.rejected = set(rejected or [])
        self.error = error
        self.sent: List[ComposedMessage] = []

    def send(self, message: ComposedMessage) -> TransportReceipt:
        if self.error is not None:
            raise self.error
        self.sent.append(message)
        recipients = message.envelope_recipients
        return TransportReceipt(
            message_id=message.message_id,
            accepted=[r for r in recipients if r not in self.rejected],
            rejected=[r for r in recipients if r in self.rejected],
        )

    def validate_connection(self) -> bool:
        return True
