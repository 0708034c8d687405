"""Base transport interface."""

from abc import ABC, abstractmethod

from ..models import ComposedMessage, TransportReceipt


class BaseTransport(ABC):
    """Abstract base class for transports."""

    @abstractmethod
    def send(self, message: ComposedMessage) -> TransportReceipt:
        """Send a composed message.

        Args:
            message: Message to send

        Returns:
            TransportReceipt with the message id and accepted/rejected addresses

        Raises:
            Exception: Whatever the underlying transport raises on failure
        """
        pass

    @abstractmethod
    def validate_connection(self) -> bool:
        """Validate that the transport is properly configured and reachable.

        Returns:
            True if connection is valid
        """
        pass
