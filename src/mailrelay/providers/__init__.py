"""Transports that hand composed messages to a mail relay."""

from .base import BaseTransport
from .mock import MockTransport
from .smtp import SMTPTransport

__all__ = ["BaseTransport", "MockTransport", "SMTPTransport"]
