"""Transactional mail relay with recipient checks, spam screening and DKIM signing."""

__version__ = "0.1.0"

from .exceptions import (
    MailRelayError,
    ConfigurationError,
    TemplateError,
    ValidationError,
    MalformedRequestError,
    ContentRejectedError,
    DeliveryError,
    RateLimitError,
)
from .config import Settings, load_settings
from .models import (
    EmailRequest,
    ComposedMessage,
    DeliveryResult,
    BulkEntryResult,
    TemplateType,
    TransportReceipt,
)
from .validators import RecipientValidator, validate_email_address
from .content import is_acceptable
from .template import TemplateRenderer
from .composer import MessageComposer
from .gateway import DeliveryGateway
from .sender import EmailSender
from .providers import BaseTransport, MockTransport, SMTPTransport

__all__ = [
    "MailRelayError",
    "ConfigurationError",
    "TemplateError",
    "ValidationError",
    "MalformedRequestError",
    "ContentRejectedError",
    "DeliveryError",
    "RateLimitError",
    "Settings",
    "load_settings",
    "EmailRequest",
    "ComposedMessage",
    "DeliveryResult",
    "BulkEntryResult",
    "TemplateType",
    "TransportReceipt",
    "RecipientValidator",
    "validate_email_address",
    "is_acceptable",
    "TemplateRenderer",
    "MessageComposer",
    "DeliveryGateway",
    "EmailSender",
    "BaseTransport",
    "MockTransport",
    "SMTPTransport",
]
