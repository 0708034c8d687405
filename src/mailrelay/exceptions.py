"""Custom exceptions for the mail relay."""


class MailRelayError(Exception):
    """Base exception for all mail relay errors."""

    pass


class ConfigurationError(MailRelayError):
    """Raised when required configuration is missing or invalid."""

    pass


class TemplateError(MailRelayError):
    """Raised when an HTML layout cannot be loaded or rendered."""

    pass


class ValidationError(MailRelayError):
    """Raised when a request or one of its recipients fails validation."""

    def __init__(self, message: str, address: str = None):
        super().__init__(message)
        self.address = address


class MalformedRequestError(ValidationError):
    """Raised when a request body has the wrong shape."""

    pass


class ContentRejectedError(MailRelayError):
    """Raised when the subject or body looks like spam."""

    pass


class DeliveryError(MailRelayError):
    """Raised when the transport fails to hand off a message."""

    pass


class RateLimitError(MailRelayError):
    """Raised when a client exceeds the send rate limit."""

    pass
