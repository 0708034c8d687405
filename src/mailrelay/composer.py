"""Assembly of transport-ready messages from client requests."""

import logging
import time
import uuid
from typing import Optional

from .config import Settings
from .content import is_acceptable
from .exceptions import ConfigurationError, ContentRejectedError
from .models import ComposedMessage, EmailRequest
from .template import TemplateRenderer
from .validators import RecipientValidator

logger = logging.getLogger(__name__)

CONTENT_REJECTED_MESSAGE = "Email content appears to be spam-like"


def generate_message_id(domain: str) -> str:
    """Build a Message-ID from a nanosecond timestamp and a random component."""
    return f"<{time.time_ns()}.{uuid.uuid4().hex}@{domain}>"


class MessageComposer:
    """Validates a request and turns it into a ComposedMessage."""

    def __init__(
        self,
        settings: Settings,
        validator: Optional[RecipientValidator] = None,
        renderer: Optional[TemplateRenderer] = None,
    ):
        """Initialize the composer.

        Args:
            settings: Application settings (sender identity, domain, mailer tag)
            validator: Recipient validator, built from settings if omitted
            renderer: HTML layout renderer, built from settings if omitted
        """
        self.settings = settings
        self.validator = validator or RecipientValidator(timeout=settings.dns.timeout)
        self.renderer = renderer or TemplateRenderer(settings.domain_name)

    def anti_spam_headers(self):
        domain = self.settings.domain_name
        return (
            ("X-Mailer", self.settings.mailer_tag),
            ("X-Priority", "3"),
            ("List-Unsubscribe", f"<mailto:unsubscribe@{domain}>"),
            ("Message-ID", generate_message_id(domain)),
        )

    def compose(self, request: EmailRequest) -> ComposedMessage:
        """Build a message, validating recipients and content first.

        Raises:
            ValidationError: If a recipient is malformed, denylisted or has no MX
            ContentRejectedError: If the content looks like spam
        """
        self.validator.check_all(request.recipients())

        if not is_acceptable(request.subject, request.text, request.html or ""):
            logger.warning(f"Rejected spam-like content for {request.to}")
            raise ContentRejectedError(CONTENT_REJECTED_MESSAGE)

        html = request.html
        if not html:
            html = self.renderer.render(request.text, request.template_type)

        sender_address = self.settings.sender_address
        if not sender_address:
            raise ConfigurationError("Sender address is not configured")

        return ComposedMessage(
            sender_name=self.settings.sender.name,
            sender_address=sender_address,
            to=request.to,
            cc=tuple(request.cc),
            bcc=tuple(request.bcc),
            subject=request.subject,
            text=request.text,
            html=html,
            attachments=tuple(request.attachments),
            headers=self.anti_spam_headers(),
            click_tracking=False,
            open_tracking=False,
        )
