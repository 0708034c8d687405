"""Single and bulk send orchestration."""

import logging
import time
from typing import Any, Callable, Dict, List, Optional

from pydantic import ValidationError as PydanticValidationError

from .composer import MessageComposer
from .config import Settings
from .exceptions import ConfigurationError, MailRelayError, MalformedRequestError, ValidationError
from .gateway import DeliveryGateway
from .models import BulkEntryResult, DeliveryResult, EmailRequest
from .providers import BaseTransport, MockTransport, SMTPTransport

logger = logging.getLogger(__name__)


def parse_email_request(payload: Any) -> EmailRequest:
    """Parse a request body into an EmailRequest.

    Raises:
        ValidationError: If required fields are missing or have the wrong type
    """
    if not isinstance(payload, dict):
        raise MalformedRequestError("Request body must be a JSON object")
    try:
        return EmailRequest.model_validate(payload)
    except PydanticValidationError as e:
        missing = [".".join(str(p) for p in err["loc"]) for err in e.errors() if err["type"] == "missing"]
        if missing:
            raise ValidationError(f"Missing required fields: {missing}") from e
        fields = [".".join(str(p) for p in err["loc"]) for err in e.errors()]
        raise ValidationError(f"Invalid fields: {fields}") from e


def merge_bulk_entry(entry: Dict[str, Any], template: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """Overlay the shared template on one bulk entry. Template fields win."""
    return {**entry, **(template or {})}


def create_transport(settings: Settings) -> BaseTransport:
    """Create the transport named by ``settings.transport``."""
    kind = settings.transport.lower()
    if kind == "smtp":
        return SMTPTransport(settings.smtp, settings.domain_name, settings.dkim)
    if kind == "mock":
        return MockTransport()
    raise ConfigurationError(f"Unknown transport: {settings.transport}")


class EmailSender:
    """Runs requests through the composer and the delivery gateway."""

    def __init__(
        self,
        composer: MessageComposer,
        gateway: DeliveryGateway,
        max_bulk_emails: int = 10,
        bulk_delay: float = 1.0,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """Initialize the email sender.

        Args:
            composer: Builds validated messages from requests
            gateway: Delivers composed messages
            max_bulk_emails: Largest accepted bulk request
            bulk_delay: Seconds to pause after each bulk entry
            sleep: Function used for the pause
        """
        self.composer = composer
        self.gateway = gateway
        self.max_bulk_emails = max_bulk_emails
        self.bulk_delay = bulk_delay
        self.sleep = sleep

    @classmethod
    def from_settings(cls, settings: Settings, transport: Optional[BaseTransport] = None) -> "EmailSender":
        """Wire a sender from settings, using ``settings.transport`` if none is given."""
        return cls(
            composer=MessageComposer(settings),
            gateway=DeliveryGateway(transport or create_transport(settings)),
            max_bulk_emails=settings.bulk.max_emails,
            bulk_delay=settings.bulk.delay_seconds,
        )

    def send_email(self, payload: Any) -> DeliveryResult:
        """Validate, compose and deliver one email.

        Returns:
            DeliveryResult from the gateway (transport failures are not raised)

        Raises:
            ValidationError: If the request or a recipient is invalid
            ContentRejectedError: If the content looks like spam
        """
        request = parse_email_request(payload)
        message = self.composer.compose(request)
        return self.gateway.deliver(message)

    def send_bulk(self, emails: Any, template: Optional[Dict[str, Any]] = None) -> List[BulkEntryResult]:
        """Send each entry in order, pausing after every attempt.

        Args:
            emails: List of partial email requests
            template: Fields merged into every entry

        Returns:
            One BulkEntryResult per entry, in input order

        Raises:
            MalformedRequestError: If ``emails`` is not a list or is too long
        """
        if not isinstance(emails, list) or len(emails) > self.max_bulk_emails:
            raise MalformedRequestError(
                f"Maximum {self.max_bulk_emails} emails allowed per bulk request"
            )
        if template is not None and not isinstance(template, dict):
            raise MalformedRequestError("Bulk template must be a JSON object")

        results = []
        for i, entry in enumerate(emails):
            email = entry.get("to") if isinstance(entry, dict) else None
            try:
                if not isinstance(entry, dict):
                    raise MalformedRequestError("Bulk entry must be a JSON object")
                delivery = self.send_email(merge_bulk_entry(entry, template))
                if delivery.success:
                    result = BulkEntryResult(email=email, success=True, message_id=delivery.message_id)
                else:
                    result = BulkEntryResult(email=email, success=False, error=delivery.error)
            except MailRelayError as e:
                logger.warning(f"Bulk entry {i + 1}/{len(emails)} for {email} failed: {e}")
                result = BulkEntryResult(email=email, success=False, error=str(e))
            except Exception as e:
                logger.exception(f"Unexpected error processing bulk entry {i + 1}: {e}")
                result = BulkEntryResult(email=email, success=False, error=str(e))

            results.append(result)
            logger.info(
                f"Processed bulk entry {i + 1}/{len(emails)}: {email} - "
                f"{'sent' if result.success else 'failed'}"
            )
            self.sleep(self.bulk_delay)

        return results
