"""SMTP relay transport with DKIM signing."""

import base64
import binascii
import logging
import mimetypes
import smtplib
from email import policy
from email.message import EmailMessage
from email.utils import formataddr, formatdate
from typing import Any, Dict, Optional

import dkim

from ..config import DKIMConfig, SMTPConfig
from ..exceptions import ConfigurationError, DeliveryError
from ..models import ComposedMessage, TransportReceipt
from .base import BaseTransport

logger = logging.getLogger(__name__)

SIGNED_HEADERS = [b"From", b"To", b"Cc", b"Subject", b"Date", b"Message-ID"]


def _decode_attachment_content(attachment: Dict[str, Any]) -> bytes:
    content = attachment.get("content")
    if content is None:
        raise DeliveryError(f"Attachment {attachment.get('filename')!r} has no content")
    if isinstance(content, bytes):
        return content

    encoding = (attachment.get("encoding") or "utf-8").lower()
    try:
        if encoding == "base64":
            return base64.b64decode(content)
        if encoding == "hex":
            return bytes.fromhex(content)
        return str(content).encode(encoding)
    except (binascii.Error, ValueError, LookupError) as e:
        raise DeliveryError(
            f"Cannot decode attachment {attachment.get('filename')!r}: {e}"
        ) from e


class SMTPTransport(BaseTransport):
    """Sends messages through an authenticated SMTP relay."""

    def __init__(self, smtp: SMTPConfig, domain: str, dkim_config: Optional[DKIMConfig] = None):
        """Initialize the SMTP transport.

        Args:
            smtp: Relay connection settings
            domain: Signing domain (d= tag of the DKIM signature)
            dkim_config: DKIM key material; messages go out unsigned without a key
        """
        self.smtp = smtp
        self.domain = domain
        self.dkim_config = dkim_config or DKIMConfig()
        self._private_key = self.dkim_config.load_private_key()
        if not self._private_key:
            logger.warning("No DKIM private key configured, messages will not be signed")

    def build_mime_message(self, message: ComposedMessage) -> EmailMessage:
        """Create the MIME representation of a composed message.

        Bcc recipients are only part of the SMTP envelope, never a header.
        """
        envelope = message.envelope()
        mime_message = EmailMessage()
        mime_message["From"] = formataddr((envelope["from"]["name"], envelope["from"]["address"]))
        mime_message["To"] = envelope["to"]
        if "cc" in envelope:
            mime_message["Cc"] = ", ".join(envelope["cc"])
        mime_message["Subject"] = message.subject
        mime_message["Date"] = formatdate(localtime=True)
        for name, value in message.headers:
            mime_message[name] = value

        mime_message.set_content(message.text)
        mime_message.add_alternative(message.html, subtype="html")

        for attachment in message.attachments:
            filename = attachment.get("filename")
            content_type = (
                attachment.get("contentType")
                or (mimetypes.guess_type(filename)[0] if filename else None)
                or "application/octet-stream"
            )
            maintype, _, subtype = content_type.partition("/")
            mime_message.add_attachment(
                _decode_attachment_content(attachment),
                maintype=maintype,
                subtype=subtype or "octet-stream",
                filename=filename,
            )

        return mime_message

    def sign(self, raw_message: bytes) -> bytes:
        """Prepend a DKIM-Signature header when a private key is configured."""
        if not self._private_key:
            return raw_message
        try:
            signature = dkim.sign(
                raw_message,
                self.dkim_config.selector.encode(),
                self.domain.encode(),
                self._private_key.encode(),
                include_headers=SIGNED_HEADERS,
            )
        except dkim.DKIMException as e:
            raise ConfigurationError(f"DKIM signing failed: {e}") from e
        return signature + raw_message

    def _connect(self) -> smtplib.SMTP:
        if self.smtp.use_ssl:
            return smtplib.SMTP_SSL(self.smtp.host, self.smtp.port, timeout=self.smtp.timeout)
        client = smtplib.SMTP(self.smtp.host, self.smtp.port, timeout=self.smtp.timeout)
        if self.smtp.use_tls:
            try:
                client.starttls()
                client.ehlo()
            except BaseException:
                # The caller's ``with`` block has not been entered yet.
                client.close()
                raise
        return client

    def _login(self, client: smtplib.SMTP) -> None:
        if self.smtp.username and self.smtp.password:
            client.login(self.smtp.username, self.smtp.password)

    def send(self, message: ComposedMessage) -> TransportReceipt:
        """Send a message through the relay.

        Returns:
            TransportReceipt; recipients the relay refused are listed as rejected

        Raises:
            smtplib.SMTPException: If the relay refuses the message or every recipient
            OSError: If the relay cannot be reached
        """
        raw_message = self.sign(self.build_mime_message(message).as_bytes(policy=policy.SMTP))
        envelope = message.envelope()
        recipients = message.envelope_recipients

        with self._connect() as client:
            self._login(client)
            refused = client.sendmail(envelope["from"]["address"], recipients, raw_message)

        rejected = list(refused)
        accepted = [r for r in recipients if r not in refused]
        logger.info(f"Relayed {message.message_id} ({len(accepted)} accepted, {len(rejected)} rejected)")
        return TransportReceipt(message_id=message.message_id, accepted=accepted, rejected=rejected)

    def validate_connection(self) -> bool:
        """Validate that the relay is reachable and accepts the credentials."""
        try:
            with self._connect() as client:
                self._login(client)
                client.noop()
            return True
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"SMTP connection validation failed: {e}")
            return False
