"""Recipient address validation."""

import logging
from typing import Iterable, Optional, Tuple

import dns.exception
import dns.resolver
from email_validator import validate_email, EmailNotValidError

from .exceptions import ValidationError

logger = logging.getLogger(__name__)

# Placeholder addresses that are syntactically valid but never real recipients.
DENYLISTED_ADDRESSES = frozenset({
    "test@test.com",
    "example@example.com",
    "admin@admin.com",
})


def validate_email_address(email: str) -> Tuple[bool, str]:
    """Validate an email address.

    Args:
        email: Email address to validate

    Returns:
        Tuple of (is_valid, normalized address or error message)
    """
    if not isinstance(email, str):
        return False, "Email address must be a string"
    try:
        valid = validate_email(email, check_deliverability=False)
        return True, valid.normalized
    except EmailNotValidError as e:
        return False, str(e)


def extract_domain(email: str) -> Optional[str]:
    """Return the part after the first ``@``, or None when there is none."""
    if not isinstance(email, str) or "@" not in email:
        return None
    return email.split("@")[1] or None


class RecipientValidator:
    """Checks address syntax, the denylist, and that the domain accepts mail."""

    def __init__(self, resolver: dns.resolver.Resolver = None, timeout: float = 5.0):
        """Initialize the validator.

        Args:
            resolver: DNS resolver used for MX lookups (system resolver if omitted)
            timeout: Lifetime of a single MX lookup in seconds
        """
        self._resolver = resolver
        self.timeout = timeout

    @property
    def resolver(self) -> dns.resolver.Resolver:
        # Reading the system resolver configuration is deferred to the first lookup.
        if self._resolver is None:
            self._resolver = dns.resolver.Resolver()
        return self._resolver

    def validate(self, address: str) -> bool:
        """Return True if the address is well formed and not a placeholder."""
        is_valid, _ = validate_email_address(address)
        if not is_valid:
            return False
        return address.lower() not in DENYLISTED_ADDRESSES

    def domain_exists(self, address: str) -> bool:
        """Return True if the address's domain publishes at least one MX record.

        Lookup failures of any kind count as a missing domain.
        """
        domain = extract_domain(address)
        if domain is None:
            return False
        try:
            answers = self.resolver.resolve(domain, "MX", lifetime=self.timeout)
            return len(answers) > 0
        except dns.exception.DNSException as e:
            logger.debug(f"MX lookup for {domain} failed: {e!r}")
            return False
        except (ValueError, UnicodeError) as e:
            logger.debug(f"Malformed domain {domain!r}: {e}")
            return False

    def check_all(self, addresses: Iterable[str]) -> None:
        """Validate every address in order, stopping at the first failure.

        Raises:
            ValidationError: naming the first address that fails either check
        """
        for address in addresses:
            if not self.validate(address):
                raise ValidationError(f"Invalid email address: {address}", address=address)
            if not self.domain_exists(address):
                raise ValidationError(f"Invalid domain for email: {address}", address=address)
