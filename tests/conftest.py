"""Shared test fixtures."""

import pytest
import dns.resolver

from mailrelay.composer import MessageComposer
from mailrelay.config import Settings
from mailrelay.gateway import DeliveryGateway
from mailrelay.providers.mock import MockTransport
from mailrelay.sender import EmailSender
from mailrelay.validators import RecipientValidator


class FakeResolver:
    """Answers MX queries from a fixed set of domains."""

    def __init__(self, domains):
        self.domains = set(domains)
        self.queries = []

    def resolve(self, domain, rdtype, lifetime=None):
        self.queries.append((domain, rdtype))
        if domain not in self.domains:
            raise dns.resolver.NXDOMAIN()
        return [f"10 mx.{domain}."]


@pytest.fixture
def settings():
    """Settings for a relay sending from acme.io."""
    return Settings(
        domain_name="acme.io",
        transport="mock",
        sender={"name": "Acme", "address": "noreply@acme.io"},
        bulk={"max_emails": 10, "delay_seconds": 1.0},
    )


@pytest.fixture
def resolver():
    """Resolver that knows a handful of mail domains."""
    return FakeResolver(["acme.io", "globex.com", "initech.net", "test.com", "example.com"])


@pytest.fixture
def validator(resolver):
    return RecipientValidator(resolver=resolver)


@pytest.fixture
def composer(settings, validator):
    return MessageComposer(settings, validator=validator)


@pytest.fixture
def transport():
    return MockTransport()


@pytest.fixture
def sleeps():
    """Records the pauses requested by the bulk sender."""
    return []


@pytest.fixture
def sender(settings, composer, transport, sleeps):
    return EmailSender(
        composer=composer,
        gateway=DeliveryGateway(transport),
        max_bulk_emails=settings.bulk.max_emails,
        bulk_delay=settings.bulk.delay_seconds,
        sleep=sleeps.append,
    )


@pytest.fixture
def email_payload():
    """A well-formed single send request."""
    return {
        "to": "alice@globex.com",
        "subject": "Your invoice is ready",
        "text": "Hello Alice,\nyour invoice for March is attached.",
    }
