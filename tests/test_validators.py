"""Tests for recipient validation."""

import pytest
import dns.exception

from mailrelay.exceptions import ValidationError
from mailrelay.validators import (
    RecipientValidator,
    extract_domain,
    validate_email_address,
)


class TestEmailValidator:
    """Tests for address syntax validation."""

    def test_valid_email(self):
        """Test validating a valid email."""
        is_valid, normalized = validate_email_address("user@globex.com")
        assert is_valid is True
        assert normalized == "user@globex.com"

    def test_invalid_email_format(self):
        """Test validating invalid email format."""
        is_valid, error = validate_email_address("invalid-email")
        assert is_valid is False

    def test_invalid_email_empty(self):
        """Test validating empty email."""
        is_valid, error = validate_email_address("")
        assert is_valid is False

    def test_non_string_rejected(self):
        """Test that non-string values are rejected without raising."""
        is_valid, error = validate_email_address(None)
        assert is_valid is False


class TestExtractDomain:
    """Tests for domain extraction."""

    def test_domain_after_at(self):
        assert extract_domain("bob@initech.net") == "initech.net"

    def test_no_at_sign(self):
        assert extract_domain("initech.net") is None

    def test_empty_domain(self):
        assert extract_domain("bob@") is None


class TestRecipientValidator:
    """Tests for RecipientValidator."""

    def test_validate_accepts_regular_address(self, validator):
        """Test that a normal address passes."""
        assert validator.validate("alice@globex.com") is True

    @pytest.mark.parametrize(
        "address",
        ["test@test.com", "example@example.com", "admin@admin.com", "TEST@Test.com", "Admin@ADMIN.com"],
    )
    def test_validate_rejects_denylisted(self, validator, address):
        """Test that placeholder addresses are rejected in any case."""
        assert validator.validate(address) is False

    def test_validate_rejects_bad_syntax(self, validator):
        """Test that malformed addresses are rejected."""
        assert validator.validate("not an address") is False
        assert validator.validate("alice@") is False

    def test_domain_exists_with_mx(self, validator, resolver):
        """Test that a domain with MX records exists."""
        assert validator.domain_exists("alice@globex.com") is True
        assert resolver.queries == [("globex.com", "MX")]

    def test_domain_exists_without_mx(self, validator):
        """Test that NXDOMAIN means the domain does not exist."""
        assert validator.domain_exists("alice@no-such-domain.org") is False

    def test_domain_exists_swallows_timeouts(self):
        """Test that resolver timeouts are reported as a missing domain."""

        class TimeoutResolver:
            def resolve(self, domain, rdtype, lifetime=None):
                raise dns.exception.Timeout()

        assert RecipientValidator(resolver=TimeoutResolver()).domain_exists("a@globex.com") is False

    def test_domain_exists_empty_answer(self):
        """Test that an empty answer counts as no MX."""

        class EmptyResolver:
            def resolve(self, domain, rdtype, lifetime=None):
                return []

        assert RecipientValidator(resolver=EmptyResolver()).domain_exists("a@globex.com") is False

    def test_domain_exists_without_at(self, validator, resolver):
        """Test that an address without a domain is never looked up."""
        assert validator.domain_exists("globex.com") is False
        assert resolver.queries == []

    def test_lookup_uses_timeout(self):
        """Test that the configured timeout is passed as the lookup lifetime."""
        seen = {}

        class RecordingResolver:
            def resolve(self, domain, rdtype, lifetime=None):
                seen["lifetime"] = lifetime
                return ["10 mx.globex.com."]

        RecipientValidator(resolver=RecordingResolver(), timeout=2.5).domain_exists("a@globex.com")
        assert seen["lifetime"] == 2.5

    def test_check_all_passes(self, validator):
        """Test that valid recipients pass without raising."""
        validator.check_all(["alice@globex.com", "bob@initech.net"])

    def test_check_all_stops_at_first_invalid(self, validator, resolver):
        """Test that the first failing address aborts the check."""
        with pytest.raises(ValidationError) as exc_info:
            validator.check_all(["alice@globex.com", "test@test.com", "bob@unknown-domain.org"])

        assert exc_info.value.address == "test@test.com"
        assert str(exc_info.value) == "Invalid email address: test@test.com"
        assert resolver.queries == [("globex.com", "MX")]

    def test_check_all_reports_missing_domain(self, validator):
        """Test that a domain without MX records is named in the error."""
        with pytest.raises(ValidationError, match="Invalid domain for email: bob@unknown-domain.org"):
            validator.check_all(["bob@unknown-domain.org"])
