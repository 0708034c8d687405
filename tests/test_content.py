"""Tests for spam screening."""

from mailrelay.content import count_spam_phrases, is_acceptable, uppercase_ratio


class TestCountSpamPhrases:
    """Tests for spam phrase counting."""

    def test_counts_distinct_phrases(self):
        assert count_spam_phrases("Free Money!!! Click here now to win", "", "") == 2

    def test_repeated_phrase_counts_once(self):
        assert count_spam_phrases("act now", "act now, ACT NOW", "") == 1

    def test_substring_match(self):
        """Test that phrases match inside longer words."""
        assert count_spam_phrases("", "we react nowhere", "") == 1

    def test_html_is_searched(self):
        assert count_spam_phrases("Hi", "", "<p>risk free</p>") == 1


class TestUppercaseRatio:
    """Tests for the capitalization ratio."""

    def test_empty_content(self):
        assert uppercase_ratio("", "") == 0.0

    def test_ratio(self):
        assert uppercase_ratio("AB", "cd") == 0.5


class TestIsAcceptable:
    """Tests for is_acceptable."""

    def test_rejects_multiple_spam_phrases(self):
        """Test that two distinct spam phrases reject the content."""
        assert is_acceptable("Free Money!!! Click here now to win", "", "") is False

    def test_rejects_all_caps(self):
        """Test that shouting is rejected."""
        assert is_acceptable("HELLO THERE THIS IS ALL CAPS TEXT", "", "") is False

    def test_accepts_ordinary_message(self):
        """Test that ordinary content passes."""
        assert is_acceptable("Meeting tomorrow", "See you at 10am.", "<p>ok</p>") is True

    def test_accepts_single_phrase(self):
        """Test that one spam phrase alone is tolerated."""
        assert is_acceptable("Limited time offer on renewals", "Details inside.", "") is True

    def test_repeated_phrase_is_tolerated(self):
        assert is_acceptable("Reminder", "act now to renew, act now please", "") is True

    def test_html_counts_for_phrases(self):
        """Test that spam phrases in the html body count."""
        assert is_acceptable("Weekly update", "see details", "<p>free money</p><p>risk free</p>") is False

    def test_html_ignored_for_capitals(self):
        """Test that capitals in the html body do not count."""
        assert is_acceptable("Update", "ok", "<P>LOUD HTML BODY</P>") is True

    def test_empty_content_is_acceptable(self):
        assert is_acceptable("", "", "") is True
