"""Spam-likeness screening of message content."""

import re

SPAM_PHRASES = (
    "free money",
    "click here now",
    "urgent action required",
    "congratulations you won",
    "limited time offer",
    "act now",
    "make money fast",
    "no obligation",
    "risk free",
)

# Content matching this many distinct phrases is rejected.
MAX_SPAM_PHRASES = 2
MAX_UPPERCASE_RATIO = 0.3

_UPPERCASE = re.compile(r"[A-Z]")


def count_spam_phrases(subject: str, text: str, html: str) -> int:
    """Count the distinct spam phrases contained anywhere in the content."""
    content = f"{subject} {text} {html}".lower()
    return sum(1 for phrase in SPAM_PHRASES if phrase in content)


def uppercase_ratio(subject: str, text: str) -> float:
    """Share of ASCII capitals in subject and text. The html body is ignored."""
    combined = f"{subject}{text}"
    if not combined:
        return 0.0
    return len(_UPPERCASE.findall(combined)) / len(combined)


def is_acceptable(subject: str, text: str, html: str = "") -> bool:
    """Return False if the content reads like spam."""
    if count_spam_phrases(subject, text, html) >= MAX_SPAM_PHRASES:
        return False
    if uppercase_ratio(subject, text) > MAX_UPPERCASE_RATIO:
        return False
    return True
