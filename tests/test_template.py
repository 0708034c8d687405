"""Tests for HTML layout rendering."""

import pytest

from mailrelay.exceptions import TemplateError
from mailrelay.models import TemplateType
from mailrelay.template import TemplateRenderer, text_to_html


class TestTextToHtml:
    """Tests for newline conversion."""

    def test_newlines_become_line_breaks(self):
        assert text_to_html("one\ntwo\n\nthree") == "one<br>two<br><br>three"

    def test_markup_is_not_escaped(self):
        assert text_to_html("<b>bold</b> & co") == "<b>bold</b> & co"


class TestTemplateRenderer:
    """Tests for TemplateRenderer."""

    def test_notification_layout(self):
        """Test the default layout embeds content and the domain footer."""
        html = TemplateRenderer("acme.io").render("Hello\nworld")

        assert "Hello<br>world" in html
        assert "This email was sent from acme.io" in html
        assert "border-left: 4px solid #3498db" in html

    def test_transactional_layout(self):
        """Test the transactional layout has a rule and its own footer."""
        html = TemplateRenderer("acme.io").render("Receipt", "transactional")

        assert "Receipt" in html
        assert "<hr" in html
        assert "This is a transactional email from acme.io" in html
        assert "This email was sent from" not in html

    def test_unknown_type_falls_back_to_notification(self):
        renderer = TemplateRenderer("acme.io")
        assert renderer.render("Hi", "newsletter") == renderer.render("Hi", "notification")

    def test_resolve_type(self):
        assert TemplateRenderer.resolve_type("transactional") is TemplateType.TRANSACTIONAL
        assert TemplateRenderer.resolve_type(None) is TemplateType.NOTIFICATION

    def test_user_content_is_embedded_verbatim(self):
        """Test that html in the text body is not escaped."""
        html = TemplateRenderer("acme.io").render("<script>alert(1)</script>")
        assert "<script>alert(1)</script>" in html

    def test_list_templates(self):
        assert TemplateRenderer("acme.io").list_templates() == ["notification", "transactional"]

    def test_missing_template_dir(self, tmp_path):
        """Test that a missing template directory raises an error."""
        with pytest.raises(TemplateError):
            TemplateRenderer("acme.io", str(tmp_path / "missing"))

    def test_missing_layout_file(self, tmp_path):
        """Test that a directory without the layout raises an error on render."""
        renderer = TemplateRenderer("acme.io", str(tmp_path))
        with pytest.raises(TemplateError):
            renderer.render("Hi")
