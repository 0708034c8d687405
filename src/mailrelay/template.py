"""Jinja2-backed HTML layouts for plain-text messages."""

from pathlib import Path
from typing import List, Optional
import jinja2

from .exceptions import TemplateError
from .models import TemplateType

DEFAULT_TEMPLATE_DIR = Path(__file__).parent / "templates"


def text_to_html(text: str) -> str:
    """Turn newlines into ``<br>`` tags. Nothing else is changed or escaped."""
    return text.replace("\n", "<br>")


class TemplateRenderer:
    """Wraps plain-text bodies in one of the fixed HTML layouts."""

    def __init__(self, domain: str, template_dir: Optional[str] = None):
        """Initialize the renderer.

        Args:
            domain: Sending domain shown in the layout footers
            template_dir: Directory holding ``<type>.jinja2`` layouts
        """
        self.domain = domain
        self.template_dir = Path(template_dir) if template_dir else DEFAULT_TEMPLATE_DIR
        if not self.template_dir.exists():
            raise TemplateError(f"Template directory does not exist: {self.template_dir}")

        # User content is embedded as-is, see DESIGN.md.
        self.env = jinja2.Environment(
            loader=jinja2.FileSystemLoader(str(self.template_dir)),
            autoescape=False,
            undefined=jinja2.StrictUndefined,
        )

    @staticmethod
    def resolve_type(template_type: Optional[str]) -> TemplateType:
        """Map a requested layout name to a known one, defaulting to notification."""
        try:
            return TemplateType(template_type)
        except ValueError:
            return TemplateType.NOTIFICATION

    def load_template(self, template_type: TemplateType) -> jinja2.Template:
        try:
            return self.env.get_template(f"{template_type.value}.jinja2")
        except jinja2.TemplateNotFound as e:
            raise TemplateError(f"Template not found: {template_type.value}") from e
        except jinja2.TemplateError as e:
            raise TemplateError(f"Error loading template {template_type.value}: {e}") from e

    def render(self, content: str, template_type: Optional[str] = None) -> str:
        """Render a plain-text body into a full HTML document.

        Args:
            content: Plain-text body; newlines become line breaks
            template_type: ``notification`` or ``transactional``

        Returns:
            Rendered HTML

        Raises:
            TemplateError: If the layout cannot be rendered
        """
        template = self.load_template(self.resolve_type(template_type))
        try:
            return template.render(content=text_to_html(content), domain=self.domain)
        except jinja2.TemplateError as e:
            raise TemplateError(f"Error rendering template: {e}") from e

    def list_templates(self) -> List[str]:
        """List the available layout names."""
        return sorted(path.stem for path in self.template_dir.glob("*.jinja2"))
