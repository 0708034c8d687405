"""CLI commands for the mail relay."""

import json
import sys
from typing import Optional

import click

from .app import create_app
from .config import load_settings
from .content import count_spam_phrases, is_acceptable, uppercase_ratio
from .exceptions import MailRelayError
from .logging import get_logger, setup_logging
from .models import TemplateType
from .sender import EmailSender, create_transport
from .template import TemplateRenderer
from .validators import RecipientValidator

logger = get_logger(__name__)


def _load(env_file: Optional[str], config: Optional[str]):
    settings = load_settings(env_file=env_file, config_file=config)
    setup_logging(settings.logging)
    return settings


@click.group()
def main():
    """Transactional mail relay CLI."""
    pass


@main.command()
@click.option("--host", help="Bind address (overrides config)")
@click.option("--port", type=int, help="Bind port (overrides config)")
@click.option("--config", type=click.Path(exists=True), help="Config file path (YAML/JSON)")
@click.option("--env-file", type=click.Path(exists=True), help=".env file path")
def serve(host: Optional[str], port: Optional[int], config: Optional[str], env_file: Optional[str]):
    """Run the HTTP server."""
    try:
        settings = _load(env_file, config)
        app = create_app(settings)
    except MailRelayError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    host = host or settings.server.host
    port = port or settings.server.port
    logger.info(f"Email server running on {host}:{port}")
    app.run(host=host, port=port, debug=settings.server.debug)


@main.command()
@click.option("--data", type=click.Path(exists=True), required=True, help="Email request (JSON)")
@click.option("--config", type=click.Path(exists=True), help="Config file path (YAML/JSON)")
@click.option("--env-file", type=click.Path(exists=True), help=".env file path")
def send(data: str, config: Optional[str], env_file: Optional[str]):
    """Send a single email described by a JSON file."""
    try:
        settings = _load(env_file, config)
        with open(data, "r") as f:
            payload = json.load(f)

        sender = EmailSender.from_settings(settings)
        result = sender.send_email(payload)
    except json.JSONDecodeError as e:
        click.echo(f"Error: Invalid JSON in {data}: {e}", err=True)
        sys.exit(1)
    except (MailRelayError, OSError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    click.echo(json.dumps(result.to_dict(), indent=2))
    sys.exit(0 if result.success else 1)


@main.command("check-relay")
@click.option("--config", type=click.Path(exists=True), help="Config file path (YAML/JSON)")
@click.option("--env-file", type=click.Path(exists=True), help=".env file path")
def check_relay(config: Optional[str], env_file: Optional[str]):
    """Check that the configured relay is reachable and accepts the credentials."""
    try:
        settings = _load(env_file, config)
        transport = create_transport(settings)
    except MailRelayError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if transport.validate_connection():
        click.echo(f"Relay OK ({settings.transport})")
        sys.exit(0)
    click.echo(f"Relay check failed ({settings.transport})", err=True)
    sys.exit(1)


@main.command("check-address")
@click.argument("address")
@click.option("--timeout", type=float, default=5.0, show_default=True, help="MX lookup timeout")
def check_address(address: str, timeout: float):
    """Run the recipient checks against one address."""
    validator = RecipientValidator(timeout=timeout)
    valid = validator.validate(address)
    has_mx = validator.domain_exists(address)

    click.echo(f"Address: {address}")
    click.echo(f"  Syntax and denylist: {'ok' if valid else 'rejected'}")
    click.echo(f"  MX records: {'found' if has_mx else 'none'}")
    sys.exit(0 if valid and has_mx else 1)


@main.command()
@click.option("--subject", required=True, help="Email subject")
@click.option("--text", default="", help="Plain-text body")
@click.option("--html", default="", help="HTML body")
def screen(subject: str, text: str, html: str):
    """Check content against the spam screener."""
    acceptable = is_acceptable(subject, text, html)

    click.echo(f"Spam phrases: {count_spam_phrases(subject, text, html)}")
    click.echo(f"Uppercase ratio: {uppercase_ratio(subject, text):.2f}")
    click.echo(f"Result: {'acceptable' if acceptable else 'rejected'}")
    sys.exit(0 if acceptable else 1)


@main.command()
@click.option("--text", required=True, help="Plain-text body to wrap")
@click.option(
    "--template-type",
    type=click.Choice([t.value for t in TemplateType]),
    default=TemplateType.NOTIFICATION.value,
    show_default=True,
)
@click.option("--config", type=click.Path(exists=True), help="Config file path (YAML/JSON)")
@click.option("--env-file", type=click.Path(exists=True), help=".env file path")
def preview(text: str, template_type: str, config: Optional[str], env_file: Optional[str]):
    """Print the HTML a plain-text body would be sent as."""
    try:
        settings = _load(env_file, config)
        click.echo(TemplateRenderer(settings.domain_name).render(text, template_type))
    except MailRelayError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
