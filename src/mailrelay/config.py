"""Configuration management for the mail relay."""

from pathlib import Path
from typing import Any, ClassVar, Dict, Optional, Tuple

from pydantic import BaseModel, Field
from pydantic.fields import FieldInfo
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict
import yaml
import json
from dotenv import load_dotenv

from .exceptions import ConfigurationError


class SMTPConfig(BaseModel):
    """SMTP relay connection settings."""

    host: str = Field("smtp.gmail.com", description="SMTP relay hostname")
    port: int = Field(587, description="SMTP relay port")
    username: Optional[str] = Field(None, description="SMTP authentication username")
    password: Optional[str] = Field(None, description="SMTP authentication password")
    use_tls: bool = Field(True, description="Upgrade the connection with STARTTLS")
    use_ssl: bool = Field(False, description="Connect with implicit TLS (port 465)")
    timeout: float = Field(30.0, description="Socket timeout in seconds")


class SenderConfig(BaseModel):
    """Identity placed in the From header."""

    name: str = Field("Your App", description="Display name of the sender")
    address: Optional[str] = Field(None, description="Sender address (defaults to the SMTP username)")


class DKIMConfig(BaseModel):
    """DKIM signing key material."""

    selector: str = Field("default", description="DKIM selector published in DNS")
    private_key: Optional[str] = Field(None, description="PEM encoded private key")
    private_key_path: Optional[str] = Field(None, description="Path to a PEM encoded private key")

    def load_private_key(self) -> Optional[str]:
        """Return the PEM key, reading it from disk when only a path is set."""
        if self.private_key:
            return self.private_key
        if self.private_key_path:
            try:
                return Path(self.private_key_path).read_text()
            except OSError as e:
                raise ConfigurationError(f"Cannot read DKIM private key: {e}") from e
        return None


class RateLimitConfig(BaseModel):
    """Per-client rate limit shared by the send endpoints."""

    enabled: bool = Field(True, description="Enable rate limiting")
    limit: str = Field("5 per 15 minutes", description="Limit string in Flask-Limiter notation")
    storage_uri: str = Field("memory://", description="Flask-Limiter storage backend")


class BulkConfig(BaseModel):
    """Bulk send restrictions."""

    max_emails: int = Field(10, description="Maximum entries per bulk request")
    delay_seconds: float = Field(1.0, description="Pause after each bulk entry")


class DNSConfig(BaseModel):
    """Resolver settings for recipient domain checks."""

    timeout: float = Field(5.0, description="Lifetime of one MX lookup in seconds")


class ServerConfig(BaseModel):
    """HTTP server settings."""

    host: str = Field("0.0.0.0", description="Bind address")
    port: int = Field(3000, description="Bind port")
    debug: bool = Field(False, description="Enable Flask debug mode")
    max_content_length: int = Field(10 * 1024 * 1024, description="Largest accepted request body")


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field("INFO", description="Logging level")
    format: str = Field(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log format string"
    )
    file_path: Optional[str] = Field(None, description="Path to log file")
    max_file_size: int = Field(10 * 1024 * 1024, description="Maximum log file size in bytes")
    backup_count: int = Field(5, description="Number of backup log files to keep")


class ConfigFileSettingsSource(PydanticBaseSettingsSource):
    """Values read from a YAML or JSON config file."""

    def __init__(self, settings_cls, config_data: Dict[str, Any]):
        super().__init__(settings_cls)
        self.config_data = config_data

    def get_field_value(self, field: FieldInfo, field_name: str) -> Tuple[Any, str, bool]:
        return self.config_data.get(field_name), field_name, False

    def __call__(self) -> Dict[str, Any]:
        return {
            name: value
            for name, value in self.config_data.items()
            if name in self.settings_cls.model_fields
        }


class Settings(BaseSettings):
    """Main application settings."""

    # Contents of the config file; set on the subclass built by load_settings.
    config_data: ClassVar[Dict[str, Any]] = {}

    domain_name: str = Field("your-domain.com", description="Sending domain used in headers and footers")
    transport: str = Field("smtp", description="Transport backend: smtp or mock")
    mailer_tag: str = Field("Python Mail Relay v1.0", description="Value of the X-Mailer header")

    smtp: SMTPConfig = Field(default_factory=SMTPConfig)
    sender: SenderConfig = Field(default_factory=SenderConfig)
    dkim: DKIMConfig = Field(default_factory=DKIMConfig)
    rate_limit: RateLimitConfig = Field(default_factory=RateLimitConfig)
    bulk: BulkConfig = Field(default_factory=BulkConfig)
    dns: DNSConfig = Field(default_factory=DNSConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = SettingsConfigDict(
        env_prefix="MAILRELAY_",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    @classmethod
    def settings_customise_sources(
        cls, settings_cls, init_settings, env_settings, dotenv_settings, file_secret_settings
    ):
        # Explicit arguments, then the environment, then the config file.
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            ConfigFileSettingsSource(settings_cls, settings_cls.config_data),
            file_secret_settings,
        )

    @property
    def sender_address(self) -> Optional[str]:
        return self.sender.address or self.smtp.username


def _load_config_file(config_file: Path) -> Dict[str, Any]:
    """Load configuration from YAML or JSON file."""
    with open(config_file, 'r') as f:
        if config_file.suffix.lower() in ['.yaml', '.yml']:
            return yaml.safe_load(f) or {}
        elif config_file.suffix.lower() == '.json':
            return json.load(f)
        else:
            raise ConfigurationError(f"Unsupported config file format: {config_file.suffix}")


def load_settings(
    config_dir: Optional[Path] = None,
    env_file: Optional[str] = None,
    config_file: Optional[str] = None
) -> Settings:
    """
    Load application settings from multiple sources.

    Sources are loaded in order of precedence (later sources override earlier):
    1. Default values
    2. Configuration file (YAML/JSON)
    3. Environment file (.env) and environment variables

    Args:
        config_dir: Directory containing config files (default: current directory)
        env_file: Path to environment file (default: .env in config_dir)
        config_file: Path to configuration file (default: config.yaml in config_dir)

    Returns:
        Loaded settings instance
    """
    if config_dir is None:
        config_dir = Path.cwd()

    env_path = Path(env_file) if env_file else Path(config_dir) / ".env"
    config_path = Path(config_file) if config_file else Path(config_dir) / "config.yaml"

    if env_path.exists():
        load_dotenv(env_path)

    file_config = _load_config_file(config_path) if config_path.exists() else {}

    class FileBackedSettings(Settings):
        config_data: ClassVar[Dict[str, Any]] = file_config

    try:
        return FileBackedSettings()
    except Exception as e:
        raise ConfigurationError(f"Failed to load configuration: {e}") from e
