"""
Secure Configuration Management

Provides validated configuration for the weekly digest.
All settings come from environment variables (optionally via a .env file)
and are checked up front so a misconfigured run fails before any work is done.

Usage:
    from weekly_digest.secure_config import SecureConfig

    config = SecureConfig()
    email_config = config.get_email_config()
    print(email_config.smtp_host, email_config.smtp_port)

Raises:
    ConfigurationError: If configuration is missing or invalid
"""

import os
from dataclasses import dataclass, field
from email.utils import parseaddr

from dotenv import load_dotenv

DEFAULT_SMTP_PORT = 587
IMPLICIT_TLS_PORT = 465

# Setting name -> purpose, in the order they are reported
REQUIRED_SETTINGS = {
    "TO_EMAILS": "comma-separated list of recipient email addresses",
    "FROM_EMAIL": "sender email address",
    "SMTP_HOST": "SMTP server hostname",
    "SMTP_PORT": f"SMTP server port (default: {DEFAULT_SMTP_PORT})",
    "SMTP_USER": "SMTP username",
    "SMTP_PASS": "SMTP password or app password",
}


class ConfigurationError(Exception):
    """Raised when configuration is missing or invalid."""

    def __init__(self, message: str, missing: list[str] | None = None):
        super().__init__(message)
        self.missing = missing or []


def describe_required_settings() -> str:
    """Itemized list of every required setting and what it is for."""
    return "\n".join(f"- {name}: {purpose}" for name, purpose in REQUIRED_SETTINGS.items())


def parse_recipients(raw: str | None) -> list[str]:
    """
    Split a comma-separated recipient string.

    Whitespace is trimmed and empty items are dropped, so
    "a@x.com, b@x.com," yields two addresses.
    """
    if not raw:
        return []
    return [email.strip() for email in raw.split(",") if email.strip()]


def envelope_address(value: str) -> str:
    """
    Bare address from a header value.

    "Model Digest <digest@example.com>" gives "digest@example.com". Returns ""
    when no address with an '@' can be found.
    """
    _, address = parseaddr(value)
    return address if "@" in address else ""


@dataclass
class EmailConfig:
    """
    Validated SMTP delivery configuration.
    """

    to_emails: list[str] = field(default_factory=list)
    from_email: str = ""
    smtp_host: str = ""
    smtp_user: str = ""
    smtp_pass: str = ""
    smtp_port: int = DEFAULT_SMTP_PORT

    def __post_init__(self):
        """Validate configuration after initialization."""
        self._validate()

    @property
    def implicit_tls(self) -> bool:
        """Port 465 means TLS from the first byte; anything else upgrades with STARTTLS."""
        return self.smtp_port == IMPLICIT_TLS_PORT

    @property
    def sender_address(self) -> str:
        """Envelope sender (FROM_EMAIL may carry a display name)"""
        return envelope_address(self.from_email)

    @property
    def recipient_addresses(self) -> list[str]:
        return [envelope_address(email) for email in self.to_emails]

    def _validate(self):
        """
        Validate email configuration.

        Every missing setting is collected before raising so the operator
        sees the complete list in one go.

        Raises:
            ConfigurationError: If configuration is invalid
        """
        missing = []
        if not self.to_emails:
            missing.append("TO_EMAILS")
        if not self.from_email:
            missing.append("FROM_EMAIL")
        if not self.smtp_host:
            missing.append("SMTP_HOST")
        if not self.smtp_user:
            missing.append("SMTP_USER")
        if not self.smtp_pass:
            missing.append("SMTP_PASS")

        if missing:
            raise ConfigurationError(
                f"Missing required environment variables: {', '.join(missing)}\n" f"{describe_required_settings()}",
                missing=missing,
            )

        invalid = [email for email in self.to_emails if not envelope_address(email)]
        if invalid:
            raise ConfigurationError(f"TO_EMAILS contains invalid addresses: {', '.join(invalid)}")

        if not envelope_address(self.from_email):
            raise ConfigurationError(f"FROM_EMAIL must be a valid email address: {self.from_email}")

        if not 0 < self.smtp_port < 65536:
            raise ConfigurationError(f"SMTP_PORT out of range: {self.smtp_port}")


class SecureConfig:
    """
    Configuration loader.

    Reads settings from the process environment after loading a .env file.
    Build one in main() and pass the resulting config objects down.
    """

    def __init__(self, load_env_file: bool = True):
        """Initialize configuration (loads .env file unless disabled)."""
        if load_env_file:
            load_dotenv()

    def get_email_config(self) -> EmailConfig:
        """
        Get validated email configuration.

        Returns:
            EmailConfig: Validated configuration

        Raises:
            ConfigurationError: If configuration is missing or invalid
        """
        raw_port = os.getenv("SMTP_PORT") or str(DEFAULT_SMTP_PORT)
        try:
            smtp_port = int(raw_port.strip())
        except ValueError as e:
            raise ConfigurationError(f"SMTP_PORT must be an integer, got: {raw_port!r}") from e

        return EmailConfig(
            to_emails=parse_recipients(os.getenv("TO_EMAILS")),
            from_email=(os.getenv("FROM_EMAIL") or "").strip(),
            smtp_host=(os.getenv("SMTP_HOST") or "").strip(),
            smtp_user=os.getenv("SMTP_USER") or "",
            smtp_pass=os.getenv("SMTP_PASS") or "",
            smtp_port=smtp_port,
        )

    def get_catalog_paths(self) -> tuple[str, str]:
        """
        Locations of the catalog snapshot files.

        Returns:
            (models_file, stats_file) from MODELS_FILE / STATS_FILE, with defaults
        """
        return (
            os.getenv("MODELS_FILE", "data/models.json"),
            os.getenv("STATS_FILE", "data/stats.json"),
        )
