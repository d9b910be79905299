"""
Email Sending

Sends the digest via SMTP as a multipart/alternative message (HTML plus an
optional plain-text part). Port 465 connects with implicit TLS; any other
port connects in the clear and upgrades with STARTTLS when the server
offers it.

Delivery is all-or-nothing: one message, every recipient on a single To line,
and any failure surfaces as DeliveryError.
"""

import smtplib
import ssl
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formatdate, make_msgid

from weekly_digest.core import get_logger
from weekly_digest.secure_config import EmailConfig

logger = get_logger(__name__)

SMTP_TIMEOUT_SECONDS = 30


class DeliveryError(Exception):
    """Raised when the SMTP transaction fails for any transport or auth reason."""


def build_message(
    from_email: str,
    to_emails: list[str],
    subject: str,
    html_body: str,
    text_body: str | None = None,
) -> MIMEMultipart:
    """
    Assemble the outgoing message.

    Parts go plain text first and HTML last so clients prefer the HTML.

    Args:
        from_email: Sender address
        to_emails: Recipients, joined onto one To header
        subject: Subject line
        html_body: Rendered HTML document
        text_body: Optional plain-text alternative

    Returns:
        MIMEMultipart: Ready-to-send message
    """
    msg = MIMEMultipart("alternative")
    msg["From"] = from_email
    msg["To"] = ", ".join(to_emails)
    msg["Subject"] = subject
    msg["Date"] = formatdate(localtime=True)
    msg["Message-ID"] = make_msgid()

    if text_body:
        msg.attach(MIMEText(text_body, "plain", "utf-8"))
    msg.attach(MIMEText(html_body, "html", "utf-8"))
    return msg


def open_connection(config: EmailConfig) -> smtplib.SMTP:
    """Connect to the configured server, with implicit TLS on port 465"""
    if config.implicit_tls:
        logger.info(f"Connecting to SMTP server: {config.smtp_host}:{config.smtp_port} (implicit TLS)")
        return smtplib.SMTP_SSL(
            config.smtp_host,
            config.smtp_port,
            timeout=SMTP_TIMEOUT_SECONDS,
            context=ssl.create_default_context(),
        )

    logger.info(f"Connecting to SMTP server: {config.smtp_host}:{config.smtp_port}")
    return smtplib.SMTP(config.smtp_host, config.smtp_port, timeout=SMTP_TIMEOUT_SECONDS)


def send_report(
    config: EmailConfig,
    subject: str,
    html_body: str,
    text_body: str | None = None,
) -> list[str]:
    """
    Send the report to every configured recipient.

    Args:
        config: Validated SMTP settings and recipients
        subject: Email subject
        html_body: HTML content
        text_body: Optional plain-text alternative

    Returns:
        list[str]: The recipients the message was accepted for

    Raises:
        DeliveryError: If connecting, authenticating or sending fails
    """
    msg = build_message(config.from_email, config.to_emails, subject, html_body, text_body)

    try:
        with open_connection(config) as server:
            server.ehlo()
            if not config.implicit_tls and server.has_extn("starttls"):
                server.starttls(context=ssl.create_default_context())
                server.ehlo()

            logger.info("Authenticating...")
            server.login(config.smtp_user, config.smtp_pass)

            logger.info(f"Sending email to {len(config.to_emails)} recipient(s)...")
            server.send_message(msg, from_addr=config.sender_address, to_addrs=config.recipient_addresses)

    except smtplib.SMTPAuthenticationError as e:
        raise DeliveryError(f"SMTP authentication failed: {e}") from e
    except smtplib.SMTPException as e:
        raise DeliveryError(f"SMTP error: {e}") from e
    except OSError as e:
        raise DeliveryError(f"Could not reach {config.smtp_host}:{config.smtp_port}: {e}") from e

    logger.info("Email sent successfully")
    return list(config.to_emails)
