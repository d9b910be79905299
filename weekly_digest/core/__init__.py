"""
Core Infrastructure - Configuration and Logging

Usage:
    from weekly_digest.core import SecureConfig, get_logger

    config = SecureConfig()
    email_config = config.get_email_config()
"""

from weekly_digest.core.logging_config import get_logger, log_with_context, setup_logging
from weekly_digest.secure_config import ConfigurationError, EmailConfig, SecureConfig

__all__ = [
    # Configuration
    "ConfigurationError",
    "EmailConfig",
    "SecureConfig",
    # Logging
    "get_logger",
    "log_with_context",
    "setup_logging",
]
