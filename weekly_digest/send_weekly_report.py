"""
Send Weekly Model Usage Report

Loads the catalog snapshot, compares the last two 7-day windows for every
model, ranks the results and emails the HTML digest to the configured
recipients.

Usage:
    python -m weekly_digest.send_weekly_report
    python -m weekly_digest.send_weekly_report --dry-run --output .tmp/weekly_report.html
    python -m weekly_digest.send_weekly_report --date 2026-10-18
    python -m weekly_digest.send_weekly_report --json-logs --log-file .tmp/logs/digest.log

Environment variables (or .env):
    TO_EMAILS, FROM_EMAIL, SMTP_HOST, SMTP_PORT, SMTP_USER, SMTP_PASS
    MODELS_FILE, STATS_FILE (catalog locations)

Exit codes:
    0 on success, 1 on missing configuration, unreadable catalog or send failure
"""

import argparse
import sys
from datetime import date, datetime
from pathlib import Path

from weekly_digest.core import ConfigurationError, SecureConfig, get_logger, log_with_context, setup_logging
from weekly_digest.domain import WeeklyReport
from weekly_digest.reports.weekly import (
    Catalog,
    CatalogError,
    CatalogLoader,
    WeeklyMetricsCalculator,
    WeeklyReportRenderer,
    build_weekly_report,
)
from weekly_digest.secure_config import describe_required_settings
from weekly_digest.send_email import DeliveryError, send_report

logger = get_logger(__name__)


def build_report(catalog: Catalog, reference: date | datetime | None = None) -> WeeklyReport:
    """
    Run aggregation and ranking for one catalog snapshot.

    Args:
        catalog: Models and their daily stats
        reference: The run's "today" (default: date.today())

    Returns:
        WeeklyReport with all four ranked lists
    """
    calculator = WeeklyMetricsCalculator.for_reference(reference)
    metrics = calculator.calculate_all(catalog)
    report = build_weekly_report(metrics, calculator.current_window, calculator.previous_window)

    log_with_context(
        logger,
        "info",
        "Report ranked",
        model_count=report.model_count,
        top=len(report.top_this_week),
        gainers_absolute=len(report.gainers_absolute),
        gainers_percent=len(report.gainers_percent),
        new_models=len(report.new_this_week),
    )
    return report


def print_configuration_error(error: ConfigurationError) -> None:
    """Explain the problem, then list every required setting with its purpose"""
    if error.missing:
        print("Missing required environment variables:", file=sys.stderr)
    else:
        print(f"Invalid configuration: {error}", file=sys.stderr)
        print("Required environment variables:", file=sys.stderr)
    print(describe_required_settings(), file=sys.stderr)


def print_confirmation(recipients: list[str], model_count: int, date_range: str) -> None:
    """Success summary on stdout"""
    print(f"✅ Weekly report sent successfully to {len(recipients)} recipients:")
    for email in recipients:
        print(f"   📧 {email}")
    print(f"📊 Report covers {model_count:,} models")
    print(f"📅 Period: {date_range}")


def parse_arguments(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(description="Email the weekly model usage digest")

    parser.add_argument("--models-file", type=str, help="Model descriptor JSON (default: MODELS_FILE or data/models.json)")

    parser.add_argument("--stats-file", type=str, help="Daily stats JSON (default: STATS_FILE or data/stats.json)")

    parser.add_argument(
        "--date",
        type=date.fromisoformat,
        default=None,
        help="Treat this YYYY-MM-DD as today (default: the current date)",
    )

    parser.add_argument("--output", type=Path, help="Also write the HTML report to this file")

    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Render the report without sending it (SMTP settings not required)",
    )

    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity (default: INFO)",
    )

    parser.add_argument("--log-file", type=Path, help="Also write JSON log lines to this file")

    parser.add_argument(
        "--json-logs",
        action="store_true",
        help="Emit JSON log lines on stderr instead of the colored console format",
    )

    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Entry point. Returns the process exit code."""
    args = parse_arguments(argv)
    setup_logging(level=args.log_level, log_file=args.log_file, json_output=args.json_logs)

    config = SecureConfig()

    email_config = None
    if not args.dry_run:
        try:
            email_config = config.get_email_config()
        except ConfigurationError as e:
            logger.error(f"Configuration invalid: {e}")
            print_configuration_error(e)
            return 1

    default_models, default_stats = config.get_catalog_paths()
    loader = CatalogLoader(
        models_file=args.models_file or default_models,
        stats_file=args.stats_file or default_stats,
    )
    try:
        catalog = loader.load_catalog()
    except CatalogError as e:
        logger.error(f"Catalog unavailable: {e}")
        print(f"❌ {e}", file=sys.stderr)
        return 1

    report = build_report(catalog, args.date)
    renderer = WeeklyReportRenderer(report)
    subject = renderer.build_subject()
    html_body = renderer.render_html()

    if args.output:
        renderer.generate_report_file(args.output)

    if email_config is None:
        print(f"[DRY RUN] {subject}")
        print(f"📊 Report covers {report.model_count:,} models")
        if args.output:
            print(f"📄 HTML written to {args.output}")
        return 0

    try:
        recipients = send_report(email_config, subject, html_body, renderer.render_text())
    except DeliveryError as e:
        logger.error(f"Delivery failed: {e}")
        print(f"❌ Failed to send email: {e}", file=sys.stderr)
        return 1

    print_confirmation(recipients, report.model_count, report.date_range)
    return 0


if __name__ == "__main__":
    sys.exit(main())
