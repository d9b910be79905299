"""
Domain models for the weekly digest

Usage:
    from weekly_digest.domain import ModelDescriptor, ModelMetric
"""

from weekly_digest.domain.models import (
    NO_DESCRIPTION,
    DailyStatEntry,
    ModelDescriptor,
    ModelMetric,
    ReportWindow,
    WeeklyReport,
    month_day,
    parse_iso_instant,
)

__all__ = [
    "NO_DESCRIPTION",
    "DailyStatEntry",
    "ModelDescriptor",
    "ModelMetric",
    "ReportWindow",
    "WeeklyReport",
    "month_day",
    "parse_iso_instant",
]
