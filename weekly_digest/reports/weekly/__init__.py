"""Weekly digest calculation, ranking and rendering"""

from weekly_digest.reports.weekly.calculator import WeeklyMetricsCalculator, resolve_windows
from weekly_digest.reports.weekly.data_loader import Catalog, CatalogError, CatalogLoader
from weekly_digest.reports.weekly.ranking import build_weekly_report
from weekly_digest.reports.weekly.renderer import WeeklyReportRenderer

__all__ = [
    "Catalog",
    "CatalogError",
    "CatalogLoader",
    "WeeklyMetricsCalculator",
    "WeeklyReportRenderer",
    "build_weekly_report",
    "resolve_windows",
]
