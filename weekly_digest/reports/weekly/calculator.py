"""Week-over-week calculation logic for the weekly digest

- Resolves the current and previous 7-day windows
- Sums daily runs per model inside each window
- Derives first-seen dates and builds one ModelMetric per catalog key
"""

from datetime import date, datetime, time, timedelta

from weekly_digest.core import get_logger
from weekly_digest.domain import NO_DESCRIPTION, DailyStatEntry, ModelDescriptor, ModelMetric, ReportWindow
from weekly_digest.reports.weekly.data_loader import Catalog

logger = get_logger(__name__)

WINDOW_DAYS = 7


def resolve_windows(reference: date | datetime | None = None) -> tuple[ReportWindow, ReportWindow]:
    """Resolve the current and previous report windows

    The current window ends yesterday so that today's partial counts never
    enter a report. Boundaries are midnight of the boundary dates.

    Args:
        reference: The run's "today" (default: date.today())

    Returns:
        (current_window, previous_window), each spanning 7 calendar days
    """
    if reference is None:
        reference = date.today()
    if isinstance(reference, datetime):
        reference = reference.date()

    end_date = reference - timedelta(days=1)
    start_date = end_date - timedelta(days=WINDOW_DAYS - 1)
    prev_end_date = start_date - timedelta(days=1)
    prev_start_date = prev_end_date - timedelta(days=WINDOW_DAYS - 1)

    current = ReportWindow(datetime.combine(start_date, time.min), datetime.combine(end_date, time.min))
    previous = ReportWindow(datetime.combine(prev_start_date, time.min), datetime.combine(prev_end_date, time.min))
    return current, previous


def sum_runs(stats: list[DailyStatEntry], window: ReportWindow) -> int:
    """Total daily runs for entries inside the window (inclusive)"""
    return sum(entry.daily_runs or 0 for entry in stats if window.contains(entry.instant))


def first_seen(stats: list[DailyStatEntry]) -> datetime | None:
    """Earliest recorded date, regardless of the order entries arrive in"""
    if not stats:
        return None
    return min(entry.instant for entry in stats)


def index_models(models: list[ModelDescriptor]) -> dict[str, ModelDescriptor]:
    """Index descriptors by owner/name

    A repeated key keeps its first position but takes the last descriptor.
    """
    index: dict[str, ModelDescriptor] = {}
    for model in models:
        index[model.key] = model
    return index


class WeeklyMetricsCalculator:
    """Calculate per-model week-over-week metrics for the digest"""

    def __init__(self, current_window: ReportWindow, previous_window: ReportWindow):
        """Initialize calculator with the two windows

        Args:
            current_window: The week being reported
            previous_window: The week before it
        """
        self.current_window = current_window
        self.previous_window = previous_window

    @classmethod
    def for_reference(cls, reference: date | datetime | None = None) -> "WeeklyMetricsCalculator":
        return cls(*resolve_windows(reference))

    def calculate_metric(self, model: ModelDescriptor, stats: list[DailyStatEntry]) -> ModelMetric:
        """Build the metric for one model

        Args:
            model: Catalog descriptor
            stats: The model's daily stats (may be empty)

        Returns:
            ModelMetric with both window sums and first-seen date
        """
        return ModelMetric(
            key=model.key,
            url=model.url,
            description=model.description or NO_DESCRIPTION,
            this_week_runs=sum_runs(stats, self.current_window),
            last_week_runs=sum_runs(stats, self.previous_window),
            total_runs=model.run_count or 0,
            first_seen=first_seen(stats),
        )

    def calculate_all(self, catalog: Catalog) -> list[ModelMetric]:
        """Build one metric per distinct catalog key, in catalog order"""
        metrics = [
            self.calculate_metric(model, catalog.stats_for(key)) for key, model in index_models(catalog.models).items()
        ]

        logger.info(
            f"Calculated metrics for {len(metrics):,} models "
            f"({self.current_window.label} vs {self.previous_window.label})"
        )
        return metrics
