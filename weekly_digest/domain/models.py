"""
Domain models for the weekly model usage digest

    - ModelDescriptor: One published model from the catalog snapshot
    - DailyStatEntry: Run count for one model on one day
    - ReportWindow: Inclusive 7-day aggregation range
    - ModelMetric: Week-over-week figures derived for one model
    - WeeklyReport: The four ranked lists handed to the renderer
"""

from dataclasses import dataclass, field
from datetime import datetime

NO_DESCRIPTION = "No description available"

# English regardless of LC_TIME
MONTH_ABBREVIATIONS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def month_day(value: datetime) -> str:
    """Short English date such as "Oct 5"."""
    return f"{MONTH_ABBREVIATIONS[value.month - 1]} {value.day}"


def parse_iso_instant(value: str) -> datetime:
    """
    Parse an ISO 8601 date or timestamp into a naive local datetime.

    Date-only values ("2026-02-10") become midnight of that day. Timestamps
    carrying an offset or 'Z' suffix are converted to local time so they
    compare against the naive window boundaries.

    Raises:
        ValueError: If the value is not ISO 8601
    """
    if not isinstance(value, str):
        raise ValueError(f"Date must be a string, got {type(value)}")

    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError as e:
        raise ValueError(f"Invalid date format: {value}") from e

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


@dataclass(frozen=True)
class ModelDescriptor:
    """
    A model as listed in the catalog.

    Attributes:
        owner: Account that publishes the model
        name: Model name, unique per owner
        url: Public page of the model
        description: Free-text summary (may be empty)
        run_count: Lifetime run total reported by the catalog
    """

    owner: str
    name: str
    url: str = ""
    description: str | None = None
    run_count: int = 0

    @property
    def key(self) -> str:
        """Catalog key in owner/name form"""
        return f"{self.owner}/{self.name}"


@dataclass(frozen=True)
class DailyStatEntry:
    """Daily run count. ``date`` is kept as the ISO string from the source."""

    date: str
    daily_runs: int = 0

    @property
    def instant(self) -> datetime:
        return parse_iso_instant(self.date)


@dataclass(frozen=True)
class ReportWindow:
    """
    Inclusive aggregation range.

    Attributes:
        start: First instant inside the window
        end: Last instant inside the window
    """

    start: datetime
    end: datetime

    def __post_init__(self) -> None:
        if self.end < self.start:
            raise ValueError(f"window end {self.end} is before start {self.start}")

    def contains(self, instant: datetime) -> bool:
        """True if ``start <= instant <= end``"""
        return self.start <= instant <= self.end

    @property
    def label(self) -> str:
        """
        Human-readable range, e.g. "Oct 10 - Oct 16, 2026".
        """
        return f"{month_day(self.start)} - {month_day(self.end)}, {self.end.year}"


@dataclass
class ModelMetric:
    """
    Week-over-week usage figures for a single model.

    Attributes:
        key: owner/name
        url: Model page
        description: Description, or NO_DESCRIPTION when the catalog has none
        this_week_runs: Runs summed over the current window
        last_week_runs: Runs summed over the previous window
        total_runs: Lifetime run count from the catalog
        first_seen: Earliest date with recorded stats, or None
    """

    key: str
    url: str
    description: str
    this_week_runs: int
    last_week_runs: int
    total_runs: int
    first_seen: datetime | None = None

    @property
    def absolute_change(self) -> int:
        return self.this_week_runs - self.last_week_runs

    @property
    def percent_change(self) -> float:
        """
        Change relative to last week, in percent.

        Without a previous-week baseline any activity counts as 100% and no
        activity as 0%.
        """
        if self.last_week_runs > 0:
            return self.absolute_change / self.last_week_runs * 100
        return 100.0 if self.this_week_runs > 0 else 0.0


@dataclass
class WeeklyReport:
    """
    Ranked lists for one report run.

    Attributes:
        current_window: Window the report covers
        previous_window: Window it is compared against
        model_count: Number of models analyzed
        top_this_week: Most-run models this week
        gainers_absolute: Largest increase in runs
        gainers_percent: Largest relative increase (established models only)
        new_this_week: Models first seen inside the current window
    """

    current_window: ReportWindow
    previous_window: ReportWindow
    model_count: int
    top_this_week: list[ModelMetric] = field(default_factory=list)
    gainers_absolute: list[ModelMetric] = field(default_factory=list)
    gainers_percent: list[ModelMetric] = field(default_factory=list)
    new_this_week: list[ModelMetric] = field(default_factory=list)

    @property
    def date_range(self) -> str:
        return self.current_window.label
