"""Ranking rules for the weekly digest

Each list has its own sort key: primary figure first, tie-break second, both
descending. Python's sort is stable, so models that tie on both keys stay in
catalog order.
"""

from weekly_digest.domain import ModelMetric, ReportWindow, WeeklyReport

LIST_SIZE = 10

# Percent gains on tiny baselines are noise
MIN_LAST_WEEK_RUNS_FOR_PERCENT = 1000


def by_this_week_then_total(metric: ModelMetric) -> tuple[int, int]:
    return (-metric.this_week_runs, -metric.total_runs)


def by_absolute_change_then_this_week(metric: ModelMetric) -> tuple[int, int]:
    return (-metric.absolute_change, -metric.this_week_runs)


def by_percent_change_then_this_week(metric: ModelMetric) -> tuple[float, int]:
    return (-metric.percent_change, -metric.this_week_runs)


def top_this_week(metrics: list[ModelMetric], limit: int = LIST_SIZE) -> list[ModelMetric]:
    """Most runs in the current window"""
    return sorted(metrics, key=by_this_week_then_total)[:limit]


def biggest_gainers_absolute(metrics: list[ModelMetric], limit: int = LIST_SIZE) -> list[ModelMetric]:
    """Largest increase in runs over last week"""
    return sorted(metrics, key=by_absolute_change_then_this_week)[:limit]


def biggest_gainers_percent(
    metrics: list[ModelMetric],
    limit: int = LIST_SIZE,
    min_last_week_runs: int = MIN_LAST_WEEK_RUNS_FOR_PERCENT,
) -> list[ModelMetric]:
    """Largest relative increase among models with an established baseline"""
    established = [m for m in metrics if m.last_week_runs >= min_last_week_runs]
    return sorted(established, key=by_percent_change_then_this_week)[:limit]


def new_this_week(metrics: list[ModelMetric], window: ReportWindow, limit: int = LIST_SIZE) -> list[ModelMetric]:
    """Models whose first recorded day falls inside the window"""
    debuts = [m for m in metrics if m.first_seen is not None and window.contains(m.first_seen)]
    return sorted(debuts, key=by_this_week_then_total)[:limit]


def build_weekly_report(
    metrics: list[ModelMetric],
    current_window: ReportWindow,
    previous_window: ReportWindow,
) -> WeeklyReport:
    """Rank the metrics into the four report lists

    Args:
        metrics: One metric per model
        current_window: Window the report covers (used for new-model detection)
        previous_window: Comparison window

    Returns:
        WeeklyReport ready for rendering
    """
    return WeeklyReport(
        current_window=current_window,
        previous_window=previous_window,
        model_count=len(metrics),
        top_this_week=top_this_week(metrics),
        gainers_absolute=biggest_gainers_absolute(metrics),
        gainers_percent=biggest_gainers_percent(metrics),
        new_this_week=new_this_week(metrics, current_window),
    )
