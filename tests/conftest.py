"""
Pytest configuration and shared fixtures

Reference date for every fixture: 2026-10-18, so the current window is
Oct 11 - Oct 17 and the previous window is Oct 4 - Oct 10.
"""

import json
import logging
from datetime import date, datetime, timedelta

import pytest

from weekly_digest.domain import DailyStatEntry, ModelDescriptor, ModelMetric, ReportWindow
from weekly_digest.reports.weekly.data_loader import Catalog

EMAIL_ENV_VARS = ["TO_EMAILS", "FROM_EMAIL", "SMTP_HOST", "SMTP_PORT", "SMTP_USER", "SMTP_PASS"]


@pytest.fixture
def reference_date():
    """The run's "today" for all window calculations"""
    return date(2026, 10, 18)


@pytest.fixture
def current_window():
    return ReportWindow(datetime(2026, 10, 11), datetime(2026, 10, 17))


@pytest.fixture
def previous_window():
    return ReportWindow(datetime(2026, 10, 4), datetime(2026, 10, 10))


def daily_stats(first_day: date, runs: list[int]) -> list[DailyStatEntry]:
    """One entry per consecutive day starting at first_day"""
    return [
        DailyStatEntry(date=(first_day + timedelta(days=i)).isoformat(), daily_runs=count)
        for i, count in enumerate(runs)
    ]


@pytest.fixture
def make_metric():
    """Factory for ModelMetric with sensible defaults"""

    def _make(key="owner/model", this_week=0, last_week=0, total=0, first_seen=None, description="A model"):
        return ModelMetric(
            key=key,
            url=f"https://replicate.com/{key}",
            description=description,
            this_week_runs=this_week,
            last_week_runs=last_week,
            total_runs=total,
            first_seen=first_seen,
        )

    return _make


@pytest.fixture
def sample_catalog():
    """Three models: steady, growing, and brand new this week"""
    models = [
        ModelDescriptor(owner="acme", name="steady", url="https://replicate.com/acme/steady", description="Steady model", run_count=50000),
        ModelDescriptor(owner="acme", name="rising", url="https://replicate.com/acme/rising", description="", run_count=20000),
        ModelDescriptor(owner="newco", name="debut", url="https://replicate.com/newco/debut", description="Fresh", run_count=900),
    ]
    stats = {
        # Oct 4 - Oct 17: 100/day both weeks
        "acme/steady": daily_stats(date(2026, 10, 4), [100] * 14),
        # 1000/day last week, 2000/day this week
        "acme/rising": daily_stats(date(2026, 10, 4), [1000] * 7 + [2000] * 7),
        # First seen Oct 15
        "newco/debut": daily_stats(date(2026, 10, 15), [300, 300, 300]),
    }
    return Catalog(models=models, stats=stats)


@pytest.fixture
def catalog_files(tmp_path):
    """Write models.json and stats.json; returns (models_path, stats_path)"""
    models = [
        {"owner": "acme", "name": "steady", "url": "https://replicate.com/acme/steady", "description": "Steady model", "run_count": 50000},
        {"owner": "newco", "name": "debut", "url": "https://replicate.com/newco/debut", "description": None, "run_count": 900},
    ]
    stats = {
        "acme/steady": [{"date": f"2026-10-{day:02d}", "dailyRuns": 100} for day in range(4, 18)],
        "newco/debut": [{"date": "2026-10-15", "dailyRuns": 300}, {"date": "2026-10-16"}],
    }
    models_path = tmp_path / "models.json"
    stats_path = tmp_path / "stats.json"
    models_path.write_text(json.dumps(models), encoding="utf-8")
    stats_path.write_text(json.dumps(stats), encoding="utf-8")
    return models_path, stats_path


@pytest.fixture
def clean_email_env(monkeypatch):
    """Remove email settings so tests control them explicitly"""
    for name in EMAIL_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.fixture
def email_env(clean_email_env):
    """A complete, valid set of email settings"""
    clean_email_env.setenv("TO_EMAILS", "alice@example.com, bob@example.com ,carol@example.com")
    clean_email_env.setenv("FROM_EMAIL", "digest@example.com")
    clean_email_env.setenv("SMTP_HOST", "smtp.example.com")
    clean_email_env.setenv("SMTP_USER", "digest@example.com")
    clean_email_env.setenv("SMTP_PASS", "app-password-123")
    return clean_email_env


@pytest.fixture(autouse=True)
def restore_root_logger():
    """setup_logging() replaces root handlers; put the originals back after each test"""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)
