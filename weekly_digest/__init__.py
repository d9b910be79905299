"""
Weekly Model Usage Digest

Computes week-over-week run statistics for a model catalog and emails an
HTML summary.

Package Structure:
    - core: Infrastructure (config, logging)
    - domain: Domain models (ModelDescriptor, ModelMetric, WeeklyReport)
    - reports: Aggregation, ranking and template rendering
    - send_email: SMTP delivery
    - send_weekly_report: Command-line entry point
"""

__version__ = "1.0.0"
