"""
WeeklyReportRenderer - subject, HTML and plain-text rendering for the digest

Builds the template context from a WeeklyReport and renders the email body
through the shared Jinja2 environment.
"""

from pathlib import Path
from typing import Any

from weekly_digest.core import get_logger
from weekly_digest.domain import WeeklyReport
from weekly_digest.reports.renderer import render_template

logger = get_logger(__name__)

REPORT_TITLE = "Replicate Weekly Update"
NO_ITEMS = "No items found"


class WeeklyReportRenderer:
    """Renders the weekly digest email"""

    def __init__(self, report: WeeklyReport, title: str = REPORT_TITLE):
        """Initialize renderer with the ranked report

        Args:
            report: Ranked lists and summary counts
            title: Heading used in the subject and the document header
        """
        self.report = report
        self.title = title

    def build_subject(self) -> str:
        """Subject line, e.g. "Replicate Weekly Update: Oct 10 - Oct 16, 2026" """
        return f"{self.title}: {self.report.date_range}"

    def build_sections(self) -> list[dict[str, Any]]:
        """One entry per ranking list, in display order

        ``kind`` selects which stats block the templates show for each model.
        """
        return [
            {"title": "🏆 Top Models This Week", "kind": "top", "models": self.report.top_this_week},
            {"title": "📈 Biggest Gainers (Absolute)", "kind": "absolute", "models": self.report.gainers_absolute},
            {"title": "🚀 Biggest Gainers (Percentage)", "kind": "percent", "models": self.report.gainers_percent},
            {"title": "🆕 New Models This Week", "kind": "new", "models": self.report.new_this_week},
        ]

    def build_context(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "date_range": self.report.date_range,
            "model_count": self.report.model_count,
            "sections": self.build_sections(),
            "no_items": NO_ITEMS,
        }

    def render_html(self) -> str:
        return render_template("reports/weekly_report.html", self.build_context())

    def render_text(self) -> str:
        return render_template("reports/weekly_report.txt", self.build_context())

    def generate_report_file(self, output_path: Path) -> str:
        """Write the HTML body to a file

        Args:
            output_path: Path where HTML file should be written

        Returns:
            Path to generated HTML file as string
        """
        html_content = self.render_html()

        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, "w", encoding="utf-8") as f:
            f.write(html_content)

        logger.info(f"Report written to {output_path} ({len(html_content):,} chars)")
        return str(output_path)
