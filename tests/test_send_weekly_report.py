"""
Tests for the weekly report command-line entry point
"""

import json
from datetime import date
from unittest.mock import patch

import pytest

from weekly_digest.send_email import DeliveryError
from weekly_digest.send_weekly_report import build_report, main, parse_arguments, print_confirmation

RECIPIENTS = ["alice@example.com", "bob@example.com", "carol@example.com"]


@pytest.fixture
def cli_args(catalog_files):
    models_path, stats_path = catalog_files
    return ["--models-file", str(models_path), "--stats-file", str(stats_path), "--date", "2026-10-18"]


class TestParseArguments:
    def test_defaults(self):
        args = parse_arguments([])
        assert args.dry_run is False
        assert args.date is None
        assert args.output is None
        assert args.log_level == "INFO"
        assert args.log_file is None
        assert args.json_logs is False

    def test_date_parsed(self):
        assert parse_arguments(["--date", "2026-10-18"]).date == date(2026, 10, 18)

    def test_invalid_date_rejected(self):
        with pytest.raises(SystemExit):
            parse_arguments(["--date", "18/10/2026"])


class TestBuildReport:
    def test_lists(self, sample_catalog, reference_date):
        report = build_report(sample_catalog, reference_date)

        assert report.model_count == 3
        assert [m.key for m in report.top_this_week] == ["acme/rising", "newco/debut", "acme/steady"]
        assert [m.key for m in report.gainers_absolute] == ["acme/rising", "newco/debut", "acme/steady"]
        # acme/steady had only 700 runs last week
        assert [m.key for m in report.gainers_percent] == ["acme/rising"]
        assert [m.key for m in report.new_this_week] == ["newco/debut"]


def test_print_confirmation(capsys):
    print_confirmation(RECIPIENTS, 1234, "Oct 11 - Oct 17, 2026")
    out = capsys.readouterr().out

    assert "sent successfully to 3 recipients" in out
    for email in RECIPIENTS:
        assert email in out
    assert "Report covers 1,234 models" in out
    assert "Period: Oct 11 - Oct 17, 2026" in out


class TestMain:
    """End-to-end runs with SMTP mocked out"""

    def test_success(self, cli_args, email_env, capsys):
        with patch("weekly_digest.send_weekly_report.send_report", return_value=list(RECIPIENTS)) as mock_send:
            exit_code = main(cli_args)

        assert exit_code == 0
        mock_send.assert_called_once()
        config, subject, html_body, text_body = mock_send.call_args.args
        assert config.to_emails == RECIPIENTS
        assert subject == "Replicate Weekly Update: Oct 11 - Oct 17, 2026"
        assert "acme/steady" in html_body
        assert "acme/steady" in text_body

        out = capsys.readouterr().out
        assert "sent successfully to 3 recipients" in out
        for email in RECIPIENTS:
            assert email in out
        assert "Report covers 2 models" in out
        assert "Period: Oct 11 - Oct 17, 2026" in out

    def test_missing_configuration(self, cli_args, clean_email_env, capsys):
        with patch("weekly_digest.send_weekly_report.send_report") as mock_send:
            exit_code = main(cli_args)

        assert exit_code == 1
        mock_send.assert_not_called()
        err = capsys.readouterr().err
        assert "Missing required environment variables:" in err
        assert "- SMTP_PASS: SMTP password or app password" in err

    def test_delivery_failure(self, cli_args, email_env, capsys):
        with patch("weekly_digest.send_weekly_report.send_report", side_effect=DeliveryError("SMTP error: boom")):
            exit_code = main(cli_args)

        assert exit_code == 1
        assert "Failed to send email: SMTP error: boom" in capsys.readouterr().err

    def test_missing_catalog(self, tmp_path, email_env, capsys):
        exit_code = main(["--models-file", str(tmp_path / "nope.json"), "--stats-file", str(tmp_path / "s.json")])

        assert exit_code == 1
        assert "Catalog file not found" in capsys.readouterr().err

    def test_dry_run_needs_no_config(self, cli_args, clean_email_env, tmp_path, capsys):
        output = tmp_path / "report.html"
        with patch("weekly_digest.send_weekly_report.send_report") as mock_send:
            exit_code = main(cli_args + ["--dry-run", "--output", str(output)])

        assert exit_code == 0
        mock_send.assert_not_called()
        assert output.exists()
        assert "newco/debut" in output.read_text(encoding="utf-8")
        assert "[DRY RUN] Replicate Weekly Update: Oct 11 - Oct 17, 2026" in capsys.readouterr().out

    def test_invalid_port_lists_required_settings(self, cli_args, email_env, capsys):
        email_env.setenv("SMTP_PORT", "smtp")
        exit_code = main(cli_args)

        assert exit_code == 1
        err = capsys.readouterr().err
        assert "Invalid configuration: SMTP_PORT must be an integer" in err
        assert "- SMTP_PORT: SMTP server port (default: 587)" in err
        assert "- TO_EMAILS: comma-separated list of recipient email addresses" in err

    def test_display_name_sender_sends(self, cli_args, email_env):
        email_env.setenv("FROM_EMAIL", "Model Digest <digest@example.com>")
        with patch("weekly_digest.send_weekly_report.send_report", return_value=list(RECIPIENTS)) as mock_send:
            assert main(cli_args) == 0
        assert mock_send.call_args.args[0].sender_address == "digest@example.com"


class TestLoggingFlags:
    def test_log_file_receives_json(self, cli_args, tmp_path):
        log_file = tmp_path / "logs" / "digest.log"
        assert main(cli_args + ["--dry-run", "--log-file", str(log_file)]) == 0

        entries = [json.loads(line) for line in log_file.read_text(encoding="utf-8").splitlines()]
        ranked = [entry for entry in entries if entry["message"] == "Report ranked"]
        assert ranked[0]["model_count"] == 2

    def test_json_logs_on_stderr(self, cli_args, capsys):
        assert main(cli_args + ["--dry-run", "--json-logs"]) == 0

        err_lines = [line for line in capsys.readouterr().err.splitlines() if line.strip()]
        entries = [json.loads(line) for line in err_lines]
        assert any(entry["message"] == "Report ranked" for entry in entries)
        assert all(entry["level"] in ("DEBUG", "INFO", "WARNING", "ERROR") for entry in entries)
