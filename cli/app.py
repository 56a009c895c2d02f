from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Optional, Tuple

import typer

from cli.config import load_config
from cli.render import render_report
from delivery.messenger import DeliveryError, SignalMessenger
from logging_config import configure_logging
from services.errors import ReportError
from services.reporter import build_default_reporter

logger = logging.getLogger(__name__)

app = typer.Typer(
    help="Generate air quality reports for a sensor device.",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def default_window(now: Optional[datetime] = None) -> Tuple[datetime, datetime]:
    """Yesterday 00:00 to today 00:00, local time."""
    today = (now or datetime.now()).replace(hour=0, minute=0, second=0, microsecond=0)
    return today - timedelta(days=1), today


def parse_datetime(value: str) -> datetime:
    candidate = value.strip()
    if not candidate:
        raise typer.BadParameter("Date/time is empty.")

    if candidate.endswith("Z"):
        candidate = candidate[:-1] + "+00:00"

    try:
        parsed = datetime.fromisoformat(candidate)
    except ValueError as exc:
        raise typer.BadParameter(f"Invalid date/time {value!r}.") from exc

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


@app.callback()
def main(
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        help="Logging level (defaults to LOG_LEVEL env or INFO).",
    ),
) -> None:
    """Entry point for the CLI."""
    configure_logging(log_level.upper() if log_level else None)


@app.command("report")
def report_command(
    serial_num: str = typer.Option(..., "--serial-num", "-s", help="Device serial number."),
    start: Optional[str] = typer.Option(
        None, "--from", help="Report start date/time (ISO 8601). Defaults to yesterday 00:00."
    ),
    end: Optional[str] = typer.Option(
        None, "--to", help="Report end date/time (ISO 8601). Defaults to today 00:00."
    ),
    policy: Optional[str] = typer.Option(
        None,
        "--policy",
        help="Alert policy: exceedance or range (defaults to REPORT_ALERT_POLICY env).",
    ),
    signal_user: Optional[str] = typer.Option(None, "--signal-user", help="Signal username."),
    signal_group: Optional[str] = typer.Option(None, "--signal-group", help="Signal group id."),
    signal_recipient: Optional[str] = typer.Option(
        None, "--signal-recipient", help="Space separated Signal recipients."
    ),
    keep_charts: bool = typer.Option(
        False, "--keep-charts", help="Leave chart files in place instead of deleting them."
    ),
) -> None:
    """Fetch readings, compose the alert and render one chart per metric."""
    if not serial_num.strip():
        raise typer.BadParameter("Serial number must be provided.", param_hint="--serial-num")

    default_start, default_end = default_window()
    window_start = parse_datetime(start) if start else default_start
    window_end = parse_datetime(end) if end else default_end

    try:
        reporter = build_default_reporter(policy)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="--policy") from exc

    config = load_config(
        signal_user=signal_user,
        signal_group=signal_group,
        signal_recipient=signal_recipient,
    )
    messenger = SignalMessenger(
        user=config.signal_user,
        group=config.signal_group,
        recipients=config.signal_recipients,
    )

    try:
        report = reporter.generate(serial_num.strip(), window_start, window_end)
    except ReportError as exc:
        logger.error("report failed: %s", exc, extra={"serial_num": serial_num})
        typer.secho(f"Report failed: {exc}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc
    finally:
        reporter.shutdown()
        build_default_reporter.cache_clear()

    try:
        render_report(report)
        messenger.send(report.text, report.images)
    except DeliveryError as exc:
        logger.error("delivery failed: %s", exc, extra={"serial_num": serial_num})
        typer.secho(f"Delivery failed: {exc}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc
    finally:
        if not keep_charts:
            report.cleanup()
