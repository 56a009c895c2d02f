from __future__ import annotations

from typing import Any, Iterable

import typer

from services.reporter import Report


def echo_heading(text: str) -> None:
    typer.secho(text, bold=True)


def echo_key_values(pairs: Iterable[tuple[str, Any]]) -> None:
    for key, value in pairs:
        typer.echo(f"{key}: {value}")


def render_report(report: Report) -> None:
    echo_heading("Air Quality Report")
    echo_key_values(
        [
            ("samples", report.sample_count),
            ("charts", len(report.images)),
        ]
    )

    typer.echo()
    echo_heading("Alert")
    if report.text:
        typer.echo(report.text)
    else:
        typer.echo("No readings above their limits.")

    typer.echo()
    echo_heading("Charts")
    for image in report.images:
        typer.echo(f"  - {image}")
