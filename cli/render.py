from __future__ import annotations

from typing import Any, Dict, Iterable, List

import typer


def echo_heading(text: str) -> None:
    typer.secho(text, bold=True)


def echo_key_values(pairs: Iterable[tuple[str, Any]]) -> None:
    for key, value in pairs:
        typer.echo(f"{key}: {value}")


def render_usage(readings: List[Dict[str, Any]]) -> None:
    echo_heading("Usage History")
    if not readings:
        typer.echo("No usage readings recorded.")
        return
    for reading in readings:
        typer.echo(
            f"  - t={reading.get('timestamp')}: {reading.get('consumption')}"
        )


def render_assessment(payload: Dict[str, Any]) -> None:
    echo_heading("Energy Assessment")
    echo_key_values(
        [
            ("id", payload.get("id")),
            ("owner", payload.get("owner")),
            ("address", payload.get("address")),
            ("efficiency_rating", payload.get("efficiency_rating")),
            ("cost_savings", payload.get("cost_savings")),
            ("recommendations", payload.get("recommendations") or "-"),
            ("assessment_date", payload.get("assessment_date")),
            ("created_at", payload.get("created_at")),
            ("updated_at", payload.get("updated_at") or "never"),
        ]
    )
    typer.echo()
    render_usage(payload.get("usage_history") or [])


def render_assessment_table(items: List[Dict[str, Any]]) -> None:
    echo_heading(f"Assessments ({len(items)})")
    if not items:
        typer.echo("No assessments stored.")
        return
    for item in items:
        typer.echo(
            f"  - {item.get('id')} | {item.get('address')} | "
            f"rating={item.get('efficiency_rating')} savings={item.get('cost_savings')}"
        )
