from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

import typer

from cli.client import ApiClient
from cli.config import CLIConfig, load_config
from cli.render import render_assessment, render_assessment_table, render_usage


@dataclass
class CLIState:
    config: CLIConfig
    client: ApiClient


app = typer.Typer(
    help="Utilities for interacting with the energy assessment service.",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def _get_state(ctx: typer.Context) -> CLIState:
    state = ctx.obj
    if not isinstance(state, CLIState):
        raise typer.Exit(code=1, message="CLI state is uninitialized.")
    return state


@app.callback()
def main(
    ctx: typer.Context,
    base_url: Optional[str] = typer.Option(
        None,
        "--base-url",
        "-b",
        help="Service base URL (defaults to API_BASE_URL env or http://localhost:8000).",
    ),
    timeout: Optional[float] = typer.Option(
        None,
        "--timeout",
        help="Seconds to wait for each request.",
    ),
    caller: Optional[str] = typer.Option(
        None,
        "--caller",
        "-c",
        help="Identity sent as X-Caller-Id (defaults to CLI_CALLER_ID env).",
    ),
) -> None:
    """Entry point for the CLI."""
    config = load_config(base_url=base_url, timeout=timeout, caller_id=caller)
    client = ApiClient(config)
    ctx.obj = CLIState(config=config, client=client)
    ctx.call_on_close(client.close)


@app.command("create")
def create_command(
    ctx: typer.Context,
    address: str = typer.Option(..., "--address", help="Property address."),
    rating: float = typer.Option(..., "--rating", help="Efficiency rating, must be > 0."),
    savings: float = typer.Option(..., "--savings", help="Projected cost savings, must be > 0."),
    recommendations: str = typer.Option("", "--recommendations", help="Free-form advice."),
) -> None:
    """Create a new energy assessment."""
    state = _get_state(ctx)
    payload = state.client.create_assessment(
        {
            "address": address,
            "efficiency_rating": rating,
            "cost_savings": savings,
            "recommendations": recommendations,
        }
    )
    typer.secho(f"Assessment created. id={payload.get('id')}", fg=typer.colors.GREEN)
    render_assessment(payload)


@app.command("show")
def show_command(
    ctx: typer.Context,
    assessment_id: str = typer.Argument(..., help="Assessment identifier."),
) -> None:
    """Display a single assessment."""
    state = _get_state(ctx)
    render_assessment(state.client.get_assessment(assessment_id))


@app.command("list")
def list_command(ctx: typer.Context) -> None:
    """List every stored assessment."""
    state = _get_state(ctx)
    render_assessment_table(state.client.list_assessments())


@app.command("update")
def update_command(
    ctx: typer.Context,
    assessment_id: str = typer.Argument(..., help="Assessment identifier."),
    address: Optional[str] = typer.Option(None, "--address"),
    rating: Optional[float] = typer.Option(None, "--rating"),
    savings: Optional[float] = typer.Option(None, "--savings"),
    recommendations: Optional[str] = typer.Option(None, "--recommendations"),
) -> None:
    """Update selected fields of an assessment."""
    state = _get_state(ctx)
    changes: Dict[str, Any] = {
        "address": address,
        "efficiency_rating": rating,
        "cost_savings": savings,
        "recommendations": recommendations,
    }
    payload = {key: value for key, value in changes.items() if value is not None}
    if not payload:
        raise typer.BadParameter("Supply at least one field to update.")
    render_assessment(state.client.update_assessment(assessment_id, payload))


@app.command("delete")
def delete_command(
    ctx: typer.Context,
    assessment_id: str = typer.Argument(..., help="Assessment identifier."),
) -> None:
    """Delete an assessment."""
    state = _get_state(ctx)
    payload = state.client.delete_assessment(assessment_id)
    typer.secho(f"Deleted assessment {payload.get('id')}.", fg=typer.colors.GREEN)


@app.command("add-usage")
def add_usage_command(
    ctx: typer.Context,
    assessment_id: str = typer.Argument(..., help="Assessment identifier."),
    timestamp: int = typer.Option(..., "--timestamp", "-t", help="Logical time of the reading."),
    consumption: float = typer.Option(..., "--consumption", help="Consumed energy."),
) -> None:
    """Append a usage reading to an assessment."""
    state = _get_state(ctx)
    payload = state.client.append_usage(assessment_id, timestamp, consumption)
    history = payload.get("usage_history") or []
    typer.secho(
        f"Reading recorded. {len(history)} reading(s) on file.", fg=typer.colors.GREEN
    )


@app.command("history")
def history_command(
    ctx: typer.Context,
    assessment_id: str = typer.Argument(..., help="Assessment identifier."),
) -> None:
    """Show the usage history of an assessment."""
    state = _get_state(ctx)
    render_usage(state.client.get_usage_history(assessment_id))


@app.command("total")
def total_command(
    ctx: typer.Context,
    assessment_id: str = typer.Argument(..., help="Assessment identifier."),
) -> None:
    """Show the total consumption recorded for an assessment."""
    state = _get_state(ctx)
    payload = state.client.total_consumption(assessment_id)
    typer.echo(f"total_consumption: {payload.get('total_consumption')}")


@app.command("high-efficiency")
def high_efficiency_command(
    ctx: typer.Context,
    threshold: float = typer.Argument(..., help="Minimum efficiency rating, must be > 0."),
) -> None:
    """List assessments rated at or above a threshold."""
    state = _get_state(ctx)
    render_assessment_table(state.client.high_efficiency(threshold))
