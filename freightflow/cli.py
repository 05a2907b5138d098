"""Command line interface for inspecting freightflow drafts and auto-fill."""

from __future__ import annotations

import asyncio
import json
from datetime import datetime, timezone
from pathlib import Path

import typer

from freightflow.autopopulate import DEFAULT_RULES, AutoPopulationResolver
from freightflow.persistence import epoch_millis, get_draft_store
from freightflow.steps import DEFAULT_STEPS, blank_draft
from freightflow.tracking import FieldEditTracker

app = typer.Typer(help="CLI for freightflow shipment workflows")

# Command groups
draft_app = typer.Typer(help="Commands for managing the saved workflow draft")

app.add_typer(draft_app, name="draft")


@app.callback()
def main() -> None:
    """Freightflow CLI entry point."""
    pass


@draft_app.command("show")
def draft_show() -> None:
    """
    Show the saved workflow draft without consuming it.

    Prints when the snapshot was taken, whether it is still fresh enough to
    resume, the step it was saved at, and which steps were completed.

    Example:
        freightflow draft show
        # Output: Draft saved 2024-01-01T10:00:00+00:00 (fresh)
        #         Current step: 3 (Pickup Request)
        #         Completed steps: 1, 2
    """
    store = get_draft_store()
    snapshot = asyncio.run(store.peek())
    if snapshot is None:
        typer.echo("No draft found")
        raise typer.Exit(code=1)

    saved_at = datetime.fromtimestamp(
        snapshot.saved_at_epoch_millis / 1000, tz=timezone.utc
    )
    fresh = snapshot.age_millis(epoch_millis()) <= store.staleness_millis
    typer.echo(f"Draft saved {saved_at.isoformat()} ({'fresh' if fresh else 'stale'})")
    try:
        state = snapshot.to_state()
    except ValueError:
        typer.secho("Draft payload is unreadable", fg=typer.colors.RED)
        raise typer.Exit(code=1)
    names = {step.id: step.name for step in state.steps}
    typer.echo(f"Current step: {state.current_step_id} ({names[state.current_step_id]})")
    completed = ", ".join(str(s) for s in sorted(state.completed_step_ids)) or "none"
    typer.echo(f"Completed steps: {completed}")


@draft_app.command("clear")
def draft_clear() -> None:
    """Delete the saved workflow draft from every storage tier."""
    store = get_draft_store()
    asyncio.run(store.clear())
    typer.echo("Draft cleared")


@app.command("autofill")
def autofill(
    order_path: Path,
    step: int = typer.Option(1, help="Step whose draft should be filled"),
) -> None:
    """
    Show which fields of a blank step draft an order record would fill.

    Args:
        order_path: JSON file holding one marketplace order record
        step: Step id (1 rate quote, 2 bill of lading)

    Example:
        freightflow autofill order.json --step 2
        # Output: {"consignee.address.cityName": "Reno", ...}
    """
    if step not in {s.id for s in DEFAULT_STEPS}:
        typer.secho(f"Unknown step: {step}", fg=typer.colors.RED)
        raise typer.Exit(code=1)
    try:
        order = json.loads(order_path.read_text())
    except (OSError, json.JSONDecodeError) as exc:
        typer.secho(f"Could not read order: {exc}", fg=typer.colors.RED)
        raise typer.Exit(code=1)
    if not isinstance(order, dict):
        typer.secho("Order must be a JSON object", fg=typer.colors.RED)
        raise typer.Exit(code=1)

    patch = AutoPopulationResolver().apply(
        order, blank_draft(step), DEFAULT_RULES.get(step, []), FieldEditTracker()
    )
    if not patch:
        typer.echo("No fields would be filled.")
        return
    typer.echo(json.dumps(patch, indent=2, sort_keys=True))


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    app()
