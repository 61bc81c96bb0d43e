"""CLI utilities for fetching and summarizing data from NASA APIs."""
from __future__ import annotations

import json
from pathlib import Path

import typer

from orbitwatch.config import configure_logging
from orbitwatch.ingest.nasa_api import NASAAPIClient
from orbitwatch.processing.visualization import process_neo_data

app = typer.Typer(help="Interact with NASA APIs using the configured API key")


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging")) -> None:
    configure_logging(verbose)


def _write_output(payload: str, output: Path | None) -> None:
    if output:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(payload, encoding="utf-8")
        typer.secho(f"Response written to {output}", fg=typer.colors.GREEN)
    else:
        typer.echo(payload)


@app.command()
def apod(date: str = typer.Option(None, help="Target date YYYY-MM-DD"), output: Path | None = None) -> None:
    """Fetch Astronomy Picture of the Day metadata."""
    client = NASAAPIClient()
    data = client.apod(date=date)
    _write_output(json.dumps(data, indent=2), output)


@app.command()
def neo_feed(
    start_date: str = typer.Argument(..., help="First date YYYY-MM-DD"),
    end_date: str = typer.Argument(..., help="Last date YYYY-MM-DD"),
    output: Path | None = typer.Option(None, help="Optional path to dump JSON response"),
) -> None:
    """List Near Earth Objects approaching between two dates."""
    client = NASAAPIClient()
    try:
        data = client.neo_feed(start_date, end_date)
    except ValueError as exc:
        typer.secho(str(exc), fg=typer.colors.RED, err=True)
        raise typer.Exit(code=2)
    _write_output(json.dumps(data, indent=2), output)


@app.command()
def neo(neo_id: str = typer.Argument(..., help="NEO reference id"), output: Path | None = None) -> None:
    """Fetch the raw record for a single NEO."""
    client = NASAAPIClient()
    _write_output(json.dumps(client.neo_by_id(neo_id), indent=2), output)


@app.command()
def visualize(
    neo_id: str = typer.Argument(..., help="NEO reference id"),
    output: Path | None = typer.Option(None, help="Optional path to dump JSON response"),
) -> None:
    """Fetch a NEO and print its approach trend, statistics and risk assessment."""
    client = NASAAPIClient()
    processed = process_neo_data(client.neo_by_id(neo_id))
    assessment = processed.hazard_assessment
    typer.secho(
        f"{processed.name}: {assessment.risk_level} risk ({assessment.risk_score}/100)",
        fg=typer.colors.RED if assessment.risk_level == "high" else typer.colors.GREEN,
        err=True,
    )
    _write_output(json.dumps(json.loads(processed.to_json()), indent=2), output)


if __name__ == "__main__":  # pragma: no cover
    app()
