"""CLI entry-point: python -m festquest [search|list]."""

from __future__ import annotations

import asyncio

import typer

from festquest.aggregate import aggregate_outcomes, merge
from festquest.base import get_providers
from festquest.config import configure_logging, get_settings
from festquest.models import SearchQuery
from festquest.summary import summarize

app = typer.Typer(help="FestQuest – multi-source event search")


@app.command()
def search(
    city: str | None = typer.Option(None, "--city", "-c", help="City to search in."),
    keyword: str | None = typer.Option(None, "--keyword", "-k", help="Free-text keyword."),
    country: str | None = typer.Option(None, "--country", help="ISO country code."),
    start: str | None = typer.Option(None, "--start", help="Start date, YYYY-MM-DD."),
    end: str | None = typer.Option(None, "--end", help="End date, YYYY-MM-DD."),
    provider: list[str] | None = typer.Option(
        None, "--provider", "-p", help="Provider name(s) to query. Omit for all."
    ),
    tone: str | None = typer.Option(None, "--tone", help="Summary tone hint."),
    summary: bool = typer.Option(False, "--summary", "-s", help="Also print a summary."),
) -> None:
    """Search providers and print merged events."""
    settings = get_settings()
    configure_logging(settings.log_level)
    query = SearchQuery(
        city=city,
        keyword=keyword,
        country_code=country,
        start_date=start,
        end_date=end,
        providers=provider or None,
        tone=tone,
    )

    async def _run():
        outcomes = await aggregate_outcomes(query, settings=settings)
        events = merge(outcomes)
        result = await summarize(events, query.context(), settings=settings) if summary else None
        return outcomes, events, result

    outcomes, events, result = asyncio.run(_run())

    for outcome in outcomes:
        if not outcome.ok:
            typer.echo(f"  ! {outcome.source}: {outcome.error}", err=True)
    for event in events:
        where = ", ".join(p for p in (event.venue_name, event.city) if p)
        typer.echo(f"{event.date or '----------'}  {event.name}  [{event.source.value}]  {where}")
    typer.echo(f"Found {len(events)} event(s).")

    if result is not None:
        typer.echo("")
        typer.echo(result.text)
        if result.error_detail:
            typer.echo(f"(AI summary unavailable: {result.error_detail})", err=True)


@app.command(name="list")
def list_providers() -> None:
    """List registered providers."""
    registry = get_providers()
    if not registry:
        typer.echo("No providers registered.")
        raise typer.Exit()
    settings = get_settings()
    for name, cls in registry.items():
        state = "configured" if cls(settings=settings).is_configured() else "not configured"
        typer.echo(f"  {name:<14} {state}")


if __name__ == "__main__":
    app()
