"""Typer CLI for TuneSearch: serve, search and history commands."""

from __future__ import annotations

import asyncio
from typing import Annotated, Optional

import typer

from tunesearch.config import ClientConfig, get_settings
from tunesearch.core.aggregator import PageState, ResultAggregator, SessionState
from tunesearch.core.history import HistoryStore
from tunesearch.services.search.models import SearchResult
from tunesearch.services.search.proxy import ProxySearchService
from tunesearch.storage import create_store
from tunesearch.utils.logging import LogContext, setup_logging

app = typer.Typer(
    name="tunesearch",
    help="TuneSearch: search YouTube music videos from the terminal.",
    no_args_is_help=True,
)
history_app = typer.Typer(help="Manage recent searches.", no_args_is_help=True)
app.add_typer(history_app, name="history")


@app.callback()
def main_options(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log debug output")] = False,
) -> None:
    """TuneSearch command line."""
    if verbose:
        setup_logging(level="DEBUG")


def _history_store() -> HistoryStore:
    settings = get_settings()
    return HistoryStore(create_store(settings.history), default_limit=settings.history.default_limit)


def format_card(index: int, item: SearchResult) -> str:
    """Render one result as a short text card."""
    lines = [f"{index:>3}. {item.title}"]
    byline = item.author_name or "unknown channel"
    if item.published_at:
        byline += f" · {item.published_at:%Y-%m-%d}"
    lines.append(f"     {byline}")
    lines.append(f"     {item.permalink_url}")
    if item.description:
        description = item.description.strip().replace("\n", " ")
        if len(description) > 100:
            description = description[:97] + "..."
        lines.append(f"     {description}")
    return "\n".join(lines)


def _echo_history(entries: list[str], limit: int) -> None:
    if not entries:
        typer.echo("No recent searches.")
        return
    typer.echo(f"Recent searches ({len(entries)}/{limit}):")
    for position, query in enumerate(entries, start=1):
        typer.echo(f"  {position}. {query}")


@app.command()
def serve(
    host: Annotated[Optional[str], typer.Option("--host", help="Bind address")] = None,
    port: Annotated[Optional[int], typer.Option("--port", help="Bind port")] = None,
) -> None:
    """Run the search proxy API."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "tunesearch.api.app:app",
        host=host or settings.api.host,
        port=port or settings.api.port,
        reload=False,
        log_level="info",
    )


@app.command()
def search(
    query: Annotated[str, typer.Argument(help="What to search for")],
    limit: Annotated[Optional[int], typer.Option("--limit", "-l", min=1, max=50, help="Results per page")] = None,
    pages: Annotated[int, typer.Option("--pages", "-p", min=1, help="Pages to load")] = 1,
    api_url: Annotated[Optional[str], typer.Option("--api-url", help="TuneSearch API base URL")] = None,
) -> None:
    """Search and print result cards; successful queries go to history."""
    settings = get_settings()
    config = ClientConfig(
        api_url=api_url or settings.client.api_url,
        page_size=limit or settings.client.page_size,
        timeout=settings.client.timeout,
    )
    state = asyncio.run(_do_search(query, pages, config))
    if state.state == SessionState.ERRORED and not state.items:
        raise typer.Exit(code=1)


async def _do_search(query: str, pages: int, config: ClientConfig) -> PageState:
    """Run one search session and print it."""
    service = ProxySearchService(config)
    aggregator = ResultAggregator(service, page_size=config.page_size)
    history = _history_store()
    await history.load()

    try:
        with LogContext(query=query):
            state = await aggregator.start_search(query)
            if state.state == SessionState.LOADED:
                await history.add(query)
                for _ in range(pages - 1):
                    if not aggregator.has_more:
                        break
                    state = await aggregator.load_more()
                    if state.state == SessionState.ERRORED:
                        break
    finally:
        await service.close()

    if state.error is not None:
        typer.echo(f"Error: {state.error.message}", err=True)
    if not state.items:
        if state.state == SessionState.LOADED:
            typer.echo(f'No videos found for "{query}"')
            typer.echo("Try a different search term")
        return state

    summary = f"Showing {len(state.items)} videos"
    if state.total_estimate:
        summary += f" of {state.total_estimate:,} results"
    typer.echo(f'{summary} for "{query}"\n')
    for index, item in enumerate(state.items, start=1):
        typer.echo(format_card(index, item))
    typer.echo("")
    typer.echo("More results available (use --pages)" if state.has_more else "No more videos to load")
    return state


@history_app.command("show")
def history_show() -> None:
    """List recent searches, most recent first."""
    async def run():
        history = _history_store()
        entries = await history.load()
        _echo_history(entries, history.get_limit())

    asyncio.run(run())


@history_app.command("remove")
def history_remove(query: Annotated[str, typer.Argument(help="Query to forget")]) -> None:
    """Forget one query (case-insensitive)."""
    async def run():
        history = _history_store()
        await history.load()
        entries = await history.remove(query)
        _echo_history(entries, history.get_limit())

    asyncio.run(run())


@history_app.command("move")
def history_move(
    query: Annotated[str, typer.Argument(help="Query to move")],
    position: Annotated[int, typer.Argument(min=1, help="New 1-based position")],
) -> None:
    """Move a query to a new position in the list."""
    async def run():
        history = _history_store()
        entries = await history.load()
        wanted = query.strip().lower()
        current = next((i for i, item in enumerate(entries) if item.lower() == wanted), None)
        if current is None:
            typer.echo(f'"{query}" is not in the search history.', err=True)
            raise typer.Exit(code=1)

        new_order = list(entries)
        moved = new_order.pop(current)
        new_order.insert(min(position, len(entries)) - 1, moved)
        _echo_history(await history.reorder(new_order), history.get_limit())

    asyncio.run(run())


@history_app.command("limit")
def history_limit(
    size: Annotated[int, typer.Argument(help="Maximum number of entries (1-50)")],
) -> None:
    """Change how many searches are remembered."""
    async def run():
        history = _history_store()
        await history.load()
        entries = await history.set_limit(size)
        _echo_history(entries, history.get_limit())

    asyncio.run(run())


@history_app.command("clear")
def history_clear() -> None:
    """Forget all recent searches."""
    async def run():
        history = _history_store()
        await history.load()
        await history.clear()
        typer.echo("Search history cleared.")

    asyncio.run(run())


def main() -> None:
    app()


if __name__ == "__main__":
    main()
