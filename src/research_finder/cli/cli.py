"""Command-line interface for research-finder."""

import asyncio
import logging
from pathlib import Path

import click

from research_finder.client.exporter import Exporter, FileDownloadSink
from research_finder.client.search_controller import SearchController, SearchStatus
from research_finder.client.table_state import SORT_KEYS, SortDirection
from research_finder.config import get_settings
from research_finder.constants import CONTROLLER_ROWS, DEFAULT_PAGE_SIZE, PAGE_SIZE_OPTIONS
from research_finder.data_sources.search_api import SearchApiClient


@click.group()
@click.version_option(package_name="research-finder")
def main():
    """Research Finder: search Crossref and export result pages."""
    logging.basicConfig(
        level=get_settings().log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@main.command()
@click.option("--host", default=None, help="Bind address (defaults to HOST)")
@click.option("--port", type=int, default=None, help="Port (defaults to PORT)")
def serve(host: str | None, port: int | None):
    """Run the search gateway."""
    import uvicorn

    from research_finder.api.main import create_app

    settings = get_settings()
    uvicorn.run(
        create_app(settings),
        host=host or settings.host,
        port=port or settings.port,
        log_level=settings.log_level.lower(),
    )


@main.command()
@click.argument("query")
@click.option("--api-url", default=None, help="Gateway base URL (defaults to localhost:PORT)")
@click.option("-r", "--rows", default=CONTROLLER_ROWS, show_default=True, help="Rows to request")
@click.option("-s", "--sort-by", type=click.Choice(sorted(SORT_KEYS)), help="Sort column")
@click.option("--desc", is_flag=True, help="Sort descending")
@click.option("-p", "--page", default=1, show_default=True, help="Page number (1-based)")
@click.option(
    "--page-size",
    type=click.Choice([str(n) for n in PAGE_SIZE_OPTIONS]),
    default=str(DEFAULT_PAGE_SIZE),
    show_default=True,
    callback=lambda _ctx, _param, value: int(value),
    help="Rows per page",
)
@click.option("-e", "--export", "export_format", type=click.Choice(["csv", "pdf"]), help="Export the page")
@click.option("-o", "--out", type=click.Path(file_okay=False), default=".", help="Export directory")
def search(
    query: str,
    api_url: str | None,
    rows: int,
    sort_by: str | None,
    desc: bool,
    page: int,
    page_size: int,
    export_format: str | None,
    out: str,
):
    """Search through a running gateway and print one page of results."""
    if page < 1:
        raise click.BadParameter("page must be >= 1", param_hint="--page")
    base_url = api_url or f"http://localhost:{get_settings().port}"
    controller = asyncio.run(_run_search(base_url, query, rows, page_size))

    if controller.status is SearchStatus.FAILED:
        raise click.ClickException(str(controller.error))

    if sort_by:
        controller.table.sort_by(sort_by, SortDirection.DESC if desc else SortDirection.ASC)
    controller.table.go_to_page(page - 1)
    visible = controller.visible_rows()

    total_pages = controller.table.page_count(len(controller.results))
    click.echo(
        f"{controller.result.total} results for {controller.current_query!r} "
        f"(page {min(page, max(total_pages, 1))} of {max(total_pages, 1)})"
    )
    for item in visible:
        authors = ", ".join(a for a in item.authors if a) or "-"
        click.echo(f"  [{item.year or '----'}] {item.title or '(untitled)'}")
        click.echo(f"      {authors} | {item.journal or '-'} | {item.doi_url or '-'}")

    if export_format:
        sink = FileDownloadSink(Path(out))
        exporter = Exporter(sink)
        page_index = min(page - 1, max(total_pages - 1, 0))
        if export_format == "csv":
            exporter.export_csv(visible, page_index=page_index)
        else:
            exporter.export_pdf(
                visible, page_index=page_index, heading=f"Research results: {query}"
            )
        click.echo(f"\nExported to: {sink.written[-1]}")


async def _run_search(base_url: str, query: str, rows: int, page_size: int) -> SearchController:
    async with SearchApiClient(base_url) as api:
        if not await api.health():
            raise click.ClickException(f"Search gateway not reachable at {base_url}")
        controller = SearchController(api, rows=rows, page_size=page_size)
        await controller.search(query)
    return controller


if __name__ == "__main__":
    main()
