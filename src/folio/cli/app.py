"""Command-line entry point for Folio."""

from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from folio.core.catalog import SiteCatalog, load_site
from folio.core.config import FolioConfig
from folio.core.exceptions import ConfigError, ContentLoadError, ManifestError
from folio.core.loader import parse_frontmatter
from folio.core.logging import get_logger, setup_logging
from folio.core.manifest import DEFAULT_MANIFEST, check_manifest_parity, load_manifest
from folio.core.reading_time import DEFAULT_WORDS_PER_MINUTE, estimate_read_minutes, estimate_read_minutes_from_html

app = typer.Typer(
    name="folio",
    help="Validate blog posts and author profiles before they are published.",
    add_completion=False,
)

console = Console()
logger = get_logger(__name__)


@app.callback()
def main(
    log_level: Annotated[str, typer.Option("--log-level", help="Logging level.")] = "WARNING",
    log_file: Annotated[Path | None, typer.Option("--log-file", help="Also write logs to this file.")] = None,
) -> None:
    """Configure logging for every command."""
    setup_logging(log_level, log_file)


def _print_rejected(catalog: SiteCatalog) -> None:
    for record in catalog.rejected:
        where = f"{record.collection}/{record.slug}"
        if record.reason:
            console.print(f"[red]✗[/red] {escape(where)}: {escape(record.reason)}", soft_wrap=True)
        for error in record.errors:
            console.print(
                f"[red]✗[/red] {escape(where)} {escape(error.field)}: "
                f"[bold]{error.kind.value}[/bold] {escape(error.message)}",
                soft_wrap=True,
            )


def _print_posts(catalog: SiteCatalog) -> None:
    table = Table(title="Published posts")
    table.add_column("Post")
    table.add_column("Date")
    table.add_column("Authors")
    table.add_column("Minutes", justify="right")
    for post in catalog.posts:
        names = ", ".join(author.name or "?" for author in catalog.display_authors(post))
        table.add_row(post.id, post.pub_date.isoformat(), names or "-", str(catalog.read_minutes(post)))
    console.print(table)


@app.command()
def check(
    site_root: Annotated[Path | None, typer.Argument(help="Site root (defaults to the current directory).")] = None,
    show_posts: Annotated[bool, typer.Option("--list", help="List the posts that passed validation.")] = False,
) -> None:
    """
    Validate every author and post, reporting all problems at once.
    """
    try:
        config = FolioConfig.load(site_root)
    except ConfigError as exc:
        console.print(f"[bold red]Configuration error:[/] {escape(str(exc))}")
        raise typer.Exit(code=2) from exc

    catalog = load_site(config)

    if show_posts:
        _print_posts(catalog)

    if not catalog.ok:
        _print_rejected(catalog)
        console.print(f"\n[bold red]{len(catalog.rejected)} record(s) rejected.[/bold red]")
        raise typer.Exit(code=1)

    console.print(
        f"[bold green]All content is valid:[/bold green] {len(catalog.authors)} author(s), {len(catalog.posts)} post(s)."
    )


@app.command("read-time")
def read_time(
    path: Annotated[Path, typer.Argument(help="File whose body to measure.", exists=True, dir_okay=False)],
    html: Annotated[bool, typer.Option("--html", help="Treat the file as rendered HTML.")] = False,
    words_per_minute: Annotated[int, typer.Option("--wpm", min=1, help="Reading speed.")] = DEFAULT_WORDS_PER_MINUTE,
) -> None:
    """
    Print the estimated reading time of a file, in minutes.
    """
    text = path.read_text(encoding="utf-8")
    if html:
        minutes = estimate_read_minutes_from_html(text, words_per_minute)
    else:
        try:
            _, body = parse_frontmatter(text, source=path)
        except ContentLoadError as exc:
            console.print(f"[bold red]{escape(str(exc))}[/bold red]")
            raise typer.Exit(code=2) from exc
        minutes = estimate_read_minutes(body, words_per_minute)
    logger.debug("Estimated %d minute(s) for %s", minutes, path)
    console.print(minutes)


@app.command()
def manifest(
    path: Annotated[
        Path | None, typer.Argument(help="Manifest YAML to check (defaults to the built-in manifest).")
    ] = None,
) -> None:
    """
    Check that an editing-tool manifest matches the fields the validator enforces.
    """
    if path is None:
        collections = list(DEFAULT_MANIFEST)
        source = "built-in manifest"
    else:
        try:
            collections = load_manifest(path)
        except ManifestError as exc:
            console.print(f"[bold red]{escape(str(exc))}[/bold red]")
            raise typer.Exit(code=2) from exc
        source = str(path)

    issues = check_manifest_parity(collections)
    if issues:
        for issue in issues:
            console.print(
                f"[red]✗[/red] {escape(issue.collection)}.{escape(issue.field)}: {escape(issue.message)}",
                soft_wrap=True,
            )
        raise typer.Exit(code=1)

    console.print(f"[bold green]Manifest in sync:[/bold green] {escape(source)}")


if __name__ == "__main__":
    app()
