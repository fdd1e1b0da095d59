"""Developer CLI for inspecting and resetting the Ellaia data store."""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Annotated, Any

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.json import JSON
from rich.markup import escape
from rich.table import Table

from ellaia.comments.models import CommentStatus
from ellaia.config import EllaiaConfig, load_config, merge_cli_overrides
from ellaia.posts.models import PostFilters, PostStatus
from ellaia.repository.response import ApiResponse
from ellaia.services import Services, create_services
from ellaia.shared.service import EntityService

app = typer.Typer(
    name="ellaia",
    help="Inspect, seed and reset the Ellaia blog data store.",
)

console = Console()

ENTITIES = ("posts", "categories", "authors", "comments", "tags")

# Columns shown by `list`, as (header, record key).
COLUMNS: dict[str, list[tuple[str, str]]] = {
    "posts": [("ID", "id"), ("Title", "title"), ("Status", "status"), ("Published", "publishedAt")],
    "categories": [("ID", "id"), ("Name", "name"), ("Slug", "slug")],
    "authors": [("ID", "id"), ("Name", "name"), ("Role", "role"), ("Email", "email")],
    "comments": [("ID", "id"), ("Post", "postId"), ("Author", "authorName"), ("Status", "status")],
    "tags": [("ID", "id"), ("Name", "name"), ("Slug", "slug")],
}


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        from ellaia import __version__

        console.print(f"ellaia {__version__}")
        raise typer.Exit()


@app.callback()
def callback(
    ctx: typer.Context,
    config_path: Annotated[
        Path | None,
        typer.Option("--config", "-c", help="Path to an .ellaia.toml config file."),
    ] = None,
    data_dir: Annotated[
        Path | None,
        typer.Option("--data-dir", "-d", help="Store collections as JSON files in this directory."),
    ] = None,
    latency_ms: Annotated[
        int | None,
        typer.Option("--latency-ms", min=0, help="Simulated latency per operation."),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", help="Log repository activity to stderr."),
    ] = False,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = False,
) -> None:
    """Ellaia - data access layer for a women's community blog."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        config = merge_cli_overrides(
            load_config(config_path), data_dir=data_dir, latency_ms=latency_ms
        )
    except ValidationError as exc:
        console.print(f"[red]Error:[/red] Invalid configuration: {escape(str(exc))}")
        raise typer.Exit(1)
    ctx.obj = config


def _services(ctx: typer.Context, seed: bool = True) -> Services:
    config: EllaiaConfig = ctx.obj or EllaiaConfig()
    return create_services(config, seed=seed)


def _service_for(services: Services, entity: str) -> EntityService[Any]:
    if entity not in ENTITIES:
        console.print(f"[red]Error:[/red] Unknown entity: {entity}")
        console.print(f"Choose one of: {', '.join(ENTITIES)}")
        raise typer.Exit(1)
    return getattr(services, entity)


def _unwrap(response: ApiResponse[Any]) -> Any:
    if not response.success:
        console.print(f"[red]Error:[/red] {escape(response.message or 'request failed')}")
        raise typer.Exit(1)
    return response.data


@app.command()
def seed(ctx: typer.Context) -> None:
    """Seed every collection that has no stored data yet."""
    services = _services(ctx, seed=False)
    seeded = services.store.seed_if_absent()
    if not seeded:
        console.print("[yellow]All collections already present.[/yellow]")
        return
    console.print(f"[green]Seeded {len(seeded)} collection(s):[/green] {', '.join(seeded)}")


@app.command()
def reset(
    ctx: typer.Context,
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Skip the confirmation prompt."),
    ] = False,
) -> None:
    """Wipe every collection and reseed it from the bundled fixtures."""
    if not yes:
        typer.confirm("This replaces all stored data with the fixtures. Continue?", abort=True)
    services = _services(ctx, seed=False)
    seeded = services.store.reset()
    console.print(f"[green]Reset {len(seeded)} collection(s):[/green] {', '.join(seeded)}")


@app.command("list")
def list_cmd(
    ctx: typer.Context,
    entity: Annotated[str, typer.Argument(help=f"One of: {', '.join(ENTITIES)}.")],
    status: Annotated[
        str | None,
        typer.Option("--status", "-s", help="Filter posts or comments by status."),
    ] = None,
) -> None:
    """List the records of a collection."""
    services = _services(ctx)
    service = _service_for(services, entity)

    if status is None:
        response = service.list_all()
    elif entity == "posts":
        response = services.posts.filtered(PostFilters(status=_parse_status(PostStatus, status)))
    elif entity == "comments":
        response = services.comments.by_status(_parse_status(CommentStatus, status))
    else:
        console.print("[red]Error:[/red] --status only applies to posts and comments")
        raise typer.Exit(1)

    items = _unwrap(asyncio.run(response))
    if not items:
        console.print(f"[yellow]No {entity} found.[/yellow]")
        return

    table = Table(title=entity.capitalize())
    for header, _ in COLUMNS[entity]:
        table.add_column(header, overflow="fold")
    for item in items:
        record = item.to_record()
        table.add_row(*(str(record.get(key) or "") for _, key in COLUMNS[entity]))
    console.print(table)
    console.print(f"{len(items)} {entity}")


def _parse_status(enum: type[Any], value: str) -> Any:
    try:
        return enum(value.upper())
    except ValueError:
        choices = ", ".join(member.value for member in enum)
        console.print(f"[red]Error:[/red] Invalid status: {value} (expected {choices})")
        raise typer.Exit(1)


@app.command()
def show(
    ctx: typer.Context,
    entity: Annotated[str, typer.Argument(help=f"One of: {', '.join(ENTITIES)}.")],
    record_id: Annotated[str, typer.Argument(help="Record id.")],
) -> None:
    """Print one record as JSON."""
    services = _services(ctx)
    service = _service_for(services, entity)
    response = asyncio.run(service.get_by_id(record_id))
    item = _unwrap(response)
    if item is None:
        console.print(f"[red]Error:[/red] {escape(response.message or 'request failed')}")
        raise typer.Exit(1)
    console.print(JSON(json.dumps(item.to_record(), ensure_ascii=False)), soft_wrap=True)


@app.command()
def team(ctx: typer.Context) -> None:
    """List team members: admins, editors, then authors."""
    services = _services(ctx)
    members = _unwrap(asyncio.run(services.authors.team_members()))
    for member in members:
        console.print(f"{member.name} ({member.role}) <{member.email}>", soft_wrap=True)


@app.command()
def featured(
    ctx: typer.Context,
    limit: Annotated[
        int,
        typer.Option("--limit", "-n", min=0, help="Number of posts to show."),
    ] = 3,
) -> None:
    """Show the most recently published posts."""
    services = _services(ctx)
    posts = _unwrap(asyncio.run(services.posts.featured(limit)))
    if not posts:
        console.print("[yellow]No published posts.[/yellow]")
        return
    for post in posts:
        published = post.published_at.date().isoformat() if post.published_at else "-"
        console.print(f"{published}  {post.id}  {post.title}", soft_wrap=True)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
