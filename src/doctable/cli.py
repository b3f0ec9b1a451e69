"""Command line interface for doctable."""

from __future__ import annotations

import fnmatch
import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.table import Table

from doctable.config import TableConfig
from doctable.ingestion.markdown_loader import load_preview, load_vault
from doctable.models import Document, SortOrder
from doctable.table.core import TableCore
from doctable.table.export import ExportFormat
from doctable.table.sorting import SORT_KEYS
from doctable.utils.format import format_date, format_file_size, metadata_display

console = Console()
app = typer.Typer(help="doctable - browse, sort and export a vault of markdown notes")

COLUMN_TITLES = {
    "name": "Name",
    "path": "Path",
    "modified": "Modified",
    "size": "Size",
    "tags": "Tags",
    "links": "Links",
    "properties": "Properties",
}

# Rough pixel width of one terminal cell, used to turn column sizes into widths.
PIXELS_PER_CHAR = 8


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="[%(levelname)s] %(message)s")


def _load_table(vault: Path, sort: Optional[str], order: str, unsorted: bool, config: TableConfig) -> TableCore:
    if not vault.exists():
        raise typer.BadParameter(f"Vault not found: {vault}")
    if sort is not None and sort not in SORT_KEYS:
        raise typer.BadParameter(f"Unknown sort field '{sort}'. Choose from: {', '.join(SORT_KEYS)}")
    try:
        sort_order = SortOrder(order)
    except ValueError as exc:
        raise typer.BadParameter("Order must be 'asc' or 'desc'") from exc

    core = TableCore(load_vault([vault]), config=config)
    if unsorted:
        core.set_sorting(None)
    elif sort is not None:
        core.set_sorting(sort, sort_order)
    return core


def _cell(document: Document, column: str) -> str:
    meta = document.metadata
    if column == "name":
        return meta.name
    if column == "path":
        return document.path
    if column == "modified":
        return format_date(meta.modified)
    if column == "size":
        return format_file_size(meta.size)
    if column == "tags":
        return ", ".join(meta.tags)
    if column == "links":
        return str(len(meta.links))
    if column == "properties":
        return ", ".join(metadata_display(meta.frontmatter, meta.tags).property_names)
    return str(meta.frontmatter.get(column, ""))


@app.command("list")
def list_documents(
    vault: Path = typer.Argument(..., help="Vault directory or markdown file.", resolve_path=True),
    sort: Optional[str] = typer.Option(None, "--sort", help="Sort field: name, path, modified or size"),
    order: str = typer.Option("asc", "--order", help="Sort order: asc or desc"),
    unsorted: bool = typer.Option(False, "--unsorted", help="Keep the order found on disk"),
    columns: Optional[str] = typer.Option(None, "--columns", help="Comma separated visible columns"),
    limit: int = typer.Option(0, "--limit", help="Show at most this many rows (0 for all)"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Print the notes of a vault as a sorted table."""
    _setup_logging(verbose)
    config = TableConfig()
    if columns:
        config.default_columns = [column.strip() for column in columns.split(",") if column.strip()]
    core = _load_table(vault, sort, order, unsorted, config)

    documents = core.get_sorted_documents()
    if not documents:
        console.print("[yellow]No markdown documents found.[/yellow]")
        return
    if limit > 0:
        documents = documents[:limit]

    visible = core.get_visible_columns()
    table = Table(show_header=True, header_style="bold magenta")
    for column in visible:
        width = core.get_column_size(column, config.column_size(column))
        table.add_column(
            COLUMN_TITLES.get(column, column),
            max_width=max(int(width // PIXELS_PER_CHAR), 4),
            overflow="ellipsis",
        )
    for doc in documents:
        table.add_row(*(_cell(doc, column) for column in visible))

    console.print(table)
    console.print(f"{len(documents)} of {len(core.get_documents())} documents")


@app.command()
def export(
    vault: Path = typer.Argument(..., help="Vault directory or markdown file.", resolve_path=True),
    fmt: str = typer.Option("json", "--format", "-f", help="Export format: json or csv"),
    select: Optional[List[str]] = typer.Option(None, "--select", "-s", help="Glob matched against note paths"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write to this file instead of stdout"),
    sort: Optional[str] = typer.Option(None, "--sort", help="Sort field: name, path, modified or size"),
    order: str = typer.Option("asc", "--order", help="Sort order: asc or desc"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Export all notes, or the notes matching --select, as JSON or CSV."""
    _setup_logging(verbose)
    try:
        export_format = ExportFormat(fmt.lower())
    except ValueError as exc:
        raise typer.BadParameter("Format must be 'json' or 'csv'") from exc

    core = _load_table(vault, sort, order, False, TableConfig())
    if select:
        for doc in core.get_sorted_documents():
            if any(fnmatch.fnmatch(doc.path, pattern) for pattern in select):
                core.toggle_row_selection(doc.id)
        if not core.can_perform_operation("export"):
            console.print("[yellow]No documents matched the selection.[/yellow]")
            return
        content = core.export_selected_rows(export_format)
    else:
        content = core.export_all_rows(export_format)

    if output is not None:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(content + "\n" if content else "", encoding="utf-8")
        console.print(f"Exported to [bold]{output}[/bold]")
    else:
        typer.echo(content)


@app.command()
def preview(
    vault: Path = typer.Argument(..., help="Vault directory.", resolve_path=True),
    name: str = typer.Argument(..., help="Note name or vault path"),
    chars: int = typer.Option(TableConfig().preview_chars, "--chars", help="Preview length in characters"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Print the beginning of a note without its front matter."""
    _setup_logging(verbose)
    core = _load_table(vault, None, "asc", False, TableConfig(preview_chars=chars))
    matches = [doc for doc in core.get_documents() if name in (doc.metadata.name, doc.path)]
    if not matches:
        console.print(f"[yellow]No note named {name}.[/yellow]")
        raise typer.Exit(code=1)

    doc = matches[0]
    content = core.get_cached_content(doc.id)
    if content is None:
        content = load_preview(Path(doc.full_path or doc.path), max_chars=core.config.preview_chars)
        core.cache_content(doc.id, content)
    console.print(f"[bold]{doc.path}[/bold]")
    console.print(content, markup=False)
