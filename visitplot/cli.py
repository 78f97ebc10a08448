"""visitplot CLI - inspect tables, render single plots, build the walkthrough report."""

import logging
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from .config import NotebookConfig, load_config_from_env
from .data_loader import describe_table, load_table
from .grammar import labs, layer, plot
from .render import save
from .report import run_walkthrough
from .themes import THEMES, available_themes, theme

app = typer.Typer(
    name="visitplot",
    help="visitplot - load tables and explore them with a layered plotting grammar",
    add_completion=False,
)
console = Console()

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Errors a user can cause from the command line
USER_ERRORS = (FileNotFoundError, KeyError, ValueError)


def _fail(message: str, error: Exception) -> typer.Exit:
    if isinstance(error, ValidationError):
        detail = "; ".join(
            f"{'.'.join(str(p) for p in e['loc']) or 'value'}: {e['msg']}" for e in error.errors()
        )
    elif isinstance(error, KeyError):
        detail = str(error.args[0]) if error.args else str(error)
    else:
        detail = str(error)
    console.print(f"[bold red]Error:[/bold red] {message}: {detail}")
    return typer.Exit(code=1)


def _parse_sheet(sheet: str) -> int | str:
    return int(sheet) if sheet.isdigit() else sheet


def _load(path: Path, sheet: str):
    kwargs = {}
    if path.suffix.lower() in (".xlsx", ".xlsm", ".xls"):
        kwargs["sheet"] = _parse_sheet(sheet)
    return load_table(path, **kwargs)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Configure logging for every command."""
    logging.basicConfig(level=logging.DEBUG if verbose else logging.INFO, format=LOG_FORMAT)


@app.command()
def inspect(
    path: Path = typer.Argument(..., help="CSV/TSV or spreadsheet file"),
    sheet: str = typer.Option("0", "--sheet", "-s", help="Sheet index or name (spreadsheets)"),
    rows: int = typer.Option(5, "--rows", "-n", help="Number of preview rows"),
) -> None:
    """Show the columns of a table and its first rows."""
    try:
        table = _load(path, sheet)
    except USER_ERRORS as e:
        raise _fail(f"Failed to load {path}", e) from e

    info = describe_table(table)
    console.print(f"\n[bold cyan]{path.name}[/bold cyan]: {info['rows']} rows\n")

    columns = Table(show_header=True, header_style="bold magenta", box=None)
    columns.add_column("#", style="cyan", width=4)
    columns.add_column("Column", style="bold")
    columns.add_column("Type", style="green")
    for i, name in enumerate(info["columns"], 1):
        columns.add_row(str(i), name, info["dtypes"][name])
    console.print(columns)
    console.print()

    preview = Table(show_header=True, header_style="bold", box=None)
    for name in info["columns"]:
        preview.add_column(name)
    for _, row in table.head(rows).iterrows():
        preview.add_row(*(str(v) for v in row.tolist()))
    console.print(preview)
    console.print()


@app.command()
def render(
    path: Path = typer.Argument(..., help="CSV/TSV or spreadsheet file"),
    x: str = typer.Option(..., "--x", help="Field on the x axis"),
    y: str = typer.Option(..., "--y", help="Field on the y axis"),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Image file to write (defaults to the configured output dir and format)",
    ),
    kind: str = typer.Option("line", "--layer", "-l", help="point, line, column or area"),
    sheet: str = typer.Option("0", "--sheet", "-s", help="Sheet index or name (spreadsheets)"),
    color: Optional[str] = typer.Option(None, "--color", help="Stroke colour"),
    fill: Optional[str] = typer.Option(None, "--fill", help="Fill colour"),
    alpha: Optional[float] = typer.Option(None, "--alpha", help="Opacity between 0 and 1"),
    size: Optional[float] = typer.Option(None, "--size", help="Point size or line width (mm)"),
    shape: Optional[str] = typer.Option(None, "--shape", help="Point shape name"),
    linetype: Optional[str] = typer.Option(None, "--linetype", help="Line type name"),
    theme_name: Optional[str] = typer.Option(None, "--theme", help="Built-in theme"),
    title: Optional[str] = typer.Option(None, "--title"),
    subtitle: Optional[str] = typer.Option(None, "--subtitle"),
    xlabel: Optional[str] = typer.Option(None, "--xlabel"),
    ylabel: Optional[str] = typer.Option(None, "--ylabel"),
    width: Optional[float] = typer.Option(None, "--width", help="Figure width in inches"),
    height: Optional[float] = typer.Option(None, "--height", help="Figure height in inches"),
    dpi: Optional[int] = typer.Option(None, "--dpi"),
    config: Optional[Path] = typer.Option(
        None, "--config", "-c", help="YAML configuration (defaults to $VISITPLOT_CONFIG)"
    ),
) -> None:
    """Render a single plot of one table to an image file."""
    try:
        notebook = NotebookConfig.load(config) if config else load_config_from_env()
    except USER_ERRORS as e:
        raise _fail("Failed to load configuration", e) from e

    figure = notebook.figure
    # Without an explicit suffix the configured format decides the file type
    fmt = None
    if output is None:
        output = figure.output_path(notebook.output_dir, f"{kind}_{y}_by_{x}")
        fmt = figure.format
    elif not output.suffix:
        output = figure.output_path(output.parent, output.name)
        fmt = figure.format

    style = {
        "color": color,
        "fill": fill,
        "alpha": alpha,
        "size": size,
        "shape": shape,
        "linetype": linetype,
    }
    style = {k: v for k, v in style.items() if v is not None}

    try:
        table = _load(path, sheet)
        derived = plot(table, x=x, y=y) + layer(kind, **style)
        if theme_name is not None:
            derived = derived + theme(theme_name)
        derived = derived + labs(title=title, subtitle=subtitle, x=xlabel, y=ylabel)
    except USER_ERRORS as e:
        raise _fail("Invalid plot", e) from e

    try:
        written = save(
            derived,
            output,
            fmt=fmt,
            width=width if width is not None else figure.width,
            height=height if height is not None else figure.height,
            dpi=dpi if dpi is not None else figure.dpi,
        )
    except USER_ERRORS as e:
        raise _fail("Failed to render plot", e) from e

    console.print(f"[green]✓[/green] {kind} plot of {y} by {x} saved to: [cyan]{written}[/cyan]")


@app.command()
def report(
    config: Optional[Path] = typer.Option(
        None, "--config", "-c", help="YAML configuration (defaults to $VISITPLOT_CONFIG)"
    ),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="HTML file to write"),
) -> None:
    """Run the whole walkthrough and write it as an HTML document."""
    console.print("\n[bold cyan]Running walkthrough...[/bold cyan]\n")

    try:
        notebook = NotebookConfig.load(config) if config else load_config_from_env()
    except USER_ERRORS as e:
        raise _fail("Failed to load configuration", e) from e

    for name, exists in notebook.dataset.get_file_status().items():
        mark = "[green]✓[/green]" if exists else "[red]✗[/red]"
        console.print(f"{mark} {name} data file")

    try:
        written = run_walkthrough(notebook, output)
    except USER_ERRORS as e:
        raise _fail("Walkthrough failed", e) from e

    console.print(f"\n[bold green]✓[/bold green] Report saved to: [cyan]{written}[/cyan]\n")


@app.command("themes")
def list_themes() -> None:
    """List the built-in themes."""
    table = Table(show_header=True, header_style="bold magenta", box=None)
    table.add_column("Theme", style="cyan")
    table.add_column("Panel")
    table.add_column("Grid")
    table.add_column("Border")
    for name in available_themes():
        t = THEMES[name]
        table.add_row(name, t.panel_background, t.grid_major or "-", t.panel_border or "-")
    console.print(table)


if __name__ == "__main__":
    app()
