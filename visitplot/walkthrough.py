"""
The walkthrough: an ordered list of tutorial steps.

Each step pairs a short explanation with the code it demonstrates and the
table or plot that code produces. Steps are built in one linear pass: load
both datasets, build one base plot specification from the spreadsheet table,
then derive every plot from that same base.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from .config import ACCENT_BLUE, ACCENT_GREEN, ACCENT_ORANGE, ACCENT_RED
from .data_loader import load_csv, load_spreadsheet
from .grammar import area, column, labs, line, plot, point
from .themes import available_themes, theme

if TYPE_CHECKING:
    import pandas as pd

    from .config import NotebookConfig
    from .grammar import DerivedPlot, PlotSpec

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Step:
    """One section of the walkthrough."""

    slug: str
    title: str
    text: str
    code: str | None = None
    plot: DerivedPlot | PlotSpec | None = None
    table: pd.DataFrame | None = None


def build_walkthrough(config: NotebookConfig) -> list[Step]:
    """Load the data and build every step of the walkthrough.

    Args:
        config: Walkthrough configuration (data paths and field mapping)

    Returns:
        Steps in reading order.

    Raises:
        FileNotFoundError: If either dataset is missing
        KeyError: If the configured x/y fields are not in the spreadsheet
    """
    dataset = config.dataset
    x, y = dataset.x, dataset.y

    csv_table = load_csv(dataset.csv_path)
    sheet_table = load_spreadsheet(dataset.spreadsheet_path, sheet=dataset.sheet)

    base = plot(sheet_table, x=x, y=y)
    logger.info(f"Base plot specification: {base!r}")

    styled = (
        base
        + line(color=ACCENT_BLUE, linetype="dashed", size=0.8)
        + point(color=ACCENT_BLUE, size=2.5)
    )
    themed = styled + theme("minimal")
    labelled = themed + labs(
        title="Visitors per year",
        subtitle=f"{dataset.spreadsheet_file}, {len(sheet_table)} years",
        caption="Source: park visitor counts",
        x="Year",
        y="Visitors",
    )

    steps = [
        Step(
            slug="load-csv",
            title="Load a delimited-text file",
            text=(
                "Tabular data usually arrives as comma-separated text. "
                "Reading it gives a table with one named column per field."
            ),
            code=f'visits = load_csv("{dataset.csv_file}")',
            table=csv_table,
        ),
        Step(
            slug="load-spreadsheet",
            title="Load a spreadsheet",
            text=(
                "Spreadsheets are read the same way; pick the sheet by index or name. "
                f"This one has the '{x}' and '{y}' fields used for the rest of the walkthrough."
            ),
            code=f'visitors = load_spreadsheet("{dataset.spreadsheet_file}", sheet={dataset.sheet!r})',
            table=sheet_table,
        ),
        Step(
            slug="base",
            title="Build a base plot specification",
            text=(
                "A plot starts as data plus the fields mapped to each axis. "
                "Nothing is drawn yet: there is no layer, so the panel is empty. "
                "The same base is reused, unchanged, by every plot below."
            ),
            code=f'base = plot(visitors, x="{x}", y="{y}")',
            plot=base,
        ),
        Step(
            slug="line",
            title="Add a line layer",
            text="Adding a layer chooses how the rows are drawn. A line joins them in order of x.",
            code="base + line()",
            plot=base + line(),
        ),
        Step(
            slug="point",
            title="Points, with opacity and shape",
            text=(
                "A point layer draws one marker per row. Opacity runs from 0 (invisible) "
                "to 1 (solid); shapes are chosen by name."
            ),
            code='base + point(alpha=0.5, shape="triangle", size=3)',
            plot=base + point(alpha=0.5, shape="triangle", size=3),
        ),
        Step(
            slug="column",
            title="Columns",
            text="A column layer draws a bar from zero up to each value. Fill sets the inside colour.",
            code='base + column(fill="steelblue")',
            plot=base + column(fill="steelblue"),
        ),
        Step(
            slug="area",
            title="Area",
            text="An area layer fills the region between zero and the values.",
            code=f'base + area(fill="{ACCENT_GREEN}", alpha=0.5, color="{ACCENT_GREEN}")',
            plot=base + area(fill=ACCENT_GREEN, alpha=0.5, color=ACCENT_GREEN),
        ),
        Step(
            slug="layers",
            title="Stack layers and style them",
            text=(
                "Layers stack in the order they are added. "
                "Colour, line type and size are set per layer."
            ),
            code=(
                f'styled = base + line(color="{ACCENT_BLUE}", linetype="dashed", size=0.8)'
                f' + point(color="{ACCENT_BLUE}", size=2.5)'
            ),
            plot=styled,
        ),
        Step(
            slug="theme",
            title="Apply a theme",
            text="A theme changes the non-data parts of the plot: background, grid and ticks.",
            code='themed = styled + theme("minimal")',
            plot=themed,
        ),
        Step(
            slug="labels",
            title="Titles and axis labels",
            text=(
                "Axis labels default to the field names. "
                "Labels replace them and add a title, subtitle and caption."
            ),
            code=(
                'themed + labs(title="Visitors per year", subtitle="...", '
                'caption="...", x="Year", y="Visitors")'
            ),
            plot=labelled,
        ),
    ]

    accents = [ACCENT_ORANGE, ACCENT_RED, ACCENT_BLUE, ACCENT_GREEN]
    for i, name in enumerate(available_themes()):
        colour = accents[i % len(accents)]
        steps.append(
            Step(
                slug=f"theme-{name}",
                title=f"Theme gallery: {name}",
                text=f"The line plot under the built-in '{name}' theme.",
                code=f'base + line(color="{colour}") + theme("{name}")',
                plot=base + line(color=colour) + theme(name) + labs(title=name),
            )
        )

    logger.info(f"Built walkthrough with {len(steps)} steps")
    return steps
