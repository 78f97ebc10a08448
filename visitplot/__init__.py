"""
Layered plotting walkthrough for small tabular datasets.

This package provides:
- config: Shared constants, paths and YAML configuration
- data_loader: Functions to load delimited-text and spreadsheet tables
- grammar: Immutable plot specifications, layers, labels and composition
- themes: Built-in visual themes
- render: Rendering plots with matplotlib
- walkthrough: The ordered tutorial steps
- report: HTML document generation
- cli: Command-line entry point
"""

from .data_loader import load_csv, load_spreadsheet, load_table
from .grammar import (
    AreaLayer,
    ColumnLayer,
    DerivedPlot,
    Labels,
    LineLayer,
    PlotSpec,
    PointLayer,
    area,
    column,
    labs,
    layer,
    line,
    plot,
    point,
)
from .render import render, save
from .themes import Theme, theme

__all__ = [
    "AreaLayer",
    "ColumnLayer",
    "DerivedPlot",
    "Labels",
    "LineLayer",
    "PlotSpec",
    "PointLayer",
    "Theme",
    "area",
    "column",
    "labs",
    "layer",
    "line",
    "load_csv",
    "load_spreadsheet",
    "load_table",
    "plot",
    "point",
    "render",
    "save",
    "theme",
]
