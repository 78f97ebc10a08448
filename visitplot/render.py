"""
Plot rendering.

Turns a ``PlotSpec`` or ``DerivedPlot`` into a matplotlib figure:
- point layers become scatter markers
- line layers become a line through the rows sorted by x
- column layers become bars from zero
- area layers become a region filled from zero

Sizes follow the grammar's millimetre convention and are converted to
points here.
"""

from __future__ import annotations

import base64
import io
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Callable

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd

from .config import DEFAULT_FILL, DEFAULT_INK
from .grammar import AreaLayer, ColumnLayer, DerivedPlot, Layer, LineLayer, PlotSpec, PointLayer

if TYPE_CHECKING:
    from matplotlib.axes import Axes
    from matplotlib.figure import Figure

    from .grammar import Labels
    from .themes import Theme

logger = logging.getLogger(__name__)

# Points per millimetre
PT = 72.27 / 25.4

DEFAULT_POINT_SIZE = 1.5
DEFAULT_LINE_SIZE = 0.5
DEFAULT_STROKE = 0.5

# name -> (matplotlib marker, how colour/fill are used)
SHAPES: dict[str, tuple[object, str]] = {
    "circle":               ("o", "solid"),
    "circle open":          ("o", "open"),
    "circle filled":        ("o", "filled"),
    "square":               ("s", "solid"),
    "square open":          ("s", "open"),
    "square filled":        ("s", "filled"),
    "diamond":              ("D", "solid"),
    "diamond open":         ("D", "open"),
    "diamond filled":       ("D", "filled"),
    "triangle":             ("^", "solid"),
    "triangle open":        ("^", "open"),
    "triangle filled":      ("^", "filled"),
    "triangle down open":   ("v", "open"),
    "triangle down filled": ("v", "filled"),
    "plus":                 ("+", "stroke"),
    "cross":                ("x", "stroke"),
    "asterisk":             ((6, 2, 0), "stroke"),
}

# Dash patterns are in multiples of the line width
LINETYPES: dict[str, object] = {
    "solid":    "-",
    "dashed":   (0, (4, 4)),
    "dotted":   (0, (1, 3)),
    "dotdash":  (0, (1, 3, 4, 3)),
    "longdash": (0, (7, 3)),
    "twodash":  (0, (2, 2, 6, 2)),
    "blank":    "None",
}

RenderablePlot = PlotSpec | DerivedPlot


# --- Axis values ---


def _x_positions(values: pd.Series) -> tuple[np.ndarray, list[str] | None]:
    """Numeric x positions, plus category labels when x is not numeric."""
    if pd.api.types.is_numeric_dtype(values) and not pd.api.types.is_bool_dtype(values):
        return values.to_numpy(dtype=float), None
    if pd.api.types.is_datetime64_any_dtype(values):
        return values.to_numpy(), None

    categorical = pd.Categorical(values)
    return categorical.codes.astype(float), [str(c) for c in categorical.categories]


def resolution(x: np.ndarray) -> float:
    """Smallest gap between distinct x values (1 when there is none)."""
    if np.issubdtype(x.dtype, np.datetime64):
        x = x.astype("datetime64[ns]").astype("int64").astype(float)
    distinct = np.unique(x[~pd.isna(x)])
    if len(distinct) < 2:
        return 1.0
    return float(np.min(np.diff(distinct)))


def _bar_width(x: np.ndarray, fraction: float) -> object:
    if np.issubdtype(x.dtype, np.datetime64):
        return pd.Timedelta(nanoseconds=resolution(x) * fraction)
    return resolution(x) * fraction


# --- Layer drawing ---


def _draw_point(ax: Axes, x: np.ndarray, y: np.ndarray, layer: PointLayer) -> None:
    marker, mode = SHAPES[layer.shape]
    color = layer.color or DEFAULT_INK
    size = DEFAULT_POINT_SIZE if layer.size is None else layer.size
    diameter = size * PT

    kwargs: dict[str, object] = {
        "marker": marker,
        "s": diameter**2,
        "alpha": layer.alpha,
        "linewidths": DEFAULT_STROKE * PT,
        "zorder": 3,
    }
    if mode == "solid":
        kwargs.update(facecolors=color, edgecolors=color)
    elif mode == "open":
        kwargs.update(facecolors="none", edgecolors=color)
    elif mode == "filled":
        kwargs.update(facecolors=layer.fill or "white", edgecolors=color)
    else:
        kwargs.update(color=color)

    ax.scatter(x, y, **kwargs)


def _draw_line(ax: Axes, x: np.ndarray, y: np.ndarray, layer: LineLayer) -> None:
    order = np.argsort(x, kind="stable")
    size = DEFAULT_LINE_SIZE if layer.size is None else layer.size
    ax.plot(
        x[order],
        y[order],
        color=layer.color or DEFAULT_INK,
        linewidth=size * PT,
        linestyle=LINETYPES[layer.linetype],
        alpha=layer.alpha,
        zorder=2,
    )


def _outline(layer: ColumnLayer | AreaLayer) -> dict[str, object]:
    """Edge styling shared by columns and areas; no edge unless a colour is set."""
    if layer.color is None:
        return {"edgecolor": "none", "linewidth": 0}
    size = DEFAULT_LINE_SIZE if layer.size is None else layer.size
    return {
        "edgecolor": layer.color,
        "linewidth": size * PT,
        "linestyle": LINETYPES[layer.linetype],
    }


def _draw_column(ax: Axes, x: np.ndarray, y: np.ndarray, layer: ColumnLayer) -> None:
    ax.bar(
        x,
        y,
        width=_bar_width(x, layer.width),
        color=layer.fill or DEFAULT_FILL,
        alpha=layer.alpha,
        zorder=1,
        **_outline(layer),
    )


def _draw_area(ax: Axes, x: np.ndarray, y: np.ndarray, layer: AreaLayer) -> None:
    order = np.argsort(x, kind="stable")
    ax.fill_between(
        x[order],
        0,
        y[order],
        facecolor=layer.fill or DEFAULT_FILL,
        alpha=layer.alpha,
        zorder=1,
        **_outline(layer),
    )


DRAWERS: dict[type[Layer], Callable[..., None]] = {
    PointLayer: _draw_point,
    LineLayer: _draw_line,
    ColumnLayer: _draw_column,
    AreaLayer: _draw_area,
}


# --- Labels ---


def _apply_labels(ax: Axes, labels: Labels, theme: Theme) -> None:
    ax.set_xlabel(labels.x or "")
    ax.set_ylabel(labels.y or "")

    base = theme.base_size
    if labels.subtitle:
        ax.annotate(
            labels.subtitle,
            xy=(0, 1),
            xycoords="axes fraction",
            xytext=(0, base * 0.5),
            textcoords="offset points",
            ha="left",
            va="bottom",
            fontsize=base,
            color=theme.text_color,
        )
    if labels.title:
        ax.set_title(
            labels.title,
            loc="left",
            fontsize=base * 1.2,
            pad=base * (2.2 if labels.subtitle else 0.6),
            color="black",
        )
    if labels.caption:
        ax.annotate(
            labels.caption,
            xy=(1, 0),
            xycoords="axes fraction",
            xytext=(0, -base * 3.2),
            textcoords="offset points",
            ha="right",
            va="top",
            fontsize=base * 0.8,
            color=theme.text_color,
        )


def _frame_empty_panel(ax: Axes, x: np.ndarray, y: np.ndarray) -> None:
    """Give a plot without layers the axis ranges its data would have."""
    if len(x) == 0 or np.issubdtype(x.dtype, np.datetime64):
        return
    for setter, values in ((ax.set_xlim, x), (ax.set_ylim, y)):
        lo, hi = float(np.nanmin(values)), float(np.nanmax(values))
        pad = (hi - lo) * 0.05 or 0.5
        setter(lo - pad, hi + pad)


# --- Rendering ---


def render(
    plot: RenderablePlot,
    *,
    width: float = 7.0,
    height: float = 4.5,
    dpi: int = 100,
) -> Figure:
    """Render a plot to a new matplotlib figure.

    Args:
        plot: Base specification (drawn as an empty panel) or derived plot
        width: Figure width in inches
        height: Figure height in inches
        dpi: Figure resolution

    Returns:
        The figure; the caller owns it and should close it.
    """
    derived = plot.derive() if isinstance(plot, PlotSpec) else plot
    theme = derived.resolved_theme
    x_field, y_field = derived.fields

    x, categories = _x_positions(derived.data[x_field])
    y = derived.data[y_field].to_numpy(dtype=float)

    fig, ax = plt.subplots(figsize=(width, height), dpi=dpi)

    for layer in derived.layers:
        logger.debug(f"Drawing {layer.kind} layer {layer.style()} for {x_field} vs {y_field}")
        DRAWERS[type(layer)](ax, x, y, layer)

    if not derived.layers:
        _frame_empty_panel(ax, x, y)

    if categories is not None:
        ax.set_xticks(np.arange(len(categories)))
        ax.set_xticklabels(categories)

    _apply_labels(ax, derived.resolved_labels, theme)
    theme.apply(fig, ax)

    return fig


def save(
    plot: RenderablePlot,
    path: str | Path,
    *,
    fmt: str | None = None,
    **figure_kwargs: float,
) -> Path:
    """Render a plot and write it to ``path``.

    Args:
        plot: Plot to render
        path: Output file; parent directories are created
        fmt: File format, inferred from the suffix when omitted
        **figure_kwargs: ``width``, ``height`` and ``dpi`` for ``render``

    Returns:
        The path written.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    fig = render(plot, **figure_kwargs)
    try:
        fig.savefig(path, format=fmt, bbox_inches="tight", facecolor=fig.get_facecolor())
    finally:
        plt.close(fig)

    logger.info(f"Plot saved to {path}")
    return path


def to_png_base64(plot: RenderablePlot, **figure_kwargs: float) -> str:
    """Render a plot to a base64-encoded PNG for inline embedding."""
    fig = render(plot, **figure_kwargs)
    buffer = io.BytesIO()
    try:
        fig.savefig(buffer, format="png", bbox_inches="tight", facecolor=fig.get_facecolor())
    finally:
        plt.close(fig)
    return base64.b64encode(buffer.getvalue()).decode("ascii")
