"""
Layered plot grammar.

A plot is described in two stages. ``PlotSpec`` binds a table to the fields
shown on the x and y axes. Adding a layer (point, line, column or area),
labels or a theme to it with ``+`` yields a ``DerivedPlot``. Every object
here is frozen: composing always returns a new object, so one base spec can
be reused for any number of variants.

Example:
    base = plot(visitors, x="year", y="visitors")
    base + line()
    base + point(alpha=0.5, shape="triangle", size=3)
    base + column(fill="steelblue") + theme("minimal") + labs(title="Visitors per year")
"""

from __future__ import annotations

from typing import Any, ClassVar, Literal

import pandas as pd
from matplotlib.colors import is_color_like
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .data_loader import require_columns
from .themes import DEFAULT_THEME, THEMES, Theme

LineType = Literal["solid", "dashed", "dotted", "dotdash", "longdash", "twodash", "blank"]

PointShape = Literal[
    "circle",
    "circle open",
    "circle filled",
    "square",
    "square open",
    "square filled",
    "diamond",
    "diamond open",
    "diamond filled",
    "triangle",
    "triangle open",
    "triangle filled",
    "triangle down open",
    "triangle down filled",
    "plus",
    "cross",
    "asterisk",
]


# --- Layers ---


class Layer(BaseModel):
    """Visual encoding drawn on top of a plot specification.

    Styling values are scalar overrides; ``None`` means "use the default".
    Attributes a layer does not understand are rejected.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: ClassVar[str] = ""

    color: str | None = Field(default=None, description="Outline / stroke colour")
    alpha: float | None = Field(default=None, ge=0.0, le=1.0, description="Opacity")
    size: float | None = Field(default=None, ge=0.0, description="Point size or line width in mm")

    @field_validator("color", "fill", check_fields=False)
    @classmethod
    def validate_color(cls, v: str | None) -> str | None:
        """Validate colours are something matplotlib can draw."""
        if v is not None and not is_color_like(v):
            raise ValueError(f"'{v}' is not a valid colour")
        return v

    def style(self) -> dict[str, Any]:
        """Styling values that were set explicitly."""
        return self.model_dump(exclude_none=True)


class PointLayer(Layer):
    """Scatter of one marker per row."""

    kind: ClassVar[str] = "point"

    fill: str | None = Field(default=None, description="Interior colour of filled shapes")
    shape: PointShape = "circle"


class LineLayer(Layer):
    """Line joining the rows in order of x."""

    kind: ClassVar[str] = "line"

    linetype: LineType = "solid"


class ColumnLayer(Layer):
    """Bar from zero to y at each x."""

    kind: ClassVar[str] = "column"

    fill: str | None = None
    linetype: LineType = "solid"
    width: float = Field(
        default=0.9, gt=0.0, le=1.0, description="Bar width as a fraction of the x resolution"
    )


class AreaLayer(Layer):
    """Filled region between zero and y, in order of x."""

    kind: ClassVar[str] = "area"

    fill: str | None = None
    linetype: LineType = "solid"


LAYER_TYPES: dict[str, type[Layer]] = {
    cls.kind: cls for cls in (PointLayer, LineLayer, ColumnLayer, AreaLayer)
}


# --- Labels ---


class Labels(BaseModel):
    """Title, subtitle, caption and axis label overrides."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    title: str | None = None
    subtitle: str | None = None
    caption: str | None = None
    x: str | None = None
    y: str | None = None

    def merge(self, other: Labels) -> Labels:
        """Return labels where every value set in ``other`` wins."""
        return Labels(**{**self.model_dump(exclude_none=True), **other.model_dump(exclude_none=True)})


# --- Plot specifications ---


class PlotSpec(BaseModel):
    """A table plus the fields mapped to the x and y axes."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    data: pd.DataFrame
    x: str
    y: str

    @model_validator(mode="after")
    def check_fields_exist(self) -> PlotSpec:
        """Both mapped fields must be columns of the table."""
        require_columns(self.data, self.x, self.y)
        return self

    @classmethod
    def from_table(cls, table: pd.DataFrame, x: str, y: str) -> PlotSpec:
        """Build a base specification.

        Raises:
            KeyError: If ``x`` or ``y`` is not a column of ``table``
        """
        return cls(data=table, x=x, y=y)

    @property
    def fields(self) -> tuple[str, str]:
        return self.x, self.y

    def derive(self) -> DerivedPlot:
        """Start a derived plot with no layers."""
        return DerivedPlot(base=self)

    def with_layer(self, layer: Layer) -> DerivedPlot:
        return self.derive().with_layer(layer)

    def with_labels(self, labels: Labels) -> DerivedPlot:
        return self.derive().with_labels(labels)

    def with_theme(self, theme: Theme) -> DerivedPlot:
        return self.derive().with_theme(theme)

    def __add__(self, other: object) -> DerivedPlot:
        if isinstance(other, (Layer, Labels, Theme)):
            return self.derive() + other
        return NotImplemented

    def __repr__(self) -> str:
        return f"PlotSpec(x={self.x!r}, y={self.y!r}, rows={len(self.data)})"


class DerivedPlot(BaseModel):
    """A base specification with layers, labels and a theme attached."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    base: PlotSpec
    layers: tuple[Layer, ...] = ()
    labels: Labels = Field(default_factory=Labels)
    theme: Theme | None = None

    @property
    def data(self) -> pd.DataFrame:
        return self.base.data

    @property
    def fields(self) -> tuple[str, str]:
        return self.base.fields

    @property
    def layer_kinds(self) -> list[str]:
        """Layer kinds in draw order."""
        return [layer.kind for layer in self.layers]

    @property
    def resolved_labels(self) -> Labels:
        """Labels with axis titles defaulting to the mapped field names."""
        return Labels(x=self.base.x, y=self.base.y).merge(self.labels)

    @property
    def resolved_theme(self) -> Theme:
        return self.theme if self.theme is not None else THEMES[DEFAULT_THEME]

    def with_layer(self, layer: Layer) -> DerivedPlot:
        return self.model_copy(update={"layers": (*self.layers, layer)})

    def with_labels(self, labels: Labels) -> DerivedPlot:
        return self.model_copy(update={"labels": self.labels.merge(labels)})

    def with_theme(self, theme: Theme) -> DerivedPlot:
        return self.model_copy(update={"theme": theme})

    def __add__(self, other: object) -> DerivedPlot:
        if isinstance(other, Layer):
            return self.with_layer(other)
        if isinstance(other, Labels):
            return self.with_labels(other)
        if isinstance(other, Theme):
            return self.with_theme(other)
        return NotImplemented

    def __repr__(self) -> str:
        layers = " + ".join(self.layer_kinds) or "no layers"
        theme_name = self.theme.name if self.theme else DEFAULT_THEME
        return f"DerivedPlot({self.base!r}, {layers}, theme={theme_name!r})"


# --- Factories ---


def plot(table: pd.DataFrame, x: str, y: str) -> PlotSpec:
    """Shorthand for ``PlotSpec.from_table``."""
    return PlotSpec.from_table(table, x, y)


def point(**style: Any) -> PointLayer:
    return PointLayer(**style)


def line(**style: Any) -> LineLayer:
    return LineLayer(**style)


def column(**style: Any) -> ColumnLayer:
    return ColumnLayer(**style)


def area(**style: Any) -> AreaLayer:
    return AreaLayer(**style)


def layer(kind: str, **style: Any) -> Layer:
    """Build a layer from its kind name.

    Raises:
        ValueError: If ``kind`` is not a known layer kind
    """
    try:
        cls = LAYER_TYPES[kind]
    except KeyError:
        raise ValueError(
            f"Unknown layer '{kind}'. Available: {', '.join(LAYER_TYPES)}"
        ) from None
    return cls(**style)


def labs(**labels: str | None) -> Labels:
    return Labels(**labels)
