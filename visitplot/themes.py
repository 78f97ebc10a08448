"""
Built-in visual themes.

A theme bundles the non-data styling of a plot: backgrounds, panel border,
grid lines, axis lines, ticks and the base font size. Themes are looked up by
name; there is no way to register new ones at runtime.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field

if TYPE_CHECKING:
    from matplotlib.axes import Axes
    from matplotlib.figure import Figure

DEFAULT_THEME = "gray"


class Theme(BaseModel):
    """Named bundle of visual defaults applied to a rendered plot."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str
    base_size: float = Field(default=11.0, gt=0, description="Base font size in points")
    plot_background: str = "white"
    panel_background: str = "white"
    panel_border: str | None = None
    grid_major: str | None = None
    grid_minor: str | None = None
    grid_linewidth: float = 0.8
    axis_line: str | None = None
    tick_color: str = "#333333"
    text_color: str = "#4D4D4D"
    show_ticks: bool = True
    show_axis_text: bool = True

    def apply(self, fig: Figure, ax: Axes) -> None:
        """Style ``fig`` and ``ax`` in place."""
        fig.patch.set_facecolor(self.plot_background)
        ax.set_facecolor(self.panel_background)
        ax.set_axisbelow(True)

        for side, spine in ax.spines.items():
            if self.panel_border is not None:
                spine.set_visible(True)
                spine.set_color(self.panel_border)
                spine.set_linewidth(1.0)
            elif self.axis_line is not None and side in ("left", "bottom"):
                spine.set_visible(True)
                spine.set_color(self.axis_line)
                spine.set_linewidth(0.8)
            else:
                spine.set_visible(False)

        ax.grid(False)
        if self.grid_major is not None:
            ax.grid(True, which="major", color=self.grid_major, linewidth=self.grid_linewidth)
        if self.grid_minor is not None:
            ax.minorticks_on()
            ax.grid(True, which="minor", color=self.grid_minor, linewidth=self.grid_linewidth / 2)
            ax.tick_params(which="minor", length=0)

        tick_size = self.base_size * 0.8
        ax.tick_params(
            which="major",
            colors=self.tick_color,
            labelcolor=self.text_color,
            labelsize=tick_size,
            length=3 if self.show_ticks else 0,
            labelbottom=self.show_axis_text,
            labelleft=self.show_axis_text,
        )
        ax.xaxis.label.set_size(self.base_size)
        ax.yaxis.label.set_size(self.base_size)
        ax.xaxis.label.set_color(self.tick_color)
        ax.yaxis.label.set_color(self.tick_color)
        if not self.show_axis_text:
            ax.xaxis.label.set_visible(False)
            ax.yaxis.label.set_visible(False)


THEMES: dict[str, Theme] = {
    "gray": Theme(
        name="gray",
        panel_background="#EBEBEB",
        grid_major="white",
        grid_minor="white",
        grid_linewidth=1.0,
    ),
    "bw": Theme(
        name="bw",
        panel_border="#333333",
        grid_major="#EBEBEB",
        grid_minor="#EBEBEB",
    ),
    "linedraw": Theme(
        name="linedraw",
        panel_border="black",
        grid_major="black",
        grid_minor="black",
        grid_linewidth=0.2,
        tick_color="black",
        text_color="black",
    ),
    "light": Theme(
        name="light",
        panel_border="#B3B3B3",
        grid_major="#DEDEDE",
        grid_minor="#DEDEDE",
        tick_color="#B3B3B3",
    ),
    "dark": Theme(
        name="dark",
        panel_background="#7F7F7F",
        grid_major="#6B6B6B",
        grid_minor="#6B6B6B",
    ),
    "minimal": Theme(
        name="minimal",
        grid_major="#EBEBEB",
        grid_minor="#EBEBEB",
        show_ticks=False,
    ),
    "classic": Theme(
        name="classic",
        axis_line="black",
        tick_color="black",
        text_color="black",
    ),
    "void": Theme(
        name="void",
        show_ticks=False,
        show_axis_text=False,
    ),
}

# Alternate spelling
THEMES["grey"] = THEMES["gray"].model_copy(update={"name": "grey"})


def theme(name: str = DEFAULT_THEME, base_size: float | None = None) -> Theme:
    """Look up a built-in theme, optionally with a different base font size.

    Raises:
        ValueError: If ``name`` is not a built-in theme
    """
    try:
        found = THEMES[name]
    except KeyError:
        raise ValueError(
            f"Unknown theme '{name}'. Available: {', '.join(sorted(THEMES))}"
        ) from None

    if base_size is None:
        return found
    # Rebuilt rather than copied so base_size is validated
    return Theme(**{**found.model_dump(), "base_size": base_size})


def available_themes() -> list[str]:
    """Names of the built-in themes, without aliases."""
    return [name for name in THEMES if name != "grey"]
