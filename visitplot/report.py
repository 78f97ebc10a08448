"""
HTML report generation.

Renders every walkthrough step (explanation, code, table preview and plot)
into a single self-contained HTML document. Plots are embedded as base64 PNG
images so the file can be opened or shared on its own.
"""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING

from jinja2 import Environment, FileSystemLoader, select_autoescape
from markupsafe import Markup

from .config import TEMPLATES_DIR, FigureConfig
from .grammar import PlotSpec
from .render import to_png_base64
from .themes import DEFAULT_THEME, theme
from .walkthrough import build_walkthrough

if TYPE_CHECKING:
    from typing import Any

    from .config import NotebookConfig
    from .grammar import DerivedPlot
    from .walkthrough import Step

logger = logging.getLogger(__name__)

REPORT_TEMPLATE = "report.html.j2"
PREVIEW_ROWS = 6


def _environment() -> Environment:
    return Environment(
        loader=FileSystemLoader(str(TEMPLATES_DIR)),
        autoescape=select_autoescape(["html", "j2"]),
        trim_blocks=True,
        lstrip_blocks=True,
    )


def _with_default_theme(plot: DerivedPlot | PlotSpec, theme_name: str) -> DerivedPlot | PlotSpec:
    """Apply the configured theme to plots that don't set one."""
    if theme_name == DEFAULT_THEME:
        return plot
    if isinstance(plot, PlotSpec):
        return plot.with_theme(theme(theme_name))
    if plot.theme is None:
        return plot.with_theme(theme(theme_name))
    return plot


def _step_context(step: Step, figure: FigureConfig, theme_name: str) -> dict[str, Any]:
    context: dict[str, Any] = {
        "slug": step.slug,
        "title": step.title,
        "paragraphs": [p.strip() for p in step.text.split("\n\n") if p.strip()],
        "code": step.code,
        "table_html": None,
        "table_shape": None,
        "image": None,
    }

    if step.table is not None:
        preview = step.table.head(PREVIEW_ROWS).to_html(index=False, border=0, classes="preview")
        context["table_html"] = Markup(preview)
        context["table_shape"] = step.table.shape

    if step.plot is not None:
        plot = _with_default_theme(step.plot, theme_name)
        context["image"] = to_png_base64(plot, **figure.figure_kwargs())

    return context


def render_report(
    steps: list[Step],
    output_path: str | Path,
    *,
    title: str,
    figure: FigureConfig | None = None,
    theme_name: str = DEFAULT_THEME,
) -> Path:
    """Render walkthrough steps into an HTML document.

    Args:
        steps: Steps in reading order
        output_path: HTML file to write; parent directories are created
        title: Document title
        figure: Figure size/resolution for embedded plots
        theme_name: Theme for plots that don't set their own

    Returns:
        The path written.
    """
    figure = figure or FigureConfig()
    output_path = Path(output_path)

    sections = []
    for i, step in enumerate(steps, 1):
        logger.info(f"Rendering step {i}/{len(steps)}: {step.title}")
        sections.append(_step_context(step, figure, theme_name))

    template = _environment().get_template(REPORT_TEMPLATE)
    html = template.render(
        title=title,
        sections=sections,
        generated=datetime.now().strftime("%Y-%m-%d %H:%M"),
    )

    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(html, encoding="utf-8")
    logger.info(f"Report saved to {output_path}")
    return output_path


def run_walkthrough(config: NotebookConfig, output_path: str | Path | None = None) -> Path:
    """Run the whole walkthrough top to bottom and write the report.

    Args:
        config: Walkthrough configuration
        output_path: Overrides ``config.report_path``

    Returns:
        Path of the generated HTML document.
    """
    steps = build_walkthrough(config)
    return render_report(
        steps,
        output_path or config.report_path,
        title=config.title,
        figure=config.figure,
        theme_name=config.theme,
    )
