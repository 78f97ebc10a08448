"""Tests for the walkthrough steps and the HTML report."""

import re

import pytest
from visitplot.config import DatasetConfig, NotebookConfig
from visitplot.grammar import DerivedPlot, PlotSpec, line
from visitplot.report import render_report, run_walkthrough
from visitplot.themes import available_themes
from visitplot.walkthrough import Step, build_walkthrough


class TestBuildWalkthrough:
    """Test the tutorial steps built from the data files."""

    def test_step_order(self, notebook_config):
        steps = build_walkthrough(notebook_config)
        slugs = [s.slug for s in steps]

        assert slugs[:10] == [
            "load-csv",
            "load-spreadsheet",
            "base",
            "line",
            "point",
            "column",
            "area",
            "layers",
            "theme",
            "labels",
        ]
        assert slugs[10:] == [f"theme-{name}" for name in available_themes()]

    def test_tables_loaded(self, notebook_config):
        steps = {s.slug: s for s in build_walkthrough(notebook_config)}

        assert list(steps["load-csv"].table.columns) == ["year", "visitors", "park"]
        assert {"year", "visitors"} <= set(steps["load-spreadsheet"].table.columns)

    def test_plots_share_one_base(self, notebook_config):
        """Test every derived plot references the same base specification."""
        steps = build_walkthrough(notebook_config)
        base = next(s.plot for s in steps if s.slug == "base")
        derived = [s.plot for s in steps if isinstance(s.plot, DerivedPlot)]

        assert isinstance(base, PlotSpec)
        assert base.fields == ("year", "visitors")
        assert derived
        assert all(p.base is base for p in derived)

    def test_snippets_assign_names_before_use(self, notebook_config):
        """Test each plot a snippet builds on is assigned by an earlier snippet."""
        steps = build_walkthrough(notebook_config)
        assigned = set()
        for step in steps:
            target, sep, expression = (step.code or "").partition(" = ")
            if not sep:
                target, expression = None, target
            for name in ("base", "styled", "themed"):
                if re.search(rf"\b{name}\b", expression):
                    assert name in assigned, f"{step.slug} uses {name} before it is assigned"
            if target:
                assigned.add(target)

        codes = {s.slug: s.code for s in steps}
        assert codes["layers"].startswith("styled = base + ")
        assert codes["theme"] == 'themed = styled + theme("minimal")'

    def test_point_step_styling(self, notebook_config):
        steps = {s.slug: s for s in build_walkthrough(notebook_config)}
        point_layer = steps["point"].plot.layers[0]

        assert point_layer.alpha == 0.5
        assert point_layer.shape == "triangle"

    def test_missing_data(self, tmp_path):
        config = NotebookConfig(dataset=DatasetConfig(data_dir=tmp_path / "nowhere"))
        with pytest.raises(FileNotFoundError):
            build_walkthrough(config)

    def test_unknown_field(self, notebook_config):
        config = notebook_config.model_copy(
            update={"dataset": notebook_config.dataset.model_copy(update={"y": "guests"})}
        )
        with pytest.raises(KeyError, match="guests"):
            build_walkthrough(config)


class TestRenderReport:
    """Test HTML generation."""

    def test_run_walkthrough(self, notebook_config):
        """Test the whole walkthrough runs top to bottom and writes the document."""
        path = run_walkthrough(notebook_config)
        html = path.read_text(encoding="utf-8")
        steps = build_walkthrough(notebook_config)

        assert path == notebook_config.report_path
        assert html.startswith("<!DOCTYPE html>")
        assert notebook_config.title in html
        assert html.count("data:image/png;base64,") == sum(1 for s in steps if s.plot is not None)
        assert html.count('class="dataframe preview"') == 2
        assert 'id="labels"' in html

    def test_output_override(self, notebook_config, tmp_path):
        path = run_walkthrough(notebook_config, tmp_path / "elsewhere" / "report.html")
        assert path.exists()

    def test_text_is_escaped(self, base, tmp_path):
        steps = [Step(slug="s", title="<b>Bold</b>", text="a < b", code="x <- 1", plot=base + line())]
        html = render_report(steps, tmp_path / "r.html", title="T").read_text(encoding="utf-8")

        assert "&lt;b&gt;Bold&lt;/b&gt;" in html
        assert "a &lt; b" in html
        assert "x &lt;- 1" in html

    def test_paragraphs(self, tmp_path):
        steps = [Step(slug="s", title="Prose", text="First.\n\nSecond.")]
        html = render_report(steps, tmp_path / "r.html", title="T").read_text(encoding="utf-8")

        assert "<p>First.</p>" in html
        assert "<p>Second.</p>" in html
        assert "data:image/png" not in html

    def test_default_theme_applied(self, notebook_config, monkeypatch):
        """Test plots without a theme get the configured one."""
        seen = []

        def fake_png(plot, **kwargs):
            seen.append(plot)
            return ""

        monkeypatch.setattr("visitplot.report.to_png_base64", fake_png)
        config = notebook_config.model_copy(update={"theme": "dark"})
        run_walkthrough(config)

        assert seen
        assert seen[0].theme.name == "dark"
        assert any(p.theme.name == "minimal" for p in seen)
