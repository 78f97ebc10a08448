"""Tests for configuration loading and themes."""

from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError
from visitplot.config import DATA_DIR, FigureConfig, NotebookConfig, load_config_from_env
from visitplot.themes import THEMES, available_themes, theme

REPO_ROOT = Path(__file__).parent.parent


class TestNotebookConfig:
    """Test NotebookConfig defaults and YAML round trips."""

    def test_defaults(self):
        config = NotebookConfig()

        assert config.dataset.x == "year"
        assert config.dataset.y == "visitors"
        assert config.dataset.csv_path == DATA_DIR / "visitors.csv"
        assert config.dataset.spreadsheet_path == DATA_DIR / "visitors.xlsx"
        assert config.theme == "gray"
        assert config.report_path.name == "walkthrough.html"

    def test_unknown_theme(self):
        with pytest.raises(ValidationError, match="Unknown theme"):
            NotebookConfig(theme="neon")

    def test_figure_validation(self):
        with pytest.raises(ValidationError):
            FigureConfig(width=0)
        with pytest.raises(ValidationError):
            FigureConfig(format="gif")

    def test_figure_output_path(self, tmp_path):
        assert FigureConfig(format="svg").output_path(tmp_path, "line") == tmp_path / "line.svg"
        assert FigureConfig().output_path(tmp_path, "line") == tmp_path / "line.png"

    def test_load_missing(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            NotebookConfig.load(tmp_path / "missing.yaml")

    def test_load_empty(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        with pytest.raises(ValueError, match="Empty or invalid YAML"):
            NotebookConfig.load(path)

    def test_load_not_a_mapping(self, tmp_path):
        """Test a YAML list at the top level is rejected as invalid."""
        path = tmp_path / "list.yaml"
        path.write_text(yaml.safe_dump(["theme", "bw"]))
        with pytest.raises(ValueError, match="Empty or invalid YAML"):
            NotebookConfig.load(path)

    def test_relative_paths_resolve_against_file(self, tmp_path):
        """Test relative directories are taken relative to the YAML file."""
        path = tmp_path / "conf" / "notebook.yaml"
        path.parent.mkdir()
        path.write_text(
            yaml.safe_dump({"dataset": {"data_dir": "../data"}, "output_dir": "out", "theme": "bw"})
        )

        config = NotebookConfig.load(path)

        assert config.dataset.data_dir.resolve() == (tmp_path / "data").resolve()
        assert config.output_dir.resolve() == (tmp_path / "conf" / "out").resolve()
        assert config.theme == "bw"

    def test_save_and_load(self, tmp_path):
        config = NotebookConfig(title="Trial", theme="minimal", output_dir=tmp_path / "out")
        path = tmp_path / "saved.yaml"

        config.save(path)
        loaded = NotebookConfig.load(path)

        assert loaded.title == "Trial"
        assert loaded.theme == "minimal"
        assert loaded.output_dir == tmp_path / "out"
        assert loaded.figure == config.figure

    def test_default_yaml(self):
        """Test the shipped configuration loads and points at the bundled data."""
        config = NotebookConfig.load(REPO_ROOT / "config" / "default.yaml")

        assert config.dataset.csv_path.resolve() == (REPO_ROOT / "data" / "visitors.csv").resolve()
        assert config.figure.format == "png"

    def test_file_status(self, notebook_config):
        assert notebook_config.dataset.get_file_status() == {"csv": True, "spreadsheet": True}


class TestLoadFromEnv:
    """Test loading configuration from an environment variable."""

    def test_unset_uses_defaults(self, monkeypatch):
        monkeypatch.delenv("VISITPLOT_CONFIG", raising=False)
        assert load_config_from_env().theme == "gray"

    def test_set(self, monkeypatch, tmp_path):
        path = tmp_path / "env.yaml"
        path.write_text(yaml.safe_dump({"theme": "dark"}))
        monkeypatch.setenv("VISITPLOT_CONFIG", str(path))

        assert load_config_from_env().theme == "dark"


class TestThemes:
    """Test the theme registry."""

    def test_available(self):
        assert available_themes() == [
            "gray", "bw", "linedraw", "light", "dark", "minimal", "classic", "void",
        ]

    def test_alias(self):
        assert theme("grey").panel_background == THEMES["gray"].panel_background

    def test_unknown(self):
        with pytest.raises(ValueError, match="Unknown theme"):
            theme("neon")

    def test_base_size(self):
        assert theme("bw", base_size=14).base_size == 14
        assert theme("bw").base_size == 11
        with pytest.raises(ValidationError):
            theme("bw", base_size=0)
