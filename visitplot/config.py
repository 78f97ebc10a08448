"""Configuration management for the visitplot walkthrough.

This module provides:
1. Directory paths and colour constants shared by the plots
2. Static configuration loaded from YAML files
3. Path resolution for the two bundled datasets
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field, field_validator

from .themes import THEMES

# --- Directory Paths ---
PACKAGE_DIR = Path(__file__).parent
REPO_ROOT = PACKAGE_DIR.parent
DATA_DIR = REPO_ROOT / "data"
OUTPUT_DIR = REPO_ROOT / "output"
TEMPLATES_DIR = PACKAGE_DIR / "templates"

# =============================================================================
# COLOR CONSTANTS
# =============================================================================

# Layer defaults (used when a layer sets no colour of its own)
DEFAULT_INK =           "#333333"     # Near black (points, lines, outlines)
DEFAULT_FILL =          "#595959"     # Dark gray (columns, areas)

# Walkthrough accents
ACCENT_BLUE =           "#0072B2"     # Deep blue
ACCENT_ORANGE =         "#E69F00"     # Orange
ACCENT_GREEN =          "#009E73"     # Green
ACCENT_RED =            "#D55E00"     # Red-orange

# --- Fields ---
FIELD_YEAR =            "year"
FIELD_VISITORS =        "visitors"

CONFIG_ENV_VAR = "VISITPLOT_CONFIG"


class FigureConfig(BaseModel):
    """Figure size and output format for rendered plots."""

    width: float = Field(default=7.0, description="Figure width in inches", gt=0)
    height: float = Field(default=4.5, description="Figure height in inches", gt=0)
    dpi: int = Field(default=100, description="Resolution in dots per inch", gt=0)
    format: Literal["png", "pdf", "svg"] = Field(
        default="png", description="File format used when saving single plots"
    )

    def figure_kwargs(self) -> dict[str, Any]:
        """Keyword arguments accepted by ``render.render``."""
        return {"width": self.width, "height": self.height, "dpi": self.dpi}

    def output_path(self, directory: Path, stem: str) -> Path:
        """File in ``directory`` named ``stem`` with the configured format as suffix."""
        return directory / f"{stem}.{self.format}"


class DatasetConfig(BaseModel):
    """Location and field mapping of the two walkthrough datasets."""

    data_dir: Path = Field(default=DATA_DIR, description="Directory holding the data files")
    csv_file: str = Field(default="visitors.csv", description="Delimited-text dataset")
    spreadsheet_file: str = Field(default="visitors.xlsx", description="Spreadsheet dataset")
    sheet: int | str = Field(default=0, description="Sheet index or name in the spreadsheet")
    x: str = Field(default=FIELD_YEAR, description="Field mapped to the x axis")
    y: str = Field(default=FIELD_VISITORS, description="Field mapped to the y axis")

    @property
    def csv_path(self) -> Path:
        """Path to the delimited-text file."""
        return self.data_dir / self.csv_file

    @property
    def spreadsheet_path(self) -> Path:
        """Path to the spreadsheet file."""
        return self.data_dir / self.spreadsheet_file

    def get_file_status(self) -> dict[str, bool]:
        """Check which dataset files exist."""
        return {
            "csv": self.csv_path.exists(),
            "spreadsheet": self.spreadsheet_path.exists(),
        }


class NotebookConfig(BaseModel):
    """Main configuration of a walkthrough run."""

    title: str = Field(
        default="Exploring visitor numbers with a layered plotting grammar",
        description="Title of the generated document",
    )
    dataset: DatasetConfig = Field(default_factory=lambda: DatasetConfig())
    figure: FigureConfig = Field(default_factory=lambda: FigureConfig())
    output_dir: Path = Field(default=OUTPUT_DIR, description="Where reports and plots are written")
    report_name: str = Field(default="walkthrough.html", description="File name of the report")
    theme: str = Field(default="gray", description="Theme used when a step sets none")

    @field_validator("theme")
    @classmethod
    def validate_theme(cls, v: str) -> str:
        """Validate the theme is one of the built-in themes."""
        if v not in THEMES:
            raise ValueError(f"Unknown theme '{v}'. Available: {', '.join(sorted(THEMES))}")
        return v

    @property
    def report_path(self) -> Path:
        """Path of the generated HTML document."""
        return self.output_dir / self.report_name

    @classmethod
    def load(cls, path: str | Path) -> "NotebookConfig":
        """Load configuration from YAML file.

        Relative ``data_dir`` and ``output_dir`` entries are resolved against
        the directory containing the YAML file.

        Args:
            path: Path to YAML configuration file

        Returns:
            Loaded NotebookConfig instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If YAML is invalid
        """
        config_path = Path(path)

        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        with open(config_path) as f:
            data = yaml.safe_load(f)

        if not isinstance(data, dict) or not data:
            raise ValueError(f"Empty or invalid YAML in {config_path}")

        base = config_path.resolve().parent
        dataset = data.get("dataset") or {}
        if "data_dir" in dataset and not Path(dataset["data_dir"]).is_absolute():
            dataset["data_dir"] = base / dataset["data_dir"]
        if "output_dir" in data and not Path(data["output_dir"]).is_absolute():
            data["output_dir"] = base / data["output_dir"]

        return cls(**data)

    def save(self, path: str | Path) -> None:
        """Save configuration to YAML file.

        Args:
            path: Path to save configuration file
        """
        config_path = Path(path)
        config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(config_path, "w") as f:
            yaml.safe_dump(self.to_dict(), f, default_flow_style=False, sort_keys=False)

    def to_dict(self) -> dict[str, Any]:
        """Convert config to a YAML-friendly dictionary."""
        return self.model_dump(mode="json")


def load_config_from_env(env_var: str = CONFIG_ENV_VAR) -> NotebookConfig:
    """Load configuration from path specified in environment variable.

    Falls back to the built-in defaults when the variable is not set.

    Args:
        env_var: Name of environment variable containing config path

    Returns:
        Loaded NotebookConfig instance

    Raises:
        FileNotFoundError: If the variable points at a missing file
    """
    config_path = os.getenv(env_var)
    if not config_path:
        return NotebookConfig()

    return NotebookConfig.load(config_path)
