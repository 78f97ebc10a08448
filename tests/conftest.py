"""Pytest configuration and fixtures for visitplot tests."""

from pathlib import Path

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402
import pandas as pd  # noqa: E402
import pytest  # noqa: E402
from visitplot.config import DatasetConfig, NotebookConfig  # noqa: E402
from visitplot.grammar import PlotSpec, plot  # noqa: E402

REPO_ROOT = Path(__file__).parent.parent
BUNDLED_DATA_DIR = REPO_ROOT / "data"


@pytest.fixture(autouse=True)
def close_figures():
    """Close every figure a test leaves open."""
    yield
    plt.close("all")


@pytest.fixture
def bundled_data_dir() -> Path:
    """Directory of the data files shipped with the walkthrough."""
    if not BUNDLED_DATA_DIR.exists():
        pytest.skip(f"Bundled data not found: {BUNDLED_DATA_DIR}")
    return BUNDLED_DATA_DIR


@pytest.fixture
def visitors_table() -> pd.DataFrame:
    """Small year/visitors table with an extra text column."""
    return pd.DataFrame(
        {
            "year": [2018, 2019, 2020, 2021, 2022],
            "visitors": [598300, 624800, 371400, 566700, 579200],
            "park": ["Pine Ridge"] * 5,
        }
    )


@pytest.fixture
def unsorted_table() -> pd.DataFrame:
    """Rows deliberately out of x order."""
    return pd.DataFrame({"year": [2021, 2019, 2020], "visitors": [30, 10, 20]})


@pytest.fixture
def base(visitors_table) -> PlotSpec:
    """Base plot specification: year on x, visitors on y."""
    return plot(visitors_table, x="year", y="visitors")


@pytest.fixture
def csv_file(tmp_path, visitors_table) -> Path:
    """Visitors table written as CSV."""
    path = tmp_path / "visitors.csv"
    visitors_table.to_csv(path, index=False)
    return path


@pytest.fixture
def xlsx_file(tmp_path, visitors_table) -> Path:
    """Visitors table written as a spreadsheet with a named sheet."""
    path = tmp_path / "visitors.xlsx"
    visitors_table.to_excel(path, index=False, sheet_name="visitors")
    return path


@pytest.fixture
def notebook_config(tmp_path, csv_file, xlsx_file) -> NotebookConfig:
    """Configuration pointing at the temporary data files."""
    return NotebookConfig(
        dataset=DatasetConfig(data_dir=tmp_path),
        output_dir=tmp_path / "output",
    )
