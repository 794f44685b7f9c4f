"""
Shared fixtures for the maternal health tests.
"""

from pathlib import Path

import matplotlib
import pytest

matplotlib.use("Agg")

from maternal_health.config import AnalysisConfig, build_config
from maternal_health.data_gen import generate, make_rng
from maternal_health.stats import classify


@pytest.fixture(scope="session")
def project_root():
    """Return the repository root directory."""
    return Path(__file__).parent.parent


@pytest.fixture(scope="session")
def config_dir(project_root):
    return project_root / "config"


@pytest.fixture
def default_config():
    """Built-in defaults: 10 counties x 5 years, seed 254."""
    return AnalysisConfig()


@pytest.fixture
def small_config():
    """Two counties, two years, seed 1, small fast charts."""
    return build_config({
        "dataset": {"counties": ["A", "B"], "years": [2020, 2021]},
        "generation": {"seed": 1},
        "output": {"plot_width": 4, "plot_height": 3, "plot_dpi": 40},
    })


@pytest.fixture
def default_table():
    """Unclassified default table."""
    return generate(make_rng(254), AnalysisConfig().dataset.counties, AnalysisConfig().dataset.years)


@pytest.fixture
def classified_table(default_table):
    return classify(default_table)


@pytest.fixture(autouse=True)
def _local_tracker(monkeypatch):
    """Keep run tracking on the local JSON backend."""
    monkeypatch.delenv("TRACKER", raising=False)
