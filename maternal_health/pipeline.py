"""
End-to-end maternal health analysis.

generate -> classify -> aggregate / fit -> export -> charts -> summary.
The core steps run to completion before anything is written, so a failure
in the statistics leaves no partial outputs behind.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict

import pandas as pd

from . import plots
from .data_gen import SyntheticDataGenerator
from .io.export import save_summary, write_table
from .io.paths import (
    ensure_project_dirs,
    get_plot_path,
    get_run_log_dir,
    get_summary_path,
    get_table_path,
)
from .stats import (
    GroupSummary,
    LinearModel,
    classify,
    column_median,
    fit,
    risk_summary,
    yearly_mean_mmr,
)
from .tracking import tracker_run

logger = logging.getLogger(__name__)

COUNTY_PLOT = "county_distribution.png"
TREND_PLOT = "national_trend.png"
DENSITY_PLOT = "risk_density.png"


@dataclass
class AnalysisResult:
    """Everything one analysis run produced."""
    table: pd.DataFrame
    median: float
    yearly_mmr: Dict[int, float]
    risk_summary: Dict[str, GroupSummary]
    model: LinearModel
    prediction: float
    prediction_x: float
    paths: Dict[str, Path] = field(default_factory=dict)

    def to_summary(self, config) -> dict:
        return {
            "seed": config.generation.seed,
            "n_rows": len(self.table),
            "median_mmr": self.median,
            "yearly_mean_mmr": self.yearly_mmr,
            "risk_summary": self.risk_summary,
            "model": self.model,
            "prediction": {"x": self.prediction_x, "mmr": self.prediction},
        }


def build_table(config) -> pd.DataFrame:
    """Generate and classify the configured table."""
    table = SyntheticDataGenerator(config).generate()
    return classify(table)


def generate_table(config, root=None) -> Path:
    """Generate, classify and export the table only. Returns the table path."""
    root = Path(root) if root is not None else Path.cwd()
    table = build_table(config)
    ensure_project_dirs(root, config)
    return write_table(table, get_table_path(root, config), fmt=config.output.format)


def run_analysis(config, root=None, make_plots: bool = True) -> AnalysisResult:
    """
    Run the full analysis under ``root`` (defaults to the working directory).

    Returns:
        AnalysisResult with the classified table, aggregates, model,
        prediction and the paths of every file written.
    """
    root = Path(root) if root is not None else Path.cwd()
    settings = config.analysis

    table = build_table(config)
    median = column_median(table)
    yearly = yearly_mean_mmr(table)
    risk = risk_summary(table)
    model = fit(table, settings.predictor, settings.response)
    prediction = model.predict(settings.prediction_x)

    result = AnalysisResult(
        table=table,
        median=median,
        yearly_mmr=yearly,
        risk_summary=risk,
        model=model,
        prediction=prediction,
        prediction_x=settings.prediction_x,
    )

    dirs = ensure_project_dirs(root, config)
    params = {
        "seed": config.generation.seed,
        "n_counties": len(config.dataset.counties),
        "n_years": len(config.dataset.years),
        "rows_per_combo": config.dataset.rows_per_combo,
        "trend_coefficient": config.generation.trend_coefficient,
    }
    with tracker_run("maternal_health_analysis", params, log_dir=get_run_log_dir(root, config)) as run:
        result.paths["table"] = write_table(table, get_table_path(root, config), fmt=config.output.format)

        if make_plots:
            size = dict(width=config.output.plot_width, height=config.output.plot_height,
                        dpi=config.output.plot_dpi)
            result.paths["county_plot"] = plots.plot_county_distribution(
                table, get_plot_path(root, config, COUNTY_PLOT), **size)
            result.paths["trend_plot"] = plots.plot_national_trend(
                yearly, get_plot_path(root, config, TREND_PLOT), **size)
            result.paths["density_plot"] = plots.plot_risk_density(
                table, median, get_plot_path(root, config, DENSITY_PLOT), **size)

        result.paths["summary"] = save_summary(result.to_summary(config), get_summary_path(root, config))

        run["log"]({
            "slope": model.slope,
            "intercept": model.intercept,
            "r_squared": model.r_squared,
            "median_mmr": median,
            "prediction": prediction,
        })

    logger.info("Analysis complete: outputs in %s and %s", dirs["data"], dirs["output"])
    return result
