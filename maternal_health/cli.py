"""
Command line interface for the maternal health analysis.

Usage:
    python cli.py analyze
    python cli.py analyze --seed 7 --predict-at 90 --root runs/seed7
    python cli.py generate --counties "Nairobi,Kisumu" --years 2020,2021
    python cli.py show-config
"""

import logging
from typing import Optional

import typer
import yaml

from .config import apply_overrides, load_config
from .exceptions import MaternalHealthError
from .utils import parse_csv_list, setup_logging

logger = logging.getLogger(__name__)

app = typer.Typer(help="Synthetic Kenya maternal health analysis")


def _resolve_config(config_file, seed, counties, years, rows_per_combo, fmt, predict_at=None):
    config = load_config("analysis", config_file)
    return apply_overrides(
        config,
        seed=seed,
        counties=parse_csv_list(counties),
        years=parse_csv_list(years),
        rows_per_combo=rows_per_combo,
        fmt=fmt,
        predict_at=predict_at,
    )


@app.command()
def generate(
    config_file: Optional[str] = typer.Option(None, "--config", help="Configuration file path"),
    root: str = typer.Option(".", "--root", help="Project root for data/ and output/"),
    seed: Optional[int] = typer.Option(None, "--seed", help="Override seed from config"),
    counties: Optional[str] = typer.Option(None, "--counties", help="Override counties (comma-separated)"),
    years: Optional[str] = typer.Option(None, "--years", help="Override years (comma-separated)"),
    rows_per_combo: Optional[int] = typer.Option(None, "--rows-per-combo", help="Rows per county-year"),
    fmt: Optional[str] = typer.Option(None, "--format", help="Table format: csv or parquet"),
    log_level: str = typer.Option("INFO", "--log-level", help="Logging level"),
):
    """Generate and classify the synthetic table, then export it."""
    from .pipeline import generate_table

    setup_logging(log_level)
    try:
        config = _resolve_config(config_file, seed, counties, years, rows_per_combo, fmt)
        path = generate_table(config, root)
    except MaternalHealthError as e:
        logger.error("%s", e)
        raise typer.Exit(code=1)

    typer.echo(f"Table saved to {path}")


@app.command()
def analyze(
    config_file: Optional[str] = typer.Option(None, "--config", help="Configuration file path"),
    root: str = typer.Option(".", "--root", help="Project root for data/ and output/"),
    seed: Optional[int] = typer.Option(None, "--seed", help="Override seed from config"),
    counties: Optional[str] = typer.Option(None, "--counties", help="Override counties (comma-separated)"),
    years: Optional[str] = typer.Option(None, "--years", help="Override years (comma-separated)"),
    rows_per_combo: Optional[int] = typer.Option(None, "--rows-per-combo", help="Rows per county-year"),
    fmt: Optional[str] = typer.Option(None, "--format", help="Table format: csv or parquet"),
    predict_at: Optional[float] = typer.Option(None, "--predict-at", help="Attendance % to predict MMR for"),
    plots: bool = typer.Option(True, "--plots/--no-plots", help="Render charts"),
    log_level: str = typer.Option("INFO", "--log-level", help="Logging level"),
):
    """Run the full analysis: table, statistics, regression, charts and report."""
    from .pipeline import run_analysis
    from .report import print_report

    setup_logging(log_level)
    try:
        config = _resolve_config(config_file, seed, counties, years, rows_per_combo, fmt, predict_at)
        result = run_analysis(config, root, make_plots=plots)
    except MaternalHealthError as e:
        logger.error("%s", e)
        raise typer.Exit(code=1)

    print_report(result.prediction, result.prediction_x, result.risk_summary, result.model)
    typer.echo(
        f"\nAnalysis complete. All files saved to '{config.output.data_dir}/' "
        f"and '{config.output.output_dir}/' folders."
    )


@app.command("show-config")
def show_config(
    config_file: Optional[str] = typer.Option(None, "--config", help="Configuration file path"),
):
    """Print the resolved configuration as YAML."""
    try:
        config = load_config("analysis", config_file)
    except MaternalHealthError as e:
        typer.echo(f"ERROR: {e}", err=True)
        raise typer.Exit(code=1)
    typer.echo(yaml.safe_dump(config.model_dump(), sort_keys=False))


if __name__ == "__main__":
    app()
