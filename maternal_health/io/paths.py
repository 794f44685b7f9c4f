"""
Path management for the maternal health analysis.
Provides consistent locations for the data table, charts and run summaries
under a project root.
"""

from pathlib import Path
from typing import Dict

# Folders every project root gets, alongside the configured data/output dirs
SCRIPTS_DIR_NAME = "scripts"

TABLE_SUFFIXES = {"csv": ".csv", "parquet": ".parquet"}


def ensure_dir(path: Path) -> Path:
    """Ensure directory exists, create if it doesn't."""
    path = Path(path)
    path.mkdir(parents=True, exist_ok=True)
    return path


def ensure_project_dirs(root: Path, config) -> Dict[str, Path]:
    """Create the data, scripts and output folders under ``root`` if missing."""
    root = Path(root)
    return {
        "data": ensure_dir(root / config.output.data_dir),
        "scripts": ensure_dir(root / SCRIPTS_DIR_NAME),
        "output": ensure_dir(root / config.output.output_dir),
    }


def get_table_path(root: Path, config) -> Path:
    """Get path for the exported data table."""
    suffix = TABLE_SUFFIXES[config.output.format]
    return Path(root) / config.output.data_dir / f"{config.output.table_name}{suffix}"


def get_plot_path(root: Path, config, plot_name: str) -> Path:
    """Get path for a chart file."""
    return Path(root) / config.output.output_dir / plot_name


def get_summary_path(root: Path, config) -> Path:
    """Get path for the run summary JSON file."""
    return Path(root) / config.output.output_dir / "summary.json"


def get_run_log_dir(root: Path, config) -> Path:
    """Get directory for the local run log."""
    return Path(root) / config.output.output_dir
