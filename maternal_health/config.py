"""
Configuration management for the maternal health analysis.
Loads YAML configuration files and validates them into typed settings.
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Literal, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from .exceptions import InvalidConfig

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_DIR = "config"
DEFAULT_CONFIG_FILE = "analysis.yaml"

DEFAULT_COUNTIES = [
    "Nairobi", "Mombasa", "Kisumu", "Nakuru", "Kiambu",
    "Uasin Gishu", "Turkana", "Mandera", "Machakos", "Kilifi",
]
DEFAULT_YEARS = [2019, 2020, 2021, 2022, 2023]


class DatasetConfig(BaseModel):
    """Which county-year combinations to synthesize."""
    counties: List[str] = Field(default_factory=lambda: list(DEFAULT_COUNTIES), min_length=1)
    years: List[int] = Field(default_factory=lambda: list(DEFAULT_YEARS), min_length=1)
    rows_per_combo: int = Field(1, ge=1, description="Replicate rows per county-year")

    @field_validator("counties", "years")
    @classmethod
    def _unique(cls, value):
        if len(set(value)) != len(value):
            raise ValueError("values must be unique")
        return value


class GenerationConfig(BaseModel):
    """Random draw parameters for the synthetic table."""
    seed: int = Field(254, ge=0)
    attendants_low: float = 40.0
    attendants_high: float = 95.0
    mmr_mean: float = 400.0
    mmr_sd: float = Field(50.0, ge=0)
    trend_coefficient: float = Field(2.5, description="MMR reduction per attendance point")

    @model_validator(mode="after")
    def _check_range(self):
        if self.attendants_low >= self.attendants_high:
            raise ValueError("attendants_low must be below attendants_high")
        return self


class AnalysisSettings(BaseModel):
    """Regression variables and the scenario to predict."""
    predictor: str = "skilled_attendants_pct"
    response: str = "mmr"
    prediction_x: float = 100.0


class OutputConfig(BaseModel):
    """Where and how results are written."""
    data_dir: str = "data"
    output_dir: str = "output"
    table_name: str = "kenya_maternal_health"
    format: Literal["csv", "parquet"] = "csv"
    plot_width: float = Field(8.0, gt=0)
    plot_height: float = Field(6.0, gt=0)
    plot_dpi: int = Field(300, gt=0)


class AnalysisConfig(BaseModel):
    """Full configuration for one analysis run."""
    dataset: DatasetConfig = Field(default_factory=DatasetConfig)
    generation: GenerationConfig = Field(default_factory=GenerationConfig)
    analysis: AnalysisSettings = Field(default_factory=AnalysisSettings)
    output: OutputConfig = Field(default_factory=OutputConfig)


def build_config(data: Optional[Dict[str, Any]]) -> AnalysisConfig:
    """Validate a raw mapping (e.g. parsed YAML) into an AnalysisConfig."""
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise InvalidConfig(f"Configuration must be a mapping, got {type(data).__name__}")
    try:
        return AnalysisConfig.model_validate(data)
    except ValidationError as e:
        raise InvalidConfig(f"Invalid configuration:\n{e}") from e


class ConfigLoader:
    """Loads YAML configuration files into validated settings."""

    def __init__(self, config_dir=DEFAULT_CONFIG_DIR):
        self.config_dir = Path(config_dir)

    def resolve(self, filename) -> Path:
        # Bare file names live in the config directory, anything else is a path.
        filepath = Path(filename)
        if not filepath.parent.parts:
            filepath = self.config_dir / filepath
        return filepath

    def load_yaml(self, filename: str) -> Dict[str, Any]:
        filepath = self.resolve(filename)
        if not filepath.exists():
            raise InvalidConfig(f"Configuration file {filepath} does not exist")
        with open(filepath, "r", encoding="utf-8") as f:
            try:
                return yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise InvalidConfig(f"Could not parse {filepath}: {e}") from e

    def load_analysis_config(self, filename=DEFAULT_CONFIG_FILE) -> AnalysisConfig:
        config = build_config(self.load_yaml(filename))
        logger.debug("Loaded configuration from %s", self.resolve(filename))
        return config


def load_config(config_type: str = "analysis", filename=None, config_dir=DEFAULT_CONFIG_DIR) -> AnalysisConfig:
    """
    Load the configuration for ``config_type``.

    Without an explicit filename the default ``config/analysis.yaml`` is used
    if present, otherwise the built-in defaults. An explicit filename that
    does not exist is an error.
    """
    if config_type != "analysis":
        raise InvalidConfig(f"Unknown config type: {config_type}")

    loader = ConfigLoader(config_dir)
    if filename is None:
        if not loader.resolve(DEFAULT_CONFIG_FILE).exists():
            logger.info("No %s found in %s, using built-in defaults", DEFAULT_CONFIG_FILE, config_dir)
            return AnalysisConfig()
        filename = DEFAULT_CONFIG_FILE
    return loader.load_analysis_config(filename)


def apply_overrides(
    config: AnalysisConfig,
    seed=None,
    counties=None,
    years=None,
    rows_per_combo=None,
    fmt=None,
    predict_at=None,
) -> AnalysisConfig:
    """Return a new config with command line overrides applied and re-validated."""
    data = config.model_dump()

    if seed is not None:
        data['generation']['seed'] = seed
    if counties is not None:
        data['dataset']['counties'] = list(counties)
    if years is not None:
        data['dataset']['years'] = list(years)
    if rows_per_combo is not None:
        data['dataset']['rows_per_combo'] = rows_per_combo
    if fmt is not None:
        data['output']['format'] = fmt
    if predict_at is not None:
        data['analysis']['prediction_x'] = predict_at

    return build_config(data)
