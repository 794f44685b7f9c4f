"""
Synthetic data generation for county-year maternal health tables.

Generates one record per county and year with a skilled birth attendance
percentage and a maternal mortality rate (MMR) that falls as attendance rises.

All randomness comes from an explicitly passed ``numpy.random.Generator``
and is consumed in a fixed order:

    1. uniform draws for ``skilled_attendants_pct``, all rows in one call
    2. normal draws for ``mmr``, all rows in one call

The trend is injected afterwards in a single vectorized pass. Reordering the
draws changes every generated value, so the order is part of the contract.
"""

import logging
from typing import Sequence, Tuple

import numpy as np
import pandas as pd

from .exceptions import InvalidConfig

logger = logging.getLogger(__name__)

COLUMNS = ["county", "year", "skilled_attendants_pct", "mmr"]


def make_rng(seed: int) -> np.random.Generator:
    """Return a fresh, independently owned generator for ``seed``."""
    return np.random.default_rng(seed)


def _validate(counties, years, rows_per_combo, attendants_range, mmr_sd):
    if len(counties) == 0:
        raise InvalidConfig("At least one county is required")
    if len(years) == 0:
        raise InvalidConfig("At least one year is required")
    if len(set(counties)) != len(counties):
        raise InvalidConfig(f"Duplicate counties in {counties}")
    if len(set(years)) != len(years):
        raise InvalidConfig(f"Duplicate years in {years}")
    if rows_per_combo < 1:
        raise InvalidConfig(f"rows_per_combo must be at least 1, got {rows_per_combo}")
    low, high = attendants_range
    if low >= high:
        raise InvalidConfig(f"Invalid attendance range [{low}, {high})")
    if mmr_sd < 0:
        raise InvalidConfig(f"mmr_sd must be non-negative, got {mmr_sd}")


def generate(
    rng: np.random.Generator,
    counties: Sequence[str],
    years: Sequence[int],
    rows_per_combo: int = 1,
    *,
    attendants_range: Tuple[float, float] = (40.0, 95.0),
    mmr_mean: float = 400.0,
    mmr_sd: float = 50.0,
    trend_coefficient: float = 2.5,
) -> pd.DataFrame:
    """
    Generate the county-year table.

    Rows come in county blocks (in ``counties`` order), each block holding the
    years in ``years`` order, each year repeated ``rows_per_combo`` times.

    Args:
        rng: Generator to draw from. It is advanced by 2 * n_rows draws.
        counties: Ordered county names.
        years: Ordered years.
        rows_per_combo: Replicate rows per county-year.
        attendants_range: Uniform range for ``skilled_attendants_pct``.
        mmr_mean: Mean of the raw MMR normal draw.
        mmr_sd: Standard deviation of the raw MMR normal draw.
        trend_coefficient: MMR reduction per attendance percentage point.

    Returns:
        DataFrame with columns county, year, skilled_attendants_pct, mmr.
    """
    counties = list(counties)
    years = [int(year) for year in years]
    _validate(counties, years, rows_per_combo, attendants_range, mmr_sd)

    n_rows = len(counties) * len(years) * rows_per_combo
    low, high = attendants_range

    attendants = rng.uniform(low, high, size=n_rows)
    mmr_raw = rng.normal(mmr_mean, mmr_sd, size=n_rows)

    # Higher attendance, lower mortality.
    mmr = mmr_raw - trend_coefficient * attendants

    county_col = np.repeat(np.asarray(counties, dtype=object), len(years) * rows_per_combo)
    year_col = np.tile(np.repeat(np.asarray(years, dtype=np.int64), rows_per_combo), len(counties))

    df = pd.DataFrame(
        {
            "county": county_col,
            "year": year_col,
            "skilled_attendants_pct": attendants,
            "mmr": mmr,
        },
        columns=COLUMNS,
    )
    logger.debug("Generated %d rows (%d counties x %d years x %d)",
                 n_rows, len(counties), len(years), rows_per_combo)
    return df


class SyntheticDataGenerator:
    """Generates the configured county-year table from its own seeded generator."""

    def __init__(self, config):
        self.config = config
        self.rng = make_rng(config.generation.seed)

    def generate(self) -> pd.DataFrame:
        """
        Generate one table. Repeated calls continue the same random stream,
        so only the first call reproduces the seed's canonical table.
        """
        dataset = self.config.dataset
        gen = self.config.generation
        total_rows = len(dataset.counties) * len(dataset.years) * dataset.rows_per_combo
        logger.info("Generating %d counties x %d years (%d rows, seed=%d)",
                    len(dataset.counties), len(dataset.years), total_rows, gen.seed)

        return generate(
            self.rng,
            dataset.counties,
            dataset.years,
            dataset.rows_per_combo,
            attendants_range=(gen.attendants_low, gen.attendants_high),
            mmr_mean=gen.mmr_mean,
            mmr_sd=gen.mmr_sd,
            trend_coefficient=gen.trend_coefficient,
        )
