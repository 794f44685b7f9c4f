"""
Summary statistics and regression for the maternal health table.

Risk classification against the dataset-wide MMR median, grouped means and
counts, and a closed-form ordinary least squares fit with point prediction.
Every function returns new values; none of them modify the frame passed in.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Hashable, Iterable, Optional

import numpy as np
import pandas as pd

from .exceptions import DegenerateInput, EmptyGroup, InvalidConfig

logger = logging.getLogger(__name__)

HIGH_RISK = "HighRisk"
STANDARD_RISK = "StandardRisk"
RISK_LEVELS = (HIGH_RISK, STANDARD_RISK)


@dataclass(frozen=True)
class GroupSummary:
    """Mean of a metric and row count for one group."""
    mean: float
    count: int


@dataclass(frozen=True)
class LinearModel:
    """Simple linear regression ``response = intercept + slope * predictor``."""
    slope: float
    intercept: float
    r_squared: float
    n_obs: int
    predictor: str = "x"
    response: str = "y"

    def predict(self, x):
        return predict(self, x)


def _require_columns(df: pd.DataFrame, *columns: str) -> None:
    missing = [col for col in columns if col not in df.columns]
    if missing:
        raise InvalidConfig(f"Missing column(s): {', '.join(missing)}")


def _require_numeric(df: pd.DataFrame, *columns: str) -> None:
    _require_columns(df, *columns)
    text = [col for col in columns if not pd.api.types.is_numeric_dtype(df[col])]
    if text:
        raise InvalidConfig(f"Column(s) must be numeric: {', '.join(text)}")


def _native(value):
    # numpy scalars -> plain Python values for dict keys
    return value.item() if isinstance(value, np.generic) else value


def column_median(df: pd.DataFrame, column: str = "mmr") -> float:
    """Median over the whole column; even counts average the two middle values."""
    _require_numeric(df, column)
    values = df[column].dropna().to_numpy(dtype=float)
    if values.size == 0:
        raise EmptyGroup(f"Cannot take the median of an empty '{column}' column")
    return float(np.median(values))


def classify(df: pd.DataFrame, column: str = "mmr") -> pd.DataFrame:
    """
    Label every row HighRisk or StandardRisk against the column median.

    The median is computed once over all rows, so the table must be complete
    before classifying. Rows equal to the median are StandardRisk.

    Returns:
        A copy of ``df`` with a ``risk_level`` column appended.
    """
    median = column_median(df, column)
    values = df[column].to_numpy(dtype=float)
    labels = np.where(values > median, HIGH_RISK, STANDARD_RISK)

    high = int((labels == HIGH_RISK).sum())
    logger.debug("Median %s = %.3f: %d HighRisk / %d StandardRisk",
                 column, median, high, len(labels) - high)
    return df.assign(risk_level=labels)


def aggregate(
    df: pd.DataFrame,
    group_key: str,
    metric: str,
    expected_keys: Optional[Iterable[Hashable]] = None,
) -> Dict[Hashable, GroupSummary]:
    """
    Mean of ``metric`` and row count per distinct value of ``group_key``.

    Groups keep their order of first appearance, and every key present in the
    input is returned, however small its group.

    Args:
        df: Input table.
        group_key: Column to group by.
        metric: Numeric column to average.
        expected_keys: Keys that must be present; a missing one is an empty group.

    Raises:
        EmptyGroup: If the table is empty, a group has no non-missing metric
            values, or an expected key has no rows.
    """
    _require_columns(df, group_key)
    _require_numeric(df, metric)
    if df.empty:
        raise EmptyGroup(f"No rows to group by '{group_key}'")

    grouped = df.groupby(group_key, sort=False, dropna=False, observed=False)[metric]
    stats = grouped.agg(["mean", "count", "size"])

    summaries: Dict[Hashable, GroupSummary] = {}
    for key, row in stats.iterrows():
        key = _native(key)
        if row["count"] == 0:
            raise EmptyGroup(f"Group {group_key}={key!r} has no '{metric}' values")
        summaries[key] = GroupSummary(mean=float(row["mean"]), count=int(row["size"]))

    for key in expected_keys or ():
        if key not in summaries:
            raise EmptyGroup(f"Group {group_key}={key!r} has no rows")

    return summaries


def yearly_mean_mmr(df: pd.DataFrame) -> Dict[int, float]:
    """Year -> mean MMR, ordered by year."""
    summaries = aggregate(df, "year", "mmr")
    return {int(year): summaries[year].mean for year in sorted(summaries)}


def risk_summary(df: pd.DataFrame) -> Dict[str, GroupSummary]:
    """Risk level -> mean skilled attendance and row count."""
    return aggregate(df, "risk_level", "skilled_attendants_pct")


def fit(df: pd.DataFrame, predictor: str, response: str) -> LinearModel:
    """
    Fit ``response ~ predictor`` by ordinary least squares.

    slope = cov(x, y) / var(x), intercept = mean(y) - slope * mean(x).
    Rows missing either value are dropped first.

    Raises:
        InvalidConfig: A column is missing or not numeric.
        DegenerateInput: Fewer than two usable rows, or a constant predictor.
    """
    _require_numeric(df, predictor, response)
    pairs = df[[predictor, response]].dropna()
    x = pairs[predictor].to_numpy(dtype=float)
    y = pairs[response].to_numpy(dtype=float)

    if x.size < 2:
        raise DegenerateInput(f"Need at least 2 observations to fit, got {x.size}")
    if np.all(x == x[0]):
        raise DegenerateInput(f"Predictor '{predictor}' has zero variance")

    x_mean = x.mean()
    y_mean = y.mean()
    dx = x - x_mean
    dy = y - y_mean

    variance = np.mean(dx * dx)
    if variance == 0:
        raise DegenerateInput(f"Predictor '{predictor}' has zero variance")
    covariance = np.mean(dx * dy)

    slope = covariance / variance
    intercept = y_mean - slope * x_mean

    residuals = y - (intercept + slope * x)
    ss_tot = np.sum(dy * dy)
    # constant response is fitted exactly by a flat line
    r_squared = 1.0 - np.sum(residuals * residuals) / ss_tot if ss_tot > 0 else 1.0

    model = LinearModel(
        slope=float(slope),
        intercept=float(intercept),
        r_squared=float(r_squared),
        n_obs=int(x.size),
        predictor=predictor,
        response=response,
    )
    logger.info("Fitted %s = %.4f + %.4f * %s (R^2=%.3f, n=%d)",
                response, model.intercept, model.slope, predictor, model.r_squared, model.n_obs)
    return model


def predict(model: LinearModel, x):
    """``intercept + slope * x`` for a scalar (returns float) or array-like."""
    if np.ndim(x) == 0:
        return float(model.intercept + model.slope * float(x))
    return model.intercept + model.slope * np.asarray(x, dtype=float)
