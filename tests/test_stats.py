"""
Tests for risk classification, grouped aggregation and OLS regression.
"""

import numpy as np
import pandas as pd
import pytest

from maternal_health.data_gen import generate, make_rng
from maternal_health.exceptions import DegenerateInput, EmptyGroup, InvalidConfig
from maternal_health.stats import (
    HIGH_RISK,
    STANDARD_RISK,
    GroupSummary,
    aggregate,
    classify,
    column_median,
    fit,
    predict,
    risk_summary,
    yearly_mean_mmr,
)


class TestClassify:
    """Median-based risk labels."""

    def test_labels_partition_rows(self, classified_table):
        counts = classified_table["risk_level"].value_counts()
        assert set(counts.index) <= {HIGH_RISK, STANDARD_RISK}
        assert counts.sum() == len(classified_table)

    def test_above_median_is_high_risk(self, classified_table):
        median = column_median(classified_table)
        above = classified_table["mmr"] > median
        assert (classified_table.loc[above, "risk_level"] == HIGH_RISK).all()
        assert (classified_table.loc[~above, "risk_level"] == STANDARD_RISK).all()

    def test_even_count_median_splits_evenly(self, classified_table):
        """50 distinct values: 25 above the median, 25 below."""
        assert (classified_table["risk_level"] == HIGH_RISK).sum() == 25

    def test_ties_at_median_are_standard_risk(self):
        df = pd.DataFrame({"mmr": [1.0, 2.0, 2.0, 3.0]})
        assert classify(df)["risk_level"].tolist() == [STANDARD_RISK] * 3 + [HIGH_RISK]

    def test_odd_count_median(self):
        df = pd.DataFrame({"mmr": [3.0, 1.0, 2.0]})
        assert column_median(df) == 2.0
        assert classify(df)["risk_level"].tolist() == [HIGH_RISK, STANDARD_RISK, STANDARD_RISK]

    def test_even_count_median_averages_middle_values(self):
        df = pd.DataFrame({"mmr": [4.0, 1.0, 3.0, 2.0]})
        assert column_median(df) == 2.5

    def test_input_is_not_modified(self, default_table):
        before = default_table.copy()
        classified = classify(default_table)
        assert "risk_level" not in default_table.columns
        assert default_table.equals(before)
        assert list(classified.columns)[-1] == "risk_level"

    def test_two_by_two_example(self):
        """Counties A, B x years 2020, 2021 with seed 1."""
        df = generate(make_rng(1), ["A", "B"], [2020, 2021])
        assert len(df) == 4

        median = float(np.median(df["mmr"].to_numpy()))
        expected = [HIGH_RISK if value > median else STANDARD_RISK for value in df["mmr"]]
        assert classify(df)["risk_level"].tolist() == expected

    def test_empty_table(self):
        with pytest.raises(EmptyGroup):
            classify(pd.DataFrame({"mmr": pd.Series([], dtype=float)}))

    def test_missing_column(self):
        with pytest.raises(InvalidConfig):
            classify(pd.DataFrame({"other": [1.0]}))

    def test_text_column(self, default_table):
        with pytest.raises(InvalidConfig, match="numeric"):
            classify(default_table, column="county")


class TestAggregate:
    """Grouped mean and count."""

    def test_counts_sum_to_rows(self, classified_table):
        summary = risk_summary(classified_table)
        assert sum(group.count for group in summary.values()) == len(classified_table)

    def test_risk_summary_means(self, classified_table):
        summary = risk_summary(classified_table)
        for level, group in summary.items():
            rows = classified_table[classified_table["risk_level"] == level]
            assert group.mean == pytest.approx(rows["skilled_attendants_pct"].mean())
            assert group.count == len(rows)

    def test_high_risk_has_lower_attendance(self, classified_table):
        """The injected trend makes HighRisk rows the low-attendance ones."""
        summary = risk_summary(classified_table)
        assert summary[HIGH_RISK].mean < summary[STANDARD_RISK].mean

    def test_yearly_mean_mmr(self, default_table):
        yearly = yearly_mean_mmr(default_table)
        assert list(yearly) == [2019, 2020, 2021, 2022, 2023]
        assert yearly[2021] == pytest.approx(default_table.loc[default_table["year"] == 2021, "mmr"].mean())

    def test_singleton_group_kept(self):
        df = pd.DataFrame({"key": ["a", "a", "b"], "value": [1.0, 3.0, 10.0]})
        result = aggregate(df, "key", "value")
        assert result == {"a": GroupSummary(mean=2.0, count=2), "b": GroupSummary(mean=10.0, count=1)}

    def test_first_appearance_order(self):
        df = pd.DataFrame({"key": ["z", "a", "z", "m"], "value": [1.0, 2.0, 3.0, 4.0]})
        assert list(aggregate(df, "key", "value")) == ["z", "a", "m"]

    def test_empty_table(self):
        df = pd.DataFrame({"key": pd.Series([], dtype=object), "value": pd.Series([], dtype=float)})
        with pytest.raises(EmptyGroup):
            aggregate(df, "key", "value")

    def test_group_without_values(self):
        df = pd.DataFrame({"key": ["a", "b"], "value": [1.0, np.nan]})
        with pytest.raises(EmptyGroup):
            aggregate(df, "key", "value")

    def test_expected_key_missing(self):
        df = pd.DataFrame({"risk_level": [STANDARD_RISK] * 3, "value": [1.0, 2.0, 3.0]})
        with pytest.raises(EmptyGroup):
            aggregate(df, "risk_level", "value", expected_keys=[HIGH_RISK, STANDARD_RISK])

    def test_missing_column(self):
        with pytest.raises(InvalidConfig):
            aggregate(pd.DataFrame({"key": ["a"]}), "key", "value")

    def test_text_metric(self, classified_table):
        with pytest.raises(InvalidConfig, match="numeric"):
            aggregate(classified_table, "year", "risk_level")


class TestRegression:
    """Closed-form OLS fit and prediction."""

    def test_exact_line(self):
        x = np.linspace(0.0, 10.0, 21)
        df = pd.DataFrame({"x": x, "y": 3.0 - 2.0 * x})
        model = fit(df, "x", "y")
        assert model.slope == pytest.approx(-2.0)
        assert model.intercept == pytest.approx(3.0)
        assert model.r_squared == pytest.approx(1.0)
        assert model.n_obs == 21

    def test_predict_scalar_and_array(self):
        x = np.arange(5, dtype=float)
        model = fit(pd.DataFrame({"x": x, "y": 3.0 - 2.0 * x}), "x", "y")
        assert isinstance(predict(model, 100), float)
        assert predict(model, 100) == pytest.approx(-197.0)
        np.testing.assert_allclose(model.predict([0.0, 1.0]), [3.0, 1.0])

    def test_matches_polyfit(self, default_table):
        model = fit(default_table, "skilled_attendants_pct", "mmr")
        slope, intercept = np.polyfit(default_table["skilled_attendants_pct"], default_table["mmr"], 1)
        assert model.slope == pytest.approx(slope)
        assert model.intercept == pytest.approx(intercept)
        assert 0.0 <= model.r_squared <= 1.0

    def test_injected_trend_is_negative(self, default_table):
        assert fit(default_table, "skilled_attendants_pct", "mmr").slope < 0

    def test_missing_rows_dropped(self):
        df = pd.DataFrame({"x": [0.0, 1.0, 2.0, 3.0], "y": [3.0, 1.0, np.nan, -3.0]})
        model = fit(df, "x", "y")
        assert model.n_obs == 3
        assert model.slope == pytest.approx(-2.0)

    def test_constant_predictor(self):
        df = pd.DataFrame({"x": [0.1] * 5, "y": [1.0, 2.0, 3.0, 4.0, 5.0]})
        with pytest.raises(DegenerateInput):
            fit(df, "x", "y")

    def test_single_observation(self):
        with pytest.raises(DegenerateInput):
            fit(pd.DataFrame({"x": [1.0], "y": [2.0]}), "x", "y")

    def test_constant_response(self):
        model = fit(pd.DataFrame({"x": [1.0, 2.0, 3.0], "y": [5.0, 5.0, 5.0]}), "x", "y")
        assert model.slope == 0.0
        assert model.intercept == pytest.approx(5.0)
        assert model.r_squared == 1.0

    def test_unknown_column(self, default_table):
        with pytest.raises(InvalidConfig):
            fit(default_table, "coverage", "mmr")

    def test_text_predictor(self, default_table):
        with pytest.raises(InvalidConfig, match="county"):
            fit(default_table, "county", "mmr")

    def test_text_response(self, classified_table):
        with pytest.raises(InvalidConfig, match="risk_level"):
            fit(classified_table, "skilled_attendants_pct", "risk_level")
