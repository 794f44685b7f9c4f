"""
Charts for the maternal health analysis.

Three views, each written to a file and closed:
    - MMR distribution per county (horizontal boxplot, ordered by mean)
    - national average MMR per year (line with points)
    - MMR density per risk level with the median marked
"""

import logging
from pathlib import Path
from typing import Dict

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import pandas as pd
import seaborn as sns

logger = logging.getLogger(__name__)

TREND_COLOR = "#008080"


def _save(path, dpi: int) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    plt.tight_layout()
    plt.savefig(path, dpi=dpi, bbox_inches='tight')
    plt.close()
    logger.info("Saved chart to %s", path)
    return path


def county_order(df: pd.DataFrame):
    """Counties sorted by mean MMR, lowest first."""
    return df.groupby("county", sort=False)["mmr"].mean().sort_values().index.tolist()


def plot_county_distribution(df: pd.DataFrame, path, width=8.0, height=6.0, dpi=300) -> Path:
    """Boxplot of MMR by county, one box per county."""
    years = sorted(df["year"].unique())
    order = county_order(df)

    plt.style.use('default')
    plt.figure(figsize=(width, height))
    ax = sns.boxplot(data=df, x="mmr", y="county", order=order,
                     hue="county", hue_order=order, palette="husl", legend=False)
    for patch in ax.patches:
        patch.set_alpha(0.7)

    plt.title(f'Maternal Mortality Distribution by County ({years[0]}-{years[-1]})\n'
              'Comparing simulated healthcare outcomes across counties')
    plt.xlabel('MMR (per 100,000)')
    plt.ylabel('County')
    plt.grid(axis='x', alpha=0.3)
    return _save(path, dpi)


def plot_national_trend(yearly_mmr: Dict[int, float], path, width=8.0, height=6.0, dpi=300) -> Path:
    """Line chart of the year -> mean MMR aggregate."""
    years = sorted(yearly_mmr)
    means = [yearly_mmr[year] for year in years]

    plt.style.use('default')
    plt.figure(figsize=(width, height))
    plt.plot(years, means, color=TREND_COLOR, lw=2)
    plt.scatter(years, means, color=TREND_COLOR, s=36, zorder=3)
    plt.xticks(years)
    plt.title('National Average Maternal Mortality Trend\n'
              f'Simulated annual progress ({years[0]}-{years[-1]})')
    plt.xlabel('Year')
    plt.ylabel('Average MMR')
    plt.grid(alpha=0.3)
    return _save(path, dpi)


def plot_risk_density(df: pd.DataFrame, median: float, path, width=8.0, height=6.0, dpi=300) -> Path:
    """MMR density per risk level, with a vertical line at the median."""
    plt.style.use('default')
    sns.set_palette("husl")
    plt.figure(figsize=(width, height))
    sns.kdeplot(data=df, x="mmr", hue="risk_level", fill=True,
                common_norm=False, alpha=0.4, warn_singular=False)
    plt.axvline(median, color='black', linestyle='--', lw=1.5)
    plt.text(median, plt.ylim()[1] * 0.95, f' median = {median:.1f}', va='top')
    plt.title('MMR Density by Risk Level')
    plt.xlabel('MMR (per 100,000)')
    plt.ylabel('Density')
    return _save(path, dpi)
