"""
Kenya maternal health analysis.

Synthesizes a reproducible county-year maternal health table, classifies
rows by risk, aggregates it and fits a simple linear regression of maternal
mortality on skilled birth attendance.

Modules:
    - data_gen: seeded synthetic table generation
    - stats: risk classification, grouped aggregation, OLS regression
    - plots: county boxplot, national trend and risk density charts
    - pipeline: end-to-end analysis run
"""

__version__ = "0.1.0"
