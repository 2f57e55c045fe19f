"""Data cleaning and normalization utilities."""

from __future__ import annotations

import logging
from numbers import Number

import pandas as pd

logger = logging.getLogger(__name__)

# Period columns as they appear in the INE-derived JSON exports
MONTH_COLUMNS = ["Mes"]
YEAR_COLUMNS = ["Anio", "Año"]


def _period_label(value, width: int):
    if value is None or (not isinstance(value, str) and pd.isna(value)):
        return None
    if isinstance(value, Number) and not isinstance(value, bool):
        return str(int(value)).zfill(width)
    text = str(value).strip()
    return text.zfill(width) if text.isdigit() else text


def _period_column(series: pd.Series, width: int) -> pd.Series:
    # object dtype keeps missing periods as None instead of a string-dtype NaN
    labels = [_period_label(v, width) for v in series]
    return pd.Series(labels, index=series.index, dtype=object)


def normalize_periods(df: pd.DataFrame) -> pd.DataFrame:
    """Render month columns as ``"01"``-``"12"`` and year columns as ``"2020"``."""
    df = df.copy()
    for col in MONTH_COLUMNS:
        if col in df.columns:
            df[col] = _period_column(df[col], 2)
    for col in YEAR_COLUMNS:
        if col in df.columns:
            df[col] = _period_column(df[col], 4)
    return df


def drop_duplicates(df: pd.DataFrame, subset: list[str] | None = None) -> pd.DataFrame:
    """Remove duplicate rows."""
    before = len(df)
    df = df.drop_duplicates(subset=subset)
    removed = before - len(df)
    if removed:
        logger.info("Removed %d duplicate rows", removed)
    return df


def fill_missing_numeric(df: pd.DataFrame, value: float = 0.0) -> pd.DataFrame:
    """Fill NaN in numeric columns with a default value."""
    numeric_cols = df.select_dtypes(include="number").columns
    df = df.copy()
    df[numeric_cols] = df[numeric_cols].fillna(value)
    return df


def strip_strings(df: pd.DataFrame) -> pd.DataFrame:
    """Strip leading/trailing whitespace from string values."""
    df = df.copy()
    str_cols = df.select_dtypes(include=["object", "string"]).columns
    for col in str_cols:
        df[col] = df[col].map(lambda v: v.strip() if isinstance(v, str) else v)
    return df


def coerce_numeric(df: pd.DataFrame, columns: list[str]) -> pd.DataFrame:
    """Force columns to numeric, coercing errors to NaN."""
    df = df.copy()
    for col in columns:
        if col in df.columns:
            df[col] = pd.to_numeric(df[col], errors="coerce")
    return df


def clean_dataframe(
    df: pd.DataFrame,
    numeric_columns: list[str] | None = None,
    dedup_subset: list[str] | None = None,
    numeric_fill: float | None = None,
) -> pd.DataFrame:
    """Run the full cleaning pipeline on a DataFrame.

    Missing numbers stay NaN unless ``numeric_fill`` is given; some charts
    need to tell a missing value apart from a zero.
    """
    df = strip_strings(df)
    df = normalize_periods(df)
    df = coerce_numeric(df, numeric_columns or [])
    df = drop_duplicates(df, subset=dedup_subset)
    if numeric_fill is not None:
        df = fill_missing_numeric(df, value=numeric_fill)
    logger.info("Cleaning complete: %d rows x %d cols", len(df), len(df.columns))
    return df
