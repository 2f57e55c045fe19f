"""Data transformation: period filtering and aggregation for every chart."""

from __future__ import annotations

import logging

import pandas as pd

from app.geo.regions import parse_region_label
from app.schemas import ALL_REGIONS, TourismDataPoint

logger = logging.getLogger(__name__)


def _require(df: pd.DataFrame, columns: list[str]) -> None:
    for col in columns:
        if col not in df.columns:
            raise KeyError(f"Missing required column: {col}")


# ---------------------------------------------------------------------------
# Tourist dwellings (maps)
# ---------------------------------------------------------------------------


def tourism_data_points(
    df: pd.DataFrame,
    label_column: str,
    month: str,
    year: str,
    value_column: str = "Total",
) -> list[TourismDataPoint]:
    """Filter one month of the tourist-dwellings dataset into map points.

    ``label_column`` holds ``"<code> <name>"`` labels (``Provincias`` or
    ``Comunidades``). Missing totals count as 0.
    """
    if df.empty:
        logger.warning("No %s rows loaded", label_column)
        return []
    _require(df, [label_column, "Mes", "Anio", value_column])
    filtered = df[(df["Mes"] == month) & (df["Anio"] == year)]
    points = []
    for label, value in zip(filtered[label_column], filtered[value_column]):
        code, name = parse_region_label(label)
        points.append(TourismDataPoint(code=code, name=name, value=0.0 if pd.isna(value) else float(value)))
    if not points:
        logger.warning("No %s rows for %s/%s", label_column, month, year)
    else:
        logger.debug("Built %d data points for %s/%s", len(points), month, year)
    return points


def total_value(points: list[TourismDataPoint]) -> float:
    return sum(p.value for p in points)


# ---------------------------------------------------------------------------
# Community helpers
# ---------------------------------------------------------------------------


def community_options(df: pd.DataFrame, column: str) -> list[str]:
    """Dropdown entries: ``"Todos"`` followed by every community, sorted."""
    _require(df, [column])
    values = sorted({v for v in df[column].dropna().astype(str)})
    return [ALL_REGIONS] + values


def filter_by_community(df: pd.DataFrame, column: str, community: str) -> pd.DataFrame:
    _require(df, [column])
    if community == ALL_REGIONS:
        return df
    return df[df[column] == community]


# ---------------------------------------------------------------------------
# Foreign tourists vs mortgages
# ---------------------------------------------------------------------------


def grouped_comparison(df: pd.DataFrame, month: str, year: str, community: str = ALL_REGIONS) -> pd.DataFrame:
    """Normalized foreigners and mortgages per community for one month.

    Returns a DataFrame with columns: name, foreigners, mortgages
    """
    _require(df, ["Comunidades", "Mes", "Anio", "NormalizedTurismo", "NormalizedHipotecas"])
    filtered = filter_by_community(df, "Comunidades", community)
    filtered = filtered[(filtered["Anio"] == year) & (filtered["Mes"] == month)]
    result = pd.DataFrame({
        "name": filtered["Comunidades"].to_numpy(),
        "foreigners": filtered["NormalizedTurismo"].to_numpy(),
        "mortgages": filtered["NormalizedHipotecas"].to_numpy(),
    })
    logger.info("Grouped comparison for %s/%s: %d rows", month, year, len(result))
    return result


def yearly_averages(df: pd.DataFrame, community: str = ALL_REGIONS) -> pd.DataFrame:
    """Yearly mean of foreign tourists and mortgages.

    Returns a DataFrame with columns: year, tourism, mortgages (sorted by year)
    """
    _require(df, ["Comunidades", "Anio", "TotalTurismo", "TotalHipotecas"])
    filtered = filter_by_community(df, "Comunidades", community)
    if filtered.empty:
        return pd.DataFrame(columns=["year", "tourism", "mortgages"])
    agg = (
        filtered.groupby("Anio")
        .agg(tourism=("TotalTurismo", "mean"), mortgages=("TotalHipotecas", "mean"))
        .reset_index()
        .rename(columns={"Anio": "year"})
        .sort_values("year")
        .reset_index(drop=True)
    )
    logger.info("Yearly averages for %s: %d years", community, len(agg))
    return agg


# ---------------------------------------------------------------------------
# GDP vs mortgages
# ---------------------------------------------------------------------------


def quarter_series(df: pd.DataFrame, quarter: int) -> pd.DataFrame:
    """Normalized GDP and mortgages for one quarter across years.

    Returns a DataFrame with columns: year, gdp, mortgages (sorted by year)
    """
    _require(df, ["Año", "Trimestre", "PIB_Normalizado", "Hipotecas_Normalizadas"])
    filtered = df[pd.to_numeric(df["Trimestre"], errors="coerce") == quarter]
    result = (
        pd.DataFrame({
            "year": filtered["Año"].to_numpy(),
            "gdp": filtered["PIB_Normalizado"].to_numpy(),
            "mortgages": filtered["Hipotecas_Normalizadas"].to_numpy(),
        })
        .sort_values("year")
        .reset_index(drop=True)
    )
    logger.info("Quarter %d series: %d rows", quarter, len(result))
    return result


# ---------------------------------------------------------------------------
# Mortgages vs interest rate
# ---------------------------------------------------------------------------


def available_years(df: pd.DataFrame, column: str = "Anio") -> list[str]:
    _require(df, [column])
    return sorted({str(v) for v in df[column].dropna()})


def monthly_rates(df: pd.DataFrame, year: str) -> pd.DataFrame:
    """National mortgages and interest rate per month of *year*.

    Returns a DataFrame with columns: month, mortgages, interest_rate
    """
    _require(df, ["Anio", "Mes", "Hipotecas_Nacional", "Tipo_Interes"])
    filtered = df[df["Anio"] == year]
    result = (
        pd.DataFrame({
            "month": filtered["Mes"].to_numpy(),
            "mortgages": filtered["Hipotecas_Nacional"].to_numpy(),
            "interest_rate": filtered["Tipo_Interes"].to_numpy(),
        })
        .sort_values("month")
        .reset_index(drop=True)
    )
    logger.info("Monthly rates for %s: %d rows", year, len(result))
    return result


# ---------------------------------------------------------------------------
# Mortgages vs average income
# ---------------------------------------------------------------------------


def yearly_income_mortgages(df: pd.DataFrame, community: str = ALL_REGIONS) -> pd.DataFrame:
    """Yearly mean of annual mortgages and average income.

    Rows missing either value are dropped before averaging.
    Returns a DataFrame with columns: year, mortgages, income (sorted by year)
    """
    _require(df, ["Comunidades_Autonomas", "Año", "Hipotecas_Anual", "RentaMedia"])
    filtered = filter_by_community(df, "Comunidades_Autonomas", community)
    filtered = filtered.dropna(subset=["Hipotecas_Anual", "RentaMedia"])
    if filtered.empty:
        logger.warning("No income/mortgage rows for %s", community)
        return pd.DataFrame(columns=["year", "mortgages", "income"])
    agg = (
        filtered.groupby("Año")
        .agg(mortgages=("Hipotecas_Anual", "mean"), income=("RentaMedia", "mean"))
        .reset_index()
        .rename(columns={"Año": "year"})
        .sort_values("year")
        .reset_index(drop=True)
    )
    logger.info("Income vs mortgages for %s: %d years", community, len(agg))
    return agg
