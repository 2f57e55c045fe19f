"""Data pipeline: ingest → clean, and the map recomputation entry point.

``load_dashboard_data`` runs once when the dashboard starts. ``render_map``
is called again on every filter change and recomputes the scene from
scratch.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Sequence

import pandas as pd

from app.geo.projection import MapSettings
from app.geo.regions import Mode
from app.ingestion.datasets import DATASET_REGISTRY, GEOJSON_REGISTRY
from app.ingestion.loader import load_dataset, load_geojson
from app.processing.cleaner import clean_dataframe
from app.processing.transformer import total_value, tourism_data_points
from app.rendering.choropleth import ClickHandler, Scene, render_choropleth
from app.schemas import Filters, TourismDataPoint

logger = logging.getLogger(__name__)

# Tourist-dwellings dataset and label column backing each map mode
MAP_SOURCES: dict[str, tuple[str, str]] = {
    "province": ("viviendas_provincias", "Provincias"),
    "community": ("viviendas_comunidades", "Comunidades"),
}


@dataclass
class DashboardData:
    datasets: dict[str, pd.DataFrame] = field(default_factory=dict)
    geometries: dict[str, list[dict[str, Any]]] = field(default_factory=dict)

    def observations_for(self, mode: Mode) -> pd.DataFrame:
        return self.datasets[MAP_SOURCES[mode][0]]


def load_dashboard_data(**kwargs) -> DashboardData:
    """Load and clean every registered dataset and geometry.

    Any load failure propagates; the caller decides how to surface it.
    """
    data = DashboardData()

    logger.info("=== STEP 1: Loading geometries ===")
    for mode in GEOJSON_REGISTRY:
        data.geometries[mode] = load_geojson(mode, **kwargs)

    logger.info("=== STEP 2: Loading and cleaning datasets ===")
    for key, config in DATASET_REGISTRY.items():
        raw = load_dataset(key, **kwargs)
        data.datasets[key] = clean_dataframe(raw, numeric_columns=config.numeric_columns)

    logger.info(
        "=== Load complete: %d datasets, %d geometries ===",
        len(data.datasets),
        len(data.geometries),
    )
    return data


@dataclass(frozen=True)
class MapView:
    """A drawn choropleth plus the month's observations behind it.

    ``total`` sums every observation of the period, including rows whose
    code matched no region.
    """

    scene: Scene
    points: list[TourismDataPoint]

    @property
    def total(self) -> float:
        return total_value(self.points)


def render_map(
    mode: Mode,
    filters: Filters,
    geo_data: Sequence[dict[str, Any]],
    observations: pd.DataFrame,
    on_click: ClickHandler | None = None,
    settings: MapSettings | None = None,
) -> MapView:
    """Filter *observations* to the selected month and draw the choropleth."""
    _, label_column = MAP_SOURCES[mode]
    points = tourism_data_points(observations, label_column, filters.month, filters.year)
    scene = render_choropleth(mode, geo_data, points, on_click=on_click, settings=settings)
    return MapView(scene=scene, points=points)
