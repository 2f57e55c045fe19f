"""Tests for dataset loading, the load pipeline and the map entry point.

Local files are written to a temporary directory; HTTP downloads go
through ``httpx.MockTransport``.
"""

from __future__ import annotations

import json

import httpx
import pandas as pd
import pytest

from app.ingestion.datasets import DATASET_REGISTRY, GEOJSON_REGISTRY
from app.ingestion.loader import load_dataset, load_geojson
from app.pipeline import load_dashboard_data, render_map
from app.rendering.figures import dual_axis_figure, grouped_bar_figure, scene_figure
from app.schemas import Filters

FEATURES = [
    {
        "type": "Feature",
        "properties": {"cod_prov": "04", "name": "Almería", "cod_ccaa": "01"},
        "geometry": {
            "type": "Polygon",
            "coordinates": [[[-2.5, 36.8], [-1.7, 36.8], [-1.7, 37.6], [-2.5, 37.6], [-2.5, 36.8]]],
        },
    },
    {
        "type": "Feature",
        "properties": {"cod_prov": "35", "name": "Las Palmas", "cod_ccaa": "04"},
        "geometry": {
            "type": "Polygon",
            "coordinates": [[[-15.8, 27.8], [-15.4, 27.8], [-15.4, 28.2], [-15.8, 28.2], [-15.8, 27.8]]],
        },
    },
]

VIVIENDAS = [
    {"Provincias": "04 Almería", "Mes": "08", "Anio": "2020", "Total": 1200},
    {"Provincias": "35 Las Palmas", "Mes": "08", "Anio": "2020", "Total": 5400},
    {"Provincias": "35 Las Palmas", "Mes": "09", "Anio": "2020", "Total": 5000},
]


def _write(path, payload) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload), encoding="utf-8")


@pytest.fixture
def data_dir(tmp_path):
    """A data directory holding every registered file."""
    for mode, relative in GEOJSON_REGISTRY.items():
        _write(tmp_path / relative, {"type": "FeatureCollection", "features": FEATURES})
    for key, config in DATASET_REGISTRY.items():
        _write(tmp_path / config.filename, VIVIENDAS if key == "viviendas_provincias" else [])
    return tmp_path


# ── Loader ────────────────────────────────────────────────────────────────

class TestLoader:
    def test_load_dataset_from_disk(self, data_dir):
        df = load_dataset("viviendas_provincias", data_dir=data_dir, base_url="")
        assert len(df) == 3
        assert list(df.columns) == ["Provincias", "Mes", "Anio", "Total"]

    def test_load_geojson_from_disk(self, data_dir):
        features = load_geojson("province", data_dir=data_dir, base_url="")
        assert len(features) == 2

    def test_unknown_dataset(self, data_dir):
        with pytest.raises(KeyError):
            load_dataset("nope", data_dir=data_dir, base_url="")

    def test_missing_file(self, tmp_path):
        with pytest.raises(OSError):
            load_dataset("viviendas_provincias", data_dir=tmp_path, base_url="")

    def test_rejects_non_feature_collection(self, tmp_path):
        _write(tmp_path / GEOJSON_REGISTRY["community"], {"type": "Feature"})
        with pytest.raises(ValueError):
            load_geojson("community", data_dir=tmp_path, base_url="")

    def test_rejects_non_list_dataset(self, tmp_path):
        _write(tmp_path / DATASET_REGISTRY["pib_hipotecas"].filename, {"rows": []})
        with pytest.raises(ValueError):
            load_dataset("pib_hipotecas", data_dir=tmp_path, base_url="")

    def test_load_over_http(self):
        requested = []

        def handler(request: httpx.Request) -> httpx.Response:
            requested.append(str(request.url))
            return httpx.Response(200, json={"type": "FeatureCollection", "features": FEATURES})

        with httpx.Client(transport=httpx.MockTransport(handler)) as client:
            features = load_geojson("province", base_url="https://example.test/data/", client=client)

        assert len(features) == 2
        assert requested == ["https://example.test/data/geojson/spain-provinces.geojson"]

    def test_http_error_propagates(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(404))
        with httpx.Client(transport=transport) as client:
            with pytest.raises(httpx.HTTPStatusError):
                load_dataset("viviendas_provincias", base_url="https://example.test", client=client)


# ── Pipeline ──────────────────────────────────────────────────────────────

class TestPipeline:
    def test_load_dashboard_data(self, data_dir):
        data = load_dashboard_data(data_dir=data_dir, base_url="")
        assert set(data.datasets) == set(DATASET_REGISTRY)
        assert set(data.geometries) == set(GEOJSON_REGISTRY)
        assert len(data.observations_for("province")) == 3

    def test_render_map_filters_period(self, data_dir):
        data = load_dashboard_data(data_dir=data_dir, base_url="")
        scene = render_map(
            "province",
            Filters(month="08", year="2020"),
            data.geometries["province"],
            data.observations_for("province"),
        ).scene
        assert [s.value for s in scene.shapes] == [1200, 5400]
        assert scene.max_value == 5400
        assert scene.shapes[1].offset is not None

    def test_render_map_empty_period_still_draws(self):
        observations = pd.DataFrame(VIVIENDAS)
        scene = render_map("province", Filters(month="01", year="2021"), FEATURES, observations).scene
        assert len(scene.shapes) == 2
        assert all(not s.matched for s in scene.shapes)

    def test_render_map_empty_dataset_still_draws(self):
        view = render_map("province", Filters(), FEATURES, pd.DataFrame.from_records([]))
        assert view.points == []
        assert view.total == 0
        assert len(view.scene.shapes) == 2
        assert view.scene.max_value == 0
        assert len({s.fill for s in view.scene.shapes}) == 1

    def test_headline_total_counts_every_observation(self):
        rows = VIVIENDAS + [{"Provincias": "99 Desconocida", "Mes": "08", "Anio": "2020", "Total": 7}]
        view = render_map("province", Filters(month="08", year="2020"), FEATURES, pd.DataFrame(rows))
        assert [p.code for p in view.points] == ["04", "35", "99"]
        assert view.total == 1200 + 5400 + 7
        assert sum(s.value for s in view.scene.shapes) == 1200 + 5400


# ── Figures ───────────────────────────────────────────────────────────────

class TestFigures:
    def test_scene_figure_has_trace_per_shape(self):
        scene = render_map("province", Filters(), FEATURES, pd.DataFrame(VIVIENDAS)).scene
        fig = scene_figure(scene)
        # one filled outline per shape plus the marker layer
        assert len(fig.data) == len(scene.shapes) + 1
        assert list(fig.data[-1].customdata) == [0, 1]
        assert fig.data[0].text == "Almería - Total: 1200"

    def test_grouped_bar_figure(self):
        df = pd.DataFrame({"name": ["A"], "foreigners": [0.5], "mortgages": [0.4]})
        fig = grouped_bar_figure(df)
        assert [t.name for t in fig.data] == ["Extranjeros", "Hipotecas"]

    def test_dual_axis_figure(self):
        df = pd.DataFrame({"year": ["2019", "2020"], "gdp": [1.0, 2.0], "mortgages": [3.0, 4.0]})
        fig = dual_axis_figure(df, "year", ("gdp", "PIB", "blue"), ("mortgages", "Hipotecas", "red"), "t")
        assert fig.data[1].yaxis == "y2"
