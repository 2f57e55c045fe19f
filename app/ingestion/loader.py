"""Loading of the pre-computed JSON datasets and GeoJSON geometries.

Files are read from ``TURISMO_DATA_DIR`` or, when ``TURISMO_DATA_BASE_URL``
is set, downloaded from that base URL.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import httpx
import pandas as pd

from app.ingestion.datasets import (
    DATA_BASE_URL,
    DATA_DIR,
    DATASET_REGISTRY,
    GEOJSON_REGISTRY,
    HTTP_TIMEOUT,
)

logger = logging.getLogger(__name__)

TIMEOUT = httpx.Timeout(HTTP_TIMEOUT)


def fetch_json(url: str, client: httpx.Client | None = None) -> Any:
    """Download and decode a JSON document."""
    logger.info("Downloading %s", url)
    if client is None:
        resp = httpx.get(url, follow_redirects=True, timeout=TIMEOUT)
    else:
        resp = client.get(url, follow_redirects=True)
    resp.raise_for_status()
    return resp.json()


def read_json(path: str | Path) -> Any:
    logger.info("Reading %s", path)
    with open(path, encoding="utf-8") as fh:
        return json.load(fh)


def load_resource(
    relative_path: str,
    data_dir: str | Path | None = None,
    base_url: str | None = None,
    client: httpx.Client | None = None,
) -> Any:
    """Load ``relative_path`` from the base URL if one is configured, else from disk."""
    base_url = base_url if base_url is not None else DATA_BASE_URL
    if base_url:
        return fetch_json(f"{base_url.rstrip('/')}/{relative_path}", client=client)
    return read_json(Path(data_dir if data_dir is not None else DATA_DIR) / relative_path)


def load_dataset(key: str, **kwargs) -> pd.DataFrame:
    """Load a registered tabular dataset as a raw DataFrame."""
    if key not in DATASET_REGISTRY:
        raise KeyError(f"Unknown dataset: {key}")
    payload = load_resource(DATASET_REGISTRY[key].filename, **kwargs)
    if not isinstance(payload, list):
        raise ValueError(f"Dataset {key} is not a JSON array of records")
    df = pd.DataFrame.from_records(payload)
    logger.info("Loaded %s: %d rows x %d columns", key, len(df), len(df.columns))
    return df


def load_geojson(mode: str, **kwargs) -> list[dict[str, Any]]:
    """Load the feature list of the province or community GeoJSON."""
    if mode not in GEOJSON_REGISTRY:
        raise KeyError(f"Unknown geometry: {mode}")
    payload = load_resource(GEOJSON_REGISTRY[mode], **kwargs)
    if not isinstance(payload, dict) or payload.get("type") != "FeatureCollection":
        raise ValueError(f"Geometry {mode} is not a GeoJSON FeatureCollection")
    features = payload.get("features") or []
    logger.info("Loaded %s geometry: %d features", mode, len(features))
    return features
