"""Registry of available datasets and geometries, and their configurations."""

from __future__ import annotations

import os
from dataclasses import dataclass, field

DATA_DIR = os.getenv("TURISMO_DATA_DIR", "data")
DATA_BASE_URL = os.getenv("TURISMO_DATA_BASE_URL")
HTTP_TIMEOUT = float(os.getenv("TURISMO_HTTP_TIMEOUT", "30"))


@dataclass
class DatasetConfig:
    name: str
    filename: str
    description: str
    numeric_columns: list[str] = field(default_factory=list)
    source: str = "INE"


DATASET_REGISTRY: dict[str, DatasetConfig] = {
    "viviendas_provincias": DatasetConfig(
        name="Viviendas turisticas por provincia",
        filename="viviendas_turisticas_provincias.json",
        description="Numero mensual de viviendas turisticas por provincia.",
        numeric_columns=["Total"],
    ),
    "viviendas_comunidades": DatasetConfig(
        name="Viviendas turisticas por comunidad",
        filename="viviendas_turisticas_comunidades.json",
        description="Numero mensual de viviendas turisticas por comunidad autonoma.",
        numeric_columns=["Total"],
    ),
    "extranjeros_hipotecas": DatasetConfig(
        name="Turistas extranjeros e hipotecas",
        filename="extranjeros_hipotecas.json",
        description="Llegada de turistas extranjeros (FRONTUR) y numero de hipotecas por comunidad y mes.",
        numeric_columns=["TotalTurismo", "TotalHipotecas", "NormalizedTurismo", "NormalizedHipotecas"],
    ),
    "pib_hipotecas": DatasetConfig(
        name="PIB e hipotecas",
        filename="pib_hipotecas.json",
        description="PIB y numero de hipotecas normalizados por trimestre.",
        numeric_columns=["Trimestre", "PIB_Normalizado", "Hipotecas_Normalizadas"],
    ),
    "hipotecas_tipo_interes": DatasetConfig(
        name="Hipotecas y tipo de interes",
        filename="hipotecas_tipo_interes.json",
        description="Hipotecas a nivel nacional y tipo de interes medio por mes.",
        numeric_columns=["Hipotecas_Nacional", "Tipo_Interes"],
    ),
    "hipotecas_renta": DatasetConfig(
        name="Hipotecas y renta media",
        filename="hipotecas_renta.json",
        description="Hipotecas anuales y renta media por comunidad autonoma.",
        numeric_columns=["Hipotecas_Anual", "RentaMedia"],
    ),
}

GEOJSON_REGISTRY: dict[str, str] = {
    "province": "geojson/spain-provinces.geojson",
    "community": "geojson/spain-communities.geojson",
}
