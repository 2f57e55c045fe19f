"""Pydantic models shared by the aggregation layer, the renderer and the UI."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

ALL_REGIONS = "Todos"


# ---------------------------------------------------------------------------
# Map data
# ---------------------------------------------------------------------------


class TourismDataPoint(BaseModel):
    code: str
    name: str
    value: float

    model_config = {"frozen": True}


class RegionSelection(BaseModel):
    """Payload handed to the click handler when a region is activated."""

    name: str
    total: float

    model_config = {"frozen": True}


# ---------------------------------------------------------------------------
# Filters
# ---------------------------------------------------------------------------


class Filters(BaseModel):
    month: str = Field("08", pattern=r"^(0[1-9]|1[0-2])$")
    year: str = Field("2020", pattern=r"^\d{4}$")
    region: str = ALL_REGIONS
    quarter: int = Field(1, ge=1, le=4)

    model_config = {"frozen": True}

    @field_validator("month", mode="before")
    @classmethod
    def _pad_month(cls, value):
        # Sliders hand back integers
        if isinstance(value, int):
            return f"{value:02d}"
        if isinstance(value, str) and value.isdigit() and len(value) == 1:
            return value.zfill(2)
        return value

    @field_validator("year", mode="before")
    @classmethod
    def _year_as_str(cls, value):
        if isinstance(value, int):
            return str(value)
        return value
