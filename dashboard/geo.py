"""Map page definitions for the Spain choropleth pages."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class MapPage:
    title: str
    prompt: str
    selection_key: str
    default_month: int = 8
    default_year: int = 2020
    year_range: tuple[int, int] = (2020, 2024)


MAP_PAGES = {
    "province": MapPage(
        title="Viviendas turísticas por provincia",
        prompt="Haz click en una provincia",
        selection_key="selected_province",
    ),
    "community": MapPage(
        title="Viviendas turísticas por comunidad",
        prompt="Haz click en una comunidad",
        selection_key="selected_community",
    ),
}
