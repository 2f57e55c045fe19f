"""Choropleth scene composition.

``render_choropleth`` is a pure function of its inputs: it resolves each
feature's region, joins its value, colors it and projects its path. Every
feature yields exactly one :class:`Shape`, even when its geometry is empty
or no observation matched it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Optional, Sequence

from app.geo.projection import MapSettings, Point, Ring, build_projection, path_from_rings, project_geometry
from app.geo.regions import Mode, is_canary
from app.processing.joiner import join_values
from app.rendering.colors import DEFAULT_COLORSCALE, build_color_scale
from app.schemas import RegionSelection, TourismDataPoint

logger = logging.getLogger(__name__)

ClickHandler = Callable[[RegionSelection], Any]


def format_total(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return f"{value:g}"


@dataclass(frozen=True)
class Shape:
    code: str
    name: str
    value: float
    matched: bool
    fill: str
    rings: tuple[Ring, ...]
    path: str
    offset: Optional[Point] = None

    @property
    def tooltip(self) -> str:
        return f"{self.name} - Total: {format_total(self.value)}"

    @property
    def transform(self) -> str:
        if self.offset is None:
            return ""
        return f"translate({format_total(self.offset[0])},{format_total(self.offset[1])})"

    def placed_rings(self) -> tuple[Ring, ...]:
        """Rings with the positional offset applied."""
        if self.offset is None:
            return self.rings
        dx, dy = self.offset
        return tuple(tuple((x + dx, y + dy) for x, y in ring) for ring in self.rings)


@dataclass(frozen=True)
class Scene:
    mode: Mode
    width: float
    height: float
    shapes: tuple[Shape, ...]
    max_value: float
    on_click: Optional[ClickHandler] = field(default=None, compare=False, repr=False)

    def activate(self, index: int) -> RegionSelection:
        """Simulate a click on shape *index* and notify the handler."""
        shape = self.shapes[index]
        selection = RegionSelection(name=shape.name, total=shape.value)
        if self.on_click is not None:
            self.on_click(selection)
        return selection

    def resolve_selection(self, selection: RegionSelection | None) -> RegionSelection | None:
        """Keep *selection* only while a shape with that name is drawn."""
        if selection is None:
            return None
        if any(shape.name == selection.name for shape in self.shapes):
            return selection
        return None


def render_choropleth(
    mode: Mode,
    geo_data: Sequence[Mapping[str, Any]],
    data: Sequence[TourismDataPoint],
    on_click: ClickHandler | None = None,
    settings: MapSettings | None = None,
    colorscale: str = DEFAULT_COLORSCALE,
) -> Scene:
    settings = settings or MapSettings()
    features = list(geo_data)
    projection = build_projection(features, settings)
    color_scale = build_color_scale((dp.value for dp in data), colorscale)

    shapes: list[Shape] = []
    for feature, joined in zip(features, join_values(features, data, mode)):
        feature = feature or {}
        rings = project_geometry(feature.get("geometry"), projection)
        offset = settings.canary_offset if is_canary(feature.get("properties")) else None
        shapes.append(
            Shape(
                code=joined.code,
                name=joined.name,
                value=joined.value,
                matched=joined.matched,
                fill=color_scale(joined.value),
                rings=rings,
                path=path_from_rings(rings),
                offset=offset,
            )
        )

    logger.debug("Rendered %s choropleth: %d shapes, max %.2f", mode, len(shapes), color_scale.domain[1])
    return Scene(
        mode=mode,
        width=settings.width,
        height=settings.height,
        shapes=tuple(shapes),
        max_value=color_scale.domain[1],
        on_click=on_click,
    )
