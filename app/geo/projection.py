"""Mercator projection and path generation for GeoJSON features.

The projection follows the usual fit-then-override sequence: it is first
fitted to the bounding box of the whole collection, then an optional fixed
centre and scale are applied so every render of Spain lands in the same
frame regardless of which geography file is loaded.

Coordinates go through pyproj's Web Mercator (EPSG:3857) and are divided by
the sphere radius, so ``scale`` is in pixels per radian.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Iterable, Iterator, Mapping, Sequence

from pyproj import Transformer
from shapely.geometry import MultiPoint

Point = tuple[float, float]
Ring = tuple[Point, ...]

MAX_LATITUDE = 85.0511287798066
EARTH_RADIUS = 6378137.0


@dataclass(frozen=True)
class MapSettings:
    width: float = 800
    height: float = 600
    center: Point | None = (-3.9, 38.65)
    scale: float | None = 2400
    canary_offset: Point = (230, -290)


@lru_cache(maxsize=1)
def _web_mercator() -> Transformer:
    return Transformer.from_crs("EPSG:4326", "EPSG:3857", always_xy=True)


def _mercator_raw(points: Sequence[Point]) -> list[Point]:
    """Unscaled Mercator ``(x, y)`` in radians for lon/lat *points*."""
    if not points:
        return []
    lons = [float(lon) for lon, _ in points]
    lats = [max(-MAX_LATITUDE, min(MAX_LATITUDE, float(lat))) for _, lat in points]
    xs, ys = _web_mercator().transform(lons, lats)
    return [(x / EARTH_RADIUS, y / EARTH_RADIUS) for x, y in zip(xs, ys)]


class MercatorProjection:
    """Spherical Mercator with screen-space scale and translation."""

    def __init__(
        self,
        scale: float = 150,
        center: Point = (0.0, 0.0),
        translate: Point = (480.0, 250.0),
    ):
        self.scale = float(scale)
        self.center = (float(center[0]), float(center[1]))
        self.translate = (float(translate[0]), float(translate[1]))

    def __call__(self, lon: float, lat: float) -> Point:
        return self.project_ring([(lon, lat)])[0]

    def fit_size(self, width: float, height: float, features: Iterable[Mapping[str, Any]]) -> "MercatorProjection":
        """Fit the projected bounds of *features* into ``width x height``.

        Collections with no coordinates (or a single point) leave the
        projection unchanged.
        """
        positions = [
            point
            for feature in features
            for ring in iter_rings((feature or {}).get("geometry"))
            for point in ring
        ]
        if not positions:
            return self
        # Mercator is monotonic on both axes, so the lon/lat box projects
        # onto the projected box
        min_lon, min_lat, max_lon, max_lat = MultiPoint(positions).bounds
        (x0, y_low), (x1, y_high) = _mercator_raw([(min_lon, min_lat), (max_lon, max_lat)])
        top = -y_high
        dx = x1 - x0
        dy = y_high - y_low
        spans = [w / d for w, d in ((width, dx), (height, dy)) if d > 0]
        if not spans:
            return self
        k = min(spans)
        self.scale = k
        self.center = (0.0, 0.0)
        self.translate = (
            -k * x0 + (width - k * dx) / 2,
            -k * top + (height - k * dy) / 2,
        )
        return self

    def project_ring(self, ring: Sequence[Point]) -> Ring:
        (cx, cy), *raw = _mercator_raw([self.center, *ring])
        tx, ty = self.translate
        return tuple((tx + self.scale * (x - cx), ty - self.scale * (y - cy)) for x, y in raw)


def build_projection(
    features: Sequence[Mapping[str, Any]],
    settings: MapSettings | None = None,
) -> MercatorProjection:
    """Fit to *features*, then apply the fixed centre/scale from *settings*."""
    settings = settings or MapSettings()
    projection = MercatorProjection().fit_size(settings.width, settings.height, features)
    if settings.center is not None:
        projection.center = (float(settings.center[0]), float(settings.center[1]))
        projection.translate = (settings.width / 2, settings.height / 2)
    if settings.scale is not None:
        projection.scale = float(settings.scale)
    return projection


# ---------------------------------------------------------------------------
# Geometry walking
# ---------------------------------------------------------------------------


def _clean_ring(ring: Any) -> list[Point]:
    points: list[Point] = []
    for position in ring or ():
        try:
            lon, lat = float(position[0]), float(position[1])
        except (TypeError, ValueError, IndexError):
            continue
        if math.isfinite(lon) and math.isfinite(lat):
            points.append((lon, lat))
    # GeoJSON rings repeat their first position at the end
    if len(points) > 1 and points[0] == points[-1]:
        points.pop()
    return points


def iter_rings(geometry: Mapping[str, Any] | None) -> Iterator[list[Point]]:
    """Yield every non-empty ring of a Polygon/MultiPolygon geometry."""
    if not geometry:
        return
    kind = geometry.get("type")
    coords = geometry.get("coordinates") or []
    if kind == "Polygon":
        polygons = [coords]
    elif kind == "MultiPolygon":
        polygons = coords
    elif kind == "GeometryCollection":
        for child in geometry.get("geometries") or []:
            yield from iter_rings(child)
        return
    else:
        return
    for polygon in polygons:
        for ring in polygon or ():
            points = _clean_ring(ring)
            if points:
                yield points


def project_geometry(geometry: Mapping[str, Any] | None, projection: MercatorProjection) -> tuple[Ring, ...]:
    return tuple(projection.project_ring(ring) for ring in iter_rings(geometry))


def _fmt(value: float) -> str:
    value = round(value, 3)
    if value == int(value):
        return str(int(value))
    return f"{value:.3f}".rstrip("0")


def path_from_rings(rings: Iterable[Ring]) -> str:
    """Serialize projected rings as ``M x,y L x,y ... Z`` commands."""
    parts: list[str] = []
    for ring in rings:
        if not ring:
            continue
        head, *rest = ring
        parts.append(f"M{_fmt(head[0])},{_fmt(head[1])}")
        parts.extend(f"L{_fmt(x)},{_fmt(y)}" for x, y in rest)
        parts.append("Z")
    return "".join(parts)
