"""Join GeoJSON features to per-region observations by region code."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Sequence

from app.geo.regions import Mode, RegionRecord, region_from_properties
from app.schemas import TourismDataPoint

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class JoinedRegion:
    region: RegionRecord
    value: float
    matched: bool

    @property
    def code(self) -> str:
        return self.region.code

    @property
    def name(self) -> str:
        return self.region.name


def join_values(
    features: Sequence[Mapping[str, Any]],
    observations: Sequence[TourismDataPoint],
    mode: Mode,
) -> list[JoinedRegion]:
    """Return one :class:`JoinedRegion` per feature, in feature order.

    The first observation whose code equals the feature's code wins. Features
    without a match get value 0 and are still returned. The display name
    always comes from the geography, never from the observation.
    """
    joined: list[JoinedRegion] = []
    misses = 0
    for feature in features:
        region = region_from_properties((feature or {}).get("properties"), mode)
        match = next((obs for obs in observations if obs.code == region.code), None)
        if match is None:
            misses += 1
            joined.append(JoinedRegion(region=region, value=0.0, matched=False))
        else:
            joined.append(JoinedRegion(region=region, value=float(match.value), matched=True))
    if misses:
        logger.debug("Join left %d of %d regions without data", misses, len(joined))
    return joined
