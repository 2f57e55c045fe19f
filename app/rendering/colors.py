"""Sequential color scale for choropleth fills."""

from __future__ import annotations

import math
from typing import Iterable

from plotly.colors import sample_colorscale

DEFAULT_COLORSCALE = "Reds"


class ColorScale:
    """Map ``[0, max_value]`` onto a sequential plotly colorscale.

    Inputs outside the domain are clamped. A zero-width domain maps every
    input to the low end of the gradient.
    """

    def __init__(self, max_value: float = 0.0, colorscale: str = DEFAULT_COLORSCALE):
        self.domain = (0.0, float(max_value))
        self.colorscale = colorscale

    def position(self, value: float) -> float:
        low, high = self.domain
        if high <= low or value is None or not math.isfinite(value):
            return 0.0
        return min(1.0, max(0.0, (value - low) / (high - low)))

    def __call__(self, value: float) -> str:
        return sample_colorscale(self.colorscale, [self.position(value)])[0]


def max_observed(values: Iterable[float]) -> float:
    finite = [v for v in values if v is not None and math.isfinite(v)]
    return max(finite, default=0.0)


def build_color_scale(values: Iterable[float], colorscale: str = DEFAULT_COLORSCALE) -> ColorScale:
    return ColorScale(max(0.0, max_observed(values)), colorscale)
