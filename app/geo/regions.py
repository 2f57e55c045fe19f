"""Region identifiers for Spanish provinces and autonomous communities.

Two identifier schemes coexist in the source files: province features carry
``cod_prov``/``name`` and community features carry ``cod_ccaa``/``noml_ccaa``.
Both carry ``cod_ccaa``, which is what the Canary Islands offset keys on.
Tabular datasets label regions as free text, e.g. ``"04 Almería"``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Literal, Mapping

logger = logging.getLogger(__name__)

Mode = Literal["province", "community"]

UNKNOWN_CODE = "00"
CANARY_COMMUNITY_CODE = "04"

# (code field, name field) per granularity
PROPERTY_FIELDS: dict[str, tuple[str, str]] = {
    "province": ("cod_prov", "name"),
    "community": ("cod_ccaa", "noml_ccaa"),
}
PARENT_COMMUNITY_FIELD = "cod_ccaa"


@dataclass(frozen=True)
class RegionRecord:
    code: str
    name: str
    parent_community_code: str


def _as_code(value: Any) -> str:
    if value is None:
        return ""
    code = str(value).strip()
    # Some exports store codes as integers and lose the leading zero
    if code.isdigit() and len(code) < 2:
        code = code.zfill(2)
    return code


def region_from_properties(properties: Mapping[str, Any] | None, mode: Mode) -> RegionRecord:
    """Read code, display name and parent community code for *mode*.

    Missing fields resolve to empty strings, which never match a parsed label.
    """
    if mode not in PROPERTY_FIELDS:
        raise ValueError(f"Unknown map mode: {mode!r}")
    props = properties or {}
    code_field, name_field = PROPERTY_FIELDS[mode]
    name = props.get(name_field)
    return RegionRecord(
        code=_as_code(props.get(code_field)),
        name="" if name is None else str(name).strip(),
        parent_community_code=_as_code(props.get(PARENT_COMMUNITY_FIELD)),
    )


def parse_region_label(label: Any) -> tuple[str, str]:
    """Split ``"<code> <name>"`` into ``(code, name)``.

    A label without whitespace (or no label at all) yields ``("00", "")``.
    """
    if not isinstance(label, str):
        return UNKNOWN_CODE, ""
    parts = label.split()
    if len(parts) < 2:
        if label.strip():
            logger.debug("Region label without a name part: %r", label)
        return UNKNOWN_CODE, ""
    return parts[0], " ".join(parts[1:])


def is_canary(properties: Mapping[str, Any] | None) -> bool:
    """True when the feature belongs to the Canary Islands community."""
    parent = _as_code((properties or {}).get(PARENT_COMMUNITY_FIELD))
    return CANARY_COMMUNITY_CODE in parent
