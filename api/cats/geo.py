"""
Coordinate transcoding between (lat, lng) and a PostGIS point.

The pair is stored as `geometry(Point, 4326)` with x = lat and y = lng, and
read back with ST_X / ST_Y. Both ends use float8, so values round-trip
without loss.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Mapping

SRID = 4326


@dataclass(frozen=True)
class GeoPoint:
    lat: float
    lng: float

    def __post_init__(self) -> None:
        if self.lat is None or self.lng is None:
            raise ValueError("Both coordinates are required.")
        if not (math.isfinite(self.lat) and math.isfinite(self.lng)):
            raise ValueError("Coordinates must be finite numbers.")

    def placeholder(self, index: int) -> str:
        return point_expression(index, index + 1)

    def params(self) -> tuple[float, float]:
        return float(self.lat), float(self.lng)

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "GeoPoint":
        return cls(lat=float(row["lat"]), lng=float(row["lng"]))


def point_expression(lat_index: int, lng_index: int) -> str:
    """SQL that encodes two bound parameters into a point."""
    return f"ST_SetSRID(ST_MakePoint(${lat_index}, ${lng_index}), {SRID})"


def select_coordinates(column: str) -> str:
    """SQL select-list fragment that decodes a point column into lat/lng."""
    return f"ST_X({column}) AS lat, ST_Y({column}) AS lng"
