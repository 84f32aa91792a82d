"""Data models for geofence sites and derived polygon geometries."""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from shapely.geometry import Polygon

LatLng = Tuple[float, float]

class SiteKind(Enum):
    POLYGON = "Polygon"
    POINT = "Point"
    CIRCLE = "Circle"
    OTHER = "Other"

@dataclass(frozen=True)
class SiteType:
    """Geometry kind of a catalog site, keeping the raw catalog spelling."""
    kind: SiteKind
    raw: str

    @classmethod
    def parse(cls, raw: Optional[str]) -> "SiteType":
        text = "" if raw is None else str(raw)
        for kind in (SiteKind.POLYGON, SiteKind.POINT, SiteKind.CIRCLE):
            if text == kind.value:
                return cls(kind, text)
        return cls(SiteKind.OTHER, text)

    @property
    def is_polygon(self) -> bool:
        return self.kind is SiteKind.POLYGON

@dataclass(frozen=True)
class GeofenceSite:
    site_name: str
    type: SiteType
    latlong: Tuple[str, ...] = ()
    site_type: Optional[str] = None
    radius: Optional[float] = None

    @property
    def is_polygon_candidate(self) -> bool:
        """Polygon-typed and carrying at least one raw point."""
        return self.type.is_polygon and len(self.latlong) > 0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GeofenceSite":
        """Create a site from a catalog record (siteName/type/latlong keys)."""
        if not isinstance(data, dict):
            raise ValueError(f"Site record is not a mapping: {data!r}")
        if "siteName" not in data:
            raise ValueError(f"Site record has no siteName: {sorted(data.keys())}")
        radius = data.get("radius")
        return cls(
            site_name=str(data["siteName"]),
            type=SiteType.parse(data.get("type")),
            latlong=tuple(str(p) for p in (data.get("latlong") or [])),
            site_type=data.get("siteType"),
            radius=float(radius) if radius is not None else None,
        )

@dataclass(frozen=True)
class PolygonGeofence:
    """Named polygon; coordinates are (lat, lng) pairs in winding order."""
    name: str
    coordinates: Tuple[LatLng, ...] = field(default_factory=tuple)

    @property
    def is_degenerate(self) -> bool:
        return len(self.coordinates) < 3

    @property
    def bounds(self) -> Optional[Tuple[float, float, float, float]]:
        """(min_lat, min_lng, max_lat, max_lng), or None without vertices."""
        if not self.coordinates:
            return None
        lats = [c[0] for c in self.coordinates]
        lngs = [c[1] for c in self.coordinates]
        return (min(lats), min(lngs), max(lats), max(lngs))

    def to_shapely(self) -> Polygon:
        # shapely works in (x, y) = (lng, lat)
        if self.is_degenerate:
            return Polygon()
        return Polygon([(lng, lat) for lat, lng in self.coordinates])

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "coordinates": [list(c) for c in self.coordinates],
        }
