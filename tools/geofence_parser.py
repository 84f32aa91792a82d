"""Tool for turning raw site catalog records into polygon geofences."""
import logging
import math
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from models.geofence import GeofenceSite, LatLng, PolygonGeofence

logger = logging.getLogger(__name__)

SiteRecord = Union[GeofenceSite, Dict[str, Any]]

def _parse_point(point: str) -> Optional[LatLng]:
    fields = str(point).split(",")
    if len(fields) != 2:
        return None
    try:
        lat, lng = float(fields[0]), float(fields[1])
    except ValueError:
        return None
    if not (math.isfinite(lat) and math.isfinite(lng)):
        return None
    return (lat, lng)

def parse_polygon_latlng(points: Iterable[str]) -> List[LatLng]:
    """
    Parse "lat,lng" strings into (lat, lng) float pairs.

    Malformed points (wrong field count, empty or non-numeric fields,
    NaN or infinite values) are dropped; the rest keep their input order.
    """
    parsed = []
    dropped = 0
    for point in points:
        pair = _parse_point(point)
        if pair is None:
            dropped += 1
            continue
        parsed.append(pair)

    if dropped:
        logger.debug(f"Dropped {dropped} malformed points, kept {len(parsed)}")
    return parsed

def _as_site(site: SiteRecord) -> Optional[GeofenceSite]:
    """Convert a catalog record, or None when it cannot be read."""
    if isinstance(site, GeofenceSite):
        return site
    try:
        return GeofenceSite.from_dict(site)
    except (TypeError, ValueError) as e:
        logger.warning(f"Skipping unreadable site record: {e}")
        return None

def extract_polygon_geofences(sites: Iterable[SiteRecord]) -> List[PolygonGeofence]:
    """Build polygon geofences for Polygon-typed sites with points, in input order."""
    geofences = []
    skipped = 0
    for site in map(_as_site, sites):
        if site is None or not site.is_polygon_candidate:
            skipped += 1
            continue
        coordinates = parse_polygon_latlng(site.latlong)
        if not coordinates:
            logger.warning(f"Site {site.site_name} has no valid points, keeping empty polygon")
        geofences.append(PolygonGeofence(name=site.site_name, coordinates=tuple(coordinates)))

    logger.info(f"Extracted {len(geofences)} polygon geofences ({skipped} sites skipped)")
    return geofences

def unwrap_geofence_response(payload: Any) -> List[GeofenceSite]:
    """Flatten a catalog response {"data": {"siteParent": [{"site": [...]}]}} into sites."""
    data = payload.get("data") if isinstance(payload, dict) else None
    parents = data.get("siteParent") if isinstance(data, dict) else None
    if not isinstance(parents, list):
        logger.warning("Geofence response has no siteParent list")
        return []

    sites = []
    for parent in parents:
        records = parent.get("site") if isinstance(parent, dict) else None
        if not isinstance(records, list):
            continue
        sites.extend(site for site in map(_as_site, records) if site is not None)
    return sites

def geofence_bounds(geofences: Iterable[PolygonGeofence]) -> Optional[Tuple[float, float, float, float]]:
    """Combined (min_lat, min_lng, max_lat, max_lng) over every vertex, None if there are none."""
    boxes = [g.bounds for g in geofences if g.bounds is not None]
    if not boxes:
        return None
    return (
        min(b[0] for b in boxes),
        min(b[1] for b in boxes),
        max(b[2] for b in boxes),
        max(b[3] for b in boxes),
    )
