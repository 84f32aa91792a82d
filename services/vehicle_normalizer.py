"""Normalization of raw fleet telemetry payloads into vehicle and location snapshots."""
import math
from typing import Any, Dict, Iterable, List, Optional

from loguru import logger

from configurations.config import Config
from models.fleet import LocationData, LocationPath, VehicleData, VehicleStatus

VEHICLE_COLLECTION_KEYS = ["data", "vehicles", "vehicleData", "vehicleList", "vehicleDetails"]

# Candidate field names per normalized attribute, in priority order
FIELD_KEYS = {
    'vehicle_no': ['vehicle_no', 'vehicleNo', 'vehicle_number', 'vehicleNumber', 'regNo'],
    'lat': ['lat', 'Lat', 'latitude', 'Latitude'],
    'lng': ['lng', 'lon', 'longitude', 'Longitude'],
    'speed': ['speedKmph', 'speed', 'speed_kmph', 'speedKMH'],
    'driver': ['driverName', 'driver_name', 'driver'],
    'ignition': ['ignitionStatus', 'ignition', 'ign'],
    'no_data': ['noDataStatus', 'noData', 'statusNoData'],
}

GEO_KEYS = {
    'country': ['country'],
    'state': ['state'],
    'city': ['city', 'district'],
    'zone': ['zone', 'zoneName'],
    'ward': ['ward', 'wardNo', 'ward_no', 'wardName'],
}

def extract_vehicle_rows(payload: Any) -> List[Dict[str, Any]]:
    """Find the record list in a telemetry response, searching one level of nesting."""
    if isinstance(payload, list):
        return payload
    if not isinstance(payload, dict):
        return []

    for key in VEHICLE_COLLECTION_KEYS:
        if isinstance(payload.get(key), list):
            return payload[key]

    for key in VEHICLE_COLLECTION_KEYS:
        parent = payload.get(key)
        if not isinstance(parent, dict):
            continue
        for nested_key in VEHICLE_COLLECTION_KEYS:
            if isinstance(parent.get(nested_key), list):
                return parent[nested_key]

    return []

def pick_string(record: Dict[str, Any], keys: Iterable[str], fallback: str = "") -> str:
    for key in keys:
        value = record.get(key)
        if value is None:
            continue
        text = str(value).strip()
        if text:
            return text
    return fallback

def pick_number(record: Dict[str, Any], keys: Iterable[str]) -> Optional[float]:
    for key in keys:
        value = record.get(key)
        if value is None or value == "":
            continue
        try:
            number = float(value)
        except (TypeError, ValueError):
            continue
        if math.isfinite(number):
            return number
    return None

def _ignition(record: Dict[str, Any]) -> str:
    raw = pick_string(record, FIELD_KEYS['ignition']).upper()
    if raw in ("ON", "1"):
        return "ON"
    if raw in ("OFF", "0"):
        return "OFF"
    return "NA"

def derive_status(record: Dict[str, Any], speed: float):
    """Explicit known status wins; otherwise classify from the no-data flag, speed and ignition."""
    explicit = pick_string(record, ['status'])
    if explicit:
        status = VehicleStatus.coerce(explicit)
        if isinstance(status, VehicleStatus):
            return status

    if pick_number(record, FIELD_KEYS['no_data']) == 1:
        return VehicleStatus.STOPPED
    if speed > Config.OVERSPEED_THRESHOLD_KMPH:
        return VehicleStatus.OVERSPEEDING
    if speed > Config.RUNNING_SPEED_THRESHOLD_KMPH:
        return VehicleStatus.RUNNING
    if _ignition(record) == "OFF":
        return VehicleStatus.STOPPED
    return VehicleStatus.IDLE

def normalize_vehicle(record: Dict[str, Any]) -> Optional[VehicleData]:
    """Build a VehicleData from one raw row; rows without a position are dropped."""
    if not isinstance(record, dict):
        return None
    lat = pick_number(record, FIELD_KEYS['lat'])
    lng = pick_number(record, FIELD_KEYS['lng'])
    if lat is None or lng is None:
        return None

    speed = pick_number(record, FIELD_KEYS['speed'])
    return VehicleData(
        vehicle_no=pick_string(record, FIELD_KEYS['vehicle_no'], "UNKNOWN"),
        lat=lat,
        lng=lng,
        status=derive_status(record, speed or 0.0),
        speed=speed,
        driver=pick_string(record, FIELD_KEYS['driver']) or None,
    )

def normalize_vehicle_payload(payload: Any) -> List[VehicleData]:
    rows = extract_vehicle_rows(payload)
    vehicles = [v for v in map(normalize_vehicle, rows) if v is not None]

    dropped = len(rows) - len(vehicles)
    if dropped:
        logger.warning(f"Dropped {dropped} vehicle rows without a usable position")
    logger.info(f"Normalized {len(vehicles)} vehicles from {len(rows)} rows")
    return vehicles

def _location_path(record: Dict[str, Any]) -> LocationPath:
    sources = [record]
    if isinstance(record.get('geo'), dict):
        sources.insert(0, record['geo'])

    names = []
    for keys in GEO_KEYS.values():
        name = ""
        for source in sources:
            name = pick_string(source, keys)
            if name:
                break
        names.append(name or Config.UNKNOWN_LOCATION)
    return LocationPath(*names)

def group_into_locations(records: Any) -> List[LocationData]:
    """Group raw telemetry rows into ward-level snapshots, in order of first appearance."""
    grouped: Dict[LocationPath, List[VehicleData]] = {}
    for record in extract_vehicle_rows(records):
        vehicle = normalize_vehicle(record)
        if vehicle is None:
            continue
        grouped.setdefault(_location_path(record), []).append(vehicle)

    locations = [LocationData(*path, vehicles=tuple(vehicles)) for path, vehicles in grouped.items()]
    logger.info(f"Grouped {sum(len(v) for v in grouped.values())} vehicles into {len(locations)} wards")
    return locations
