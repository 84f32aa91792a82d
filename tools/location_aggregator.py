"""Tool for aggregating vehicles over the country/state/city/zone/ward hierarchy."""
import logging
from collections import Counter
from dataclasses import dataclass
from types import MappingProxyType
from typing import Collection, Dict, Iterable, List, Mapping, Optional, Union

import pandas as pd

from configurations.config import Config
from models.fleet import (
    FleetVehicle,
    HierarchyLevel,
    LocationData,
    LocationPath,
    LocationSummary,
    VehicleStatus,
    status_key,
)

logger = logging.getLogger(__name__)

def summarize(node: LocationData) -> LocationSummary:
    """Count the vehicles of one ward by status."""
    counts = Counter(status_key(v.status) for v in node.vehicles)
    return LocationSummary(
        path=node.path,
        total_vehicles=sum(counts.values()),
        counts_by_status=MappingProxyType(dict(counts)),
    )

def summarize_all(nodes: Iterable[LocationData]) -> List[LocationSummary]:
    return [summarize(node) for node in nodes]

def flatten(nodes: Iterable[LocationData]) -> List[FleetVehicle]:
    """
    List every vehicle together with the path of the ward it was listed under.

    A vehicle appearing in two wards is listed twice; de-duplication is
    up to the caller.
    """
    return [FleetVehicle(vehicle=v, path=node.path) for node in nodes for v in node.vehicles]

def merge_counts(*counts: Mapping[str, int]) -> Dict[str, int]:
    """Sum status counts key by key, including statuses outside VehicleStatus."""
    merged: Dict[str, int] = {}
    for mapping in counts:
        for status, count in mapping.items():
            key = status_key(status)
            merged[key] = merged.get(key, 0) + count
    return merged

def rollup(summaries: Iterable[LocationSummary],
           level: Union[HierarchyLevel, str]) -> List[LocationSummary]:
    """Aggregate child summaries to `level`, in order of first appearance."""
    level = HierarchyLevel.parse(level)
    grouped: Dict[LocationPath, List[LocationSummary]] = {}
    for summary in summaries:
        grouped.setdefault(summary.path.truncate(level), []).append(summary)

    rolled = []
    for path, children in grouped.items():
        counts = merge_counts(*(child.counts_by_status for child in children))
        rolled.append(LocationSummary(
            path=path,
            total_vehicles=sum(counts.values()),
            counts_by_status=MappingProxyType(counts),
        ))

    logger.info(f"Rolled up {sum(len(c) for c in grouped.values())} summaries into {len(rolled)} at {level.name.lower()} level")
    return rolled

@dataclass(frozen=True)
class LocationFilter:
    """Hierarchy filter; None or the wildcard matches every value."""
    country: Optional[str] = Config.FILTER_WILDCARD
    state: Optional[str] = Config.FILTER_WILDCARD
    city: Optional[str] = Config.FILTER_WILDCARD
    zone: Optional[str] = Config.FILTER_WILDCARD
    ward: Optional[str] = Config.FILTER_WILDCARD
    vehicle_no: Optional[str] = Config.FILTER_WILDCARD

    @staticmethod
    def _matches(expected: Optional[str], actual: Optional[str]) -> bool:
        return expected is None or expected == Config.FILTER_WILDCARD or expected == actual

    def matches(self, item: FleetVehicle) -> bool:
        checks = [
            (self.country, item.path.country),
            (self.state, item.path.state),
            (self.city, item.path.city),
            (self.zone, item.path.zone),
            (self.ward, item.path.ward),
            (self.vehicle_no, item.vehicle.vehicle_no),
        ]
        return all(self._matches(expected, actual) for expected, actual in checks)

def filter_vehicles(vehicles: Iterable[FleetVehicle], location_filter: LocationFilter) -> List[FleetVehicle]:
    return [v for v in vehicles if location_filter.matches(v)]

def filter_by_status(vehicles: Iterable[FleetVehicle],
                     enabled: Collection[Union[VehicleStatus, str]]) -> List[FleetVehicle]:
    """Keep vehicles whose status is toggled on."""
    keys = {status_key(s) for s in enabled}
    return [v for v in vehicles if status_key(v.vehicle.status) in keys]

def _status_columns(counts: Iterable[Mapping[str, int]]) -> List[str]:
    known = [s.value for s in VehicleStatus]
    extra = sorted({k for c in counts for k in c} - set(known))
    return known + extra

def vehicles_to_dataframe(vehicles: Iterable[FleetVehicle]) -> pd.DataFrame:
    columns = list(LocationPath._fields) + ["vehicle_no", "lat", "lng", "status", "speed", "driver"]
    return pd.DataFrame([v.to_dict() for v in vehicles], columns=columns)

def summaries_to_dataframe(summaries: Iterable[LocationSummary]) -> pd.DataFrame:
    """One row per summary with a count column per status (0 when absent)."""
    summaries = list(summaries)
    status_columns = _status_columns(s.counts_by_status for s in summaries)
    rows = []
    for summary in summaries:
        row = {**summary.path._asdict(), "total_vehicles": summary.total_vehicles}
        for status in status_columns:
            row[status] = summary.counts_by_status.get(status, 0)
        rows.append(row)

    columns = list(LocationPath._fields) + ["total_vehicles"] + status_columns
    return pd.DataFrame(rows, columns=columns)
