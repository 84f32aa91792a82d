"""Data models for vehicles and the administrative location hierarchy."""
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Any, Dict, Mapping, NamedTuple, Optional, Tuple, Union

class VehicleStatus(str, Enum):
    RUNNING = "Running"
    IDLE = "Idle"
    STOPPED = "Stopped"
    OVERSPEEDING = "Overspeeding"

    @classmethod
    def coerce(cls, value: Union["VehicleStatus", str]) -> Union["VehicleStatus", str]:
        """Known status strings become members; anything else is kept as-is."""
        if isinstance(value, cls):
            return value
        for status in cls:
            if str(value).strip().lower() == status.value.lower():
                return status
        return str(value)

def status_key(status: Union[VehicleStatus, str]) -> str:
    """Plain string used for counting, so members and raw strings share keys."""
    return status.value if isinstance(status, VehicleStatus) else str(status)

class HierarchyLevel(IntEnum):
    COUNTRY = 1
    STATE = 2
    CITY = 3
    ZONE = 4
    WARD = 5

    @classmethod
    def parse(cls, value: Union["HierarchyLevel", str]) -> "HierarchyLevel":
        if isinstance(value, cls):
            return value
        try:
            return cls[str(value).strip().upper()]
        except KeyError:
            raise ValueError(f"Unknown hierarchy level: {value!r}")

class LocationPath(NamedTuple):
    country: Optional[str] = None
    state: Optional[str] = None
    city: Optional[str] = None
    zone: Optional[str] = None
    ward: Optional[str] = None

    def truncate(self, level: Union[HierarchyLevel, str]) -> "LocationPath":
        """Keep the names down to `level`; deeper levels become None."""
        depth = int(HierarchyLevel.parse(level))
        return LocationPath(*(name if i < depth else None for i, name in enumerate(self)))

    def label(self, sep: str = " / ") -> str:
        return sep.join(name for name in self if name is not None)

@dataclass(frozen=True)
class VehicleData:
    vehicle_no: str
    lat: float
    lng: float
    status: Union[VehicleStatus, str]
    speed: Optional[float] = None
    driver: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "VehicleData":
        speed = data.get("speed")
        return cls(
            vehicle_no=str(data["vehicle_no"]),
            lat=float(data["lat"]),
            lng=float(data["lng"]),
            status=VehicleStatus.coerce(data["status"]),
            speed=float(speed) if speed is not None else None,
            driver=data.get("driver"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "vehicle_no": self.vehicle_no,
            "lat": self.lat,
            "lng": self.lng,
            "status": status_key(self.status),
            "speed": self.speed,
            "driver": self.driver,
        }

@dataclass(frozen=True)
class LocationData:
    """One ward with its ancestor names and the vehicles attributed to it."""
    country: str
    state: str
    city: str
    zone: str
    ward: str
    vehicles: Tuple[VehicleData, ...] = field(default_factory=tuple)

    @property
    def path(self) -> LocationPath:
        return LocationPath(self.country, self.state, self.city, self.zone, self.ward)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LocationData":
        missing = [k for k in LocationPath._fields if k not in data]
        if missing:
            raise ValueError(f"Location record is missing {missing}")
        return cls(
            *(str(data[k]) for k in LocationPath._fields),
            vehicles=tuple(VehicleData.from_dict(v) for v in data.get("vehicles") or []),
        )

@dataclass(frozen=True)
class LocationSummary:
    path: LocationPath
    total_vehicles: int
    counts_by_status: Mapping[str, int]

    def to_dict(self) -> Dict[str, Any]:
        return {
            **self.path._asdict(),
            "total_vehicles": self.total_vehicles,
            "counts_by_status": dict(self.counts_by_status),
        }

@dataclass(frozen=True)
class FleetVehicle:
    """A vehicle tagged with the location path it was listed under."""
    vehicle: VehicleData
    path: LocationPath

    def to_dict(self) -> Dict[str, Any]:
        return {**self.path._asdict(), **self.vehicle.to_dict()}
