"""Configuration settings for the fleet geofence and location toolkit."""
import os
import tempfile

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

class Config:
    # Spatial reference system of incoming coordinates (no reprojection is done)
    GEOFENCE_CRS: str = os.getenv("GEOFENCE_CRS", "EPSG:4326")

    # Persisted session keys
    USER_ROLE_STORAGE_KEY: str = os.getenv("USER_ROLE_STORAGE_KEY", "user_role")
    ADMIN_VIEW_MODE_STORAGE_KEY: str = os.getenv("ADMIN_VIEW_MODE_STORAGE_KEY", "admin_view_preference")

    # Vehicle status derivation (km/h)
    RUNNING_SPEED_THRESHOLD_KMPH: float = float(os.getenv("RUNNING_SPEED_THRESHOLD_KMPH", "2"))
    OVERSPEED_THRESHOLD_KMPH: float = float(os.getenv("OVERSPEED_THRESHOLD_KMPH", "60"))

    # Location hierarchy
    UNKNOWN_LOCATION: str = "Unknown"
    FILTER_WILDCARD: str = "All"

    # Export settings
    EXPORT_DIR: str = os.getenv("EXPORT_DIR", os.path.join(tempfile.gettempdir(), "fleet_exports"))

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
