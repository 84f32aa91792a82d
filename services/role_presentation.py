"""Role and view-preference resolution for choosing a session's layout."""
import threading
from enum import Enum
from typing import Dict, Optional, Union

from loguru import logger

from configurations.config import Config

class UserRole(str, Enum):
    ADMIN = "admin"
    USER = "user"

class AdminViewMode(str, Enum):
    ADMIN = "admin"
    DASHBOARD = "dashboard"

class Presentation(Enum):
    DASHBOARD = "dashboard"
    ADMIN_CONSOLE = "admin_console"

ADMIN_ROLE = UserRole.ADMIN
DEFAULT_ROLE = UserRole.USER

class InMemoryPreferenceStore:
    """Session-scoped key/value store with the get/set/remove interface the resolver reads."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            self._data[key] = value

    def remove(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)

def normalize_role(role: Optional[Union[UserRole, str]]) -> Optional[UserRole]:
    """Map a stored role onto the allow-list; unrecognised values become None."""
    if isinstance(role, UserRole):
        return role
    if not role or not isinstance(role, str):
        return None
    normalized = role.lower()
    for candidate in UserRole:
        if normalized == candidate.value:
            return candidate
    return None

def _read(store, key: str) -> Optional[str]:
    if store is None:
        return None
    try:
        return store.get(key)
    except Exception as e:
        logger.warning(f"Preference store unavailable for '{key}': {e}")
        return None

def read_stored_role(store) -> Optional[UserRole]:
    return normalize_role(_read(store, Config.USER_ROLE_STORAGE_KEY))

def get_admin_view_preference(store) -> AdminViewMode:
    stored = _read(store, Config.ADMIN_VIEW_MODE_STORAGE_KEY)
    return AdminViewMode.DASHBOARD if stored == AdminViewMode.DASHBOARD.value else AdminViewMode.ADMIN

def set_admin_view_preference(store, mode: Union[AdminViewMode, str]) -> None:
    if store is None:
        return
    store.set(Config.ADMIN_VIEW_MODE_STORAGE_KEY, AdminViewMode(mode).value)

def clear_admin_view_preference(store) -> None:
    if store is None:
        return
    store.remove(Config.ADMIN_VIEW_MODE_STORAGE_KEY)

def resolve_role(store, role_override: Optional[Union[UserRole, str]] = None) -> UserRole:
    """Override first, then the stored role, then DEFAULT_ROLE."""
    return normalize_role(role_override) or read_stored_role(store) or DEFAULT_ROLE

def resolve_presentation(store, role_override: Optional[Union[UserRole, str]] = None) -> Presentation:
    """
    Pick the layout variant for a session.

    Admins see the admin console unless their stored view preference is
    "dashboard"; every other role sees the dashboard. The preference is
    only read for admins.
    """
    role = resolve_role(store, role_override)
    if role is not ADMIN_ROLE:
        return Presentation.DASHBOARD
    if get_admin_view_preference(store) is AdminViewMode.DASHBOARD:
        return Presentation.DASHBOARD
    return Presentation.ADMIN_CONSOLE

class PresentationResolver:
    def __init__(self, store=None):
        self.store = store

    def role(self, role_override: Optional[Union[UserRole, str]] = None) -> UserRole:
        return resolve_role(self.store, role_override)

    def presentation(self, role_override: Optional[Union[UserRole, str]] = None) -> Presentation:
        return resolve_presentation(self.store, role_override)
