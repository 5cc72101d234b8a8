from .constants import PersistenceBackendType, Stage
from .settings import Settings, get_settings, reload_settings

__all__ = [
    "PersistenceBackendType",
    "Settings",
    "Stage",
    "get_settings",
    "reload_settings",
]
