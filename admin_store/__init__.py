"""Admin Store - local persistence shim for the admin dashboard."""

__version__ = "1.0.0"

from admin_store.config import Settings, get_settings
from admin_store.result import Err, ErrorCode, Ok
from admin_store.store import AdminStore, build_store

__all__ = [
    "AdminStore",
    "Err",
    "ErrorCode",
    "Ok",
    "Settings",
    "build_store",
    "get_settings",
]
