# Database module
from .database import get_db, engine, AsyncSessionLocal
from .models import StoredSetting, Base
from .instance_store import get_stored_instance, store_instance, normalize_instance_url

__all__ = [
    "get_db", "engine", "AsyncSessionLocal", "StoredSetting", "Base",
    "get_stored_instance", "store_instance", "normalize_instance_url",
]
