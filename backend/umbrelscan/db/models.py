from sqlalchemy import Column, String, DateTime, Text
from datetime import datetime, timezone
from .database import Base


class StoredSetting(Base):
    """Single string value stored under a key."""

    __tablename__ = "settings"

    key = Column(String(100), primary_key=True)
    value = Column(Text)
    updated_at = Column(DateTime, default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    def __repr__(self):
        return f"<StoredSetting(key={self.key}, value={self.value})>"
