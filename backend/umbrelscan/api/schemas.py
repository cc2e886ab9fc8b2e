from pydantic import BaseModel, ConfigDict
from typing import Optional


class InstanceResponse(BaseModel):
    """Discovered Umbrel instance."""
    model_config = ConfigDict(from_attributes=True)

    address: str
    name: str


class ScanRequest(BaseModel):
    """Optional overrides for the device network info."""
    device_ip: Optional[str] = None
    subnet_mask: Optional[str] = None


class ScanResponse(BaseModel):
    """Scan result schema."""
    model_config = ConfigDict(from_attributes=True)

    success: bool
    outcome: str
    instances: list[InstanceResponse]
    error: Optional[str] = None
    ip_address: Optional[str] = None
    prefix: Optional[int] = None
    total: int = 0
    processed: int = 0


class ScanStatusResponse(BaseModel):
    """Live scan status schema."""
    scanning: bool
    progress: float  # raw processed / total * 100
    percent: int  # progress rounded for display
    processed: int
    total: int
    instances: list[InstanceResponse]


class ProbeResponse(BaseModel):
    """Single host probe result."""
    address: str
    matched: bool


class StoredInstanceResponse(BaseModel):
    """Last connected instance."""
    url: Optional[str] = None


class InstanceUpdate(BaseModel):
    """Instance selection schema."""
    address: str
