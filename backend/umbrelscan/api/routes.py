from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import OperationalError
from typing import Optional

from ..db.database import get_db
from ..db.instance_store import get_stored_instance, store_instance
from ..scanner.address import is_valid_ip
from ..scanner.errors import ScanInProgressError
from ..scanner.host_prober import host_prober
from ..scanner.network_info import DeviceNetworkInfo
from .schemas import (
    ScanRequest,
    ScanResponse,
    ScanStatusResponse,
    ProbeResponse,
    StoredInstanceResponse,
    InstanceUpdate,
)

router = APIRouter()


@router.post("/scan", response_model=ScanResponse)
async def trigger_scan(request: Optional[ScanRequest] = None):
    """Scan the local network for Umbrel instances and wait for the result."""
    from ..main import scanner

    network = None
    if request and request.device_ip:
        network = DeviceNetworkInfo(
            ip_address=request.device_ip,
            subnet_mask=request.subnet_mask,
        )

    try:
        result = await scanner.run_scan(network)
    except ScanInProgressError as e:
        raise HTTPException(status_code=409, detail=e.message)

    return ScanResponse(
        success=result.success,
        outcome=result.outcome,
        instances=[{"address": i.address, "name": i.name} for i in result.instances],
        error=result.error,
        ip_address=result.ip_address,
        prefix=result.prefix,
        total=result.total,
        processed=result.processed,
    )


@router.get("/scan/status", response_model=ScanStatusResponse)
async def get_scan_status():
    """Get progress of the running scan."""
    from ..main import scanner

    return ScanStatusResponse(**scanner.status())


@router.get("/probe/{ip}", response_model=ProbeResponse)
async def probe_host(ip: str):
    """Check a single address for a running Umbrel instance."""
    if not is_valid_ip(ip):
        raise HTTPException(status_code=400, detail=f"Invalid IPv4 address: {ip}")

    matched = await host_prober.check_host(ip)
    return ProbeResponse(address=ip, matched=matched)


@router.get("/instance", response_model=StoredInstanceResponse)
async def get_instance(db: AsyncSession = Depends(get_db)):
    """Get the last connected instance."""
    try:
        url = await get_stored_instance(db)
    except OperationalError:
        raise HTTPException(
            status_code=503,
            detail="Database is temporarily busy, please try again"
        )
    return StoredInstanceResponse(url=url)


@router.put("/instance", response_model=StoredInstanceResponse)
async def set_instance(update: InstanceUpdate, db: AsyncSession = Depends(get_db)):
    """Connect to an instance and remember it."""
    try:
        url = await store_instance(db, update.address)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except OperationalError:
        raise HTTPException(
            status_code=503,
            detail="Database is temporarily busy, please try again"
        )
    return StoredInstanceResponse(url=url)
