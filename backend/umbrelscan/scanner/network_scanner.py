import asyncio
import logging
from dataclasses import dataclass, field, asdict
from typing import Optional, List, Sequence

import aiohttp

from .address import get_prefix_length, is_valid_ip
from .errors import ScanUnavailableError, AddressUnknownError, ScanInProgressError, InvalidAddressError
from .host_prober import HostProber
from .ip_range import generate_ip_range
from .network_info import DeviceNetworkInfo, get_device_network_info
from ..core.config import settings

logger = logging.getLogger(__name__)

EMPTY_RESULT_MESSAGE = "No Umbrel instances found on the network. Try manual input."
SCAN_ERROR_MESSAGE = "Error scanning network."


class ScanOutcome:
    """Terminal states of a scan."""
    COMPLETED = "completed"
    EMPTY = "empty"
    UNSUPPORTED = "unsupported"
    NO_ADDRESS = "no_address"
    FAILED = "failed"


@dataclass
class FoundInstance:
    """An address that answered the Umbrel status probe."""
    address: str
    name: str


@dataclass
class ScanState:
    """Mutable progress of the scan currently running."""
    total: int = 0
    processed: int = 0
    progress: float = 0.0
    instances: List[FoundInstance] = field(default_factory=list)


@dataclass
class ScanResult:
    """Final outcome of one scan."""
    outcome: str
    instances: List[FoundInstance] = field(default_factory=list)
    error: Optional[str] = None
    ip_address: Optional[str] = None
    prefix: Optional[int] = None
    total: int = 0
    processed: int = 0

    @property
    def success(self) -> bool:
        return self.outcome in (ScanOutcome.COMPLETED, ScanOutcome.EMPTY)


class NetworkScanner:
    """Sweeps the local subnet for Umbrel instances in fixed-size batches."""

    def __init__(self, prober: Optional[HostProber] = None, batch_size: int = None,
                 default_prefix: int = None):
        self.prober = prober or HostProber()
        self.batch_size = batch_size if batch_size is not None else settings.BATCH_SIZE
        self.default_prefix = default_prefix if default_prefix is not None else settings.DEFAULT_PREFIX
        if self.batch_size < 1:
            raise ValueError(f"Batch size must be at least 1, got {self.batch_size}")
        self._state = ScanState()
        self._scanning = False
        self._callbacks = []

    @property
    def scanning(self) -> bool:
        return self._scanning

    @property
    def progress(self) -> float:
        return self._state.progress

    def status(self) -> dict:
        """Snapshot of the current scan state."""
        return {
            "scanning": self._scanning,
            "progress": self._state.progress,
            "percent": round(self._state.progress),
            "processed": self._state.processed,
            "total": self._state.total,
            "instances": [asdict(i) for i in self._state.instances],
        }

    def register_callback(self, callback):
        """Register a callback for scan updates."""
        self._callbacks.append(callback)

    def unregister_callback(self, callback):
        """Unregister a callback."""
        if callback in self._callbacks:
            self._callbacks.remove(callback)

    async def _notify_callbacks(self, event_type: str, data: dict):
        """Notify all registered callbacks."""
        for callback in self._callbacks:
            try:
                await callback(event_type, data)
            except Exception as e:
                logger.warning(f"Callback error ({event_type}): {e}")

    def resolve_prefix(self, subnet_mask: Optional[str]) -> int:
        """Prefix length for ``subnet_mask``, or the default when unknown."""
        if not subnet_mask:
            return self.default_prefix
        try:
            return get_prefix_length(subnet_mask)
        except InvalidAddressError as e:
            logger.warning(f"Ignoring subnet mask: {e}")
            return self.default_prefix

    async def _abort(self, outcome: str, error: str) -> ScanResult:
        """Finish a scan that could not start; no probes were issued."""
        await self._notify_callbacks("scan_failed", {
            "outcome": outcome,
            "error": error,
            "instances": [],
            "processed": 0,
            "total": 0,
            "progress": 0.0,
        })
        return ScanResult(outcome=outcome, error=error)

    async def run_scan(self, network: Optional[DeviceNetworkInfo] = None) -> ScanResult:
        """
        Scan the device's subnet for Umbrel instances.

        Args:
            network: Device address and mask (auto-detected if None)

        Returns:
            ScanResult describing the terminal state

        Raises:
            ScanInProgressError: if another scan is already running
        """
        if self._scanning:
            raise ScanInProgressError()

        # A new request always clears what the previous scan left behind
        self._state = ScanState()

        if network is None:
            network = get_device_network_info()

        try:
            if not network.scanning_supported:
                raise ScanUnavailableError()
            if not network.ip_address or not is_valid_ip(network.ip_address):
                raise AddressUnknownError(ip_address=network.ip_address)
        except ScanUnavailableError as e:
            logger.warning(e.message)
            return await self._abort(ScanOutcome.UNSUPPORTED, e.message)
        except AddressUnknownError as e:
            logger.warning(str(e))
            return await self._abort(ScanOutcome.NO_ADDRESS, e.message)

        self._scanning = True
        device_ip = network.ip_address
        prefix = None

        try:
            prefix = self.resolve_prefix(network.subnet_mask)
            logger.info(f"Device IP: {device_ip}, using prefix /{prefix}")

            candidates = generate_ip_range(device_ip, prefix)
            logger.info(f"Generated IP range of {len(candidates)} addresses")

            await self._notify_callbacks("scan_started", {
                "ip_address": device_ip,
                "prefix": prefix,
                "total": len(candidates),
            })

            instances = await self.probe_candidates(candidates)

            if instances:
                outcome, error = ScanOutcome.COMPLETED, None
            else:
                outcome, error = ScanOutcome.EMPTY, EMPTY_RESULT_MESSAGE

            result = ScanResult(
                outcome=outcome,
                instances=list(instances),
                error=error,
                ip_address=device_ip,
                prefix=prefix,
                total=self._state.total,
                processed=self._state.processed,
            )
            logger.info(f"Scan finished: {len(instances)} instance(s) found")
        except Exception:
            logger.exception("Scan network error")
            result = ScanResult(
                outcome=ScanOutcome.FAILED,
                instances=list(self._state.instances),
                error=SCAN_ERROR_MESSAGE,
                ip_address=device_ip,
                prefix=prefix,
                total=self._state.total,
                processed=self._state.processed,
            )
        finally:
            self._scanning = False
            self._state.progress = 0.0

        event_type = "scan_failed" if result.outcome == ScanOutcome.FAILED else "scan_completed"
        await self._notify_callbacks(event_type, {
            "outcome": result.outcome,
            "error": result.error,
            "instances": [asdict(i) for i in result.instances],
            "processed": result.processed,
            "total": result.total,
            "progress": self._state.progress,
        })
        return result

    async def probe_candidates(self, candidates: Sequence[str]) -> List[FoundInstance]:
        """
        Probe ``candidates`` batch by batch, streaming progress and matches.

        Batches run strictly one after another; the probes inside a batch run
        concurrently and are all joined before the next batch starts.
        """
        state = self._state
        state.total = len(candidates)
        state.processed = 0
        state.instances = []

        async def process_ip(address: str, session: aiohttp.ClientSession):
            matched = await self.prober.check_host(address, session)
            state.processed += 1
            state.progress = state.processed / state.total * 100
            await self._notify_callbacks("scan_progress", {
                "progress": state.progress,
                "percent": round(state.progress),
                "processed": state.processed,
                "total": state.total,
            })
            if matched:
                instance = FoundInstance(
                    address=address,
                    name=f"Umbrel Instance {len(state.instances) + 1}",
                )
                state.instances.append(instance)
                logger.info(f"Found {instance.name} at {address}")
                await self._notify_callbacks("instance_found", {
                    "instance": asdict(instance),
                    "instances": [asdict(i) for i in state.instances],
                })

        async with aiohttp.ClientSession() as session:
            for start in range(0, len(candidates), self.batch_size):
                batch = candidates[start:start + self.batch_size]
                logger.debug(f"Processing batch {start // self.batch_size + 1}")
                results = await asyncio.gather(
                    *(process_ip(ip, session) for ip in batch),
                    return_exceptions=True
                )
                # Whole batch is settled; surface the first orchestration error
                for outcome in results:
                    if isinstance(outcome, Exception):
                        raise outcome

        return state.instances
