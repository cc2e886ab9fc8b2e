"""
Umbrel identity probe.

An Umbrel node answers ``GET /trpc/system.status`` with a body such as
``{"result": {"data": "running"}}``. Anything else, including no answer within
the timeout, means the host is not a running Umbrel instance.
"""

import asyncio
import logging
from typing import Optional, Any

import aiohttp

from ..core.config import settings

logger = logging.getLogger(__name__)


class HostProber:
    """Checks a single host for the Umbrel status endpoint."""

    def __init__(self, timeout: float = None, port: int = None,
                 path: str = None, expected_status: str = None):
        self.timeout = timeout if timeout is not None else settings.PROBE_TIMEOUT
        self.port = port if port is not None else settings.PROBE_PORT
        self.path = path or settings.PROBE_PATH
        self.expected_status = (expected_status or settings.EXPECTED_STATUS).lower()

    def build_url(self, address: str) -> str:
        """Status URL for ``address``; the port is omitted when it is 80."""
        host = address if self.port == 80 else f"{address}:{self.port}"
        return f"http://{host}{self.path}"

    def is_running_status(self, payload: Any) -> bool:
        """Return True if ``payload['result']['data']`` reads as running."""
        if not isinstance(payload, dict):
            return False
        result = payload.get('result')
        if not isinstance(result, dict):
            return False
        data = result.get('data')
        return isinstance(data, str) and data.lower() == self.expected_status

    async def check_host(self, address: str,
                         session: Optional[aiohttp.ClientSession] = None) -> bool:
        """
        Probe ``address`` and report whether it is a running Umbrel instance.

        Never raises: timeouts, refused connections, error statuses and
        malformed bodies all count as a non-match.

        Args:
            address: Dotted-quad address to probe
            session: Optional shared client session (one is created otherwise)

        Returns:
            True if the host matched
        """
        url = self.build_url(address)
        timeout = aiohttp.ClientTimeout(total=self.timeout)

        try:
            if session is None:
                async with aiohttp.ClientSession(timeout=timeout) as own_session:
                    return await self._fetch_status(own_session, url, timeout)
            return await self._fetch_status(session, url, timeout)
        except asyncio.TimeoutError:
            logger.debug(f"Probe timed out for {address}")
        except aiohttp.ClientError as e:
            logger.debug(f"Probe connection error for {address}: {e}")
        except Exception as e:
            logger.debug(f"Probe failed for {address}: {type(e).__name__}: {e}")
        return False

    async def _fetch_status(self, session: aiohttp.ClientSession, url: str,
                            timeout: aiohttp.ClientTimeout) -> bool:
        async with session.get(url, timeout=timeout) as response:
            if response.status < 200 or response.status >= 300:
                return False
            payload = await response.json(content_type=None)
            return self.is_running_status(payload)


# Global prober instance
host_prober = HostProber()
