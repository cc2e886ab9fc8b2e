"""
Exceptions raised by the scan engine.

Per-host probe failures never appear here: the host prober absorbs them and
reports a plain non-match.
"""

from typing import Optional, Dict, Any


class ScanError(Exception):
    """
    Base exception for scan orchestration errors.

    Attributes:
        message: Human-readable error message, safe to show to a user
        context: Additional context information about the error
    """

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        error_str = self.message
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            error_str += f" (Context: {context_str})"
        return error_str


class ScanUnavailableError(ScanError):
    """The platform cannot perform local network scanning."""

    def __init__(self, message: str = "Network scanning is not available on this platform") -> None:
        super().__init__(message)


class AddressUnknownError(ScanError):
    """The device's own IPv4 address could not be determined."""

    def __init__(self, message: str = "Unable to determine device IP address.",
                 ip_address: Optional[str] = None) -> None:
        context = {"ip_address": ip_address} if ip_address else None
        super().__init__(message, context)


class ScanInProgressError(ScanError):
    """A scan was requested while another one is still running."""

    def __init__(self, message: str = "A network scan is already in progress") -> None:
        super().__init__(message)


class InvalidAddressError(ValueError):
    """A dotted-quad address or mask could not be parsed."""

    def __init__(self, value: Any, reason: str) -> None:
        super().__init__(f"Invalid IPv4 value {value!r}: {reason}")
        self.value = value
        self.reason = reason
