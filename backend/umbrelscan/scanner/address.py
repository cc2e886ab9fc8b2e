"""
IPv4 address arithmetic.

Addresses travel through the scanner as dotted-quad strings and are converted
to 32-bit unsigned integers only for subnet math.
"""

from typing import List

from .errors import InvalidAddressError

MAX_IPV4 = 0xFFFFFFFF


def _parse_octets(value: str) -> List[int]:
    """Split a dotted-quad string into four validated octets."""
    if not isinstance(value, str):
        raise InvalidAddressError(value, "expected a dotted-quad string")

    parts = value.strip().split('.')
    if len(parts) != 4:
        raise InvalidAddressError(value, f"expected 4 octets, got {len(parts)}")

    octets = []
    for part in parts:
        if not (part.isascii() and part.isdigit()):
            raise InvalidAddressError(value, f"octet {part!r} is not a decimal number")
        octet = int(part, 10)
        if octet > 255:
            raise InvalidAddressError(value, f"octet {octet} is out of range")
        octets.append(octet)
    return octets


def ip_to_int(ip: str) -> int:
    """Convert a dotted-quad address to its 32-bit integer value."""
    result = 0
    for octet in _parse_octets(ip):
        result = (result << 8) | octet
    return result


def int_to_ip(value: int) -> str:
    """Convert a 32-bit integer back to dotted-quad form."""
    if value < 0 or value > MAX_IPV4:
        raise InvalidAddressError(value, "outside the 32-bit address space")
    return '.'.join(str((value >> shift) & 0xff) for shift in (24, 16, 8, 0))


def get_prefix_length(mask: str) -> int:
    """
    Count the network bits of a subnet mask, e.g. "255.255.255.0" -> 24.

    Bit contiguity is not checked: "255.0.255.0" counts as 16.
    """
    return sum(bin(octet).count('1') for octet in _parse_octets(mask))


def is_valid_ip(ip: str) -> bool:
    """Return True if ``ip`` is a well-formed dotted-quad address."""
    try:
        _parse_octets(ip)
    except InvalidAddressError:
        return False
    return True
