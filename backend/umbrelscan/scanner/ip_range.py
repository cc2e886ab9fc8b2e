import logging
from typing import List

from .address import ip_to_int, int_to_ip, MAX_IPV4

logger = logging.getLogger(__name__)

# Subnets larger than this are narrowed to a /24 to bound scan cost
MAX_SCAN_HOSTS = 254
FALLBACK_PREFIX = 24


def generate_ip_range(ip: str, prefix: int) -> List[str]:
    """
    Generate the usable host addresses of the subnet containing ``ip``.

    The network and broadcast addresses are skipped. Subnets wider than a /24
    are scanned as the /24 around ``ip`` only, so the result may not cover the
    whole subnet. /31 and /32 yield an empty list.

    Args:
        ip: Dotted-quad address of a host in the subnet
        prefix: Prefix length, 0-32

    Returns:
        Host addresses in ascending order
    """
    if prefix < 0 or prefix > 32:
        raise ValueError(f"Prefix length must be between 0 and 32, got {prefix}")

    count = 2 ** (32 - prefix)
    if prefix < FALLBACK_PREFIX and count > MAX_SCAN_HOSTS:
        logger.info(f"Range too big for prefix {prefix}. Falling back to /{FALLBACK_PREFIX}.")
        return generate_ip_range(ip, FALLBACK_PREFIX)

    mask = (MAX_IPV4 << (32 - prefix)) & MAX_IPV4
    network_base = ip_to_int(ip) & mask

    return [int_to_ip(network_base + i) for i in range(1, count - 1)]
