import logging
from dataclasses import dataclass
from typing import Optional

try:
    import netifaces
    NETIFACES_AVAILABLE = True
except ImportError:
    NETIFACES_AVAILABLE = False

from ..core.config import settings

logger = logging.getLogger(__name__)


@dataclass
class DeviceNetworkInfo:
    """The scanning device's own IPv4 configuration."""
    ip_address: Optional[str] = None
    subnet_mask: Optional[str] = None
    interface: Optional[str] = None
    scanning_supported: bool = True


def get_device_network_info() -> DeviceNetworkInfo:
    """Get the device's IPv4 address and mask - from config or auto-detect."""
    # First, check if DEVICE_IP is set in config/env
    if settings.DEVICE_IP:
        logger.info(f"Using configured device address: {settings.DEVICE_IP}")
        return DeviceNetworkInfo(
            ip_address=settings.DEVICE_IP,
            subnet_mask=settings.SUBNET_MASK,
        )

    if not NETIFACES_AVAILABLE:
        logger.warning("netifaces is not installed; local network scanning is unavailable")
        return DeviceNetworkInfo(scanning_supported=False)

    try:
        # Get default gateway interface
        gateways = netifaces.gateways()
        default_gateway = gateways.get('default', {}).get(netifaces.AF_INET)
        if not default_gateway:
            logger.warning("No default IPv4 gateway found")
            return DeviceNetworkInfo()

        interface = default_gateway[1]
        addrs = netifaces.ifaddresses(interface)
        if netifaces.AF_INET not in addrs:
            logger.warning(f"Interface {interface} has no IPv4 address")
            return DeviceNetworkInfo(interface=interface)

        ipv4_info = addrs[netifaces.AF_INET][0]
        info = DeviceNetworkInfo(
            ip_address=ipv4_info.get('addr'),
            subnet_mask=settings.SUBNET_MASK or ipv4_info.get('netmask'),
            interface=interface,
        )
        logger.info(f"Detected {info.ip_address} (mask {info.subnet_mask}) on {interface}")
        return info
    except Exception as e:
        logger.warning(f"Error detecting device address: {e}")
        return DeviceNetworkInfo()
