# Scanner module
from .network_scanner import NetworkScanner, ScanResult, ScanOutcome, FoundInstance
from .host_prober import HostProber, host_prober
from .ip_range import generate_ip_range
from .address import ip_to_int, int_to_ip, get_prefix_length

__all__ = [
    "NetworkScanner", "ScanResult", "ScanOutcome", "FoundInstance",
    "HostProber", "host_prober", "generate_ip_range",
    "ip_to_int", "int_to_ip", "get_prefix_length",
]
