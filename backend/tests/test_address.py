import pytest

from umbrelscan.scanner.address import ip_to_int, int_to_ip, get_prefix_length, is_valid_ip
from umbrelscan.scanner.errors import InvalidAddressError


@pytest.mark.parametrize("ip", [
    "0.0.0.0",
    "10.0.0.1",
    "127.0.0.1",
    "172.16.254.3",
    "192.168.1.5",
    "255.255.255.255",
])
def test_ip_round_trip(ip):
    assert int_to_ip(ip_to_int(ip)) == ip


def test_ip_to_int_folds_most_significant_first():
    assert ip_to_int("192.168.1.5") == (192 << 24) | (168 << 16) | (1 << 8) | 5
    assert ip_to_int("255.255.255.255") == 0xFFFFFFFF
    assert ip_to_int("0.0.0.1") == 1


def test_int_to_ip_extracts_octets():
    assert int_to_ip(0xC0A80105) == "192.168.1.5"
    assert int_to_ip(0) == "0.0.0.0"


@pytest.mark.parametrize("mask,prefix", [
    ("255.255.255.0", 24),
    ("255.255.255.255", 32),
    ("0.0.0.0", 0),
    ("255.255.0.0", 16),
    ("255.255.255.128", 25),
    ("255.255.255.252", 30),
])
def test_get_prefix_length(mask, prefix):
    assert get_prefix_length(mask) == prefix


def test_get_prefix_length_counts_non_contiguous_bits():
    # Contiguity is the caller's problem; bits are still counted
    assert get_prefix_length("255.0.255.0") == 16


@pytest.mark.parametrize("bad", [
    "192.168.1",
    "192.168.1.5.7",
    "192.168.one.5",
    "192.168.1.256",
    "192.168.-1.5",
    "",
    "...",
])
def test_malformed_addresses_are_rejected(bad):
    with pytest.raises(InvalidAddressError):
        ip_to_int(bad)
    assert not is_valid_ip(bad)


def test_invalid_address_error_is_a_value_error():
    with pytest.raises(ValueError):
        get_prefix_length("255.255.x.0")


@pytest.mark.parametrize("value", [-1, 0x100000000])
def test_int_to_ip_rejects_values_outside_32_bits(value):
    with pytest.raises(InvalidAddressError):
        int_to_ip(value)
