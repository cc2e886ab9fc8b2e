import pytest

from umbrelscan.scanner.address import ip_to_int
from umbrelscan.scanner.ip_range import generate_ip_range


def test_slash_24_range():
    hosts = generate_ip_range("192.168.1.5", 24)

    assert len(hosts) == 254
    assert hosts[0] == "192.168.1.1"
    assert hosts[-1] == "192.168.1.254"
    assert "192.168.1.0" not in hosts
    assert "192.168.1.255" not in hosts
    assert hosts == sorted(hosts, key=ip_to_int)


@pytest.mark.parametrize("prefix", range(0, 24))
def test_wide_subnets_fall_back_to_slash_24(prefix):
    assert generate_ip_range("10.20.30.40", prefix) == generate_ip_range("10.20.30.40", 24)


@pytest.mark.parametrize("prefix", range(25, 33))
def test_narrow_subnets_are_not_widened(prefix):
    hosts = generate_ip_range("10.20.30.40", prefix)
    assert len(hosts) == max(2 ** (32 - prefix) - 2, 0)


@pytest.mark.parametrize("prefix", [24, 25, 26, 28, 30])
def test_network_and_broadcast_are_excluded(prefix):
    ip = "172.16.5.77"
    mask = (0xFFFFFFFF << (32 - prefix)) & 0xFFFFFFFF
    network = ip_to_int(ip) & mask
    broadcast = network | (~mask & 0xFFFFFFFF)

    values = [ip_to_int(h) for h in generate_ip_range(ip, prefix)]

    assert network not in values
    assert broadcast not in values
    assert all(network < v < broadcast for v in values)


def test_slash_30_range():
    assert generate_ip_range("10.0.0.6", 30) == ["10.0.0.5", "10.0.0.6"]


@pytest.mark.parametrize("prefix", [31, 32])
def test_point_to_point_and_host_routes_are_empty(prefix):
    assert generate_ip_range("10.0.0.1", prefix) == []


@pytest.mark.parametrize("prefix", [-1, 33])
def test_prefix_out_of_bounds(prefix):
    with pytest.raises(ValueError):
        generate_ip_range("10.0.0.1", prefix)


def test_range_is_deterministic():
    assert generate_ip_range("192.168.0.9", 26) == generate_ip_range("192.168.0.9", 26)
