"""
Tests for CIDR containment.
"""
from ipaddress import ip_address, ip_network

import pytest

from hba_checker.utils.address_matcher import contains


@pytest.mark.parametrize(
    "address, network, expected",
    [
        ("192.168.1.255", "192.168.1.0/24", True),
        ("192.168.1.0", "192.168.1.0/24", True),
        ("192.168.2.1", "192.168.1.0/24", False),
        ("10.0.0.5", "10.0.0.0/24", True),
        ("10.0.1.5", "10.0.0.0/24", False),
        ("10.0.0.5", "10.0.0.5/32", True),
        ("10.0.0.6", "10.0.0.5/32", False),
        ("203.0.113.9", "0.0.0.0/0", True),
        ("2001:db8::1", "2001:db8::/32", True),
        ("2001:db9::1", "2001:db8::/32", False),
        ("::1", "::1/128", True),
        ("fe80::1", "::/0", True),
    ],
)
def test_contains(address, network, expected):
    assert contains(ip_address(address), ip_network(network)) is expected


@pytest.mark.parametrize(
    "address, network",
    [
        ("10.0.0.5", "::/0"),
        ("127.0.0.1", "::1/128"),
        ("::ffff:10.0.0.5", "10.0.0.0/8"),
        ("::", "0.0.0.0/0"),
    ],
)
def test_family_mismatch_never_matches(address, network):
    """Mixing families is a plain non-match, not an error."""
    assert contains(ip_address(address), ip_network(network)) is False
