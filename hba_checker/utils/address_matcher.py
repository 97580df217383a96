"""
Address-family aware CIDR containment.
"""
import ipaddress
from typing import Union

IPAddress = Union[ipaddress.IPv4Address, ipaddress.IPv6Address]
IPNetwork = Union[ipaddress.IPv4Network, ipaddress.IPv6Network]


def contains(candidate: IPAddress, network: IPNetwork) -> bool:
    """
    True if *candidate* lies inside *network*.

    Addresses and networks of different families never match; this is
    not an error.
    """
    if candidate.version != network.version:
        return False
    prefix = network.prefixlen
    shift = candidate.max_prefixlen - prefix
    return (int(candidate) >> shift) == (int(network.network_address) >> shift)
