"""Randomized IPv6 source addresses for outbound requests.

An address is laid out as: 48 network bits from the configured prefix,
16 bits of range identifier, then 64 random host bits. Workers given
distinct range identifiers never share an address.
"""

import ipaddress
import random

from tubescope.exceptions import ConfigurationError, InvalidInputError

SUPPORTED_PREFIX_LENGTH = 48
RANGE_ID_BITS = 16
HOST_BITS = 64


def parse_subnet(subnet: str) -> ipaddress.IPv6Network:
    if "/" not in subnet:
        raise ConfigurationError(f"Egress subnet must be 'address/prefix-length', got {subnet!r}")
    try:
        network = ipaddress.ip_network(subnet.strip(), strict=False)
    except ValueError as e:
        raise ConfigurationError(f"Invalid egress subnet {subnet!r}: {e}") from e
    if not isinstance(network, ipaddress.IPv6Network):
        raise ConfigurationError(f"Egress subnet must be IPv6, got {subnet!r}")
    if network.prefixlen != SUPPORTED_PREFIX_LENGTH:
        raise ConfigurationError(
            f"Only /{SUPPORTED_PREFIX_LENGTH} egress subnets are supported, got /{network.prefixlen}"
        )
    return network


class EgressAllocator:
    def __init__(self, subnet: str):
        self.network = parse_subnet(subnet)

    def allocate(self, range_id: int = 0) -> ipaddress.IPv6Address:
        if not 0 <= range_id < 1 << RANGE_ID_BITS:
            raise InvalidInputError(f"Range id must fit in {RANGE_ID_BITS} bits, got {range_id}")
        network_bits = int(self.network.network_address)
        host_bits = random.getrandbits(HOST_BITS)
        return ipaddress.IPv6Address(network_bits | (range_id << HOST_BITS) | host_bits)


def random_range_id() -> int:
    return random.getrandbits(RANGE_ID_BITS)
