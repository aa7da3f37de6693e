# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/cidrplan/net/cidrs.py

from __future__ import annotations

import ipaddress
from typing import Iterable, List, Sequence, Tuple, Union

from .errors import InvalidCIDRError

IPAddress = Union[ipaddress.IPv4Address, ipaddress.IPv6Address]
IPNetwork = Union[ipaddress.IPv4Network, ipaddress.IPv6Network]


def _is_number(text: str) -> bool:
    return text.isascii() and text.isdigit()


def _relax_ipv4(addr: str) -> str:
    # 010.001.0.0 -> 10.1.0.0 (octets are decimal, never octal)
    if ":" in addr:
        return addr
    octets = addr.split(".")
    if len(octets) != 4 or not all(_is_number(o) for o in octets):
        return addr
    return ".".join(str(int(o)) for o in octets)


def parse_cidr(text: str) -> IPNetwork:
    """
    Parse a single CIDR the way the control plane accepts it on flags:

    - a prefix length is mandatory (``10.0.0.1`` is rejected)
    - IPv4 octets may carry leading zeros
    - host bits are masked off (``10.0.0.1/16`` -> ``10.0.0.0/16``)
    - IPv4-mapped IPv6 networks come back as their IPv4 network
    """
    raw = (text or "").strip()
    addr, sep, prefix = raw.partition("/")
    if not sep or not addr or not _is_number(prefix):
        raise InvalidCIDRError(f"invalid CIDR address: {text!r}", value=text)
    try:
        cidr = ipaddress.ip_network(f"{_relax_ipv4(addr)}/{int(prefix)}", strict=False)
    except ValueError as exc:
        raise InvalidCIDRError(f"invalid CIDR address: {text!r}", value=text) from exc
    return unmap_cidr(cidr)


def parse_cidrs(segments: Iterable[str]) -> List[IPNetwork]:
    cidrs: List[IPNetwork] = []
    for idx, segment in enumerate(segments):
        try:
            cidrs.append(parse_cidr(segment))
        except InvalidCIDRError as exc:
            raise InvalidCIDRError(
                f"failed to parse cidr value:{segment!r} at index {idx}",
                index=idx,
                value=segment,
            ) from exc
    return cidrs


def unmap_cidr(cidr: IPNetwork) -> IPNetwork:
    """
    Return an IPv4-mapped IPv6 network (::ffff:a.b.c.d/96+) as the IPv4
    network it maps; any other network is returned unchanged.
    """
    if cidr.version == 6 and cidr.network_address.ipv4_mapped is not None:
        return ipaddress.IPv4Network(
            (cidr.network_address.ipv4_mapped, cidr.prefixlen - 96)
        )
    return cidr


def is_ipv6_cidr(cidr: IPNetwork) -> bool:
    # IPv4-mapped networks belong to the IPv4 family
    return cidr.version == 6 and cidr.network_address.ipv4_mapped is None


def is_dual_stack_cidrs(cidrs: Sequence[IPNetwork]) -> bool:
    """True when exactly two networks are given, one per IP family."""
    if len(cidrs) != 2:
        return False
    return is_ipv6_cidr(cidrs[0]) != is_ipv6_cidr(cidrs[1])


def process_cidrs(cidrs_list: str) -> Tuple[List[IPNetwork], bool]:
    """
    Turn a comma separated CIDR list into typed networks.

    Returns the networks and whether they form a dual-stack pair. Any
    segment that does not parse raises InvalidCIDRError; classification
    only ever runs on a fully parsed list.
    """
    segments = [s.strip() for s in (cidrs_list or "").strip().split(",")]
    cidrs = parse_cidrs(segments)
    return cidrs, is_dual_stack_cidrs(cidrs)


def range_size(cidr: IPNetwork) -> int:
    return cidr.num_addresses


def indexed_ip(cidr: IPNetwork, index: int) -> IPAddress:
    """Return the address at ``index`` within ``cidr``."""
    if index < 0 or index >= cidr.num_addresses:
        raise InvalidCIDRError(
            f"can't generate IP with index {index} from subnet {cidr}: subnet too small",
            value=str(cidr),
        )
    return cidr.network_address + index
