# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/cidrplan/ipam/service.py

from __future__ import annotations

import ipaddress
import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

from ..net.cidrs import IPAddress, IPNetwork, indexed_ip, is_ipv6_cidr, parse_cidr, range_size
from ..net.errors import (
    InvalidCIDRError,
    InvalidServiceCIDRError,
    NotDualStackError,
    ServiceRangeTooSmallError,
    TooManyCIDRsError,
)

log = logging.getLogger("cidrplan")

DEFAULT_SERVICE_CIDR = ipaddress.ip_network("10.0.0.0/24")
MIN_SERVICE_RANGE_SIZE = 8
MAX_SERVICE_RANGE_SIZE = 1 << 16
MAX_SERVICE_CIDRS = 2

# (candidate primary or None) -> (resolved primary, reserved api server address)
ServiceIPAllocator = Callable[[Optional[IPNetwork]], Tuple[IPNetwork, IPAddress]]


@dataclass(frozen=True)
class ServiceRangeSet:
    primary: IPNetwork
    api_server_service_ip: IPAddress
    secondary: Optional[IPNetwork] = None

    @property
    def is_dual_stack(self) -> bool:
        return self.secondary is not None

    @property
    def cidrs(self) -> Tuple[IPNetwork, ...]:
        if self.secondary is None:
            return (self.primary,)
        return (self.primary, self.secondary)


def service_ip_range(service_cidr: Optional[IPNetwork] = None) -> Tuple[IPNetwork, IPAddress]:
    """
    Resolve the primary service range and reserve the API server's
    in-cluster address (the first address after the network address).
    None selects the cluster default range.
    """
    if service_cidr is None:
        log.warning(
            "No CIDR for service cluster IPs specified. Default value %s is used; "
            "please specify it using --service-cluster-ip-range",
            DEFAULT_SERVICE_CIDR,
        )
        service_cidr = DEFAULT_SERVICE_CIDR

    size = min(range_size(service_cidr), MAX_SERVICE_RANGE_SIZE)
    if size < MIN_SERVICE_RANGE_SIZE:
        raise ServiceRangeTooSmallError(
            f"the service cluster IP range must be at least {MIN_SERVICE_RANGE_SIZE} IP addresses, "
            f"{service_cidr} has {size}"
        )

    return service_cidr, indexed_ip(service_cidr, 1)


def _parse_service_cidr(segment: str, idx: int) -> IPNetwork:
    try:
        return parse_cidr(segment)
    except InvalidCIDRError as exc:
        raise InvalidServiceCIDRError(
            f"service-cluster-ip-range[{idx}] is not a valid cidr",
            index=idx,
            value=segment,
        ) from exc


def derive_service_ranges(
    service_cidrs: str,
    allocate: ServiceIPAllocator = service_ip_range,
) -> ServiceRangeSet:
    """
    Split --service-cluster-ip-range into primary and optional secondary
    networks and reserve the API server address from the primary.

    A secondary range is only valid as the other IP family of the primary.
    """
    raw = (service_cidrs or "").strip()
    segments: List[str] = raw.split(",") if raw else []

    # nothing provided by user, use the default range (only applies to the primary)
    if not segments:
        primary, api_ip = allocate(None)
        return ServiceRangeSet(primary=primary, api_server_service_ip=api_ip)

    if len(segments) > MAX_SERVICE_CIDRS:
        raise TooManyCIDRsError(
            f"service-cluster-ip-range must not contain more than {MAX_SERVICE_CIDRS} entries, "
            f"got {len(segments)}"
        )

    primary_cidr = _parse_service_cidr(segments[0], 0)
    primary, api_ip = allocate(primary_cidr)

    secondary: Optional[IPNetwork] = None
    if len(segments) > 1:
        secondary = _parse_service_cidr(segments[1], 1)
        if is_ipv6_cidr(primary_cidr) == is_ipv6_cidr(secondary):
            raise NotDualStackError(
                "service-cluster-ip-range[0] and service-cluster-ip-range[1] are not dualstack "
                "(from different IPfamilies)"
            )

    log.debug(
        "service ranges: primary=%s secondary=%s apiserver=%s",
        primary, secondary, api_ip,
    )
    return ServiceRangeSet(primary=primary, api_server_service_ip=api_ip, secondary=secondary)
