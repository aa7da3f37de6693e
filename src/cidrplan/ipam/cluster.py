# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/cidrplan/ipam/cluster.py

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterator, List, Tuple

from ..net.cidrs import IPNetwork, is_dual_stack_cidrs, process_cidrs, unmap_cidr
from ..net.errors import InvalidCIDRError, NotDualStackError, TooManyCIDRsError

log = logging.getLogger("cidrplan")

MAX_CLUSTER_CIDRS = 2


@dataclass(frozen=True)
class ClusterCIDRSet:
    """
    The pod network(s) of a cluster, in configured order.
    One network, or one IPv4 plus one IPv6 network.
    """
    cidrs: Tuple[IPNetwork, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "cidrs", tuple(unmap_cidr(c) for c in self.cidrs))
        n = len(self.cidrs)

        if n == 0:
            raise InvalidCIDRError("at least one cluster CIDR is required")

        # more than two is never valid, even for dual-stack
        if n > MAX_CLUSTER_CIDRS:
            raise TooManyCIDRsError(
                f"length of clusterCIDRs is:{n} more than max allowed of {MAX_CLUSTER_CIDRS}"
            )

        if n > 1 and not is_dual_stack_cidrs(self.cidrs):
            raise NotDualStackError(
                f"len of ClusterCIDRs=={n} and they are not configured as dual stack "
                "(at least one from each IPFamily)"
            )

    @property
    def is_dual_stack(self) -> bool:
        return is_dual_stack_cidrs(self.cidrs)

    def __len__(self) -> int:
        return len(self.cidrs)

    def __iter__(self) -> Iterator[IPNetwork]:
        return iter(self.cidrs)

    def __getitem__(self, idx: int) -> IPNetwork:
        return self.cidrs[idx]

    def as_strings(self) -> List[str]:
        return [str(c) for c in self.cidrs]


def validate_cluster_cidrs(cidrs_list: str) -> ClusterCIDRSet:
    """
    Parse --cluster-cidr and enforce the cardinality and pairing rules.
    """
    cidrs, dual_stack = process_cidrs(cidrs_list)
    cluster_cidrs = ClusterCIDRSet(cidrs=tuple(cidrs))
    log.debug("cluster CIDRs validated: %s (dual-stack=%s)", cluster_cidrs.as_strings(), dual_stack)
    return cluster_cidrs
