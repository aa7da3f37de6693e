# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/cidrplan/ipam/masks.py

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Tuple

from ..net.cidrs import IPNetwork, is_ipv6_cidr
from ..net.errors import ConflictingMaskConfigError, MaskSizeOutOfRangeError
from .cluster import ClusterCIDRSet

log = logging.getLogger("cidrplan")

# default mask sizes for node CIDRs
DEFAULT_NODE_MASK_IPV4 = 24
DEFAULT_NODE_MASK_IPV6 = 64


@dataclass(frozen=True)
class NodeMaskConfig:
    """
    Node CIDR mask flags. 0 means the flag was not set.

    legacy_mask: --node-cidr-mask-size
    mask_v4:     --node-cidr-mask-size-ipv4
    mask_v6:     --node-cidr-mask-size-ipv6
    """
    legacy_mask: int = 0
    mask_v4: int = 0
    mask_v6: int = 0

    def __post_init__(self) -> None:
        for name in ("legacy_mask", "mask_v4", "mask_v6"):
            if getattr(self, name) < 0:
                raise MaskSizeOutOfRangeError(
                    f"{name} must not be negative, got {getattr(self, name)}"
                )


def _check_mask(cidr: IPNetwork, mask: int, flag: str) -> None:
    if mask > cidr.max_prefixlen or mask < cidr.prefixlen:
        raise MaskSizeOutOfRangeError(
            f"{flag}={mask} is invalid for cluster CIDR {cidr}: "
            f"must be between {cidr.prefixlen} and {cidr.max_prefixlen}"
        )


def _sorted_sizes(cluster_cidrs: ClusterCIDRSet, mask_v4: int, mask_v6: int) -> Tuple[int, ...]:
    return tuple(mask_v6 if is_ipv6_cidr(c) else mask_v4 for c in cluster_cidrs)


def resolve_node_mask_sizes(cluster_cidrs: ClusterCIDRSet, cfg: NodeMaskConfig) -> Tuple[int, ...]:
    """
    Compute one node mask size per cluster CIDR, in cluster CIDR order.

    Only the per-family flags are allowed with dual-stack clusters. On a
    single-stack cluster the legacy flag wins alone, and a per-family flag
    must match the cluster's family.
    """
    mask_v4, mask_v6 = DEFAULT_NODE_MASK_IPV4, DEFAULT_NODE_MASK_IPV6

    # two entries: ClusterCIDRSet guarantees they form a dual-stack pair
    if len(cluster_cidrs) > 1:
        if cfg.legacy_mask:
            raise ConflictingMaskConfigError(
                "usage of --node-cidr-mask-size is not allowed with dual-stack clusters"
            )
        for cidr in cluster_cidrs:
            if is_ipv6_cidr(cidr) and cfg.mask_v6:
                _check_mask(cidr, cfg.mask_v6, "--node-cidr-mask-size-ipv6")
                mask_v6 = cfg.mask_v6
            elif not is_ipv6_cidr(cidr) and cfg.mask_v4:
                _check_mask(cidr, cfg.mask_v4, "--node-cidr-mask-size-ipv4")
                mask_v4 = cfg.mask_v4
        sizes = _sorted_sizes(cluster_cidrs, mask_v4, mask_v6)
        log.debug("node mask sizes (dual-stack): %s", list(sizes))
        return sizes

    cidr = cluster_cidrs[0]
    single_stack_ipv6 = is_ipv6_cidr(cidr)

    if cfg.legacy_mask:
        if cfg.mask_v4 or cfg.mask_v6:
            raise ConflictingMaskConfigError(
                "usage of --node-cidr-mask-size-ipv4 and --node-cidr-mask-size-ipv6 is not allowed "
                "if --node-cidr-mask-size is set. For dual-stack clusters please unset it and use "
                "IPFamily specific flags"
            )
        _check_mask(cidr, cfg.legacy_mask, "--node-cidr-mask-size")
        sizes = _sorted_sizes(cluster_cidrs, cfg.legacy_mask, cfg.legacy_mask)
        log.debug("node mask sizes (legacy flag): %s", list(sizes))
        return sizes

    if cfg.mask_v4:
        if single_stack_ipv6:
            raise ConflictingMaskConfigError(
                "usage of --node-cidr-mask-size-ipv4 is not allowed for a single-stack IPv6 cluster"
            )
        _check_mask(cidr, cfg.mask_v4, "--node-cidr-mask-size-ipv4")
        mask_v4 = cfg.mask_v4

    if cfg.mask_v6:
        if not single_stack_ipv6:
            raise ConflictingMaskConfigError(
                "usage of --node-cidr-mask-size-ipv6 is not allowed for a single-stack IPv4 cluster"
            )
        _check_mask(cidr, cfg.mask_v6, "--node-cidr-mask-size-ipv6")
        mask_v6 = cfg.mask_v6

    sizes = _sorted_sizes(cluster_cidrs, mask_v4, mask_v6)
    log.debug("node mask sizes (single-stack): %s", list(sizes))
    return sizes
