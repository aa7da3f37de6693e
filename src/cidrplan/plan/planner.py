# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/cidrplan/plan/planner.py

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple, Union

from ..config.models import NetworkConfig
from ..ipam.cluster import ClusterCIDRSet, validate_cluster_cidrs
from ..ipam.masks import resolve_node_mask_sizes
from ..ipam.service import ServiceIPAllocator, ServiceRangeSet, derive_service_ranges, service_ip_range
from ..net.cidrs import IPAddress
from ..net.errors import AddressPlanError

# Observer bits
from ..observers.dispatcher import EventBus
from ..observers.events import PlanComputed, PlanFailed, new_ctx

log = logging.getLogger("cidrplan")

# in-cluster names of the API server service, served alongside its reserved IP
API_SERVER_SERVICE_NAMES = ("kubernetes.default.svc", "kubernetes.default", "kubernetes")


@dataclass(frozen=True)
class AddressPlan:
    cluster_cidrs: Optional[ClusterCIDRSet]
    node_mask_sizes: Tuple[int, ...]
    service_ranges: ServiceRangeSet
    configure_cloud_routes: bool
    api_server_alternate_names: Tuple[Union[str, IPAddress], ...]

    def summary(self) -> Dict[str, Any]:
        return {
            "cluster_cidrs": self.cluster_cidrs.as_strings() if self.cluster_cidrs else [],
            "node_mask_sizes": list(self.node_mask_sizes),
            "service_cidrs": [str(c) for c in self.service_ranges.cidrs],
            "api_server_service_ip": str(self.service_ranges.api_server_service_ip),
            "api_server_alternate_names": [str(n) for n in self.api_server_alternate_names],
            "configure_cloud_routes": self.configure_cloud_routes,
        }


def _check_allocator(cfg: NetworkConfig) -> None:
    # cloud ipam cannot run without a cloud provider
    if cfg.cidr_allocator_type == "CloudAllocator" and not cfg.cloud_provider:
        raise AddressPlanError(
            "--cidr-allocator-type is set to 'CloudAllocator' but cloud provider is not configured"
        )


def _routes_enabled(cfg: NetworkConfig) -> bool:
    if not cfg.allocate_node_cidrs or not cfg.configure_cloud_routes:
        log.info(
            "Will not configure cloud provider routes (allocate-node-cidrs=%s, configure-cloud-routes=%s)",
            cfg.allocate_node_cidrs, cfg.configure_cloud_routes,
        )
        return False
    if not cfg.cloud_provider:
        log.info(
            "configure-cloud-routes is set, but no cloud provider specified. "
            "Will not configure cloud provider routes."
        )
        return False
    return True


def resolve_address_plan(
    cfg: NetworkConfig,
    bus: Optional[EventBus] = None,
    run_ctx: Optional[dict] = None,
    allocate: ServiceIPAllocator = service_ip_range,
) -> AddressPlan:
    """
    Resolve cluster CIDRs, node mask sizes and service ranges, in that
    order, failing on the first configuration error.
    Emits PlanComputed / PlanFailed if an EventBus is provided.
    """
    ctx = run_ctx or new_ctx(env=cfg.environment)
    try:
        cluster_cidrs: Optional[ClusterCIDRSet] = None
        node_mask_sizes: Tuple[int, ...] = ()

        if cfg.allocate_node_cidrs:
            _check_allocator(cfg)
            cluster_cidrs = validate_cluster_cidrs(cfg.cluster_cidr)
            node_mask_sizes = resolve_node_mask_sizes(cluster_cidrs, cfg.node_mask_config())
        else:
            log.info("allocate-node-cidrs is off, skipping cluster CIDR resolution")

        service_ranges = derive_service_ranges(cfg.service_cluster_ip_range, allocate=allocate)

        plan = AddressPlan(
            cluster_cidrs=cluster_cidrs,
            node_mask_sizes=node_mask_sizes,
            service_ranges=service_ranges,
            configure_cloud_routes=_routes_enabled(cfg),
            api_server_alternate_names=API_SERVER_SERVICE_NAMES + (service_ranges.api_server_service_ip,),
        )

        if bus:
            s = plan.summary()
            bus.emit(
                PlanComputed(
                    cluster_cidrs=s["cluster_cidrs"],
                    node_mask_sizes=s["node_mask_sizes"],
                    service_cidrs=s["service_cidrs"],
                    api_server_service_ip=s["api_server_service_ip"],
                    **ctx,
                )
            )
        return plan

    except Exception as e:
        if bus:
            bus.emit(PlanFailed(kind=type(e).__name__, error=str(e), **ctx))
        raise
