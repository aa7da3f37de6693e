# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/cidrplan/config/models.py

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, Field

from ..ipam.masks import NodeMaskConfig


class NetworkConfig(BaseModel):
    """
    Address plan inputs, named after the control-plane flags they mirror.
    Mask sizes of 0 mean "not set".
    """
    environment: str = "dev"

    cluster_cidr: str = ""
    service_cluster_ip_range: str = ""

    node_cidr_mask_size: int = Field(0, ge=0)
    node_cidr_mask_size_ipv4: int = Field(0, ge=0)
    node_cidr_mask_size_ipv6: int = Field(0, ge=0)

    allocate_node_cidrs: bool = True
    cidr_allocator_type: Literal["RangeAllocator", "CloudAllocator"] = "RangeAllocator"
    cloud_provider: Optional[str] = None
    configure_cloud_routes: bool = False

    model_config = {
        "extra": "forbid",
    }

    def node_mask_config(self) -> NodeMaskConfig:
        return NodeMaskConfig(
            legacy_mask=self.node_cidr_mask_size,
            mask_v4=self.node_cidr_mask_size_ipv4,
            mask_v6=self.node_cidr_mask_size_ipv6,
        )
