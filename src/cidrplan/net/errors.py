# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/cidrplan/net/errors.py

from __future__ import annotations

from typing import Optional


class AddressPlanError(ValueError):
    """Base class for address-plan configuration failures."""


class InvalidCIDRError(AddressPlanError):
    """Raised when a CIDR segment cannot be parsed."""

    def __init__(self, message: str, *, index: Optional[int] = None, value: Optional[str] = None):
        super().__init__(message)
        self.index = index
        self.value = value


class InvalidServiceCIDRError(InvalidCIDRError):
    """Raised when a service-cluster-ip-range segment cannot be parsed."""


class TooManyCIDRsError(AddressPlanError):
    """Raised when more than two CIDRs are configured."""


class NotDualStackError(AddressPlanError):
    """Raised when two CIDRs are configured but not one per IP family."""


class ConflictingMaskConfigError(AddressPlanError):
    """Raised when mutually exclusive node mask flags are combined."""


class MaskSizeOutOfRangeError(AddressPlanError):
    """Raised when a configured node mask cannot carve the cluster CIDR."""


class ServiceRangeTooSmallError(AddressPlanError):
    """Raised when the service range holds fewer than the minimum addresses."""
