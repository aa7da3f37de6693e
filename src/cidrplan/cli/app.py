# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/cidrplan/cli/app.py
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional

import typer
import yaml

from cidrplan.config.loader import load_config
from cidrplan.config.models import NetworkConfig
from cidrplan.ipam.service import derive_service_ranges
from cidrplan.logging.log import init_logging
from cidrplan.net.errors import AddressPlanError
from cidrplan.observers.dispatcher import EventBus
from cidrplan.observers.events import new_ctx
from cidrplan.observers.jsonfile import JsonFileObserver
from cidrplan.observers.logger import LoggerObserver
from cidrplan.plan.planner import resolve_address_plan
from cidrplan.utils.serialize import to_jsonable


# ------------------------------------------------------------------------------
# CLI setup
# ------------------------------------------------------------------------------

app = typer.Typer(help="Cluster address plan resolver")

OUTPUT_FORMATS = ("yaml", "json")


def _render(data: Any, output: str) -> str:
    if output not in OUTPUT_FORMATS:
        raise typer.BadParameter(
            f"Unknown output format: {output}\nValid formats: {', '.join(OUTPUT_FORMATS)}"
        )
    data = to_jsonable(data)
    if output == "json":
        return json.dumps(data, indent=2)
    return yaml.safe_dump(data, sort_keys=False)


def _fail(exc: Exception) -> None:
    typer.secho(f"error: {exc}", fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1)


# ------------------------------------------------------------------------------
# Commands
# ------------------------------------------------------------------------------

@app.command()
def resolve(
    config: Optional[Path] = typer.Argument(None, help="Network config YAML"),
    cluster_cidr: Optional[str] = typer.Option(None, "--cluster-cidr", help="Comma separated pod CIDRs"),
    service_cluster_ip_range: Optional[str] = typer.Option(
        None,
        "--service-cluster-ip-range",
        help="Comma separated service CIDRs (primary first)",
    ),
    node_cidr_mask_size: Optional[int] = typer.Option(None, "--node-cidr-mask-size", min=0),
    node_cidr_mask_size_ipv4: Optional[int] = typer.Option(None, "--node-cidr-mask-size-ipv4", min=0),
    node_cidr_mask_size_ipv6: Optional[int] = typer.Option(None, "--node-cidr-mask-size-ipv6", min=0),
    allocate_node_cidrs: Optional[bool] = typer.Option(
        None,
        "--allocate-node-cidrs/--no-allocate-node-cidrs",
    ),
    output: str = typer.Option("yaml", "--output", "-o", help="yaml or json"),
    log_dir: Optional[Path] = typer.Option(None, "--log-dir"),
    debug: bool = typer.Option(False, "--debug"),
):
    """
    Resolve cluster CIDRs, node mask sizes and service ranges.
    """
    logger, run_id, log_path = init_logging(base_dir=log_dir, verbose=debug)

    overrides = {
        "cluster_cidr": cluster_cidr,
        "service_cluster_ip_range": service_cluster_ip_range,
        "node_cidr_mask_size": node_cidr_mask_size,
        "node_cidr_mask_size_ipv4": node_cidr_mask_size_ipv4,
        "node_cidr_mask_size_ipv6": node_cidr_mask_size_ipv6,
        "allocate_node_cidrs": allocate_node_cidrs,
    }

    try:
        cfg: NetworkConfig = load_config(config, overrides=overrides)
    except (OSError, ValueError, yaml.YAMLError) as exc:
        _fail(exc)

    observers = [
        LoggerObserver(logger),
        JsonFileObserver(log_path.parent / f"{run_id}.jsonl"),
    ]
    bus = EventBus(observers=observers)

    try:
        plan = resolve_address_plan(cfg, bus=bus, run_ctx=new_ctx(env=cfg.environment, run_id=run_id))
    except AddressPlanError as exc:
        _fail(exc)

    typer.echo(_render(plan.summary(), output))


@app.command("service-range")
def service_range(
    service_cluster_ip_range: str = typer.Argument("", help="Comma separated service CIDRs"),
    output: str = typer.Option("yaml", "--output", "-o", help="yaml or json"),
):
    """
    Show the primary/secondary service ranges and the API server service IP.
    """
    try:
        ranges = derive_service_ranges(service_cluster_ip_range)
    except AddressPlanError as exc:
        _fail(exc)

    typer.echo(_render(ranges, output))


if __name__ == "__main__":
    app()
