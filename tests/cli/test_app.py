import json
from pathlib import Path

from typer.testing import CliRunner

from cidrplan.cli.app import app

runner = CliRunner()


def test_resolve_from_flags(tmp_path: Path):
    result = runner.invoke(app, [
        "resolve",
        "--cluster-cidr", "10.0.0.0/16,fd00::/48",
        "--service-cluster-ip-range", "10.96.0.0/12,fd00:1::/108",
        "--node-cidr-mask-size-ipv4", "23",
        "--node-cidr-mask-size-ipv6", "80",
        "--log-dir", str(tmp_path),
    ])
    assert result.exit_code == 0, result.output
    assert "api_server_service_ip: 10.96.0.1" in result.stdout
    assert "- 23" in result.stdout and "- 80" in result.stdout
    # the run's events land next to the log file
    events = [json.loads(line) for f in tmp_path.glob("*.jsonl") for line in f.read_text().splitlines()]
    assert [e["type"] for e in events] == ["PlanComputed"]


def test_resolve_from_config_with_flag_override(tmp_path: Path):
    cfg = tmp_path / "network.yaml"
    cfg.write_text("cluster_cidr: 10.0.0.0/16\nnode_cidr_mask_size: 26\n")
    result = runner.invoke(app, [
        "resolve", str(cfg),
        "--node-cidr-mask-size", "25",
        "--output", "json",
        "--log-dir", str(tmp_path / "logs"),
    ])
    assert result.exit_code == 0, result.output
    assert '"node_mask_sizes": [\n    25\n  ]' in result.stdout


def test_resolve_reports_configuration_errors(tmp_path: Path):
    result = runner.invoke(app, [
        "resolve",
        "--cluster-cidr", "10.0.0.0/16,10.1.0.0/16",
        "--log-dir", str(tmp_path),
    ])
    assert result.exit_code == 1
    assert "not configured as dual stack" in result.output


def test_resolve_rejects_conflicting_masks(tmp_path: Path):
    result = runner.invoke(app, [
        "resolve",
        "--cluster-cidr", "10.0.0.0/16,fd00::/48",
        "--node-cidr-mask-size", "24",
        "--log-dir", str(tmp_path),
    ])
    assert result.exit_code == 1
    assert "not allowed with dual-stack clusters" in result.output


def test_service_range_command():
    result = runner.invoke(app, ["service-range", "10.96.0.0/12,fd00:1::/108", "-o", "json"])
    assert result.exit_code == 0, result.output
    assert '"secondary": "fd00:1::/108"' in result.stdout
    assert '"api_server_service_ip": "10.96.0.1"' in result.stdout


def test_service_range_command_invalid():
    result = runner.invoke(app, ["service-range", "nope"])
    assert result.exit_code == 1
    assert "service-cluster-ip-range[0] is not a valid cidr" in result.output
