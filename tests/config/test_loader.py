from pathlib import Path
import textwrap

import pytest
from pydantic import ValidationError

from cidrplan.config.loader import load_config


@pytest.fixture(autouse=True)
def _no_overrides_env(monkeypatch):
    monkeypatch.delenv("CIDRPLAN_OVERRIDES_FILE", raising=False)


def _write(path: Path, text: str) -> Path:
    path.write_text(textwrap.dedent(text))
    return path


def test_load_config_minimal_ok(tmp_path: Path):
    f = _write(tmp_path / "network.yaml", """
        environment: dev
        cluster_cidr: 10.0.0.0/16,fd00::/48
        service_cluster_ip_range: 10.96.0.0/12
        node_cidr_mask_size_ipv4: 23
    """)
    cfg = load_config(f)
    assert cfg.environment == "dev"
    assert cfg.cluster_cidr == "10.0.0.0/16,fd00::/48"
    assert cfg.node_mask_config().mask_v4 == 23
    assert cfg.node_mask_config().legacy_mask == 0


def test_load_config_expands_env(tmp_path: Path, monkeypatch):
    monkeypatch.setenv("POD_CIDR", "10.244.0.0/16")
    f = _write(tmp_path / "network.yaml", """
        cluster_cidr: ${POD_CIDR}
    """)
    assert load_config(f).cluster_cidr == "10.244.0.0/16"


def test_overrides_file_beside_config_is_merged(tmp_path: Path):
    f = _write(tmp_path / "network.yaml", """
        cluster_cidr: 10.0.0.0/16
        node_cidr_mask_size: 24
    """)
    _write(tmp_path / "overrides.yaml", """
        node_cidr_mask_size: 26
        service_cluster_ip_range: ""
    """)
    cfg = load_config(f)
    assert cfg.node_cidr_mask_size == 26
    assert cfg.service_cluster_ip_range == ""


def test_overrides_env_var_points_elsewhere(tmp_path: Path, monkeypatch):
    f = _write(tmp_path / "network.yaml", "cluster_cidr: 10.0.0.0/16\n")
    other = _write(tmp_path / "other.yaml", "cluster_cidr: fd00::/48\n")
    monkeypatch.setenv("CIDRPLAN_OVERRIDES_FILE", str(other))
    assert load_config(f).cluster_cidr == "fd00::/48"


def test_explicit_overrides_skip_unset_values(tmp_path: Path):
    f = _write(tmp_path / "network.yaml", "cluster_cidr: 10.0.0.0/16\n")
    cfg = load_config(f, overrides={"cluster_cidr": None, "node_cidr_mask_size_ipv4": 25})
    assert cfg.cluster_cidr == "10.0.0.0/16"
    assert cfg.node_cidr_mask_size_ipv4 == 25


def test_load_config_without_file():
    cfg = load_config(overrides={"cluster_cidr": "10.0.0.0/16"})
    assert cfg.cluster_cidr == "10.0.0.0/16"
    assert cfg.allocate_node_cidrs is True


def test_unknown_keys_and_negative_masks_are_rejected(tmp_path: Path):
    with pytest.raises(ValidationError):
        load_config(_write(tmp_path / "a.yaml", "cluster_cidrs: 10.0.0.0/16\n"))
    with pytest.raises(ValidationError):
        load_config(_write(tmp_path / "b.yaml", "node_cidr_mask_size: -1\n"))
