import ipaddress

import pytest

from cidrplan.net.cidrs import (
    indexed_ip,
    is_ipv6_cidr,
    is_dual_stack_cidrs,
    parse_cidr,
    process_cidrs,
)
from cidrplan.net.errors import AddressPlanError, InvalidCIDRError


def net(text):
    return ipaddress.ip_network(text)


def test_parse_cidr_masks_host_bits():
    assert parse_cidr("10.0.0.1/16") == net("10.0.0.0/16")


def test_parse_cidr_accepts_leading_zero_octets_and_whitespace():
    assert parse_cidr("  010.001.0.0/16 ") == net("10.1.0.0/16")


def test_parse_cidr_ipv6():
    cidr = parse_cidr("fd00::/48")
    assert cidr.version == 6
    assert cidr.prefixlen == 48


@pytest.mark.parametrize("bad", ["10.0.0.1", "10.0.0.0/33", "10.0.0.0/abc", "10.0.0.0/-1", "1.2.3/8", "", "/24"])
def test_parse_cidr_rejects_malformed(bad):
    with pytest.raises(InvalidCIDRError):
        parse_cidr(bad)


def test_process_cidrs_trims_and_classifies_dual_stack():
    cidrs, dual = process_cidrs("  10.0.0.0/16 , fd00::/48  ")
    assert cidrs == [net("10.0.0.0/16"), net("fd00::/48")]
    assert dual is True


def test_process_cidrs_single_is_not_dual_stack():
    cidrs, dual = process_cidrs("10.0.0.0/16")
    assert cidrs == [net("10.0.0.0/16")]
    assert dual is False


def test_process_cidrs_reports_offending_segment():
    with pytest.raises(InvalidCIDRError) as ei:
        process_cidrs("10.0.0.0/16,bogus")
    assert ei.value.index == 1
    assert ei.value.value == "bogus"
    assert isinstance(ei.value, AddressPlanError)


def test_process_cidrs_empty_string_fails():
    with pytest.raises(InvalidCIDRError) as ei:
        process_cidrs("")
    assert ei.value.index == 0


def test_dual_stack_requires_exactly_two_of_different_families():
    v4a, v4b, v6 = net("10.0.0.0/16"), net("10.1.0.0/16"), net("fd00::/48")
    assert is_dual_stack_cidrs([v4a, v6])
    assert is_dual_stack_cidrs([v6, v4a])
    assert not is_dual_stack_cidrs([v4a, v4b])
    assert not is_dual_stack_cidrs([v4a, v6, v4b])
    assert not is_dual_stack_cidrs([v6])


def test_indexed_ip():
    assert indexed_ip(net("10.96.0.0/12"), 1) == ipaddress.ip_address("10.96.0.1")
    assert indexed_ip(net("fd00:1::/108"), 1) == ipaddress.ip_address("fd00:1::1")
    with pytest.raises(InvalidCIDRError):
        indexed_ip(net("10.0.0.5/32"), 1)


def test_ipv4_mapped_cidr_is_ipv4():
    cidr = parse_cidr("::ffff:10.0.0.0/104")
    assert cidr == net("10.0.0.0/8")
    assert not is_ipv6_cidr(cidr)
    # a mapped network built by hand still classifies as IPv4
    assert not is_ipv6_cidr(net("::ffff:10.0.0.0/104"))
    assert is_ipv6_cidr(net("fd00::/48"))


def test_ipv4_mapped_pair_is_not_dual_stack():
    cidrs, dual = process_cidrs("::ffff:10.0.0.0/104,10.1.0.0/16")
    assert cidrs == [net("10.0.0.0/8"), net("10.1.0.0/16")]
    assert dual is False
