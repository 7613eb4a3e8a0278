"""
Target extraction for Ingress-DNS.

This module classifies load-balancer addresses and target values into IPv4,
IPv6 and hostname groups, each of which maps onto one DNS record type.
"""

import ipaddress
import logging
from typing import Iterable, Iterator, List, NamedTuple, Tuple

from ingress_dns.models.models import (
    RECORD_TYPE_A,
    RECORD_TYPE_AAAA,
    RECORD_TYPE_CNAME,
    LoadBalancerIngress,
)

logger = logging.getLogger("ingress-dns.source.targets")


class TargetGroups(NamedTuple):
    """
    Targets of one resource, grouped by the record type they produce.
    """

    ipv4: List[str]
    ipv6: List[str]
    hostnames: List[str]

    def is_empty(self) -> bool:
        return not (self.ipv4 or self.ipv6 or self.hostnames)

    def by_record_type(self) -> Iterator[Tuple[str, List[str]]]:
        """
        Yield (record_type, targets) for every non-empty group, A first.
        """
        if self.ipv4:
            yield RECORD_TYPE_A, self.ipv4
        if self.ipv6:
            yield RECORD_TYPE_AAAA, self.ipv6
        if self.hostnames:
            yield RECORD_TYPE_CNAME, self.hostnames


def suitable_type(target: str) -> str:
    """
    Return the record type suitable for a target value.

    Args:
        target: IP literal or hostname

    Returns:
        str: A for IPv4, AAAA for IPv6, CNAME for anything else
    """
    try:
        address = ipaddress.ip_address(target)
    except ValueError:
        return RECORD_TYPE_CNAME
    if isinstance(address, ipaddress.IPv4Address):
        return RECORD_TYPE_A
    return RECORD_TYPE_AAAA


def classify_targets(values: Iterable[str]) -> TargetGroups:
    """
    Group arbitrary target values by record type, preserving order.

    Empty values are skipped and trailing dots are removed from hostnames.

    Args:
        values: Target values (IP literals or hostnames)

    Returns:
        TargetGroups: Grouped targets
    """
    groups = TargetGroups([], [], [])
    for value in values:
        value = value.strip()
        if not value:
            continue
        record_type = suitable_type(value)
        if record_type == RECORD_TYPE_A:
            groups.ipv4.append(value)
        elif record_type == RECORD_TYPE_AAAA:
            groups.ipv6.append(value)
        else:
            value = value.rstrip(".")
            if value:
                groups.hostnames.append(value)
    return groups


def targets_from_load_balancer(entries: Iterable[LoadBalancerIngress]) -> TargetGroups:
    """
    Extract targets from the realized load-balancer entries of a resource.

    An entry carrying a hostname contributes a hostname target; otherwise its
    IP literal is parsed. Empty or unparseable entries are skipped.

    Args:
        entries: Load-balancer entries in status order

    Returns:
        TargetGroups: Grouped targets
    """
    groups = TargetGroups([], [], [])
    for entry in entries:
        if entry.hostname:
            groups.hostnames.append(entry.hostname)
            continue
        if not entry.ip:
            continue
        try:
            address = ipaddress.ip_address(entry.ip)
        except ValueError:
            logger.debug(f"Skipping unparseable load balancer IP {entry.ip!r}")
            continue
        if isinstance(address, ipaddress.IPv4Address):
            groups.ipv4.append(entry.ip)
        else:
            groups.ipv6.append(entry.ip)
    return groups
