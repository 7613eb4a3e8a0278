"""
Hostname collection for Ingress-DNS.

Gathers the candidate DNS names of a resource from its rules, its TLS blocks
and the hostname annotation, and drops names that are not legal domain names.
"""

import logging
import re
from typing import Iterable, List

from ingress_dns.source.annotations import HostnameSource

MAX_LABEL_LENGTH = 63
MAX_NAME_LENGTH = 253

_LABEL = re.compile(r"^[A-Za-z0-9_](?:[A-Za-z0-9_-]*[A-Za-z0-9_])?$")

logger = logging.getLogger("ingress-dns.source.hostnames")


def normalize_hostname(hostname: str) -> str:
    """Strip surrounding whitespace and a single trailing dot."""
    hostname = hostname.strip()
    if hostname.endswith("."):
        hostname = hostname[:-1]
    return hostname


def is_valid_hostname(hostname: str) -> bool:
    """
    Check whether a name is a syntactically legal domain name.

    A wildcard is allowed as the leftmost label.

    Args:
        hostname: Name without trailing dot

    Returns:
        bool: True if the name may be used as a DNS name
    """
    if not hostname or len(hostname) > MAX_NAME_LENGTH:
        return False
    labels = hostname.split(".")
    for index, label in enumerate(labels):
        if not label or len(label) > MAX_LABEL_LENGTH:
            return False
        if label == "*" and index == 0:
            continue
        if not _LABEL.match(label):
            return False
    return True


def valid_hostnames(hosts: Iterable[str], origin: str = "template") -> List[str]:
    """Normalize hosts and drop empty or invalid ones, keeping order."""
    valid = []
    for host in hosts:
        host = normalize_hostname(host)
        if not host:
            continue
        if not is_valid_hostname(host):
            logger.debug(f"Dropping invalid {origin} hostname {host!r}")
            continue
        valid.append(host)
    return valid


def collect_hostnames(
    rule_hosts: Iterable[str],
    tls_hosts: Iterable[str],
    annotation_hosts: Iterable[str],
    mode: HostnameSource = HostnameSource.BOTH,
    ignore_hostname_annotation: bool = False,
    ignore_tls_spec: bool = False,
    ignore_rules_spec: bool = False,
) -> List[str]:
    """
    Collect the hostnames of a resource.

    Rule hosts come first, then TLS hosts, then annotation hosts. The
    hostname-source mode decides whether annotation hosts are ignored
    (defined-hosts-only), used exclusively (annotation-only) or appended.
    Without usable annotation hosts the mode has no effect.
    Duplicates are kept.

    Args:
        rule_hosts: Hosts declared by the resource rules
        tls_hosts: Hosts of all TLS blocks, flattened
        annotation_hosts: Hosts from the hostname annotation
        mode: Hostname-source mode of the resource
        ignore_hostname_annotation: Never use annotation hosts
        ignore_tls_spec: Never use TLS hosts
        ignore_rules_spec: Never use rule hosts

    Returns:
        List[str]: Valid hostnames in collection order
    """
    defined_hosts: List[str] = []
    if not ignore_rules_spec:
        defined_hosts.extend(valid_hostnames(rule_hosts, "rule"))
    if not ignore_tls_spec:
        defined_hosts.extend(valid_hostnames(tls_hosts, "TLS"))

    annotation_hosts = list(annotation_hosts)
    if ignore_hostname_annotation or not annotation_hosts:
        return defined_hosts

    annotation_valid = valid_hostnames(annotation_hosts, "annotation")
    if mode == HostnameSource.DEFINED_HOSTS_ONLY:
        return defined_hosts
    if mode == HostnameSource.ANNOTATION_ONLY:
        return annotation_valid
    return defined_hosts + annotation_valid
