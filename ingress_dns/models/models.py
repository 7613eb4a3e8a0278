"""
Data models for Ingress-DNS.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

RECORD_TYPE_A = "A"
RECORD_TYPE_AAAA = "AAAA"
RECORD_TYPE_CNAME = "CNAME"

# Label attached to every endpoint, pointing back at the resource it came from
RESOURCE_LABEL_KEY = "resource"


@dataclass
class ProviderSpecificProperty:
    """
    A provider-specific extension attached to an endpoint (e.g. an alias marker).
    """

    name: str
    value: str


@dataclass
class Endpoint:
    """
    Represents a DNS endpoint (record) derived from a cluster resource.
    """

    dnsname: str
    targets: List[str]
    record_type: str
    record_ttl: Optional[int] = None
    set_identifier: str = ""
    provider_specific: List[ProviderSpecificProperty] = field(default_factory=list)
    labels: Dict[str, str] = field(default_factory=dict)

    @property
    def id(self) -> str:
        """
        Generate a unique identifier for this endpoint.

        Returns:
            str: Unique identifier
        """
        return f"{self.dnsname}:{self.record_type}"

    @property
    def resource(self) -> Optional[str]:
        return self.labels.get(RESOURCE_LABEL_KEY)

    def to_dict(self) -> Dict[str, Any]:
        """
        Render the endpoint as plain data for output.

        Returns:
            Dict[str, Any]: Endpoint fields, omitting unset optional ones
        """
        data: Dict[str, Any] = {
            "dnsName": self.dnsname,
            "recordType": self.record_type,
            "targets": list(self.targets),
        }
        if self.record_ttl is not None:
            data["recordTTL"] = self.record_ttl
        if self.set_identifier:
            data["setIdentifier"] = self.set_identifier
        if self.provider_specific:
            data["providerSpecific"] = [
                {"name": prop.name, "value": prop.value}
                for prop in self.provider_specific
            ]
        if self.labels:
            data["labels"] = dict(self.labels)
        return data


@dataclass
class LoadBalancerIngress:
    """
    One realized load-balancer address of an ingress: an IP or a hostname.
    """

    ip: str = ""
    hostname: str = ""


@dataclass
class Ingress:
    """
    Read-only view of an Ingress resource, reduced to what DNS extraction needs.
    """

    name: str
    namespace: str
    annotations: Dict[str, str] = field(default_factory=dict)
    labels: Dict[str, str] = field(default_factory=dict)
    rule_hosts: List[str] = field(default_factory=list)
    tls_hosts: List[List[str]] = field(default_factory=list)
    ingress_class_name: Optional[str] = None
    load_balancer: List[LoadBalancerIngress] = field(default_factory=list)

    kind = "ingress"

    @property
    def resource_id(self) -> str:
        return f"{self.kind}/{self.namespace}/{self.name}"

    def hosts(self) -> List[str]:
        return list(self.rule_hosts)

    def tls_host_names(self) -> List[str]:
        """Hosts of every TLS block, block order first, then per-block order."""
        return [host for block in self.tls_hosts for host in block]

    def class_name(self) -> str:
        return self.ingress_class_name or ""

    @classmethod
    def from_k8s(cls, obj) -> "Ingress":
        """
        Convert a kubernetes.client.V1Ingress into an Ingress.

        Any missing section (spec, status, rules, tls, ...) is treated as empty.

        Args:
            obj: V1Ingress instance (or anything with the same attributes)

        Returns:
            Ingress: Converted resource
        """
        metadata = getattr(obj, "metadata", None)
        spec = getattr(obj, "spec", None)
        status = getattr(obj, "status", None)

        rule_hosts = [
            rule.host or "" for rule in (getattr(spec, "rules", None) or [])
        ]
        tls_hosts = [
            list(tls.hosts or []) for tls in (getattr(spec, "tls", None) or [])
        ]

        load_balancer_status = getattr(status, "load_balancer", None)
        load_balancer = [
            LoadBalancerIngress(ip=entry.ip or "", hostname=entry.hostname or "")
            for entry in (getattr(load_balancer_status, "ingress", None) or [])
        ]

        return cls(
            name=getattr(metadata, "name", None) or "",
            namespace=getattr(metadata, "namespace", None) or "",
            annotations=dict(getattr(metadata, "annotations", None) or {}),
            labels=dict(getattr(metadata, "labels", None) or {}),
            rule_hosts=rule_hosts,
            tls_hosts=tls_hosts,
            ingress_class_name=getattr(spec, "ingress_class_name", None),
            load_balancer=load_balancer,
        )
