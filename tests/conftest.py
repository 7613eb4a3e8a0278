"""
Shared fixtures and fake Kubernetes objects for ingress-dns tests.
"""

from types import SimpleNamespace

import pytest
from kubernetes.client import (
    V1Ingress,
    V1IngressLoadBalancerIngress,
    V1IngressLoadBalancerStatus,
    V1IngressRule,
    V1IngressSpec,
    V1IngressStatus,
    V1IngressTLS,
    V1ObjectMeta,
)

from ingress_dns.models.models import Ingress


def make_v1_ingress(
    name: str = "",
    namespace: str = "",
    dnsnames: list[str] | None = None,
    tlsdnsnames: list[list[str]] | None = None,
    ips: list[str] | None = None,
    hostnames: list[str] | None = None,
    annotations: dict[str, str] | None = None,
    labels: dict[str, str] | None = None,
    ingress_class_name: str = "",
) -> V1Ingress:
    """
    Build a V1Ingress the way the API server would return it.

    Load balancer IPs come before load balancer hostnames in the status.
    """
    load_balancer = [V1IngressLoadBalancerIngress(ip=ip) for ip in ips or []]
    load_balancer += [
        V1IngressLoadBalancerIngress(hostname=hostname) for hostname in hostnames or []
    ]
    return V1Ingress(
        metadata=V1ObjectMeta(
            name=name,
            namespace=namespace,
            annotations=annotations,
            labels=labels,
        ),
        spec=V1IngressSpec(
            rules=[V1IngressRule(host=host) for host in dnsnames or []],
            tls=[V1IngressTLS(hosts=hosts) for hosts in tlsdnsnames or []] or None,
            ingress_class_name=ingress_class_name,
        ),
        status=V1IngressStatus(
            load_balancer=V1IngressLoadBalancerStatus(ingress=load_balancer)
        ),
    )


class FakeNetworkingApi:
    """
    Stand-in for kubernetes.client.NetworkingV1Api backed by a list of ingresses.
    """

    def __init__(self, ingresses: list[V1Ingress] | None = None, error: Exception | None = None):
        self.ingresses = list(ingresses or [])
        self.error = error
        self.calls: list[tuple] = []

    def list_ingress_for_all_namespaces(self, **kwargs):
        self.calls.append(("all", kwargs))
        if self.error is not None:
            raise self.error
        return SimpleNamespace(items=list(self.ingresses))

    def list_namespaced_ingress(self, namespace, **kwargs):
        self.calls.append((namespace, kwargs))
        if self.error is not None:
            raise self.error
        return SimpleNamespace(
            items=[i for i in self.ingresses if i.metadata.namespace == namespace]
        )


@pytest.fixture
def v1_ingress():
    """Factory fixture to create V1Ingress objects."""
    return make_v1_ingress


@pytest.fixture
def ingress():
    """Factory fixture to create converted Ingress resources."""

    def _create(name: str = "fake", namespace: str = "default", **kwargs) -> Ingress:
        return Ingress.from_k8s(make_v1_ingress(name=name, namespace=namespace, **kwargs))

    return _create


@pytest.fixture
def networking_api():
    """Factory fixture to create fake networking APIs."""

    def _create(*ingresses: V1Ingress, error: Exception | None = None) -> FakeNetworkingApi:
        return FakeNetworkingApi(list(ingresses), error=error)

    return _create


def summarize(endpoints) -> list[tuple]:
    """Reduce endpoints to (dnsname, record_type, targets) tuples for comparison."""
    return [(ep.dnsname, ep.record_type, ep.targets) for ep in endpoints]
