"""
Ingress source module for Ingress-DNS.

This module is responsible for listing Ingress resources from Kubernetes and
turning them into the DNS endpoints that should exist for them.
"""

import logging
from typing import Iterable, List, Optional

from kubernetes.client.exceptions import ApiException
from urllib3.exceptions import HTTPError

from ingress_dns.errors import SourceError
from ingress_dns.models.models import Endpoint, Ingress
from ingress_dns.source.annotations import DEFAULT_ANNOTATION_KEYS, AnnotationKeys
from ingress_dns.source.endpoints import endpoints_from_ingress
from ingress_dns.source.filters import AdmissionFilter
from ingress_dns.source.template import FQDNTemplate


class IngressSource:
    """
    Source that derives endpoints from Kubernetes Ingress resources.
    """

    def __init__(
        self,
        networking_api,
        namespace: str = "",
        annotation_filter: str = "",
        fqdn_template: str = "",
        combine_fqdn_annotation: bool = False,
        ignore_hostname_annotation: bool = False,
        ignore_ingress_tls_spec: bool = False,
        ignore_ingress_rules_spec: bool = False,
        label_selector=None,
        ingress_class_names: Optional[Iterable[str]] = None,
        keys: AnnotationKeys = DEFAULT_ANNOTATION_KEYS,
    ):
        """
        Initialize an IngressSource.

        Args:
            networking_api: kubernetes.client.NetworkingV1Api (or compatible)
            namespace: Only list ingresses of this namespace; empty for all
            annotation_filter: Label selector expression over annotations
            fqdn_template: Template naming ingresses without a declared host
            combine_fqdn_annotation: Add templated names to declared hosts
            ignore_hostname_annotation: Do not use the hostname annotation
            ignore_ingress_tls_spec: Do not use TLS hosts
            ignore_ingress_rules_spec: Do not use rule hosts
            label_selector: Selector, selector expression or label map
            ingress_class_names: Allowed ingress classes
            keys: Annotation keys

        Raises:
            ConfigurationError: If the configuration is invalid
        """
        self.networking_api = networking_api
        self.namespace = namespace or ""
        self.combine_fqdn_annotation = combine_fqdn_annotation
        self.ignore_hostname_annotation = ignore_hostname_annotation
        self.ignore_ingress_tls_spec = ignore_ingress_tls_spec
        self.ignore_ingress_rules_spec = ignore_ingress_rules_spec
        self.keys = keys
        self.logger = logging.getLogger("ingress-dns.source.ingress")

        self.admission = AdmissionFilter(
            ingress_class_names=ingress_class_names,
            annotation_filter=annotation_filter,
            label_selector=label_selector,
            keys=keys,
        )
        self.fqdn_template = FQDNTemplate.from_text(fqdn_template)

    @classmethod
    def from_config(cls, config, networking_api) -> "IngressSource":
        """
        Build a source from the application configuration.

        Args:
            config: ingress_dns.config.config.Config
            networking_api: kubernetes.client.NetworkingV1Api (or compatible)

        Returns:
            IngressSource: Configured source
        """
        return cls(
            networking_api,
            namespace=config.namespace,
            annotation_filter=config.annotation_filter,
            fqdn_template=config.fqdn_template,
            combine_fqdn_annotation=config.combine_fqdn_annotation,
            ignore_hostname_annotation=config.ignore_hostname_annotation,
            ignore_ingress_tls_spec=config.ignore_ingress_tls_spec,
            ignore_ingress_rules_spec=config.ignore_ingress_rules_spec,
            label_selector=config.label_filter,
            ingress_class_names=config.ingress_class_names,
        )

    async def endpoints(self) -> List[Endpoint]:
        """
        Returns a list of endpoint objects representing desired DNS records
        based on the ingresses of the cluster.

        Returns:
            List[Endpoint]: List of endpoints, in ingress list order

        Raises:
            ConfigurationError: If the configuration turned out to be unusable
            SourceError: If listing ingresses failed
        """
        self.admission.check()

        endpoints = []
        for ingress in self._list_ingresses():
            if not self.admission.admits(ingress):
                continue

            ingress_endpoints = self.endpoints_from_ingress(ingress)
            if not ingress_endpoints:
                self.logger.debug(f"No endpoints could be generated from {ingress.resource_id}")
                continue

            self.logger.debug(
                f"Endpoints generated from {ingress.resource_id}: "
                f"{[endpoint.id for endpoint in ingress_endpoints]}"
            )
            endpoints.extend(ingress_endpoints)

        return endpoints

    def endpoints_from_ingress(self, ingress: Ingress) -> List[Endpoint]:
        """
        Generate endpoints from a single admitted ingress.

        Args:
            ingress: Ingress resource

        Returns:
            List[Endpoint]: List of endpoints
        """
        return endpoints_from_ingress(
            ingress,
            ignore_hostname_annotation=self.ignore_hostname_annotation,
            ignore_ingress_tls_spec=self.ignore_ingress_tls_spec,
            ignore_ingress_rules_spec=self.ignore_ingress_rules_spec,
            fqdn_template=self.fqdn_template,
            combine_fqdn_annotation=self.combine_fqdn_annotation,
            keys=self.keys,
        )

    def _list_ingresses(self) -> List[Ingress]:
        """
        List ingresses, restricted to the target namespace if one is set.

        Raises:
            SourceError: If the Kubernetes API call fails
        """
        try:
            # Note: the client call is synchronous, like the rest of the extraction
            if self.namespace:
                response = self.networking_api.list_namespaced_ingress(self.namespace)
            else:
                response = self.networking_api.list_ingress_for_all_namespaces()
        except ApiException as e:
            raise SourceError(f"Error listing ingresses: {e.status} {e.reason}") from e
        except HTTPError as e:
            raise SourceError(f"Error connecting to the Kubernetes API: {e}") from e

        ingresses = [Ingress.from_k8s(item) for item in (response.items or [])]
        self.logger.debug(
            f"Listed {len(ingresses)} ingresses in "
            f"{'namespace ' + self.namespace if self.namespace else 'all namespaces'}"
        )
        return ingresses
