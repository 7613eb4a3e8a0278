"""
Endpoint assembly for Ingress-DNS.

Combines the hostnames and targets of an admitted resource into endpoints,
one per hostname and record type.
"""

import logging
from typing import Dict, List, Optional

from ingress_dns.models.models import (
    RECORD_TYPE_CNAME,
    RESOURCE_LABEL_KEY,
    Endpoint,
    Ingress,
    ProviderSpecificProperty,
)
from ingress_dns.source.annotations import (
    DEFAULT_ANNOTATION_KEYS,
    AnnotationDecoder,
    AnnotationKeys,
)
from ingress_dns.source.hostnames import collect_hostnames, valid_hostnames
from ingress_dns.source.targets import (
    TargetGroups,
    classify_targets,
    targets_from_load_balancer,
)
from ingress_dns.source.template import FQDNTemplate

ALIAS_PROPERTY = "alias"

logger = logging.getLogger("ingress-dns.source.endpoints")


def endpoints_for_hostname(
    hostname: str,
    groups: TargetGroups,
    ttl: Optional[int] = None,
    alias: bool = False,
    provider_specific: Optional[List[ProviderSpecificProperty]] = None,
    set_identifier: str = "",
    resource_id: str = "",
) -> List[Endpoint]:
    """
    Build the endpoints of one hostname, one per non-empty target group.

    Args:
        hostname: DNS name
        groups: Targets grouped by record type
        ttl: Record TTL in seconds, None for the provider default
        alias: Whether CNAME records are marked as alias records
        provider_specific: Extra provider-specific properties
        set_identifier: Routing policy identifier
        resource_id: Identity of the originating resource

    Returns:
        List[Endpoint]: Endpoints in A, AAAA, CNAME order
    """
    endpoints = []
    for record_type, targets in groups.by_record_type():
        properties = list(provider_specific or [])
        if alias and record_type == RECORD_TYPE_CNAME:
            properties.append(ProviderSpecificProperty(ALIAS_PROPERTY, "true"))

        endpoint = Endpoint(
            dnsname=hostname,
            targets=list(targets),
            record_type=record_type,
            record_ttl=ttl,
            set_identifier=set_identifier,
            provider_specific=properties,
        )
        if resource_id:
            endpoint.labels[RESOURCE_LABEL_KEY] = resource_id
        endpoints.append(endpoint)
    return endpoints


def merge_endpoints(endpoints: List[Endpoint]) -> List[Endpoint]:
    """
    Merge endpoints sharing a DNS name and record type.

    Targets of later duplicates are appended to the first endpoint unless
    already present.

    Args:
        endpoints: Endpoints of a single resource

    Returns:
        List[Endpoint]: At most one endpoint per (name, type), first-seen order
    """
    merged: Dict[str, Endpoint] = {}
    for endpoint in endpoints:
        existing = merged.get(endpoint.id)
        if existing is None:
            merged[endpoint.id] = endpoint
            continue
        for target in endpoint.targets:
            if target not in existing.targets:
                existing.targets.append(target)
    return list(merged.values())


def endpoints_from_ingress(
    ingress: Ingress,
    ignore_hostname_annotation: bool = False,
    ignore_ingress_tls_spec: bool = False,
    ignore_ingress_rules_spec: bool = False,
    fqdn_template: Optional[FQDNTemplate] = None,
    combine_fqdn_annotation: bool = False,
    keys: AnnotationKeys = DEFAULT_ANNOTATION_KEYS,
) -> List[Endpoint]:
    """
    Compute the endpoints of an admitted ingress.

    Targets come from the target annotation when present (replacing the
    load-balancer status entirely), otherwise from the load-balancer status.
    The FQDN template names the ingress when no host is declared; with
    combine_fqdn_annotation the templated names are added next to the
    declared hosts of an ingress carrying a target annotation.

    Args:
        ingress: Admitted resource
        ignore_hostname_annotation: Do not use the hostname annotation
        ignore_ingress_tls_spec: Do not use TLS hosts
        ignore_ingress_rules_spec: Do not use rule hosts
        fqdn_template: Optional compiled FQDN template
        combine_fqdn_annotation: Add templated names to declared hosts
        keys: Annotation keys

    Returns:
        List[Endpoint]: Endpoints, possibly empty

    Raises:
        ConfigurationError: If the FQDN template cannot be applied
    """
    resource_id = ingress.resource_id
    decoder = AnnotationDecoder(ingress.annotations, resource_id, keys)

    override = decoder.targets()
    if override is not None:
        groups = classify_targets(override)
    else:
        groups = targets_from_load_balancer(ingress.load_balancer)

    if groups.is_empty():
        logger.debug(f"No targets could be found for {resource_id}")
        return []

    hostnames = collect_hostnames(
        ingress.hosts(),
        ingress.tls_host_names(),
        decoder.hostnames(),
        mode=decoder.hostname_source(),
        ignore_hostname_annotation=ignore_hostname_annotation,
        ignore_tls_spec=ignore_ingress_tls_spec,
        ignore_rules_spec=ignore_ingress_rules_spec,
    )

    if fqdn_template is not None:
        if not hostnames:
            hostnames = valid_hostnames(fqdn_template.render(ingress))
        elif combine_fqdn_annotation and override is not None:
            hostnames = hostnames + valid_hostnames(fqdn_template.render(ingress))

    if not hostnames:
        logger.debug(f"No hostnames could be found for {resource_id}")
        return []

    ttl = decoder.ttl()
    alias = decoder.alias()
    provider_specific = decoder.provider_specific()
    set_identifier = decoder.set_identifier()

    endpoints: List[Endpoint] = []
    for hostname in hostnames:
        endpoints.extend(
            endpoints_for_hostname(
                hostname,
                groups,
                ttl=ttl,
                alias=alias,
                provider_specific=provider_specific,
                set_identifier=set_identifier,
                resource_id=resource_id,
            )
        )
    return merge_endpoints(endpoints)
