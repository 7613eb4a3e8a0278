"""
Annotation decoding for Ingress-DNS.

This module reads the well-known annotation keys of a resource and converts
them to typed values. Invalid values degrade to "not set" instead of failing
the resource.
"""

import enum
import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

from ingress_dns.models.models import ProviderSpecificProperty
from ingress_dns.utils.duration import parse_duration

ANNOTATION_PREFIX = "external-dns.alpha.kubernetes.io/"

CONTROLLER_ANNOTATION_VALUE = "dns-controller"

TTL_MINIMUM = 1
TTL_MAXIMUM = 2147483647

_TRUE_VALUES = {"true", "1", "yes", "on", "t", "y"}


@dataclass(frozen=True)
class AnnotationKeys:
    """
    The annotation keys recognized on a resource.
    """

    target: str = ANNOTATION_PREFIX + "target"
    ttl: str = ANNOTATION_PREFIX + "ttl"
    alias: str = ANNOTATION_PREFIX + "alias"
    hostname: str = ANNOTATION_PREFIX + "hostname"
    hostname_source: str = ANNOTATION_PREFIX + "ingress-hostname-source"
    controller: str = ANNOTATION_PREFIX + "controller"
    set_identifier: str = ANNOTATION_PREFIX + "set-identifier"
    cloudflare_proxied: str = ANNOTATION_PREFIX + "cloudflare-proxied"
    aws_prefix: str = ANNOTATION_PREFIX + "aws-"
    ingress_class: str = "kubernetes.io/ingress.class"
    controller_value: str = CONTROLLER_ANNOTATION_VALUE


DEFAULT_ANNOTATION_KEYS = AnnotationKeys()


class HostnameSource(enum.Enum):
    """Which hostname sources of an ingress are used."""

    BOTH = ""
    DEFINED_HOSTS_ONLY = "defined-hosts-only"
    ANNOTATION_ONLY = "annotation-only"

    @classmethod
    def parse(cls, value: Optional[str]) -> "HostnameSource":
        if value == cls.DEFINED_HOSTS_ONLY.value:
            return cls.DEFINED_HOSTS_ONLY
        if value == cls.ANNOTATION_ONLY.value:
            return cls.ANNOTATION_ONLY
        return cls.BOTH


def parse_ttl(value: str) -> int:
    """
    Parse a TTL annotation value into whole seconds.

    A duration string ('10s', '1m') is tried first, then a bare integer.

    Args:
        value: Annotation value

    Returns:
        int: TTL in seconds

    Raises:
        ValueError: If the value is neither a duration nor an integer
    """
    value = value.strip()
    try:
        return int(parse_duration(value))
    except ValueError as duration_error:
        try:
            return int(value)
        except ValueError:
            raise duration_error


def split_list(value: str) -> List[str]:
    """Split a comma separated annotation value, dropping empty items."""
    return [item.strip() for item in value.split(",") if item.strip()]


class AnnotationDecoder:
    """
    Typed access to the annotations of one resource.
    """

    def __init__(
        self,
        annotations: Dict[str, str],
        resource_id: str = "",
        keys: AnnotationKeys = DEFAULT_ANNOTATION_KEYS,
    ):
        """
        Initialize an AnnotationDecoder.

        Args:
            annotations: Annotation map of the resource
            resource_id: Resource identity, used in log messages
            keys: Annotation keys to read
        """
        self.annotations = annotations or {}
        self.resource_id = resource_id
        self.keys = keys
        self.logger = logging.getLogger("ingress-dns.source.annotations")

    def targets(self) -> Optional[List[str]]:
        """
        Targets from the target-override annotation.

        Returns:
            Optional[List[str]]: None if the annotation is absent, otherwise
            the listed targets. An empty list means the override is present
            but names no target, which suppresses all records.
        """
        value = self.annotations.get(self.keys.target)
        if value is None:
            return None
        targets = []
        for target in split_list(value):
            target = target.rstrip(".")
            if target:
                targets.append(target)
        return targets

    def ttl(self) -> Optional[int]:
        value = self.annotations.get(self.keys.ttl)
        if value is None:
            return None
        try:
            ttl = parse_ttl(value)
        except ValueError as e:
            self.logger.warning(
                f"{self.resource_id}: {value!r} is not a valid TTL value: {e}"
            )
            return None
        if ttl == 0:
            return None
        if ttl < TTL_MINIMUM or ttl > TTL_MAXIMUM:
            self.logger.warning(
                f"{self.resource_id}: TTL value {ttl} must be between "
                f"{TTL_MINIMUM} and {TTL_MAXIMUM}"
            )
            return None
        return ttl

    def hostnames(self) -> List[str]:
        value = self.annotations.get(self.keys.hostname)
        if value is None:
            return []
        return split_list(value)

    def hostname_source(self) -> HostnameSource:
        return HostnameSource.parse(self.annotations.get(self.keys.hostname_source))

    def alias(self) -> bool:
        value = self.annotations.get(self.keys.alias)
        if value is None:
            return False
        return value.strip().lower() in _TRUE_VALUES

    def is_owned(self) -> bool:
        """
        Whether this controller is responsible for the resource.

        A missing controller annotation means owned; any other value than the
        configured controller name means the resource belongs to someone else.
        """
        value = self.annotations.get(self.keys.controller)
        if value is None:
            return True
        return value == self.keys.controller_value

    def ingress_class(self) -> Optional[str]:
        return self.annotations.get(self.keys.ingress_class)

    def set_identifier(self) -> str:
        return self.annotations.get(self.keys.set_identifier, "")

    def provider_specific(self) -> List[ProviderSpecificProperty]:
        """
        Provider-specific properties declared through annotations.

        Returns:
            List[ProviderSpecificProperty]: Properties, ordered by annotation key
        """
        properties = []
        for key in sorted(self.annotations):
            value = self.annotations[key]
            if key == self.keys.cloudflare_proxied:
                properties.append(ProviderSpecificProperty(key, value))
            elif key.startswith(self.keys.aws_prefix):
                suffix = key[len(self.keys.aws_prefix) :]
                if suffix:
                    properties.append(ProviderSpecificProperty(f"aws/{suffix}", value))
        return properties
