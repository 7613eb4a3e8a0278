"""
FQDN templates for Ingress-DNS.

An FQDN template renders DNS names for resources that do not declare a host
of their own, e.g. '{{ name }}.example.com, {{ name }}.{{ namespace }}.example.org'.
"""

import logging
from typing import List, Optional

from jinja2 import Environment, StrictUndefined, TemplateError

from ingress_dns.errors import ConfigurationError
from ingress_dns.models.models import Ingress


class FQDNTemplate:
    """
    A compiled FQDN template.
    """

    def __init__(self, text: str):
        """
        Compile an FQDN template.

        Args:
            text: Template text; rendering yields a comma separated name list

        Raises:
            ConfigurationError: If the template cannot be compiled
        """
        self.text = text
        self.logger = logging.getLogger("ingress-dns.source.template")
        self.environment = Environment(undefined=StrictUndefined, autoescape=False)
        try:
            self.template = self.environment.from_string(text)
        except TemplateError as e:
            raise ConfigurationError(f"failed to parse FQDN template {text!r}: {e}") from e

    @classmethod
    def from_text(cls, text: Optional[str]) -> Optional["FQDNTemplate"]:
        """Compile a template, or return None when no template is configured."""
        if not text or not text.strip():
            return None
        return cls(text)

    def render(self, ingress: Ingress) -> List[str]:
        """
        Render the template for a resource.

        Args:
            ingress: Resource whose metadata is exposed to the template

        Returns:
            List[str]: Rendered names, trimmed, empty ones dropped

        Raises:
            ConfigurationError: If the template references unknown data
        """
        context = {
            "name": ingress.name,
            "namespace": ingress.namespace,
            "labels": ingress.labels,
            "annotations": ingress.annotations,
            "kind": ingress.kind,
        }
        try:
            rendered = self.template.render(**context)
        except TemplateError as e:
            raise ConfigurationError(
                f"failed to apply FQDN template {self.text!r} to {ingress.resource_id}: {e}"
            ) from e

        hostnames = [name.strip() for name in rendered.split(",") if name.strip()]
        self.logger.debug(f"Template rendered {hostnames} for {ingress.resource_id}")
        return hostnames
