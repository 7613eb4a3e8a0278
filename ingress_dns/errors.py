"""
Exceptions raised by Ingress-DNS.

Only configuration problems and upstream listing failures surface as
exceptions. Malformed data on a single resource never does.
"""


class IngressDNSError(Exception):
    """Base class for all Ingress-DNS errors."""


class ConfigurationError(IngressDNSError):
    """The source configuration is invalid or cannot be used."""


class SelectorParseError(ConfigurationError):
    """A label selector or annotation filter expression could not be parsed."""


class SourceError(IngressDNSError):
    """Listing resources from the cluster failed."""
