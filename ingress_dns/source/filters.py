"""
Admission filtering for Ingress-DNS.

Decides whether a resource takes part in DNS extraction at all. The gates are
evaluated in order: ingress class, annotation filter, label selector and
controller ownership. A resource failing any gate is skipped without error.
"""

import logging
from typing import Iterable, Optional

from ingress_dns.errors import ConfigurationError, SelectorParseError
from ingress_dns.models.models import Ingress
from ingress_dns.source.annotations import (
    DEFAULT_ANNOTATION_KEYS,
    AnnotationDecoder,
    AnnotationKeys,
)
from ingress_dns.source.selector import Selector, parse_selector, selector_from


def resolve_ingress_class(
    ingress: Ingress, keys: AnnotationKeys = DEFAULT_ANNOTATION_KEYS
) -> Optional[str]:
    """
    Resolve the effective class of an ingress.

    The explicit class name wins whenever it is non-empty; otherwise the
    legacy class annotation is used.

    Args:
        ingress: Resource to inspect
        keys: Annotation keys

    Returns:
        Optional[str]: Effective class, or None if the ingress has none
    """
    if ingress.class_name():
        return ingress.class_name()
    return AnnotationDecoder(ingress.annotations, ingress.resource_id, keys).ingress_class()


class AdmissionFilter:
    """
    Composes the admission gates applied to every listed resource.
    """

    def __init__(
        self,
        ingress_class_names: Optional[Iterable[str]] = None,
        annotation_filter: str = "",
        label_selector=None,
        keys: AnnotationKeys = DEFAULT_ANNOTATION_KEYS,
    ):
        """
        Initialize an AdmissionFilter.

        Args:
            ingress_class_names: Allowed ingress classes; empty allows all
            annotation_filter: Label selector expression over annotations
            label_selector: Selector, selector expression or label map
            keys: Annotation keys

        Raises:
            ConfigurationError: If both a class list and an annotation filter
                are given, or the label selector is invalid
        """
        self.ingress_class_names = [name for name in (ingress_class_names or []) if name]
        self.annotation_filter = annotation_filter or ""
        self.keys = keys
        self.logger = logging.getLogger("ingress-dns.source.filters")

        if self.ingress_class_names and self.annotation_filter:
            raise ConfigurationError(
                "ingress class names and annotation filter are mutually exclusive"
            )

        self.label_selector: Selector = selector_from(label_selector)

        # A bad annotation filter surfaces when endpoints are requested
        self.annotation_selector: Optional[Selector] = None
        self.annotation_filter_error: Optional[SelectorParseError] = None
        try:
            self.annotation_selector = parse_selector(self.annotation_filter)
        except SelectorParseError as e:
            self.annotation_filter_error = e

    def check(self) -> None:
        """
        Raise any configuration error that was deferred at construction.

        Raises:
            SelectorParseError: If the annotation filter could not be parsed
        """
        if self.annotation_filter_error is not None:
            raise self.annotation_filter_error

    def admits(self, ingress: Ingress) -> bool:
        """
        Decide whether a resource is processed.

        Args:
            ingress: Resource to check

        Returns:
            bool: True if every gate passes
        """
        if self.ingress_class_names:
            ingress_class = resolve_ingress_class(ingress, self.keys)
            if ingress_class not in self.ingress_class_names:
                self.logger.debug(
                    f"Skipping {ingress.resource_id}: class {ingress_class!r} "
                    f"not in {self.ingress_class_names}"
                )
                return False

        if self.annotation_selector is None:
            return False
        if not self.annotation_selector.matches(ingress.annotations):
            self.logger.debug(
                f"Skipping {ingress.resource_id}: annotations do not match "
                f"filter {self.annotation_filter!r}"
            )
            return False

        if not self.label_selector.matches(ingress.labels):
            self.logger.debug(f"Skipping {ingress.resource_id}: labels do not match")
            return False

        decoder = AnnotationDecoder(ingress.annotations, ingress.resource_id, self.keys)
        if not decoder.is_owned():
            self.logger.debug(
                f"Skipping {ingress.resource_id}: controller annotation "
                f"{ingress.annotations.get(self.keys.controller)!r} does not match "
                f"{self.keys.controller_value!r}"
            )
            return False

        return True
