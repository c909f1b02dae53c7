"""Choosing the resources and transformers of the enabled ingresses."""

from __future__ import annotations

from typing import Any, Callable, Optional

from kopkit.serving.config import PROVIDER_LABEL, IngressConfigs, labels_of
from kopkit.serving.istio import istio_transformers
from kopkit.serving.kourier import kourier_transformers

Predicate = Callable[[dict[str, Any]], bool]
Transformer = Callable[[dict[str, Any]], None]


def ingress_filter(name: str) -> Predicate:
    """Return a predicate keeping unlabelled resources and those of provider ``name``."""

    def _predicate(resource: dict[str, Any]) -> bool:
        labels = labels_of(resource)
        if PROVIDER_LABEL not in labels:
            return True
        return labels[PROVIDER_LABEL] == name

    return _predicate


def none_filter(resource: dict[str, Any]) -> bool:
    """Drop every ingress resource but keep everything else."""
    return PROVIDER_LABEL not in labels_of(resource)


_istio_filter = ingress_filter("istio")
_kourier_filter = ingress_filter("kourier")
_contour_filter = ingress_filter("contour")


def filters(ingress: Optional[IngressConfigs]) -> Predicate:
    """Return a predicate removing the resources of disabled ingresses.

    Without any ingress configuration, Istio is the ingress.
    """
    if ingress is None:
        return _istio_filter
    enabled = []
    if ingress.istio.enabled:
        enabled.append(_istio_filter)
    if ingress.kourier.enabled:
        enabled.append(_kourier_filter)
    if ingress.contour.enabled:
        enabled.append(_contour_filter)
    if not enabled:
        return none_filter

    def _any(resource: dict[str, Any]) -> bool:
        return any(predicate(resource) for predicate in enabled)

    return _any


def contour_transformers(ingress: Optional[IngressConfigs]) -> list[Transformer]:
    """Contour needs no transformers."""
    return []


def transformers(ingress: Optional[IngressConfigs]) -> list[Transformer]:
    """Return the transformers of every enabled ingress.

    Without any ingress configuration, Istio's transformers are returned.
    """
    if ingress is None:
        return istio_transformers(ingress)
    result: list[Transformer] = []
    if ingress.istio.enabled:
        result.extend(istio_transformers(ingress))
    if ingress.kourier.enabled:
        result.extend(kourier_transformers(ingress))
    if ingress.contour.enabled:
        result.extend(contour_transformers(ingress))
    return result