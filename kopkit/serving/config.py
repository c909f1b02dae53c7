"""Ingress settings of a serving installation and the ingress provider label."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

PROVIDER_LABEL = "networking.knative.dev/ingress-provider"


@dataclass
class IstioGatewayOverride:
    """Selector and servers that replace those of an Istio gateway when non-empty."""

    selector: dict[str, str] = field(default_factory=dict)
    servers: list[dict[str, Any]] = field(default_factory=list)


@dataclass
class IstioIngressConfiguration:
    """Whether Istio is enabled, and overrides for its two gateways."""

    enabled: bool = False
    knative_ingress_gateway: Optional[IstioGatewayOverride] = None
    knative_local_gateway: Optional[IstioGatewayOverride] = None


@dataclass
class KourierIngressConfiguration:
    """Whether Kourier is enabled, and the type of its gateway service."""

    enabled: bool = False
    service_type: str = ""


@dataclass
class ContourIngressConfiguration:
    """Whether Contour is enabled."""

    enabled: bool = False


@dataclass
class IngressConfigs:
    """The configuration of every supported ingress."""

    istio: IstioIngressConfiguration = field(default_factory=IstioIngressConfiguration)
    kourier: KourierIngressConfiguration = field(default_factory=KourierIngressConfiguration)
    contour: ContourIngressConfiguration = field(default_factory=ContourIngressConfiguration)


def labels_of(resource: dict[str, Any]) -> dict[str, str]:
    """Return the labels of a resource, empty when it has none."""
    return (resource.get("metadata") or {}).get("labels") or {}


def has_provider_label(resource: dict[str, Any]) -> bool:
    """Tell whether the resource carries the ingress provider label."""
    return PROVIDER_LABEL in labels_of(resource)