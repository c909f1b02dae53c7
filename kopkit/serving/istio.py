"""Transformers for the Istio ingress."""

from __future__ import annotations

import copy
from typing import Any, Callable, Optional

from kopkit.serving.config import IngressConfigs, IstioGatewayOverride

GATEWAY_API_VERSION = "networking.istio.io/v1alpha3"
INGRESS_GATEWAY_NAME = "knative-ingress-gateway"
LOCAL_GATEWAY_NAMES = frozenset({"cluster-local-gateway", "knative-local-gateway"})

Transformer = Callable[[dict[str, Any]], None]


def istio_transformers(ingress: Optional[IngressConfigs]) -> list[Transformer]:
    """Return the transformers applied when Istio is the ingress."""
    return [gateway_transform(ingress)]


def _update_gateway(override: Optional[IstioGatewayOverride], resource: dict[str, Any]) -> None:
    if override is None:
        return
    if override.selector:
        spec = resource.get("spec")
        if not isinstance(spec, dict):
            spec = resource["spec"] = {}
        spec["selector"] = dict(override.selector)
    if override.servers:
        spec = resource.get("spec")
        if not isinstance(spec, dict):
            spec = resource["spec"] = {}
        spec["servers"] = copy.deepcopy(override.servers)


def gateway_transform(ingress: Optional[IngressConfigs]) -> Transformer:
    """Return a transformer applying the gateway overrides to the Istio gateways."""
    ingress_override = ingress.istio.knative_ingress_gateway if ingress else None
    local_override = ingress.istio.knative_local_gateway if ingress else None

    def _transform(resource: dict[str, Any]) -> None:
        if resource.get("apiVersion") != GATEWAY_API_VERSION or resource.get("kind") != "Gateway":
            return
        name = (resource.get("metadata") or {}).get("name")
        if name == INGRESS_GATEWAY_NAME:
            _update_gateway(ingress_override, resource)
        if name in LOCAL_GATEWAY_NAMES:
            _update_gateway(local_override, resource)

    return _transform