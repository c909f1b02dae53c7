"""Transformers for the Kourier ingress."""

from __future__ import annotations

from typing import Any, Callable, Optional

from kopkit.serving.config import IngressConfigs, has_provider_label

KOURIER_GATEWAY_NS_ENV_VAR_KEY = "KOURIER_GATEWAY_NAMESPACE"
KOURIER_GATEWAY_SERVICE_NAME = "kourier"
KOURIER_CONTROLLER_DEPLOYMENT_NAMES = frozenset({"3scale-kourier-control", "net-kourier-controller"})

_SUPPORTED_SERVICE_TYPES = frozenset({"ClusterIP", "NodePort", "LoadBalancer"})
_UNSUPPORTED_SERVICE_TYPES = frozenset({"ExternalName"})

Transformer = Callable[[dict[str, Any]], None]


def kourier_transformers(ingress: Optional[IngressConfigs]) -> list[Transformer]:
    """Return the transformers applied when Kourier is the ingress."""
    service_type = ingress.kourier.service_type if ingress else ""
    return [replace_gw_namespace(), configure_gw_service_type(service_type)]


def replace_gw_namespace() -> Transformer:
    """Return a transformer pointing the gateway namespace env var at the controller's namespace."""

    def _transform(resource: dict[str, Any]) -> None:
        metadata = resource.get("metadata") or {}
        if (
            resource.get("kind") != "Deployment"
            or metadata.get("name") not in KOURIER_CONTROLLER_DEPLOYMENT_NAMES
            or not has_provider_label(resource)
        ):
            return
        namespace = metadata.get("namespace") or ""
        pod_spec = ((resource.get("spec") or {}).get("template") or {}).get("spec") or {}
        for container in pod_spec.get("containers") or []:
            for env in container.get("env") or []:
                if env.get("name") != KOURIER_GATEWAY_NS_ENV_VAR_KEY:
                    continue
                if namespace:
                    env["value"] = namespace
                else:
                    env.pop("value", None)

    return _transform


def configure_gw_service_type(service_type: str) -> Transformer:
    """Return a transformer setting the type of the Kourier gateway service.

    An empty type leaves the service alone. ``ExternalName`` and unknown
    types raise ``ValueError``.
    """

    def _transform(resource: dict[str, Any]) -> None:
        metadata = resource.get("metadata") or {}
        if (
            resource.get("kind") != "Service"
            or metadata.get("name") != KOURIER_GATEWAY_SERVICE_NAME
            or not has_provider_label(resource)
        ):
            return
        if not service_type:
            return
        if service_type in _UNSUPPORTED_SERVICE_TYPES:
            raise ValueError(f'unsupported service type "{service_type}"')
        if service_type not in _SUPPORTED_SERVICE_TYPES:
            raise ValueError(f'unknown service type "{service_type}"')
        spec = resource.get("spec")
        if not isinstance(spec, dict):
            spec = resource["spec"] = {}
        spec["type"] = service_type

    return _transform