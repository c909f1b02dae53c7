"""Pinning the namespace of the knative-local-gateway service."""

from __future__ import annotations

from typing import Any, Callable, Mapping, Optional

LOCAL_GATEWAY_SERVICE_NAME = "knative-local-gateway"
DEFAULT_ISTIO_NAMESPACE = "istio-system"

Transformer = Callable[[dict[str, Any]], None]


def update_namespace(resource: dict[str, Any], data: Mapping[str, str], ns: str) -> None:
    """Set the resource's namespace from the local gateway entry of Istio config data.

    The entry holds ``knative-local-gateway.<istio-namespace>.svc.cluster.local``;
    a value with fewer than two dot-separated parts is ignored.
    """
    key = f"local-gateway.{ns}.knative-local-gateway"
    value = (data or {}).get(key)
    if value is None:
        return
    fields = value.split(".")
    if len(fields) >= 2:
        resource.setdefault("metadata", {})["namespace"] = fields[1]


def ingress_service_transform(
    namespace: str, config: Optional[Mapping[str, Mapping[str, str]]] = None
) -> Transformer:
    """Return a transformer moving knative-local-gateway into the Istio namespace.

    The owner references are dropped since owner and service live in different
    namespaces. The namespace comes from the ``istio`` and then the
    ``config-istio`` entries of ``config``, defaulting to ``istio-system``.
    """
    config = config or {}

    def _transform(resource: dict[str, Any]) -> None:
        metadata = resource.get("metadata") or {}
        if (
            resource.get("apiVersion") != "v1"
            or resource.get("kind") != "Service"
            or metadata.get("name") != LOCAL_GATEWAY_SERVICE_NAME
        ):
            return
        metadata = resource.setdefault("metadata", {})
        metadata["namespace"] = DEFAULT_ISTIO_NAMESPACE
        metadata.pop("ownerReferences", None)
        for key in ("istio", "config-istio"):
            if key in config:
                update_namespace(resource, config[key], namespace)

    return _transform