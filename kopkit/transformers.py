"""Transformers that mutate resources, and applying them to a manifest."""

from __future__ import annotations

import copy
from typing import Any, Callable, Iterable, Optional

Transformer = Callable[[dict[str, Any]], None]

_CLUSTER_SCOPED_KINDS = frozenset(
    {
        "componentstatus",
        "namespace",
        "node",
        "persistentvolume",
        "mutatingwebhookconfiguration",
        "validatingwebhookconfiguration",
        "customresourcedefinition",
        "apiservice",
        "meshpolicy",
        "tokenreview",
        "selfsubjectaccessreview",
        "selfsubjectrulesreview",
        "subjectaccessreview",
        "certificatesigningrequest",
        "clusterrolebinding",
        "clusterrole",
        "priorityclass",
        "storageclass",
        "volumeattachment",
    }
)


def _is_cluster_scoped(kind: str) -> bool:
    return kind.lower() in _CLUSTER_SCOPED_KINDS


def _nested(obj: Any, *path: str) -> Any:
    for key in path:
        if not isinstance(obj, dict):
            return None
        obj = obj.get(key)
    return obj


def inject_namespace(namespace: str) -> Transformer:
    """Return a transformer that moves namespaced resources into ``namespace``.

    Binding subjects and webhook service references follow the namespace too.
    """

    def _update_service(obj: dict[str, Any], *path: str) -> None:
        service = _nested(obj, *path)
        if isinstance(service, dict) and isinstance(service.get("name"), str):
            service["namespace"] = namespace

    def _transform(resource: dict[str, Any]) -> None:
        kind = str(resource.get("kind", "")).lower()
        if kind == "namespace":
            return
        if kind in ("clusterrolebinding", "rolebinding"):
            for subject in resource.get("subjects") or []:
                if isinstance(subject, dict) and "namespace" in subject:
                    subject["namespace"] = namespace
        elif kind in ("validatingwebhookconfiguration", "mutatingwebhookconfiguration"):
            for hook in resource.get("webhooks") or []:
                _update_service(hook, "clientConfig", "service")
        elif kind == "apiservice":
            _update_service(resource, "spec", "service")
            return
        elif kind == "customresourcedefinition":
            _update_service(resource, "spec", "conversion", "webhookClientConfig", "service")
            return
        if _is_cluster_scoped(kind):
            return
        if namespace:
            resource.setdefault("metadata", {})["namespace"] = namespace
        elif isinstance(resource.get("metadata"), dict):
            resource["metadata"].pop("namespace", None)

    return _transform


def inject_owner(owner: dict[str, Any]) -> Transformer:
    """Return a transformer making ``owner`` the controller of namespaced resources."""
    metadata = owner.get("metadata") or {}
    reference = {
        "apiVersion": owner.get("apiVersion", ""),
        "kind": owner.get("kind", ""),
        "name": metadata.get("name", ""),
        "uid": metadata.get("uid", ""),
        "controller": True,
        "blockOwnerDeletion": True,
    }

    def _transform(resource: dict[str, Any]) -> None:
        if not _is_cluster_scoped(str(resource.get("kind", ""))):
            resource.setdefault("metadata", {})["ownerReferences"] = [dict(reference)]

    return _transform


def transform(
    resources: Iterable[dict[str, Any]], *transformers: Optional[Transformer]
) -> list[dict[str, Any]]:
    """Return copies of the resources with every transformer applied in order.

    ``None`` transformers are skipped; the input is never modified. An
    exception from a transformer propagates.
    """
    result = [copy.deepcopy(resource) for resource in resources]
    active = [t for t in transformers if t is not None]
    for resource in result:
        for transformer in active:
            transformer(resource)
    return result