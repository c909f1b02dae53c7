"""Kubernetes resources held as plain dictionaries."""

from __future__ import annotations

from typing import Any


class NotFoundError(LookupError):
    """Raised when a resource looked up in a cluster does not exist."""

    def __init__(self, resource: str = "", name: str = "") -> None:
        self.resource = resource
        self.name = name
        super().__init__(f'{resource} "{name}" not found')


def namespaced_resource(api_version: str, kind: str, ns: str, name: str) -> dict[str, Any]:
    """Return a resource with the given apiVersion, kind, namespace and name.

    Empty namespace or name values are left out, as Kubernetes does.
    """
    resource: dict[str, Any] = {"apiVersion": api_version, "kind": kind}
    metadata: dict[str, Any] = {}
    if ns:
        metadata["namespace"] = ns
    if name:
        metadata["name"] = name
    if metadata:
        resource["metadata"] = metadata
    return resource


def cluster_scoped_resource(api_version: str, kind: str, name: str) -> dict[str, Any]:
    """Return a resource with the given apiVersion, kind and name and no namespace."""
    return namespaced_resource(api_version, kind, "", name)