"""Keeping replicas and selected env vars of the ping source adapter in the cluster."""

from __future__ import annotations

import copy
from typing import Any, Callable, Optional, Protocol

from kopkit.unstructured import NotFoundError

ADAPTER_NAME = "pingsource-mt-adapter"

PRESERVED_ENV_VARS = frozenset(
    {
        "SYSTEM_NAMESPACE",
        "K_METRICS_CONFIG",
        "K_LOGGING_CONFIG",
        "K_LEADER_ELECTION_CONFIG",
        "K_NO_SHUTDOWN_AFTER",
        "K_SINK_TIMEOUT",
    }
)

Transformer = Callable[[dict[str, Any]], None]


class ResourceGetter(Protocol):
    """Anything that fetches the live copy of a resource, raising NotFoundError."""

    def get(self, resource: dict[str, Any]) -> dict[str, Any]:
        ...


def _containers(deployment: dict[str, Any]) -> list[dict[str, Any]]:
    pod_spec = ((deployment.get("spec") or {}).get("template") or {}).get("spec") or {}
    return pod_spec.get("containers") or []


def _find_container(name: Any, containers: list[dict[str, Any]]) -> Optional[dict[str, Any]]:
    return next((c for c in containers if c.get("name") == name), None)


def replicas_env_vars_transform(client: ResourceGetter) -> Transformer:
    """Return a transformer keeping the live adapter's replicas and preserved env vars.

    When the adapter deployment is not in the cluster, nothing changes. Other
    errors from the client propagate.
    """

    def _transform(resource: dict[str, Any]) -> None:
        metadata = resource.get("metadata") or {}
        if resource.get("kind") != "Deployment" or metadata.get("name") != ADAPTER_NAME:
            return
        try:
            current = client.get(resource)
        except NotFoundError:
            return

        spec = resource.get("spec")
        if not isinstance(spec, dict):
            spec = resource["spec"] = {}
        replicas = (current.get("spec") or {}).get("replicas")
        if replicas is None:
            spec.pop("replicas", None)
        else:
            spec["replicas"] = replicas

        targets = _containers(resource)
        for current_container in _containers(current):
            target = _find_container(current_container.get("name"), targets)
            if target is None:
                continue
            preserved = [
                copy.deepcopy(env)
                for env in current_container.get("env") or []
                if env.get("name") in PRESERVED_ENV_VARS
            ]
            kept = {env.get("name") for env in preserved}
            merged = preserved + [
                env for env in target.get("env") or [] if env.get("name") not in kept
            ]
            if merged:
                target["env"] = merged
            else:
                target.pop("env", None)

    return _transform