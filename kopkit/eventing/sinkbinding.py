"""Setting the sink binding selection mode on the eventing webhook."""

from __future__ import annotations

from typing import Any, Callable

SINK_BINDING_SELECTION_MODE_ENV_VAR_KEY = "SINK_BINDING_SELECTION_MODE"
DEFAULT_SELECTION_MODE = "exclusion"
WEBHOOK_NAME = "eventing-webhook"

Transformer = Callable[[dict[str, Any]], None]


def sink_binding_selection_mode_transform(mode: str = "") -> Transformer:
    """Return a transformer setting the selection mode env var on every webhook container.

    An empty mode falls back to ``exclusion``.
    """
    value = mode or DEFAULT_SELECTION_MODE

    def _transform(resource: dict[str, Any]) -> None:
        metadata = resource.get("metadata") or {}
        if resource.get("kind") != "Deployment" or metadata.get("name") != WEBHOOK_NAME:
            return
        pod_spec = ((resource.get("spec") or {}).get("template") or {}).get("spec") or {}
        for container in pod_spec.get("containers") or []:
            envs = container.get("env")
            if not isinstance(envs, list):
                envs = container["env"] = []
            existing = next(
                (e for e in envs if e.get("name") == SINK_BINDING_SELECTION_MODE_ENV_VAR_KEY),
                None,
            )
            if existing is None:
                envs.append({"name": SINK_BINDING_SELECTION_MODE_ENV_VAR_KEY, "value": value})
            else:
                existing["value"] = value

    return _transform