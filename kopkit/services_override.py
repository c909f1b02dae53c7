"""Overrides of labels, annotations and selectors on Services."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Optional


@dataclass
class ServiceOverride:
    """Labels, annotations and selector entries to set on the Service called ``name``."""

    name: str
    labels: dict[str, str] = field(default_factory=dict)
    annotations: dict[str, str] = field(default_factory=dict)
    selector: dict[str, str] = field(default_factory=dict)


def _merge(holder: dict[str, Any], key: str, values: dict[str, str]) -> None:
    merged = {**(holder.get(key) or {}), **(values or {})}
    if merged:
        holder[key] = merged
    else:
        holder.pop(key, None)


def services_transform(
    overrides: Optional[Iterable[ServiceOverride]],
) -> Optional[Callable[[dict[str, Any]], None]]:
    """Return a transformer applying the overrides, or None when there are none."""
    if overrides is None:
        return None
    overrides = list(overrides)

    def _transform(resource: dict[str, Any]) -> None:
        for override in overrides:
            metadata = resource.get("metadata") or {}
            if resource.get("kind") != "Service" or metadata.get("name") != override.name:
                continue
            metadata = resource.setdefault("metadata", {})
            _merge(metadata, "labels", override.labels)
            _merge(metadata, "annotations", override.annotations)
            spec = resource.get("spec")
            if not isinstance(spec, dict):
                spec = resource["spec"] = {}
            _merge(spec, "selector", override.selector)
            # A zero creation timestamp only causes superfluous updates.
            metadata.pop("creationTimestamp", None)

    return _transform