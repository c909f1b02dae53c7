"""Keeping the rules the cluster fills in for aggregated ClusterRoles."""

from __future__ import annotations

import copy
from typing import Any, Callable, Protocol

from kopkit.unstructured import NotFoundError

Transformer = Callable[[dict[str, Any]], None]


class ResourceGetter(Protocol):
    """Anything that fetches the live copy of a resource, raising NotFoundError."""

    def get(self, resource: dict[str, Any]) -> dict[str, Any]:
        ...


def aggregation_rule_transform(client: ResourceGetter) -> Transformer:
    """Return a transformer copying live rules into aggregated ClusterRoles.

    The controller manager fills in the rules of such roles, so the manifest's
    own rules would always cause a needless update. A role missing from the
    cluster is left alone; other client errors propagate, and live rules that
    are not a list raise ``ValueError``.
    """

    def _transform(resource: dict[str, Any]) -> None:
        if resource.get("kind") != "ClusterRole" or resource.get("aggregationRule") is None:
            return
        try:
            current = client.get(resource)
        except NotFoundError:
            return
        if "rules" not in current:
            return
        rules = current["rules"]
        if not isinstance(rules, list):
            raise ValueError(f"rules accessor error: {rules!r} is of the type {type(rules).__name__}, expected a list")
        resource["rules"] = copy.deepcopy(rules)

    return _transform