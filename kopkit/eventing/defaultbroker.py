"""Setting the cluster default broker class in the broker defaults ConfigMap."""

from __future__ import annotations

from typing import Any, Callable, Mapping, Optional

import yaml

DEFAULTS_CONFIG_NAME = "config-br-defaults"
BROKER_DEFAULTS_KEY = "default-br-config"
MT_CHANNEL_BROKER_CLASS = "MTChannelBasedBroker"

_SPEC_CONFIG_KEYS = ("br-defaults", "config-br-defaults")
_DEFAULTS_FIELDS = ("namespaceDefaults", "clusterDefault")

Transformer = Callable[[dict[str, Any]], None]


def find_default_broker_class_defined(data: Optional[Mapping[str, str]]) -> bool:
    """Tell whether the broker defaults entry in ``data`` names a broker class."""
    value = (data or {}).get(BROKER_DEFAULTS_KEY)
    return value is not None and "brokerClass:" in value


def _parse_defaults(text: str) -> dict[str, Any]:
    try:
        parsed = yaml.safe_load(text) if text else None
    except yaml.YAMLError as exc:
        raise ValueError(f"cannot parse broker defaults: {exc}") from exc
    if parsed is None:
        parsed = {}
    if not isinstance(parsed, dict):
        raise ValueError("broker defaults must be a mapping")
    defaults = {key: parsed[key] for key in _DEFAULTS_FIELDS if parsed.get(key)}
    cluster = defaults.get("clusterDefault", {})
    if not isinstance(cluster, dict):
        raise ValueError("clusterDefault in broker defaults must be a mapping")
    namespaces = defaults.get("namespaceDefaults", {})
    if not isinstance(namespaces, dict):
        raise ValueError("namespaceDefaults in broker defaults must be a mapping")
    return defaults


def default_broker_config_map_transform(
    default_broker_class: str = "",
    config: Optional[Mapping[str, Mapping[str, str]]] = None,
) -> Transformer:
    """Return a transformer setting the cluster default broker class.

    Nothing changes when the spec's own config already names a broker class
    under ``br-defaults`` or ``config-br-defaults``. An empty class falls back
    to the multi-tenant channel based broker. Malformed defaults raise
    ``ValueError``.
    """
    config = config or {}
    broker_class = default_broker_class or MT_CHANNEL_BROKER_CLASS

    def _transform(resource: dict[str, Any]) -> None:
        metadata = resource.get("metadata") or {}
        if resource.get("kind") != "ConfigMap" or metadata.get("name") != DEFAULTS_CONFIG_NAME:
            return
        if any(
            key in config and find_default_broker_class_defined(config[key])
            for key in _SPEC_CONFIG_KEYS
        ):
            return
        data = resource.get("data")
        if not isinstance(data, dict):
            data = resource["data"] = {}
        defaults = _parse_defaults(data.get(BROKER_DEFAULTS_KEY, ""))
        defaults.setdefault("clusterDefault", {})["brokerClass"] = broker_class
        data[BROKER_DEFAULTS_KEY] = yaml.safe_dump(defaults, default_flow_style=False)

    return _transform