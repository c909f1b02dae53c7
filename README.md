# kopkit

Building blocks for installing and reconciling Knative Serving and Knative
Eventing from plain Kubernetes manifests. Resources are ordinary Python
dictionaries (the same shape as parsed YAML), and every transformer is a
callable that edits one resource in place.

## Installation

    pip install kopkit

## What is inside

- `kopkit.unstructured`: `namespaced_resource` and `cluster_scoped_resource`
  build bare resource dictionaries (empty namespace or name are left out);
  `NotFoundError` is what a cluster client is expected to raise when an
  object does not exist.
- `kopkit.stages`: `Stages`, a list of reconcile steps. Each step takes a
  manifest (a list of resources) and the instance being reconciled and
  returns the next manifest; `execute` runs them in order and returns the
  final manifest, and an exception from a step stops the run. `no_op` is a
  step that returns the manifest unchanged.
- `kopkit.transformers`: `inject_namespace` moves namespaced resources (and
  binding subjects and webhook service references) into a namespace;
  `inject_owner` sets a controlling owner reference on namespaced resources;
  `transform` applies transformers to deep copies of a list of resources,
  skipping any that are `None`, and returns the copies.
- `kopkit.services_override`: `ServiceOverride` and `services_transform`
  merge labels, annotations and selector entries into the Services named by
  the overrides. `services_transform(None)` returns `None`.
- `kopkit.eventing.defaultbroker`: `default_broker_config_map_transform`
  sets the cluster default broker class in the `config-br-defaults`
  ConfigMap (falling back to `MTChannelBasedBroker`), unless the spec config
  already names one; `find_default_broker_class_defined` checks for that.
- `kopkit.eventing.sinkbinding`: `sink_binding_selection_mode_transform`
  sets `SINK_BINDING_SELECTION_MODE` on every container of
  `eventing-webhook` (default `exclusion`).
- `kopkit.eventing.replicas_env`: `replicas_env_vars_transform` keeps the
  live replica count and a fixed set of env vars of `pingsource-mt-adapter`,
  using any client object with a `get(resource)` method.
- `kopkit.eventing.sources`: `SourceConfigs`, `major_minor` and
  `source_path`, which builds the comma-joined directory paths of the
  enabled eventing sources under `KO_DATA_PATH` (or a given directory).
- `kopkit.serving.config`: `IngressConfigs`, `IstioIngressConfiguration`,
  `KourierIngressConfiguration`, `ContourIngressConfiguration`,
  `IstioGatewayOverride` and `has_provider_label`.
- `kopkit.serving.ingress`: `ingress_filter`, `none_filter` and `filters`
  keep or drop resources by their ingress provider label; `transformers`
  returns the transformers of the enabled ingresses (Istio when no ingress
  configuration is given); `contour_transformers` returns none.
- `kopkit.serving.istio`: `gateway_transform` and `istio_transformers`
  apply selector and server overrides to the Istio gateways.
- `kopkit.serving.kourier`: `replace_gw_namespace`,
  `configure_gw_service_type` (raises `ValueError` for `ExternalName` and
  unknown types) and `kourier_transformers`.
- `kopkit.serving.aggregated_rules`: `aggregation_rule_transform` copies the
  live rules of aggregated ClusterRoles into the manifest.
- `kopkit.serving.ingress_service`: `ingress_service_transform` and
  `update_namespace` move the `knative-local-gateway` Service into the Istio
  namespace and drop its owner references.

## Example

    from kopkit.transformers import inject_namespace, transform
    from kopkit.unstructured import namespaced_resource

    resources = [namespaced_resource("v1", "ConfigMap", "other", "config-x")]
    result = transform(resources, inject_namespace("knative-serving"))
    assert result[0]["metadata"]["namespace"] == "knative-serving"

Filtering out disabled ingress providers:

    from kopkit.serving.config import IngressConfigs, KourierIngressConfiguration
    from kopkit.serving.ingress import filters

    keep = filters(IngressConfigs(kourier=KourierIngressConfiguration(enabled=True)))
    enabled = [r for r in resources if keep(r)]

## What it does not do

kopkit only edits and selects resource dictionaries. It has no Kubernetes
client, does not read manifests from files or URLs, does not apply or delete
anything in a cluster, and has no controller loop or command-line program.
Callers load manifests themselves and pass in any client object that the
transformers needing live state (`replicas_env_vars_transform`,
`aggregation_rule_transform`) can call `get` on.

## Running the tests

    pip install -e ".[test]"
    pytest