import pytest

from kopkit.serving.config import PROVIDER_LABEL, IngressConfigs, KourierIngressConfiguration
from kopkit.serving.kourier import (
    KOURIER_GATEWAY_NS_ENV_VAR_KEY,
    configure_gw_service_type,
    kourier_transformers,
    replace_gw_namespace,
)
from kopkit.transformers import transform

SERVING_NAMESPACE = "knative-serving"


def _manifest():
    labels = {PROVIDER_LABEL: "kourier"}
    return [
        {
            "apiVersion": "apps/v1",
            "kind": "Deployment",
            "metadata": {"name": "net-kourier-controller", "namespace": SERVING_NAMESPACE, "labels": dict(labels)},
            "spec": {
                "template": {
                    "spec": {
                        "containers": [
                            {
                                "name": "controller",
                                "env": [
                                    {"name": "CERTS_SECRET_NAMESPACE", "value": ""},
                                    {"name": KOURIER_GATEWAY_NS_ENV_VAR_KEY, "value": "kourier-system"},
                                ],
                            }
                        ]
                    }
                }
            },
        },
        {
            "apiVersion": "v1",
            "kind": "Service",
            "metadata": {"name": "kourier", "namespace": "kourier-system", "labels": dict(labels)},
            "spec": {"type": "LoadBalancer", "selector": {"app": "3scale-kourier-gateway"}},
        },
    ]


def _remove_labels(resource):
    resource["metadata"]["labels"] = {}


def _controller_namespace_env(manifest):
    for resource in manifest:
        if resource["kind"] == "Deployment":
            envs = resource["spec"]["template"]["spec"]["containers"][0]["env"]
            return next(e.get("value", "") for e in envs if e["name"] == KOURIER_GATEWAY_NS_ENV_VAR_KEY)
    raise AssertionError("no deployment")


def _service_type(manifest):
    return next(r["spec"]["type"] for r in manifest if r["kind"] == "Service")


@pytest.mark.parametrize(
    "service_type, drop_label, exp_namespace, exp_service_type",
    [
        ("ClusterIP", False, SERVING_NAMESPACE, "ClusterIP"),
        ("", False, SERVING_NAMESPACE, "LoadBalancer"),
        ("ClusterIP", True, "kourier-system", "LoadBalancer"),
    ],
    ids=[
        "Replaces Kourier Gateway Namespace and ServiceType",
        "Use Kourier default service type",
        "Do not transform without the ingress provier label",
    ],
)
def test_transform_kourier_manifest(service_type, drop_label, exp_namespace, exp_service_type):
    manifest = _manifest()
    if drop_label:
        manifest = transform(manifest, _remove_labels)
    manifest = transform(manifest, replace_gw_namespace())
    manifest = transform(manifest, configure_gw_service_type(service_type))
    assert _controller_namespace_env(manifest) == exp_namespace
    assert _service_type(manifest) == exp_service_type


@pytest.mark.parametrize(
    "service_type, message",
    [
        ("ExternalName", 'unsupported service type "ExternalName"'),
        ("Foo", 'unknown service type "Foo"'),
    ],
)
def test_bad_service_type(service_type, message):
    manifest = transform(_manifest(), replace_gw_namespace())
    assert _controller_namespace_env(manifest) == SERVING_NAMESPACE
    with pytest.raises(ValueError) as info:
        transform(manifest, configure_gw_service_type(service_type))
    assert str(info.value) == message


def test_node_port_is_supported():
    manifest = transform(_manifest(), configure_gw_service_type("NodePort"))
    assert _service_type(manifest) == "NodePort"


def test_bad_type_ignored_for_other_services():
    service = _manifest()[1]
    service["metadata"]["name"] = "other"
    configure_gw_service_type("Foo")(service)
    assert service["spec"]["type"] == "LoadBalancer"


def test_kourier_transformers_apply_service_type():
    ingress = IngressConfigs(kourier=KourierIngressConfiguration(enabled=True, service_type="ClusterIP"))
    transformers = kourier_transformers(ingress)
    assert len(transformers) == 2
    manifest = transform(_manifest(), *transformers)
    assert _service_type(manifest) == "ClusterIP"
    assert _controller_namespace_env(manifest) == SERVING_NAMESPACE