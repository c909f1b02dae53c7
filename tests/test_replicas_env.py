import copy

import pytest
import yaml

from kopkit.eventing.replicas_env import replicas_env_vars_transform
from kopkit.unstructured import NotFoundError

IMAGE = "gcr.io/knative-releases/knative.dev/eventing/cmd/mtping@sha256:d6b4bd0d75a67c486f36eb34534178154db81b2ee85c0b18d7ca5269b36df037"


def env(name, value=None, api_version=None):
    if api_version is not None:
        return {
            "name": name,
            "valueFrom": {"fieldRef": {"apiVersion": api_version, "fieldPath": "metadata.namespace"}},
        }
    return {"name": name, "value": value}


def container(name, envs):
    return {"name": name, "image": IMAGE, "env": envs}


def deployment(replicas, containers):
    return {
        "apiVersion": "apps/v1",
        "kind": "Deployment",
        "metadata": {"name": "pingsource-mt-adapter", "namespace": "knative-eventing"},
        "spec": {"replicas": replicas, "template": {"spec": {"containers": containers}}},
    }


class FakeClient:
    def __init__(self, existing):
        self.existing = existing

    def get(self, resource):
        if self.existing is None:
            raise NotFoundError("", "")
        return copy.deepcopy(self.existing)


CASES = [
    (
        "same containers, different env vars and replicas",
        deployment(0, [container("dispatcher", [
            env("SYSTEM_NAMESPACE", api_version="v1"), env("K_METRICS_CONFIG", ""),
            env("K_LOGGING_CONFIG", ""), env("K_LOGGING_CONFIG_1", "overwrite")])]),
        deployment(1, [container("dispatcher", [
            env("SYSTEM_NAMESPACE", api_version="v1"), env("K_METRICS_CONFIG", "old"),
            env("K_LOGGING_CONFIG", "old"), env("K_LOGGING_CONFIG_1", "old")])]),
        deployment(1, [container("dispatcher", [
            env("SYSTEM_NAMESPACE", api_version="v1"), env("K_METRICS_CONFIG", "old"),
            env("K_LOGGING_CONFIG", "old"), env("K_LOGGING_CONFIG_1", "overwrite")])]),
    ),
    (
        "existing has less containers",
        deployment(0, [
            container("dispatcher", [env("SYSTEM_NAMESPACE", api_version="v1"),
                                     env("K_METRICS_CONFIG", ""), env("K_LOGGING_CONFIG", "")]),
            container("dispatcher1", [env("SYSTEM_NAMESPACE", api_version="v1"),
                                      env("K_METRICS_CONFIG", ""), env("K_LOGGING_CONFIG", "")]),
        ]),
        deployment(1, [
            container("dispatcher", [env("SYSTEM_NAMESPACE", api_version="v2"),
                                     env("K_METRICS_CONFIG", "test1"), env("K_LOGGING_CONFIG", "test2")]),
        ]),
        deployment(1, [
            container("dispatcher", [env("SYSTEM_NAMESPACE", api_version="v2"),
                                     env("K_METRICS_CONFIG", "test1"), env("K_LOGGING_CONFIG", "test2")]),
            container("dispatcher1", [env("SYSTEM_NAMESPACE", api_version="v1"),
                                      env("K_METRICS_CONFIG", ""), env("K_LOGGING_CONFIG", "")]),
        ]),
    ),
    (
        "existing has more containers",
        deployment(0, [
            container("dispatcher", [env("SYSTEM_NAMESPACE", api_version="v1"),
                                     env("K_METRICS_CONFIG", ""), env("K_LOGGING_CONFIG", "")]),
        ]),
        deployment(1, [
            container("dispatcher1", [env("SYSTEM_NAMESPACE", api_version="v2"),
                                      env("K_METRICS_CONFIG", "test1"), env("K_LOGGING_CONFIG", "test2")]),
            container("dispatcher", [env("SYSTEM_NAMESPACE", api_version="v2"),
                                     env("K_METRICS_CONFIG", "test1"), env("K_LOGGING_CONFIG", "test2")]),
        ]),
        deployment(1, [
            container("dispatcher", [env("SYSTEM_NAMESPACE", api_version="v2"),
                                     env("K_METRICS_CONFIG", "test1"), env("K_LOGGING_CONFIG", "test2")]),
        ]),
    ),
    (
        "same containers with less env vars",
        deployment(0, [container("dispatcher", [
            env("SYSTEM_NAMESPACE", api_version="v1"), env("K_METRICS_CONFIG", ""),
            env("K_LOGGING_CONFIG", "new-env-var")])]),
        deployment(1, [container("dispatcher", [
            env("SYSTEM_NAMESPACE", api_version="v1"), env("K_METRICS_CONFIG", "test1")])]),
        deployment(1, [container("dispatcher", [
            env("SYSTEM_NAMESPACE", api_version="v1"), env("K_METRICS_CONFIG", "test1"),
            env("K_LOGGING_CONFIG", "new-env-var")])]),
    ),
    (
        "same containers with more env vars",
        deployment(0, [container("dispatcher", [
            env("SYSTEM_NAMESPACE", api_version="v1"), env("K_METRICS_CONFIG", "")])]),
        deployment(1, [container("dispatcher", [
            env("SYSTEM_NAMESPACE", api_version="v1"), env("K_METRICS_CONFIG", "test1"),
            env("K_LOGGING_CONFIG", "existing-env-var")])]),
        deployment(1, [container("dispatcher", [
            env("SYSTEM_NAMESPACE", api_version="v1"), env("K_METRICS_CONFIG", "test1"),
            env("K_LOGGING_CONFIG", "existing-env-var")])]),
    ),
    (
        "needs to delete env var",
        deployment(0, [container("dispatcher", [
            env("SYSTEM_NAMESPACE", api_version="v1"), env("K_METRICS_CONFIG", ""),
            env("K_LOGGING_CONFIG", "")])]),
        deployment(1, [container("dispatcher", [
            env("SYSTEM_NAMESPACE", api_version="v1"), env("K_METRICS_CONFIG", "old"),
            env("K_LOGGING_CONFIG", "old"), env("K_LOGGING_CONFIG_1", "old")])]),
        deployment(1, [container("dispatcher", [
            env("SYSTEM_NAMESPACE", api_version="v1"), env("K_METRICS_CONFIG", "old"),
            env("K_LOGGING_CONFIG", "old")])]),
    ),
]


@pytest.mark.parametrize("name, given, existing, expected", CASES, ids=[c[0] for c in CASES])
def test_pingsource_mt_adapter_transform(name, given, existing, expected):
    replicas_env_vars_transform(FakeClient(existing))(given)
    assert given == expected


def test_yaml_fixture_round_trip():
    text = """
apiVersion: apps/v1
kind: Deployment
metadata:
  name: pingsource-mt-adapter
spec:
  replicas: 0
  template:
    spec:
      containers:
        - name: dispatcher
          env:
            - name: K_SINK_TIMEOUT
              value: ''
            - name: OTHER
              value: 'new'
"""
    given = yaml.safe_load(text)
    existing = yaml.safe_load(text.replace("replicas: 0", "replicas: 3").replace("value: ''", "value: '30'"))
    replicas_env_vars_transform(FakeClient(existing))(given)
    assert given["spec"]["replicas"] == 3
    assert given["spec"]["template"]["spec"]["containers"][0]["env"] == [
        {"name": "K_SINK_TIMEOUT", "value": "30"},
        {"name": "OTHER", "value": "new"},
    ]


def test_not_found_leaves_resource_unchanged():
    given = deployment(0, [container("dispatcher", [env("K_METRICS_CONFIG", "")])])
    original = copy.deepcopy(given)
    replicas_env_vars_transform(FakeClient(None))(given)
    assert given == original


def test_other_deployments_are_not_looked_up():
    class ExplodingClient:
        def get(self, resource):
            raise AssertionError("should not be called")

    given = deployment(0, [])
    given["metadata"]["name"] = "something-else"
    original = copy.deepcopy(given)
    replicas_env_vars_transform(ExplodingClient())(given)
    assert given == original


def test_client_errors_propagate():
    class FailingClient:
        def get(self, resource):
            raise RuntimeError("boom")

    with pytest.raises(RuntimeError, match="boom"):
        replicas_env_vars_transform(FailingClient())(deployment(0, []))


def test_missing_replicas_in_cluster_removes_replicas():
    given = deployment(2, [])
    existing = deployment(1, [])
    del existing["spec"]["replicas"]
    replicas_env_vars_transform(FakeClient(existing))(given)
    assert "replicas" not in given["spec"]