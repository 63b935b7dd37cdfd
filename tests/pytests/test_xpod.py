#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

from os import path

from jsonschema import ValidationError
from pytest import raises

from k8s_ecstask.common.files import load_xpod
from k8s_ecstask.ecs.task_definition import PodConverter
from k8s_ecstask.k8s.xpod import XPodDocument, xpod_schema

HERE = path.abspath(path.dirname(__file__))
USE_CASES = f"{HERE}/../../use-cases/pods"


def test_schema_is_packaged():
    schema = xpod_schema()
    assert schema["title"] == "XPod"
    assert schema["required"] == ["family", "containers"]


def test_xpod_document():
    document = load_xpod(f"{USE_CASES}/xpod.yaml")
    assert document.ecs_config.family == "my-app"
    assert document.ecs_config.cpu == "512"
    assert document.ecs_config.tags == {"team": "platform", "env": "prod"}
    assert document.pod.name == ""
    assert [container["name"] for container in document.pod.containers] == ["app"]
    assert "family" not in document.pod.spec
    assert "tags" not in document.pod.spec


def test_xpod_conversion():
    document = load_xpod(f"{USE_CASES}/xpod.yaml")
    task_definition = PodConverter(pod_native=False).convert_pod(
        document.pod, document.ecs_config
    )
    assert task_definition.Family == "my-app"
    assert task_definition.TaskRoleArn == "arn:aws:iam::123456789012:role/my-app-task"
    assert (
        task_definition.ExecutionRoleArn
        == "arn:aws:iam::123456789012:role/my-app-execution"
    )
    assert task_definition.Cpu == "512"
    assert task_definition.Memory == "1024"
    container = task_definition.ContainerDefinitions[0]
    assert container.Secrets[0].ValueFrom == "/xpod/secrets/my-secret/password"
    assert container.Cpu == 500
    assert container.Memory == 512


def test_integer_task_resources():
    document = XPodDocument(
        {
            "family": "numbers",
            "cpu": 256,
            "memory": 512,
            "containers": [{"name": "app", "image": "busybox"}],
        }
    )
    assert document.ecs_config.cpu == "256"
    assert document.ecs_config.memory == "512"


def test_invalid_xpod():
    with raises(ValidationError):
        load_xpod(f"{USE_CASES}/xpod_invalid.yaml")
    with raises(ValidationError):
        XPodDocument({"containers": [{"name": "app"}]})
    with raises(ValidationError):
        XPodDocument(
            {
                "family": "app",
                "requiresCompatibilities": ["LAMBDA"],
                "containers": [{"name": "app"}],
            }
        )
