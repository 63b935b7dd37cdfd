#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Tests of the task definition rendering and registration
"""

import json
from os import path

import boto3
import placebo
import yaml
from pytest import fixture, raises

try:
    from yaml import CSafeLoader as Loader
except ImportError:
    from yaml import SafeLoader as Loader

from k8s_ecstask.ecs.ecs_config import ECSConfig
from k8s_ecstask.ecs.options import ConversionOptions
from k8s_ecstask.ecs.outputs import (
    register_task_definition,
    render_task_definition,
    task_definition_to_api,
    to_api_keys,
)
from k8s_ecstask.ecs.task_definition import PodConverter

HERE = path.abspath(path.dirname(__file__))


@fixture()
def task_definition():
    with open(f"{HERE}/../../use-cases/pods/simple.yaml") as pod_fd:
        pod = yaml.load(pod_fd.read(), Loader=Loader)
    converter = PodConverter(
        ConversionOptions(
            default_log_options={"awslogs-group": "/ecs/web", "awslogs-region": "eu-west-1"}
        )
    )
    return converter.convert_pod(
        pod, ECSConfig(family="web", tags={"team": "platform"})
    )


def test_to_api_keys():
    assert to_api_keys(
        {"LogConfiguration": {"LogDriver": "awslogs", "Options": {"awslogs-group": "/a"}}}
    ) == {"logConfiguration": {"logDriver": "awslogs", "options": {"awslogs-group": "/a"}}}
    assert to_api_keys([{"Key": "a", "Value": "b"}]) == [{"key": "a", "value": "b"}]


def test_api_request(task_definition):
    request = task_definition_to_api(task_definition)
    assert request["family"] == "web"
    assert request["networkMode"] == "awsvpc"
    assert request["requiresCompatibilities"] == ["FARGATE"]
    assert request["tags"] == [{"key": "team", "value": "platform"}]
    container = request["containerDefinitions"][0]
    assert container["name"] == "nginx"
    assert container["essential"] is True
    assert container["portMappings"][0] == {"containerPort": 80, "protocol": "tcp"}
    assert container["logConfiguration"] == {
        "logDriver": "awslogs",
        "options": {"awslogs-group": "/ecs/web", "awslogs-region": "eu-west-1"},
    }
    assert "taskRoleArn" not in request
    assert "volumes" not in request


def test_render_json_and_yaml(task_definition):
    from_json = json.loads(render_task_definition(task_definition, "json"))
    from_yaml = yaml.load(render_task_definition(task_definition, "yaml"), Loader=Loader)
    assert from_json == from_yaml == task_definition_to_api(task_definition)


def test_render_cfn(task_definition):
    template = json.loads(render_task_definition(task_definition, "cfn"))
    resource = template["Resources"]["EcsTaskDefinition"]
    assert resource["Type"] == "AWS::ECS::TaskDefinition"
    assert resource["Properties"]["Family"] == "web"
    assert resource["Properties"]["ContainerDefinitions"][0]["Cpu"] == 500
    assert template["Description"] == "ECS Task Definition web"


def test_render_invalid_format(task_definition):
    with raises(ValueError):
        render_task_definition(task_definition, "toml")


def test_register_task_definition(task_definition):
    session = boto3.session.Session(region_name="eu-west-1")
    pill = placebo.attach(session, data_path=f"{HERE}/ecs_register")
    pill.playback()
    registered = register_task_definition(task_definition, session)
    assert registered["family"] == "web"
    assert registered["revision"] == 3
    assert (
        registered["taskDefinitionArn"]
        == "arn:aws:ecs:eu-west-1:123456789012:task-definition/web:3"
    )
