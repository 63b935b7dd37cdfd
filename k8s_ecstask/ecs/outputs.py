#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Functions to render the task definition, either for the ECS API (RegisterTaskDefinition)
or as a CloudFormation template, and to register it in ECS.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from troposphere.ecs import TaskDefinition

import boto3
import yaml
from troposphere import Template

try:
    from yaml import CSafeDumper as Dumper
except ImportError:
    from yaml import SafeDumper as Dumper

from k8s_ecstask.common.logging import LOG

JSON_FORMAT = "json"
YAML_FORMAT = "yaml"
CFN_FORMAT = "cfn"
ALLOWED_FORMATS = [JSON_FORMAT, YAML_FORMAT, CFN_FORMAT]

VERBATIM_KEYS = ["Options", "DockerLabels", "DriverOpts", "Labels"]


def lower_first(key: str) -> str:
    return key[:1].lower() + key[1:]


def to_api_keys(value):
    """
    Recursively changes the CloudFormation PascalCase keys to the ECS API camelCase keys.
    Maps of user defined keys, such as the log driver options, are left untouched.
    """
    if isinstance(value, dict):
        return {
            lower_first(key): (
                dict(sub_value)
                if key in VERBATIM_KEYS and isinstance(sub_value, dict)
                else to_api_keys(sub_value)
            )
            for key, sub_value in value.items()
        }
    if isinstance(value, list):
        return [to_api_keys(item) for item in value]
    return value


def task_definition_to_api(task_definition: TaskDefinition) -> dict:
    """
    Task definition as the ECS RegisterTaskDefinition request

    :param troposphere.ecs.TaskDefinition task_definition:
    :rtype: dict
    """
    return to_api_keys(task_definition.to_dict()["Properties"])


def render_task_definition(
    task_definition: TaskDefinition, output_format: str = JSON_FORMAT
) -> str:
    """
    Renders the task definition

    :param troposphere.ecs.TaskDefinition task_definition:
    :param str output_format: json or yaml for the ECS API request, cfn for a CloudFormation template
    :rtype: str
    """
    if output_format == JSON_FORMAT:
        return json.dumps(task_definition_to_api(task_definition), indent=2)
    elif output_format == YAML_FORMAT:
        return yaml.dump(
            task_definition_to_api(task_definition),
            Dumper=Dumper,
            default_flow_style=False,
            sort_keys=False,
        )
    elif output_format == CFN_FORMAT:
        template = Template(
            Description=f"ECS Task Definition {task_definition.Family}"
        )
        template.add_resource(task_definition)
        return template.to_json()
    raise ValueError(
        "Output format", output_format, "is not valid. Must be one of", ALLOWED_FORMATS
    )


def register_task_definition(
    task_definition: TaskDefinition, session: boto3.session.Session = None
) -> dict:
    """
    Registers the task definition in ECS

    :param troposphere.ecs.TaskDefinition task_definition:
    :param boto3.session.Session session: override the default session
    :return: the registered task definition, as returned by ECS
    :rtype: dict
    """
    if session is None:
        session = boto3.session.Session()
    client = session.client("ecs")
    registered = client.register_task_definition(
        **task_definition_to_api(task_definition)
    )["taskDefinition"]
    LOG.info(
        f"Registered {registered['family']}:{registered['revision']} "
        f"- {registered['taskDefinitionArn']}"
    )
    return registered
