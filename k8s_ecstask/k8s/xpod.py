#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

"""
XPod documents: Pod spec fields and the ECS task definition settings side by side, in one file.
"""

from __future__ import annotations

from json import loads

import jsonschema
from compose_x_common.compose_x_common import set_else_none
from importlib_resources import files as pkg_files

from k8s_ecstask.common.logging import LOG
from k8s_ecstask.ecs.ecs_config import ECSConfig
from k8s_ecstask.k8s.pod import XPod

ECS_KEYS = [
    "family",
    "taskRoleArn",
    "executionRoleArn",
    "networkMode",
    "requiresCompatibilities",
    "cpu",
    "memory",
    "tags",
]


def xpod_schema() -> dict:
    source = pkg_files("k8s_ecstask").joinpath("specs/xpod.spec.json")
    return loads(source.read_text())


class XPodDocument:
    """
    Class to represent an XPod document

    :ivar dict content: the document as loaded
    :ivar ECSConfig ecs_config: the ECS settings of the document
    :ivar XPod pod: the Pod spec of the document
    """

    def __init__(self, content: dict):
        """
        :param dict content: the XPod document
        :raises: jsonschema.ValidationError if the document is not a valid XPod
        """
        LOG.debug("Validating XPod document against xpod.spec.json")
        jsonschema.validate(content, xpod_schema())
        self.content = content
        self.ecs_config = ECSConfig(
            family=content["family"],
            task_role_arn=set_else_none("taskRoleArn", content, alt_value=""),
            execution_role_arn=set_else_none("executionRoleArn", content, alt_value=""),
            network_mode=set_else_none("networkMode", content, alt_value=""),
            requires_compatibilities=set_else_none(
                "requiresCompatibilities", content, alt_value=[]
            ),
            cpu=str(set_else_none("cpu", content, alt_value="")),
            memory=str(set_else_none("memory", content, alt_value="")),
            tags=set_else_none("tags", content, alt_value={}),
        )
        self.pod = XPod.from_spec(
            {key: value for key, value in content.items() if key not in ECS_KEYS}
        )

    def __repr__(self):
        return self.ecs_config.family
