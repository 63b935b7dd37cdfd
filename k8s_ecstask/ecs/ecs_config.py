#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Task level settings which do not come from the Pod itself.
"""

from __future__ import annotations

from typing import Optional


class ECSConfig:
    """
    ECS specific settings of the task definition

    :ivar str family: task definition family name
    :ivar str task_role_arn: overrides the default task role of the conversion options
    :ivar str execution_role_arn: overrides the default execution role of the conversion options
    :ivar str network_mode: defaults to awsvpc when not set
    :ivar list requires_compatibilities: takes precedence over the Pod annotation
    :ivar str cpu: task level CPU
    :ivar str memory: task level memory
    :ivar dict tags: tags of the task definition
    """

    def __init__(
        self,
        family: str,
        task_role_arn: str = "",
        execution_role_arn: str = "",
        network_mode: str = "",
        requires_compatibilities: Optional[list] = None,
        cpu: str = "",
        memory: str = "",
        tags: Optional[dict] = None,
    ):
        self.family = family
        self.task_role_arn = task_role_arn
        self.execution_role_arn = execution_role_arn
        self.network_mode = network_mode
        self.requires_compatibilities = requires_compatibilities or []
        self.cpu = cpu
        self.memory = memory
        self.tags = tags or {}

    def __repr__(self):
        return self.family
