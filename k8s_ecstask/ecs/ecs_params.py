#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Constants used when building the ECS Task Definition.
"""

from k8s_ecstask.common import ANNOTATIONS_DOMAIN

TASK_T = "EcsTaskDefinition"

DEFAULT_NETWORK_MODE = "awsvpc"
DEFAULT_COMPATIBILITIES = ["FARGATE"]
LAUNCH_TYPES = ["EC2", "FARGATE", "EXTERNAL"]
COMPATIBILITIES_ANNOTATION = f"{ANNOTATIONS_DOMAIN}/requires-compatibilities"

DEFAULT_NAMESPACE = "default"
POD_PARAMETER_STORE_PREFIX = "/pods"
XPOD_PARAMETER_STORE_PREFIX = "/xpod"

DEFAULT_LOG_DRIVER = "awslogs"
DEFAULT_LOG_GROUP = "/ecs/task"
DEFAULT_LOG_REGION = "us-east-1"

MIB = pow(pow(2, 10), 2)
