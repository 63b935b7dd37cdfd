#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Table of the Pod features that need attention when moving to ECS.

Both the converter and the validator read it, so a feature cannot be a failure for one and
silently accepted by the other.

Each rule defines

* severity: ERROR blocks the conversion, WARNING is convertible but risky,
  UNSUPPORTED is dropped from the task definition. None means the severity comes from the
  host namespaces policy of the options.
* skippable: whether the converter drops the feature when skipping unsupported features.
  When not skipping, an UNSUPPORTED skippable feature is an error.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, NamedTuple, Optional

if TYPE_CHECKING:
    from k8s_ecstask.ecs.options import ConversionOptions

from k8s_ecstask.common.logging import LOG
from k8s_ecstask.ecs.options import POLICY_ERROR
from k8s_ecstask.exceptions import UnsupportedFeature

ERROR = "error"
WARNING = "warning"
UNSUPPORTED = "unsupported"

INIT_CONTAINERS = "init_containers"
FIELD_REFERENCE = "field_reference"
SECRET_VOLUME = "secret_volume"
UNSUPPORTED_VOLUME = "unsupported_volume"
EMPTY_IMAGE = "empty_image"
PRIVILEGED = "privileged"
POD_PRIVILEGED = "pod_privileged"
HOST_NETWORK = "host_network"
HOST_PID = "host_pid"
HOST_IPC = "host_ipc"
SERVICE_ACCOUNT = "service_account"
MISSING_RESOURCES = "missing_resources"
LIVENESS_PROBE = "liveness_probe"
READINESS_PROBE = "readiness_probe"
SECRET_ENV = "secret_env"
CONFIG_MAP_ENV = "config_map_env"
CAPABILITIES = "capabilities"
HOST_PATH_VOLUME = "host_path_volume"
RUN_AS_USER = "run_as_user"
FS_GROUP = "fs_group"
INVALID_COMPATIBILITIES = "invalid_compatibilities"


class FeatureRule(NamedTuple):
    feature: str
    severity: Optional[str]
    report_message: str
    conversion_message: str = ""
    skippable: bool = False


_RULES = [
    FeatureRule(
        INIT_CONTAINERS,
        UNSUPPORTED,
        "Pod has init containers which are not directly supported in ECS",
        "init containers are not supported in ECS",
        True,
    ),
    FeatureRule(
        FIELD_REFERENCE,
        UNSUPPORTED,
        "Container '{container}' env var '{env}' uses field references which are not supported in ECS",
        "field references are not supported in ECS",
        True,
    ),
    FeatureRule(
        SECRET_VOLUME,
        UNSUPPORTED,
        "Volume '{volume}' is a secret/configmap volume - use Parameter Store instead",
        "secret/configmap volumes are not supported in ECS, use Parameter Store instead",
        True,
    ),
    FeatureRule(
        UNSUPPORTED_VOLUME,
        ERROR,
        "Volume '{volume}' uses unsupported volume type '{source}' for ECS",
        "unsupported volume type for volume {volume}",
        True,
    ),
    FeatureRule(EMPTY_IMAGE, ERROR, "Container '{container}' has no image specified"),
    FeatureRule(
        PRIVILEGED,
        ERROR,
        "Container '{container}' requires privileged mode - not supported in ECS Fargate",
    ),
    FeatureRule(
        POD_PRIVILEGED,
        ERROR,
        "Pod security context requires privileged mode - not supported in ECS Fargate",
    ),
    FeatureRule(
        HOST_NETWORK,
        None,
        "Pod uses host network - ensure ECS task configuration supports this",
    ),
    FeatureRule(
        HOST_PID,
        None,
        "Pod shares the host PID namespace - ensure ECS task configuration supports this",
    ),
    FeatureRule(
        HOST_IPC,
        None,
        "Pod shares the host IPC namespace - ensure ECS task configuration supports this",
    ),
    FeatureRule(
        SERVICE_ACCOUNT,
        WARNING,
        "Pod uses service account '{service_account}' - "
        "ensure appropriate IAM roles are configured for ECS",
    ),
    FeatureRule(
        MISSING_RESOURCES,
        WARNING,
        "Container '{container}' has no resource limits/requests - "
        "ECS requires CPU and memory specification",
    ),
    FeatureRule(
        LIVENESS_PROBE,
        WARNING,
        "Container '{container}' has liveness probe - ECS health checks work differently",
    ),
    FeatureRule(
        READINESS_PROBE,
        WARNING,
        "Container '{container}' has readiness probe - ECS uses target group health checks",
    ),
    FeatureRule(
        SECRET_ENV,
        WARNING,
        "Container '{container}' references secret '{name}' - "
        "ensure it's migrated to Parameter Store",
    ),
    FeatureRule(
        CONFIG_MAP_ENV,
        WARNING,
        "Container '{container}' references configmap '{name}' - "
        "ensure it's migrated to Parameter Store",
    ),
    FeatureRule(
        CAPABILITIES,
        WARNING,
        "Container '{container}' adds Linux capabilities {capabilities} - "
        "ECS Fargate only allows SYS_PTRACE",
    ),
    FeatureRule(
        HOST_PATH_VOLUME,
        WARNING,
        "Volume '{volume}' uses hostPath - ensure the path is available in ECS",
    ),
    FeatureRule(
        RUN_AS_USER,
        WARNING,
        "Pod runs as user {run_as_user} - set the user on the ECS container definitions",
    ),
    FeatureRule(
        FS_GROUP,
        WARNING,
        "Pod sets fsGroup {fs_group} - ECS does not change volumes ownership",
    ),
    FeatureRule(
        INVALID_COMPATIBILITIES,
        WARNING,
        "{error} - set the compatibilities explicitly to convert this Pod",
    ),
]

RULES = {rule.feature: rule for rule in _RULES}


def classify(feature: str, options: ConversionOptions) -> str:
    """
    Effective severity of a feature for the given options.

    :param str feature: the feature kind
    :param ConversionOptions options: resolved conversion options
    :return: one of ERROR, WARNING, UNSUPPORTED
    :rtype: str
    """
    rule = RULES[feature]
    if rule.severity is None:
        return ERROR if options.host_namespaces_policy == POLICY_ERROR else WARNING
    if (
        rule.skippable
        and rule.severity == UNSUPPORTED
        and not options.skip_unsupported_features
    ):
        return ERROR
    return rule.severity


def report_message(feature: str, **kwargs) -> str:
    return RULES[feature].report_message.format(**kwargs)


def enforce(feature: str, options: ConversionOptions, **kwargs) -> None:
    """
    Fails the conversion for a skippable feature, unless unsupported features are skipped,
    in which case the caller leaves the feature out of the task definition.

    :raises: UnsupportedFeature
    """
    rule = RULES[feature]
    if not rule.skippable:
        raise KeyError(feature, "cannot be skipped by the converter")
    message = rule.conversion_message.format(**kwargs)
    if not options.skip_unsupported_features:
        raise UnsupportedFeature(message, feature)
    LOG.warning(f"{message}. Skipping")
