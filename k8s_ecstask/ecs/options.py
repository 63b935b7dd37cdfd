#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Conversion options, shared read-only across conversions and validations.
"""

from __future__ import annotations

from typing import NamedTuple, Optional

from k8s_ecstask.ecs.ecs_params import (
    DEFAULT_LOG_DRIVER,
    DEFAULT_LOG_GROUP,
    DEFAULT_LOG_REGION,
    POD_PARAMETER_STORE_PREFIX,
    XPOD_PARAMETER_STORE_PREFIX,
)

POLICY_ERROR = "error"
POLICY_WARNING = "warning"
HOST_NAMESPACES_POLICIES = [POLICY_ERROR, POLICY_WARNING]


class ConversionOptions(NamedTuple):
    """
    Options for the conversion process.

    :ivar str parameter_store_prefix: prefix of the SSM parameters secrets and configmaps are mapped to
    :ivar str default_log_driver: log driver set on every container definition
    :ivar dict default_log_options: log driver options set on every container definition
    :ivar str default_execution_role_arn: used when the ECS config does not set one
    :ivar str default_task_role_arn: used when the ECS config does not set one
    :ivar bool skip_unsupported_features: drop features ECS cannot run instead of failing
    :ivar bool namespace_in_parameter_paths: whether the Pod namespace is a segment of the SSM paths
    :ivar str host_namespaces_policy: whether host network/PID/IPC are validation errors or warnings
    """

    parameter_store_prefix: str = ""
    default_log_driver: str = ""
    default_log_options: Optional[dict] = None
    default_execution_role_arn: str = ""
    default_task_role_arn: str = ""
    skip_unsupported_features: bool = False
    namespace_in_parameter_paths: Optional[bool] = None
    host_namespaces_policy: Optional[str] = None


def resolve_defaults(
    options: ConversionOptions = None, pod_native: bool = True
) -> ConversionOptions:
    """
    Returns a new, fully populated, ConversionOptions. The input is left untouched.

    :param ConversionOptions options: the options as given by the caller
    :param bool pod_native: Kubernetes Pod conversion (True) or generic XPod document (False)
    :rtype: ConversionOptions
    """
    if options is None:
        options = ConversionOptions()
    if (
        options.host_namespaces_policy
        and options.host_namespaces_policy not in HOST_NAMESPACES_POLICIES
    ):
        raise ValueError(
            "host_namespaces_policy",
            options.host_namespaces_policy,
            "must be one of",
            HOST_NAMESPACES_POLICIES,
        )
    updates = {}
    if not options.parameter_store_prefix:
        updates["parameter_store_prefix"] = (
            POD_PARAMETER_STORE_PREFIX if pod_native else XPOD_PARAMETER_STORE_PREFIX
        )
    if not options.default_log_driver:
        updates["default_log_driver"] = DEFAULT_LOG_DRIVER
    if options.default_log_options is None:
        updates["default_log_options"] = {
            "awslogs-group": DEFAULT_LOG_GROUP,
            "awslogs-region": DEFAULT_LOG_REGION,
        }
    if options.namespace_in_parameter_paths is None:
        updates["namespace_in_parameter_paths"] = pod_native
    if not options.host_namespaces_policy:
        updates["host_namespaces_policy"] = POLICY_ERROR
    return options._replace(**updates)
