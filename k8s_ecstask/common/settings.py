#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Module for the PodToEcsSettings class
"""

from __future__ import annotations

from copy import deepcopy

from compose_x_common.compose_x_common import keyisset, set_else_none

from k8s_ecstask.common.logging import LOG
from k8s_ecstask.ecs.ecs_config import ECSConfig
from k8s_ecstask.ecs.options import HOST_NAMESPACES_POLICIES, ConversionOptions


class PodToEcsSettings:
    """
    Class to handle the settings of k8s-ecstask commands, from the CLI arguments.
    """

    command_arg = "command"
    convert_arg = "convert"
    check_arg = "check"
    watch_arg = "watch"
    version_arg = "version"

    input_file_arg = "InputFiles"
    output_file_arg = "OutputFile"
    xpod_arg = "XPod"
    family_arg = "Family"
    namespace_arg = "Namespace"
    kubeconfig_arg = "Kubeconfig"
    prefix_arg = "ParameterStorePrefix"
    execution_role_arg = "ExecutionRoleArn"
    task_role_arg = "TaskRoleArn"
    network_mode_arg = "NetworkMode"
    cpu_arg = "Cpu"
    memory_arg = "Memory"
    compatibilities_arg = "RequiresCompatibilities"
    log_group_arg = "LogGroup"
    log_region_arg = "LogRegion"
    skip_unsupported_arg = "SkipUnsupported"
    format_arg = "OutputFormat"
    register_arg = "Register"
    skip_warnings_arg = "SkipWarnings"
    strict_arg = "Strict"
    host_namespaces_arg = "HostNamespacesPolicy"

    default_log_group = "/ecs/pods"
    default_log_region = "us-east-1"
    default_log_driver = "awslogs"
    default_network_mode = "awsvpc"
    host_namespaces_policies = HOST_NAMESPACES_POLICIES

    active_commands = [
        {
            "name": convert_arg,
            "help": "Converts a Pod manifest or XPod document into an ECS Task Definition",
        },
        {
            "name": check_arg,
            "help": "Checks whether Pods, from the cluster or files, can be converted to ECS",
        },
        {
            "name": watch_arg,
            "help": "Watches the Pods with the watch label and logs their events",
        },
    ]
    neutral_commands = [{"name": version_arg, "help": "k8s-ecstask version"}]

    def __init__(self, **kwargs):
        self.__args = deepcopy(kwargs)
        self.command = set_else_none(self.command_arg, kwargs)
        self.input_files = set_else_none(self.input_file_arg, kwargs, alt_value=[])
        self.output_file = set_else_none(self.output_file_arg, kwargs)
        self.xpod = keyisset(self.xpod_arg, kwargs)
        self.family = set_else_none(self.family_arg, kwargs, alt_value="")
        self.namespace = set_else_none(self.namespace_arg, kwargs, alt_value="")
        self.kubeconfig = set_else_none(self.kubeconfig_arg, kwargs)
        self.parameter_store_prefix = set_else_none(
            self.prefix_arg, kwargs, alt_value=""
        )
        self.execution_role_arn = set_else_none(
            self.execution_role_arg, kwargs, alt_value=""
        )
        self.task_role_arn = set_else_none(self.task_role_arg, kwargs, alt_value="")
        self.network_mode = set_else_none(
            self.network_mode_arg, kwargs, alt_value=self.default_network_mode
        )
        self.cpu = set_else_none(self.cpu_arg, kwargs, alt_value="")
        self.memory = set_else_none(self.memory_arg, kwargs, alt_value="")
        self.requires_compatibilities = set_else_none(
            self.compatibilities_arg, kwargs, alt_value=[]
        )
        self.log_group = set_else_none(
            self.log_group_arg, kwargs, alt_value=self.default_log_group
        )
        self.log_region = set_else_none(
            self.log_region_arg, kwargs, alt_value=self.default_log_region
        )
        self.skip_unsupported = set_else_none(
            self.skip_unsupported_arg, kwargs, alt_value=True, eval_bool=True
        )
        self.output_format = set_else_none(self.format_arg, kwargs)
        self.register = keyisset(self.register_arg, kwargs)
        self.skip_warnings = keyisset(self.skip_warnings_arg, kwargs)
        self.strict = keyisset(self.strict_arg, kwargs)
        self.host_namespaces_policy = set_else_none(self.host_namespaces_arg, kwargs)
        LOG.debug(f"Settings for {self.command}: {self.__args}")

    def __repr__(self):
        return f"{self.command} {self.input_files}"

    def conversion_options(self) -> ConversionOptions:
        """Options of the convert command. Defaults not set here are resolved by the converter."""
        return ConversionOptions(
            parameter_store_prefix=self.parameter_store_prefix,
            default_log_driver=self.default_log_driver,
            default_log_options={
                "awslogs-group": self.log_group,
                "awslogs-region": self.log_region,
            },
            default_execution_role_arn=self.execution_role_arn,
            default_task_role_arn=self.task_role_arn,
            skip_unsupported_features=self.skip_unsupported,
        )

    def validation_options(self) -> ConversionOptions:
        """Options of the check command. --strict validates for a conversion not skipping anything"""
        return ConversionOptions(
            parameter_store_prefix=self.parameter_store_prefix,
            skip_unsupported_features=not self.strict,
            host_namespaces_policy=self.host_namespaces_policy,
        )

    def ecs_config(self) -> ECSConfig:
        return ECSConfig(
            family=self.family,
            network_mode=self.network_mode,
            requires_compatibilities=self.requires_compatibilities,
            cpu=self.cpu,
            memory=self.memory,
        )
