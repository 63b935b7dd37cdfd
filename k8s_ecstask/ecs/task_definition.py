#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Module with the PodConverter, which turns a Pod into an ECS Task Definition.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Union

if TYPE_CHECKING:
    from k8s_ecstask.ecs.ecs_config import ECSConfig

from compose_x_common.compose_x_common import set_else_none
from troposphere import Tags
from troposphere.ecs import ContainerDefinition, TaskDefinition

from k8s_ecstask.common.logging import LOG
from k8s_ecstask.ecs.ecs_container import container_definition
from k8s_ecstask.ecs.ecs_params import (
    DEFAULT_COMPATIBILITIES,
    DEFAULT_NAMESPACE,
    DEFAULT_NETWORK_MODE,
    TASK_T,
)
from k8s_ecstask.ecs.options import ConversionOptions, resolve_defaults
from k8s_ecstask.ecs.volumes import convert_volumes
from k8s_ecstask.exceptions import UnsupportedFeature
from k8s_ecstask.k8s.pod import XPod
from k8s_ecstask.rules import INIT_CONTAINERS, enforce


class PodConverter:
    """
    Converts Kubernetes Pods to ECS Task Definitions.

    Conversion stops at the first unsupported feature, unless the options skip unsupported features,
    in which case these are left out of the task definition.

    :ivar ConversionOptions options: the resolved options, read-only
    """

    def __init__(self, options: ConversionOptions = None, pod_native: bool = True):
        """
        :param ConversionOptions options: conversion options. Defaults are resolved here.
        :param bool pod_native: True for Kubernetes Pods, False for generic XPod documents
        """
        self.options = resolve_defaults(options, pod_native)

    def task_role_arn(self, ecs_config: ECSConfig) -> str:
        return ecs_config.task_role_arn or self.options.default_task_role_arn

    def execution_role_arn(self, ecs_config: ECSConfig) -> str:
        return ecs_config.execution_role_arn or self.options.default_execution_role_arn

    @staticmethod
    def requires_compatibilities(ecs_config: ECSConfig, pod: XPod) -> list:
        if ecs_config.requires_compatibilities:
            return list(ecs_config.requires_compatibilities)
        if pod.requires_compatibilities:
            return list(pod.requires_compatibilities)
        return list(DEFAULT_COMPATIBILITIES)

    def convert_containers(
        self, containers: list, namespace: str
    ) -> list[ContainerDefinition]:
        definitions = []
        for container in containers:
            prefix = (
                "failed to convert container "
                f"{set_else_none('name', container, alt_value='')}"
            )
            try:
                definitions.append(
                    container_definition(container, self.options, namespace)
                )
            except UnsupportedFeature as error:
                raise UnsupportedFeature(f"{prefix}: {error}", error.feature) from error
            except ValueError as error:
                raise ValueError(f"{prefix}: {error}") from error
        return definitions

    def convert(
        self, pod_spec: dict, ecs_config: ECSConfig, namespace: str = ""
    ) -> TaskDefinition:
        """
        Converts a Pod spec, without metadata.

        :param dict pod_spec: the Pod spec
        :param ECSConfig ecs_config: task level settings
        :param str namespace: namespace used in the Parameter Store paths. ``default`` if empty
        :rtype: troposphere.ecs.TaskDefinition
        :raises: UnsupportedFeature
        """
        return self.convert_pod(XPod.from_spec(pod_spec), ecs_config, namespace)

    def convert_pod(
        self, pod: Union[XPod, dict], ecs_config: ECSConfig, namespace: str = ""
    ) -> TaskDefinition:
        """
        Converts a Pod. The Pod annotations can set the task definition compatibilities, and the
        Pod namespace is used when none is given.

        :param pod: the Pod, as XPod or as a dict
        :param ECSConfig ecs_config: task level settings
        :param str namespace: namespace override
        :rtype: troposphere.ecs.TaskDefinition
        :raises: UnsupportedFeature
        :raises: InvalidCompatibilities
        """
        if not isinstance(pod, XPod):
            pod = XPod(pod)
        namespace = namespace or pod.namespace or DEFAULT_NAMESPACE
        props = {
            "Family": ecs_config.family,
            "NetworkMode": ecs_config.network_mode or DEFAULT_NETWORK_MODE,
            "RequiresCompatibilities": self.requires_compatibilities(ecs_config, pod),
        }
        if self.task_role_arn(ecs_config):
            props["TaskRoleArn"] = self.task_role_arn(ecs_config)
        if self.execution_role_arn(ecs_config):
            props["ExecutionRoleArn"] = self.execution_role_arn(ecs_config)
        if ecs_config.cpu:
            props["Cpu"] = str(ecs_config.cpu)
        if ecs_config.memory:
            props["Memory"] = str(ecs_config.memory)

        props["ContainerDefinitions"] = self.convert_containers(
            pod.containers, namespace
        )
        if pod.init_containers:
            enforce(INIT_CONTAINERS, self.options)
            LOG.warning(
                f"{ecs_config.family} - init containers "
                f"{[container.get('name') for container in pod.init_containers]} left out"
            )

        volumes = convert_volumes(pod.volumes, self.options)
        if volumes:
            props["Volumes"] = volumes
        if ecs_config.tags:
            props["Tags"] = Tags(ecs_config.tags)
        LOG.debug(f"{ecs_config.family} - converted {pod!r} in namespace {namespace}")
        return TaskDefinition(TASK_T, **props)
