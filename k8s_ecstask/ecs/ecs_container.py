#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Module to turn a Pod container into an ECS Container Definition.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from k8s_ecstask.ecs.options import ConversionOptions

from compose_x_common.compose_x_common import keyisset, keypresent, set_else_none
from troposphere.ecs import (
    ContainerDefinition,
    LogConfiguration,
    MountPoint,
    PortMapping,
)

from k8s_ecstask.common.logging import LOG
from k8s_ecstask.ecs.environment import import_env_variables
from k8s_ecstask.k8s.pod import (
    container_limits,
    container_requests,
    mebibytes,
    milli_value,
)


def set_compute_resources(container: dict) -> dict:
    """
    Maps the container limits and requests to ECS Cpu, Memory and MemoryReservation.
    Limits and requests are independent, a memory request without limit still sets a reservation.

    :param dict container:
    :return: the ContainerDefinition properties to set. Zero values are left out.
    :rtype: dict
    """
    props = {}
    limits = container_limits(container)
    requests = container_requests(container)
    cpu = milli_value(limits["cpu"]) if keypresent("cpu", limits) else 0
    memory = mebibytes(limits["memory"]) if keypresent("memory", limits) else 0
    reservation = (
        mebibytes(requests["memory"]) if keypresent("memory", requests) else 0
    )
    if cpu:
        props["Cpu"] = cpu
    if memory:
        props["Memory"] = memory
    if reservation:
        props["MemoryReservation"] = reservation
    return props


def define_port_mappings(container: dict) -> list[PortMapping]:
    mappings = []
    for port in set_else_none("ports", container, alt_value=[]):
        props = {"ContainerPort": int(port["containerPort"])}
        if keyisset("protocol", port):
            props["Protocol"] = str(port["protocol"]).lower()
        if keyisset("hostPort", port):
            props["HostPort"] = int(port["hostPort"])
        mappings.append(PortMapping(**props))
    return mappings


def define_mount_points(container: dict) -> list[MountPoint]:
    return [
        MountPoint(
            SourceVolume=mount["name"],
            ContainerPath=mount["mountPath"],
            ReadOnly=keyisset("readOnly", mount),
        )
        for mount in set_else_none("volumeMounts", container, alt_value=[])
    ]


def define_log_configuration(options: ConversionOptions) -> LogConfiguration:
    return LogConfiguration(
        LogDriver=options.default_log_driver,
        Options=dict(options.default_log_options),
    )


def container_definition(
    container: dict, options: ConversionOptions, namespace: str
) -> ContainerDefinition:
    """
    Function to create the ECS Container Definition of a Pod container.

    The Pod ``command`` is the ECS ``EntryPoint`` and the Pod ``args`` the ECS ``Command``.
    Logging always uses the options defaults.

    :param dict container: the Pod container definition
    :param ConversionOptions options: resolved conversion options
    :param str namespace: Pod namespace
    :rtype: troposphere.ecs.ContainerDefinition
    :raises: UnsupportedFeature
    """
    props = {
        "Name": set_else_none("name", container, alt_value=""),
        "Image": set_else_none("image", container, alt_value=""),
        "Essential": True,
        "LogConfiguration": define_log_configuration(options),
    }
    props.update(set_compute_resources(container))
    port_mappings = define_port_mappings(container)
    if port_mappings:
        props["PortMappings"] = port_mappings
    environment, secrets = import_env_variables(container, options, namespace)
    if environment:
        props["Environment"] = environment
    if secrets:
        props["Secrets"] = secrets
    if keyisset("command", container):
        props["EntryPoint"] = list(container["command"])
    if keyisset("args", container):
        props["Command"] = list(container["args"])
    if keyisset("workingDir", container):
        props["WorkingDirectory"] = container["workingDir"]
    mount_points = define_mount_points(container)
    if mount_points:
        props["MountPoints"] = mount_points
    LOG.debug(f"{props['Name']} - container definition {list(props.keys())}")
    return ContainerDefinition(**props)
