#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Module to map the Pod volumes to ECS task definition volumes.

ECS has no ephemeral volume type, emptyDir volumes become host volumes without source path.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from k8s_ecstask.ecs.options import ConversionOptions

from compose_x_common.compose_x_common import set_else_none
from troposphere.ecs import Host, Volume

from k8s_ecstask.k8s.pod import (
    CONFIG_MAP,
    EMPTY_DIR,
    HOST_PATH,
    SECRET,
    volume_source,
)
from k8s_ecstask.rules import SECRET_VOLUME, UNSUPPORTED_VOLUME, enforce


def host_volume(name: str, source_path: str = None) -> Volume:
    if source_path:
        return Volume(Name=name, Host=Host(SourcePath=source_path))
    return Volume(Name=name, Host=Host())


def convert_volumes(volumes: list, options: ConversionOptions) -> list[Volume]:
    """
    Converts the Pod volumes. Unsupported volumes are left out when skipping unsupported features,
    the mount points using them are left as-is.

    :param list volumes: the Pod volumes
    :param ConversionOptions options: resolved conversion options
    :rtype: list[troposphere.ecs.Volume]
    :raises: UnsupportedFeature
    """
    ecs_volumes = []
    for volume in volumes:
        name = set_else_none("name", volume, alt_value="")
        source = volume_source(volume)
        if source == HOST_PATH:
            ecs_volumes.append(
                host_volume(name, set_else_none("path", volume[HOST_PATH]))
            )
        elif source == EMPTY_DIR:
            ecs_volumes.append(host_volume(name))
        elif source in [SECRET, CONFIG_MAP]:
            enforce(SECRET_VOLUME, options, volume=name)
        else:
            enforce(UNSUPPORTED_VOLUME, options, volume=name)
    return ecs_volumes
