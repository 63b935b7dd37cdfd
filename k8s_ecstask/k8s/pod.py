#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Module to read the Kubernetes Pod definitions, as decoded from manifests or the Kubernetes API,
into the settings the ECS conversion needs.
"""

from __future__ import annotations

from math import ceil
from typing import Optional, Union

from compose_x_common.compose_x_common import keyisset, keypresent, set_else_none
from kubernetes.utils import parse_quantity

from k8s_ecstask.ecs.ecs_params import (
    COMPATIBILITIES_ANNOTATION,
    LAUNCH_TYPES,
    MIB,
)
from k8s_ecstask.exceptions import InvalidCompatibilities

SECRET_KEY_REF = "secretKeyRef"
CONFIG_MAP_KEY_REF = "configMapKeyRef"
FIELD_REF = "fieldRef"
RESOURCE_FIELD_REF = "resourceFieldRef"
ENV_SOURCES = [SECRET_KEY_REF, CONFIG_MAP_KEY_REF, FIELD_REF, RESOURCE_FIELD_REF]

HOST_PATH = "hostPath"
EMPTY_DIR = "emptyDir"
PVC = "persistentVolumeClaim"
NFS = "nfs"
SECRET = "secret"
CONFIG_MAP = "configMap"
VOLUME_SOURCES = [HOST_PATH, EMPTY_DIR, PVC, NFS, SECRET, CONFIG_MAP]


def milli_value(quantity: Union[str, int, float]) -> int:
    """
    Kubernetes quantity as an amount of thousandths, rounded up. ``500m`` -> 500, ``2`` -> 2000

    :raises: ValueError if the quantity cannot be parsed
    """
    return int(ceil(parse_quantity(quantity) * 1000))


def bytes_value(quantity: Union[str, int, float]) -> int:
    return int(ceil(parse_quantity(quantity)))


def mebibytes(quantity: Union[str, int, float]) -> int:
    """Memory quantity in MiB, truncated. ``512Mi`` -> 512, ``1G`` -> 953"""
    return bytes_value(quantity) // MIB


def parse_compatibilities(annotations: dict) -> Optional[list[str]]:
    """
    Reads the requires-compatibilities annotation, a comma separated list of launch types.

    :param dict annotations: the Pod annotations
    :return: the launch types in the annotation order, None if the annotation is not set
    :raises: InvalidCompatibilities
    """
    if not keypresent(COMPATIBILITIES_ANNOTATION, annotations):
        return None
    values = [
        value.strip() for value in str(annotations[COMPATIBILITIES_ANNOTATION]).split(",")
    ]
    if not all(values):
        raise InvalidCompatibilities(
            f"Annotation {COMPATIBILITIES_ANNOTATION} has an empty value: "
            f"{annotations[COMPATIBILITIES_ANNOTATION]!r}"
        )
    invalid = [value for value in values if value not in LAUNCH_TYPES]
    if invalid:
        raise InvalidCompatibilities(
            f"Annotation {COMPATIBILITIES_ANNOTATION} values {invalid} "
            f"are not valid. Must be one of {LAUNCH_TYPES}"
        )
    return values


def env_var_source(env: dict) -> Optional[str]:
    """
    Identifies where the value of an env var comes from.

    :return: None for literal values, one of ENV_SOURCES, or the unknown valueFrom key
    """
    if not keyisset("valueFrom", env):
        return None
    value_from = env["valueFrom"]
    for source in ENV_SOURCES:
        if keyisset(source, value_from):
            return source
    return next(iter(value_from), None)


def volume_source(volume: dict) -> Optional[str]:
    """
    Identifies the source of a Pod volume. ``emptyDir: {}`` is a valid source, hence key presence.

    :return: one of VOLUME_SOURCES, the unknown source key, or None if no source is defined
    """
    for source in VOLUME_SOURCES:
        if keypresent(source, volume) and volume[source] is not None:
            return source
    for key in volume:
        if key != "name" and volume[key] is not None:
            return key
    return None


def container_limits(container: dict) -> dict:
    return set_else_none(
        "limits", set_else_none("resources", container, alt_value={}), alt_value={}
    )


def container_requests(container: dict) -> dict:
    return set_else_none(
        "requests", set_else_none("resources", container, alt_value={}), alt_value={}
    )


def is_privileged(container: dict) -> bool:
    return keyisset(
        "privileged", set_else_none("securityContext", container, alt_value={})
    )


def added_capabilities(container: dict) -> list:
    capabilities = set_else_none(
        "capabilities",
        set_else_none("securityContext", container, alt_value={}),
        alt_value={},
    )
    return set_else_none("add", capabilities, alt_value=[])


class XPod:
    """
    Class to represent a Pod, or a bare Pod spec, to convert to ECS.

    The requires-compatibilities annotation is kept as-is, and parsed the first time the launch types
    are read. Pods converted with explicit compatibilities never have it parsed.

    :ivar dict metadata: the Pod metadata
    :ivar dict spec: the Pod spec
    """

    def __init__(self, definition: dict):
        if not isinstance(definition, dict):
            raise TypeError("Pod definition must be a dict. Got", type(definition))
        self.definition = definition
        self.metadata = set_else_none("metadata", definition, alt_value={})
        self.spec = set_else_none("spec", definition, alt_value={})
        self._requires_compatibilities = None
        self._compatibilities_parsed = False

    @classmethod
    def from_spec(cls, spec: dict) -> XPod:
        """Wraps a Pod spec which comes without metadata"""
        return cls({"spec": spec})

    def __repr__(self):
        return f"{self.namespace}/{self.name}"

    @property
    def requires_compatibilities(self) -> Optional[list[str]]:
        """
        Launch types from the annotation, None if not set

        :raises: InvalidCompatibilities
        """
        if not self._compatibilities_parsed:
            self._requires_compatibilities = parse_compatibilities(self.annotations)
            self._compatibilities_parsed = True
        return self._requires_compatibilities

    @property
    def name(self) -> str:
        return set_else_none("name", self.metadata, alt_value="")

    @property
    def namespace(self) -> str:
        return set_else_none("namespace", self.metadata, alt_value="")

    @property
    def annotations(self) -> dict:
        return set_else_none("annotations", self.metadata, alt_value={})

    @property
    def containers(self) -> list:
        return set_else_none("containers", self.spec, alt_value=[])

    @property
    def init_containers(self) -> list:
        return set_else_none("initContainers", self.spec, alt_value=[])

    @property
    def volumes(self) -> list:
        return set_else_none("volumes", self.spec, alt_value=[])

    @property
    def service_account(self) -> str:
        return set_else_none("serviceAccountName", self.spec, alt_value="")

    @property
    def host_network(self) -> bool:
        return keyisset("hostNetwork", self.spec)

    @property
    def host_pid(self) -> bool:
        return keyisset("hostPID", self.spec)

    @property
    def host_ipc(self) -> bool:
        return keyisset("hostIPC", self.spec)

    @property
    def security_context(self) -> dict:
        return set_else_none("securityContext", self.spec, alt_value={})
