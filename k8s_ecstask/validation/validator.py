#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Validates Pods against the rules table, without running the conversion.
All the findings of a Pod are collected, where the conversion stops at the first failure.
"""

from __future__ import annotations

from typing import Union

from compose_x_common.compose_x_common import keyisset, keypresent, set_else_none

from k8s_ecstask.common.logging import LOG
from k8s_ecstask.ecs.options import ConversionOptions, resolve_defaults
from k8s_ecstask.exceptions import InvalidCompatibilities
from k8s_ecstask.k8s.pod import (
    CONFIG_MAP,
    CONFIG_MAP_KEY_REF,
    EMPTY_DIR,
    FIELD_REF,
    HOST_PATH,
    RESOURCE_FIELD_REF,
    SECRET,
    SECRET_KEY_REF,
    XPod,
    parse_compatibilities,
    added_capabilities,
    container_limits,
    container_requests,
    env_var_source,
    is_privileged,
    volume_source,
)
from k8s_ecstask.rules import (
    CAPABILITIES,
    CONFIG_MAP_ENV,
    EMPTY_IMAGE,
    FIELD_REFERENCE,
    FS_GROUP,
    HOST_IPC,
    HOST_NETWORK,
    HOST_PATH_VOLUME,
    HOST_PID,
    INIT_CONTAINERS,
    INVALID_COMPATIBILITIES,
    LIVENESS_PROBE,
    MISSING_RESOURCES,
    POD_PRIVILEGED,
    PRIVILEGED,
    READINESS_PROBE,
    RUN_AS_USER,
    SECRET_ENV,
    SECRET_VOLUME,
    SERVICE_ACCOUNT,
    UNSUPPORTED_VOLUME,
    classify,
    report_message,
)
from k8s_ecstask.validation.results import ValidationResult, ValidationSummary

DEFAULT_SERVICE_ACCOUNT = "default"


def validation_options(options: ConversionOptions = None) -> ConversionOptions:
    """
    Options used to validate. Without options, validates for a conversion skipping unsupported
    features.
    """
    if options is None:
        options = ConversionOptions(skip_unsupported_features=True)
    return resolve_defaults(options)


def record(
    result: ValidationResult, feature: str, options: ConversionOptions, **kwargs
) -> None:
    result.add_finding(
        classify(feature, options), report_message(feature, **kwargs)
    )


def is_set(key: str, definition: dict) -> bool:
    """Key is present and not null. 0 is a valid value for IDs"""
    return keypresent(key, definition) and definition[key] is not None


def validate_container(
    container: dict, result: ValidationResult, options: ConversionOptions
) -> None:
    name = set_else_none("name", container, alt_value="")
    if not keyisset("image", container):
        record(result, EMPTY_IMAGE, options, container=name)
    if is_privileged(container):
        record(result, PRIVILEGED, options, container=name)
    if not container_limits(container) and not container_requests(container):
        record(result, MISSING_RESOURCES, options, container=name)
    if is_set("livenessProbe", container):
        record(result, LIVENESS_PROBE, options, container=name)
    if is_set("readinessProbe", container):
        record(result, READINESS_PROBE, options, container=name)
    for env in set_else_none("env", container, alt_value=[]):
        source = env_var_source(env)
        if source == SECRET_KEY_REF:
            record(
                result,
                SECRET_ENV,
                options,
                container=name,
                name=env["valueFrom"][source]["name"],
            )
        elif source == CONFIG_MAP_KEY_REF:
            record(
                result,
                CONFIG_MAP_ENV,
                options,
                container=name,
                name=env["valueFrom"][source]["name"],
            )
        elif source in [FIELD_REF, RESOURCE_FIELD_REF]:
            record(result, FIELD_REFERENCE, options, container=name, env=env["name"])
    capabilities = added_capabilities(container)
    if capabilities:
        record(
            result,
            CAPABILITIES,
            options,
            container=name,
            capabilities=", ".join(str(cap) for cap in capabilities),
        )


def validate_volume(
    volume: dict, result: ValidationResult, options: ConversionOptions
) -> None:
    name = set_else_none("name", volume, alt_value="")
    source = volume_source(volume)
    if source == HOST_PATH:
        record(result, HOST_PATH_VOLUME, options, volume=name)
    elif source == EMPTY_DIR:
        return
    elif source in [SECRET, CONFIG_MAP]:
        record(result, SECRET_VOLUME, options, volume=name)
    else:
        record(
            result, UNSUPPORTED_VOLUME, options, volume=name, source=source or "none"
        )


def validate_pod(
    pod: Union[XPod, dict],
    skip_warnings: bool = False,
    options: ConversionOptions = None,
) -> ValidationResult:
    """
    Validates whether a Pod can be converted into an ECS task definition.

    :param pod: the Pod
    :param bool skip_warnings: clear the warnings once the validation is done.
    :param ConversionOptions options: the options the conversion would run with
    :rtype: ValidationResult
    """
    options = validation_options(options)
    xpod = pod if isinstance(pod, XPod) else XPod(pod)
    result = ValidationResult(xpod.name, xpod.namespace)
    try:
        parse_compatibilities(xpod.annotations)
    except InvalidCompatibilities as error:
        record(result, INVALID_COMPATIBILITIES, options, error=error)

    if xpod.init_containers:
        record(result, INIT_CONTAINERS, options)
    for enabled, feature in [
        (xpod.host_network, HOST_NETWORK),
        (xpod.host_pid, HOST_PID),
        (xpod.host_ipc, HOST_IPC),
    ]:
        if enabled:
            record(result, feature, options)
    if xpod.service_account and xpod.service_account != DEFAULT_SERVICE_ACCOUNT:
        record(result, SERVICE_ACCOUNT, options, service_account=xpod.service_account)

    security_context = xpod.security_context
    if keyisset("privileged", security_context):
        record(result, POD_PRIVILEGED, options)
    if is_set("runAsUser", security_context):
        record(
            result, RUN_AS_USER, options, run_as_user=security_context["runAsUser"]
        )
    if is_set("fsGroup", security_context):
        record(result, FS_GROUP, options, fs_group=security_context["fsGroup"])

    for container in xpod.containers:
        validate_container(container, result, options)
    for volume in xpod.volumes:
        validate_volume(volume, result, options)

    if skip_warnings:
        result.warnings = []
    LOG.debug(
        f"{result!r} - errors: {len(result.errors)}, warnings: {len(result.warnings)}, "
        f"unsupported: {len(result.unsupported_info)}"
    )
    return result


def validate_pods(
    pods: list, skip_warnings: bool = False, options: ConversionOptions = None
) -> ValidationSummary:
    """Validates each Pod independently"""
    return ValidationSummary(
        [validate_pod(pod, skip_warnings, options) for pod in pods]
    )
