#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Functions to map the Pod containers env vars to ECS Environment and Secrets.

Values coming from Kubernetes secrets and configmaps are expected in AWS SSM Parameter Store,
at a path derived from the secret/configmap name and key.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from k8s_ecstask.ecs.options import ConversionOptions

from compose_x_common.compose_x_common import keypresent, set_else_none
from troposphere.ecs import Environment, Secret

from k8s_ecstask.common.logging import LOG
from k8s_ecstask.k8s.pod import (
    CONFIG_MAP_KEY_REF,
    FIELD_REF,
    RESOURCE_FIELD_REF,
    SECRET_KEY_REF,
    env_var_source,
)
from k8s_ecstask.rules import FIELD_REFERENCE, enforce

SECRETS_SEGMENT = "secrets"
CONFIG_MAPS_SEGMENT = "configmaps"
PATH_SEGMENTS = {SECRET_KEY_REF: SECRETS_SEGMENT, CONFIG_MAP_KEY_REF: CONFIG_MAPS_SEGMENT}


def parameter_store_path(
    prefix: str, segment: str, name: str, key: str, namespace: Optional[str] = None
) -> str:
    """
    Path of the SSM parameter holding the value of a secret or configmap key.

    >>> parameter_store_path("/myapp", "secrets", "my-secret", "password")
    '/myapp/secrets/my-secret/password'
    >>> parameter_store_path("/myapp", "secrets", "my-secret", "password", "prod")
    '/myapp/prod/secrets/my-secret/password'
    """
    if namespace:
        return f"{prefix}/{namespace}/{segment}/{name}/{key}"
    return f"{prefix}/{segment}/{name}/{key}"


def env_var_value(env: dict) -> str:
    if not keypresent("value", env) or env["value"] is None:
        return ""
    return str(env["value"])


def import_env_variables(
    container: dict, options: ConversionOptions, namespace: str
) -> tuple[list[Environment], list[Secret]]:
    """
    Function to import the container env vars into ECS Environment and Secrets

    :param dict container: the Pod container definition
    :param ConversionOptions options: resolved conversion options
    :param str namespace: Pod namespace, used in the Parameter Store paths if enabled
    :return: the environment variables and the secrets
    :raises: UnsupportedFeature for field references, unless skipping unsupported features
    """
    environment = []
    secrets = []
    path_namespace = namespace if options.namespace_in_parameter_paths else None
    for env in set_else_none("env", container, alt_value=[]):
        source = env_var_source(env)
        if source is None:
            environment.append(Environment(Name=env["name"], Value=env_var_value(env)))
        elif source in PATH_SEGMENTS:
            reference = env["valueFrom"][source]
            secrets.append(
                Secret(
                    Name=env["name"],
                    ValueFrom=parameter_store_path(
                        options.parameter_store_prefix,
                        PATH_SEGMENTS[source],
                        reference["name"],
                        reference["key"],
                        path_namespace,
                    ),
                )
            )
        elif source in [FIELD_REF, RESOURCE_FIELD_REF]:
            enforce(FIELD_REFERENCE, options, env=env["name"])
        else:
            LOG.warning(
                f"{env['name']} - valueFrom {source} is not recognized. Skipping"
            )
    return environment, secrets
