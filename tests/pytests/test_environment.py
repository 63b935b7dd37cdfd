#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

from pytest import raises

from k8s_ecstask.ecs.environment import (
    CONFIG_MAPS_SEGMENT,
    SECRETS_SEGMENT,
    import_env_variables,
    parameter_store_path,
)
from k8s_ecstask.ecs.options import ConversionOptions, resolve_defaults
from k8s_ecstask.exceptions import UnsupportedFeature


def test_parameter_store_path():
    assert (
        parameter_store_path("/myapp", SECRETS_SEGMENT, "my-secret", "password")
        == "/myapp/secrets/my-secret/password"
    )
    assert (
        parameter_store_path(
            "/myapp", SECRETS_SEGMENT, "my-secret", "password", namespace="prod"
        )
        == "/myapp/prod/secrets/my-secret/password"
    )
    assert (
        parameter_store_path("/myapp", CONFIG_MAPS_SEGMENT, "app-config", "mode", "")
        == "/myapp/configmaps/app-config/mode"
    )


def test_literal_values():
    options = resolve_defaults(ConversionOptions())
    environment, secrets = import_env_variables(
        {
            "name": "app",
            "env": [
                {"name": "LOG_LEVEL", "value": "info"},
                {"name": "EMPTY"},
                {"name": "PORT", "value": 8080},
            ],
        },
        options,
        "default",
    )
    assert [(env.Name, env.Value) for env in environment] == [
        ("LOG_LEVEL", "info"),
        ("EMPTY", ""),
        ("PORT", "8080"),
    ]
    assert secrets == []


def test_references_without_namespace():
    options = resolve_defaults(
        ConversionOptions(parameter_store_prefix="/myapp"), pod_native=False
    )
    environment, secrets = import_env_variables(
        {
            "name": "app",
            "env": [
                {
                    "name": "DB_PASSWORD",
                    "valueFrom": {
                        "secretKeyRef": {"name": "my-secret", "key": "password"}
                    },
                },
                {
                    "name": "MODE",
                    "valueFrom": {
                        "configMapKeyRef": {"name": "app-config", "key": "mode"}
                    },
                },
            ],
        },
        options,
        "prod",
    )
    assert environment == []
    assert [(secret.Name, secret.ValueFrom) for secret in secrets] == [
        ("DB_PASSWORD", "/myapp/secrets/my-secret/password"),
        ("MODE", "/myapp/configmaps/app-config/mode"),
    ]


def test_namespace_toggle():
    container = {
        "name": "app",
        "env": [
            {
                "name": "DB_PASSWORD",
                "valueFrom": {"secretKeyRef": {"name": "my-secret", "key": "password"}},
            }
        ],
    }
    options = resolve_defaults(
        ConversionOptions(
            parameter_store_prefix="/myapp", namespace_in_parameter_paths=False
        )
    )
    assert (
        import_env_variables(container, options, "prod")[1][0].ValueFrom
        == "/myapp/secrets/my-secret/password"
    )
    options = resolve_defaults(
        ConversionOptions(
            parameter_store_prefix="/myapp", namespace_in_parameter_paths=True
        ),
        pod_native=False,
    )
    assert (
        import_env_variables(container, options, "prod")[1][0].ValueFrom
        == "/myapp/prod/secrets/my-secret/password"
    )


def test_field_references():
    container = {
        "name": "app",
        "env": [
            {"name": "KEEP", "value": "me"},
            {
                "name": "POD_NAME",
                "valueFrom": {"fieldRef": {"fieldPath": "metadata.name"}},
            },
            {
                "name": "CPU_LIMIT",
                "valueFrom": {"resourceFieldRef": {"resource": "limits.cpu"}},
            },
        ],
    }
    with raises(UnsupportedFeature):
        import_env_variables(
            container, resolve_defaults(ConversionOptions()), "default"
        )
    environment, secrets = import_env_variables(
        container,
        resolve_defaults(ConversionOptions(skip_unsupported_features=True)),
        "default",
    )
    assert [env.Name for env in environment] == ["KEEP"]
    assert secrets == []


def test_unknown_value_source(caplog):
    environment, secrets = import_env_variables(
        {
            "name": "app",
            "env": [{"name": "MYSTERY", "valueFrom": {"vaultRef": {"path": "a/b"}}}],
        },
        resolve_defaults(ConversionOptions()),
        "default",
    )
    assert environment == []
    assert secrets == []
    assert "valueFrom vaultRef is not recognized" in caplog.text
