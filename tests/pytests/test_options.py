#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

from pytest import raises

from k8s_ecstask.ecs.options import ConversionOptions, resolve_defaults


def test_pod_native_defaults():
    options = resolve_defaults()
    assert options.parameter_store_prefix == "/pods"
    assert options.default_log_driver == "awslogs"
    assert options.default_log_options == {
        "awslogs-group": "/ecs/task",
        "awslogs-region": "us-east-1",
    }
    assert options.namespace_in_parameter_paths is True
    assert options.host_namespaces_policy == "error"
    assert options.skip_unsupported_features is False


def test_xpod_defaults():
    options = resolve_defaults(ConversionOptions(), pod_native=False)
    assert options.parameter_store_prefix == "/xpod"
    assert options.namespace_in_parameter_paths is False


def test_explicit_values_are_kept():
    options = ConversionOptions(
        parameter_store_prefix="/myapp",
        default_log_driver="fluentd",
        default_log_options={},
        namespace_in_parameter_paths=False,
        host_namespaces_policy="warning",
        skip_unsupported_features=True,
    )
    resolved = resolve_defaults(options)
    assert resolved == options
    assert resolved.default_log_options == {}


def test_input_is_not_mutated():
    options = ConversionOptions()
    resolved = resolve_defaults(options)
    assert options == ConversionOptions()
    assert resolved is not options
    assert resolve_defaults(resolved) == resolved


def test_invalid_policy():
    with raises(ValueError):
        resolve_defaults(ConversionOptions(host_namespaces_policy="ignore"))
