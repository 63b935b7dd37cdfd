#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

from os import path

from behave import given, then, when

from k8s_ecstask.common.files import load_pods, load_xpod
from k8s_ecstask.common.settings import PodToEcsSettings
from k8s_ecstask.ecs.task_definition import PodConverter
from k8s_ecstask.exceptions import UnsupportedFeature
from k8s_ecstask.validation.validator import validate_pods


def here():
    return path.abspath(path.dirname(__file__))


def get_container(context, name: str):
    for container in context.task_definition.ContainerDefinitions:
        if container.Name == name:
            return container
    raise KeyError(name, "not found in", context.task_definition.Family)


@given("I use {file_path} as my Pod manifest")
def step_impl(context, file_path):
    """
    Function to import the Pod manifest from use-cases.

    :param context:
    :param str file_path:
    """
    cases_path = path.abspath(f"{here()}/../../../{file_path}")
    context.settings = PodToEcsSettings(
        **{
            PodToEcsSettings.command_arg: PodToEcsSettings.convert_arg,
            PodToEcsSettings.input_file_arg: [cases_path],
            PodToEcsSettings.format_arg: "json",
        }
    )


@given("I use {file_path} as my XPod document")
def step_impl(context, file_path):
    cases_path = path.abspath(f"{here()}/../../../{file_path}")
    context.settings = PodToEcsSettings(
        **{
            PodToEcsSettings.command_arg: PodToEcsSettings.convert_arg,
            PodToEcsSettings.input_file_arg: [cases_path],
            PodToEcsSettings.xpod_arg: True,
            PodToEcsSettings.format_arg: "json",
        }
    )


@given("I use {prefix} as Parameter Store prefix")
def step_impl(context, prefix):
    context.settings.parameter_store_prefix = prefix


@given("I do not skip unsupported features")
def step_impl(context):
    context.settings.skip_unsupported = False
    context.settings.strict = True


@given("I skip warnings")
def step_impl(context):
    context.settings.skip_warnings = True


@when("I convert it with family {family}")
def step_impl(context, family):
    context.settings.family = family
    pod = load_pods(context.settings.input_files[0])[0]
    converter = PodConverter(context.settings.conversion_options())
    try:
        context.task_definition = converter.convert_pod(
            pod, context.settings.ecs_config()
        )
    except UnsupportedFeature as error:
        context.error = error


@when("I convert the XPod document")
def step_impl(context):
    document = load_xpod(context.settings.input_files[0])
    converter = PodConverter(context.settings.conversion_options(), pod_native=False)
    context.task_definition = converter.convert_pod(document.pod, document.ecs_config)


@when("I check the Pods")
def step_impl(context):
    pods = []
    for input_file in context.settings.input_files:
        pods += load_pods(input_file)
    context.result = validate_pods(
        pods, context.settings.skip_warnings, context.settings.validation_options()
    )


@then("the task definition requires {compatibilities}")
def step_impl(context, compatibilities):
    assert context.task_definition.RequiresCompatibilities == compatibilities.split(
        ","
    )


@then("container {name} has {cpu:d} CPU and {memory:d} MiB of memory")
def step_impl(context, name, cpu, memory):
    container = get_container(context, name)
    assert container.Cpu == cpu
    assert container.Memory == memory


@then("container {name} reserves {memory:d} MiB of memory")
def step_impl(context, name, memory):
    assert get_container(context, name).MemoryReservation == memory


@then("container {name} secret {secret} comes from {value_from}")
def step_impl(context, name, secret, value_from):
    secrets = {
        secret.Name: secret.ValueFrom for secret in get_container(context, name).Secrets
    }
    assert secrets[secret] == value_from


@then("volume {name} uses host path {source_path}")
def step_impl(context, name, source_path):
    volumes = {volume.Name: volume for volume in context.task_definition.Volumes}
    assert volumes[name].Host.SourcePath == source_path


@then("volume {name} uses no host path")
def step_impl(context, name):
    volumes = {volume.Name: volume for volume in context.task_definition.Volumes}
    assert "SourcePath" not in volumes[name].Host.properties


@then("the task definition has containers {names}")
def step_impl(context, names):
    assert [
        container.Name for container in context.task_definition.ContainerDefinitions
    ] == names.split(",")


@then("the task definition has no volumes")
def step_impl(context):
    assert "Volumes" not in context.task_definition.properties


@then("the conversion fails on {feature}")
def step_impl(context, feature):
    assert not hasattr(context, "task_definition")
    assert context.error.feature == feature


@then("{count:d} Pods can be converted")
def step_impl(context, count):
    assert context.result.convertible_pods == count


@then("there are {count:d} warnings")
def step_impl(context, count):
    assert context.result.warnings_count == count
