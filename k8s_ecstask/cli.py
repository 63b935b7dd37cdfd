#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Console script for k8s_ecstask.
"""

import argparse
import logging
import sys

import boto3
from jsonschema import ValidationError

from k8s_ecstask import __version__
from k8s_ecstask.common.files import load_pods, load_xpod, write_output
from k8s_ecstask.common.logging import LOG
from k8s_ecstask.common.settings import PodToEcsSettings
from k8s_ecstask.ecs.outputs import (
    ALLOWED_FORMATS,
    JSON_FORMAT,
    register_task_definition,
    render_task_definition,
)
from k8s_ecstask.ecs.task_definition import PodConverter
from k8s_ecstask.exceptions import PodToEcsBaseException
from k8s_ecstask.k8s.admission import PodWatcher
from k8s_ecstask.k8s.client import PodService, build_api_client
from k8s_ecstask.validation import report
from k8s_ecstask.validation.validator import validate_pods


class ArgparseHelper(argparse._HelpAction):
    """
    Used to help print top level '--help' arguments from argparse
    when used with subparsers
    """

    def __call__(self, parser, namespace, values, option_string=None):
        parser.print_help()
        print()
        subparsers_actions = [
            action
            for action in parser._actions
            if isinstance(action, argparse._SubParsersAction)
        ]
        for subparsers_action in subparsers_actions:
            for choice, subparser in list(subparsers_action.choices.items()):
                if choice in [cmd["name"] for cmd in PodToEcsSettings.active_commands]:
                    print(f"Command '{choice}'")
                    print(subparser.format_usage())
        parser.exit()


def convert_parser(parser):
    parser.add_argument(
        "-i",
        "--input",
        dest=PodToEcsSettings.input_file_arg,
        required=True,
        action="append",
        help="Path to the Pod manifest, or XPod document with --xpod",
    )
    parser.add_argument(
        "-o",
        "--output",
        dest=PodToEcsSettings.output_file_arg,
        required=False,
        help="Output file for the ECS task definition (default: stdout)",
    )
    parser.add_argument(
        "--xpod",
        dest=PodToEcsSettings.xpod_arg,
        action="store_true",
        default=False,
        help="Input is an XPod document, with the ECS settings in it",
    )
    parser.add_argument(
        "--family",
        dest=PodToEcsSettings.family_arg,
        required=False,
        help="ECS task definition family name. Required for Pod manifests",
    )
    parser.add_argument(
        "--namespace",
        dest=PodToEcsSettings.namespace_arg,
        required=False,
        help="Kubernetes namespace (extracted from Pod metadata if not specified)",
    )
    parser.add_argument(
        "--parameter-store-prefix",
        dest=PodToEcsSettings.prefix_arg,
        required=False,
        help="Prefix for Parameter Store parameters. /pods for Pods, /xpod for XPod documents",
    )
    parser.add_argument(
        "--execution-role-arn",
        dest=PodToEcsSettings.execution_role_arg,
        required=False,
        help="ECS execution role ARN",
    )
    parser.add_argument(
        "--task-role-arn",
        dest=PodToEcsSettings.task_role_arg,
        required=False,
        help="ECS task role ARN",
    )
    parser.add_argument(
        "--network-mode",
        dest=PodToEcsSettings.network_mode_arg,
        default=PodToEcsSettings.default_network_mode,
        help="ECS network mode",
    )
    parser.add_argument(
        "--cpu", dest=PodToEcsSettings.cpu_arg, help="Task-level CPU allocation"
    )
    parser.add_argument(
        "--memory",
        dest=PodToEcsSettings.memory_arg,
        help="Task-level memory allocation",
    )
    parser.add_argument(
        "--requires-compatibilities",
        dest=PodToEcsSettings.compatibilities_arg,
        action="append",
        choices=["EC2", "FARGATE", "EXTERNAL"],
        default=[],
        help="Launch type the task definition must be compatible with. "
        "Overrides the Pod annotation",
    )
    parser.add_argument(
        "--log-group",
        dest=PodToEcsSettings.log_group_arg,
        default=PodToEcsSettings.default_log_group,
        help="CloudWatch log group",
    )
    parser.add_argument(
        "--log-region",
        dest=PodToEcsSettings.log_region_arg,
        default=PodToEcsSettings.default_log_region,
        help="AWS region for logs",
    )
    parser.add_argument(
        "--skip-unsupported",
        dest=PodToEcsSettings.skip_unsupported_arg,
        action="store_true",
        default=True,
        help="Skip unsupported Kubernetes features (default)",
    )
    parser.add_argument(
        "--no-skip-unsupported",
        dest=PodToEcsSettings.skip_unsupported_arg,
        action="store_false",
        help="Fail on unsupported Kubernetes features",
    )
    parser.add_argument(
        "--format",
        dest=PodToEcsSettings.format_arg,
        choices=ALLOWED_FORMATS,
        default=JSON_FORMAT,
        help="json/yaml for the ECS API, cfn for a CloudFormation template",
    )
    parser.add_argument(
        "--register",
        dest=PodToEcsSettings.register_arg,
        action="store_true",
        default=False,
        help="Registers the task definition in ECS",
    )


def check_parser(parser):
    parser.add_argument(
        "-i",
        "--input",
        dest=PodToEcsSettings.input_file_arg,
        action="append",
        default=[],
        help="Pod manifest to check. Pods are listed from the cluster if not set",
    )
    parser.add_argument(
        "--namespace",
        dest=PodToEcsSettings.namespace_arg,
        help="Kubernetes namespace to check (default: all namespaces)",
    )
    parser.add_argument(
        "--kubeconfig",
        dest=PodToEcsSettings.kubeconfig_arg,
        help="Path to kubeconfig file (default: ~/.kube/config)",
    )
    parser.add_argument(
        "--output",
        dest=PodToEcsSettings.format_arg,
        choices=report.ALLOWED_FORMATS,
        default=report.TEXT_FORMAT,
        help="Output format",
    )
    parser.add_argument(
        "--skip-warnings",
        dest=PodToEcsSettings.skip_warnings_arg,
        action="store_true",
        default=False,
        help="Skip validation warnings",
    )
    parser.add_argument(
        "--strict",
        dest=PodToEcsSettings.strict_arg,
        action="store_true",
        default=False,
        help="Unsupported features are errors, as when converting with --no-skip-unsupported",
    )
    parser.add_argument(
        "--host-namespaces-policy",
        dest=PodToEcsSettings.host_namespaces_arg,
        choices=PodToEcsSettings.host_namespaces_policies,
        default=None,
        help="Whether host network/PID/IPC are errors (default) or warnings",
    )


def watch_parser(parser):
    parser.add_argument(
        "--namespace",
        dest=PodToEcsSettings.namespace_arg,
        help="Kubernetes namespace to watch (default: all namespaces)",
    )
    parser.add_argument(
        "--kubeconfig",
        dest=PodToEcsSettings.kubeconfig_arg,
        help="Path to kubeconfig file (default: ~/.kube/config)",
    )


def main_parser():
    """
    Console script for k8s_ecstask.
    """
    parser = argparse.ArgumentParser(add_help=False)
    parser.add_argument(
        "-h",
        "--help",
        action=ArgparseHelper,
        help="show this help message and exit",
    )
    cmd_parsers = parser.add_subparsers(
        dest=PodToEcsSettings.command_arg, help="Command to execute."
    )
    base_command_parser = argparse.ArgumentParser(add_help=False)
    base_command_parser.add_argument(
        "--loglevel", type=str, help="Log level. Defaults to INFO", required=False
    )
    commands_parsers = {
        PodToEcsSettings.convert_arg: convert_parser,
        PodToEcsSettings.check_arg: check_parser,
        PodToEcsSettings.watch_arg: watch_parser,
    }
    for command in PodToEcsSettings.active_commands:
        command_parser = cmd_parsers.add_parser(
            name=command["name"],
            help=command["help"],
            parents=[base_command_parser],
        )
        commands_parsers[command["name"]](command_parser)
    for command in PodToEcsSettings.neutral_commands:
        cmd_parsers.add_parser(name=command["name"], help=command["help"])
    return parser


def set_log_level(loglevel: str) -> None:
    valid_levels = [
        "FATAL",
        "CRITICAL",
        "ERROR",
        "WARNING",
        "WARN",
        "INFO",
        "DEBUG",
    ]
    if loglevel.upper() in valid_levels:
        LOG.setLevel(logging.getLevelName(loglevel.upper()))
        LOG.handlers[0].setLevel(logging.getLevelName(loglevel.upper()))
    else:
        print(
            f"Log level value {loglevel} is invalid. Must me one of {valid_levels}"
        )


def convert(settings: PodToEcsSettings) -> int:
    """
    Converts the input file and writes the rendered task definition.

    :return: status code
    """
    if settings.xpod:
        document = load_xpod(settings.input_files[0])
        converter = PodConverter(settings.conversion_options(), pod_native=False)
        task_definition = converter.convert_pod(
            document.pod, document.ecs_config, settings.namespace
        )
    else:
        if not settings.family:
            LOG.error("--family is required to convert Pod manifests")
            return 1
        pods = load_pods(settings.input_files[0])
        if not pods:
            LOG.error(f"No Pod found in {settings.input_files[0]}")
            return 1
        if len(pods) > 1:
            LOG.warning(
                f"{settings.input_files[0]} has {len(pods)} pods. Converting the first one"
            )
        converter = PodConverter(settings.conversion_options())
        task_definition = converter.convert_pod(
            pods[0], settings.ecs_config(), settings.namespace
        )
    write_output(
        render_task_definition(task_definition, settings.output_format),
        settings.output_file,
    )
    if settings.register:
        register_task_definition(task_definition, boto3.session.Session())
    return 0


def check(settings: PodToEcsSettings) -> int:
    """
    Validates the Pods and prints the report.

    :return: 1 if any Pod cannot be converted, 0 otherwise
    """
    if settings.input_files:
        pods = []
        for input_file in settings.input_files:
            pods += load_pods(input_file)
    else:
        pods = PodService(build_api_client(settings.kubeconfig)).list_pods(
            settings.namespace
        )
    summary = validate_pods(
        pods, settings.skip_warnings, settings.validation_options()
    )
    print(report.render_summary(summary, settings.output_format))
    return summary.exit_code


def watch(settings: PodToEcsSettings) -> int:
    PodWatcher(build_api_client(settings.kubeconfig), settings.namespace).run()
    return 0


def main(args=None):
    """
    Main entry point for CLI
    :return: status code
    """
    parser = main_parser()
    if args is None and len(sys.argv) == 1:
        parser.print_help()
        sys.exit()
    args = parser.parse_args(args)
    if getattr(args, "loglevel", None):
        set_log_level(args.loglevel)
    LOG.debug(args)
    settings = PodToEcsSettings(**vars(args))

    if settings.command == PodToEcsSettings.version_arg:
        print(__version__)
        return 0
    commands = {
        PodToEcsSettings.convert_arg: convert,
        PodToEcsSettings.check_arg: check,
        PodToEcsSettings.watch_arg: watch,
    }
    if settings.command not in commands:
        parser.print_help()
        return 1
    try:
        return commands[settings.command](settings)
    except (PodToEcsBaseException, ValidationError, ValueError, OSError) as error:
        LOG.error(f"Failed to {settings.command}: {error}")
        return 1


if __name__ == "__main__":
    sys.exit(main())  # pragma: no cover
