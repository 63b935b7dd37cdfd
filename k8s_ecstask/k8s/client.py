#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Kubernetes API access, to list the Pods to validate.
Pods are returned as dicts, as they would be read from manifests.
"""

from __future__ import annotations

from os import path
from typing import Optional

from kubernetes import client, config

from k8s_ecstask.common.logging import LOG

DEFAULT_KUBECONFIG = path.join(path.expanduser("~"), ".kube", "config")


def build_api_client(kubeconfig_path: Optional[str] = None) -> client.ApiClient:
    """
    Creates the Kubernetes API client. Uses the kubeconfig file if it exists,
    falls back to the in-cluster configuration.

    :param str kubeconfig_path: path to kubeconfig. Defaults to ~/.kube/config
    :rtype: kubernetes.client.ApiClient
    """
    if not kubeconfig_path:
        kubeconfig_path = DEFAULT_KUBECONFIG
    if path.exists(kubeconfig_path):
        LOG.debug(f"Using kubeconfig {kubeconfig_path}")
        return config.new_client_from_config(config_file=kubeconfig_path)
    LOG.debug(f"{kubeconfig_path} not found. Using in-cluster configuration")
    configuration = client.Configuration()
    config.load_incluster_config(client_configuration=configuration)
    return client.ApiClient(configuration)


class PodService:
    """
    Read operations on Pods

    :ivar kubernetes.client.ApiClient api_client:
    :ivar kubernetes.client.CoreV1Api core_v1:
    """

    def __init__(self, api_client: client.ApiClient):
        self.api_client = api_client
        self.core_v1 = client.CoreV1Api(api_client)

    def to_dict(self, pod: client.V1Pod) -> dict:
        return self.api_client.sanitize_for_serialization(pod)

    def list_pods(self, namespace: str = "") -> list[dict]:
        """
        Lists the Pods of the namespace, of all namespaces if none is set

        :param str namespace:
        :rtype: list[dict]
        """
        if namespace:
            pods = self.core_v1.list_namespaced_pod(namespace)
        else:
            pods = self.core_v1.list_pod_for_all_namespaces()
        LOG.info(f"Found {len(pods.items)} pod(s) in {namespace or 'all namespaces'}")
        return [self.to_dict(pod) for pod in pods.items]

    def get_pod(self, namespace: str, name: str) -> dict:
        return self.to_dict(self.core_v1.read_namespaced_pod(name, namespace))
