#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Watch label handling.

Pods carrying the watch label are meant to run on ECS: they are refused admission in the cluster,
and the watcher logs their lifecycle events. Neither runs the conversion.
"""

from __future__ import annotations

from typing import Optional

from compose_x_common.compose_x_common import keypresent, set_else_none
from kubernetes import client, watch

from k8s_ecstask.common import ANNOTATIONS_DOMAIN
from k8s_ecstask.common.logging import LOG
from k8s_ecstask.exceptions import AdmissionDenied

WATCH_LABEL = f"{ANNOTATIONS_DOMAIN}/watch"
ADMISSION_API_VERSION = "admission.k8s.io/v1"


def is_watched(pod: dict) -> bool:
    labels = set_else_none(
        "labels", set_else_none("metadata", pod, alt_value={}), alt_value={}
    )
    return keypresent(WATCH_LABEL, labels)


def validate_admission(pod: dict) -> None:
    """
    :raises: AdmissionDenied if the Pod has the watch label, whatever its value
    """
    if is_watched(pod):
        raise AdmissionDenied(f"pods with label '{WATCH_LABEL}' are not allowed")


def admission_response(review: dict) -> dict:
    """
    Builds the AdmissionReview response to an AdmissionReview request for a Pod

    :param dict review: the AdmissionReview sent by the API server
    :rtype: dict
    """
    request = set_else_none("request", review, alt_value={})
    response = {"uid": set_else_none("uid", request, alt_value=""), "allowed": True}
    try:
        validate_admission(set_else_none("object", request, alt_value={}))
    except AdmissionDenied as error:
        LOG.info(f"Denied admission - {error}")
        response["allowed"] = False
        response["status"] = {"code": 403, "message": str(error)}
    return {
        "apiVersion": set_else_none("apiVersion", review, ADMISSION_API_VERSION),
        "kind": "AdmissionReview",
        "response": response,
    }


class PodWatcher:
    """
    Watches the Pods with the watch label and logs their events. Nothing else is done.
    """

    def __init__(self, api_client: client.ApiClient, namespace: str = ""):
        self.api_client = api_client
        self.core_v1 = client.CoreV1Api(api_client)
        self.namespace = namespace

    def reconcile(self, event_type: str, pod: dict) -> None:
        metadata = set_else_none("metadata", pod, alt_value={})
        LOG.info(
            f"Reconciling Pod {set_else_none('namespace', metadata, alt_value='')}/"
            f"{set_else_none('name', metadata, alt_value='')} ({event_type}) "
            f"labels: {set_else_none('labels', metadata, alt_value={})}"
        )

    def run(self, timeout_seconds: Optional[int] = None) -> None:
        """
        Streams the Pods events until the timeout, forever if not set.

        :param int timeout_seconds:
        """
        kwargs = {"label_selector": WATCH_LABEL}
        if timeout_seconds:
            kwargs["timeout_seconds"] = timeout_seconds
        if self.namespace:
            list_function = self.core_v1.list_namespaced_pod
            kwargs["namespace"] = self.namespace
        else:
            list_function = self.core_v1.list_pod_for_all_namespaces
        LOG.info(f"Watching pods with label {WATCH_LABEL}")
        for event in watch.Watch().stream(list_function, **kwargs):
            pod = self.api_client.sanitize_for_serialization(event["object"])
            if not is_watched(pod):
                continue
            self.reconcile(event["type"], pod)
