#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

from unittest.mock import MagicMock, patch

from pytest import raises

from k8s_ecstask.exceptions import AdmissionDenied
from k8s_ecstask.k8s.admission import (
    WATCH_LABEL,
    PodWatcher,
    admission_response,
    is_watched,
    validate_admission,
)


def watched_pod(value: str = "true") -> dict:
    return {
        "metadata": {
            "name": "web",
            "namespace": "prod",
            "labels": {"app": "web", WATCH_LABEL: value},
        }
    }


def test_watch_label():
    assert WATCH_LABEL == "ecs.takutakahashi.dev/watch"
    assert is_watched(watched_pod())
    assert is_watched(watched_pod(""))
    assert not is_watched({"metadata": {"labels": {"app": "web"}}})
    assert not is_watched({})


def test_validate_admission():
    validate_admission({"metadata": {"name": "web"}})
    with raises(AdmissionDenied) as error:
        validate_admission(watched_pod("false"))
    assert str(error.value) == (
        "pods with label 'ecs.takutakahashi.dev/watch' are not allowed"
    )


def test_admission_response():
    review = {
        "apiVersion": "admission.k8s.io/v1",
        "kind": "AdmissionReview",
        "request": {"uid": "705ab4f5-6393-11e8-b7cc-42010a800002", "object": watched_pod()},
    }
    response = admission_response(review)
    assert response["kind"] == "AdmissionReview"
    assert response["apiVersion"] == "admission.k8s.io/v1"
    assert response["response"]["uid"] == "705ab4f5-6393-11e8-b7cc-42010a800002"
    assert response["response"]["allowed"] is False
    assert response["response"]["status"]["code"] == 403

    review["request"]["object"] = {"metadata": {"name": "web"}}
    response = admission_response(review)
    assert response["response"] == {
        "uid": "705ab4f5-6393-11e8-b7cc-42010a800002",
        "allowed": True,
    }


def test_watcher_reconciles_watched_pods(caplog):
    api_client = MagicMock()
    api_client.sanitize_for_serialization.side_effect = lambda pod: pod
    events = [
        {"type": "ADDED", "object": watched_pod()},
        {"type": "ADDED", "object": {"metadata": {"name": "other", "labels": {}}}},
        {"type": "DELETED", "object": watched_pod()},
    ]
    with patch("k8s_ecstask.k8s.admission.client.CoreV1Api") as core_v1, patch(
        "k8s_ecstask.k8s.admission.watch.Watch"
    ) as watcher:
        watcher.return_value.stream.return_value = iter(events)
        pod_watcher = PodWatcher(api_client, namespace="prod")
        pod_watcher.run(timeout_seconds=10)
        watcher.return_value.stream.assert_called_once_with(
            core_v1.return_value.list_namespaced_pod,
            label_selector=WATCH_LABEL,
            timeout_seconds=10,
            namespace="prod",
        )
    assert "Reconciling Pod prod/web (ADDED)" in caplog.text
    assert "Reconciling Pod prod/web (DELETED)" in caplog.text
    assert "other" not in caplog.text
