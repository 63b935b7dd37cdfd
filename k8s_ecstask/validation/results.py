#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

from __future__ import annotations

from k8s_ecstask.rules import ERROR, UNSUPPORTED, WARNING


class ValidationResult:
    """
    Findings for a single Pod

    :ivar str pod_name:
    :ivar str namespace:
    :ivar list[str] errors: findings blocking the conversion
    :ivar list[str] warnings: convertible, but risky
    :ivar list[str] unsupported_info: features left out of the task definition
    """

    def __init__(self, pod_name: str, namespace: str):
        self.pod_name = pod_name
        self.namespace = namespace
        self.errors = []
        self.warnings = []
        self.unsupported_info = []

    def __repr__(self):
        return f"{self.namespace}/{self.pod_name}"

    @property
    def can_convert(self) -> bool:
        return not self.errors

    def add_finding(self, severity: str, message: str) -> None:
        if severity == ERROR:
            self.errors.append(message)
        elif severity == WARNING:
            self.warnings.append(message)
        elif severity == UNSUPPORTED:
            self.unsupported_info.append(message)
        else:
            raise ValueError(
                "Severity", severity, "must be one of", [ERROR, WARNING, UNSUPPORTED]
            )

    def to_dict(self) -> dict:
        result = {
            "podName": self.pod_name,
            "namespace": self.namespace,
            "canConvert": self.can_convert,
        }
        for key, findings in [
            ("errors", self.errors),
            ("warnings", self.warnings),
            ("unsupportedInfo", self.unsupported_info),
        ]:
            if findings:
                result[key] = list(findings)
        return result


class ValidationSummary:
    """
    Results of the validation of several Pods
    """

    def __init__(self, results: list[ValidationResult] = None):
        self.results = results or []

    @property
    def total_pods(self) -> int:
        return len(self.results)

    @property
    def convertible_pods(self) -> int:
        return len([result for result in self.results if result.can_convert])

    @property
    def failed_pods(self) -> int:
        return self.total_pods - self.convertible_pods

    @property
    def warnings_count(self) -> int:
        return sum(len(result.warnings) for result in self.results)

    @property
    def exit_code(self) -> int:
        return 1 if self.failed_pods else 0

    def to_dict(self) -> dict:
        return {
            "totalPods": self.total_pods,
            "convertiblePods": self.convertible_pods,
            "failedPods": self.failed_pods,
            "results": [result.to_dict() for result in self.results],
        }
