#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Renders the validation summary, as text for humans or as JSON.
"""

from __future__ import annotations

import json

from k8s_ecstask.validation.results import ValidationSummary

TEXT_FORMAT = "text"
JSON_FORMAT = "json"
ALLOWED_FORMATS = [TEXT_FORMAT, JSON_FORMAT]


def render_text(summary: ValidationSummary) -> str:
    lines = [
        "Pod to ECS Convertibility Check Results",
        "========================================",
        "",
        f"Total Pods: {summary.total_pods}",
        f"Convertible: {summary.convertible_pods}",
        f"Failed: {summary.failed_pods}",
        "",
    ]
    for result in summary.results:
        status = "CONVERTIBLE" if result.can_convert else "NOT CONVERTIBLE"
        lines.append(f"Pod: {result.namespace}/{result.pod_name} - {status}")
        for title, findings in [
            ("Errors", result.errors),
            ("Warnings", result.warnings),
            ("Unsupported Features", result.unsupported_info),
        ]:
            if findings:
                lines.append(f"  {title}:")
                lines += [f"    - {finding}" for finding in findings]
        lines.append("")

    if summary.failed_pods:
        lines.append(
            f"Summary: {summary.failed_pods} pods cannot be converted to ECS tasks without modifications."
        )
        lines.append(
            "Please review the errors above and modify the pod specifications accordingly."
        )
    elif summary.total_pods:
        lines.append("Summary: All pods can be converted to ECS tasks!")
        if summary.warnings_count:
            lines.append(
                f"However, there are {summary.warnings_count} warnings that should be reviewed."
            )
    else:
        lines.append("Summary: No pods found.")
    return "\n".join(lines)


def render_summary(summary: ValidationSummary, output_format: str = TEXT_FORMAT) -> str:
    if output_format == JSON_FORMAT:
        return json.dumps(summary.to_dict(), indent=2)
    elif output_format == TEXT_FORMAT:
        return render_text(summary)
    raise ValueError(
        "Output format", output_format, "is not valid. Must be one of", ALLOWED_FORMATS
    )
