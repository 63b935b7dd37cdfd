#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Functions to read the Pod manifests and XPod documents, and write the rendered outputs.
"""

from __future__ import annotations

from typing import Optional

import yaml
from compose_x_common.compose_x_common import set_else_none

try:
    from yaml import CSafeLoader as Loader
except ImportError:
    from yaml import SafeLoader as Loader

from k8s_ecstask.common.logging import LOG
from k8s_ecstask.k8s.xpod import XPodDocument

POD_KIND = "Pod"
LIST_KINDS = ["List", "PodList"]


def load_documents(file_path: str) -> list[dict]:
    """
    Loads all the YAML documents of a file. JSON files are valid YAML.

    :param str file_path:
    :rtype: list[dict]
    """
    with open(file_path, encoding="utf-8") as file_fd:
        return [doc for doc in yaml.load_all(file_fd, Loader=Loader) if doc]


def load_pods(file_path: str) -> list[dict]:
    """
    Loads the Pods from a manifest file. Items of List documents are read too,
    other kinds are ignored.

    :param str file_path:
    :rtype: list[dict]
    """
    pods = []
    for document in load_documents(file_path):
        kind = set_else_none("kind", document, alt_value=POD_KIND)
        if kind == POD_KIND:
            pods.append(document)
        elif kind in LIST_KINDS:
            pods += [
                item
                for item in set_else_none("items", document, alt_value=[])
                if set_else_none("kind", item, alt_value=POD_KIND) == POD_KIND
            ]
        else:
            LOG.warning(f"{file_path} - Ignoring {kind} document")
    LOG.debug(f"{file_path} - Loaded {len(pods)} pod(s)")
    return pods


def load_xpod(file_path: str) -> XPodDocument:
    """
    Loads the XPod document from a file, the first document if there are more

    :raises: ValueError if the file has no document
    """
    documents = load_documents(file_path)
    if not documents:
        raise ValueError(f"{file_path} does not contain any XPod document")
    return XPodDocument(documents[0])


def write_output(content: str, output_file: Optional[str] = None) -> None:
    """Writes to the output file if set, stdout otherwise"""
    if not output_file:
        print(content)
        return
    with open(output_file, "w", encoding="utf-8") as output_fd:
        output_fd.write(content)
        output_fd.write("\n")
    LOG.info(f"Output written to {output_file}")
