#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Kubernetes side: Pod definitions, XPod documents, cluster access and the watch-label gate.
"""
