#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Package to turn a Kubernetes Pod into an ECS Task Definition.

* TaskDefinition: task level settings, roles, compatibilities, tags
* ContainerDefinition: one per Pod container, with resources, ports, environment and secrets
* Volume: host volumes for hostPath and emptyDir volumes
"""
