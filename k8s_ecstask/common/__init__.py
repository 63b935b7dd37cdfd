#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Most commonly used values shared across all modules.
"""

ANNOTATIONS_DOMAIN = "ecs.takutakahashi.dev"
