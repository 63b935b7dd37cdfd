#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Dry-run validation of Pods: can they be converted to ECS task definitions, and what to look at.
"""
