#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Custom exceptions for k8s-ecstask
"""


class PodToEcsBaseException(Exception):
    """
    Top class for k8s-ecstask Exceptions
    """

    def __init__(self, msg, *args):
        super().__init__(msg, *args)


class UnsupportedFeature(PodToEcsBaseException):
    """
    Exception when the Pod uses a feature that has no ECS equivalent and unsupported features are not skipped

    :ivar str feature: the feature kind, as named in k8s_ecstask.rules
    """

    def __init__(self, msg, feature, *args):
        super().__init__(msg, *args)
        self.feature = feature

    def __str__(self):
        return self.args[0]


class InvalidCompatibilities(PodToEcsBaseException, ValueError):
    """
    Exception when the requires-compatibilities annotation of a Pod cannot be parsed
    """


class AdmissionDenied(PodToEcsBaseException):
    """
    Exception when a Pod is refused admission because it carries the watch label
    """

    def __str__(self):
        return self.args[0]
