"""
Errors defined by the submissions API.
"""

import copy


class SubmissionError(Exception):
    """An error that occurs during submission actions."""


class SubmissionNotFoundError(SubmissionError):
    """No submission matches the request."""


class SubmissionRequestError(SubmissionError):
    """This error is raised when there was a request-specific error.

    `field_errors` holds the validation errors keyed by field name.
    """

    def __init__(self, field_errors):  # pylint: disable=super-init-not-called
        Exception.__init__(self, repr(field_errors))  # pylint: disable=non-parent-init-called
        self.field_errors = copy.deepcopy(field_errors)


class SubmissionInternalError(SubmissionError):
    """An error internal to the submissions API has occurred."""
