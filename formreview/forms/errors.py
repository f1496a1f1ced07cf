"""
Errors defined by the forms API.
"""

import copy


class FormError(Exception):
    """An error that occurs while managing forms or their versions."""


class FormNotFoundError(FormError):
    """The requested form or rubric version does not exist."""


class FormRequestError(FormError):
    """This error is raised when the request is invalid.

    `field_errors` holds the validation errors keyed by field name.
    """

    def __init__(self, field_errors):  # pylint: disable=super-init-not-called
        Exception.__init__(self, repr(field_errors))  # pylint: disable=non-parent-init-called
        self.field_errors = copy.deepcopy(field_errors)


class FormInternalError(FormError):
    """An error internal to the forms API has occurred.

    This error is raised when an error occurs that is not caused by incorrect
    use of the API, but rather internal implementation of the underlying
    services.
    """
