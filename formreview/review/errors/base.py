""" Errors shared by every part of the review API. """


class ReviewError(Exception):
    """ A generic error for errors that occur while reviewing. """


class NotFoundError(ReviewError):
    """The submission, review or rubric version does not exist."""


class ForbiddenError(ReviewError):
    """The caller lacks the organization membership or role the action requires."""


class ReviewInternalError(ReviewError):
    """Error indicating an internal problem independent of API use.

    Raised when an internal error has occurred. This should be independent of
    the actions or parameters given to the API.
    """
