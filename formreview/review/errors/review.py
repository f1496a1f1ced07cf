"""
Errors raised while storing reviews.
"""
from .base import ReviewError


class ValidationError(ReviewError):
    """The score payload does not fit the submission's rubric.

    `question_id` names the offending question, when there is one.
    Scores are never clamped to make them fit.
    """

    def __init__(self, message, question_id=None):
        super().__init__(message)
        self.question_id = question_id


class AlreadySubmittedError(ReviewError):
    """The review has been submitted and can no longer change."""


class ConflictError(ReviewError):
    """Another request created the same reviewer's review concurrently.

    The review store recovers from this by retrying the write as an update.
    """
