"""
The visibility policy engine decides whether a user may see other
reviewers' reviews, and the review aggregate, of a submission.

The policy is read from the submission's form on every call, so a change
of the form's visibility settings applies to its existing submissions
straight away.

Organization admins and super-admins are checked before any policy mode
and see everything. Users outside the submission's organization see
nothing, whatever the mode.
"""
import logging

from django.db import DEFAULT_DB_ALIAS

from formreview.forms.models import Form, VisibilityMode
from formreview.organizations.api import get_role
from formreview.organizations.models import Membership
from formreview.review.models import Review
from formreview.submissions.models import SubmissionAggregate

logger = logging.getLogger(__name__)  # pylint: disable=invalid-name


def reviews_visible(mode, my_review_submitted, reviews_count, min_reviews_required):
    """
    Whether a plain member may see other reviewers' reviews under a mode.

    Args:
        mode (VisibilityMode or str): The form's visibility mode.
        my_review_submitted (bool): Whether the user's own review is submitted.
        reviews_count (int): The submission's count of submitted reviews.
        min_reviews_required (int): The form's current review requirement.

    Returns:
        bool

    Raises:
        ValueError: The mode is not one of the known modes.

    """
    mode = VisibilityMode(mode)
    if mode == VisibilityMode.REVEAL_AFTER_ME_SUBMIT:
        return my_review_submitted
    if mode == VisibilityMode.REVEAL_AFTER_MIN_REVIEWS:
        return reviews_count >= min_reviews_required
    if mode == VisibilityMode.NEVER:
        return False
    if mode == VisibilityMode.AVERAGES_ONLY_UNTIL_LOCK:
        return reviews_count >= min_reviews_required
    raise ValueError(f"Unhandled visibility mode {mode!r}")


def aggregates_visible(mode, my_review_submitted, reviews_count, min_reviews_required):
    """
    Whether a plain member may see the aggregate statistics under a mode.

    Averages-only forms show aggregates unconditionally; every other mode
    shows them exactly when it would show the individual reviews.
    """
    if VisibilityMode(mode) == VisibilityMode.AVERAGES_ONLY_UNTIL_LOCK:
        return True
    return reviews_visible(mode, my_review_submitted, reviews_count, min_reviews_required)


class VisibilityPolicyEngine:
    """
    Evaluates a form's visibility policy for a user and a submission.

    Args:
        using (str): The database alias to read from.
    """

    def __init__(self, using=DEFAULT_DB_ALIAS):
        self.using = using

    def can_see_others_reviews(self, user, submission):
        """
        Check whether the user may see the other reviewers' submitted reviews.

        Args:
            user (User): The requesting user.
            submission (Submission): The submission being viewed.

        Returns:
            bool

        """
        return self._evaluate(user, submission, reviews_visible)

    def can_see_aggregates(self, user, submission):
        """
        Check whether the user may see the submission's aggregate.

        Returns:
            bool
        """
        return self._evaluate(user, submission, aggregates_visible)

    def is_privileged(self, user, role):
        return user.is_superuser or role == Membership.ORG_ADMIN

    def _evaluate(self, user, submission, rule):
        role = get_role(user.id, submission.organization_id, using=self.using)
        if self.is_privileged(user, role):
            return True
        if role is None:
            return False

        form = Form.objects.using(self.using).get(pk=submission.form_id)
        reviews_count = (
            SubmissionAggregate.objects.using(self.using)
            .filter(submission_id=submission.pk)
            .values_list('reviews_count', flat=True)
            .first()
        ) or 0
        my_review_submitted = (
            Review.objects.using(self.using)
            .filter(submission_id=submission.pk, reviewer_id=user.id, submitted_at__isnull=False)
            .exists()
        )
        return rule(form.visibility_mode, my_review_submitted, reviews_count, form.min_reviews_required)
