"""
The review query facade assembles what a user may see of a submission's
reviews, and the queue of submissions waiting for their review.
"""
import logging

from django.core.paginator import Paginator
from django.db import DEFAULT_DB_ALIAS
from django.db.models import Exists, OuterRef

from formreview.forms.models import Form
from formreview.review.models import Review
from formreview.submissions.models import Submission

logger = logging.getLogger(__name__)  # pylint: disable=invalid-name

DEFAULT_QUEUE_PAGE_SIZE = 20
MAX_QUEUE_PAGE_SIZE = 100


class ReviewQueryFacade:
    """
    Read-side entry point over the review store and the visibility policy engine.

    Args:
        store (ReviewStore)
        policy_engine (VisibilityPolicyEngine)

    Keyword Args:
        using (str): The database alias to read from.
        queue_page_size (int): Default page size of the review queue.

    """

    def __init__(self, store, policy_engine, using=DEFAULT_DB_ALIAS, queue_page_size=DEFAULT_QUEUE_PAGE_SIZE):
        self.store = store
        self.policy_engine = policy_engine
        self.using = using
        self.queue_page_size = queue_page_size

    def get_visible_reviews(self, user, submission):
        """
        The reviews of a submission the user may see.

        The user's own review is always included, draft or not. Other
        reviewers' reviews are included only once submitted, and only when
        the form's visibility policy allows it. Drafts of other reviewers
        are never returned.

        Args:
            user (User): The requesting user.
            submission (Submission): The submission being viewed.

        Returns:
            dict: `my_review` (Review or None), `others` (list of Review)
                and `can_see_others` (bool).

        """
        my_review = self.store.get_review(submission, user)
        can_see_others = self.policy_engine.can_see_others_reviews(user, submission)
        others = self.store.get_submitted_reviews(submission, exclude_reviewer=user) if can_see_others else []
        return {
            'my_review': my_review,
            'others': others,
            'can_see_others': can_see_others,
        }

    def get_review_history(self, user, submission):
        """The user's own revisions of their review, newest first."""
        return self.store.get_revisions(submission, user)

    def get_review_queue(self, user, org_id, page=1, page_size=None):
        """
        Submissions of the organization's open forms the user has yet to submit a review for.

        The least reviewed come first, and the newest first among those
        with the same number of reviews.

        Args:
            user (User): The reviewer.
            org_id (int): The organization.

        Keyword Args:
            page (int): 1-based page number. Out of range values give the
                nearest page.
            page_size (int): Submissions per page, at most 100.

        Returns:
            django.core.paginator.Page

        """
        page_size = min(page_size or self.queue_page_size, MAX_QUEUE_PAGE_SIZE)
        reviewed_by_user = Review.objects.using(self.using).filter(
            submission=OuterRef('pk'), reviewer_id=user.id, submitted_at__isnull=False
        )
        queryset = (
            Submission.objects.using(self.using)
            .filter(organization_id=org_id, form__status=Form.OPEN)
            .filter(~Exists(reviewed_by_user))
            .select_related('form', 'aggregate')
            .order_by('aggregate__reviews_count', '-submitted_at', '-id')
        )
        return Paginator(queryset, page_size).get_page(page)
