"""
Public interface for reviewing submissions.

Each call builds the review components from settings with `build_services`
unless it is handed ready-made ones, so nothing here holds database
handles between calls.
"""
import logging
from collections import namedtuple

from django.conf import settings
from django.db import DEFAULT_DB_ALIAS

from formreview.organizations.api import require_org_role
from formreview.organizations.errors import OrganizationPermissionError
from formreview.organizations.models import Membership
from formreview.review.api.aggregation import AggregationEngine
from formreview.review.api.facade import DEFAULT_QUEUE_PAGE_SIZE, ReviewQueryFacade
from formreview.review.api.store import DEFAULT_CREATE_RETRIES, DEFAULT_MAX_COMMENT_SIZE, ReviewStore
from formreview.review.api.visibility import VisibilityPolicyEngine
from formreview.review.errors import ForbiddenError
from formreview.review.serializers import ReviewQueueItemSerializer, ReviewRevisionSerializer, ReviewSerializer
from formreview.submissions import api as submissions_api

logger = logging.getLogger(__name__)  # pylint: disable=invalid-name

# Roles allowed to write reviews and work through the review queue
REVIEWER_ROLES = (Membership.ORG_ADMIN, Membership.REVIEWER)

AGGREGATION_WARNING = "Your review was submitted, but the submission's scores could not be updated yet."

Services = namedtuple('Services', ['aggregation_engine', 'store', 'policy_engine', 'facade'])


def build_services(using=None):
    """
    Construct the review components for one request.

    Keyword Args:
        using (str): The database alias. Defaults to the
            `FORMREVIEW_DATABASE_ALIAS` setting. It only selects the
            connection used by the review components, so it must reach
            the database that holds the forms and submissions.

    Returns:
        Services

    """
    using = using or getattr(settings, 'FORMREVIEW_DATABASE_ALIAS', DEFAULT_DB_ALIAS)
    aggregation_engine = AggregationEngine(using=using)
    store = ReviewStore(
        aggregation_engine,
        using=using,
        create_retries=getattr(settings, 'FORMREVIEW_REVIEW_CREATE_RETRIES', DEFAULT_CREATE_RETRIES),
        max_comment_size=getattr(settings, 'FORMREVIEW_MAX_COMMENT_SIZE', DEFAULT_MAX_COMMENT_SIZE),
    )
    policy_engine = VisibilityPolicyEngine(using=using)
    facade = ReviewQueryFacade(
        store,
        policy_engine,
        using=using,
        queue_page_size=getattr(settings, 'FORMREVIEW_REVIEW_QUEUE_PAGE_SIZE', DEFAULT_QUEUE_PAGE_SIZE),
    )
    return Services(aggregation_engine, store, policy_engine, facade)


def submit_review(submission_uuid, reviewer, scores, comment=None, submit=False, services=None):
    """
    Save a reviewer's scores for a submission, as a draft or as their final review.

    Args:
        submission_uuid (str): The submission being reviewed.
        reviewer (User): The reviewer, who must be an organization admin or
            reviewer in the submission's organization.
        scores (dict): Question id to integer score, checked against the
            rubric version pinned to the submission.

    Keyword Args:
        comment (str): Optional free-text comment.
        submit (bool): Submit the review instead of saving a draft.
        services (Services): Components to use instead of building new ones.

    Returns:
        dict: The serialized review with its latest revision, plus a
            `warnings` list that is non-empty when the review was submitted
            but the aggregate could not be recomputed.

    Raises:
        NotFoundError
        ForbiddenError
        ValidationError
        AlreadySubmittedError
        ReviewInternalError

    Examples:
        >>> submit_review(uuid, user, {"q1": 5, "q2": 4}, comment="Solid", submit=True)
        {
            'id': 3,
            'submission': '5a2c...',
            'reviewer': {'id': 7, 'username': 'ada', 'email': 'ada@example.com'},
            'state': 'submitted',
            'created_at': datetime.datetime(2026, 3, 1, 10, 0, tzinfo=<UTC>),
            'submitted_at': datetime.datetime(2026, 3, 1, 10, 5, tzinfo=<UTC>),
            'latest_revision': {'id': 9, 'scores': {'q1': 5, 'q2': 4}, 'comment': 'Solid', ...},
            'warnings': [],
        }

    """
    services = services or build_services()
    submission = services.store.get_submission(submission_uuid)
    _require_role(reviewer, submission.organization_id, REVIEWER_ROLES, services.store.using)

    if submit:
        review = services.store.submit(submission, reviewer, scores, comment)
    else:
        review = services.store.upsert_draft(submission, reviewer, scores, comment)

    review_dict = dict(ReviewSerializer(review).data)
    review_dict['warnings'] = [AGGREGATION_WARNING] if review.aggregation_error else []
    return review_dict


def get_visible_reviews(user, submission_uuid, services=None):
    """
    The reviews of a submission the user may see.

    Returns:
        dict: `my_review` (serialized review or None), `others` (list of
            serialized submitted reviews) and `can_see_others` (bool).

    Raises:
        NotFoundError

    """
    services = services or build_services()
    submission = services.store.get_submission(submission_uuid)
    visible = services.facade.get_visible_reviews(user, submission)
    my_review = visible['my_review']
    return {
        'my_review': ReviewSerializer(my_review).data if my_review is not None else None,
        'others': list(ReviewSerializer(visible['others'], many=True).data),
        'can_see_others': visible['can_see_others'],
    }


def can_see_aggregates(user, submission_uuid, services=None):
    """
    Check whether the user may see the submission's aggregate.

    Raises:
        NotFoundError
    """
    services = services or build_services()
    submission = services.store.get_submission(submission_uuid)
    return services.policy_engine.can_see_aggregates(user, submission)


def get_aggregate(submission_uuid, services=None):
    """
    The submission's review aggregate.

    Returns:
        dict: `reviews_count`, `composite_score` and `last_review_at`, or
            None when the submission is unknown or has no aggregate.
    """
    services = services or build_services()
    return submissions_api.get_aggregate(submission_uuid, using=services.store.using)


def get_review_history(user, submission_uuid, services=None):
    """
    The user's own revisions of their review of a submission, newest first.

    Raises:
        NotFoundError
    """
    services = services or build_services()
    submission = services.store.get_submission(submission_uuid)
    return list(ReviewRevisionSerializer(services.facade.get_review_history(user, submission), many=True).data)


def get_review_queue(user, org_id, page=1, page_size=None, services=None):
    """
    Submissions in the organization waiting for the user's review.

    Returns:
        dict: `results` (serialized submissions with their review counts),
            `page`, `num_pages` and `count`.

    Raises:
        ForbiddenError

    """
    services = services or build_services()
    _require_role(user, org_id, REVIEWER_ROLES, services.store.using)
    queue_page = services.facade.get_review_queue(user, org_id, page=page, page_size=page_size)
    return {
        'results': list(ReviewQueueItemSerializer(queue_page.object_list, many=True).data),
        'page': queue_page.number,
        'num_pages': queue_page.paginator.num_pages,
        'count': queue_page.paginator.count,
    }


def _require_role(user, org_id, allowed_roles, using):
    try:
        return require_org_role(user, org_id, allowed_roles, using=using)
    except OrganizationPermissionError as ex:
        raise ForbiddenError(str(ex)) from ex
