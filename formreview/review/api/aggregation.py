"""
The aggregation engine.

Whenever a review is submitted, the submission's aggregate (submitted
reviews count, weighted composite score) and grading status are recomputed
from scratch out of the stored reviews. Because the result depends only on
stored state, recomputing is idempotent and safe to retry.

"""
import logging
from decimal import ROUND_HALF_UP, Decimal

from django.db import DEFAULT_DB_ALIAS, DatabaseError, transaction
from django.db.models import Prefetch
from django.utils.timezone import now

from formreview.forms.models import Form
from formreview.review.errors import AggregationError
from formreview.review.models import Review, ReviewRevision
from formreview.submissions.models import Submission, SubmissionAggregate

logger = logging.getLogger(__name__)  # pylint: disable=invalid-name

COMPOSITE_SCORE_PRECISION = Decimal("0.0001")


def compute_composite_score(questions, score_sets):
    """
    Fold several reviewers' scores into one weighted mean.

    Scores are pooled per question across all reviewers before weighting:
    each (reviewer, question) score adds `score * weight` to the weighted
    total and `weight` to the total weight. This is not a mean of each
    reviewer's own composite. Questions a reviewer did not score are skipped
    rather than counted as zero, and the weights need not add up to 1.

    Args:
        questions (iterable): Rubric questions with `question_id` and `weight`.
        score_sets (iterable of dict): The authoritative scores of each
            submitted review, keyed by question id.

    Returns:
        Decimal or None: The composite score rounded to four places, or None
            when the total weight is zero (nothing scored, or all weights zero).

    Examples:
        >>> compute_composite_score(questions, [{"q1": 5, "q2": 4}, {"q1": 3, "q2": 5}])
        Decimal('4.0000')

    """
    questions = list(questions)
    total_weighted_score = Decimal(0)
    total_weight = Decimal(0)

    for scores in score_sets:
        for question in questions:
            score = scores.get(question.question_id)
            if score is None:
                continue
            weight = Decimal(question.weight)
            total_weighted_score += Decimal(score) * weight
            total_weight += weight

    if total_weight <= 0:
        return None
    return (total_weighted_score / total_weight).quantize(COMPOSITE_SCORE_PRECISION, rounding=ROUND_HALF_UP)


def derive_status(reviews_count, min_reviews_required):
    """
    Grading status for a number of submitted reviews.

    Always derived from the current count; it does not assume the count
    only grows.
    """
    if reviews_count >= min_reviews_required:
        return Submission.STATUS.fully_graded
    if reviews_count > 0:
        return Submission.STATUS.partially_graded
    return Submission.STATUS.ungraded


class AggregationEngine:
    """
    Recomputes submission aggregates and statuses.

    Args:
        using (str): The database alias to read and write.
    """

    def __init__(self, using=DEFAULT_DB_ALIAS):
        self.using = using

    def recompute(self, submission):
        """
        Recompute a submission's aggregate and status from its submitted reviews.

        The submission's aggregate row is locked for the duration of the transaction, so
        concurrent recomputations for the same submission run one after the
        other and the last one to write has seen every review committed
        before it started.

        Args:
            submission (Submission): The submission to recompute.

        Returns:
            SubmissionAggregate

        Raises:
            AggregationError

        """
        try:
            with transaction.atomic(using=self.using):
                return self._recompute(submission.pk)
        except DatabaseError as ex:
            msg = f"A database error occurred while aggregating reviews of submission {submission.uuid}"
            logger.exception(msg)
            raise AggregationError(msg) from ex
        except Exception as ex:
            msg = f"An unexpected error occurred while aggregating reviews of submission {submission.uuid}"
            logger.exception(msg)
            raise AggregationError(msg) from ex

    def recompute_all(self, submissions):
        """
        Recompute each of the given submissions, continuing past failures.

        Returns:
            tuple: (number recomputed, list of uuids that failed)
        """
        recomputed = 0
        failed = []
        for submission in submissions:
            try:
                self.recompute(submission)
            except AggregationError:
                failed.append(submission.uuid)
            else:
                recomputed += 1
        return recomputed, failed

    def _recompute(self, submission_pk):
        # The aggregate row is the per-submission lock; hold it until commit.
        aggregate, __ = (
            SubmissionAggregate.objects.using(self.using)
            .select_for_update()
            .get_or_create(submission_id=submission_pk)
        )
        submission = (
            Submission.objects.using(self.using)
            .select_related('rubric_version')
            .get(pk=submission_pk)
        )

        latest_first = ReviewRevision.objects.using(self.using).order_by('-created_at', '-id')
        reviews = list(
            Review.objects.using(self.using)
            .filter(submission=submission, submitted_at__isnull=False)
            .prefetch_related(Prefetch('revisions', queryset=latest_first))
        )
        score_sets = [
            review.latest_revision.scores
            for review in reviews
            if review.latest_revision is not None
        ]
        questions = submission.rubric_version.questions.all()

        aggregate.reviews_count = len(reviews)
        aggregate.composite_score = compute_composite_score(questions, score_sets)
        aggregate.last_review_at = now()
        aggregate.save()

        # Read the requirement now; forms may have changed since the submission was loaded.
        min_reviews_required = (
            Form.objects.using(self.using)
            .values_list('min_reviews_required', flat=True)
            .get(pk=submission.form_id)
        )
        status = derive_status(aggregate.reviews_count, min_reviews_required)
        if submission.status != status:
            submission.status = status
            submission.save(update_fields=['status', 'status_changed'])

        logger.info(
            "Aggregated %s submitted reviews of submission %s: composite score %s, status %s",
            aggregate.reviews_count, submission.uuid, aggregate.composite_score, status
        )
        return aggregate
