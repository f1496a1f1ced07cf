"""
The review store.

Each reviewer has one review per submission. Saving scores appends a new
revision to that review; submitting also moves the review from draft to
submitted, after which it can no longer change. Scores are always checked
against the rubric version pinned to the submission.

"""
import logging

from django.db import DEFAULT_DB_ALIAS, DatabaseError, IntegrityError, transaction

from formreview.review.errors import (
    AggregationError, AlreadySubmittedError, ConflictError, NotFoundError, ReviewInternalError, ValidationError
)
from formreview.review.models import Review, ReviewRevision
from formreview.review.signals import review_submitted
from formreview.submissions.api import get_submission_model
from formreview.submissions.errors import SubmissionNotFoundError

logger = logging.getLogger(__name__)  # pylint: disable=invalid-name

DEFAULT_CREATE_RETRIES = 1
DEFAULT_MAX_COMMENT_SIZE = 1024 * 100  # 100KB


class ReviewStore:
    """
    Persists reviews and their revisions.

    Args:
        aggregation_engine (AggregationEngine): Recomputes the submission's
            aggregate after each submit.

    Keyword Args:
        using (str): The database alias to read and write.
        create_retries (int): How many times a lost review creation race is
            retried as an update before giving up.
        max_comment_size (int): Longer comments are truncated to this many
            characters.

    """

    def __init__(
            self,
            aggregation_engine,
            using=DEFAULT_DB_ALIAS,
            create_retries=DEFAULT_CREATE_RETRIES,
            max_comment_size=DEFAULT_MAX_COMMENT_SIZE,
    ):
        self.aggregation_engine = aggregation_engine
        self.using = using
        self.create_retries = create_retries
        self.max_comment_size = max_comment_size

    def get_submission(self, submission_uuid):
        """
        Load a submission with its form and pinned rubric version.

        Raises:
            NotFoundError
        """
        try:
            return get_submission_model(submission_uuid, using=self.using)
        except SubmissionNotFoundError as ex:
            raise NotFoundError(str(ex)) from ex

    def validate_scores(self, rubric_version, scores):
        """
        Check a score payload against a rubric version.

        Every key must be one of the rubric's question ids and every value
        an integer on the rubric's scale. All required questions must be
        scored. Nothing is clamped.

        Args:
            rubric_version (RubricVersion): The submission's pinned rubric.
            scores (dict): Question id to score.

        Raises:
            ValidationError

        """
        if not isinstance(scores, dict):
            raise ValidationError("Scores must map question ids to scores")

        index = rubric_version.index
        for question_id, score in scores.items():
            if index.find_question(question_id) is None:
                raise ValidationError(f"Unknown question {question_id!r}", question_id=question_id)
            if isinstance(score, bool) or not isinstance(score, int):
                raise ValidationError(
                    f"Score for question {question_id!r} must be an integer", question_id=question_id
                )
            if score < rubric_version.scale_min or score > rubric_version.scale_max:
                raise ValidationError(
                    "Score {} for question {!r} is outside the scale [{}, {}]".format(
                        score, question_id, rubric_version.scale_min, rubric_version.scale_max
                    ),
                    question_id=question_id
                )
            if not index.is_on_scale(score):
                raise ValidationError(
                    "Score {} for question {!r} is not on the scale (step {} from {})".format(
                        score, question_id, rubric_version.scale_step, rubric_version.scale_min
                    ),
                    question_id=question_id
                )

        missing = index.find_missing_required(scores)
        if missing:
            raise ValidationError(f"Missing score for required question {missing[0]!r}", question_id=missing[0])

    def upsert_draft(self, submission, reviewer, scores, comment=None):
        """
        Save the reviewer's scores as a new draft revision.

        Creates the reviewer's review on the first save.

        Returns:
            Review

        Raises:
            ValidationError
            AlreadySubmittedError: The review was already submitted.
            ReviewInternalError

        """
        review, __ = self._save(submission, reviewer, scores, comment, submit=False)
        return review

    def submit(self, submission, reviewer, scores, comment=None):
        """
        Save the reviewer's scores and submit the review.

        Submitting the same scores and comment again returns the submitted
        review unchanged. Either way the submission's aggregate is recomputed
        before returning, so a retry repairs an aggregate a failed earlier
        submit left stale. If the recompute fails the review
        stays submitted and the error is available as `review.aggregation_error`.

        Returns:
            Review

        Raises:
            ValidationError
            AlreadySubmittedError: The review was already submitted with
                different content.
            ReviewInternalError

        """
        review, newly_submitted = self._save(submission, reviewer, scores, comment, submit=True)

        try:
            self.aggregation_engine.recompute(submission)
        except AggregationError as ex:
            logger.warning(
                "Review %s of submission %s was submitted, but its aggregate could not be recomputed: %s",
                review.id, submission.uuid, ex
            )
            review.aggregation_error = ex

        if newly_submitted:
            review_submitted.send(sender=Review, review=review, submission=submission)
        return review

    def get_review(self, submission, reviewer):
        """
        The reviewer's review of the submission with its revisions prefetched.

        Returns:
            Review or None
        """
        return (
            Review.objects.using(self.using)
            .filter(submission=submission, reviewer=reviewer)
            .select_related('reviewer', 'submission')
            .prefetch_related('revisions')
            .first()
        )

    def get_submitted_reviews(self, submission, exclude_reviewer=None):
        """
        Submitted reviews of the submission, oldest first.

        Keyword Args:
            exclude_reviewer (User): Leave out this reviewer's review.

        Returns:
            list of Review
        """
        queryset = (
            Review.objects.using(self.using)
            .filter(submission=submission, submitted_at__isnull=False)
            .select_related('reviewer', 'submission')
            .prefetch_related('revisions')
        )
        if exclude_reviewer is not None:
            queryset = queryset.exclude(reviewer=exclude_reviewer)
        return list(queryset)

    def get_revisions(self, submission, reviewer):
        """
        Every revision of the reviewer's review of the submission, newest first.

        Returns:
            list of ReviewRevision
        """
        return list(
            ReviewRevision.objects.using(self.using)
            .filter(review__submission=submission, review__reviewer=reviewer)
        )

    def _save(self, submission, reviewer, scores, comment, submit):
        """
        Validate and append a revision, submitting the review if asked to.

        Returns:
            tuple: (Review, bool) where the flag tells whether this call
                moved the review to submitted.

        """
        self.validate_scores(submission.rubric_version, scores)
        comment = self._truncate_comment(comment)

        try:
            with transaction.atomic(using=self.using):
                review = self._find_or_create_review(submission, reviewer)
                review.aggregation_error = None

                if review.is_submitted:
                    if submit and self._has_content(review, scores, comment):
                        logger.info("Review %s was already submitted with the same content", review.id)
                        return review, False
                    raise AlreadySubmittedError(
                        f"Review {review.id} was submitted at {review.submitted_at} and can no longer change"
                    )

                ReviewRevision.objects.using(self.using).create(review=review, scores=scores, comment=comment)
                if submit:
                    review.mark_submitted()
                    review.save(using=self.using, update_fields=['submitted_at'])
        except DatabaseError as ex:
            msg = f"An error occurred while saving the review of submission {submission.uuid} by user {reviewer.id}"
            logger.exception(msg)
            raise ReviewInternalError(msg) from ex

        logger.info(
            "%s review %s of submission %s by user %s",
            "Submitted" if submit else "Saved draft of", review.id, submission.uuid, reviewer.id
        )
        return review, submit

    def _find_or_create_review(self, submission, reviewer):
        """
        Lock the reviewer's review, creating it if there is none.

        A lost creation race is retried as a lookup of the row the other
        request created.

        Raises:
            ReviewInternalError: The race was lost more often than allowed.
        """
        attempts = 0
        while True:
            try:
                return self._lock_or_create_review(submission, reviewer)
            except ConflictError as ex:
                attempts += 1
                if attempts > self.create_retries:
                    msg = f"Could not create the review of submission {submission.uuid} by user {reviewer.id}"
                    logger.exception(msg)
                    raise ReviewInternalError(msg) from ex
                logger.info(
                    "Review of submission %s by user %s was created concurrently, retrying (attempt %s)",
                    submission.uuid, reviewer.id, attempts
                )

    def _lock_or_create_review(self, submission, reviewer):
        review = (
            Review.objects.using(self.using)
            .select_for_update()
            .filter(submission=submission, reviewer=reviewer)
            .first()
        )
        if review is not None:
            return review

        try:
            with transaction.atomic(using=self.using):
                return Review.objects.using(self.using).create(submission=submission, reviewer=reviewer)
        except IntegrityError as ex:
            raise ConflictError(
                f"Review of submission {submission.uuid} by user {reviewer.id} already exists"
            ) from ex

    def _has_content(self, review, scores, comment):
        revision = review.latest_revision
        return revision is not None and revision.scores == scores and revision.comment == comment

    def _truncate_comment(self, comment):
        comment = comment or ""
        if len(comment) > self.max_comment_size:
            logger.warning(
                "Truncating review comment of %s characters to %s", len(comment), self.max_comment_size
            )
            comment = comment[:self.max_comment_size]
        return comment
