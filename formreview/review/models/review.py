"""
Django models for reviews and their revisions.

A reviewer has exactly one `Review` per submission. Every save of the
reviewer's scores appends a `ReviewRevision`; the newest revision is the
review's authoritative state and older ones are kept as history.

A review is a two-state machine: it starts as a draft and becomes
submitted exactly once. Submitted reviews are never modified.

NOTE: If you make any edits to this file, you need to then generate a
matching migration for it using:

    ./manage.py makemigrations review

"""


import logging

from django.conf import settings
from django.db import models
from django.utils.timezone import now

from formreview.submissions.models import Submission

logger = logging.getLogger(__name__)  # pylint: disable=invalid-name

__all__ = ['Review', 'ReviewRevision']


class Review(models.Model):
    """One reviewer's evaluation of one submission."""
    STATE_DRAFT = "draft"
    STATE_SUBMITTED = "submitted"

    submission = models.ForeignKey(Submission, related_name="reviews", on_delete=models.CASCADE)
    reviewer = models.ForeignKey(settings.AUTH_USER_MODEL, related_name="reviews", on_delete=models.CASCADE)

    created_at = models.DateTimeField(default=now)

    # Null while the review is a draft; set once on submission and never cleared.
    submitted_at = models.DateTimeField(null=True, blank=True, db_index=True)

    class Meta:
        app_label = "review"
        ordering = ["created_at", "id"]
        unique_together = (("submission", "reviewer"),)

    def __str__(self):
        return f"Review {self.id} ({self.state})"

    @property
    def state(self):
        return self.STATE_SUBMITTED if self.submitted_at is not None else self.STATE_DRAFT

    @property
    def is_submitted(self):
        return self.submitted_at is not None

    @property
    def latest_revision(self):
        """
        The authoritative revision: the newest by creation time, and for equal
        times the one inserted last. Uses prefetched revisions when available.

        Returns:
            ReviewRevision or None
        """
        return self.revisions.all().first()

    def mark_submitted(self, submitted_at=None):
        """
        Move the review from draft to submitted.

        Note: the caller saves the model.
        """
        if self.is_submitted:
            raise ValueError(f"Review {self.id} was already submitted at {self.submitted_at}")
        self.submitted_at = submitted_at or now()


class ReviewRevision(models.Model):
    """
    A snapshot of a review's scores and comment.

    Revisions are append-only and never mutated.
    """
    review = models.ForeignKey(Review, related_name="revisions", on_delete=models.CASCADE)

    # Question id -> integer score
    scores = models.JSONField(default=dict)
    comment = models.TextField(blank=True, default="")

    created_at = models.DateTimeField(default=now, db_index=True)

    class Meta:
        app_label = "review"
        ordering = ["-created_at", "-id"]

    def __str__(self):
        return f"ReviewRevision {self.id} of review {self.review_id}"
