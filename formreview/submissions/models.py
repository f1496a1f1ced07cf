"""
Submission models hold the public responses to a form, pinned to the form
and rubric versions that were current when they were received, together
with the aggregate of the reviews they have collected.

NOTE: If you make any edits to this file, you need to then generate a
matching migration for it using:

    ./manage.py makemigrations submissions

"""
import logging
from uuid import uuid4

from django.db import models
from django.utils.timezone import now

from model_utils import Choices
from model_utils.models import StatusModel

from formreview.forms.models import Form, FormVersion, RubricVersion
from formreview.organizations.models import Organization

logger = logging.getLogger(__name__)  # pylint: disable=invalid-name


class Submission(StatusModel):
    """A single response to a form.

    Submissions are never edited by reviewers. The grading `status` is
    derived from the number of submitted reviews by the aggregation engine
    and is never set directly.
    """
    MAXSIZE = 1024 * 100  # 100KB

    STATUS = Choices(  # implicit "status" field
        "ungraded",
        "partially_graded",
        "fully_graded",
    )

    uuid = models.UUIDField(default=uuid4, unique=True, db_index=True, editable=False)

    organization = models.ForeignKey(Organization, related_name="submissions", on_delete=models.CASCADE)
    form = models.ForeignKey(Form, related_name="submissions", on_delete=models.CASCADE)

    # Pinned at submission time; republishing the form never changes these.
    form_version = models.ForeignKey(FormVersion, related_name="submissions", on_delete=models.RESTRICT)
    rubric_version = models.ForeignKey(RubricVersion, related_name="submissions", on_delete=models.RESTRICT)

    submitter_email = models.EmailField(db_index=True)
    data = models.JSONField(default=dict)

    submitted_at = models.DateTimeField(default=now, db_index=True)

    class Meta:
        app_label = "submissions"
        ordering = ["-submitted_at", "-id"]

    def __str__(self):
        return f"Submission {self.uuid}"


class SubmissionAggregate(models.Model):
    """
    Summary of the submitted reviews of a submission.

    Exactly one exists per submission, created alongside it. Only the
    aggregation engine writes to it, and it always recomputes every field
    from the stored reviews rather than adjusting them incrementally.
    """
    submission = models.OneToOneField(Submission, related_name="aggregate", on_delete=models.CASCADE)
    reviews_count = models.PositiveIntegerField(default=0)
    composite_score = models.DecimalField(max_digits=12, decimal_places=4, null=True, blank=True)
    last_review_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        app_label = "submissions"

    def __repr__(self):
        return repr(dict(
            submission=self.submission_id,
            reviews_count=self.reviews_count,
            composite_score=self.composite_score,
            last_review_at=self.last_review_at,
        ))

    def __str__(self):
        return f"SubmissionAggregate {self.submission_id}"
