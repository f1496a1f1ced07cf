"""
An append-only log of the domain events of each organization: forms
being published, submissions arriving and reviews being submitted.

Events are recorded by signal receivers, so the apps that emit them
don't depend on this one.

NOTE: If you make any edits to this file, you need to then generate a
matching migration for it using:

    ./manage.py makemigrations events

"""
import logging

from django.db import DatabaseError, models, transaction
from django.dispatch import receiver
from django.utils.timezone import now

from formreview.forms.signals import form_published
from formreview.organizations.models import Organization
from formreview.review.signals import review_submitted
from formreview.submissions.signals import submission_created

logger = logging.getLogger(__name__)  # pylint: disable=invalid-name


class DomainEvent(models.Model):
    """A recorded event. Never modified after it's written."""
    FORM_PUBLISHED = "form.published"
    SUBMISSION_CREATED = "submission.created"
    REVIEW_SUBMITTED = "review.submitted"

    EVENT_TYPE_CHOICES = (
        (FORM_PUBLISHED, "Form published"),
        (SUBMISSION_CREATED, "Submission created"),
        (REVIEW_SUBMITTED, "Review submitted"),
    )

    organization = models.ForeignKey(Organization, related_name="events", on_delete=models.CASCADE)
    event_type = models.CharField(max_length=50, choices=EVENT_TYPE_CHOICES, db_index=True)
    payload = models.JSONField(default=dict)
    created_at = models.DateTimeField(default=now, db_index=True)

    class Meta:
        app_label = "events"
        ordering = ["-created_at", "-id"]

    def __str__(self):
        return f"DomainEvent {self.event_type} ({self.organization_id})"

    @classmethod
    def record(cls, organization_id, event_type, payload):
        """
        Store an event.

        Failing to store an event is logged and does not fail the action
        that caused it.

        Returns:
            DomainEvent or None
        """
        try:
            with transaction.atomic():
                return cls.objects.create(organization_id=organization_id, event_type=event_type, payload=payload)
        except DatabaseError:
            logger.exception("Could not record %s event for organization %s", event_type, organization_id)
            return None


@receiver(form_published)
def record_form_published(sender, **kwargs):  # pylint: disable=unused-argument
    """
    Record that a form published new versions.

    Kwargs:
        form (Form), form_version (FormVersion), rubric_version (RubricVersion)
    """
    form = kwargs['form']
    DomainEvent.record(form.organization_id, DomainEvent.FORM_PUBLISHED, {
        'form_id': form.id,
        'form_version': kwargs['form_version'].version,
        'rubric_version': kwargs['rubric_version'].version,
    })


@receiver(submission_created)
def record_submission_created(sender, **kwargs):  # pylint: disable=unused-argument
    submission = kwargs['submission']
    DomainEvent.record(submission.organization_id, DomainEvent.SUBMISSION_CREATED, {
        'submission_uuid': str(submission.uuid),
        'form_id': submission.form_id,
    })


@receiver(review_submitted)
def record_review_submitted(sender, **kwargs):  # pylint: disable=unused-argument
    """
    Record that a reviewer submitted their review.

    Kwargs:
        review (Review), submission (Submission)
    """
    review = kwargs['review']
    submission = kwargs['submission']
    DomainEvent.record(submission.organization_id, DomainEvent.REVIEW_SUBMITTED, {
        'review_id': review.id,
        'submission_uuid': str(submission.uuid),
        'reviewer_id': review.reviewer_id,
    })
