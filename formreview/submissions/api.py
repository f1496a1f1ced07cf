"""
Public interface for the submissions app.

Submissions are received for open forms only, and are bound to the form's
latest published form and rubric versions at that moment.
"""
import logging

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import DatabaseError, transaction

from formreview.forms.models import Form, FormVersion, RubricVersion

from .errors import SubmissionInternalError, SubmissionNotFoundError, SubmissionRequestError
from .models import Submission, SubmissionAggregate
from .serializers import SubmissionAggregateSerializer, SubmissionRequestSerializer, SubmissionSerializer
from .signals import submission_created

logger = logging.getLogger(__name__)  # pylint: disable=invalid-name


def create_submission(form_id, submitter_email, data):
    """Receive a new submission for a form.

    The submission is pinned to the form's newest published form and rubric
    versions, and its aggregate is created in the same transaction.

    Args:
        form_id (int): The form being answered.
        submitter_email (str): Email address of the submitter.
        data (dict): The answers, keyed by form field id.

    Returns:
        dict: The serialized submission.

    Raises:
        SubmissionRequestError: The form is unknown, not open, has never been
            published, or the payload is invalid.
        SubmissionInternalError

    """
    request_serializer = SubmissionRequestSerializer(data={'submitter_email': submitter_email, 'data': data})
    if not request_serializer.is_valid():
        raise SubmissionRequestError(request_serializer.errors)

    try:
        form = Form.objects.get(pk=form_id)
    except (Form.DoesNotExist, ValueError) as ex:
        raise SubmissionRequestError({'form': [f"No form with id {form_id}"]}) from ex

    if form.status != Form.OPEN:
        raise SubmissionRequestError({'form': ["Form is not accepting submissions"]})

    form_version = FormVersion.objects.filter(form=form).order_by('-version').first()
    rubric_version = RubricVersion.objects.filter(form=form).order_by('-version').first()
    if form_version is None or rubric_version is None:
        raise SubmissionRequestError({'form': ["Form has not been published"]})

    try:
        with transaction.atomic():
            submission = Submission.objects.create(
                organization_id=form.organization_id,
                form=form,
                form_version=form_version,
                rubric_version=rubric_version,
                **request_serializer.validated_data
            )
            SubmissionAggregate.objects.create(submission=submission)
    except DatabaseError as ex:
        msg = f"An error occurred while creating a submission for form {form_id}"
        logger.exception(msg)
        raise SubmissionInternalError(msg) from ex

    logger.info(
        "Created submission %s for form %s (form version %s, rubric version %s)",
        submission.uuid, form_id, form_version.version, rubric_version.version
    )
    submission_created.send(sender=Submission, submission=submission)
    return SubmissionSerializer(submission).data


def get_submission_model(submission_uuid, using=None):
    """
    Retrieve a submission model with its form, organization and pinned rubric.

    Raises:
        SubmissionNotFoundError
    """
    queryset = Submission.objects.select_related('form', 'organization', 'rubric_version')
    if using is not None:
        queryset = queryset.using(using)
    try:
        return queryset.get(uuid=submission_uuid)
    except (Submission.DoesNotExist, DjangoValidationError, ValueError) as ex:
        raise SubmissionNotFoundError(f"No submission with uuid {submission_uuid}") from ex


def get_submission(submission_uuid):
    """
    Retrieve a serialized submission.

    Returns:
        dict

    Raises:
        SubmissionNotFoundError
    """
    return SubmissionSerializer(get_submission_model(submission_uuid)).data


def get_aggregate(submission_uuid, using=None):
    """
    Retrieve the review aggregate of a submission.

    Returns:
        dict: `{"reviews_count", "composite_score", "last_review_at"}`, or
            None if the submission has no aggregate.

    """
    queryset = SubmissionAggregate.objects.using(using) if using else SubmissionAggregate.objects
    try:
        aggregate = queryset.filter(submission__uuid=submission_uuid).first()
    except (DjangoValidationError, ValueError):
        return None
    if aggregate is None:
        return None
    return SubmissionAggregateSerializer(aggregate).data
