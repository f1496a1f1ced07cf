"""
Public interface for forms and their published versions.

Forms are edited freely, but every publish freezes the current field
schema and rubric into new, immutable version rows. Submissions pin those
versions; see `formreview.submissions.api`.
"""
import logging

from django.db import DatabaseError, IntegrityError, transaction
from django.db.models import Max

from formreview.organizations.models import Organization

from .errors import FormInternalError, FormNotFoundError, FormRequestError
from .models import Form, FormVersion, RubricVersion
from .serializers import FormSerializer, FormVersionSerializer, RubricVersionSerializer
from .signals import form_published

logger = logging.getLogger(__name__)  # pylint: disable=invalid-name

FORM_SETTINGS_FIELDS = ('name', 'status', 'min_reviews_required', 'visibility_mode', 'visibility_threshold')


def get_form(form_id):
    """
    Retrieve a form model.

    Raises:
        FormNotFoundError
    """
    try:
        return Form.objects.select_related('organization').get(pk=form_id)
    except (Form.DoesNotExist, ValueError) as ex:
        raise FormNotFoundError(f"No form with id {form_id}") from ex


def create_form(org_id, name, slug, **form_settings):
    """
    Create a new draft form in an organization.

    Args:
        org_id (int): The owning organization.
        name (str): Display name.
        slug (str): URL slug, unique within the organization.

    Keyword Arguments:
        min_reviews_required (int), visibility_mode (str), visibility_threshold (int)

    Returns:
        dict: The serialized form.

    Raises:
        FormRequestError: The organization is unknown, the settings are
            invalid, or the slug is already used.
        FormInternalError

    """
    if not Organization.objects.filter(pk=org_id).exists():
        raise FormRequestError({'organization': [f"No organization with id {org_id}"]})

    serializer = FormSerializer(data=dict(form_settings, name=name, slug=slug))
    if not serializer.is_valid():
        raise FormRequestError(serializer.errors)

    try:
        with transaction.atomic():
            form = serializer.save(organization_id=org_id)
    except IntegrityError as ex:
        raise FormRequestError({'slug': [f"A form with slug {slug!r} already exists"]}) from ex
    except DatabaseError as ex:
        msg = f"An error occurred while creating form {slug!r} for organization {org_id}"
        logger.exception(msg)
        raise FormInternalError(msg) from ex

    logger.info("Created form %s in organization %s", form.id, org_id)
    return serializer.data


def update_form_settings(form_id, **form_settings):
    """
    Change a form's status, review requirement or visibility policy.

    Visibility is evaluated when reviews are read, so the change applies to
    every existing submission of the form at once.

    Returns:
        dict: The serialized form.

    Raises:
        FormNotFoundError
        FormRequestError

    """
    unknown = set(form_settings) - set(FORM_SETTINGS_FIELDS)
    if unknown:
        raise FormRequestError({field: ["This setting cannot be changed"] for field in unknown})

    form = get_form(form_id)
    serializer = FormSerializer(form, data=form_settings, partial=True)
    if not serializer.is_valid():
        raise FormRequestError(serializer.errors)

    try:
        serializer.save()
    except DatabaseError as ex:
        msg = f"An error occurred while updating settings of form {form_id}"
        logger.exception(msg)
        raise FormInternalError(msg) from ex

    logger.info("Updated settings of form %s: %s", form_id, sorted(form_settings))
    return serializer.data


def publish_form(form_id, form_schema, rubric_dict, notes=None):
    """
    Publish the next version of a form's schema and rubric.

    Both versions are created in one transaction. A draft form is opened for
    submissions. Rubric weights that do not add up to 1 are accepted.

    Args:
        form_id (int): The form to publish.
        form_schema (dict): Field schema, e.g. `{"fields": [...]}`.
        rubric_dict (dict): `{"questions": [...], "scale_min", "scale_max", "scale_step"}`.

    Keyword Arguments:
        notes (str): Release notes kept with the form version.

    Returns:
        dict: `{"form_version": {...}, "rubric_version": {...}}`

    Raises:
        FormNotFoundError
        FormRequestError
        FormInternalError

    """
    form = get_form(form_id)

    form_version_serializer = FormVersionSerializer(data={'schema': form_schema, 'notes': notes or ""})
    rubric_serializer = RubricVersionSerializer(data=rubric_dict)
    errors = {}
    if not form_version_serializer.is_valid():
        errors.update(form_version_serializer.errors)
    if not rubric_serializer.is_valid():
        errors.update(rubric_serializer.errors)
    if errors:
        raise FormRequestError(errors)

    try:
        with transaction.atomic():
            # Lock the form so concurrent publishes pick distinct version numbers
            form = Form.objects.select_for_update().get(pk=form.pk)
            next_form_version = (form.versions.aggregate(latest=Max('version'))['latest'] or 0) + 1
            next_rubric_version = (form.rubric_versions.aggregate(latest=Max('version'))['latest'] or 0) + 1

            form_version = form_version_serializer.save(form=form, version=next_form_version)
            rubric_version = rubric_serializer.save(form=form, version=next_rubric_version)

            if form.status == Form.DRAFT:
                form.status = Form.OPEN
                form.save()
    except DatabaseError as ex:
        msg = f"An error occurred while publishing form {form_id}"
        logger.exception(msg)
        raise FormInternalError(msg) from ex

    total_weight = rubric_version.total_weight
    if total_weight != 1:
        logger.warning(
            "Rubric weights of form %s add up to %s rather than 1", form_id, total_weight
        )

    logger.info(
        "Published form %s as form version %s and rubric version %s",
        form_id, form_version.version, rubric_version.version
    )
    form_published.send(
        sender=Form, form=form, form_version=form_version, rubric_version=rubric_version
    )

    return {
        'form_version': FormVersionSerializer(form_version).data,
        'rubric_version': RubricVersionSerializer.serialized_from_cache(rubric_version),
    }


def get_latest_versions(form_id):
    """
    Return the newest published form and rubric versions of a form.

    Returns:
        tuple: (FormVersion, RubricVersion), either of which may be None
            if the form was never published.

    Raises:
        FormNotFoundError
    """
    form = get_form(form_id)
    return (
        FormVersion.objects.filter(form=form).order_by('-version').first(),
        RubricVersion.objects.filter(form=form).order_by('-version').first(),
    )


def get_rubric_version(rubric_version_id):
    """
    Retrieve a serialized rubric version.

    Returns:
        dict

    Raises:
        FormNotFoundError
    """
    try:
        rubric_version = RubricVersion.objects.get(pk=rubric_version_id)
    except (RubricVersion.DoesNotExist, ValueError) as ex:
        raise FormNotFoundError(f"No rubric version with id {rubric_version_id}") from ex
    return RubricVersionSerializer.serialized_from_cache(rubric_version)
