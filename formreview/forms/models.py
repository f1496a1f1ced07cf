"""
Django models for forms and the versions they publish.

A form is the mutable, organization-owned definition of a call for
submissions: its lifecycle status, how many reviews each submission needs,
and the policy deciding when reviewers see each other's work.

Every publish creates a new `FormVersion` and a new `RubricVersion`.
Submissions pin the versions current at submission time, so neither model
may be changed after it's written.

NOTE: If you make any edits to this file, you need to then generate a
matching migration for it using:

    ./manage.py makemigrations forms

"""


import logging

from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.utils.timezone import now

from lazy import lazy
from simple_history.models import HistoricalRecords

from formreview.organizations.models import Organization

logger = logging.getLogger(__name__)  # pylint: disable=invalid-name


class VisibilityMode(models.TextChoices):
    """When reviewers may see their peers' reviews of a submission."""
    REVEAL_AFTER_ME_SUBMIT = "REVEAL_AFTER_ME_SUBMIT", "After I submit my review"
    REVEAL_AFTER_MIN_REVIEWS = "REVEAL_AFTER_MIN_REVIEWS", "After the minimum number of reviews"
    NEVER = "NEVER", "Never"
    AVERAGES_ONLY_UNTIL_LOCK = "AVERAGES_ONLY_UNTIL_LOCK", "Averages only until locked"


class Form(models.Model):
    """
    A call for submissions owned by an organization.

    The visibility settings are read every time reviews are requested, so
    changing them affects all of the form's submissions immediately.
    The change history is kept for auditing.
    """
    DRAFT = "draft"
    OPEN = "open"
    CLOSED = "closed"
    ARCHIVED = "archived"

    STATUS_CHOICES = (
        (DRAFT, "Draft"),
        (OPEN, "Open"),
        (CLOSED, "Closed"),
        (ARCHIVED, "Archived"),
    )

    organization = models.ForeignKey(Organization, related_name="forms", on_delete=models.CASCADE)
    name = models.CharField(max_length=255)
    slug = models.SlugField(max_length=100)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=DRAFT, db_index=True)

    min_reviews_required = models.PositiveIntegerField(default=1, validators=[MinValueValidator(1)])
    visibility_mode = models.CharField(
        max_length=32,
        choices=VisibilityMode.choices,
        default=VisibilityMode.REVEAL_AFTER_ME_SUBMIT,
    )
    visibility_threshold = models.PositiveIntegerField(null=True, blank=True, validators=[MinValueValidator(1)])

    created_at = models.DateTimeField(default=now)

    history = HistoricalRecords()

    class Meta:
        app_label = "forms"
        ordering = ["-created_at", "-id"]
        unique_together = (("organization", "slug"),)

    def __str__(self):
        return f"Form {self.slug}"


class FormVersion(models.Model):
    """A published snapshot of the form's field schema."""
    form = models.ForeignKey(Form, related_name="versions", on_delete=models.CASCADE)
    version = models.PositiveIntegerField()
    schema = models.JSONField(default=dict)
    published_at = models.DateTimeField(default=now)
    notes = models.TextField(blank=True, default="")

    class Meta:
        app_label = "forms"
        ordering = ["form", "-version"]
        unique_together = (("form", "version"),)

    def __str__(self):
        return f"FormVersion {self.form_id} v{self.version}"


class RubricVersion(models.Model):
    """
    The scoring rubric a submission is reviewed against.

    .. warning::
       Never change RubricVersion or RubricQuestion data after it's written!

    Submissions are bound to the rubric version current when they were
    submitted, and reviews are validated and aggregated against it.
    Republishing the form creates a new version instead.
    """
    form = models.ForeignKey(Form, related_name="rubric_versions", on_delete=models.CASCADE)
    version = models.PositiveIntegerField()

    scale_min = models.IntegerField(default=1)
    scale_max = models.IntegerField(default=5)
    scale_step = models.PositiveIntegerField(default=1, validators=[MinValueValidator(1)])

    published_at = models.DateTimeField(default=now)

    class Meta:
        app_label = "forms"
        ordering = ["form", "-version"]
        unique_together = (("form", "version"),)

    def __str__(self):
        return f"RubricVersion {self.form_id} v{self.version}"

    @lazy
    def index(self):
        """
        Load the rubric's questions and return an index that allows
        them to be queried without hitting the database again.

        Returns:
            RubricIndex

        """
        return RubricIndex(self)

    @property
    def total_weight(self):
        return sum(question.weight for question in self.questions.all())


class RubricQuestion(models.Model):
    """
    One scored question of a rubric.

    Weights are not required to sum to 1 across the rubric.
    """
    rubric_version = models.ForeignKey(RubricVersion, related_name="questions", on_delete=models.CASCADE)

    # Identifier used as the key of a review's scores
    question_id = models.CharField(max_length=100)
    label = models.CharField(max_length=255)
    description = models.TextField(blank=True, default="")
    weight = models.DecimalField(
        max_digits=5,
        decimal_places=4,
        validators=[MinValueValidator(0), MaxValueValidator(1)],
    )
    required = models.BooleanField(default=True)

    # 0-based order in the rubric
    order_num = models.PositiveIntegerField()

    class Meta:
        app_label = "forms"
        ordering = ["rubric_version", "order_num"]
        unique_together = (("rubric_version", "question_id"),)

    def __repr__(self):
        return (
            "RubricQuestion(order_num={0.order_num}, question_id={0.question_id!r}, "
            "weight={0.weight}, required={0.required})"
        ).format(self)

    def __str__(self):
        return repr(self)


class RubricIndex:
    """
    Loads a rubric version's questions into memory so that they
    can be repeatedly queried without hitting the database.
    """

    def __init__(self, rubric_version):
        self.rubric_version = rubric_version
        questions = rubric_version.questions.order_by("order_num")
        self._questions = list(questions)
        self._question_index = {question.question_id: question for question in self._questions}

    @property
    def questions(self):
        """Questions in rubric order."""
        return list(self._questions)

    def find_question(self, question_id):
        """
        Find a question by its identifier.

        Returns:
            RubricQuestion or None

        """
        return self._question_index.get(question_id)

    def find_missing_required(self, question_ids):
        """
        Return the identifiers of required questions not in `question_ids`,
        in rubric order.
        """
        provided = set(question_ids)
        return [
            question.question_id for question in self._questions
            if question.required and question.question_id not in provided
        ]

    def is_on_scale(self, score):
        """Check that a score lies on the rubric's scale grid."""
        rubric = self.rubric_version
        if score < rubric.scale_min or score > rubric.scale_max:
            return False
        return (score - rubric.scale_min) % rubric.scale_step == 0
