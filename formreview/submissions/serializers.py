"""
Serializers are created to ensure models do not have to be accessed outside the
scope of the submissions API.
"""


from rest_framework import serializers
from rest_framework.fields import DateTimeField, DecimalField

from .models import Submission, SubmissionAggregate


class SubmissionAggregateSerializer(serializers.ModelSerializer):
    """
    Serialize a `SubmissionAggregate` model.
    """
    composite_score = DecimalField(max_digits=12, decimal_places=4, coerce_to_string=False, allow_null=True)
    last_review_at = DateTimeField(format=None, allow_null=True)

    class Meta:
        model = SubmissionAggregate
        fields = ('reviews_count', 'composite_score', 'last_review_at')


class SubmissionSerializer(serializers.ModelSerializer):
    """
    Serialize a `Submission` model.
    """
    uuid = serializers.UUIDField(format='hex_verbose', read_only=True)
    submitted_at = DateTimeField(format=None, read_only=True)

    class Meta:
        model = Submission
        fields = (
            'uuid',
            'organization',
            'form',
            'form_version',
            'rubric_version',
            'submitter_email',
            'data',
            'submitted_at',
            'status',
            'status_changed',
        )
        read_only_fields = ('organization', 'form', 'form_version', 'rubric_version', 'status', 'status_changed')


class SubmissionRequestSerializer(serializers.Serializer):  # pylint: disable=abstract-method
    """
    Validate the public payload of a new submission.
    """
    submitter_email = serializers.EmailField()
    data = serializers.DictField()

    def validate_data(self, value):
        if len(repr(value)) > Submission.MAXSIZE:
            raise serializers.ValidationError("Submission data is too large")
        return value
