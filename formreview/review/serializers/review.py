"""
Serializers for reviews, their revisions, and review payloads.
"""


from django.contrib.auth import get_user_model
from rest_framework import serializers
from rest_framework.fields import DateTimeField

from formreview.review.models import Review, ReviewRevision

__all__ = ['ReviewerSerializer', 'ReviewRevisionSerializer', 'ReviewSerializer', 'ReviewUpsertSerializer']


class ReviewerSerializer(serializers.ModelSerializer):
    """The reviewer identity shown beside a review."""

    class Meta:
        model = get_user_model()
        fields = ('id', 'username', 'email')


class ReviewRevisionSerializer(serializers.ModelSerializer):
    """Serializer for :class:`ReviewRevision`."""
    created_at = DateTimeField(format=None, read_only=True)

    class Meta:
        model = ReviewRevision
        fields = ('id', 'scores', 'comment', 'created_at')


class ReviewSerializer(serializers.ModelSerializer):
    """
    Serializer for :class:`Review` including only its latest revision,
    not the full history.
    """
    submission = serializers.UUIDField(source='submission.uuid', format='hex_verbose', read_only=True)
    reviewer = ReviewerSerializer(read_only=True)
    state = serializers.CharField(read_only=True)
    created_at = DateTimeField(format=None, read_only=True)
    submitted_at = DateTimeField(format=None, read_only=True)
    latest_revision = serializers.SerializerMethodField()

    class Meta:
        model = Review
        fields = ('id', 'submission', 'reviewer', 'state', 'created_at', 'submitted_at', 'latest_revision')

    def get_latest_revision(self, review):
        revision = review.latest_revision
        if revision is None:
            return None
        return ReviewRevisionSerializer(revision).data


class ReviewUpsertSerializer(serializers.Serializer):  # pylint: disable=abstract-method
    """
    Validate the body of a save-or-submit request.

    Score values are passed through untouched. The review store checks
    their types and ranges against the rubric.
    """
    scores = serializers.DictField()
    comment = serializers.CharField(required=False, allow_blank=True, allow_null=True, trim_whitespace=False)
    submit = serializers.BooleanField(default=False)
