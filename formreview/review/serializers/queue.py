"""
Serializer for the entries of a reviewer's queue.
"""


from rest_framework import serializers
from rest_framework.fields import DateTimeField

from formreview.submissions.models import Submission

__all__ = ['ReviewQueueItemSerializer']


class ReviewQueueItemSerializer(serializers.ModelSerializer):
    """A submission waiting for the reviewer, with its review count so far."""
    uuid = serializers.UUIDField(format='hex_verbose', read_only=True)
    form_name = serializers.CharField(source='form.name', read_only=True)
    reviews_count = serializers.IntegerField(source='aggregate.reviews_count', read_only=True)
    submitted_at = DateTimeField(format=None, read_only=True)

    class Meta:
        model = Submission
        fields = ('uuid', 'form', 'form_name', 'submitter_email', 'submitted_at', 'status', 'reviews_count')
        read_only_fields = fields
