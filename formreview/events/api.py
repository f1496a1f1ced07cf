"""
Public interface for reading the domain event log.
"""
from rest_framework import serializers
from rest_framework.fields import DateTimeField

from .models import DomainEvent


class DomainEventSerializer(serializers.ModelSerializer):
    created_at = DateTimeField(format=None, read_only=True)

    class Meta:
        model = DomainEvent
        fields = ('id', 'organization', 'event_type', 'payload', 'created_at')


def get_events(org_id, event_type=None):
    """
    List an organization's events, newest first.

    Args:
        org_id (int): The organization.

    Keyword Args:
        event_type (str): Only return events of this type, such as
            "review.submitted".

    Returns:
        list of dict

    """
    events = DomainEvent.objects.filter(organization_id=org_id)
    if event_type is not None:
        events = events.filter(event_type=event_type)
    return list(DomainEventSerializer(events, many=True).data)
