"""
formreview.events Django application initialization.
"""

from django.apps import AppConfig


class EventsConfig(AppConfig):
    """
    Configuration for the formreview.events Django application.
    """

    name = "formreview.events"
    label = "events"
