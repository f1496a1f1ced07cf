"""
formreview.submissions Django application initialization.
"""

from django.apps import AppConfig


class SubmissionsConfig(AppConfig):
    """
    Configuration for the formreview.submissions Django application.
    """

    name = "formreview.submissions"
    label = "submissions"
