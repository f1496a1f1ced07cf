"""
formreview.forms Django application initialization.
"""

from django.apps import AppConfig


class FormsConfig(AppConfig):
    """
    Configuration for the formreview.forms Django application.
    """

    name = "formreview.forms"
    label = "forms"
