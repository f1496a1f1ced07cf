"""
formreview.review Django application initialization.
"""

from django.apps import AppConfig


class ReviewConfig(AppConfig):
    """
    Configuration for the formreview.review Django application.
    """

    name = "formreview.review"
    label = "review"
