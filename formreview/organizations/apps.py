"""
formreview.organizations Django application initialization.
"""

from django.apps import AppConfig


class OrganizationsConfig(AppConfig):
    """
    Configuration for the formreview.organizations Django application.
    """

    name = "formreview.organizations"
    label = "organizations"
