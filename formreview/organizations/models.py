"""
Organizations own forms, and users take part in an organization's review
work through a membership carrying a single role.

NOTE: If you make any edits to this file, you need to then generate a
matching migration for it using:

    ./manage.py makemigrations organizations

"""


from django.conf import settings
from django.db import models
from django.utils.timezone import now


class Organization(models.Model):
    """A tenant: the owner of forms, submissions and memberships."""
    name = models.CharField(max_length=255)
    slug = models.SlugField(max_length=100, unique=True)
    created_at = models.DateTimeField(default=now)

    class Meta:
        app_label = "organizations"
        ordering = ["name", "id"]

    def __str__(self):
        return self.name


class Membership(models.Model):
    """
    A user's role within a single organization.

    A user has at most one membership per organization.
    """
    ORG_ADMIN = "org_admin"
    REVIEWER = "reviewer"
    VIEWER = "viewer"

    ROLE_CHOICES = (
        (ORG_ADMIN, "Organization admin"),
        (REVIEWER, "Reviewer"),
        (VIEWER, "Viewer"),
    )

    user = models.ForeignKey(settings.AUTH_USER_MODEL, related_name="memberships", on_delete=models.CASCADE)
    organization = models.ForeignKey(Organization, related_name="memberships", on_delete=models.CASCADE)
    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default=VIEWER)
    created_at = models.DateTimeField(default=now)

    class Meta:
        app_label = "organizations"
        unique_together = (("user", "organization"),)

    def __str__(self):
        return f"Membership({self.user_id}, {self.organization_id}, {self.role})"
