"""
Public interface for organization membership.

Other apps ask this module who belongs to an organization and in what
role; they never query `Membership` directly.
"""
import logging

from .errors import OrganizationNotFoundError, OrganizationPermissionError
from .models import Membership, Organization

logger = logging.getLogger(__name__)  # pylint: disable=invalid-name

ROLES = tuple(role for role, __ in Membership.ROLE_CHOICES)


def get_organization(org_id):
    """
    Retrieve an organization by its primary key.

    Raises:
        OrganizationNotFoundError
    """
    try:
        return Organization.objects.get(pk=org_id)
    except (Organization.DoesNotExist, ValueError) as ex:
        raise OrganizationNotFoundError(f"No organization with id {org_id}") from ex


def get_role(user_id, org_id, using=None):
    """
    Return the role the user holds in the organization.

    Args:
        user_id (int): The user's primary key.
        org_id (int): The organization's primary key.

    Keyword Arguments:
        using (str): Database alias to read from.

    Returns:
        str or None: One of "org_admin", "reviewer", "viewer", or None
            if the user has no membership in the organization.

    """
    queryset = Membership.objects.using(using) if using else Membership.objects
    return queryset.filter(
        user_id=user_id, organization_id=org_id
    ).values_list("role", flat=True).first()


def is_org_admin(user, org_id):
    """
    Check whether the user administers the organization.

    Super-admins administer every organization.
    """
    if user.is_superuser:
        return True
    return get_role(user.id, org_id) == Membership.ORG_ADMIN


def require_org_role(user, org_id, allowed_roles, using=None):
    """
    Check that the user holds one of the allowed roles in the organization.

    Super-admins are treated as organization admins everywhere.

    Args:
        user (User): The acting user.
        org_id (int): The organization's primary key.
        allowed_roles (iterable of str): Roles permitted to act.

    Keyword Arguments:
        using (str): Database alias to read from.

    Returns:
        str: The role the user acts with.

    Raises:
        OrganizationPermissionError

    """
    if user.is_superuser:
        return Membership.ORG_ADMIN

    role = get_role(user.id, org_id, using=using)
    if role is None:
        raise OrganizationPermissionError("Not a member of this organization")
    if role not in allowed_roles:
        raise OrganizationPermissionError(
            "Requires one of: {}".format(", ".join(allowed_roles))
        )
    return role


def add_member(org_id, user, role):
    """
    Give the user a role in the organization, replacing any previous role.

    Returns:
        Membership
    """
    if role not in ROLES:
        raise ValueError(f"Unknown role {role!r}")

    membership, created = Membership.objects.update_or_create(
        user=user,
        organization_id=org_id,
        defaults={"role": role},
    )
    logger.info(
        "%s membership of user %s in organization %s with role %s",
        "Created" if created else "Updated", user.id, org_id, role
    )
    return membership
