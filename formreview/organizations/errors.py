"""
Errors defined by the organizations API.
"""


class OrganizationError(Exception):
    """A generic error raised by the organizations API."""


class OrganizationNotFoundError(OrganizationError):
    """The requested organization does not exist."""


class OrganizationPermissionError(OrganizationError):
    """
    The user is not a member of the organization, or their role
    does not allow the requested action.
    """
