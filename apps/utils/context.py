# utils/context.py

"""
Explicit acting-user context for service calls.

Every service operation receives a ServiceContext describing who is
performing it. Views build one from the request; management commands use
``ServiceContext.system()``. Services never look at the request or any
thread-local state themselves.
"""

import logging

logger = logging.getLogger(__name__)


class ServiceContext:
    """
    Who is performing a service operation.

    Attributes:
        user_id: Primary key of the acting user (None for system jobs)
        role: Role name from the user's profile, e.g. 'finance_officer'
        ip_address: Client IP address, recorded on audit entries
    """

    SYSTEM_ROLE = 'system'

    def __init__(self, user_id=None, role=None, ip_address=None):
        self.user_id = user_id
        self.role = role
        self.ip_address = ip_address

    def __repr__(self):
        return f"ServiceContext(user_id={self.user_id!r}, role={self.role!r})"

    @property
    def is_system(self):
        return self.role == self.SYSTEM_ROLE

    @classmethod
    def from_request(cls, request):
        """Build a context from an authenticated request."""
        user = getattr(request, 'user', None)
        user_id = None
        role = None

        if user is not None and user.is_authenticated:
            user_id = user.pk
            profile = getattr(user, 'profile', None)
            if profile is not None:
                role = profile.role
            elif user.is_superuser:
                role = 'admin'

        return cls(
            user_id=user_id,
            role=role,
            ip_address=_get_client_ip(request),
        )

    @classmethod
    def system(cls):
        """Context for management commands and maintenance jobs."""
        return cls(user_id=None, role=cls.SYSTEM_ROLE)


def _get_client_ip(request):
    """
    Extract the client's real IP address from the request.

    Handles X-Forwarded-For header for proxied requests.
    """
    x_forwarded_for = request.META.get('HTTP_X_FORWARDED_FOR')
    if x_forwarded_for:
        # X-Forwarded-For can contain multiple IPs, take the first one
        return x_forwarded_for.split(',')[0].strip()
    return request.META.get('REMOTE_ADDR')
