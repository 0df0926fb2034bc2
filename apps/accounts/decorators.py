# accounts/decorators.py

from functools import wraps
from django.contrib import messages
from django.contrib.auth.decorators import login_required
from django.shortcuts import redirect
import logging

logger = logging.getLogger(__name__)


def role_required(*roles):
    """
    Restrict a view to users whose profile role is in ``roles``.

    Anonymous users are sent to the login page; authenticated users
    without a matching role are redirected to the dashboard with an
    error message. Superusers always pass.

    Example:
        @role_required('admin', 'finance_officer')
        def fee_create(request):
            ...
    """
    def decorator(view_func):
        @login_required
        @wraps(view_func)
        def wrapper(request, *args, **kwargs):
            user = request.user
            profile = getattr(user, 'profile', None)

            allowed = user.is_superuser or (profile is not None and profile.role in roles)
            if not allowed:
                logger.warning(
                    f"User {user.pk} denied access to {request.path} "
                    f"(role={getattr(profile, 'role', None)}, required={roles})"
                )
                messages.error(request, "You do not have permission to access that page.")
                return redirect('core:dashboard')

            return view_func(request, *args, **kwargs)
        return wrapper
    return decorator
