# core/context_processors.py

from django.conf import settings

from accounts.models import UserProfile


def user_context(request):
    """
    Provides the user's role and permission flags used to show or hide
    actions in templates.
    """
    context = {
        'currency_symbol': getattr(settings, 'CURRENCY_SYMBOL', '$'),
    }
    user = request.user
    if not user.is_authenticated:
        return context

    profile = getattr(user, 'profile', None)
    if profile is not None:
        role = profile.role
    elif user.is_superuser:
        role = UserProfile.ROLE_ADMIN
    else:
        role = None

    def allowed(*roles):
        return user.is_superuser or role in roles

    context.update({
        'user_role': role,
        'user_role_display': dict(UserProfile.USER_ROLES).get(role, ''),
        'can_manage_finances': allowed(UserProfile.ROLE_ADMIN, UserProfile.ROLE_FINANCE_OFFICER),
        'can_manage_supplies': allowed(UserProfile.ROLE_ADMIN, UserProfile.ROLE_SUPPLY_OFFICER),
        'can_manage_students': allowed(UserProfile.ROLE_ADMIN, UserProfile.ROLE_STUDENT_OFFICER),
        'is_admin_user': allowed(UserProfile.ROLE_ADMIN),
    })
    return context
