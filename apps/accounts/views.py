# accounts/views.py
from django.contrib import messages
from django.contrib.auth import login, logout, authenticate, update_session_auth_hash
from django.contrib.auth.decorators import login_required
from django.shortcuts import render, redirect
from django.utils.http import url_has_allowed_host_and_scheme
from django.views.decorators.cache import never_cache
from django.views.decorators.http import require_POST
import logging

from .forms import LoginForm, StaffPasswordChangeForm, UserProfileForm
from .models import UserProfile

logger = logging.getLogger(__name__)


@require_POST
def logout_view(request):
    """Handle user logout"""
    logout(request)
    messages.success(request, "You have been successfully logged out.")
    return redirect('accounts:login')


@never_cache
def login_view(request):
    """Handle user login"""

    # Redirect if already authenticated
    if request.user.is_authenticated:
        return redirect('core:dashboard')

    if request.method == 'POST':
        form = LoginForm(request.POST)

        if form.is_valid():
            user = authenticate(
                request,
                username=form.cleaned_data['username'],
                password=form.cleaned_data['password'],
            )

            if user is not None and user.is_active:
                login(request, user)

                # Handle remember me
                if not form.cleaned_data.get('remember_me'):
                    request.session.set_expiry(0)

                next_url = request.GET.get('next') or request.POST.get('next')
                if next_url and url_has_allowed_host_and_scheme(next_url, allowed_hosts={request.get_host()}):
                    return redirect(next_url)

                messages.success(request, f"Welcome back, {user.get_full_name() or user.username}!")
                return redirect('core:dashboard')

            logger.warning(f"Failed login attempt for username {form.cleaned_data['username']!r}")
            form.add_error(None, "Invalid username or password.")
        else:
            messages.error(request, "Please correct the errors below.")
    else:
        form = LoginForm()

    return render(request, 'accounts/login.html', {'form': form})


@login_required
def profile_view(request):
    """
    Let staff edit their own details and change their password.

    The page carries two forms; the hidden ``action`` field says which
    one was submitted.
    """
    try:
        user_profile = UserProfile.objects.select_related('user').get(user=request.user)
    except UserProfile.DoesNotExist:
        messages.error(request, "User profile not found.")
        return redirect('core:dashboard')

    profile_form = UserProfileForm(instance=user_profile)
    password_form = StaffPasswordChangeForm(user=request.user)

    if request.method == 'POST':
        action = request.POST.get('action')

        if action == 'update_profile':
            profile_form = UserProfileForm(request.POST, instance=user_profile)
            if profile_form.is_valid():
                profile_form.save()
                logger.info(f"User {request.user.pk} updated their profile")
                messages.success(request, "Your profile has been updated successfully.")
                return redirect('accounts:profile')
            messages.error(request, "Please correct the errors below.")

        elif action == 'change_password':
            password_form = StaffPasswordChangeForm(user=request.user, data=request.POST)
            if password_form.is_valid():
                user = password_form.save()
                update_session_auth_hash(request, user)
                logger.info(f"User {user.pk} changed their password")
                messages.success(request, "Your password has been changed successfully.")
                return redirect('accounts:profile')
            messages.error(request, "Please correct the errors below.")

    context = {
        'profile_form': profile_form,
        'password_form': password_form,
        'user_profile': user_profile,
    }
    return render(request, 'accounts/profile.html', context)
