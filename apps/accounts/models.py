# accounts/models.py

from django.contrib.auth.models import User
from django.db import models
import logging

logger = logging.getLogger(__name__)


# =============================================================================
# USER PROFILE MODEL
# =============================================================================

class UserProfile(models.Model):
    """Staff profile carrying the role used for page authorization"""

    ROLE_ADMIN = 'admin'
    ROLE_FINANCE_OFFICER = 'finance_officer'
    ROLE_SUPPLY_OFFICER = 'supply_officer'
    ROLE_STUDENT_OFFICER = 'student_officer'

    USER_ROLES = [
        (ROLE_ADMIN, 'Administrator'),
        (ROLE_FINANCE_OFFICER, 'Finance Officer'),
        (ROLE_SUPPLY_OFFICER, 'Supply Officer'),
        (ROLE_STUDENT_OFFICER, 'Student Officer'),
    ]

    user = models.OneToOneField(
        User,
        on_delete=models.CASCADE,
        related_name='profile'
    )
    role = models.CharField(
        "Role",
        max_length=30,
        choices=USER_ROLES,
        default=ROLE_STUDENT_OFFICER
    )
    phone = models.CharField("Phone", max_length=20, blank=True)

    created_at = models.DateTimeField("Created At", auto_now_add=True)
    updated_at = models.DateTimeField("Updated At", auto_now=True)

    class Meta:
        db_table = 'user_profiles'
        verbose_name = 'User Profile'
        verbose_name_plural = 'User Profiles'
        ordering = ['user__username']

    def __str__(self):
        return f"{self.user.username} - {self.get_role_display()}"

    # -------------------------------------------------------------------------
    # PERMISSION HELPER METHODS
    # -------------------------------------------------------------------------

    def has_role(self, *roles):
        """Superusers pass every role check"""
        return self.user.is_superuser or self.role in roles

    def is_admin_user(self):
        return self.has_role(self.ROLE_ADMIN)

    def can_manage_finances(self):
        return self.has_role(self.ROLE_ADMIN, self.ROLE_FINANCE_OFFICER)

    def can_manage_supplies(self):
        return self.has_role(self.ROLE_ADMIN, self.ROLE_SUPPLY_OFFICER)

    def can_manage_students(self):
        return self.has_role(self.ROLE_ADMIN, self.ROLE_STUDENT_OFFICER)
