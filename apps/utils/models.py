# utils/models.py

"""
Base models for the Academy administration system.

Key Features:
- Creation/update timestamps on every record
- Acting-user tracking populated from an explicit ServiceContext
- Append-only audit log written by the service layer
"""

from django.core.exceptions import ObjectDoesNotExist
from django.db import models
import logging

logger = logging.getLogger(__name__)


# =============================================================================
# BASE MODEL
# =============================================================================

class BaseModel(models.Model):
    """
    Abstract base model with timestamp and user tracking fields.

    User tracking uses CharFields rather than foreign keys so ledger rows
    survive the removal of the staff account that created them.
    Services call ``set_actor(context)`` before saving.
    """

    created_at = models.DateTimeField(
        "Created At",
        auto_now_add=True,
        db_index=True,
    )
    updated_at = models.DateTimeField(
        "Updated At",
        auto_now=True,
    )
    created_by_id = models.CharField(
        "Created By ID",
        max_length=50,
        null=True,
        blank=True,
        db_index=True,
        help_text="ID of user who created this record"
    )
    updated_by_id = models.CharField(
        "Updated By ID",
        max_length=50,
        null=True,
        blank=True,
        help_text="ID of user who last updated this record"
    )

    class Meta:
        abstract = True

    def set_actor(self, context):
        """Stamp the acting user from a ServiceContext onto this record."""
        if context is None or context.user_id is None:
            return
        if self._state.adding and not self.created_by_id:
            self.created_by_id = str(context.user_id)
        self.updated_by_id = str(context.user_id)

    def get_created_by(self):
        """Get the user who created this record"""
        if not self.created_by_id:
            return None
        try:
            from django.contrib.auth import get_user_model
            User = get_user_model()
            return User.objects.get(pk=self.created_by_id)
        except (ObjectDoesNotExist, ValueError) as e:
            logger.error(f"Error fetching created_by user: {e}")
            return None

    @property
    def created_by_name(self):
        user = self.get_created_by()
        if user is None:
            return "System"
        return user.get_full_name() or user.username


# =============================================================================
# AUDIT LOG MODEL
# =============================================================================

class AuditLog(models.Model):
    """
    Append-only record of every mutating action.

    Rows are inserted by ``utils.audit.log_activity`` inside the same
    transaction as the change they describe, so a rolled back change
    never leaves an audit row behind and vice versa.
    """

    ACTION_CHOICES = (
        ('fee_created', 'Fee Created'),
        ('fee_updated', 'Fee Updated'),
        ('fee_deleted', 'Fee Deleted'),
        ('fee_assigned', 'Fee Assigned'),
        ('payment_recorded', 'Payment Recorded'),
        ('ledger_reconciled', 'Ledger Reconciled'),
        ('supply_created', 'Supply Created'),
        ('supply_updated', 'Supply Updated'),
        ('supply_deleted', 'Supply Deleted'),
        ('supply_distributed', 'Supply Distributed'),
        ('student_created', 'Student Created'),
        ('student_updated', 'Student Updated'),
        ('student_deleted', 'Student Deleted'),
    )

    user_id = models.CharField(
        "User ID",
        max_length=50,
        null=True,
        blank=True,
        db_index=True,
        help_text="ID of user who performed this action"
    )
    action = models.CharField("Action", max_length=50, choices=ACTION_CHOICES, db_index=True)
    details = models.TextField("Details", blank=True)

    # What was touched
    content_type = models.CharField("Model Type", max_length=100, blank=True, db_index=True)
    object_id = models.CharField("Object ID", max_length=100, blank=True)

    ip_address = models.GenericIPAddressField("IP Address", null=True, blank=True)
    created_at = models.DateTimeField("Created At", auto_now_add=True, db_index=True)

    class Meta:
        ordering = ['-created_at', '-id']
        indexes = [
            models.Index(fields=['content_type', 'object_id'], name='audit_target_idx'),
            models.Index(fields=['user_id', 'created_at'], name='audit_user_time_idx'),
        ]
        verbose_name = "Audit Log"
        verbose_name_plural = "Audit Logs"

    def __str__(self):
        return f"{self.action} by {self.user_id or 'system'} at {self.created_at}"

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValueError("Audit log entries are append-only and cannot be modified")
        return super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValueError("Audit log entries are append-only and cannot be deleted")

    # -------------------------------------------------------------------------
    # HELPERS
    # -------------------------------------------------------------------------

    def get_user(self):
        """Get the user who performed this action"""
        if not self.user_id:
            return None
        try:
            from django.contrib.auth import get_user_model
            User = get_user_model()
            return User.objects.get(pk=self.user_id)
        except (ObjectDoesNotExist, ValueError) as e:
            logger.error(f"Error fetching audit log user: {e}")
            return None

    def get_summary(self):
        return f"{self.get_action_display()}: {self.details}"

    @classmethod
    def get_recent_activity(cls, limit=50):
        """Get recent audit activity across all models"""
        return cls.objects.all()[:limit]

    @classmethod
    def get_object_history(cls, obj):
        """Get complete history for a specific object"""
        content_type = f"{obj._meta.app_label}.{obj._meta.model_name}"
        return cls.objects.filter(content_type=content_type, object_id=str(obj.pk))
