# supplies/models.py

"""
School Supply Inventory Models

- Supply: an inventory item with its on-hand quantity
- SupplyDistribution: a record of units handed out to a student

``Supply.quantity_available`` is changed only by supplies.services after
creation.
"""

from django.conf import settings
from django.db import models
from django.core.validators import MinValueValidator
import logging

from utils.models import BaseModel
from students.models import Student

logger = logging.getLogger(__name__)


def get_low_stock_threshold():
    return getattr(settings, 'LOW_STOCK_THRESHOLD', 10)


# =============================================================================
# SUPPLY
# =============================================================================

class Supply(BaseModel):
    """Inventory item tracked by on-hand quantity"""

    STOCK_OUT = 'out_of_stock'
    STOCK_LOW = 'low_stock'
    STOCK_IN = 'in_stock'

    STOCK_STATUS_CHOICES = (
        (STOCK_IN, 'In Stock'),
        (STOCK_LOW, 'Low Stock'),
        (STOCK_OUT, 'Out of Stock'),
    )

    name = models.CharField("Supply Name", max_length=100)
    description = models.TextField("Description", blank=True)
    quantity_available = models.PositiveIntegerField("Quantity Available", default=0)
    unit = models.CharField("Unit", max_length=20, help_text="e.g. pieces, boxes, reams")

    class Meta:
        verbose_name = "Supply"
        verbose_name_plural = "Supplies"
        ordering = ['name']
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity_available__gte=0),
                name='supply_quantity_non_negative'
            ),
        ]

    def __str__(self):
        return f"{self.name} ({self.quantity_available} {self.unit})"

    # -------------------------------------------------------------------------
    # PROPERTIES
    # -------------------------------------------------------------------------

    @property
    def stock_status(self):
        if self.quantity_available <= 0:
            return self.STOCK_OUT
        if self.quantity_available <= get_low_stock_threshold():
            return self.STOCK_LOW
        return self.STOCK_IN

    def get_stock_status_display(self):
        return dict(self.STOCK_STATUS_CHOICES)[self.stock_status]

    @property
    def is_low_stock(self):
        return self.stock_status != self.STOCK_IN


# =============================================================================
# SUPPLY DISTRIBUTION
# =============================================================================

class SupplyDistribution(BaseModel):
    """Units of a supply handed out to a student"""

    supply = models.ForeignKey(
        Supply,
        verbose_name="Supply",
        on_delete=models.CASCADE,
        related_name='distributions'
    )
    student = models.ForeignKey(
        Student,
        verbose_name="Student",
        on_delete=models.CASCADE,
        related_name='supply_distributions'
    )
    quantity = models.PositiveIntegerField("Quantity", validators=[MinValueValidator(1)])
    distribution_date = models.DateField("Distribution Date", db_index=True)
    distributed_by_id = models.CharField(
        "Distributed By ID",
        max_length=50,
        null=True,
        blank=True
    )
    notes = models.TextField("Notes", blank=True)

    class Meta:
        verbose_name = "Supply Distribution"
        verbose_name_plural = "Supply Distributions"
        ordering = ['-distribution_date', '-created_at']
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity__gt=0),
                name='distribution_quantity_positive'
            ),
        ]

    def __str__(self):
        return f"{self.quantity} {self.supply.unit} of {self.supply.name} to {self.student.student_number}"

    def get_distributed_by(self):
        if not self.distributed_by_id:
            return None
        from django.contrib.auth import get_user_model
        User = get_user_model()
        return User.objects.filter(pk=self.distributed_by_id).first()
