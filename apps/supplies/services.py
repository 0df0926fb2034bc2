# supplies/services.py

"""
Supply Inventory Service Layer

Handles supply records and distributions to students:
- Creating and editing supplies
- Distributing units to a student with a guarded stock decrement
- Deleting a supply together with its distribution history

Every mutating operation runs in one service transaction with its audit
entry. Stock checks use the value read under ``select_for_update`` and the
decrement itself is conditioned on enough stock remaining.
"""

from django.db.models import F
from django.utils import timezone
import logging

from .models import Supply, SupplyDistribution, get_low_stock_threshold
from students.models import Student
from fees.utils import clean_date
from utils.audit import log_activity
from utils.exceptions import InsufficientStockError, NotFoundError, ValidationError
from utils.transactions import service_transaction

logger = logging.getLogger(__name__)


def _get_supply(supply_id, lock=False):
    queryset = Supply.objects.select_for_update() if lock else Supply.objects.all()
    try:
        return queryset.get(pk=supply_id)
    except (Supply.DoesNotExist, ValueError, TypeError):
        raise NotFoundError("Supply not found")


def _clean_quantity(value, field, allow_zero=False):
    if value is None or value == '':
        raise ValidationError(
            "Please fill in all required fields",
            field_errors={field: "This field is required."}
        )
    if isinstance(value, bool):
        raise ValidationError("Quantity must be a whole number", field_errors={field: "Enter a whole number."})
    try:
        quantity = int(str(value).strip())
    except ValueError:
        raise ValidationError("Quantity must be a whole number", field_errors={field: "Enter a whole number."})

    minimum = 0 if allow_zero else 1
    if quantity < minimum:
        message = "Quantity cannot be negative" if allow_zero else "Quantity must be greater than zero"
        raise ValidationError(message, field_errors={field: f"{message}."})
    return quantity


def validate_supply_data(supply_data):
    """
    Validate and normalise supply fields.

    Required: name, unit, quantity_available (>= 0). Optional: description.
    """
    missing = {
        field: "This field is required."
        for field in ('name', 'unit')
        if not str(supply_data.get(field) or '').strip()
    }
    if missing:
        raise ValidationError("Please fill in all required fields", field_errors=missing)

    return {
        'name': str(supply_data['name']).strip(),
        'unit': str(supply_data['unit']).strip(),
        'description': (supply_data.get('description') or '').strip(),
        'quantity_available': _clean_quantity(
            supply_data.get('quantity_available'), 'quantity_available', allow_zero=True
        ),
    }


def validate_distribution_data(distribution_data):
    student = distribution_data.get('student')
    if student in (None, ''):
        raise ValidationError(
            "Please fill in all required fields",
            field_errors={'student': "This field is required."}
        )
    return {
        'student_id': student.pk if isinstance(student, Student) else student,
        'quantity': _clean_quantity(distribution_data.get('quantity'), 'quantity'),
        'distribution_date': clean_date(distribution_data.get('distribution_date'), 'distribution_date'),
        'notes': (distribution_data.get('notes') or '').strip(),
    }


class SupplyService:
    """
    Supply inventory operations.
    """

    @staticmethod
    def create_supply(context, supply_data):
        """
        Add a supply to the inventory.

        Returns:
            Supply instance
        """
        data = validate_supply_data(supply_data)

        with service_transaction("creating the supply"):
            supply = Supply(**data)
            supply.set_actor(context)
            supply.save()
            log_activity(
                context, 'supply_created',
                f"Created supply: {supply.name} ({supply.quantity_available} {supply.unit})",
                target_object=supply,
            )

        logger.info(f"Created supply {supply.pk} '{supply.name}'")
        return supply

    @staticmethod
    def update_supply(context, supply_id, supply_data):
        """
        Edit a supply, including a stock count correction.

        Returns:
            Supply instance
        """
        _get_supply(supply_id)
        data = validate_supply_data(supply_data)

        with service_transaction("updating the supply"):
            supply = _get_supply(supply_id, lock=True)
            previous_quantity = supply.quantity_available
            for field, value in data.items():
                setattr(supply, field, value)
            supply.set_actor(context)
            supply.save()

            details = f"Updated supply ID: {supply.pk} ({supply.name})"
            if previous_quantity != supply.quantity_available:
                details += f", quantity {previous_quantity} -> {supply.quantity_available}"
            log_activity(context, 'supply_updated', details, target_object=supply)

        return supply

    @staticmethod
    def distribute_supply(context, supply_id, distribution_data):
        """
        Hand out units of a supply to a student.

        Args:
            context (ServiceContext): Acting user
            supply_id: Primary key of the Supply
            distribution_data (dict):
                Required:
                    - student: Student instance or primary key
                    - quantity: int > 0
                    - distribution_date: date or ISO string
                Optional:
                    - notes: str

        Returns:
            SupplyDistribution instance

        Raises:
            ValidationError: Malformed input
            NotFoundError: Unknown supply or student
            InsufficientStockError: Quantity exceeds available stock
            PersistenceError: Database failure; nothing was saved
        """
        data = validate_distribution_data(distribution_data)
        quantity = data['quantity']

        with service_transaction("distributing the supply"):
            supply = _get_supply(supply_id, lock=True)
            try:
                student = Student.objects.get(pk=data['student_id'])
            except (Student.DoesNotExist, ValueError, TypeError):
                raise NotFoundError("Student not found")

            if quantity > supply.quantity_available:
                raise InsufficientStockError(
                    f"Insufficient stock for {supply.name}. "
                    f"Available: {supply.quantity_available}, Requested: {quantity}"
                )

            distribution = SupplyDistribution(
                supply=supply,
                student=student,
                quantity=quantity,
                distribution_date=data['distribution_date'],
                notes=data['notes'],
                distributed_by_id=str(context.user_id) if context.user_id is not None else None,
            )
            distribution.set_actor(context)
            distribution.save()

            updated = Supply.objects.filter(
                pk=supply.pk, quantity_available__gte=quantity
            ).update(
                quantity_available=F('quantity_available') - quantity,
                updated_by_id=distribution.updated_by_id,
                updated_at=timezone.now(),
            )
            if updated != 1:
                raise InsufficientStockError(
                    f"Insufficient stock for {supply.name}. Requested: {quantity}"
                )

            log_activity(
                context, 'supply_distributed',
                f"Distributed {quantity} {supply.unit} of {supply.name} "
                f"to student {student.student_number}",
                target_object=distribution,
            )

        supply.refresh_from_db(fields=['quantity_available', 'updated_at'])
        distribution.supply = supply

        logger.info(
            f"Distributed {quantity} x supply {supply.pk} to student {student.pk} "
            f"({supply.quantity_available} left)"
        )
        return distribution

    @staticmethod
    def delete_supply(context, supply_id):
        """
        Delete a supply and its distribution history.

        Distributed quantities are not returned to any stock.

        Returns:
            dict: {'supply_name', 'distributions_deleted'}
        """
        supply = _get_supply(supply_id)
        supply_name = supply.name

        with service_transaction("deleting the supply"):
            distributions_deleted, _ = SupplyDistribution.objects.filter(supply_id=supply.pk).delete()
            Supply.objects.filter(pk=supply.pk).delete()
            log_activity(
                context, 'supply_deleted',
                f"Deleted supply: {supply_name} ({distributions_deleted} distributions)",
                target_object=supply,
            )

        logger.info(f"Deleted supply {supply.pk} '{supply_name}'")
        return {
            'supply_name': supply_name,
            'distributions_deleted': distributions_deleted,
        }

    @staticmethod
    def filter_by_stock_status(queryset, status):
        """Restrict a Supply queryset to one stock status."""
        threshold = get_low_stock_threshold()
        if status == Supply.STOCK_OUT:
            return queryset.filter(quantity_available=0)
        if status == Supply.STOCK_LOW:
            return queryset.filter(quantity_available__gte=1, quantity_available__lte=threshold)
        if status == Supply.STOCK_IN:
            return queryset.filter(quantity_available__gt=threshold)
        return queryset
