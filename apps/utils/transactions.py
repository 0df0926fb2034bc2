# utils/transactions.py

"""
Scoped transactions for service operations.

Each mutating service operation runs inside exactly one
``service_transaction``. The block commits on success and rolls back on
any exception; database errors are logged and re-raised as
PersistenceError so store error text never reaches the page layer.
"""

from contextlib import contextmanager
from django.db import DatabaseError, transaction
import logging

from utils.exceptions import PersistenceError

logger = logging.getLogger(__name__)


@contextmanager
def service_transaction(operation):
    """
    Run the enclosed block atomically.

    Args:
        operation (str): Human-readable description used in log lines and
            in the PersistenceError message, e.g. "recording the payment".

    Raises:
        PersistenceError: If the database raised inside the block.
    """
    try:
        with transaction.atomic():
            yield
    except DatabaseError as e:
        logger.error(f"Database error while {operation}: {e}", exc_info=True)
        raise PersistenceError(f"An error occurred while {operation}. No changes were made.") from e
