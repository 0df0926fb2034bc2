# tests/test_audit.py

import pytest
from django.test import RequestFactory

from utils.audit import log_activity
from utils.context import ServiceContext
from utils.models import AuditLog


def test_log_activity_records_target(db, fee):
    context = ServiceContext(user_id=7, role='admin', ip_address='192.168.1.20')
    entry = log_activity(context, 'fee_updated', 'Updated fee', target_object=fee)

    assert entry.user_id == '7'
    assert entry.content_type == 'fees.fee'
    assert entry.object_id == str(fee.pk)
    assert entry.ip_address == '192.168.1.20'
    assert list(AuditLog.get_object_history(fee)) == [entry]


def test_entries_are_append_only(db):
    entry = log_activity(ServiceContext.system(), 'ledger_reconciled', 'Nothing')

    entry.details = 'Changed'
    with pytest.raises(ValueError):
        entry.save()
    with pytest.raises(ValueError):
        entry.delete()

    entry.refresh_from_db()
    assert entry.details == 'Nothing'
    assert entry.user_id is None


def test_recent_activity_newest_first(db):
    context = ServiceContext.system()
    first = log_activity(context, 'supply_created', 'one')
    second = log_activity(context, 'supply_updated', 'two')

    assert list(AuditLog.get_recent_activity(limit=1)) == [second]
    assert set(AuditLog.get_recent_activity()) == {first, second}


def test_context_from_request(finance_user):
    request = RequestFactory().get('/', HTTP_X_FORWARDED_FOR='203.0.113.9, 10.0.0.1')
    request.user = finance_user

    context = ServiceContext.from_request(request)

    assert context.user_id == finance_user.pk
    assert context.role == 'finance_officer'
    assert context.ip_address == '203.0.113.9'
    assert not context.is_system


def test_system_context():
    context = ServiceContext.system()
    assert context.user_id is None
    assert context.is_system
