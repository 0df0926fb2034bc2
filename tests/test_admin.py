# tests/test_admin.py

import pytest
from django.contrib import admin
from django.test import RequestFactory
from django.urls import reverse

from fees.models import Fee, Payment, StudentFee
from students.models import Student
from supplies.models import Supply, SupplyDistribution
from utils.models import AuditLog


@pytest.fixture
def superuser(django_user_model):
    return django_user_model.objects.create_superuser('root', 'root@example.org', 'secret-pass-123')


@pytest.mark.parametrize('model', [Fee, StudentFee, Payment, Supply, SupplyDistribution, Student, AuditLog])
def test_service_managed_models_are_browse_only(superuser, model):
    request = RequestFactory().get('/admin/')
    request.user = superuser
    model_admin = admin.site._registry[model]

    assert not model_admin.has_add_permission(request)
    assert not model_admin.has_change_permission(request)
    assert not model_admin.has_delete_permission(request)
    assert model_admin.has_view_permission(request)


def test_fee_cannot_be_deleted_from_admin(client, superuser, fee):
    client.force_login(superuser)

    response = client.post(reverse('admin:fees_fee_delete', args=[fee.pk]), {'post': 'yes'})

    assert response.status_code == 403
    assert Fee.objects.filter(pk=fee.pk).exists()


def test_student_fee_cannot_be_added_from_admin(client, superuser, student, fee):
    client.force_login(superuser)

    response = client.post(reverse('admin:fees_studentfee_add'), {
        'student': student.pk, 'fee': fee.pk,
    })

    assert response.status_code == 403
    assert not StudentFee.objects.exists()
