# tests/test_views.py

from datetime import date
from decimal import Decimal

import pytest
from django.urls import reverse

from fees.models import Fee, Payment, StudentFee
from fees.services import PaymentService
from students.models import Student
from supplies.models import Supply

PASSWORD = "secret-pass-123"


@pytest.fixture
def login(client):
    def _login(user):
        client.login(username=user.username, password=PASSWORD)
        return client
    return _login


@pytest.fixture
def payment(finance_context, student_fee, payment_data):
    return PaymentService.record_payment(finance_context, student_fee.pk, payment_data('250'))


@pytest.mark.parametrize('url_name', ['core:dashboard', 'fees:fee_list', 'students:student_list'])
def test_anonymous_user_is_sent_to_login(client, db, url_name):
    response = client.get(reverse(url_name))

    assert response.status_code == 302
    assert response.url.startswith(reverse('accounts:login'))


def test_dashboard_renders(login, admin_user, student_fee):
    response = login(admin_user).get(reverse('core:dashboard'))
    assert response.status_code == 200


def test_login_view(client, finance_user):
    response = client.post(reverse('accounts:login'), {'username': finance_user.username, 'password': PASSWORD})
    assert response.status_code == 302
    assert response.url == reverse('core:dashboard')


def test_wrong_role_is_redirected_to_dashboard(login, supply_user, student_fee):
    response = login(supply_user).get(reverse('fees:payment_create', args=[student_fee.pk]))

    assert response.status_code == 302
    assert response.url == reverse('core:dashboard')


def test_finance_officer_records_payment(login, finance_user, student_fee):
    response = login(finance_user).post(
        reverse('fees:payment_create', args=[student_fee.pk]),
        {'amount': '400.00', 'payment_date': '2024-09-15', 'payment_method': 'cash', 'notes': ''},
    )

    payment = Payment.objects.get()
    assert response.status_code == 302
    assert response.url == reverse('fees:receipt', args=[payment.pk])
    student_fee.refresh_from_db()
    assert student_fee.amount_paid == Decimal('400.00')


def test_overpayment_shows_form_error(login, finance_user, student_fee):
    response = login(finance_user).post(
        reverse('fees:payment_create', args=[student_fee.pk]),
        {'amount': '1500.00', 'payment_date': '2024-09-15', 'payment_method': 'cash'},
    )

    assert response.status_code == 200
    assert response.context['form'].errors
    assert not Payment.objects.exists()


def test_finance_officer_creates_fee_for_all(login, finance_user, make_student):
    make_student()
    make_student()
    response = login(finance_user).post(reverse('fees:fee_create'), {
        'name': 'Sports Fee',
        'amount': '75.00',
        'academic_year': '2024-2025',
        'due_date': '2024-11-01',
        'description': '',
        'apply_to_all': 'on',
    })

    fee = Fee.objects.get(name='Sports Fee')
    assert response.status_code == 302
    assert StudentFee.objects.filter(fee=fee).count() == 2


def test_fee_delete_is_admin_only(login, finance_user, admin_user, fee):
    url = reverse('fees:fee_delete', args=[fee.pk])

    login(finance_user).post(url)
    assert Fee.objects.filter(pk=fee.pk).exists()

    response = login(admin_user).post(url)
    assert response.status_code == 302
    assert not Fee.objects.filter(pk=fee.pk).exists()


def test_fee_delete_requires_post(login, admin_user, fee):
    response = login(admin_user).get(reverse('fees:fee_delete', args=[fee.pk]))
    assert response.status_code == 405


def test_student_delete_is_admin_only(login, student_officer, admin_user, student):
    url = reverse('students:student_delete', args=[student.pk])

    login(student_officer).post(url)
    assert Student.objects.filter(pk=student.pk).exists()

    login(admin_user).post(url)
    assert not Student.objects.filter(pk=student.pk).exists()


def test_supply_delete_is_admin_only(login, supply_user, admin_user, supply):
    url = reverse('supplies:supply_delete', args=[supply.pk])

    login(supply_user).post(url)
    assert Supply.objects.filter(pk=supply.pk).exists()

    login(admin_user).post(url)
    assert not Supply.objects.exists()


def test_supply_officer_distributes(login, supply_user, supply, student):
    response = login(supply_user).post(reverse('supplies:supply_distribute', args=[supply.pk]), {
        'student': student.pk,
        'quantity': '4',
        'distribution_date': '2024-09-20',
        'notes': '',
    })

    assert response.status_code == 302
    supply.refresh_from_db()
    assert supply.quantity_available == 6


def test_distribution_over_stock_shows_error(login, supply_user, supply, student):
    response = login(supply_user).post(reverse('supplies:supply_distribute', args=[supply.pk]), {
        'student': student.pk,
        'quantity': '11',
        'distribution_date': '2024-09-20',
    })

    assert response.status_code == 200
    supply.refresh_from_db()
    assert supply.quantity_available == 10


def test_student_detail_shows_ledger(login, student_officer, payment):
    response = login(student_officer).get(
        reverse('students:student_detail', args=[payment.student_fee.student_id])
    )

    assert response.status_code == 200
    assert payment.receipt_number in response.content.decode()


def test_receipt_page(login, finance_user, payment):
    response = login(finance_user).get(reverse('fees:receipt', args=[payment.pk]))

    assert response.status_code == 200
    assert payment.receipt_number in response.content.decode()


def test_receipt_pdf(login, finance_user, payment):
    response = login(finance_user).get(reverse('fees:receipt_pdf', args=[payment.pk]))

    assert response.status_code == 200
    assert response['Content-Type'] == 'application/pdf'
    assert payment.receipt_number in response['Content-Disposition']
    assert response.content.startswith(b'%PDF')


def test_payment_export_excel(login, finance_user, payment):
    response = login(finance_user).get(reverse('fees:payment_export_excel'))

    assert response.status_code == 200
    assert response['Content-Type'] == (
        'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'
    )
    assert response.content.startswith(b'PK')


def test_payment_list_filters(login, finance_user, payment):
    client = login(finance_user)

    response = client.get(reverse('fees:payment_list'), {'payment_method': 'cash'})
    assert payment.receipt_number in response.content.decode()

    response = client.get(reverse('fees:payment_list'), {'date_from': date(2025, 1, 1).isoformat()})
    assert payment.receipt_number not in response.content.decode()


def test_profile_update_changes_user_and_phone(login, finance_user):
    response = login(finance_user).post(reverse('accounts:profile'), {
        'action': 'update_profile',
        'first_name': 'Grace',
        'last_name': 'Nakato',
        'email': 'grace@example.org',
        'phone': '+256 700 123456',
    })

    assert response.status_code == 302
    assert response.url == reverse('accounts:profile')
    finance_user.refresh_from_db()
    assert finance_user.get_full_name() == 'Grace Nakato'
    assert finance_user.email == 'grace@example.org'
    assert finance_user.profile.phone == '+256 700 123456'


def test_profile_rejects_email_of_another_user(login, finance_user, admin_user):
    admin_user.email = 'admin@example.org'
    admin_user.save()

    response = login(finance_user).post(reverse('accounts:profile'), {
        'action': 'update_profile',
        'first_name': 'Grace',
        'email': 'ADMIN@example.org',
        'phone': '',
    })

    assert response.status_code == 200
    assert 'email' in response.context['profile_form'].errors
    finance_user.refresh_from_db()
    assert finance_user.email == ''


def test_password_change_keeps_session(login, finance_user):
    client = login(finance_user)
    new_password = 'Ledger-Tr1cky-Pass!'

    response = client.post(reverse('accounts:profile'), {
        'action': 'change_password',
        'old_password': PASSWORD,
        'new_password1': new_password,
        'new_password2': new_password,
    })

    assert response.status_code == 302
    finance_user.refresh_from_db()
    assert finance_user.check_password(new_password)
    assert client.get(reverse('accounts:profile')).status_code == 200


def test_password_change_requires_current_password(login, finance_user):
    response = login(finance_user).post(reverse('accounts:profile'), {
        'action': 'change_password',
        'old_password': 'not-my-password',
        'new_password1': 'Ledger-Tr1cky-Pass!',
        'new_password2': 'Ledger-Tr1cky-Pass!',
    })

    assert response.status_code == 200
    assert 'old_password' in response.context['password_form'].errors
    finance_user.refresh_from_db()
    assert finance_user.check_password(PASSWORD)
