# students/views.py

"""
Student Management Views

- Student list with search and status filter
- Register / edit / delete students
- Student profile with fee ledger, payments and supply distributions
"""

from django.shortcuts import render, redirect, get_object_or_404
from django.contrib.auth.decorators import login_required
from django.contrib import messages
from django.db.models import Q
from django.views.decorators.http import require_POST
import logging

from accounts.decorators import role_required
from accounts.models import UserProfile
from core.utils import paginate_queryset
from fees.services import PaymentService
from fees.stats import get_student_fee_summary
from utils.context import ServiceContext
from utils.exceptions import ServiceError
from utils.forms import apply_service_error
from utils.models import AuditLog
from .forms import StudentForm, StudentFilterForm
from .models import Student
from .services import StudentService

logger = logging.getLogger(__name__)

STUDENT_ROLES = (UserProfile.ROLE_ADMIN, UserProfile.ROLE_STUDENT_OFFICER)


@login_required
def student_list(request):
    """List students with search and status filter"""
    filter_form = StudentFilterForm(request.GET or None)
    students = Student.objects.all()

    if filter_form.is_valid():
        search = filter_form.cleaned_data.get('search')
        status = filter_form.cleaned_data.get('status')
        if search:
            terms = search.split()
            q_objects = Q()
            for term in terms:
                q_objects &= (
                    Q(first_name__icontains=term) |
                    Q(last_name__icontains=term) |
                    Q(student_number__icontains=term)
                )
            students = students.filter(q_objects)
        if status:
            students = students.filter(status=status)

    page_obj, paginator = paginate_queryset(request, students.order_by('last_name', 'first_name'))

    context = {
        'filter_form': filter_form,
        'page_obj': page_obj,
        'students': page_obj.object_list,
    }
    return render(request, 'students/student_list.html', context)


@role_required(*STUDENT_ROLES)
def student_create(request):
    """Register a new student"""
    if request.method == "POST":
        form = StudentForm(request.POST)
        if form.is_valid():
            try:
                student = StudentService.create_student(
                    ServiceContext.from_request(request), form.cleaned_data
                )
            except ServiceError as e:
                apply_service_error(form, e)
            else:
                messages.success(request, f"Student {student.get_full_name()} was registered successfully")
                return redirect("students:student_detail", pk=student.pk)
        else:
            messages.error(request, "Please correct the errors in the form")
    else:
        form = StudentForm()

    context = {
        'form': form,
        'title': 'Register Student',
    }
    return render(request, 'students/student_form.html', context)


@role_required(*STUDENT_ROLES)
def student_edit(request, pk):
    """Edit existing student"""
    student = get_object_or_404(Student, pk=pk)

    if request.method == "POST":
        form = StudentForm(request.POST, instance=student)
        if form.is_valid():
            try:
                student = StudentService.update_student(
                    ServiceContext.from_request(request), pk, form.cleaned_data
                )
            except ServiceError as e:
                apply_service_error(form, e)
            else:
                messages.success(request, f"Student {student.get_full_name()} was updated successfully")
                return redirect("students:student_detail", pk=student.pk)
        else:
            messages.error(request, "Please correct the errors in the form")
    else:
        form = StudentForm(instance=student)

    context = {
        'form': form,
        'student': student,
        'title': 'Update Student',
    }
    return render(request, 'students/student_form.html', context)


@login_required
def student_detail(request, pk):
    """Student profile with fees, payments and supplies received"""
    student = get_object_or_404(Student, pk=pk)

    student_fees = student.fees.select_related('fee').order_by('fee__due_date')
    payments = PaymentService.get_payment_history(student.pk)
    distributions = student.supply_distributions.select_related('supply').order_by('-distribution_date')
    history = AuditLog.get_object_history(student)[:10]

    context = {
        'student': student,
        'student_fees': student_fees,
        'payments': payments,
        'distributions': distributions,
        'fee_summary': get_student_fee_summary(student),
        'history': history,
    }
    return render(request, 'students/student_detail.html', context)


@role_required(UserProfile.ROLE_ADMIN)
@require_POST
def student_delete(request, pk):
    """Delete a student with their fee records and distributions"""
    try:
        StudentService.delete_student(ServiceContext.from_request(request), pk)
    except ServiceError as e:
        messages.error(request, e.message)
        return redirect("students:student_list")

    messages.success(request, "Student was deleted successfully")
    return redirect("students:student_list")
