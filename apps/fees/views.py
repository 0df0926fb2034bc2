# fees/views.py

"""
Fee Management Views

View functions for:
- Fees (list, create, edit, detail, assign, delete)
- Payments (record, history, Excel export)
- Receipts (printable page and PDF)

Views parse input with forms, call fees.services and translate service
errors into form errors or flash messages.
"""

from django.shortcuts import render, redirect, get_object_or_404
from django.contrib.auth.decorators import login_required
from django.contrib import messages
from django.db.models import Q
from django.http import HttpResponse
from django.views.decorators.http import require_POST
from datetime import datetime
from io import BytesIO
import logging

from openpyxl import Workbook
from openpyxl.styles import Font, PatternFill, Alignment, Border, Side

from reportlab.lib import colors
from reportlab.lib.pagesizes import A5
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.units import inch
from reportlab.platypus import SimpleDocTemplate, Table, TableStyle, Paragraph, Spacer
from reportlab.lib.enums import TA_CENTER

from accounts.decorators import role_required
from accounts.models import UserProfile
from core.utils import format_money, paginate_queryset
from students.models import Student
from utils.context import ServiceContext
from utils.exceptions import ServiceError
from utils.forms import apply_service_error
from .forms import FeeForm, FeeAssignForm, PaymentForm, FeeFilterForm, PaymentFilterForm
from .models import Fee, StudentFee, Payment
from .services import FeeService, PaymentService
from .stats import get_status_breakdown

logger = logging.getLogger(__name__)

FINANCE_ROLES = (UserProfile.ROLE_ADMIN, UserProfile.ROLE_FINANCE_OFFICER)


# =============================================================================
# FEES
# =============================================================================

@login_required
def fee_list(request):
    """List fees with per-fee assessment and collection totals"""
    filter_form = FeeFilterForm(request.GET or None)
    fees = FeeService.get_fee_totals()

    if filter_form.is_valid():
        search = filter_form.cleaned_data.get('search')
        academic_year = filter_form.cleaned_data.get('academic_year')
        if search:
            fees = fees.filter(Q(name__icontains=search) | Q(description__icontains=search))
        if academic_year:
            fees = fees.filter(academic_year=academic_year)

    page_obj, paginator = paginate_queryset(request, fees.order_by('-academic_year', 'due_date', 'name'))

    context = {
        'filter_form': filter_form,
        'page_obj': page_obj,
        'fees': page_obj.object_list,
    }
    return render(request, 'fees/fee_list.html', context)


@role_required(*FINANCE_ROLES)
def fee_create(request):
    """Create a new fee, optionally assessing every active student"""
    if request.method == "POST":
        form = FeeForm(request.POST)
        if form.is_valid():
            try:
                fee = FeeService.create_fee(
                    ServiceContext.from_request(request),
                    form.cleaned_data,
                    apply_to_all=form.cleaned_data.get('apply_to_all', False),
                )
            except ServiceError as e:
                apply_service_error(form, e)
            else:
                messages.success(request, f"Fee '{fee.name}' was created successfully")
                return redirect("fees:fee_detail", pk=fee.pk)
    else:
        form = FeeForm()

    context = {
        'form': form,
        'title': 'Create Fee',
    }
    return render(request, 'fees/fee_form.html', context)


@role_required(*FINANCE_ROLES)
def fee_edit(request, pk):
    """Edit an existing fee"""
    fee = get_object_or_404(Fee, pk=pk)

    if request.method == "POST":
        form = FeeForm(request.POST, instance=fee)
        if form.is_valid():
            try:
                fee = FeeService.update_fee(
                    ServiceContext.from_request(request), pk, form.cleaned_data
                )
            except ServiceError as e:
                apply_service_error(form, e)
            else:
                messages.success(request, f"Fee '{fee.name}' was updated successfully")
                return redirect("fees:fee_detail", pk=fee.pk)
    else:
        form = FeeForm(instance=fee)

    context = {
        'form': form,
        'fee': fee,
        'title': 'Update Fee',
    }
    return render(request, 'fees/fee_form.html', context)


@login_required
def fee_detail(request, pk):
    """Fee details with every student assessment"""
    fee = get_object_or_404(Fee, pk=pk)
    student_fees = fee.student_fees.select_related('student').order_by(
        'student__last_name', 'student__first_name'
    )

    status = request.GET.get('status', '')
    if status:
        student_fees = student_fees.filter(payment_status=status)

    context = {
        'fee': fee,
        'student_fees': student_fees,
        'status': status,
        'status_choices': StudentFee.PAYMENT_STATUS_CHOICES,
        'breakdown': get_status_breakdown(fee_id=fee.pk),
    }
    return render(request, 'fees/fee_detail.html', context)


@role_required(*FINANCE_ROLES)
def fee_assign(request, pk):
    """Assess a fee against a single student"""
    fee = get_object_or_404(Fee, pk=pk)

    if request.method == "POST":
        form = FeeAssignForm(request.POST, fee=fee)
        if form.is_valid():
            student = form.cleaned_data['student']
            try:
                FeeService.assign_fee(ServiceContext.from_request(request), fee.pk, student.pk)
            except ServiceError as e:
                apply_service_error(form, e)
            else:
                messages.success(
                    request,
                    f"Fee '{fee.name}' assigned to {student.get_full_name()}"
                )
                return redirect("fees:fee_detail", pk=fee.pk)
    else:
        initial = {}
        if request.GET.get('student'):
            initial['student'] = request.GET['student']
        form = FeeAssignForm(initial=initial, fee=fee)

    context = {
        'form': form,
        'fee': fee,
        'title': f"Assign {fee.name}",
    }
    return render(request, 'fees/fee_assign.html', context)


@role_required(UserProfile.ROLE_ADMIN)
@require_POST
def fee_delete(request, pk):
    """Delete a fee together with its assessments and payments"""
    try:
        result = FeeService.delete_fee(ServiceContext.from_request(request), pk)
    except ServiceError as e:
        messages.error(request, e.message)
        return redirect("fees:fee_list")

    messages.success(
        request,
        f"Fee '{result['fee_name']}' was deleted along with "
        f"{result['student_fees_deleted']} student records and "
        f"{result['payments_deleted']} payments"
    )
    return redirect("fees:fee_list")


# =============================================================================
# PAYMENTS
# =============================================================================

@role_required(*FINANCE_ROLES)
def payment_create(request, student_fee_pk):
    """Record a payment against a student fee"""
    student_fee = get_object_or_404(
        StudentFee.objects.select_related('student', 'fee'), pk=student_fee_pk
    )

    if student_fee.payment_status == StudentFee.STATUS_PAID:
        messages.info(request, "This fee has already been paid in full.")
        return redirect("students:student_detail", pk=student_fee.student_id)

    if request.method == "POST":
        form = PaymentForm(request.POST, student_fee=student_fee)
        if form.is_valid():
            try:
                payment = PaymentService.record_payment(
                    ServiceContext.from_request(request),
                    student_fee.pk,
                    form.cleaned_data,
                )
            except ServiceError as e:
                apply_service_error(form, e)
            else:
                messages.success(
                    request,
                    f"Payment of {format_money(payment.amount)} recorded. "
                    f"Receipt {payment.receipt_number}"
                )
                return redirect("fees:receipt", pk=payment.pk)
    else:
        form = PaymentForm(student_fee=student_fee)

    context = {
        'form': form,
        'student_fee': student_fee,
        'title': 'Record Payment',
    }
    return render(request, 'fees/payment_form.html', context)


def _filtered_payments(request, student=None):
    payments = PaymentService.get_payment_history(student.pk if student else None)
    filter_form = PaymentFilterForm(request.GET or None)

    if filter_form.is_valid():
        data = filter_form.cleaned_data
        if data.get('search'):
            search = data['search']
            payments = payments.filter(
                Q(receipt_number__icontains=search) |
                Q(student_fee__student__first_name__icontains=search) |
                Q(student_fee__student__last_name__icontains=search) |
                Q(student_fee__student__student_number__icontains=search)
            )
        if data.get('payment_method'):
            payments = payments.filter(payment_method=data['payment_method'])
        if data.get('date_from'):
            payments = payments.filter(payment_date__gte=data['date_from'])
        if data.get('date_to'):
            payments = payments.filter(payment_date__lte=data['date_to'])

    return payments, filter_form


@login_required
def payment_list(request):
    """Payment history across all students"""
    payments, filter_form = _filtered_payments(request)
    page_obj, paginator = paginate_queryset(request, payments, per_page=25)

    context = {
        'filter_form': filter_form,
        'page_obj': page_obj,
        'payments': page_obj.object_list,
        'breakdown': get_status_breakdown(),
    }
    return render(request, 'fees/payment_list.html', context)


@login_required
def student_payment_history(request, student_pk):
    """Payment history for one student"""
    student = get_object_or_404(Student, pk=student_pk)
    payments, filter_form = _filtered_payments(request, student=student)

    context = {
        'student': student,
        'filter_form': filter_form,
        'payments': payments,
    }
    return render(request, 'fees/student_payment_history.html', context)


@login_required
def payment_export_excel(request):
    """Export the (filtered) payment history to Excel"""
    student = None
    if request.GET.get('student'):
        student = get_object_or_404(Student, pk=request.GET['student'])
    payments, _ = _filtered_payments(request, student=student)

    wb = Workbook()
    ws = wb.active
    ws.title = "Payments"

    header_fill = PatternFill(start_color="4472C4", end_color="4472C4", fill_type="solid")
    header_font = Font(bold=True, color="FFFFFF", size=12)
    header_alignment = Alignment(horizontal="center", vertical="center", wrap_text=True)
    border_style = Border(
        left=Side(style='thin', color='000000'),
        right=Side(style='thin', color='000000'),
        top=Side(style='thin', color='000000'),
        bottom=Side(style='thin', color='000000')
    )

    ws.merge_cells('A1:H1')
    title_cell = ws['A1']
    title_cell.value = f"Payment History - {student.get_full_name()}" if student else "Payment History"
    title_cell.font = Font(bold=True, size=16, color="4472C4")
    title_cell.alignment = Alignment(horizontal="center", vertical="center")

    ws.merge_cells('A2:H2')
    subtitle_cell = ws['A2']
    subtitle_cell.value = f"Generated on: {datetime.now().strftime('%Y-%m-%d %H:%M')}"
    subtitle_cell.font = Font(size=10, italic=True)
    subtitle_cell.alignment = Alignment(horizontal="center")

    ws.append([])

    headers = [
        'Receipt Number', 'Payment Date', 'Student Number', 'Student Name',
        'Fee', 'Amount', 'Payment Method', 'Notes'
    ]
    ws.append(headers)
    for cell in ws[4]:
        cell.fill = header_fill
        cell.font = header_font
        cell.alignment = header_alignment
        cell.border = border_style

    total = 0
    for payment in payments:
        student_fee = payment.student_fee
        ws.append([
            payment.receipt_number,
            payment.payment_date.strftime('%Y-%m-%d'),
            student_fee.student.student_number,
            student_fee.student.get_full_name(),
            student_fee.fee.name,
            float(payment.amount),
            payment.get_payment_method_display(),
            payment.notes,
        ])
        total += payment.amount
        current_row = ws.max_row
        for cell in ws[current_row]:
            cell.border = border_style
        ws.cell(row=current_row, column=6).number_format = '#,##0.00'

    column_widths = {'A': 22, 'B': 14, 'C': 16, 'D': 25, 'E': 25, 'F': 14, 'G': 16, 'H': 30}
    for col, width in column_widths.items():
        ws.column_dimensions[col].width = width

    summary_row = ws.max_row + 2
    ws[f'E{summary_row}'] = 'Total:'
    ws[f'F{summary_row}'] = float(total)
    ws[f'E{summary_row}'].font = Font(bold=True)
    ws[f'F{summary_row}'].font = Font(bold=True)
    ws[f'F{summary_row}'].number_format = '#,##0.00'

    ws.freeze_panes = 'A5'

    response = HttpResponse(
        content_type='application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'
    )
    filename = f"payments_export_{datetime.now().strftime('%Y%m%d_%H%M%S')}.xlsx"
    response['Content-Disposition'] = f'attachment; filename="{filename}"'

    wb.save(response)
    return response


# =============================================================================
# RECEIPTS
# =============================================================================

def _get_payment(pk):
    return get_object_or_404(
        Payment.objects.select_related('student_fee__student', 'student_fee__fee'),
        pk=pk
    )


@login_required
def receipt(request, pk):
    """Printable receipt page"""
    payment = _get_payment(pk)
    context = {
        'payment': payment,
        'student_fee': payment.student_fee,
        'student': payment.student_fee.student,
        'fee': payment.student_fee.fee,
    }
    return render(request, 'fees/receipt.html', context)


@login_required
def receipt_pdf(request, pk):
    """Download a receipt as PDF"""
    payment = _get_payment(pk)
    student_fee = payment.student_fee
    student = student_fee.student

    buffer = BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=A5,
        rightMargin=30,
        leftMargin=30,
        topMargin=30,
        bottomMargin=18,
        title=f"Receipt {payment.receipt_number}",
    )

    elements = []
    styles = getSampleStyleSheet()
    title_style = ParagraphStyle(
        'ReceiptTitle',
        parent=styles['Heading1'],
        fontSize=18,
        textColor=colors.HexColor('#4472C4'),
        spaceAfter=6,
        alignment=TA_CENTER,
    )
    subtitle_style = ParagraphStyle(
        'ReceiptSubtitle',
        parent=styles['Normal'],
        fontSize=10,
        textColor=colors.grey,
        spaceAfter=12,
        alignment=TA_CENTER,
    )

    elements.append(Paragraph("Payment Receipt", title_style))
    elements.append(Paragraph(payment.receipt_number, subtitle_style))
    elements.append(Spacer(1, 0.1 * inch))

    data = [
        ['Student', f"{student.get_full_name()} ({student.student_number})"],
        ['Class / Year', student.class_year],
        ['Fee', f"{student_fee.fee.name} ({student_fee.fee.academic_year})"],
        ['Payment Date', payment.payment_date.strftime('%Y-%m-%d')],
        ['Payment Method', payment.get_payment_method_display()],
        ['Amount Paid', format_money(payment.amount)],
        ['Fee Amount', format_money(student_fee.fee.amount)],
        ['Balance', format_money(student_fee.balance)],
        ['Status', student_fee.get_payment_status_display()],
    ]
    if payment.notes:
        data.append(['Notes', payment.notes])

    table = Table(data, colWidths=[1.4 * inch, 2.8 * inch])
    table.setStyle(TableStyle([
        ('FONTNAME', (0, 0), (0, -1), 'Helvetica-Bold'),
        ('FONTSIZE', (0, 0), (-1, -1), 9),
        ('BACKGROUND', (0, 0), (0, -1), colors.HexColor('#D9E1F2')),
        ('GRID', (0, 0), (-1, -1), 0.5, colors.grey),
        ('VALIGN', (0, 0), (-1, -1), 'MIDDLE'),
        ('BOTTOMPADDING', (0, 0), (-1, -1), 6),
        ('TOPPADDING', (0, 0), (-1, -1), 6),
    ]))
    elements.append(table)

    elements.append(Spacer(1, 0.3 * inch))
    elements.append(Paragraph(
        f"Recorded by {payment.created_by_name} on {payment.created_at:%Y-%m-%d %H:%M}",
        subtitle_style
    ))

    doc.build(elements)

    response = HttpResponse(buffer.getvalue(), content_type='application/pdf')
    response['Content-Disposition'] = f'attachment; filename="{payment.receipt_number}.pdf"'
    buffer.close()
    return response
