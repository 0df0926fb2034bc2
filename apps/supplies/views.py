# supplies/views.py

"""
Supply Inventory Views

- Supply list with stock status filter and search
- Create / edit / delete supplies
- Distribute a supply to a student
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
from utils.context import ServiceContext
from utils.exceptions import ServiceError
from utils.forms import apply_service_error
from .forms import SupplyForm, DistributionForm, SupplyFilterForm
from .models import Supply
from .services import SupplyService

logger = logging.getLogger(__name__)

SUPPLY_ROLES = (UserProfile.ROLE_ADMIN, UserProfile.ROLE_SUPPLY_OFFICER)


@login_required
def supply_list(request):
    """List supplies with stock levels"""
    filter_form = SupplyFilterForm(request.GET or None)
    supplies = Supply.objects.all()

    if filter_form.is_valid():
        search = filter_form.cleaned_data.get('search')
        if search:
            supplies = supplies.filter(Q(name__icontains=search) | Q(description__icontains=search))
        supplies = SupplyService.filter_by_stock_status(
            supplies, filter_form.cleaned_data.get('stock_status')
        )

    page_obj, paginator = paginate_queryset(request, supplies.order_by('name'))

    context = {
        'filter_form': filter_form,
        'page_obj': page_obj,
        'supplies': page_obj.object_list,
    }
    return render(request, 'supplies/supply_list.html', context)


@role_required(*SUPPLY_ROLES)
def supply_create(request):
    """Add a new supply"""
    if request.method == "POST":
        form = SupplyForm(request.POST)
        if form.is_valid():
            try:
                supply = SupplyService.create_supply(
                    ServiceContext.from_request(request), form.cleaned_data
                )
            except ServiceError as e:
                apply_service_error(form, e)
            else:
                messages.success(request, f"Supply '{supply.name}' was added successfully")
                return redirect("supplies:supply_detail", pk=supply.pk)
    else:
        form = SupplyForm()

    context = {
        'form': form,
        'title': 'Add Supply',
    }
    return render(request, 'supplies/supply_form.html', context)


@role_required(*SUPPLY_ROLES)
def supply_edit(request, pk):
    """Edit an existing supply"""
    supply = get_object_or_404(Supply, pk=pk)

    if request.method == "POST":
        form = SupplyForm(request.POST, instance=supply)
        if form.is_valid():
            try:
                supply = SupplyService.update_supply(
                    ServiceContext.from_request(request), pk, form.cleaned_data
                )
            except ServiceError as e:
                apply_service_error(form, e)
            else:
                messages.success(request, f"Supply '{supply.name}' was updated successfully")
                return redirect("supplies:supply_detail", pk=supply.pk)
    else:
        form = SupplyForm(instance=supply)

    context = {
        'form': form,
        'supply': supply,
        'title': 'Update Supply',
    }
    return render(request, 'supplies/supply_form.html', context)


@login_required
def supply_detail(request, pk):
    """Supply details with distribution history"""
    supply = get_object_or_404(Supply, pk=pk)
    distributions = supply.distributions.select_related('student').order_by(
        '-distribution_date', '-created_at'
    )

    context = {
        'supply': supply,
        'distributions': distributions,
    }
    return render(request, 'supplies/supply_detail.html', context)


@role_required(*SUPPLY_ROLES)
def supply_distribute(request, pk):
    """Distribute units of a supply to a student"""
    supply = get_object_or_404(Supply, pk=pk)

    if supply.quantity_available == 0:
        messages.error(request, f"'{supply.name}' is out of stock.")
        return redirect("supplies:supply_detail", pk=supply.pk)

    if request.method == "POST":
        form = DistributionForm(request.POST, supply=supply)
        if form.is_valid():
            try:
                distribution = SupplyService.distribute_supply(
                    ServiceContext.from_request(request), supply.pk, form.cleaned_data
                )
            except ServiceError as e:
                apply_service_error(form, e)
            else:
                messages.success(
                    request,
                    f"Distributed {distribution.quantity} {supply.unit} of {supply.name} "
                    f"to {distribution.student.get_full_name()}"
                )
                return redirect("supplies:supply_detail", pk=supply.pk)
    else:
        initial = {}
        if request.GET.get('student'):
            initial['student'] = request.GET['student']
        form = DistributionForm(initial=initial, supply=supply)

    context = {
        'form': form,
        'supply': supply,
        'title': f"Distribute {supply.name}",
    }
    return render(request, 'supplies/distribution_form.html', context)


@role_required(UserProfile.ROLE_ADMIN)
@require_POST
def supply_delete(request, pk):
    """Delete a supply and its distribution history"""
    try:
        result = SupplyService.delete_supply(ServiceContext.from_request(request), pk)
    except ServiceError as e:
        messages.error(request, e.message)
        return redirect("supplies:supply_list")

    messages.success(
        request,
        f"Supply '{result['supply_name']}' was deleted along with "
        f"{result['distributions_deleted']} distribution records"
    )
    return redirect("supplies:supply_list")
