"""
URL configuration for the academy project.
"""
from django.contrib import admin
from django.urls import path, include

urlpatterns = [
    # Django admin
    path('admin/', admin.site.urls),

    # Core app - landing dashboard
    path('', include('core.urls')),

    # Accounts app - login, logout
    path('accounts/', include('accounts.urls')),

    # Students app
    path('students/', include('students.urls')),

    # Fees app - fees, payments, receipts
    path('fees/', include('fees.urls')),

    # Supplies app - inventory and distributions
    path('supplies/', include('supplies.urls')),
]
