# fees/urls.py

from django.urls import path
from . import views

app_name = 'fees'

urlpatterns = [
    # =============================================================================
    # FEE URLS
    # =============================================================================
    path('', views.fee_list, name='fee_list'),
    path('create/', views.fee_create, name='fee_create'),
    path('<int:pk>/', views.fee_detail, name='fee_detail'),
    path('<int:pk>/edit/', views.fee_edit, name='fee_edit'),
    path('<int:pk>/assign/', views.fee_assign, name='fee_assign'),
    path('<int:pk>/delete/', views.fee_delete, name='fee_delete'),

    # =============================================================================
    # PAYMENT URLS
    # =============================================================================
    path('student-fees/<int:student_fee_pk>/pay/', views.payment_create, name='payment_create'),
    path('payments/', views.payment_list, name='payment_list'),
    path('payments/export/', views.payment_export_excel, name='payment_export_excel'),
    path('payments/student/<int:student_pk>/', views.student_payment_history, name='student_payment_history'),

    # =============================================================================
    # RECEIPT URLS
    # =============================================================================
    path('payments/<int:pk>/receipt/', views.receipt, name='receipt'),
    path('payments/<int:pk>/receipt/pdf/', views.receipt_pdf, name='receipt_pdf'),
]
