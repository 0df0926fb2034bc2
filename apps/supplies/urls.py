# supplies/urls.py

from django.urls import path
from . import views

app_name = 'supplies'

urlpatterns = [
    path('', views.supply_list, name='supply_list'),
    path('create/', views.supply_create, name='supply_create'),
    path('<int:pk>/', views.supply_detail, name='supply_detail'),
    path('<int:pk>/edit/', views.supply_edit, name='supply_edit'),
    path('<int:pk>/distribute/', views.supply_distribute, name='supply_distribute'),
    path('<int:pk>/delete/', views.supply_delete, name='supply_delete'),
]
