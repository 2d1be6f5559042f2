from django.urls import path
from . import views

urlpatterns = [
    path('dashboard/metrics/', views.dashboard_metrics, name='dashboard-metrics'),
    path('reports/sales-summary/', views.sales_summary, name='sales-summary'),
    path('reports/top-stones/', views.top_stones, name='top-stones'),
    path('reports/top-clients/', views.top_clients, name='top-clients'),
    path('reports/top-suppliers/', views.top_suppliers, name='top-suppliers'),
    path('reports/inventory-summary/', views.inventory_summary, name='inventory-summary'),
    path('reports/finance/', views.finance_report, name='finance-report'),
]
