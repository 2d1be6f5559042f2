from django.urls import path
from .views import (
    sale_list_create, sale_detail, sale_payments,
    sale_invoice, sale_invoice_print, sale_invoice_pdf, invoice_print
)

urlpatterns = [
    path('sales/', sale_list_create, name='sale-list-create'),
    path('sales/<int:pk>/', sale_detail, name='sale-detail'),
    path('sales/<int:pk>/payments/', sale_payments, name='sale-payments'),
    path('sales/<int:pk>/invoice/', sale_invoice, name='sale-invoice'),
    path('sales/<int:pk>/invoice/print/', sale_invoice_print, name='sale-invoice-print'),
    path('sales/<int:pk>/invoice/pdf/', sale_invoice_pdf, name='sale-invoice-pdf'),
    path('invoices/print/', invoice_print, name='invoice-print'),
]
