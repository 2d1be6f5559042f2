from django.urls import path
from .views import (
    client_list_create, client_detail, client_search, client_history, client_follow_ups,
    supplier_list_create, supplier_detail, supplier_search
)

urlpatterns = [
    # Client endpoints
    path('clients/', client_list_create, name='client-list-create'),
    path('clients/follow-ups/', client_follow_ups, name='client-follow-ups'),
    path('clients/search/<str:query>/', client_search, name='client-search'),
    path('clients/<int:pk>/', client_detail, name='client-detail'),
    path('clients/<int:pk>/history/', client_history, name='client-history'),

    # Supplier endpoints
    path('suppliers/', supplier_list_create, name='supplier-list-create'),
    path('suppliers/search/<str:query>/', supplier_search, name='supplier-search'),
    path('suppliers/<int:pk>/', supplier_detail, name='supplier-detail'),
]
