from django.urls import path
from .views import (
    stone_list_create, stone_detail, stone_search, stone_by_code,
    stone_label, stock_report
)

urlpatterns = [
    path('inventory/', stone_list_create, name='stone-list-create'),
    path('inventory/stock-report/', stock_report, name='stone-stock-report'),
    path('inventory/search/<str:query>/', stone_search, name='stone-search'),
    path('inventory/code/<str:stone_id>/', stone_by_code, name='stone-by-code'),
    path('inventory/<int:pk>/', stone_detail, name='stone-detail'),
    path('inventory/<int:pk>/label/', stone_label, name='stone-label'),
]
