from django.urls import path
from .views import (
    valuation, bulk_purchase, quality_comparison, gemstone_analysis,
    stone_analysis, origin_verification, market_prices
)

urlpatterns = [
    path('tools/valuation/', valuation, name='tools-valuation'),
    path('tools/bulk-purchase/', bulk_purchase, name='tools-bulk-purchase'),
    path('tools/quality-comparison/', quality_comparison, name='tools-quality-comparison'),
    path('tools/analysis/', gemstone_analysis, name='tools-analysis'),
    path('tools/origin-verification/', origin_verification, name='tools-origin-verification'),
    path('tools/market-prices/<str:stone_type>/', market_prices, name='tools-market-prices'),
    path('inventory/<int:pk>/analysis/', stone_analysis, name='stone-analysis'),
]
