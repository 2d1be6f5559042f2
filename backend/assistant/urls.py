from django.urls import path
from .views import (
    business_query, business_insights, business_recommendations,
    astrological_analyze, astrological_quick, astrological_stones,
    ca_ask, ca_gst_rules, ca_tax_tips
)

urlpatterns = [
    path('gemini/', business_query, name='gemini-query'),
    path('gemini/insights/', business_insights, name='gemini-insights'),
    path('gemini/recommendations/', business_recommendations, name='gemini-recommendations'),
    path('astrological/analyze/', astrological_analyze, name='astrological-analyze'),
    path('astrological/quick/', astrological_quick, name='astrological-quick'),
    path('astrological/stones/', astrological_stones, name='astrological-stones'),
    path('ca/ask/', ca_ask, name='ca-ask'),
    path('ca/gst-rules/', ca_gst_rules, name='ca-gst-rules'),
    path('ca/tax-tips/', ca_tax_tips, name='ca-tax-tips'),
]
