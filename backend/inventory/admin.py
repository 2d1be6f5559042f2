from django.contrib import admin
from .models import Gemstone


@admin.register(Gemstone)
class GemstoneAdmin(admin.ModelAdmin):
    list_display = ['stone_id', 'type', 'carat', 'origin', 'grade', 'status', 'certified', 'purchase_price', 'selling_price', 'created_at']
    list_filter = ['status', 'type', 'certified', 'certificate_lab', 'created_at']
    search_fields = ['stone_id', 'type', 'origin', 'supplier__name']
    ordering = ['-created_at']
