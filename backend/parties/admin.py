from django.contrib import admin
from .models import Client, Supplier


@admin.register(Client)
class ClientAdmin(admin.ModelAdmin):
    list_display = ['name', 'client_type', 'city', 'phone', 'loyalty_level', 'loyalty_points', 'is_active', 'created_at']
    list_filter = ['client_type', 'loyalty_level', 'is_active', 'created_at']
    search_fields = ['name', 'city', 'phone', 'email']
    ordering = ['name']


@admin.register(Supplier)
class SupplierAdmin(admin.ModelAdmin):
    list_display = ['name', 'location', 'supplier_type', 'rating', 'delivery_days', 'is_active', 'created_at']
    list_filter = ['supplier_type', 'is_active', 'created_at']
    search_fields = ['name', 'location', 'email']
    ordering = ['name']
