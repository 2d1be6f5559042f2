from django.contrib import admin
from .models import Sale, Payment


class PaymentInline(admin.TabularInline):
    model = Payment
    extra = 0
    readonly_fields = ['created_by', 'created_at']


@admin.register(Sale)
class SaleAdmin(admin.ModelAdmin):
    list_display = ['sale_id', 'date', 'client', 'stone', 'total_amount', 'profit', 'payment_status', 'amount_paid']
    list_filter = ['payment_status', 'is_out_of_state', 'date']
    search_fields = ['sale_id', 'client__name', 'stone__stone_id']
    ordering = ['-date', '-created_at']
    inlines = [PaymentInline]


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    list_display = ['sale', 'payment_method', 'amount', 'reference', 'created_by', 'created_at']
    list_filter = ['payment_method', 'created_at']
    search_fields = ['sale__sale_id', 'reference']
