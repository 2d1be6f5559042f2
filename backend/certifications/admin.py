from django.contrib import admin
from .models import Certification


@admin.register(Certification)
class CertificationAdmin(admin.ModelAdmin):
    list_display = ['stone', 'lab', 'status', 'certificate_number', 'date_sent', 'date_received', 'created_at']
    list_filter = ['status', 'lab', 'created_at']
    search_fields = ['stone__stone_id', 'certificate_number']
    ordering = ['-created_at']
