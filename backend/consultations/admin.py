from django.contrib import admin
from .models import Consultation


@admin.register(Consultation)
class ConsultationAdmin(admin.ModelAdmin):
    list_display = ['client', 'date', 'medium', 'follow_up_needed', 'next_follow_up_date', 'created_at']
    list_filter = ['medium', 'follow_up_needed', 'date']
    search_fields = ['client__name', 'outcome', 'notes']
    ordering = ['-date']
