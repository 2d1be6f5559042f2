from django.contrib import admin
from .models import Task


@admin.register(Task)
class TaskAdmin(admin.ModelAdmin):
    list_display = ['title', 'priority', 'status', 'due_date', 'related_type', 'related_to', 'assigned_to', 'automation_rule']
    list_filter = ['status', 'priority', 'related_type', 'completed']
    search_fields = ['title', 'description', 'related_to', 'assigned_to']
    ordering = ['due_date']
