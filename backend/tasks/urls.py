from django.urls import path
from .views import (
    task_list_create, task_detail, task_templates, task_from_template,
    automation_rules, automation_run, task_insights_view, smart_tasks
)

urlpatterns = [
    path('tasks/', task_list_create, name='task-list-create'),
    path('tasks/templates/', task_templates, name='task-templates'),
    path('tasks/templates/<str:template_id>/create/', task_from_template, name='task-from-template'),
    path('tasks/automation/rules/', automation_rules, name='task-automation-rules'),
    path('tasks/automation/run/', automation_run, name='task-automation-run'),
    path('tasks/insights/', task_insights_view, name='task-insights'),
    path('tasks/smart/', smart_tasks, name='task-smart'),
    path('tasks/<int:pk>/', task_detail, name='task-detail'),
]
