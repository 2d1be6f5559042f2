from django.db import models

from backend.core.constants import PRIORITY_CHOICES


class Task(models.Model):
    """A reminder or to-do, optionally tied to a client, stone, supplier or certification"""
    STATUS_CHOICES = [
        ('Pending', 'Pending'),
        ('Done', 'Done'),
        ('Delayed', 'Delayed'),
    ]

    RELATED_TYPE_CHOICES = [
        ('Client', 'Client'),
        ('Stone', 'Stone'),
        ('Supplier', 'Supplier'),
        ('Certification', 'Certification'),
    ]

    title = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    related_to = models.CharField(max_length=100, blank=True)
    related_type = models.CharField(max_length=20, choices=RELATED_TYPE_CHOICES, blank=True)
    assigned_to = models.CharField(max_length=150, blank=True)
    due_date = models.DateField(null=True, blank=True)
    priority = models.CharField(max_length=10, choices=PRIORITY_CHOICES, default='Medium')
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default='Pending')
    completed = models.BooleanField(default=False)
    category = models.CharField(max_length=50, blank=True)
    estimated_duration = models.PositiveIntegerField(null=True, blank=True, help_text='Minutes')
    tags = models.JSONField(default=list, blank=True)
    checklist = models.JSONField(default=list, blank=True)
    automation_rule = models.CharField(max_length=20, blank=True)
    notes = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.title

    def save(self, *args, **kwargs):
        # completed and Done always agree
        if self.completed:
            self.status = 'Done'
        elif self.status == 'Done':
            self.completed = True
        super().save(*args, **kwargs)

    class Meta:
        db_table = 'tasks'
        ordering = ['due_date', '-created_at']
        indexes = [
            models.Index(fields=['status'], name='idx_task_status'),
            models.Index(fields=['due_date'], name='idx_task_due_date'),
        ]
