from django.db import models

from backend.parties.models import Client


class Consultation(models.Model):
    """A logged consultation with a client"""
    MEDIUM_CHOICES = [
        ('In-person', 'In-person'),
        ('Call', 'Call'),
        ('Video', 'Video'),
    ]

    client = models.ForeignKey(Client, on_delete=models.CASCADE, related_name='consultations')
    date = models.DateField()
    medium = models.CharField(max_length=20, choices=MEDIUM_CHOICES)
    stones_discussed = models.JSONField(default=list, blank=True)
    outcome = models.TextField(blank=True)
    follow_up_needed = models.BooleanField(default=False)
    next_follow_up_date = models.DateField(null=True, blank=True)
    notes = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.client.name} - {self.medium} ({self.date})"

    class Meta:
        db_table = 'consultations'
        ordering = ['-date', '-created_at']
        indexes = [
            models.Index(fields=['next_follow_up_date'], name='idx_consult_follow_up'),
        ]
