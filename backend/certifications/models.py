from django.db import models

from backend.core.constants import CERTIFICATION_LABS, as_choices
from backend.core.validators import DOCUMENT_VALIDATORS
from backend.inventory.models import Gemstone


class Certification(models.Model):
    """A lab submission for one stone"""
    STATUS_CHOICES = [
        ('Pending', 'Pending'),
        ('In Progress', 'In Progress'),
        ('Received', 'Received'),
        ('Certified', 'Certified'),
    ]

    stone = models.ForeignKey(Gemstone, on_delete=models.PROTECT, related_name='certifications')
    lab = models.CharField(max_length=50, choices=as_choices(CERTIFICATION_LABS))
    date_sent = models.DateField(null=True, blank=True)
    date_received = models.DateField(null=True, blank=True)
    certificate_file = models.FileField(upload_to='certificates/', blank=True, null=True, validators=DOCUMENT_VALIDATORS)
    certificate_number = models.CharField(max_length=100, blank=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='Pending')
    notes = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.stone.stone_id} - {self.lab} ({self.status})"

    class Meta:
        db_table = 'certifications'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['status'], name='idx_cert_status'),
        ]
