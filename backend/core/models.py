from django.contrib.auth.models import AbstractUser
from django.db import models


class User(AbstractUser):
    """Extended user model with additional fields"""
    phone = models.CharField(max_length=20, blank=True, null=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'users'


class Setting(models.Model):
    """System settings"""
    key = models.CharField(max_length=100, unique=True)
    value = models.TextField()
    description = models.TextField(blank=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.key

    class Meta:
        db_table = 'settings'


class AuditLog(models.Model):
    """Audit log for critical operations"""
    ACTION_CHOICES = [
        ('create', 'Create'),
        ('update', 'Update'),
        ('delete', 'Delete'),
        ('view', 'View'),
        ('status_change', 'Status Changed'),
        ('price_change', 'Price Change'),
        ('sale_create', 'Sale Created'),
        ('payment_add', 'Payment Added'),
        ('invoice_generate', 'Invoice Generated'),
        ('certification_advance', 'Certification Advanced'),
        ('file_upload', 'File Uploaded'),
        ('automation_run', 'Automation Run'),
    ]

    user = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, related_name='audit_logs')
    action = models.CharField(max_length=50, choices=ACTION_CHOICES)
    model_name = models.CharField(max_length=100)
    object_id = models.CharField(max_length=100)
    object_name = models.CharField(max_length=255, blank=True, null=True, help_text="Human-readable name of the object (e.g., stone type, client name)")
    object_reference = models.CharField(max_length=255, blank=True, null=True, help_text="Business identifier (e.g., stone id, sale id)")
    changes = models.JSONField(default=dict, blank=True)
    ip_address = models.GenericIPAddressField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'audit_logs'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['-created_at'], name='idx_auditlog_created'),
            models.Index(fields=['action'], name='idx_auditlog_action'),
            models.Index(fields=['model_name'], name='idx_auditlog_model'),
            models.Index(fields=['object_reference'], name='idx_auditlog_ref'),
        ]


class CompanyProfile(models.Model):
    """Business identity printed on invoices and reports (single row)"""
    company_name = models.CharField(max_length=200, default='ANANTYA STONEWORKS')
    tagline = models.CharField(max_length=200, blank=True, default='Premium Gemstone Solutions')
    address_line1 = models.CharField(max_length=255, blank=True, default='123 Gemstone Plaza, Jewelry District')
    address_line2 = models.CharField(max_length=255, blank=True, default='Mumbai, Maharashtra - 400001')
    phone = models.CharField(max_length=30, blank=True, default='+91 98765 43210')
    email = models.EmailField(blank=True, default='info@anantya.com')
    gstin = models.CharField(max_length=20, blank=True, default='27AABCA1234Z1Z5')
    state_name = models.CharField(max_length=100, blank=True, default='Maharashtra')
    state_code = models.CharField(max_length=5, blank=True, default='27')
    tin = models.CharField(max_length=30, blank=True, default='09627100742')
    pan = models.CharField(max_length=20, blank=True, default='AABCA1234Z')
    bank_name = models.CharField(max_length=200, blank=True, default='HDFC Bank')
    bank_account = models.CharField(max_length=50, blank=True, default='123456789012')
    bank_ifsc = models.CharField(max_length=20, blank=True, default='HDFC0000123')
    bank_branch = models.CharField(max_length=200, blank=True, default='Fort Branch')
    default_hsn = models.CharField(max_length=10, blank=True, default='7113')
    payment_terms = models.CharField(max_length=200, blank=True, default='Due on receipt')
    destination = models.CharField(max_length=200, blank=True, default='Mumbai')
    terms_of_delivery = models.CharField(max_length=200, blank=True, default='As discussed')
    declaration = models.TextField(
        blank=True,
        default='We declare that this invoice shows the actual price of the goods described and that all particulars are true and correct.'
    )
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.company_name

    @classmethod
    def get_solo(cls):
        """Return the profile row, creating it with defaults on first use"""
        profile = cls.objects.order_by('id').first()
        if profile is None:
            profile = cls.objects.create()
        return profile

    def address_lines(self):
        return [line for line in (self.address_line1, self.address_line2) if line]

    class Meta:
        db_table = 'company_profile'
