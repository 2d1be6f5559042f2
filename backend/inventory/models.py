from django.db import models
from django.core.validators import MinValueValidator
from decimal import Decimal, ROUND_HALF_UP

from backend.core.validators import DOCUMENT_VALIDATORS
from backend.parties.models import Supplier


class Gemstone(models.Model):
    """A gemstone lot held in inventory"""
    STATUS_CHOICES = [
        ('In Stock', 'In Stock'),
        ('Sold', 'Sold'),
        ('Reserved', 'Reserved'),
        ('Processing', 'Processing'),
    ]

    GRADE_CHOICES = [
        ('AAAA', 'AAAA'),
        ('AAA', 'AAA'),
        ('AA', 'AA'),
        ('A', 'A'),
        ('B', 'B'),
        ('C', 'C'),
    ]

    stone_id = models.CharField(max_length=50, unique=True)
    type = models.CharField(max_length=100)
    carat = models.DecimalField(max_digits=10, decimal_places=2, validators=[MinValueValidator(Decimal('0.01'))])
    origin = models.CharField(max_length=100, blank=True)
    grade = models.CharField(max_length=10, choices=GRADE_CHOICES, blank=True)
    color = models.CharField(max_length=50, blank=True)
    clarity = models.CharField(max_length=50, blank=True)
    cut = models.CharField(max_length=50, blank=True)
    quantity = models.PositiveIntegerField(default=1)
    supplier = models.ForeignKey(Supplier, on_delete=models.SET_NULL, null=True, blank=True, related_name='stones')
    certified = models.BooleanField(default=False)
    certificate_lab = models.CharField(max_length=100, blank=True)
    certificate_file = models.FileField(upload_to='certificates/', blank=True, null=True, validators=DOCUMENT_VALIDATORS)
    purchase_price = models.DecimalField(max_digits=15, decimal_places=2, default=Decimal('0.00'), validators=[MinValueValidator(Decimal('0.00'))])
    selling_price = models.DecimalField(max_digits=15, decimal_places=2, default=Decimal('0.00'), validators=[MinValueValidator(Decimal('0.00'))])
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='In Stock')
    package_type = models.CharField(max_length=50, blank=True)
    notes = models.TextField(blank=True)
    tags = models.JSONField(default=list, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.stone_id} - {self.type} ({self.carat} ct)"

    @property
    def price_per_carat(self):
        if not self.carat:
            return Decimal('0.00')
        return (self.selling_price / self.carat).quantize(Decimal('0.01'), rounding=ROUND_HALF_UP)

    @property
    def margin(self):
        return self.selling_price - self.purchase_price

    @property
    def margin_percentage(self):
        if not self.purchase_price:
            return Decimal('0.00')
        return (self.margin / self.purchase_price * 100).quantize(Decimal('0.01'), rounding=ROUND_HALF_UP)

    @property
    def is_available(self):
        return self.status == 'In Stock'

    class Meta:
        db_table = 'inventory'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['status'], name='idx_stone_status'),
            models.Index(fields=['type'], name='idx_stone_type'),
            models.Index(fields=['origin'], name='idx_stone_origin'),
        ]
