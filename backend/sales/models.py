from django.db import models
from django.core.validators import MinValueValidator
from decimal import Decimal

from backend.core.models import User
from backend.core.validators import DOCUMENT_VALIDATORS
from backend.inventory.models import Gemstone
from backend.parties.models import Client


class Sale(models.Model):
    """A sale of one stone lot to a client"""
    PAYMENT_STATUS_CHOICES = [
        ('Paid', 'Paid'),
        ('Partial', 'Partial'),
        ('Unpaid', 'Unpaid'),
    ]

    sale_id = models.CharField(max_length=50, unique=True)
    date = models.DateField()
    client = models.ForeignKey(Client, on_delete=models.PROTECT, related_name='sales')
    stone = models.ForeignKey(Gemstone, on_delete=models.PROTECT, related_name='sales')
    quantity = models.PositiveIntegerField(default=1)
    total_amount = models.DecimalField(max_digits=15, decimal_places=2, validators=[MinValueValidator(Decimal('0.00'))])
    profit = models.DecimalField(max_digits=15, decimal_places=2, default=Decimal('0.00'))
    discount = models.DecimalField(max_digits=15, decimal_places=2, default=Decimal('0.00'), validators=[MinValueValidator(Decimal('0.00'))])
    is_out_of_state = models.BooleanField(default=False)
    invoice_file = models.FileField(upload_to='invoices/', blank=True, null=True, validators=DOCUMENT_VALIDATORS)
    payment_status = models.CharField(max_length=10, choices=PAYMENT_STATUS_CHOICES, default='Unpaid')
    amount_paid = models.DecimalField(max_digits=15, decimal_places=2, default=Decimal('0.00'), validators=[MinValueValidator(Decimal('0.00'))])
    loyalty_points_awarded = models.PositiveIntegerField(default=0)
    notes = models.TextField(blank=True)
    created_by = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True, related_name='sales')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.sale_id} - {self.client.name}"

    @property
    def outstanding_amount(self):
        return max(Decimal('0.00'), self.total_amount - self.amount_paid)

    class Meta:
        db_table = 'sales'
        ordering = ['-date', '-created_at']
        indexes = [
            models.Index(fields=['date'], name='idx_sale_date'),
            models.Index(fields=['payment_status'], name='idx_sale_payment_status'),
        ]


class Payment(models.Model):
    """Payment received against a sale"""
    PAYMENT_METHOD_CHOICES = [
        ('cash', 'Cash'),
        ('upi', 'UPI'),
        ('bank_transfer', 'Bank Transfer'),
        ('cheque', 'Cheque'),
        ('card', 'Card'),
        ('other', 'Other'),
    ]

    sale = models.ForeignKey(Sale, on_delete=models.CASCADE, related_name='payments')
    payment_method = models.CharField(max_length=20, choices=PAYMENT_METHOD_CHOICES, default='cash')
    amount = models.DecimalField(max_digits=15, decimal_places=2, validators=[MinValueValidator(Decimal('0.01'))])
    reference = models.CharField(max_length=200, blank=True)
    notes = models.TextField(blank=True)
    created_by = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, related_name='sale_payments')
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'sale_payments'
        ordering = ['-created_at']
