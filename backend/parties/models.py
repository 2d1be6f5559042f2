from django.db import models
from decimal import Decimal

from .loyalty import loyalty_tier_for_points


class Client(models.Model):
    """Counterparties buying stones: astrologers, jewelers, temples, collectors"""
    CLIENT_TYPE_CHOICES = [
        ('Jeweler', 'Jeweler'),
        ('Astrologer', 'Astrologer'),
        ('Temple', 'Temple'),
        ('Collector', 'Collector'),
        ('Retailer', 'Retailer'),
        ('Wholesaler', 'Wholesaler'),
    ]

    LOYALTY_LEVEL_CHOICES = [
        ('High', 'High'),
        ('Medium', 'Medium'),
        ('Low', 'Low'),
    ]

    name = models.CharField(max_length=200)
    client_type = models.CharField(max_length=30, choices=CLIENT_TYPE_CHOICES)
    city = models.CharField(max_length=100, blank=True)
    phone = models.CharField(max_length=20, blank=True, null=True)
    email = models.EmailField(blank=True)
    address = models.TextField(blank=True)
    loyalty_level = models.CharField(max_length=10, choices=LOYALTY_LEVEL_CHOICES, default='Medium')
    loyalty_points = models.PositiveIntegerField(default=0)
    notes = models.TextField(blank=True)
    tags = models.JSONField(default=list, blank=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.name

    @property
    def loyalty_tier(self):
        return loyalty_tier_for_points(self.loyalty_points)

    class Meta:
        db_table = 'clients'
        ordering = ['name']
        indexes = [
            models.Index(fields=['name'], name='idx_client_name'),
            models.Index(fields=['phone'], name='idx_client_phone'),
        ]


class Supplier(models.Model):
    """Sources of inventory, domestic or international"""
    SUPPLIER_TYPE_CHOICES = [
        ('Domestic', 'Domestic'),
        ('International', 'International'),
    ]

    name = models.CharField(max_length=200)
    location = models.CharField(max_length=200, blank=True)
    phone = models.CharField(max_length=20, blank=True)
    email = models.EmailField(blank=True)
    address = models.TextField(blank=True)
    supplier_type = models.CharField(max_length=20, choices=SUPPLIER_TYPE_CHOICES, default='Domestic')
    gemstone_types = models.JSONField(default=list, blank=True)
    rating = models.DecimalField(max_digits=3, decimal_places=1, default=Decimal('0.0'))
    delivery_days = models.PositiveIntegerField(null=True, blank=True)
    certification_options = models.TextField(blank=True)
    notes = models.TextField(blank=True)
    tags = models.JSONField(default=list, blank=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.name

    class Meta:
        db_table = 'suppliers'
        ordering = ['name']
