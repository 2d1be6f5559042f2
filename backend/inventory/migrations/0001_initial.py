# Generated manually for the initial schema

import backend.core.validators
import django.core.validators
import django.db.models.deletion
from decimal import Decimal
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('parties', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Gemstone',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('stone_id', models.CharField(max_length=50, unique=True)),
                ('type', models.CharField(max_length=100)),
                ('carat', models.DecimalField(decimal_places=2, max_digits=10, validators=[django.core.validators.MinValueValidator(Decimal('0.01'))])),
                ('origin', models.CharField(blank=True, max_length=100)),
                ('grade', models.CharField(blank=True, choices=[('AAAA', 'AAAA'), ('AAA', 'AAA'), ('AA', 'AA'), ('A', 'A'), ('B', 'B'), ('C', 'C')], max_length=10)),
                ('color', models.CharField(blank=True, max_length=50)),
                ('clarity', models.CharField(blank=True, max_length=50)),
                ('cut', models.CharField(blank=True, max_length=50)),
                ('quantity', models.PositiveIntegerField(default=1)),
                ('certified', models.BooleanField(default=False)),
                ('certificate_lab', models.CharField(blank=True, max_length=100)),
                ('certificate_file', models.FileField(blank=True, null=True, upload_to='certificates/', validators=[backend.core.validators.validate_document_extension, backend.core.validators.validate_document_size])),
                ('purchase_price', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=15, validators=[django.core.validators.MinValueValidator(Decimal('0.00'))])),
                ('selling_price', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=15, validators=[django.core.validators.MinValueValidator(Decimal('0.00'))])),
                ('status', models.CharField(choices=[('In Stock', 'In Stock'), ('Sold', 'Sold'), ('Reserved', 'Reserved'), ('Processing', 'Processing')], default='In Stock', max_length=20)),
                ('package_type', models.CharField(blank=True, max_length=50)),
                ('notes', models.TextField(blank=True)),
                ('tags', models.JSONField(blank=True, default=list)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('supplier', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='stones', to='parties.supplier')),
            ],
            options={
                'db_table': 'inventory',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['status'], name='idx_stone_status'),
                    models.Index(fields=['type'], name='idx_stone_type'),
                    models.Index(fields=['origin'], name='idx_stone_origin'),
                ],
            },
        ),
    ]
