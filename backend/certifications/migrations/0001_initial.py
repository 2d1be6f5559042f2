# Generated manually for the initial schema

import backend.core.validators
import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('inventory', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Certification',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('lab', models.CharField(choices=[('IGI', 'IGI'), ('IIGJ', 'IIGJ'), ('GJEPC', 'GJEPC'), ('GIA', 'GIA'), ('Gübelin', 'Gübelin'), ('SSEF', 'SSEF'), ('AGL', 'AGL'), ('Lotus Gemology', 'Lotus Gemology'), ('GRS', 'GRS'), ('C. Dunaigre', 'C. Dunaigre')], max_length=50)),
                ('date_sent', models.DateField(blank=True, null=True)),
                ('date_received', models.DateField(blank=True, null=True)),
                ('certificate_file', models.FileField(blank=True, null=True, upload_to='certificates/', validators=[backend.core.validators.validate_document_extension, backend.core.validators.validate_document_size])),
                ('certificate_number', models.CharField(blank=True, max_length=100)),
                ('status', models.CharField(choices=[('Pending', 'Pending'), ('In Progress', 'In Progress'), ('Received', 'Received'), ('Certified', 'Certified')], default='Pending', max_length=20)),
                ('notes', models.TextField(blank=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('stone', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='certifications', to='inventory.gemstone')),
            ],
            options={
                'db_table': 'certifications',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['status'], name='idx_cert_status'),
                ],
            },
        ),
    ]
