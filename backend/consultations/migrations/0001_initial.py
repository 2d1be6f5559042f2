# Generated manually for the initial schema

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('parties', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Consultation',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('date', models.DateField()),
                ('medium', models.CharField(choices=[('In-person', 'In-person'), ('Call', 'Call'), ('Video', 'Video')], max_length=20)),
                ('stones_discussed', models.JSONField(blank=True, default=list)),
                ('outcome', models.TextField(blank=True)),
                ('follow_up_needed', models.BooleanField(default=False)),
                ('next_follow_up_date', models.DateField(blank=True, null=True)),
                ('notes', models.TextField(blank=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('client', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='consultations', to='parties.client')),
            ],
            options={
                'db_table': 'consultations',
                'ordering': ['-date', '-created_at'],
                'indexes': [
                    models.Index(fields=['next_follow_up_date'], name='idx_consult_follow_up'),
                ],
            },
        ),
    ]
