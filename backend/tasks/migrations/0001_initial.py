# Generated manually for the initial schema

from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Task',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('title', models.CharField(max_length=255)),
                ('description', models.TextField(blank=True)),
                ('related_to', models.CharField(blank=True, max_length=100)),
                ('related_type', models.CharField(blank=True, choices=[('Client', 'Client'), ('Stone', 'Stone'), ('Supplier', 'Supplier'), ('Certification', 'Certification')], max_length=20)),
                ('assigned_to', models.CharField(blank=True, max_length=150)),
                ('due_date', models.DateField(blank=True, null=True)),
                ('priority', models.CharField(choices=[('High', 'High'), ('Medium', 'Medium'), ('Low', 'Low')], default='Medium', max_length=10)),
                ('status', models.CharField(choices=[('Pending', 'Pending'), ('Done', 'Done'), ('Delayed', 'Delayed')], default='Pending', max_length=10)),
                ('completed', models.BooleanField(default=False)),
                ('category', models.CharField(blank=True, max_length=50)),
                ('estimated_duration', models.PositiveIntegerField(blank=True, help_text='Minutes', null=True)),
                ('tags', models.JSONField(blank=True, default=list)),
                ('checklist', models.JSONField(blank=True, default=list)),
                ('automation_rule', models.CharField(blank=True, max_length=20)),
                ('notes', models.TextField(blank=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'db_table': 'tasks',
                'ordering': ['due_date', '-created_at'],
                'indexes': [
                    models.Index(fields=['status'], name='idx_task_status'),
                    models.Index(fields=['due_date'], name='idx_task_due_date'),
                ],
            },
        ),
    ]
