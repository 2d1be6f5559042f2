# Generated manually for the initial schema

import django.contrib.auth.models
import django.contrib.auth.validators
import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('auth', '0012_alter_user_first_name_max_length'),
    ]

    operations = [
        migrations.CreateModel(
            name='User',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('password', models.CharField(max_length=128, verbose_name='password')),
                ('last_login', models.DateTimeField(blank=True, null=True, verbose_name='last login')),
                ('is_superuser', models.BooleanField(default=False, help_text='Designates that this user has all permissions without explicitly assigning them.', verbose_name='superuser status')),
                ('username', models.CharField(error_messages={'unique': 'A user with that username already exists.'}, help_text='Required. 150 characters or fewer. Letters, digits and @/./+/-/_ only.', max_length=150, unique=True, validators=[django.contrib.auth.validators.UnicodeUsernameValidator()], verbose_name='username')),
                ('first_name', models.CharField(blank=True, max_length=150, verbose_name='first name')),
                ('last_name', models.CharField(blank=True, max_length=150, verbose_name='last name')),
                ('email', models.EmailField(blank=True, max_length=254, verbose_name='email address')),
                ('is_staff', models.BooleanField(default=False, help_text='Designates whether the user can log into this admin site.', verbose_name='staff status')),
                ('date_joined', models.DateTimeField(default=django.utils.timezone.now, verbose_name='date joined')),
                ('phone', models.CharField(blank=True, max_length=20, null=True)),
                ('is_active', models.BooleanField(default=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('groups', models.ManyToManyField(blank=True, help_text='The groups this user belongs to. A user will get all permissions granted to each of their groups.', related_name='user_set', related_query_name='user', to='auth.group', verbose_name='groups')),
                ('user_permissions', models.ManyToManyField(blank=True, help_text='Specific permissions for this user.', related_name='user_set', related_query_name='user', to='auth.permission', verbose_name='user permissions')),
            ],
            options={
                'db_table': 'users',
            },
            managers=[
                ('objects', django.contrib.auth.models.UserManager()),
            ],
        ),
        migrations.CreateModel(
            name='Setting',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('key', models.CharField(max_length=100, unique=True)),
                ('value', models.TextField()),
                ('description', models.TextField(blank=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'db_table': 'settings',
            },
        ),
        migrations.CreateModel(
            name='CompanyProfile',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('company_name', models.CharField(default='ANANTYA STONEWORKS', max_length=200)),
                ('tagline', models.CharField(blank=True, default='Premium Gemstone Solutions', max_length=200)),
                ('address_line1', models.CharField(blank=True, default='123 Gemstone Plaza, Jewelry District', max_length=255)),
                ('address_line2', models.CharField(blank=True, default='Mumbai, Maharashtra - 400001', max_length=255)),
                ('phone', models.CharField(blank=True, default='+91 98765 43210', max_length=30)),
                ('email', models.EmailField(blank=True, default='info@anantya.com', max_length=254)),
                ('gstin', models.CharField(blank=True, default='27AABCA1234Z1Z5', max_length=20)),
                ('state_name', models.CharField(blank=True, default='Maharashtra', max_length=100)),
                ('state_code', models.CharField(blank=True, default='27', max_length=5)),
                ('tin', models.CharField(blank=True, default='09627100742', max_length=30)),
                ('pan', models.CharField(blank=True, default='AABCA1234Z', max_length=20)),
                ('bank_name', models.CharField(blank=True, default='HDFC Bank', max_length=200)),
                ('bank_account', models.CharField(blank=True, default='123456789012', max_length=50)),
                ('bank_ifsc', models.CharField(blank=True, default='HDFC0000123', max_length=20)),
                ('bank_branch', models.CharField(blank=True, default='Fort Branch', max_length=200)),
                ('default_hsn', models.CharField(blank=True, default='7113', max_length=10)),
                ('payment_terms', models.CharField(blank=True, default='Due on receipt', max_length=200)),
                ('destination', models.CharField(blank=True, default='Mumbai', max_length=200)),
                ('terms_of_delivery', models.CharField(blank=True, default='As discussed', max_length=200)),
                ('declaration', models.TextField(blank=True, default='We declare that this invoice shows the actual price of the goods described and that all particulars are true and correct.')),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'db_table': 'company_profile',
            },
        ),
        migrations.CreateModel(
            name='AuditLog',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('action', models.CharField(choices=[('create', 'Create'), ('update', 'Update'), ('delete', 'Delete'), ('view', 'View'), ('status_change', 'Status Changed'), ('price_change', 'Price Change'), ('sale_create', 'Sale Created'), ('payment_add', 'Payment Added'), ('invoice_generate', 'Invoice Generated'), ('certification_advance', 'Certification Advanced'), ('file_upload', 'File Uploaded'), ('automation_run', 'Automation Run')], max_length=50)),
                ('model_name', models.CharField(max_length=100)),
                ('object_id', models.CharField(max_length=100)),
                ('object_name', models.CharField(blank=True, help_text='Human-readable name of the object (e.g., stone type, client name)', max_length=255, null=True)),
                ('object_reference', models.CharField(blank=True, help_text='Business identifier (e.g., stone id, sale id)', max_length=255, null=True)),
                ('changes', models.JSONField(blank=True, default=dict)),
                ('ip_address', models.GenericIPAddressField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('user', models.ForeignKey(null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='audit_logs', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'audit_logs',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['-created_at'], name='idx_auditlog_created'),
                    models.Index(fields=['action'], name='idx_auditlog_action'),
                    models.Index(fields=['model_name'], name='idx_auditlog_model'),
                    models.Index(fields=['object_reference'], name='idx_auditlog_ref'),
                ],
            },
        ),
    ]
