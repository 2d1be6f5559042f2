from django.core.management.base import BaseCommand
from django.contrib.auth.models import Group, Permission

BUSINESS_APPS = ['parties', 'inventory', 'sales', 'certifications', 'consultations', 'tasks']

# Sales staff record sales and client contact, and only read stock
SALES_PERMISSIONS = {
    'parties': ['view', 'add', 'change'],
    'inventory': ['view'],
    'sales': ['view', 'add', 'change'],
    'consultations': ['view', 'add', 'change'],
    'tasks': ['view', 'add', 'change'],
}


class Command(BaseCommand):
    help = 'Create Django user groups for RBAC: Admin, Manager, Sales'

    def handle(self, *args, **options):
        groups_config = [
            {'name': 'Admin', 'description': 'Owners and developers - full system access including backend'},
            {'name': 'Manager', 'description': 'Runs the business modules, dashboard and reports, no user admin'},
            {'name': 'Sales', 'description': 'Sales staff - clients, sales and follow-ups, read-only stock'},
        ]

        created_count = 0
        updated_count = 0

        for group_config in groups_config:
            group, created = Group.objects.get_or_create(name=group_config['name'])

            if created:
                self.stdout.write(self.style.SUCCESS(f'✓ Created group: {group_config["name"]}'))
                created_count += 1
            else:
                self.stdout.write(f'  Group already exists: {group_config["name"]}')
                updated_count += 1

            if group_config['name'] == 'Admin':
                group.permissions.set(Permission.objects.all())
                self.stdout.write('  Added all permissions to Admin group')
            elif group_config['name'] == 'Manager':
                group.permissions.set(Permission.objects.filter(content_type__app_label__in=BUSINESS_APPS))
                self.stdout.write('  Added business module permissions to Manager group')
            else:
                permissions = Permission.objects.none()
                for app_label, actions in SALES_PERMISSIONS.items():
                    for action in actions:
                        permissions = permissions | Permission.objects.filter(
                            content_type__app_label=app_label,
                            codename__startswith=f'{action}_'
                        )
                group.permissions.set(permissions.distinct())
                self.stdout.write(f'  Added sales permissions to {group_config["name"]} group')

        self.stdout.write(self.style.SUCCESS(
            f'\nCompleted: {created_count} groups created, {updated_count} groups already existed'
        ))
