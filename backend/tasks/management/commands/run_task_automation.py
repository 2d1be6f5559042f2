"""
Django management command to evaluate the task automation rules.
Meant to be scheduled daily (cron or similar).
"""
from datetime import date
from django.core.management.base import BaseCommand, CommandError
from backend.tasks.automation import AUTOMATION_RULES, evaluate_rule, run_automation


class Command(BaseCommand):
    help = 'Evaluate task automation rules and create the tasks they call for'

    def add_arguments(self, parser):
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Show which tasks would be created without saving them',
        )
        parser.add_argument(
            '--date',
            type=str,
            help='Evaluate rules as of this date (YYYY-MM-DD, default: today)',
        )

    def handle(self, *args, **options):
        dry_run = options.get('dry_run', False)
        today = None
        if options.get('date'):
            try:
                today = date.fromisoformat(options['date'])
            except ValueError:
                raise CommandError(f"Invalid date '{options['date']}', expected YYYY-MM-DD")

        if dry_run:
            self.stdout.write(self.style.WARNING("DRY RUN MODE - No tasks will be created"))

        for rule in AUTOMATION_RULES:
            state = 'triggered' if rule['is_active'] and evaluate_rule(rule, today) else 'idle'
            self.stdout.write(f"  Rule {rule['id']} {rule['name']} ({rule['trigger']}): {state}")

        result = run_automation(today=today, dry_run=dry_run)

        for task in result['created']:
            self.stdout.write(self.style.SUCCESS(f"  + {task.title} (rule {task.automation_rule})"))
        for title in result['skipped']:
            self.stdout.write(f"  = {title} (open task exists)")

        verb = 'Would create' if dry_run else 'Created'
        self.stdout.write(self.style.SUCCESS(f"\n{verb} {len(result['created'])} task(s)"))
