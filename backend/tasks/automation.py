"""
Task automation: rule checks, task templates, insights and assistant-suggested tasks
"""
import calendar
import logging
import re
from collections import Counter
from datetime import datetime, time, timedelta

from django.db.models import Max
from django.utils import timezone

from .models import Task

logger = logging.getLogger(__name__)

LOW_STOCK_THRESHOLD = 10
INACTIVE_CLIENT_DAYS = 7

AUTOMATION_RULES = [
    {
        'id': '1',
        'name': 'Inventory Check',
        'trigger': 'daily',
        'conditions': ['inventory_count < 10'],
        'actions': ['create_task: "Restock low inventory items"', 'send_notification: "Low stock alert"'],
        'is_active': True,
    },
    {
        'id': '2',
        'name': 'Client Follow-up',
        'trigger': 'weekly',
        'conditions': ['last_client_contact > 7_days'],
        'actions': ['create_task: "Follow up with inactive clients"', 'schedule_reminder'],
        'is_active': True,
    },
    {
        'id': '3',
        'name': 'Sales Review',
        'trigger': 'monthly',
        'conditions': ['month_end'],
        'actions': ['create_task: "Monthly sales analysis"', 'generate_report'],
        'is_active': True,
    },
]

TASK_TEMPLATES = [
    {
        'id': '1',
        'name': 'Inventory Audit',
        'description': 'Complete inventory count and quality check',
        'priority': 'High',
        'estimated_duration': 120,
        'category': 'Inventory',
        'tags': ['audit', 'quality', 'count'],
        'checklist': ['Count all items', 'Check for damage', 'Update records', 'Generate report'],
    },
    {
        'id': '2',
        'name': 'Client Meeting',
        'description': 'Prepare for and conduct client meeting',
        'priority': 'Medium',
        'estimated_duration': 60,
        'category': 'Sales',
        'tags': ['meeting', 'client', 'presentation'],
        'checklist': ['Review client history', 'Prepare presentation', 'Schedule meeting', 'Follow up notes'],
    },
    {
        'id': '3',
        'name': 'Supplier Negotiation',
        'description': 'Negotiate prices and terms with suppliers',
        'priority': 'High',
        'estimated_duration': 90,
        'category': 'Procurement',
        'tags': ['negotiation', 'supplier', 'pricing'],
        'checklist': ['Research market prices', 'Prepare negotiation points', 'Schedule meeting', 'Document agreement'],
    },
]

DUE_DAYS_BY_PRIORITY = {'High': 1, 'Medium': 7, 'Low': 30}

HIGH_PRIORITY_KEYWORDS = ['urgent', 'critical', 'immediate', 'emergency', 'deadline']
LOW_PRIORITY_KEYWORDS = ['optional', 'nice to have', 'when possible', 'low priority']

CATEGORY_KEYWORDS = [
    ('Inventory', ['inventory', 'stock', 'item']),
    ('Sales', ['client', 'customer', 'meeting']),
    ('Procurement', ['supplier', 'purchase', 'buy']),
    ('Finance', ['finance', 'money', 'budget']),
]

SMART_TASK_QUERY = (
    "Based on this business data, suggest 3-5 specific tasks that should be prioritized. "
    "Focus on actionable items that will improve business performance."
)


class TemplateNotFound(LookupError):
    pass


# Templates

def get_template(template_id):
    for template in TASK_TEMPLATES:
        if template['id'] == str(template_id):
            return template
    raise TemplateNotFound(f"Template {template_id} not found")


def default_due_date(priority, today=None):
    today = today or timezone.localdate()
    return today + timedelta(days=DUE_DAYS_BY_PRIORITY.get(priority, 7))


def build_task_from_template(template_id, customizations=None):
    """Task field values from a template with caller overrides applied"""
    template = get_template(template_id)
    customizations = customizations or {}
    priority = customizations.get('priority') or template['priority']

    fields = {
        'title': customizations.get('title') or template['name'],
        'description': customizations.get('description') or template['description'],
        'priority': priority,
        'estimated_duration': customizations.get('estimated_duration') or template['estimated_duration'],
        'category': customizations.get('category') or template['category'],
        'tags': customizations.get('tags') or list(template['tags']),
        'checklist': customizations.get('checklist') or list(template['checklist']),
        # Default due date follows the template priority
        'due_date': customizations.get('due_date') or default_due_date(template['priority']),
    }
    for key in ('assigned_to', 'related_to', 'related_type'):
        if customizations.get(key):
            fields[key] = customizations[key]
    return fields


# Automation rules

def _low_stock(today):
    from backend.inventory.models import Gemstone
    return Gemstone.objects.filter(status='In Stock').count() < LOW_STOCK_THRESHOLD


def inactive_clients(today, days=INACTIVE_CLIENT_DAYS):
    """Active clients with no sale or consultation in the last `days` days"""
    from backend.parties.models import Client

    cutoff = today - timedelta(days=days)
    clients = Client.objects.filter(is_active=True).annotate(
        last_sale=Max('sales__date'),
        last_consultation=Max('consultations__date'),
    )
    inactive = []
    for client in clients:
        contacts = [d for d in (client.last_sale, client.last_consultation) if d]
        if not contacts or max(contacts) < cutoff:
            inactive.append(client)
    return inactive


def _month_end(today):
    return today.day == calendar.monthrange(today.year, today.month)[1]


CONDITION_CHECKS = {
    'inventory_count < 10': _low_stock,
    'last_client_contact > 7_days': lambda today: bool(inactive_clients(today)),
    'month_end': _month_end,
}


def evaluate_rule(rule, today=None):
    """A rule triggers when any of its conditions holds"""
    today = today or timezone.localdate()
    for condition in rule['conditions']:
        check = CONDITION_CHECKS.get(condition)
        if check is None:
            logger.warning(f"Unknown automation condition '{condition}' in rule {rule['name']}")
            continue
        if check(today):
            return True
    return False


def rule_task_titles(rule):
    titles = []
    for action in rule['actions']:
        if action.startswith('create_task:'):
            titles.append(action.replace('create_task:', '').strip().strip('"'))
    return titles


def run_automation(today=None, dry_run=False):
    """
    Evaluate active rules and create their tasks (Medium priority, due tomorrow).
    A rule with an open task of the same title is not repeated.

    Returns dict with triggered rule ids, created tasks and skipped titles.
    """
    today = today or timezone.localdate()
    result = {'triggered': [], 'created': [], 'skipped': []}

    for rule in AUTOMATION_RULES:
        if not rule['is_active'] or not evaluate_rule(rule, today):
            continue
        result['triggered'].append(rule['id'])

        for title in rule_task_titles(rule):
            if Task.objects.filter(automation_rule=rule['id'], title=title, completed=False).exists():
                result['skipped'].append(title)
                continue
            if dry_run:
                result['created'].append(Task(title=title, automation_rule=rule['id']))
                continue
            task = Task.objects.create(
                title=title,
                description=f"Automatically generated by rule: {rule['name']}",
                priority='Medium',
                status='Pending',
                completed=False,
                due_date=today + timedelta(days=1),
                automation_rule=rule['id'],
            )
            logger.info(f"Automation rule '{rule['name']}' created task {task.id}: {title}")
            result['created'].append(task)

    return result


# Insights

def _due_datetime(due_date):
    return timezone.make_aware(datetime.combine(due_date, time.min))


def average_completion_days(tasks):
    completed = [t for t in tasks if t.completed and t.due_date]
    if not completed:
        return 0
    total_seconds = sum(abs((t.updated_at - _due_datetime(t.due_date)).total_seconds()) for t in completed)
    return round(total_seconds / len(completed) / 86400, 2)


def most_productive_day(tasks):
    days = Counter(
        timezone.localtime(t.updated_at).strftime('%A')
        for t in tasks if t.completed and t.updated_at
    )
    if not days:
        return 'Unknown'
    return days.most_common(1)[0][0]


def task_insights(tasks=None, today=None):
    tasks = list(tasks if tasks is not None else Task.objects.all())
    today = today or timezone.localdate()

    return {
        'total_tasks': len(tasks),
        'completed_tasks': sum(1 for t in tasks if t.completed),
        'pending_tasks': sum(1 for t in tasks if not t.completed),
        'overdue_tasks': sum(1 for t in tasks if not t.completed and t.due_date and t.due_date < today),
        'average_completion_time': average_completion_days(tasks),
        'most_productive_day': most_productive_day(tasks),
        'priority_distribution': dict(Counter(t.priority or 'Medium' for t in tasks)),
        'category_breakdown': dict(Counter(t.related_type or 'General' for t in tasks)),
    }


# Assistant-suggested tasks

def determine_priority(text):
    text = text.lower()
    if any(keyword in text for keyword in HIGH_PRIORITY_KEYWORDS):
        return 'High'
    if any(keyword in text for keyword in LOW_PRIORITY_KEYWORDS):
        return 'Low'
    return 'Medium'


def determine_category(text):
    text = text.lower()
    for category, keywords in CATEGORY_KEYWORDS:
        if any(keyword in text for keyword in keywords):
            return category
    return 'General'


def parse_task_suggestions(response_text, limit=5):
    """Bullet lines of an assistant reply as task suggestions"""
    suggestions = []
    for line in (response_text or '').split('\n'):
        if '•' not in line and '-' not in line:
            continue
        task_text = re.sub(r'^[•\-\s]+', '', line).strip()
        if len(task_text) <= 10:
            continue
        suggestions.append({
            'title': task_text,
            'description': task_text,
            'priority': determine_priority(task_text),
            'category': determine_category(task_text),
            'estimated_duration': 60,
            'confidence': 0.8,
            'ai_generated': True,
        })
    return suggestions[:limit]


def generate_smart_tasks(service, business_data):
    """Ask the assistant for prioritized tasks and parse them"""
    analysis = service.analyze_business_data(SMART_TASK_QUERY, business_data, context='task-generation')
    return parse_task_suggestions(analysis['content'])
