"""
Test suite for Tasks module
Tests: Task CRUD and filters, templates, automation rules, insights, smart suggestions
"""
from datetime import date, timedelta
from io import StringIO
from unittest import mock
from django.core.management import call_command
from django.core.management.base import CommandError
from django.test import TestCase, override_settings
from django.utils import timezone
from rest_framework import status
from backend.assistant.gemini_service import AssistantError
from backend.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from backend.tasks.automation import (
    AUTOMATION_RULES, TemplateNotFound, build_task_from_template, determine_category,
    determine_priority, evaluate_rule, inactive_clients, parse_task_suggestions,
    rule_task_titles, run_automation, task_insights
)
from backend.tasks.models import Task

MID_MONTH = date(2025, 3, 15)
MONTH_END = date(2025, 3, 31)


class TaskModelTests(TestCase):
    """Completed flag and Done status stay in sync"""

    def test_completed_sets_done(self):
        """Completing a task marks it Done"""
        task = TestDataFactory.create_task(completed=True)
        self.assertEqual(task.status, 'Done')

    def test_done_sets_completed(self):
        """A Done task is completed"""
        task = TestDataFactory.create_task(status='Done')
        self.assertTrue(task.completed)


class TemplateTests(TestCase):
    """Template expansion"""

    def test_defaults_from_template(self):
        """Template values fill the task and due date follows its priority"""
        fields = build_task_from_template('1')
        self.assertEqual(fields['title'], 'Inventory Audit')
        self.assertEqual(fields['priority'], 'High')
        self.assertEqual(fields['due_date'], timezone.localdate() + timedelta(days=1))
        self.assertEqual(len(fields['checklist']), 4)

    def test_customizations_override(self):
        """Caller values win over the template"""
        fields = build_task_from_template('2', {'title': 'Meet Ravi', 'priority': 'Low', 'related_type': 'Client'})
        self.assertEqual(fields['title'], 'Meet Ravi')
        self.assertEqual(fields['priority'], 'Low')
        self.assertEqual(fields['related_type'], 'Client')
        self.assertEqual(fields['due_date'], timezone.localdate() + timedelta(days=7))

    def test_unknown_template(self):
        """Unknown template ids raise"""
        with self.assertRaises(TemplateNotFound):
            build_task_from_template('99')


class AutomationTests(TestCase):
    """Rule evaluation and task creation"""

    def test_rule_titles(self):
        """Only create_task actions produce titles"""
        self.assertEqual(rule_task_titles(AUTOMATION_RULES[0]), ['Restock low inventory items'])

    def test_low_stock_rule(self):
        """Fewer than ten stones in stock triggers the inventory rule"""
        self.assertTrue(evaluate_rule(AUTOMATION_RULES[0], MID_MONTH))
        for _ in range(10):
            TestDataFactory.create_stone()
        self.assertFalse(evaluate_rule(AUTOMATION_RULES[0], MID_MONTH))

    def test_month_end_rule(self):
        """Sales review triggers on the last day of the month only"""
        self.assertTrue(evaluate_rule(AUTOMATION_RULES[2], MONTH_END))
        self.assertFalse(evaluate_rule(AUTOMATION_RULES[2], MID_MONTH))

    def test_inactive_clients(self):
        """Clients without recent sales or consultations are inactive"""
        quiet = TestDataFactory.create_client(name='Quiet')
        busy = TestDataFactory.create_client(name='Busy')
        TestDataFactory.create_consultation(client=busy, date=MID_MONTH - timedelta(days=2))
        TestDataFactory.create_sale(client=quiet, date=MID_MONTH - timedelta(days=30))

        names = [c.name for c in inactive_clients(MID_MONTH)]
        self.assertEqual(names, ['Quiet'])

    def test_run_creates_and_skips(self):
        """Triggered rules create one open task each and do not repeat"""
        result = run_automation(today=MID_MONTH)
        self.assertEqual(result['triggered'], ['1'])
        task = result['created'][0]
        self.assertEqual(task.title, 'Restock low inventory items')
        self.assertEqual(task.priority, 'Medium')
        self.assertEqual(task.due_date, MID_MONTH + timedelta(days=1))

        again = run_automation(today=MID_MONTH)
        self.assertEqual(again['created'], [])
        self.assertEqual(again['skipped'], ['Restock low inventory items'])

    def test_completed_task_allows_new_one(self):
        """Once the open task is completed the rule may create another"""
        first = run_automation(today=MID_MONTH)['created'][0]
        first.completed = True
        first.save()
        self.assertEqual(len(run_automation(today=MID_MONTH)['created']), 1)

    def test_dry_run_saves_nothing(self):
        """Dry runs report tasks without saving them"""
        result = run_automation(today=MONTH_END, dry_run=True)
        self.assertEqual(len(result['created']), 2)
        self.assertFalse(Task.objects.exists())

    def test_management_command(self):
        """The command runs the rules for a given date"""
        out = StringIO()
        call_command('run_task_automation', '--date', '2025-03-15', stdout=out)
        self.assertIn('Created 1 task(s)', out.getvalue())
        self.assertEqual(Task.objects.count(), 1)

    def test_management_command_bad_date(self):
        """A malformed date is a command error"""
        with self.assertRaises(CommandError):
            call_command('run_task_automation', '--date', '15/03/2025', stdout=StringIO())


class InsightTests(TestCase):
    """Task statistics"""

    def test_insights(self):
        """Counts, distributions and overdue tasks"""
        today = timezone.localdate()
        TestDataFactory.create_task(priority='High', due_date=today - timedelta(days=3), related_type='Client')
        TestDataFactory.create_task(priority='High', due_date=today + timedelta(days=3))
        TestDataFactory.create_task(priority='Low', due_date=today, completed=True, related_type='Stone')

        insights = task_insights(today=today)
        self.assertEqual(insights['total_tasks'], 3)
        self.assertEqual(insights['completed_tasks'], 1)
        self.assertEqual(insights['pending_tasks'], 2)
        self.assertEqual(insights['overdue_tasks'], 1)
        self.assertEqual(insights['priority_distribution'], {'High': 2, 'Low': 1})
        self.assertEqual(insights['category_breakdown'], {'Client': 1, 'General': 1, 'Stone': 1})
        self.assertNotEqual(insights['most_productive_day'], 'Unknown')

    def test_empty_insights(self):
        """No tasks gives zeros"""
        insights = task_insights()
        self.assertEqual(insights['total_tasks'], 0)
        self.assertEqual(insights['average_completion_time'], 0)
        self.assertEqual(insights['most_productive_day'], 'Unknown')


class SuggestionParsingTests(TestCase):
    """Assistant reply parsing"""

    def test_priority_and_category(self):
        """Keywords decide priority and category"""
        self.assertEqual(determine_priority('Urgent: restock rubies'), 'High')
        self.assertEqual(determine_priority('Optional catalogue refresh'), 'Low')
        self.assertEqual(determine_category('Call the supplier in Jaipur'), 'Procurement')
        self.assertEqual(determine_category('Update the website'), 'General')

    def test_parse_bullets(self):
        """Bullet lines longer than ten characters become suggestions"""
        text = "Here are tasks:\n• Urgent: restock low inventory of rubies\n- Follow up with client Ravi\n- short\n"
        suggestions = parse_task_suggestions(text)
        self.assertEqual(len(suggestions), 2)
        self.assertEqual(suggestions[0]['priority'], 'High')
        self.assertEqual(suggestions[0]['category'], 'Inventory')
        self.assertEqual(suggestions[1]['title'], 'Follow up with client Ravi')
        self.assertTrue(suggestions[1]['ai_generated'])


class TaskApiTests(TestCase):
    """Test task endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.today = timezone.localdate()

    def test_create_and_complete(self):
        """Completing a task through the API sets Done and is audited"""
        response = self.client.post('/api/tasks/', {
            'title': 'Send ruby to IGI', 'priority': 'High', 'due_date': self.today.isoformat()
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        pk = response.data['id']

        response = self.client.patch(f'/api/tasks/{pk}/', {'completed': True}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], 'Done')

        response = self.client.patch(f'/api/tasks/{pk}/', {'completed': False}, format='json')
        self.assertEqual(response.data['status'], 'Pending')

    def test_blank_title_rejected(self):
        """Tasks need a title"""
        response = self.client.post('/api/tasks/', {'title': '   '}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_filters(self):
        """Due today and overdue filters"""
        TestDataFactory.create_task(title='Today', due_date=self.today)
        TestDataFactory.create_task(title='Late', due_date=self.today - timedelta(days=2))
        TestDataFactory.create_task(title='Late but done', due_date=self.today - timedelta(days=2), completed=True)

        response = self.client.get('/api/tasks/?due=today')
        self.assertEqual([t['title'] for t in response.data], ['Today'])
        response = self.client.get('/api/tasks/?due=overdue')
        self.assertEqual([t['title'] for t in response.data], ['Late'])
        response = self.client.get('/api/tasks/?completed=true')
        self.assertEqual(len(response.data), 1)

    def test_templates(self):
        """Templates are listed and can create tasks"""
        response = self.client.get('/api/tasks/templates/')
        self.assertEqual(len(response.data), 3)

        response = self.client.post('/api/tasks/templates/3/create/', {'assigned_to': 'Meera'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['title'], 'Supplier Negotiation')
        self.assertEqual(response.data['assigned_to'], 'Meera')

        response = self.client.post('/api/tasks/templates/42/create/', {}, format='json')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_automation_endpoints(self):
        """Rules are listed and a run creates the low stock task"""
        response = self.client.get('/api/tasks/automation/rules/')
        self.assertEqual(len(response.data), 3)

        response = self.client.post('/api/tasks/automation/run/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('1', response.data['triggered_rules'])
        titles = [t['title'] for t in response.data['created']]
        self.assertIn('Restock low inventory items', titles)

    def test_insights_endpoint(self):
        """Insights are served over the API"""
        TestDataFactory.create_task()
        response = self.client.get('/api/tasks/insights/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['total_tasks'], 1)

    @override_settings(GEMINI_API_KEY='')
    def test_smart_tasks_without_key(self):
        """Without an API key the assistant is unavailable"""
        response = self.client.post('/api/tasks/smart/')
        self.assertEqual(response.status_code, status.HTTP_503_SERVICE_UNAVAILABLE)

    @mock.patch('backend.tasks.views.get_gemini_service')
    def test_smart_tasks(self, mock_service):
        """Assistant bullets come back as task suggestions"""
        mock_service.return_value.analyze_business_data.return_value = {
            'content': '• Urgent: call supplier about emerald delivery\n• Review client payments this week'
        }
        response = self.client.post('/api/tasks/smart/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data['suggestions']), 2)
        self.assertEqual(response.data['suggestions'][0]['priority'], 'High')
        args, kwargs = mock_service.return_value.analyze_business_data.call_args
        self.assertEqual(kwargs['context'], 'task-generation')

    @mock.patch('backend.tasks.views.get_gemini_service')
    def test_smart_tasks_llm_failure(self, mock_service):
        """A failed model call is a bad gateway"""
        mock_service.return_value.analyze_business_data.side_effect = AssistantError('boom')
        response = self.client.post('/api/tasks/smart/')
        self.assertEqual(response.status_code, status.HTTP_502_BAD_GATEWAY)
