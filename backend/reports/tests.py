"""
Test suite for Reports module
Tests: Dashboard metrics, Sales summary, Top stones/clients/suppliers, Inventory summary, Finance
"""
from datetime import timedelta
from decimal import Decimal
from django.core.cache import cache
from django.test import TestCase
from django.utils import timezone
from rest_framework import status
from backend.core.test_utils import TestDataFactory, AuthenticatedAPIClient


class ReportsTests(TestCase):
    """Test report endpoints"""

    def setUp(self):
        cache.clear()
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.today = timezone.localdate()

        self.supplier = TestDataFactory.create_supplier(name='Jaipur Gems House')
        self.buyer = TestDataFactory.create_client(name='Ravi Jewellers')
        self.ruby = TestDataFactory.create_stone(
            stone_type='Ruby', purchase_price=Decimal('40000.00'),
            selling_price=Decimal('60000.00'), supplier=self.supplier
        )
        self.emerald = TestDataFactory.create_stone(
            stone_type='Emerald', purchase_price=Decimal('20000.00'),
            selling_price=Decimal('30000.00'), supplier=self.supplier
        )
        self.in_stock = TestDataFactory.create_stone(
            stone_type='Blue Sapphire', selling_price=Decimal('90000.00')
        )
        self.paid_sale = TestDataFactory.create_sale(
            client=self.buyer, stone=self.ruby, total_amount=Decimal('60000.00'),
            amount_paid=Decimal('60000.00'), date=self.today
        )
        self.open_sale = TestDataFactory.create_sale(
            client=self.buyer, stone=self.emerald, total_amount=Decimal('30000.00'),
            amount_paid=Decimal('10000.00'), date=self.today
        )

    def test_requires_authentication(self):
        """Reports are not available anonymously"""
        self.client.logout()
        response = self.client.get('/api/reports/sales-summary/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_dashboard_metrics(self):
        """Dashboard counts stock, pending certifications and today's follow-ups"""
        TestDataFactory.create_certification(stone=self.in_stock, status='In Progress')
        TestDataFactory.create_task(title='Call Ravi', due_date=self.today, priority='High')
        TestDataFactory.create_task(title='Pack order', due_date=self.today, priority='Low')
        TestDataFactory.create_task(title='Done already', due_date=self.today, completed=True)

        response = self.client.get('/api/dashboard/metrics/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['monthly_sales'], 90000.0)
        self.assertEqual(response.data['inventory_value'], 90000.0)
        self.assertEqual(response.data['total_stones'], 3)
        self.assertEqual(response.data['in_stock_stones'], 1)
        self.assertEqual(response.data['pending_certs'], 1)
        self.assertEqual(response.data['followups'], 2)
        self.assertEqual(response.data['high_priority'], 1)

    def test_sales_summary(self):
        """Summary totals and payment status breakdown for the period"""
        response = self.client.get('/api/reports/sales-summary/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        summary = response.data['summary']
        self.assertEqual(summary['total_sales'], 90000.0)
        self.assertEqual(summary['total_profit'], 30000.0)
        self.assertEqual(summary['sale_count'], 2)
        self.assertEqual(summary['avg_sale_value'], 45000.0)
        self.assertEqual(response.data['by_payment_status'], {'Paid': 1, 'Partial': 1})
        self.assertEqual(len(response.data['daily_breakdown']), 1)
        self.assertEqual(response.data['daily_breakdown'][0]['count'], 2)

    def test_sales_summary_with_date_range(self):
        """Sales outside the requested range are excluded"""
        old_date = (self.today - timedelta(days=400)).isoformat()
        response = self.client.get(f'/api/reports/sales-summary/?date_from={old_date}&date_to={old_date}')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['summary']['sale_count'], 0)
        self.assertEqual(response.data['daily_breakdown'], [])

    def test_sales_summary_bad_date(self):
        """Malformed dates are rejected"""
        response = self.client.get('/api/reports/sales-summary/?date_from=01-01-2024')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('error', response.data)

    def test_top_stones(self):
        """Stone types are ranked by revenue"""
        response = self.client.get('/api/reports/top-stones/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        types = [row['type'] for row in response.data['stones']]
        self.assertEqual(types, ['Ruby', 'Emerald'])

    def test_top_stones_limit(self):
        """The limit parameter caps the result size"""
        response = self.client.get('/api/reports/top-stones/?limit=1')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data['stones']), 1)

    def test_top_clients(self):
        """Clients are ranked by amount spent"""
        other = TestDataFactory.create_client(name='Temple Trust')
        TestDataFactory.create_sale(
            client=other, total_amount=Decimal('5000.00'), date=self.today
        )
        response = self.client.get('/api/reports/top-clients/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        clients = response.data['clients']
        self.assertEqual(clients[0]['name'], 'Ravi Jewellers')
        self.assertEqual(clients[0]['total_spent'], 90000.0)
        self.assertEqual(clients[0]['purchase_count'], 2)

    def test_top_suppliers(self):
        """Suppliers report the value of their stones sold"""
        response = self.client.get('/api/reports/top-suppliers/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        row = response.data['suppliers'][0]
        self.assertEqual(row['name'], 'Jaipur Gems House')
        self.assertEqual(row['stone_count'], 2)
        self.assertEqual(row['sold_count'], 2)
        self.assertEqual(row['sales_value'], 90000.0)

    def test_inventory_summary(self):
        """Inventory is broken down by status and by in-stock type"""
        response = self.client.get('/api/reports/inventory-summary/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['total_stones'], 3)
        self.assertEqual(response.data['in_stock_count'], 1)
        self.assertEqual(response.data['in_stock_value'], 90000.0)
        statuses = {row['status']: row['count'] for row in response.data['by_status']}
        self.assertEqual(statuses, {'In Stock': 1, 'Sold': 2})
        self.assertEqual(response.data['by_type'][0]['type'], 'Blue Sapphire')

    def test_finance_report(self):
        """Revenue, margin and open receivables"""
        response = self.client.get('/api/reports/finance/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['revenue'], 90000.0)
        self.assertEqual(response.data['cost'], 60000.0)
        self.assertEqual(response.data['gross_profit'], 30000.0)
        self.assertEqual(response.data['margin_percentage'], 33.33)
        self.assertEqual(response.data['collected'], 70000.0)
        self.assertEqual(response.data['receivables'], 20000.0)
        self.assertEqual(response.data['open_invoices'], 1)
        self.assertEqual(response.data['active_clients'], 1)
