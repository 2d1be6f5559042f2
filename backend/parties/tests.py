"""
Test suite for Parties module
Tests: Client CRUD, search, history, follow-ups, loyalty tiers, Supplier CRUD and filters
"""
from datetime import timedelta
from decimal import Decimal
from django.core.cache import cache
from django.test import TestCase
from django.utils import timezone
from rest_framework import status
from backend.core.models import AuditLog
from backend.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from backend.parties.loyalty import loyalty_tier_for_points, next_tier, points_for_amount
from backend.parties.models import Client, Supplier


class LoyaltyTests(TestCase):
    """Loyalty point and tier helpers"""

    def test_points_for_amount(self):
        """One point per full thousand rupees"""
        self.assertEqual(points_for_amount(Decimal('75999.99')), 75)
        self.assertEqual(points_for_amount(Decimal('999')), 0)
        self.assertEqual(points_for_amount(None), 0)

    def test_tiers(self):
        """Tier thresholds"""
        self.assertEqual(loyalty_tier_for_points(0), 'Bronze')
        self.assertEqual(loyalty_tier_for_points(500), 'Silver')
        self.assertEqual(loyalty_tier_for_points(1999), 'Gold')
        self.assertEqual(loyalty_tier_for_points(2000), 'Platinum')

    def test_next_tier(self):
        """Points still needed for the next tier"""
        self.assertEqual(next_tier(450), ('Silver', 50))
        self.assertEqual(next_tier(2500), (None, 0))


class ClientTests(TestCase):
    """Test client endpoints"""

    def setUp(self):
        cache.clear()
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_create_client(self):
        """Creating a client records an audit entry"""
        response = self.client.post('/api/clients/', {
            'name': '  Pandit Sharma  ',
            'client_type': 'Astrologer',
            'city': 'Varanasi',
            'tags': ['Premium'],
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['name'], 'Pandit Sharma')
        self.assertEqual(response.data['loyalty_tier'], 'Bronze')
        self.assertTrue(AuditLog.objects.filter(model_name='Client', action='create').exists())

    def test_create_client_invalid_tags(self):
        """Tags must be a list of strings"""
        response = self.client.post('/api/clients/', {
            'name': 'Temple Trust', 'client_type': 'Temple', 'tags': 'Premium'
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_list_filters(self):
        """Clients can be filtered by type, loyalty level and tag"""
        TestDataFactory.create_client(name='A Jewels', client_type='Jeweler', loyalty_level='High', tags=['Bulk Buyer'])
        TestDataFactory.create_client(name='B Temple', client_type='Temple', loyalty_level='Low')

        response = self.client.get('/api/clients/?client_type=Temple')
        self.assertEqual([c['name'] for c in response.data], ['B Temple'])

        response = self.client.get('/api/clients/?loyalty_level=High')
        self.assertEqual([c['name'] for c in response.data], ['A Jewels'])

        response = self.client.get('/api/clients/', {'tag': 'Bulk Buyer'})
        self.assertEqual([c['name'] for c in response.data], ['A Jewels'])

    def test_search(self):
        """Search matches name or city case-insensitively"""
        TestDataFactory.create_client(name='Gupta Gems', city='Surat')
        TestDataFactory.create_client(name='Other', city='Delhi')
        response = self.client.get('/api/clients/search/surat/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)
        self.assertEqual(response.data[0]['name'], 'Gupta Gems')

    def test_update_client(self):
        """PATCH updates a single field"""
        client = TestDataFactory.create_client(name='Old Name')
        response = self.client.patch(f'/api/clients/{client.id}/', {'city': 'Mumbai'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        client.refresh_from_db()
        self.assertEqual(client.city, 'Mumbai')
        self.assertEqual(client.name, 'Old Name')

    def test_loyalty_points_read_only(self):
        """Loyalty points cannot be set through the API"""
        client = TestDataFactory.create_client()
        self.client.patch(f'/api/clients/{client.id}/', {'loyalty_points': 900}, format='json')
        client.refresh_from_db()
        self.assertEqual(client.loyalty_points, 0)

    def test_delete_client_without_sales(self):
        """A client without sales can be deleted"""
        client = TestDataFactory.create_client()
        response = self.client.delete(f'/api/clients/{client.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Client.objects.filter(id=client.id).exists())

    def test_delete_client_with_sales_blocked(self):
        """A client with sales cannot be deleted"""
        sale = TestDataFactory.create_sale()
        response = self.client.delete(f'/api/clients/{sale.client_id}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertTrue(Client.objects.filter(id=sale.client_id).exists())

    def test_history(self):
        """History lists sales and consultations with totals"""
        client = TestDataFactory.create_client()
        TestDataFactory.create_sale(client=client, total_amount=Decimal('50000.00'), amount_paid=Decimal('20000.00'))
        TestDataFactory.create_consultation(client=client)

        response = self.client.get(f'/api/clients/{client.id}/history/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['summary']['purchase_count'], 1)
        self.assertEqual(response.data['summary']['total_spent'], 50000.0)
        self.assertEqual(response.data['summary']['outstanding_amount'], 30000.0)
        self.assertEqual(response.data['summary']['consultation_count'], 1)
        self.assertEqual(len(response.data['sales']), 1)

    def test_follow_ups(self):
        """Follow-ups are grouped as overdue, due today and upcoming"""
        today = timezone.localdate()
        client = TestDataFactory.create_client()
        TestDataFactory.create_consultation(client=client, date=today - timedelta(days=10),
                                            follow_up_needed=True, next_follow_up_date=today - timedelta(days=2))
        TestDataFactory.create_consultation(client=client, follow_up_needed=True, next_follow_up_date=today)
        TestDataFactory.create_consultation(client=client, follow_up_needed=True,
                                            next_follow_up_date=today + timedelta(days=5))
        TestDataFactory.create_consultation(client=client)

        response = self.client.get('/api/clients/follow-ups/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['counts'], {'overdue': 1, 'due_today': 1, 'upcoming': 1})


class SupplierTests(TestCase):
    """Test supplier endpoints"""

    def setUp(self):
        cache.clear()
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_create_supplier(self):
        """Create a supplier with gemstone types"""
        response = self.client.post('/api/suppliers/', {
            'name': 'Ceylon Sapphires',
            'location': 'Ratnapura, Sri Lanka',
            'supplier_type': 'International',
            'gemstone_types': ['Blue Sapphire', 'Yellow Sapphire'],
            'rating': '4.8',
            'delivery_days': 14,
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(Supplier.objects.get().supplier_type, 'International')

    def test_rating_out_of_range(self):
        """Rating must stay within 0 to 5"""
        response = self.client.post('/api/suppliers/', {'name': 'Bad', 'rating': '7.5'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_filter_by_gemstone_type(self):
        """Suppliers can be filtered by a gemstone type they carry"""
        TestDataFactory.create_supplier(name='Ruby Co', gemstone_types=['Ruby'])
        TestDataFactory.create_supplier(name='Emerald Co', gemstone_types=['Emerald'])
        response = self.client.get('/api/suppliers/?gemstone_type=Emerald')
        self.assertEqual([s['name'] for s in response.data], ['Emerald Co'])

    def test_search(self):
        """Search matches location"""
        TestDataFactory.create_supplier(name='Bangkok Gems', location='Bangkok')
        response = self.client.get('/api/suppliers/search/bangkok/')
        self.assertEqual(len(response.data), 1)

    def test_delete_supplier_keeps_stones(self):
        """Deleting a supplier clears the link on its stones"""
        supplier = TestDataFactory.create_supplier()
        stone = TestDataFactory.create_stone(supplier=supplier)
        response = self.client.delete(f'/api/suppliers/{supplier.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        stone.refresh_from_db()
        self.assertIsNone(stone.supplier)
