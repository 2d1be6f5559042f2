"""
Test suite for Inventory module
Tests: Stone CRUD, filters, search, code lookup, labels, stock report
"""
from decimal import Decimal
from django.core.cache import cache
from django.test import TestCase
from rest_framework import status
from backend.core.models import AuditLog
from backend.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from backend.inventory.models import Gemstone
from backend.inventory.utils import generate_stone_id, get_prefix_for_type


class StoneIdTests(TestCase):
    """Stone id generation"""

    def test_prefix(self):
        """Prefix is the first three letters of the type"""
        self.assertEqual(get_prefix_for_type('Blue Sapphire'), 'BLU')
        self.assertEqual(get_prefix_for_type("Cat's Eye"), 'CAT')
        self.assertEqual(get_prefix_for_type(''), 'GEM')

    def test_generated_ids_are_unique(self):
        """Generated ids carry the prefix and do not repeat"""
        first = generate_stone_id('Ruby')
        second = generate_stone_id('Ruby')
        self.assertTrue(first.startswith('RUB-'))
        self.assertNotEqual(first, second)

    def test_price_per_carat(self):
        """Price per carat and margin are derived from prices"""
        stone = TestDataFactory.create_stone(carat=Decimal('3.00'), purchase_price=Decimal('60000.00'),
                                             selling_price=Decimal('100000.00'))
        self.assertEqual(stone.price_per_carat, Decimal('33333.33'))
        self.assertEqual(stone.margin, Decimal('40000.00'))
        self.assertEqual(stone.margin_percentage, Decimal('66.67'))


class GemstoneTests(TestCase):
    """Test inventory endpoints"""

    def setUp(self):
        cache.clear()
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_create_stone_generates_id(self):
        """A stone without an id gets one from its type"""
        response = self.client.post('/api/inventory/', {
            'type': 'Emerald',
            'carat': '4.20',
            'origin': 'Colombia',
            'grade': 'AA',
            'purchase_price': '80000.00',
            'selling_price': '120000.00',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertTrue(response.data['stone_id'].startswith('EME-'))
        self.assertEqual(response.data['status'], 'In Stock')
        self.assertTrue(AuditLog.objects.filter(model_name='Gemstone', action='create').exists())

    def test_create_requires_positive_carat(self):
        """Carat must be positive"""
        response = self.client.post('/api/inventory/', {'type': 'Ruby', 'carat': '0'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('carat', response.data)

    def test_certified_requires_lab(self):
        """A certified stone must name its lab"""
        response = self.client.post('/api/inventory/', {
            'type': 'Ruby', 'carat': '1.50', 'certified': True
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('certificate_lab', response.data)

    def test_duplicate_stone_id_rejected(self):
        """Stone ids are unique"""
        TestDataFactory.create_stone(stone_id='RUB-0001')
        response = self.client.post('/api/inventory/', {
            'stone_id': 'RUB-0001', 'type': 'Ruby', 'carat': '1.00'
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_list_filters(self):
        """List supports status, type, carat range and tag filters"""
        TestDataFactory.create_stone(stone_type='Ruby', carat=Decimal('1.00'), tags=['Premium'])
        TestDataFactory.create_stone(stone_type='Ruby', carat=Decimal('5.00'), status='Reserved')
        TestDataFactory.create_stone(stone_type='Emerald', carat=Decimal('3.00'))

        response = self.client.get('/api/inventory/?type=ruby')
        self.assertEqual(len(response.data), 2)
        response = self.client.get('/api/inventory/?status=Reserved')
        self.assertEqual(len(response.data), 1)
        response = self.client.get('/api/inventory/?min_carat=2&max_carat=4')
        self.assertEqual([s['type'] for s in response.data], ['Emerald'])
        response = self.client.get('/api/inventory/?tag=Premium')
        self.assertEqual(len(response.data), 1)

    def test_list_reflects_new_stones(self):
        """Cached lists are invalidated when a stone is added"""
        response = self.client.get('/api/inventory/')
        self.assertEqual(len(response.data), 0)
        TestDataFactory.create_stone()
        response = self.client.get('/api/inventory/')
        self.assertEqual(len(response.data), 1)

    def test_search(self):
        """Search matches type and origin"""
        TestDataFactory.create_stone(stone_type='Blue Sapphire', origin='Ratnapura')
        TestDataFactory.create_stone(stone_type='Ruby', origin='Mogok')
        response = self.client.get('/api/inventory/search/ratna/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)
        self.assertEqual(response.data[0]['type'], 'Blue Sapphire')

    def test_lookup_by_code(self):
        """Stones can be found by business id"""
        stone = TestDataFactory.create_stone(stone_id='EME-TEST-01')
        response = self.client.get('/api/inventory/code/eme-test-01/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['id'], stone.id)

        response = self.client.get('/api/inventory/code/NOPE/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_price_change_is_audited(self):
        """Changing a price records the old and new values"""
        stone = TestDataFactory.create_stone(selling_price=Decimal('75000.00'))
        response = self.client.patch(f'/api/inventory/{stone.id}/', {'selling_price': '80000.00'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        log = AuditLog.objects.get(action='price_change')
        self.assertEqual(log.changes['selling_price']['new'], '80000.00')

    def test_status_change_is_audited(self):
        """Changing status records an audit entry"""
        stone = TestDataFactory.create_stone()
        self.client.patch(f'/api/inventory/{stone.id}/', {'status': 'Reserved'}, format='json')
        log = AuditLog.objects.get(action='status_change')
        self.assertEqual(log.changes['status'], {'old': 'In Stock', 'new': 'Reserved'})

    def test_delete_stone(self):
        """An unsold stone can be deleted"""
        stone = TestDataFactory.create_stone()
        response = self.client.delete(f'/api/inventory/{stone.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Gemstone.objects.filter(id=stone.id).exists())

    def test_delete_sold_stone_blocked(self):
        """A stone referenced by a sale cannot be deleted"""
        sale = TestDataFactory.create_sale()
        response = self.client.delete(f'/api/inventory/{sale.stone_id}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_label(self):
        """Labels are returned as PNG data URLs"""
        stone = TestDataFactory.create_stone()
        response = self.client.get(f'/api/inventory/{stone.id}/label/?show_price=true')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['stone_id'], stone.stone_id)
        self.assertTrue(response.data['image'].startswith('data:image/png;base64,'))

    def test_stock_report_pdf(self):
        """Stock report downloads as a PDF"""
        TestDataFactory.create_stone()
        response = self.client.get('/api/inventory/stock-report/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response['Content-Type'], 'application/pdf')
        self.assertTrue(response.content.startswith(b'%PDF'))
