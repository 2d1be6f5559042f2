"""
Test suite for Core module
Tests: Auth, Users, Settings, Audit logs, Company profile, Global search, Constants, Seed data, User groups
"""
from io import StringIO
from django.core.cache import cache
from django.contrib.auth.models import Group
from django.core.management import call_command
from django.test import TestCase
from rest_framework import status
from rest_framework.test import APIClient
from backend.core.gst import is_valid_gstin, is_valid_pan
from backend.core.models import AuditLog, CompanyProfile
from backend.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from backend.core.utils import create_audit_log
from backend.inventory.models import Gemstone
from backend.parties.models import Client
from backend.sales.models import Sale


class AuthTests(TestCase):
    """Test registration and token endpoints"""

    def setUp(self):
        self.client = APIClient()

    def test_register_returns_tokens(self):
        """Registering a user returns the user and a token pair"""
        response = self.client.post('/api/auth/register/', {
            'username': 'meera',
            'email': 'meera@test.com',
            'password': 'Str0ng-pass-123',
            'password_confirm': 'Str0ng-pass-123',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['user']['username'], 'meera')
        self.assertIn('access', response.data)
        self.assertIn('refresh', response.data)

    def test_register_password_mismatch(self):
        """Mismatched passwords are rejected"""
        response = self.client.post('/api/auth/register/', {
            'username': 'meera',
            'password': 'Str0ng-pass-123',
            'password_confirm': 'something-else-456',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_login_and_refresh(self):
        """Login returns tokens which can be refreshed"""
        TestDataFactory.create_user(username='arjun', password='testpass123')
        response = self.client.post('/api/auth/login/', {
            'username': 'arjun', 'password': 'testpass123'
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)

        refresh = self.client.post('/api/auth/refresh/', {'refresh': response.data['refresh']}, format='json')
        self.assertEqual(refresh.status_code, status.HTTP_200_OK)
        self.assertIn('access', refresh.data)

    def test_login_wrong_password(self):
        """Bad credentials are refused"""
        TestDataFactory.create_user(username='arjun', password='testpass123')
        response = self.client.post('/api/auth/login/', {
            'username': 'arjun', 'password': 'wrong'
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_me_without_groups(self):
        """A plain user without groups can see the dashboard only"""
        user = TestDataFactory.create_user()
        client = AuthenticatedAPIClient()
        client.authenticate_user(user)
        response = client.get('/api/auth/me/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['groups'], [])
        self.assertTrue(response.data['can_access_dashboard'])
        self.assertFalse(response.data['can_access_finance'])


class UserAndSettingTests(TestCase):
    """Admin-only user and setting endpoints"""

    def setUp(self):
        self.admin = TestDataFactory.create_user(is_staff=True)
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.admin)

    def test_user_list_requires_staff(self):
        """Non-staff users cannot list users"""
        user = TestDataFactory.create_user()
        client = AuthenticatedAPIClient()
        client.authenticate_user(user)
        response = client.get('/api/users/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_user_list(self):
        """Staff can list users"""
        response = self.client.get('/api/users/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)

    def test_setting_crud(self):
        """Settings can be created, updated and deleted"""
        response = self.client.post('/api/settings/', {'key': 'currency', 'value': 'INR'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        pk = response.data['id']

        response = self.client.patch(f'/api/settings/{pk}/', {'value': 'USD'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['value'], 'USD')

        response = self.client.delete(f'/api/settings/{pk}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)


class AuditLogTests(TestCase):
    """Audit log helper and read endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_create_audit_log_requires_fields(self):
        """Entries missing an action or object id are skipped"""
        self.assertIsNone(create_audit_log(action='create', model_name='Client'))
        self.assertEqual(AuditLog.objects.count(), 0)

    def test_user_sees_own_entries_only(self):
        """Non-staff users only see their own audit entries"""
        other = TestDataFactory.create_user()
        create_audit_log(user=self.user, action='create', model_name='Client', object_id=1)
        create_audit_log(user=other, action='delete', model_name='Client', object_id=2)

        response = self.client.get('/api/audit-logs/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)
        self.assertEqual(response.data[0]['action'], 'create')

    def test_filter_by_reference(self):
        """Entries can be filtered by business reference"""
        create_audit_log(user=self.user, action='sale_create', model_name='Sale', object_id=1, object_reference='SALE-1')
        create_audit_log(user=self.user, action='sale_create', model_name='Sale', object_id=2, object_reference='SALE-2')
        response = self.client.get('/api/audit-logs/?reference=SALE-2')
        self.assertEqual(len(response.data), 1)
        self.assertEqual(response.data[0]['object_id'], '2')

    def test_detail_of_other_user_forbidden(self):
        """A user cannot read someone else's audit entry"""
        other = TestDataFactory.create_user()
        log = create_audit_log(user=other, action='create', model_name='Client', object_id=3)
        response = self.client.get(f'/api/audit-logs/{log.id}/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_bad_date_filter(self):
        """Malformed date filters are rejected"""
        response = self.client.get('/api/audit-logs/?date_to=31-12-2025')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('error', response.data)


class CompanyProfileTests(TestCase):
    """Business profile singleton"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.admin = TestDataFactory.create_user(is_staff=True)
        self.client = AuthenticatedAPIClient()

    def test_defaults_created_on_first_read(self):
        """Reading the profile creates it with default values"""
        self.client.authenticate_user(self.user)
        response = self.client.get('/api/company-profile/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['company_name'], 'ANANTYA STONEWORKS')
        self.assertEqual(CompanyProfile.objects.count(), 1)

    def test_only_staff_can_update(self):
        """Non-staff updates are refused"""
        self.client.authenticate_user(self.user)
        response = self.client.patch('/api/company-profile/', {'company_name': 'X'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_staff_update_validates_gstin(self):
        """A malformed GSTIN is rejected, a valid one is saved"""
        self.client.authenticate_user(self.admin)
        response = self.client.patch('/api/company-profile/', {'gstin': 'BADGSTIN'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

        response = self.client.patch('/api/company-profile/', {'gstin': '08AABCA1234Z1Z5'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(CompanyProfile.get_solo().gstin, '08AABCA1234Z1Z5')
        self.assertTrue(AuditLog.objects.filter(model_name='CompanyProfile').exists())

    def test_gst_formats(self):
        """GSTIN and PAN format checks"""
        self.assertTrue(is_valid_gstin('27AABCA1234Z1Z5'))
        self.assertFalse(is_valid_gstin('27AABCA1234Z1X5'))
        self.assertTrue(is_valid_pan('AABCA1234Z'))
        self.assertFalse(is_valid_pan('AAB1234Z'))


class SearchAndConstantsTests(TestCase):
    """Global search and reference lists"""

    def setUp(self):
        cache.clear()
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_empty_query(self):
        """An empty query returns empty groups"""
        response = self.client.get('/api/search/?q=')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, {'stones': [], 'clients': [], 'suppliers': [], 'sales': []})

    def test_search_across_entities(self):
        """Matches are grouped by entity"""
        TestDataFactory.create_stone(stone_type='Ruby', origin='Mogok')
        TestDataFactory.create_client(name='Mogok Traders')
        TestDataFactory.create_supplier(name='Sapphire House', location='Ratnapura')

        response = self.client.get('/api/search/?q=mogok')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data['stones']), 1)
        self.assertEqual(len(response.data['clients']), 1)
        self.assertEqual(response.data['suppliers'], [])

    def test_constants(self):
        """Reference lists include stone types and choice values"""
        response = self.client.get('/api/constants/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('Ruby', response.data['gemstone_types'])
        self.assertIn('GIA', response.data['certification_labs'])
        self.assertEqual(response.data['payment_status'], ['Paid', 'Partial', 'Unpaid'])
        self.assertEqual(response.data['task_status'], ['Pending', 'Done', 'Delayed'])


class SeedCommandTests(TestCase):
    """Demo data loader"""

    def test_seed_and_clear(self):
        """Seeding loads linked demo data and --clear replaces it"""
        out = StringIO()
        call_command('seed_gemstone_data', stdout=out)
        self.assertIn('Demo data loaded', out.getvalue())
        self.assertEqual(Gemstone.objects.count(), 6)
        self.assertEqual(Gemstone.objects.filter(status='Sold').count(), 3)
        self.assertEqual(Sale.objects.filter(payment_status='Paid').count(), 1)
        self.assertEqual(Client.objects.get(name='Ravi Jewellers').loyalty_points, 60)

        out = StringIO()
        call_command('seed_gemstone_data', stdout=out)
        self.assertIn('already exist', out.getvalue())
        self.assertEqual(Gemstone.objects.count(), 6)

        call_command('seed_gemstone_data', '--clear', stdout=StringIO())
        self.assertEqual(Gemstone.objects.count(), 6)
        self.assertEqual(Client.objects.count(), 4)


class UserGroupCommandTests(TestCase):
    """Role groups used by the page access flags"""

    def test_groups_and_access_flags(self):
        """Groups are created once and a Sales user cannot see finance"""
        call_command('create_user_groups', stdout=StringIO())
        out = StringIO()
        call_command('create_user_groups', stdout=out)
        self.assertIn('0 groups created, 3 groups already existed', out.getvalue())

        sales_group = Group.objects.get(name='Sales')
        self.assertTrue(sales_group.permissions.filter(codename='add_sale').exists())
        self.assertFalse(sales_group.permissions.filter(codename='delete_gemstone').exists())
        self.assertFalse(sales_group.permissions.filter(codename='change_gemstone').exists())

        user = TestDataFactory.create_user()
        user.groups.add(sales_group)
        client = AuthenticatedAPIClient()
        client.authenticate_user(user)
        response = client.get('/api/auth/me/')
        self.assertEqual(response.data['groups'], ['Sales'])
        self.assertFalse(response.data['can_access_dashboard'])
        self.assertFalse(response.data['can_access_finance'])
