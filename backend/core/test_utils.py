"""
Test utilities and factories for creating test data
"""
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from backend.parties.models import Client, Supplier
from backend.inventory.models import Gemstone
from backend.inventory.utils import generate_stone_id
from backend.sales.models import Sale
from backend.sales.utils import generate_sale_id, payment_status_for, calculate_profit
from backend.certifications.models import Certification
from backend.consultations.models import Consultation
from backend.tasks.models import Task
from decimal import Decimal
from django.utils import timezone
import random
import string

User = get_user_model()


class TestDataFactory:
    """Factory class for creating test data"""

    @staticmethod
    def random_string(length=10):
        """Generate a random string"""
        return ''.join(random.choices(string.ascii_letters + string.digits, k=length))

    @staticmethod
    def create_user(username=None, email=None, password='testpass123', is_staff=False, is_superuser=False):
        """Create a test user"""
        if not username:
            username = f'testuser_{TestDataFactory.random_string(6)}'
        if not email:
            email = f'{username}@test.com'
        user = User.objects.create_user(
            username=username,
            email=email,
            password=password,
            is_staff=is_staff,
            is_superuser=is_superuser
        )
        return user

    @staticmethod
    def create_client(name=None, client_type='Jeweler', loyalty_level='Medium', **kwargs):
        """Create a test client"""
        if not name:
            name = f'Client_{TestDataFactory.random_string(6)}'
        kwargs.setdefault('phone', f'9{random.randint(100000000, 999999999)}')
        kwargs.setdefault('city', 'Jaipur')
        return Client.objects.create(
            name=name,
            client_type=client_type,
            loyalty_level=loyalty_level,
            **kwargs
        )

    @staticmethod
    def create_supplier(name=None, supplier_type='Domestic', rating=None, **kwargs):
        """Create a test supplier"""
        if not name:
            name = f'Supplier_{TestDataFactory.random_string(6)}'
        kwargs.setdefault('location', 'Jaipur, Rajasthan')
        kwargs.setdefault('phone', f'9{random.randint(100000000, 999999999)}')
        return Supplier.objects.create(
            name=name,
            supplier_type=supplier_type,
            rating=rating if rating is not None else Decimal('4.5'),
            **kwargs
        )

    @staticmethod
    def create_stone(stone_type='Ruby', carat=None, purchase_price=None, selling_price=None,
                     status='In Stock', supplier=None, stone_id=None, **kwargs):
        """Create a test gemstone"""
        kwargs.setdefault('grade', 'AAA')
        kwargs.setdefault('origin', 'Burma')
        return Gemstone.objects.create(
            stone_id=stone_id or generate_stone_id(stone_type),
            type=stone_type,
            carat=carat if carat is not None else Decimal('2.50'),
            purchase_price=purchase_price if purchase_price is not None else Decimal('50000.00'),
            selling_price=selling_price if selling_price is not None else Decimal('75000.00'),
            status=status,
            supplier=supplier,
            **kwargs
        )

    @staticmethod
    def create_sale(client=None, stone=None, total_amount=None, amount_paid=Decimal('0.00'),
                    date=None, user=None, **kwargs):
        """Create a test sale and mark its stone as sold"""
        if not client:
            client = TestDataFactory.create_client()
        if not stone:
            stone = TestDataFactory.create_stone()
        if total_amount is None:
            total_amount = stone.selling_price
        sale = Sale.objects.create(
            sale_id=generate_sale_id(),
            date=date or timezone.localdate(),
            client=client,
            stone=stone,
            total_amount=total_amount,
            amount_paid=amount_paid,
            payment_status=payment_status_for(amount_paid, total_amount),
            profit=calculate_profit(total_amount, stone),
            created_by=user,
            **kwargs
        )
        stone.status = 'Sold'
        stone.save(update_fields=['status', 'updated_at'])
        return sale

    @staticmethod
    def create_certification(stone=None, lab='GIA', status='Pending', **kwargs):
        """Create a test certification"""
        if not stone:
            stone = TestDataFactory.create_stone()
        return Certification.objects.create(stone=stone, lab=lab, status=status, **kwargs)

    @staticmethod
    def create_consultation(client=None, date=None, medium='Call', **kwargs):
        """Create a test consultation"""
        if not client:
            client = TestDataFactory.create_client()
        return Consultation.objects.create(
            client=client,
            date=date or timezone.localdate(),
            medium=medium,
            **kwargs
        )

    @staticmethod
    def create_task(title=None, due_date=None, priority='Medium', status='Pending', **kwargs):
        """Create a test task"""
        if not title:
            title = f'Task_{TestDataFactory.random_string(6)}'
        return Task.objects.create(
            title=title,
            due_date=due_date,
            priority=priority,
            status=status,
            **kwargs
        )


class AuthenticatedAPIClient(APIClient):
    """APIClient with authentication helper"""

    def authenticate_user(self, user):
        """Authenticate the client with a user"""
        refresh = RefreshToken.for_user(user)
        self.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
        return self

    def logout(self):
        """Remove authentication"""
        self.credentials()
