"""
Management command to load demo data: suppliers, clients, stones, sales,
certifications, consultations and tasks
Usage: python manage.py seed_gemstone_data [--clear]
"""
from datetime import timedelta
from decimal import Decimal
from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone
from backend.certifications.models import Certification
from backend.consultations.models import Consultation
from backend.core.cache_signals import invalidate_all_caches, suspend_cache_signals
from backend.inventory.models import Gemstone
from backend.inventory.utils import generate_stone_id
from backend.parties.models import Client, Supplier
from backend.sales.models import Payment, Sale
from backend.sales.utils import award_loyalty_points, calculate_profit, generate_sale_id, payment_status_for
from backend.tasks.models import Task

SUPPLIERS = [
    {'name': 'Jaipur Gems House', 'location': 'Jaipur, Rajasthan', 'supplier_type': 'Domestic',
     'gemstone_types': ['Ruby', 'Emerald'], 'rating': Decimal('4.7'), 'delivery_days': 5},
    {'name': 'Mogok Exports', 'location': 'Mogok, Myanmar', 'supplier_type': 'International',
     'gemstone_types': ['Ruby', 'Blue Sapphire'], 'rating': Decimal('4.5'), 'delivery_days': 9},
    {'name': 'Ratnapura Sapphires', 'location': 'Ratnapura, Sri Lanka', 'supplier_type': 'International',
     'gemstone_types': ['Blue Sapphire', 'Yellow Sapphire'], 'rating': Decimal('4.6'), 'delivery_days': 7},
]

CLIENTS = [
    {'name': 'Ravi Jewellers', 'client_type': 'Jeweler', 'city': 'Jaipur', 'phone': '9829000001',
     'loyalty_level': 'High', 'tags': ['VIP', 'Wholesale']},
    {'name': 'Pandit Shastri', 'client_type': 'Astrologer', 'city': 'Varanasi', 'phone': '9829000002',
     'loyalty_level': 'Medium', 'tags': ['Astrology']},
    {'name': 'Shree Temple Trust', 'client_type': 'Temple', 'city': 'Udaipur', 'phone': '9829000003',
     'loyalty_level': 'Medium', 'tags': []},
    {'name': 'Meera Collections', 'client_type': 'Collector', 'city': 'Mumbai', 'phone': '9829000004',
     'loyalty_level': 'Low', 'tags': ['Collector']},
]

# (type, carat, origin, grade, purchase, selling, supplier index, certified)
STONES = [
    ('Ruby', '2.50', 'Myanmar', 'AAA', '40000', '60000', 1, True),
    ('Blue Sapphire', '3.10', 'Sri Lanka', 'AAAA', '90000', '135000', 2, True),
    ('Emerald', '1.80', 'Colombia', 'AA', '20000', '30000', 0, False),
    ('Yellow Sapphire', '4.25', 'Sri Lanka', 'AAA', '35000', '52000', 2, False),
    ('Ruby', '1.20', 'Mozambique', 'AA', '12000', '18500', 0, False),
    ('Emerald', '2.75', 'Zambia', 'AAA', '45000', '68000', 0, True),
]

# (client index, stone index, days ago, paid fraction)
SALES = [
    (0, 0, 3, Decimal('1')),
    (1, 2, 12, Decimal('0.5')),
    (0, 5, 40, Decimal('0')),
]


class Command(BaseCommand):
    help = 'Load demo suppliers, clients, stones, sales, certifications, consultations and tasks'

    def add_arguments(self, parser):
        parser.add_argument(
            '--clear',
            action='store_true',
            help='Delete existing business data before seeding',
        )

    def handle(self, *args, **options):
        if not options['clear'] and Gemstone.objects.exists():
            self.stdout.write(self.style.WARNING(
                'Stones already exist. Use --clear to wipe business data and seed again.'
            ))
            return

        today = timezone.localdate()
        with suspend_cache_signals():
            with transaction.atomic():
                if options['clear']:
                    self._clear()
                counts = self._seed(today)
        invalidate_all_caches()

        for label, count in counts.items():
            self.stdout.write(f'  - {label}: {count}')
        self.stdout.write(self.style.SUCCESS('\n✓ Demo data loaded'))

    def _clear(self):
        self.stdout.write('Deleting existing business data...')
        # Children before the rows they protect
        Payment.objects.all().delete()
        Sale.objects.all().delete()
        Certification.objects.all().delete()
        Consultation.objects.all().delete()
        Gemstone.objects.all().delete()
        Client.objects.all().delete()
        Supplier.objects.all().delete()
        Task.objects.all().delete()
        self.stdout.write(self.style.SUCCESS('  ✓ Business data deleted'))

    def _seed(self, today):
        suppliers = [Supplier.objects.create(**data) for data in SUPPLIERS]
        clients = [Client.objects.create(**data) for data in CLIENTS]

        stones = []
        for stone_type, carat, origin, grade, purchase, selling, supplier, certified in STONES:
            stones.append(Gemstone.objects.create(
                stone_id=generate_stone_id(stone_type),
                type=stone_type,
                carat=Decimal(carat),
                origin=origin,
                grade=grade,
                purchase_price=Decimal(purchase),
                selling_price=Decimal(selling),
                supplier=suppliers[supplier],
                certified=certified,
                certificate_lab='GIA' if certified else '',
            ))

        for client_index, stone_index, days_ago, paid_fraction in SALES:
            stone = stones[stone_index]
            amount_paid = (stone.selling_price * paid_fraction).quantize(Decimal('0.01'))
            sale = Sale.objects.create(
                sale_id=generate_sale_id(),
                date=today - timedelta(days=days_ago),
                client=clients[client_index],
                stone=stone,
                total_amount=stone.selling_price,
                amount_paid=amount_paid,
                payment_status=payment_status_for(amount_paid, stone.selling_price),
                profit=calculate_profit(stone.selling_price, stone),
            )
            if amount_paid:
                Payment.objects.create(sale=sale, payment_method='upi', amount=amount_paid)
            award_loyalty_points(sale)
            stone.status = 'Sold'
            stone.save(update_fields=['status', 'updated_at'])

        Certification.objects.create(stone=stones[3], lab='IGI', status='In Progress',
                                     date_sent=today - timedelta(days=6))
        Certification.objects.create(stone=stones[4], lab='GIA', status='Pending')

        Consultation.objects.create(
            client=clients[1], date=today - timedelta(days=2), medium='Call',
            stones_discussed=['Yellow Sapphire'], outcome='Interested in a 4 carat stone',
            follow_up_needed=True, next_follow_up_date=today + timedelta(days=3),
        )
        Consultation.objects.create(
            client=clients[2], date=today - timedelta(days=20), medium='In-person',
            stones_discussed=['Ruby', 'Emerald'], outcome='Quotation shared',
        )

        Task.objects.create(title='Collect balance from Pandit Shastri', priority='High', due_date=today,
                            related_type='Client', related_to=clients[1].name)
        Task.objects.create(title='Send yellow sapphire to IGI', priority='Medium',
                            due_date=today + timedelta(days=2), related_type='Stone',
                            related_to=stones[3].stone_id)

        return {
            'Suppliers': len(suppliers),
            'Clients': len(clients),
            'Stones': len(stones),
            'Sales': len(SALES),
            'Certifications': Certification.objects.count(),
            'Consultations': Consultation.objects.count(),
            'Tasks': Task.objects.count(),
        }
