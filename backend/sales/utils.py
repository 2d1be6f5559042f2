"""
Helpers for sale numbering, payment status and loyalty points
"""
from decimal import Decimal
from django.utils import timezone
import logging
import uuid

from backend.parties.loyalty import points_for_amount

logger = logging.getLogger(__name__)


def generate_sale_id():
    """Generate a unique sale id such as SALE-20240101-1A2B3C4D"""
    from .models import Sale

    sale_id = f"SALE-{timezone.now().strftime('%Y%m%d')}-{str(uuid.uuid4())[:8].upper()}"
    while Sale.objects.filter(sale_id=sale_id).exists():
        sale_id = f"SALE-{timezone.now().strftime('%Y%m%d')}-{str(uuid.uuid4())[:8].upper()}"
    return sale_id


def payment_status_for(amount_paid, total_amount):
    amount_paid = Decimal(amount_paid or 0)
    if amount_paid > 0 and amount_paid >= Decimal(total_amount or 0):
        return 'Paid'
    if amount_paid > 0:
        return 'Partial'
    return 'Unpaid'


def calculate_profit(total_amount, stone):
    return Decimal(total_amount or 0) - (stone.purchase_price if stone else Decimal('0.00'))


def award_loyalty_points(sale):
    """Credit the client once for a fully paid sale. Returns points awarded."""
    if sale.payment_status != 'Paid' or sale.loyalty_points_awarded:
        return 0

    points = points_for_amount(sale.total_amount)
    if points <= 0:
        return 0

    client = sale.client
    client.loyalty_points += points
    client.save(update_fields=['loyalty_points', 'updated_at'])
    sale.loyalty_points_awarded = points
    sale.save(update_fields=['loyalty_points_awarded', 'updated_at'])
    logger.info(f"Awarded {points} loyalty points to client {client.id} for sale {sale.sale_id}")
    return points


def revoke_loyalty_points(sale):
    """Take back points credited for a sale that is being removed"""
    if not sale.loyalty_points_awarded:
        return 0
    client = sale.client
    points = sale.loyalty_points_awarded
    client.loyalty_points = max(0, client.loyalty_points - points)
    client.save(update_fields=['loyalty_points', 'updated_at'])
    return points
