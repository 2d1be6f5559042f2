"""
Loyalty tiers for client segmentation.

Points accrue from paid sales: one point per full 1,000 rupees of sale value.
"""
from decimal import Decimal, ROUND_FLOOR

RUPEES_PER_POINT = Decimal('1000')

# (minimum points, tier) from highest to lowest
LOYALTY_TIERS = [
    (2000, 'Platinum'),
    (1000, 'Gold'),
    (500, 'Silver'),
    (0, 'Bronze'),
]


def loyalty_tier_for_points(points):
    points = points or 0
    for threshold, tier in LOYALTY_TIERS:
        if points >= threshold:
            return tier
    return 'Bronze'


def points_for_amount(amount):
    """Loyalty points earned for a paid sale amount"""
    if not amount or Decimal(str(amount)) <= 0:
        return 0
    return int((Decimal(str(amount)) / RUPEES_PER_POINT).to_integral_value(rounding=ROUND_FLOOR))


def next_tier(points):
    """Return (tier name, points still needed) or (None, 0) at the top tier"""
    points = points or 0
    upcoming = None
    for threshold, tier in LOYALTY_TIERS:
        if points < threshold:
            upcoming = (tier, threshold - points)
    return upcoming or (None, 0)
