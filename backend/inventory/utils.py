"""
Utility functions for inventory operations
"""
from django.utils import timezone
import uuid


def get_prefix_for_type(stone_type):
    """3-character prefix from the stone type, e.g. 'Blue Sapphire' -> 'BLU'"""
    if stone_type:
        cleaned = ''.join(ch for ch in stone_type.upper() if ch.isalpha())
        if len(cleaned) >= 3:
            return cleaned[:3]
    return 'GEM'


def generate_stone_id(stone_type=None):
    """Generate a unique stone id such as RUB-20240101-1A2B3C"""
    from .models import Gemstone

    prefix = get_prefix_for_type(stone_type)
    timestamp = timezone.now().strftime('%Y%m%d')
    stone_id = f"{prefix}-{timestamp}-{uuid.uuid4().hex[:6].upper()}"

    # Ensure uniqueness
    while Gemstone.objects.filter(stone_id=stone_id).exists():
        stone_id = f"{prefix}-{timestamp}-{uuid.uuid4().hex[:6].upper()}"

    return stone_id
