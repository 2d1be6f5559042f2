"""
Cache invalidation signals
Automatically invalidate list and dashboard caches when data changes
"""
from django.db.models.signals import post_save, post_delete
from django.dispatch import receiver
import logging
import threading
from contextlib import contextmanager

from .cache_utils import invalidate_dashboard_cache, invalidate_inventory_cache

logger = logging.getLogger(__name__)

# Thread-local storage to track signal suspension
_thread_locals = threading.local()

# Models whose changes move dashboard numbers
DASHBOARD_MODELS = ['Gemstone', 'Sale', 'Certification', 'Task', 'Client', 'Supplier', 'Consultation']


@contextmanager
def suspend_cache_signals():
    """
    Context manager to temporarily suspend cache invalidation signals.
    Used by bulk seeding; invalidate manually after the block.
    """
    try:
        _thread_locals.suspended = True
        yield
    finally:
        _thread_locals.suspended = False


def is_suspended():
    return getattr(_thread_locals, 'suspended', False)


def invalidate_all_caches():
    """Invalidate every list and dashboard cache"""
    invalidate_inventory_cache()
    invalidate_dashboard_cache()


@receiver([post_save, post_delete])
def invalidate_inventory_list_cache(sender, instance, **kwargs):
    """Invalidate inventory lists when stones change"""
    if is_suspended():
        return

    if sender.__name__ in ['Gemstone', 'Supplier']:
        try:
            invalidate_inventory_cache()
        except Exception as e:
            logger.warning(f"Error in invalidate_inventory_list_cache signal: {e}")


@receiver([post_save, post_delete])
def invalidate_dashboard_metrics_cache(sender, instance, **kwargs):
    """Invalidate dashboard metrics when business records change"""
    if is_suspended():
        return

    if sender.__name__ in DASHBOARD_MODELS:
        try:
            invalidate_dashboard_cache()
        except Exception as e:
            logger.warning(f"Error in invalidate_dashboard_metrics_cache signal: {e}")
