"""
Per-object caching for frequently read models: Client, Supplier and Gemstone.

Detail endpoints read through these helpers; signal receivers below refresh
the entries whenever a row is saved or deleted.
"""
from django.core.cache import cache
from django.db.models.signals import post_save, post_delete, pre_save
from django.dispatch import receiver
import logging

logger = logging.getLogger(__name__)

# Cache key prefixes
CLIENT_KEY_PREFIX = 'client:'
SUPPLIER_KEY_PREFIX = 'supplier:'
STONE_KEY_PREFIX = 'stone:'
STONE_CODE_KEY_PREFIX = 'stone_code:'

# Cache TTL (Time To Live) in seconds
CLIENT_CACHE_TTL = 600  # 10 minutes
SUPPLIER_CACHE_TTL = 900  # 15 minutes
STONE_CACHE_TTL = 300  # 5 minutes (status and prices change with sales)


# ==================== CLIENT CACHING ====================

def get_client_cache_key(client_id: int) -> str:
    """Get cache key for client by ID"""
    return f"{CLIENT_KEY_PREFIX}{client_id}"


def cache_client_data(client_obj, data: dict, ttl: int = None):
    """Cache serialized client data by ID"""
    if not client_obj:
        return

    cache.set(get_client_cache_key(client_obj.id), data, ttl or CLIENT_CACHE_TTL)
    logger.debug(f"Cached client data: {client_obj.name} (ID: {client_obj.id})")


def get_cached_client(client_id: int):
    """Get cached client data by ID"""
    cached_data = cache.get(get_client_cache_key(client_id))
    if cached_data:
        logger.debug(f"Cache hit for client: {client_id}")
    return cached_data


def invalidate_client_cache(client_obj):
    """Invalidate the cache entry for a client"""
    if not client_obj:
        return

    cache.delete(get_client_cache_key(client_obj.id))
    logger.debug(f"Invalidated cache for client: {client_obj.name} (ID: {client_obj.id})")


# ==================== SUPPLIER CACHING ====================

def get_supplier_cache_key(supplier_id: int) -> str:
    return f"{SUPPLIER_KEY_PREFIX}{supplier_id}"


def cache_supplier_data(supplier_obj, data: dict, ttl: int = None):
    if not supplier_obj:
        return
    cache.set(get_supplier_cache_key(supplier_obj.id), data, ttl or SUPPLIER_CACHE_TTL)


def get_cached_supplier(supplier_id: int):
    return cache.get(get_supplier_cache_key(supplier_id))


def invalidate_supplier_cache(supplier_obj):
    if not supplier_obj:
        return
    cache.delete(get_supplier_cache_key(supplier_obj.id))


# ==================== GEMSTONE CACHING ====================

def get_stone_cache_key(stone_pk: int) -> str:
    """Get cache key for stone by primary key"""
    return f"{STONE_KEY_PREFIX}{stone_pk}"


def get_stone_code_cache_key(stone_id: str) -> str:
    """Get cache key for stone by business stone id"""
    return f"{STONE_CODE_KEY_PREFIX}{stone_id}"


def cache_stone_data(stone_obj, data: dict, ttl: int = None):
    """Cache serialized stone data by primary key and stone id"""
    if not stone_obj:
        return

    ttl = ttl or STONE_CACHE_TTL
    cache.set(get_stone_cache_key(stone_obj.pk), data, ttl)
    if stone_obj.stone_id:
        cache.set(get_stone_code_cache_key(stone_obj.stone_id), data, ttl)

    logger.debug(f"Cached stone data: {stone_obj.stone_id} (ID: {stone_obj.pk})")


def get_cached_stone(stone_pk: int):
    """Get cached stone data by primary key"""
    cached_data = cache.get(get_stone_cache_key(stone_pk))
    if cached_data:
        logger.debug(f"Cache hit for stone: {stone_pk}")
    return cached_data


def get_cached_stone_by_code(stone_id: str):
    """Get cached stone data by business stone id"""
    if not stone_id:
        return None
    return cache.get(get_stone_code_cache_key(stone_id))


def invalidate_stone_cache(stone_obj):
    """Invalidate all cache entries for a stone"""
    if not stone_obj:
        return

    old_code = getattr(stone_obj, '_old_stone_id', None) or stone_obj.stone_id
    cache.delete(get_stone_cache_key(stone_obj.pk))
    if old_code:
        cache.delete(get_stone_code_cache_key(old_code))

    logger.debug(f"Invalidated cache for stone: {stone_obj.stone_id} (ID: {stone_obj.pk})")


# ==================== DJANGO SIGNALS ====================

@receiver(pre_save)
def model_pre_save(sender, instance, **kwargs):
    """Store the old stone id before save for cache invalidation"""
    if sender.__name__ == 'Gemstone' and instance.pk:
        try:
            old_instance = sender.objects.get(pk=instance.pk)
        except sender.DoesNotExist:
            return
        instance._old_stone_id = old_instance.stone_id


@receiver([post_save, post_delete])
def model_cache_invalidate(sender, instance, **kwargs):
    """Drop cached entries when a cached model is saved or deleted"""
    model_name = sender.__name__

    if model_name == 'Client':
        from backend.parties.models import Client
        if isinstance(instance, Client):
            invalidate_client_cache(instance)

    elif model_name == 'Supplier':
        from backend.parties.models import Supplier
        if isinstance(instance, Supplier):
            invalidate_supplier_cache(instance)

    elif model_name == 'Gemstone':
        from backend.inventory.models import Gemstone
        if isinstance(instance, Gemstone):
            invalidate_stone_cache(instance)
