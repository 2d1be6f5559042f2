"""
Caching utilities for expensive queries
Uses Redis for caching aggregate results when REDIS_URL is configured
"""
from django.conf import settings
from django.core.cache import cache
from functools import wraps
import hashlib
import logging

logger = logging.getLogger(__name__)

# Cache TTLs (in seconds)
DASHBOARD_METRICS_CACHE_TTL = 30  # matches the dashboard polling interval
INVENTORY_LIST_CACHE_TTL = 120  # 2 minutes
REPORTS_CACHE_TTL = 600  # 10 minutes


def make_cache_key(prefix, *args, **kwargs):
    """Generate a unique cache key from arguments"""
    key_data = f"{prefix}:{args}:{sorted(kwargs.items())}"
    key_hash = hashlib.md5(key_data.encode()).hexdigest()
    return f"{prefix}:{key_hash}"


def cached_query(cache_ttl=60, key_prefix="query"):
    """
    Decorator to cache expensive queries

    Usage:
        @cached_query(cache_ttl=600, key_prefix="reports")
        def top_clients_data(date_from, date_to, limit):
            # expensive aggregate here
            return data
    """
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            cache_key = make_cache_key(key_prefix, *args, **kwargs)

            cached_data = cache.get(cache_key)
            if cached_data is not None:
                logger.debug(f"Cache HIT for {key_prefix}: {cache_key}")
                return cached_data

            logger.debug(f"Cache MISS for {key_prefix}: {cache_key}")
            result = func(*args, **kwargs)
            cache.set(cache_key, result, cache_ttl)
            return result
        return wrapper
    return decorator


def uses_redis():
    return 'django_redis' in settings.CACHES.get('default', {}).get('BACKEND', '')


def invalidate_cache_pattern(pattern):
    """
    Invalidate all cache keys matching a pattern
    Uses Redis SCAN; the local memory cache has no key listing so it is cleared instead
    """
    if not uses_redis():
        cache.clear()
        logger.debug(f"Local cache cleared for pattern: {pattern}")
        return

    try:
        from django_redis import get_redis_connection
        redis_conn = get_redis_connection("default")

        keys = []
        cursor = 0
        while True:
            cursor, partial_keys = redis_conn.scan(cursor, match=f"*{pattern}*", count=100)
            keys.extend(partial_keys)
            if cursor == 0:
                break

        if keys:
            redis_conn.delete(*keys)
            logger.info(f"Invalidated {len(keys)} cache keys matching pattern: {pattern}")
    except Exception as e:
        logger.warning(f"Could not invalidate cache pattern {pattern}: {str(e)}")


def get_cached_dashboard_metrics(day):
    """Get cached dashboard metrics for a given day"""
    cache_key = make_cache_key("dashboard_metrics", day)
    return cache.get(cache_key), cache_key


def cache_dashboard_metrics(cache_key, data, ttl=DASHBOARD_METRICS_CACHE_TTL):
    """Cache dashboard metrics"""
    cache.set(cache_key, data, ttl)
    logger.debug(f"Cached dashboard metrics: {cache_key}")


def get_cached_inventory_list(filters_dict):
    """
    Get cached inventory list with filters
    Returns tuple: (cached_data, cache_key)
    """
    cache_key = make_cache_key("inventory_list", **filters_dict)
    return cache.get(cache_key), cache_key


def cache_inventory_list(cache_key, data, ttl=INVENTORY_LIST_CACHE_TTL):
    """Cache inventory list data"""
    cache.set(cache_key, data, ttl)
    logger.debug(f"Cached inventory list: {cache_key}")


def invalidate_inventory_cache():
    """Invalidate all inventory list cache"""
    invalidate_cache_pattern("inventory_list")
    logger.info("Invalidated inventory cache")


def invalidate_dashboard_cache():
    """Invalidate dashboard metrics and report caches"""
    invalidate_cache_pattern("dashboard_metrics")
    invalidate_cache_pattern("reports")
    logger.info("Invalidated dashboard cache")
