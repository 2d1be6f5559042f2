"""Utility functions for audit logging and request parsing"""
import logging
from datetime import datetime, timedelta

from django.utils import timezone

from .models import AuditLog

logger = logging.getLogger(__name__)


def get_client_ip(request):
    """Extract client IP address from request"""
    if not request or not hasattr(request, 'META'):
        return None
    x_forwarded_for = request.META.get('HTTP_X_FORWARDED_FOR')
    if x_forwarded_for:
        ip = x_forwarded_for.split(',')[0].strip()
    else:
        ip = request.META.get('REMOTE_ADDR')
    return ip or None


def create_audit_log(request=None, action=None, model_name=None, object_id=None,
                     changes=None, user=None, object_name=None, object_reference=None):
    """
    Create an audit log entry

    Args:
        request: Django request object (for user and IP) - optional if user is provided
        action: Action type (create, update, delete, sale_create, etc.)
        model_name: Name of the model being acted upon
        object_id: ID of the object (as string)
        changes: Dictionary of changes made
        user: Optional user override (defaults to request.user if request provided)
        object_name: Human-readable name of the object (e.g., stone type, client name)
        object_reference: Business identifier (e.g., stone id, sale id)
    """
    try:
        audit_user = None
        if user:
            audit_user = user
        elif request and hasattr(request, 'user'):
            audit_user = request.user

        ip_address = get_client_ip(request) if request else None

        if not action or not model_name or not object_id:
            logger.warning(f"Audit log creation skipped: missing required fields (action={action}, model_name={model_name}, object_id={object_id})")
            return None

        return AuditLog.objects.create(
            user=audit_user if audit_user and audit_user.is_authenticated else None,
            action=action,
            model_name=model_name,
            object_id=str(object_id),
            object_name=object_name,
            object_reference=object_reference,
            changes=changes or {},
            ip_address=ip_address
        )
    except Exception as e:
        # Don't fail the main operation if audit logging fails
        logger.error(f"Failed to create audit log: {str(e)}")
        return None


def parse_optional_date(value):
    """Parse a YYYY-MM-DD query value, None when absent. Raises ValueError on bad input."""
    if not value:
        return None
    return datetime.strptime(value, '%Y-%m-%d').date()


def parse_date_range(request, default_days=30):
    """
    Read date_from/date_to (YYYY-MM-DD) from query params.
    Defaults to the last `default_days` days. Raises ValueError on bad input.
    """
    date_from = parse_optional_date(request.query_params.get('date_from', None))
    date_to = parse_optional_date(request.query_params.get('date_to', None))

    if date_from is None:
        date_from = timezone.localdate() - timedelta(days=default_days)
    if date_to is None:
        date_to = timezone.localdate()

    return date_from, date_to
