"""
Validation for uploaded certificates and invoice documents
"""
import os

from django.conf import settings
from django.core.exceptions import ValidationError


def validate_document_extension(value):
    """Allow only images, PDFs and Word documents"""
    ext = os.path.splitext(value.name)[1].lower().lstrip('.')
    allowed = getattr(settings, 'ALLOWED_UPLOAD_EXTENSIONS', ['jpeg', 'jpg', 'png', 'pdf', 'doc', 'docx'])
    if ext not in allowed:
        raise ValidationError(
            f"Unsupported file type '.{ext}'. Allowed types: {', '.join(allowed)}"
        )


def validate_document_size(value):
    """Reject files above MAX_UPLOAD_SIZE (10MB by default)"""
    limit = getattr(settings, 'MAX_UPLOAD_SIZE', 10 * 1024 * 1024)
    if value.size > limit:
        raise ValidationError(
            f"File too large ({value.size} bytes). Maximum size is {limit // (1024 * 1024)}MB"
        )


DOCUMENT_VALIDATORS = [validate_document_extension, validate_document_size]
