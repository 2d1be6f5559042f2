from django import template

from backend.sales.invoicing import format_inr

register = template.Library()


@register.filter
def inr(value):
    """Rupees rounded to whole units with Indian digit grouping"""
    return format_inr(value)


@register.filter
def inr_paise(value):
    return format_inr(value, decimals=2)


@register.filter
def absolute(value):
    return abs(value) if value is not None else value
