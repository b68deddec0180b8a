from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from django import template

from orders.status import status_label

register = template.Library()


@register.filter
def money(value):
    """Format an amount as ``$12.99``."""
    try:
        amount = Decimal(str(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    except (InvalidOperation, ValueError):
        return "$0.00"
    return f"${amount}"


@register.filter
def status_name(value):
    return status_label(value)
