from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from services.errors import ValidationError

CENTS = Decimal('0.01')

def parse_amount(value, field='amount'):
    """Parse a finite decimal amount, raising ValidationError otherwise."""
    if value is None or isinstance(value, bool) or value == '':
        raise ValidationError(f'Invalid {field}')
    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise ValidationError(f'Invalid {field}')
    if not amount.is_finite():
        raise ValidationError(f'Invalid {field}')
    return amount

def round_money(amount):
    return Decimal(amount).quantize(CENTS, rounding=ROUND_HALF_UP)

def json_number(amount):
    # Flask serializes Decimal as a string; clients expect a JSON number
    if amount is None:
        return None
    amount = Decimal(amount)
    if amount == amount.to_integral_value():
        return int(amount)
    return float(amount)
