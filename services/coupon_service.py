from datetime import datetime, time
from decimal import Decimal
from services.errors import ValidationError
from services.money import parse_amount, round_money

INVALID_COUPON = 'Invalid coupon'
EXPIRED_COUPON = 'Coupon expired'

def normalize_code(code):
    return str(code or '').strip().upper()

def is_active(coupon, now):
    """A coupon is active from the first moment of start_date through the last moment of end_date."""
    start_date = coupon.get('start_date')
    end_date = coupon.get('end_date')
    if start_date and now < datetime.combine(start_date, time.min):
        return False
    if end_date and now > datetime.combine(end_date, time.max):
        return False
    return True

def apply_discount(base_amount, discount_percent):
    base_amount = Decimal(base_amount)
    final = base_amount - base_amount * Decimal(discount_percent) / 100
    return round_money(max(final, Decimal(0)))

class CouponService:
    def __init__(self, store, clock=datetime.now):
        self.store = store
        self.clock = clock

    def evaluate(self, code, base_amount):
        base_amount = parse_amount(base_amount, 'course fee')
        normalized = normalize_code(code)
        if not normalized:
            raise ValidationError('Coupon code is required')

        coupon = self.store.find_coupon(normalized)
        if not coupon:
            return {'valid': False, 'reason': INVALID_COUPON}
        if not is_active(coupon, self.clock()):
            return {'valid': False, 'reason': EXPIRED_COUPON}

        discount = int(coupon['discount'])
        return {
            'valid': True,
            'discountPercent': discount,
            'finalAmount': apply_discount(base_amount, discount)
        }
