from services.coupon_service import normalize_code
from services.errors import NotFound, ValidationError
from services.logger import get_logger
from services.money import json_number, parse_amount
from services.payment_gateway import to_smallest_unit, verify_signature
from services.registration_store import PENDING, SUCCESS, FAILED

logger = get_logger('registration')

REQUIRED_FIELDS = ('firstName', 'lastName', 'dob', 'mobile', 'email', 'courseId')
PAYMENT_FIELDS = ('razorpay_order_id', 'razorpay_payment_id', 'razorpay_signature')

def _missing(data, fields):
    return [f for f in fields if data.get(f) in (None, '')]

def _parse_id(value, field):
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f'Invalid {field}')


class RegistrationService:
    """Register -> create order -> verify payment -> confirm by email.

    All collaborators are passed in by the app factory so tests can swap
    them for fakes.
    """

    def __init__(self, store, gateway, notifier, coupons, currency, key_secret):
        self.store = store
        self.gateway = gateway
        self.notifier = notifier
        self.coupons = coupons
        self.currency = currency
        self.key_secret = key_secret

    def register(self, data):
        missing = _missing(data, REQUIRED_FIELDS)
        if missing:
            raise ValidationError('Missing required fields')

        course_id = _parse_id(data['courseId'], 'courseId')
        course = self.store.get_course(course_id)
        if not course:
            raise NotFound('Invalid course')

        amount = parse_amount(course['fee'], 'course fee')
        coupon_code = normalize_code(data.get('couponCode'))
        if coupon_code:
            result = self.coupons.evaluate(coupon_code, amount)
            if result['valid']:
                amount = result['finalAmount']
            else:
                logger.info(f"Coupon {coupon_code} not applied to course {course_id}: {result['reason']}")

        applicant = {
            'first_name': data['firstName'],
            'last_name': data['lastName'],
            'dob': data['dob'],
            'mobile': data['mobile'],
            'email': data['email'],
            'message': data.get('message')
        }
        registration_id = self.store.create_pending(applicant, course['course'], amount)
        logger.info(f"Created pending registration {registration_id} for course {course['course']} ({amount})")
        return {'registrationId': registration_id, 'coursefee': json_number(amount)}

    def create_order(self, data):
        if data.get('registrationId') in (None, ''):
            raise ValidationError('Registration ID is required')
        registration_id = _parse_id(data['registrationId'], 'registrationId')

        registration = self.store.get_by_id(registration_id)
        if registration['payment_status'] != PENDING:
            raise ValidationError(f"Registration already {registration['payment_status']}")

        if not registration['order_id']:
            order = self.gateway.create_order(
                registration['amount'], self.currency,
                receipt=f'registration_{registration_id}',
                notes={'course': registration['course'], 'email': registration['email']})
            attached = self.store.attach_order(registration_id, order['orderId'])
            if attached is None:
                raise NotFound('Registration not found')
            if attached['order_id'] != order['orderId']:
                logger.warning(f"Registration {registration_id} already had order {attached['order_id']}, "
                               f"discarding {order['orderId']}")
            else:
                logger.info(f"Attached order {order['orderId']} to registration {registration_id}")
            registration = attached

        return {
            'orderId': registration['order_id'],
            'amount': to_smallest_unit(registration['amount']),
            'currency': self.currency
        }

    def verify_payment(self, data):
        if _missing(data, PAYMENT_FIELDS):
            raise ValidationError('Missing payment details')
        if not all(isinstance(data[f], str) for f in PAYMENT_FIELDS):
            raise ValidationError('Invalid payment details')

        order_id = data['razorpay_order_id']
        payment_id = data['razorpay_payment_id']
        matched = verify_signature(order_id, payment_id, data['razorpay_signature'], self.key_secret)
        status = SUCCESS if matched else FAILED

        registration, changed = self.store.finalize_payment(order_id, payment_id, status)
        if changed:
            logger.info(f"Registration {registration['id']} payment {status} (order {order_id})")
            if status == SUCCESS:
                try:
                    self.notifier.send_registration_confirmation(registration)
                except Exception:
                    logger.exception(f"Confirmation email failed for registration {registration['id']}")
        else:
            status = registration['payment_status']
            logger.info(f"Order {order_id} already finalized as {status}, ignoring repeat verification")

        return {'success': status == SUCCESS, 'message': f'Payment {status}'}

    def validate_coupon(self, data):
        if not data.get('couponCode') or data.get('courseFee') in (None, ''):
            raise ValidationError('Coupon code and course fee are required')

        result = self.coupons.evaluate(data['couponCode'], data['courseFee'])
        if not result['valid']:
            return {'valid': False, 'message': result['reason']}
        return {
            'valid': True,
            'discount': result['discountPercent'],
            'finalAmount': json_number(result['finalAmount']),
            'message': 'Coupon applied'
        }

    def apply_coupon(self, data):
        if data.get('courseId') in (None, '') or not data.get('couponCode'):
            raise ValidationError('Course ID and coupon code are required')

        course_id = _parse_id(data['courseId'], 'courseId')
        course = self.store.get_course(course_id)
        if not course:
            raise NotFound('Course not found')

        fee = parse_amount(course['fee'], 'course fee')
        result = self.coupons.evaluate(data['couponCode'], fee)
        if not result['valid']:
            raise NotFound(result['reason'])

        return {
            'courseId': course_id,
            'couponCode': normalize_code(data['couponCode']),
            'originalFee': json_number(fee),
            'discountedFee': json_number(result['finalAmount'])
        }
