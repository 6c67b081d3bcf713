"""Pytest fixtures: the Flask app wired to in-memory collaborators."""

from datetime import date, datetime
from decimal import Decimal

import pytest

from app import create_app
from services.errors import NotFound, UpstreamError
from services.registration_store import PENDING

SECRET = "test_secret"
NOW = datetime(2026, 10, 17, 12, 0, 0)


class FakeStore:
    """Dict-backed stand-in for RegistrationStore with the same transition rules."""

    def __init__(self):
        self.courses = {
            1: {'id': 1, 'course': 'Full Stack Development', 'fee': Decimal('1000.00')},
            2: {'id': 2, 'course': 'Data Science', 'fee': Decimal('499.99')},
        }
        self.coupons = {
            'SAVE10': {'id': 1, 'couponcode': 'SAVE10', 'discount': 10,
                       'start_date': date(2026, 10, 1), 'end_date': date(2026, 10, 17)},
            'OLD50': {'id': 2, 'couponcode': 'OLD50', 'discount': 50,
                      'start_date': date(2025, 1, 1), 'end_date': date(2025, 12, 31)},
            'FREEBIE': {'id': 3, 'couponcode': 'FREEBIE', 'discount': 150,
                        'start_date': None, 'end_date': None},
        }
        self.registrations = {}
        self.writes = 0

    def get_course(self, course_id):
        return self.courses.get(course_id)

    def find_coupon(self, code):
        return self.coupons.get(code)

    def create_pending(self, applicant, course_name, amount):
        self.writes += 1
        new_id = len(self.registrations) + 1
        self.registrations[new_id] = {
            'id': new_id, **applicant, 'course': course_name, 'amount': Decimal(amount),
            'payment_status': PENDING, 'order_id': None, 'payment_id': None,
        }
        return new_id

    def get_by_id(self, registration_id):
        if registration_id not in self.registrations:
            raise NotFound('Registration not found')
        return dict(self.registrations[registration_id])

    def attach_order(self, registration_id, order_id):
        reg = self.registrations.get(registration_id)
        if reg is None:
            return None
        if reg['order_id'] is None:
            self.writes += 1
            reg['order_id'] = order_id
        return dict(reg)

    def finalize_payment(self, order_id, payment_id, status):
        for reg in self.registrations.values():
            if reg['order_id'] == order_id:
                if reg['payment_status'] != PENDING:
                    return dict(reg), False
                reg['payment_id'] = payment_id
                reg['payment_status'] = status
                return dict(reg), True
        raise NotFound('Registration not found')


class FakeGateway:
    def __init__(self):
        self.orders = []
        self.fail = False

    def create_order(self, amount, currency, receipt, notes=None):
        if self.fail:
            raise UpstreamError('Payment gateway error')
        order_id = f"order_{len(self.orders) + 1:04d}"
        self.orders.append({'orderId': order_id, 'amount': amount, 'currency': currency,
                            'receipt': receipt, 'notes': notes})
        return {'orderId': order_id, 'amount': amount, 'currency': currency}


class FakeNotifier:
    def __init__(self):
        self.sent = []

    def send_registration_confirmation(self, registration):
        self.sent.append(registration)
        return True


@pytest.fixture
def store():
    return FakeStore()


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def notifier():
    return FakeNotifier()


@pytest.fixture
def app(store, gateway, notifier, tmp_path):
    app = create_app(
        config={'TESTING': True, 'RAZORPAY_KEY_SECRET': SECRET,
                'PAYMENT_CURRENCY': 'INR', 'UPLOAD_FOLDER': str(tmp_path)},
        store=store, gateway=gateway, notifier=notifier, clock=lambda: NOW)
    return app


@pytest.fixture
def client(app):
    return app.test_client()


class FakeConnection:
    """Records pg8000.native style run() calls and replays queued results."""

    def __init__(self, results=None, error=None):
        self.results = list(results or [])
        self.error = error
        self.calls = []
        self.closed = False

    def run(self, sql, **params):
        self.calls.append((sql, params))
        if self.error:
            raise self.error
        return self.results.pop(0) if self.results else []

    def close(self):
        self.closed = True


@pytest.fixture
def connection_factory():
    return FakeConnection
