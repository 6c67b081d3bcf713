from contextlib import contextmanager
import pg8000.native

from database import get_db_connection
from services.errors import NotFound, UpstreamError
from services.logger import get_logger

logger = get_logger('registration_store')

PENDING = 'Pending'
SUCCESS = 'Success'
FAILED = 'Failed'

COURSE_COLUMNS = ('id', 'course', 'coursedetails', 'courseduration', 'fee',
                  'coursecategory', 'coursecouponid', 'courseimage')
COUPON_COLUMNS = ('id', 'couponcode', 'discount', 'start_date', 'end_date')
REGISTRATION_COLUMNS = ('id', 'first_name', 'last_name', 'dob', 'mobile', 'email', 'message',
                        'course', 'amount', 'payment_status', 'order_id', 'payment_id',
                        'created_at', 'updated_at')

def _select(columns):
    return ', '.join(columns)

def _row(columns, row):
    return dict(zip(columns, row))


class RegistrationStore:
    """Postgres persistence for the registration workflow.

    Every call opens its own connection and closes it before returning, so
    nothing is shared between requests.
    """

    def __init__(self, connect=get_db_connection):
        self.connect = connect

    @contextmanager
    def _connection(self):
        try:
            conn = self.connect()
        except (pg8000.native.Error, OSError) as e:
            logger.error(f"Database connection error: {e}")
            raise UpstreamError("Database error") from e
        try:
            yield conn
        except (pg8000.native.Error, OSError) as e:
            logger.error(f"Database query error: {e}")
            raise UpstreamError("Database error") from e
        finally:
            conn.close()

    def get_course(self, course_id):
        with self._connection() as conn:
            results = conn.run(
                f"SELECT {_select(COURSE_COLUMNS)} FROM courses WHERE id = :id", id=course_id)
        return _row(COURSE_COLUMNS, results[0]) if results else None

    def find_coupon(self, code):
        """Look up a coupon by an already normalized (trimmed, upper-cased) code."""
        with self._connection() as conn:
            results = conn.run(
                f"SELECT {_select(COUPON_COLUMNS)} FROM coupons WHERE UPPER(TRIM(couponcode)) = :code",
                code=code)
        return _row(COUPON_COLUMNS, results[0]) if results else None

    def create_pending(self, applicant, course_name, amount):
        with self._connection() as conn:
            results = conn.run("""
                INSERT INTO registrations
                    (first_name, last_name, dob, mobile, email, message, course, amount, payment_status)
                VALUES
                    (:first_name, :last_name, :dob, :mobile, :email, :message, :course, :amount, :status)
                RETURNING id
            """, first_name=applicant['first_name'], last_name=applicant['last_name'],
                dob=applicant['dob'], mobile=applicant['mobile'], email=applicant['email'],
                message=applicant.get('message'), course=course_name, amount=amount, status=PENDING)
        return results[0][0]

    def get_by_id(self, registration_id):
        with self._connection() as conn:
            results = conn.run(
                f"SELECT {_select(REGISTRATION_COLUMNS)} FROM registrations WHERE id = :id",
                id=registration_id)
        if not results:
            raise NotFound('Registration not found')
        return _row(REGISTRATION_COLUMNS, results[0])

    def attach_order(self, registration_id, order_id):
        """Attach order_id unless the registration already has one.

        Returns the registration as stored afterwards, or None when the id is unknown.
        """
        with self._connection() as conn:
            results = conn.run(f"""
                UPDATE registrations
                SET order_id = :order_id, updated_at = CURRENT_TIMESTAMP
                WHERE id = :id AND order_id IS NULL
                RETURNING {_select(REGISTRATION_COLUMNS)}
            """, order_id=order_id, id=registration_id)
            if not results:
                results = conn.run(
                    f"SELECT {_select(REGISTRATION_COLUMNS)} FROM registrations WHERE id = :id",
                    id=registration_id)
        return _row(REGISTRATION_COLUMNS, results[0]) if results else None

    def finalize_payment(self, order_id, payment_id, status):
        """Move the registration holding order_id out of Pending.

        Returns (registration, changed). A registration that already left
        Pending is returned untouched with changed=False.
        """
        with self._connection() as conn:
            results = conn.run(f"""
                UPDATE registrations
                SET payment_id = :payment_id, payment_status = :status, updated_at = CURRENT_TIMESTAMP
                WHERE order_id = :order_id AND payment_status = :pending
                RETURNING {_select(REGISTRATION_COLUMNS)}
            """, payment_id=payment_id, status=status, order_id=order_id, pending=PENDING)
            if results:
                return _row(REGISTRATION_COLUMNS, results[0]), True

            results = conn.run(
                f"SELECT {_select(REGISTRATION_COLUMNS)} FROM registrations WHERE order_id = :order_id",
                order_id=order_id)
        if not results:
            raise NotFound('Registration not found')
        return _row(REGISTRATION_COLUMNS, results[0]), False
