import os
import time
from datetime import date

from database import get_db_connection
from services.coupon_service import normalize_code
from services.errors import ValidationError
from services.logger import get_logger
from services.money import json_number, parse_amount

logger = get_logger('catalog')

def _optional_int(value):
    try:
        return int(value)
    except (TypeError, ValueError):
        return None

def _optional_date(value, field):
    if value in (None, ''):
        return None
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        raise ValidationError(f'Invalid {field}')


class CatalogService:
    def __init__(self, connect=get_db_connection, upload_folder=None):
        self.connect = connect
        self.upload_folder = upload_folder

    def get_categories(self):
        conn = self.connect()
        try:
            results = conn.run("SELECT id, category_name FROM course_categories ORDER BY id")
            return [{'id': row[0], 'category_name': row[1]} for row in results]
        finally:
            conn.close()

    def create_category(self, data):
        category_name = (data.get('category_name') or '').strip()
        if not category_name:
            raise ValidationError('Category name is required')

        conn = self.connect()
        try:
            results = conn.run(
                "INSERT INTO course_categories (category_name) VALUES (:name) RETURNING id",
                name=category_name)
            logger.info(f"Created category: {category_name} (ID: {results[0][0]})")
            return results[0][0]
        finally:
            conn.close()

    def get_coupons(self):
        conn = self.connect()
        try:
            results = conn.run(
                "SELECT id, discount, couponcode, start_date, end_date FROM coupons ORDER BY id")
            return [{
                'id': row[0],
                'discount': row[1],
                'couponcode': row[2],
                'start_date': row[3].isoformat() if row[3] else None,
                'end_date': row[4].isoformat() if row[4] else None
            } for row in results]
        finally:
            conn.close()

    def create_coupon(self, data):
        code = normalize_code(data.get('couponcode'))
        if data.get('discount') in (None, '') or not code:
            raise ValidationError('Missing fields')
        try:
            discount = int(data['discount'])
        except (TypeError, ValueError):
            raise ValidationError('Invalid discount')

        start_date = _optional_date(data.get('start_date'), 'start_date')
        end_date = _optional_date(data.get('end_date'), 'end_date')
        if start_date and end_date and end_date < start_date:
            raise ValidationError('end_date must not be before start_date')

        conn = self.connect()
        try:
            results = conn.run("""
                INSERT INTO coupons (couponcode, discount, start_date, end_date)
                VALUES (:code, :discount, :start_date, :end_date)
                RETURNING id
            """, code=code, discount=discount, start_date=start_date, end_date=end_date)
            logger.info(f"Created coupon: {code} ({discount}%)")
            return results[0][0]
        finally:
            conn.close()

    def get_courses(self):
        conn = self.connect()
        try:
            results = conn.run("""
                SELECT id, course, courseimage, coursedetails, coursecouponid, courseduration, coursecategory, fee
                FROM courses
                ORDER BY id
            """)
            return [{
                'id': row[0],
                'course': row[1],
                'courseimage': row[2],
                'coursedetails': row[3],
                'coursecouponid': row[4],
                'courseduration': row[5],
                'coursecategory': row[6],
                'fee': json_number(row[7])
            } for row in results]
        finally:
            conn.close()

    def get_courses_with_category(self):
        conn = self.connect()
        try:
            results = conn.run("""
                SELECT c.id, c.course, c.courseimage, c.coursedetails, c.coursecouponid,
                       c.courseduration, c.fee, cc.category_name
                FROM courses c
                LEFT JOIN course_categories cc ON c.coursecategory = cc.id
                ORDER BY c.id
            """)
            return [{
                'id': row[0],
                'course': row[1],
                'courseimage': row[2],
                'coursedetails': row[3],
                'coursecouponid': row[4],
                'courseduration': row[5],
                'fee': json_number(row[6]),
                'categoryname': row[7]
            } for row in results]
        finally:
            conn.close()

    def create_course(self, data):
        name = (data.get('course') or '').strip()
        if not name:
            raise ValidationError('course is required')

        fee = data.get('fee')
        fee = parse_amount(fee, 'fee') if fee not in (None, '') else 0

        conn = self.connect()
        try:
            results = conn.run("""
                INSERT INTO courses (course, coursedetails, coursecouponid, courseduration, coursecategory, courseimage, fee)
                VALUES (:course, :coursedetails, :coursecouponid, :courseduration, :coursecategory, :courseimage, :fee)
                RETURNING id
            """, course=name,
                coursedetails=data.get('coursedetails') or None,
                coursecouponid=_optional_int(data.get('coursecouponid')),
                courseduration=data.get('courseduration') or None,
                coursecategory=_optional_int(data.get('coursecategory')),
                courseimage=data.get('courseimage') or None,
                fee=fee)
            new_id = results[0][0]
            logger.info(f"Created new course: {name} (ID: {new_id})")
            return new_id
        finally:
            conn.close()

    def save_upload(self, file_storage):
        """Store an uploaded course image as <epoch millis><ext>."""
        if file_storage is None or not file_storage.filename:
            raise ValidationError('No file uploaded')

        # Same-millisecond uploads with the same extension would collide
        ext = os.path.splitext(file_storage.filename)[1].lower()
        filename = f"{int(time.time() * 1000)}{ext}"
        os.makedirs(self.upload_folder, exist_ok=True)
        file_storage.save(os.path.join(self.upload_folder, filename))
        logger.info(f"File uploaded: {filename}")
        url = f"/uploads/{filename}"
        return {'filename': filename, 'url': url, 'imagePath': url}
