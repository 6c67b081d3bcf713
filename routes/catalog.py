from flask import Blueprint, request, jsonify, current_app, send_from_directory
from services.errors import ValidationError
from services.logger import get_logger

catalog_bp = Blueprint('catalog', __name__)
logger = get_logger('routes.catalog')

def catalog_service():
    return current_app.extensions['catalog_service']

def server_error(context):
    logger.exception(f"{context} Error")
    return jsonify({'success': False, 'message': 'Internal Server Error'}), 500

@catalog_bp.route('/api/categories', methods=['GET'])
def get_categories():
    try:
        return jsonify(catalog_service().get_categories())
    except Exception:
        return server_error('Fetch Categories')

@catalog_bp.route('/api/categories', methods=['POST'])
def create_category():
    try:
        data = request.get_json(silent=True) or {}
        new_id = catalog_service().create_category(data)
        return jsonify({'success': True, 'message': 'Category added successfully', 'id': new_id}), 201
    except ValidationError as e:
        return jsonify({'success': False, 'message': str(e)}), 400
    except Exception:
        return server_error('Create Category')

@catalog_bp.route('/api/couponvalues', methods=['GET'])
def get_coupons():
    try:
        return jsonify(catalog_service().get_coupons())
    except Exception:
        return server_error('Fetch Coupons')

@catalog_bp.route('/api/couponvalues', methods=['POST'])
def create_coupon():
    try:
        data = request.get_json(silent=True) or {}
        new_id = catalog_service().create_coupon(data)
        return jsonify({'success': True, 'message': 'Coupon inserted successfully', 'id': new_id}), 201
    except ValidationError as e:
        return jsonify({'success': False, 'message': str(e)}), 400
    except Exception:
        return server_error('Create Coupon')

@catalog_bp.route('/api/course', methods=['GET'])
def get_courses():
    try:
        return jsonify(catalog_service().get_courses())
    except Exception:
        return server_error('Fetch Courses')

@catalog_bp.route('/api/courses', methods=['GET'])
def get_courses_with_category():
    try:
        return jsonify(catalog_service().get_courses_with_category())
    except Exception:
        return server_error('Fetch Courses')

@catalog_bp.route('/api/course', methods=['POST'])
def create_course():
    try:
        data = request.get_json(silent=True) or {}
        new_id = catalog_service().create_course(data)
        return jsonify({'success': True, 'message': 'Course added successfully', 'id': new_id})
    except ValidationError as e:
        return jsonify({'success': False, 'message': str(e)}), 400
    except Exception:
        return server_error('Create Course')

@catalog_bp.route('/api/upload', methods=['POST'])
def upload():
    try:
        result = catalog_service().save_upload(request.files.get('courseImage'))
        return jsonify(result)
    except ValidationError as e:
        return jsonify({'success': False, 'message': str(e)}), 400
    except Exception:
        return server_error('Upload')

@catalog_bp.route('/uploads/<path:filename>')
def uploaded_file(filename):
    return send_from_directory(catalog_service().upload_folder, filename)
