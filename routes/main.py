from flask import Blueprint, request, jsonify, current_app
from services.errors import NotFound, ValidationError
from services.logger import get_logger

main_bp = Blueprint('main', __name__)
logger = get_logger('routes.main')

def registration_service():
    return current_app.extensions['registration_service']

def server_error(context, flag='success'):
    logger.exception(f"{context} Error")
    return jsonify({flag: False, 'message': 'Internal Server Error'}), 500

@main_bp.route('/api/register', methods=['POST'])
def register():
    try:
        data = request.get_json(silent=True) or {}
        result = registration_service().register(data)
        return jsonify({'success': True, **result}), 200
    except ValidationError as e:
        return jsonify({'success': False, 'message': str(e)}), 400
    except NotFound as e:
        return jsonify({'success': False, 'message': str(e)}), 404
    except Exception:
        return server_error('Registration')

@main_bp.route('/api/create-order', methods=['POST'])
def create_order():
    try:
        data = request.get_json(silent=True) or {}
        result = registration_service().create_order(data)
        return jsonify({'success': True, **result}), 200
    except ValidationError as e:
        return jsonify({'success': False, 'message': str(e)}), 400
    except NotFound as e:
        return jsonify({'success': False, 'message': str(e)}), 404
    except Exception:
        return server_error('Create Order')

@main_bp.route('/api/verify-payment', methods=['POST'])
def verify_payment():
    try:
        data = request.get_json(silent=True) or {}
        result = registration_service().verify_payment(data)
        return jsonify(result), 200
    except ValidationError as e:
        return jsonify({'success': False, 'message': str(e)}), 400
    except NotFound as e:
        return jsonify({'success': False, 'message': str(e)}), 404
    except Exception:
        return server_error('Verify Payment')

@main_bp.route('/api/validate-coupon', methods=['POST'])
def validate_coupon():
    try:
        data = request.get_json(silent=True) or {}
        result = registration_service().validate_coupon(data)
        return jsonify(result), 200
    except ValidationError as e:
        return jsonify({'valid': False, 'message': str(e)}), 400
    except Exception:
        return server_error('Validate Coupon', flag='valid')

@main_bp.route('/api/applyCoupon', methods=['POST'])
def apply_coupon():
    try:
        data = request.get_json(silent=True) or {}
        result = registration_service().apply_coupon(data)
        return jsonify(result), 200
    except ValidationError as e:
        return jsonify({'success': False, 'message': str(e)}), 400
    except NotFound as e:
        return jsonify({'success': False, 'message': str(e)}), 404
    except Exception:
        return server_error('Apply Coupon')
