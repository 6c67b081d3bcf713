from datetime import datetime
from flask import Flask
from config import Config
from database import init_db
from routes.main import main_bp
from routes.catalog import catalog_bp
from services.catalog_service import CatalogService
from services.coupon_service import CouponService
from services.logger import get_logger
from services.notification_service import Notifier
from services.payment_gateway import RazorpayClient
from services.registration_service import RegistrationService
from services.registration_store import RegistrationStore

logger = get_logger('app')

def create_app(config=None, store=None, gateway=None, notifier=None, catalog=None, clock=None):
    """Build the Flask app; collaborators left as None are built from config."""
    app = Flask(__name__)
    app.config.from_object(Config)
    if config:
        app.config.update(config)

    store = store or RegistrationStore()
    gateway = gateway or RazorpayClient(app.config['RAZORPAY_KEY_ID'],
                                        app.config['RAZORPAY_KEY_SECRET'],
                                        timeout=app.config['GATEWAY_TIMEOUT'])
    notifier = notifier or Notifier(app.config['SENDGRID_API_KEY'], app.config['MAIL_FROM'],
                                    timeout=app.config['GATEWAY_TIMEOUT'])
    coupons = CouponService(store, clock=clock or datetime.now)

    app.extensions['registration_service'] = RegistrationService(
        store, gateway, notifier, coupons,
        currency=app.config['PAYMENT_CURRENCY'],
        key_secret=app.config['RAZORPAY_KEY_SECRET'])
    app.extensions['catalog_service'] = catalog or CatalogService(
        upload_folder=app.config['UPLOAD_FOLDER'])

    # Register Blueprints
    app.register_blueprint(main_bp)
    app.register_blueprint(catalog_bp)

    @app.after_request
    def after_request(response):
        response.headers.add('Access-Control-Allow-Origin', '*')
        response.headers.add('Access-Control-Allow-Headers', 'Content-Type,Authorization')
        response.headers.add('Access-Control-Allow-Methods', 'GET,PUT,POST,DELETE,OPTIONS')
        return response

    return app

if __name__ == '__main__':
    init_db()
    app = create_app()
    logger.info(f"Flask Server running at http://0.0.0.0:{Config.PORT}/")
    app.run(host='0.0.0.0', port=Config.PORT)
