import os

class Config:
    PORT = int(os.environ.get('PORT', 8987))
    DATABASE_URL = os.environ.get('DATABASE_URL')
    DB_HOST = os.environ.get('DB_HOST', 'localhost')
    DB_PORT = int(os.environ.get('DB_PORT', 5432))
    DB_NAME = os.environ.get('DB_NAME', 'akilamwebsite')
    DB_USER = os.environ.get('DB_USER', 'postgres')
    DB_PASSWORD = os.environ.get('DB_PASSWORD')

    SENDGRID_API_KEY = os.environ.get('SENDGRID_API_KEY')
    MAIL_FROM = os.environ.get('MAIL_FROM', 'noreply@akilamtechnology.com')

    RAZORPAY_KEY_ID = os.environ.get('RAZORPAY_KEY_ID', '')
    RAZORPAY_KEY_SECRET = os.environ.get('RAZORPAY_KEY_SECRET', '')
    PAYMENT_CURRENCY = os.environ.get('PAYMENT_CURRENCY', 'INR')
    GATEWAY_TIMEOUT = float(os.environ.get('GATEWAY_TIMEOUT', 5))

    UPLOAD_FOLDER = os.environ.get(
        'UPLOAD_FOLDER', os.path.join(os.path.dirname(os.path.abspath(__file__)), 'uploads'))
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
