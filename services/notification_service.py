from html import escape

from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Mail

from services.logger import get_logger

logger = get_logger('notification')


class Notifier:
    def __init__(self, api_key, sender, timeout=5):
        self.api_key = api_key
        self.sender = sender
        self.timeout = timeout

    def send_registration_confirmation(self, registration):
        """Best-effort welcome mail after a successful payment; never raises."""
        try:
            subject = "🎉 Welcome to Akilam Technology - Registration Confirmed!"
            message = f"""
<h3>Welcome {escape(str(registration['first_name']))},</h3>
<p>Your payment for <strong>{escape(str(registration['course']))}</strong> has been received and your registration is confirmed.</p>
<p>Order: {escape(str(registration.get('order_id') or 'N/A'))}<br>
Payment: {escape(str(registration.get('payment_id') or 'N/A'))}</p>
"""
            to_email = registration['email']
        except Exception as e:
            logger.error(f"Email Building Error: {e}")
            return False
        return self.send(subject, message, to_email)

    def send(self, subject, message, to_email):
        if not self.api_key:
            logger.warning(f"SENDGRID_API_KEY not set, skipping email to {to_email}")
            return False

        try:
            email = Mail(
                from_email=self.sender,
                to_emails=to_email,
                subject=subject,
                html_content=message
            )
            sg = SendGridAPIClient(self.api_key)
            sg.client.timeout = self.timeout
            response = sg.send(email)
            logger.info(f"Email sent to {to_email}, status code: {response.status_code}")
            return True
        except Exception as e:
            logger.error(f"Email Sending Error: {e}")
            return False
